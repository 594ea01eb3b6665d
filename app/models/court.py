import uuid
import enum
from decimal import Decimal
from typing import Optional
from sqlalchemy import Column, String, Boolean, DateTime, func, DECIMAL, Integer, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base

class SportType(str, enum.Enum):
    badminton = "badminton"
    tennis = "tennis"
    basketball = "basketball"
    football = "football"
    cricket = "cricket"
    squash = "squash"
    table_tennis = "table_tennis"
    volleyball = "volleyball"

class CourtType(str, enum.Enum):
    indoor = "indoor"
    outdoor = "outdoor"

class Weekday(str, enum.Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

class Court(Base):
    __tablename__ = "courts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    venue_id = Column(UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    sport = Column(SAEnum(SportType, native_enum=False), nullable=False, index=True)
    court_type = Column(SAEnum(CourtType, native_enum=False), nullable=False, default=CourtType.indoor)
    price_per_hour = Column(DECIMAL(10, 2), nullable=False)
    peak_pricing_enabled = Column(Boolean, default=False)
    peak_price_per_hour = Column(DECIMAL(10, 2), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    venue = relationship("Venue", back_populates="courts")
    schedule = relationship("CourtDaySchedule", back_populates="court", cascade="all, delete-orphan")
    peak_windows = relationship(
        "CourtPeakWindow",
        back_populates="court",
        cascade="all, delete-orphan",
        order_by="CourtPeakWindow.start_time",
    )

    def day_schedule(self, weekday: Weekday) -> Optional["CourtDaySchedule"]:
        for day in self.schedule:
            if day.weekday == weekday:
                return day
        return None

    def hourly_rate_for(self, start_time: str, end_time: str) -> Decimal:
        """Peak rate when the interval lies inside a peak window, base rate otherwise."""
        if self.peak_pricing_enabled and self.peak_price_per_hour is not None:
            for window in self.peak_windows:
                if start_time >= window.start_time and end_time <= window.end_time:
                    return Decimal(self.peak_price_per_hour)
        return Decimal(self.price_per_hour)


class CourtDaySchedule(Base):
    __tablename__ = "court_day_schedules"
    __table_args__ = (
        UniqueConstraint("court_id", "weekday", name="uq_court_day_schedule"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    court_id = Column(UUID(as_uuid=True), ForeignKey("courts.id"), nullable=False, index=True)
    weekday = Column(SAEnum(Weekday, native_enum=False), nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)

    court = relationship("Court", back_populates="schedule")
    # Only the first interval drives slot generation; the rest are stored as configured
    intervals = relationship(
        "CourtOpenInterval",
        back_populates="day",
        cascade="all, delete-orphan",
        order_by="CourtOpenInterval.position",
    )

class CourtOpenInterval(Base):
    __tablename__ = "court_open_intervals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    day_id = Column(UUID(as_uuid=True), ForeignKey("court_day_schedules.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    start_time = Column(String(5), nullable=False) # "06:00"
    end_time = Column(String(5), nullable=False)   # "22:00"

    day = relationship("CourtDaySchedule", back_populates="intervals")

class CourtPeakWindow(Base):
    __tablename__ = "court_peak_windows"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    court_id = Column(UUID(as_uuid=True), ForeignKey("courts.id"), nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    court = relationship("Court", back_populates="peak_windows")
