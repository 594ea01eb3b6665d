import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, Text, Date, Index, CheckConstraint, text, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base

class BookingStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"

class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"
    refunded = "refunded"

# cancelled and completed are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.pending: {BookingStatus.confirmed, BookingStatus.cancelled},
    BookingStatus.confirmed: {BookingStatus.completed, BookingStatus.cancelled},
    BookingStatus.cancelled: set(),
    BookingStatus.completed: set(),
}

_ACTIVE_ONLY = text("status != 'cancelled'")

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # Backstop against double booking: exact (court, date, start, end)
        # duplicates among non-cancelled rows. Partial overlaps are guarded
        # by the court row lock taken in booking_service.create_booking.
        Index(
            "uq_bookings_active_slot",
            "court_id",
            "booking_date",
            "start_time",
            "end_time",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        Index("ix_bookings_court_date", "court_id", "booking_date"),
        Index("ix_bookings_venue_date", "venue_id", "booking_date"),
        CheckConstraint("end_time > start_time", name="ck_bookings_end_after_start"),
        CheckConstraint("duration > 0", name="ck_bookings_positive_duration"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    venue_id = Column(UUID(as_uuid=True), ForeignKey("venues.id"), nullable=False)
    court_id = Column(UUID(as_uuid=True), ForeignKey("courts.id"), nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False) # "HH:MM", zero padded
    end_time = Column(String(5), nullable=False)
    duration = Column(Integer, nullable=False) # minutes
    total_amount = Column(DECIMAL(10, 2), nullable=False)
    status = Column(SAEnum(BookingStatus, native_enum=False), nullable=False, default=BookingStatus.pending, index=True)
    payment_status = Column(SAEnum(PaymentStatus, native_enum=False), nullable=False, default=PaymentStatus.pending)
    payment_reference = Column(String(100), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    venue = relationship("Venue")
    court = relationship("Court")
    review = relationship("Review", back_populates="booking", uselist=False)

    def can_transition_to(self, new_status: BookingStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[BookingStatus(self.status)]
