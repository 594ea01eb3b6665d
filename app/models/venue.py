import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, func, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.session import Base

class VenueType(str, enum.Enum):
    indoor = "indoor"
    outdoor = "outdoor"

class Venue(Base):
    __tablename__ = "venues"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    venue_type = Column(SAEnum(VenueType, native_enum=False), nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=False, index=True)
    contact_phone = Column(String(20), nullable=True)
    # Default operating window ("HH:MM"), used when a court day has no hours of its own
    open_time = Column(String(5), nullable=False, default="06:00")
    close_time = Column(String(5), nullable=False, default="22:00")
    is_approved = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    owner = relationship("User")
    courts = relationship("Court", back_populates="venue", cascade="all, delete-orphan")
