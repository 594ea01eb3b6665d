from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, UUID4, field_validator
from decimal import Decimal
from datetime import date, datetime

from app.models.booking import BookingStatus, PaymentStatus


# Booking: Create (POST /bookings)
class BookingCreate(BaseModel):
    court_id: UUID4
    venue_id: Optional[UUID4] = None
    booking_date: date
    start_time: str
    end_time: str
    duration: int

    @field_validator("venue_id", mode="before")
    @classmethod
    def parse_empty_str_to_none(cls, v):
        if v == "":
            return None
        return v


# Booking: Cancel (PATCH /bookings/{id}/cancel)
class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


# Booking: Owner/admin status override (PATCH /owner/bookings/{id}/status)
class BookingStatusUpdate(BaseModel):
    status: BookingStatus


# Payment collaborator callback (POST /payments/bookings/{id}/result)
class PaymentResult(BaseModel):
    succeeded: bool
    payment_reference: Optional[str] = Field(None, max_length=100)


# Booking: Full response
class Booking(BaseModel):
    id: UUID4
    user_id: UUID4
    venue_id: UUID4
    court_id: UUID4
    booking_date: date
    start_time: str
    end_time: str
    duration: int
    total_amount: Decimal
    status: BookingStatus
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[UUID4] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    venue: Optional[VenueSummary] = None
    court: Optional[CourtSummary] = None

    class Config:
        from_attributes = True


# Booking: Venue owner view (GET /owner/venues/{id}/bookings, includes user info)
class VenueBooking(Booking):
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


# Review: Create (POST /bookings/{id}/review)
class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class Review(BaseModel):
    id: UUID4
    booking_id: UUID4
    user_id: UUID4
    court_id: UUID4
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Import at the bottom to avoid circular imports
from app.schemas.user import UserSummary  # noqa: E402
from app.schemas.venue import CourtSummary, VenueSummary  # noqa: E402

Booking.model_rebuild()
VenueBooking.model_rebuild()
