from uuid import UUID
from typing import Optional
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_owner_user
from app.models.booking import BookingStatus
from app.models.user import User
from app.schemas.booking import Booking as BookingSchema, BookingStatusUpdate, VenueBooking
from app.schemas.common import PaginatedResponse
from app.schemas.venue import (
    Court as CourtSchema,
    CourtCreate,
    Venue as VenueSchema,
    VenueCreate,
)
from app.services import booking_service, court_directory
from app.services.booking_service import VenueBookingFilter

router = APIRouter(prefix="/owner/venues", tags=["Owner - Venues"])
booking_router = APIRouter(prefix="/owner/bookings", tags=["Owner - Bookings"])


# ---------------------------------------------------------------------------
# Venues & courts
# ---------------------------------------------------------------------------


@router.post("/", response_model=VenueSchema, status_code=status.HTTP_201_CREATED)
def create_venue(
    data: VenueCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_owner_user),
):
    return court_directory.create_venue(db, current_user, data)


@router.post(
    "/{venue_id}/courts", response_model=CourtSchema, status_code=status.HTTP_201_CREATED
)
def create_court(
    venue_id: UUID,
    data: CourtCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_owner_user),
):
    venue = court_directory.get_venue_for_owner(db, venue_id, current_user)
    court = court_directory.create_court(db, venue, data)
    return court_directory.serialize_court(court_directory.get_court(db, court.id))


# ---------------------------------------------------------------------------
# Venue bookings
# ---------------------------------------------------------------------------


@router.get("/{venue_id}/bookings", response_model=PaginatedResponse[VenueBooking])
def list_venue_bookings(
    venue_id: UUID,
    status: Optional[BookingStatus] = Query(None),
    booking_date: Optional[date] = Query(None, alias="date"),
    court_id: Optional[UUID] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_owner_user),
):
    """Bookings for one of the owner's venues, latest date first."""
    filters = VenueBookingFilter(
        status=status, on_date=booking_date, court_id=court_id, page=page, limit=limit
    )
    bookings, total = booking_service.list_venue_bookings(db, venue_id, current_user, filters)
    return PaginatedResponse(
        data=[VenueBooking.model_validate(b) for b in bookings],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@booking_router.patch("/{booking_id}/status", response_model=BookingSchema)
def update_booking_status(
    booking_id: UUID,
    data: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_owner_user),
):
    """Move a booking along its lifecycle (confirm, complete, cancel)."""
    return booking_service.update_booking_status(db, booking_id, current_user, data.status)
