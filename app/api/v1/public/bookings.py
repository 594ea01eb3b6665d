from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_current_user
from app.models.booking import BookingStatus
from app.models.user import User
from app.schemas.booking import (
    BookingCreate,
    Booking as BookingSchema,
    BookingCancel,
    Review as ReviewSchema,
    ReviewCreate,
)
from app.schemas.common import ErrorResponse, PaginatedResponse
from app.services import booking_service
from app.services.booking_service import UserBookingFilter

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _page(items, total: int, page: int, limit: int) -> PaginatedResponse[BookingSchema]:
    return PaginatedResponse(
        data=[BookingSchema.model_validate(b) for b in items],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


# ---------------------------------------------------------------------------
# POST /bookings: reserve a court interval
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=BookingSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def create_booking(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Book a court for `start_time`-`end_time` on `booking_date`.

    The interval is re-checked against existing bookings right before the
    write; an overlap answers 409. The booking starts `pending` and is
    confirmed once payment succeeds.
    """
    booking = booking_service.create_booking(db, current_user, data)
    return booking_service.get_booking(db, booking.id, current_user)


# ---------------------------------------------------------------------------
# GET /bookings: current user's bookings
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_my_bookings(
    status: Optional[BookingStatus] = Query(
        None, description="Filter by status: pending, confirmed, cancelled, completed"
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the authenticated user's bookings, newest first."""
    filters = UserBookingFilter(status=status, page=page, limit=limit)
    bookings, total = booking_service.list_user_bookings(db, current_user.id, filters)
    return _page(bookings, total, page, limit)


@router.get("/upcoming", response_model=List[BookingSchema])
def list_upcoming(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Active bookings from today on, soonest first."""
    return booking_service.list_upcoming_bookings(db, current_user.id)


@router.get("/past", response_model=PaginatedResponse[BookingSchema])
def list_past(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bookings, total = booking_service.list_past_bookings(db, current_user.id, page, limit)
    return _page(bookings, total, page, limit)


# ---------------------------------------------------------------------------
# GET /bookings/{id}: single booking detail
# ---------------------------------------------------------------------------


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Visible to the booking's user, the venue owner and admins."""
    return booking_service.get_booking(db, booking_id, current_user)


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/cancel
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: UUID,
    body: BookingCancel = BookingCancel(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Cancel a future booking.
    - Allowed for the booking's user or an admin.
    - The booking is kept for history and its interval becomes bookable again.
    """
    return booking_service.cancel_booking(db, booking_id, current_user, body.reason)


# ---------------------------------------------------------------------------
# POST /bookings/{id}/review
# ---------------------------------------------------------------------------


@router.post("/{booking_id}/review", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def review_booking(
    booking_id: UUID,
    data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Rate a completed booking (1-5). One review per booking."""
    return booking_service.add_review(db, booking_id, current_user, data.rating, data.comment)
