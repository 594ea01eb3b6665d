"""
Booking lifecycle: create, cancel, status transitions and listings.

Every function runs inside the caller's request-scoped ``Session`` and
commits its own write. State moves only along ``ALLOWED_TRANSITIONS``:
pending -> confirmed -> completed, and pending/confirmed -> cancelled.
Bookings are never deleted.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from app.models.booking import Booking, BookingStatus, PaymentStatus
from app.models.court import Court
from app.models.review import Review
from app.models.user import User
from app.models.venue import Venue
from app.schemas.booking import BookingCreate
from app.services.availability import find_conflicting_bookings, operating_window
from app.utils.timeslots import minutes_between, parse_booking_date, starts_after, to_minutes

logger = logging.getLogger(__name__)

_WHOLE_UNITS = Decimal("1")


# ---------------------------------------------------------------------------
# Listing filters
# ---------------------------------------------------------------------------


@dataclass
class UserBookingFilter:
    """GET /bookings: status narrows to one lifecycle state; page/limit paginate."""
    status: Optional[BookingStatus] = None
    page: int = 1
    limit: int = 10


@dataclass
class VenueBookingFilter:
    """
    GET /owner/venues/{id}/bookings.

    status    -- only bookings in this lifecycle state
    on_date   -- only bookings on this calendar day
    court_id  -- only bookings for this court
    """
    status: Optional[BookingStatus] = None
    on_date: Optional[date] = None
    court_id: Optional[UUID] = None
    page: int = 1
    limit: int = 10


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def calculate_total_amount(rate_per_hour: Decimal, duration_minutes: int) -> Decimal:
    """rate x hours, rounded half-up to whole currency units."""
    amount = Decimal(rate_per_hour) * Decimal(duration_minutes) / Decimal(60)
    return amount.quantize(_WHOLE_UNITS, rounding=ROUND_HALF_UP)


def _validate_interval(data: BookingCreate) -> None:
    start = to_minutes(data.start_time)
    end = to_minutes(data.end_time)
    if end <= start:
        raise InvalidInputError("End time must be after start time")
    if data.duration <= 0:
        raise InvalidInputError("Duration must be a positive number of minutes")
    if data.duration != minutes_between(data.start_time, data.end_time):
        raise InvalidInputError("Duration does not match the start and end times")


def _get_booking(db: Session, booking_id: UUID) -> Booking:
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.venue), joinedload(Booking.court))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def _is_venue_owner(venue: Optional[Venue], user: User) -> bool:
    return venue is not None and venue.owner_id == user.id


def _transition(booking: Booking, new_status: BookingStatus) -> None:
    if not booking.can_transition_to(new_status):
        raise InvalidStateError(
            f"Cannot change booking from '{booking.status.value}' to '{new_status.value}'"
        )
    booking.status = new_status


def _paginate(query, page: int, limit: int) -> Tuple[List[Booking], int]:
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def create_booking(db: Session, user: User, data: BookingCreate) -> Booking:
    """
    Book ``data.court_id`` for [start_time, end_time) on ``data.booking_date``.

    The court row is locked (``SELECT ... FOR UPDATE`` on PostgreSQL) before
    the availability re-check, so concurrent creates for the same court run
    one after another and partially overlapping intervals cannot both pass
    the check. The partial unique index on the ledger still rejects exact
    duplicates on backends without row locks.

    The interval must also sit inside the court's operating window for
    that day; a closed day or out-of-hours request is InvalidInputError.
    """
    _validate_interval(data)

    court = (
        db.query(Court)
        .filter(Court.id == data.court_id, Court.is_active == True)  # noqa: E712
        .with_for_update()
        .first()
    )
    if not court:
        raise NotFoundError("Court not found")

    venue = db.query(Venue).filter(Venue.id == court.venue_id, Venue.is_active == True).first()  # noqa: E712
    if not venue:
        raise NotFoundError("Venue not found")
    if data.venue_id is not None and data.venue_id != venue.id:
        raise InvalidInputError("Court does not belong to the given venue")

    window = operating_window(db, court, parse_booking_date(data.booking_date))
    if window is None:
        raise InvalidInputError("Court is closed on the requested date")
    if data.start_time < window[0] or data.end_time > window[1]:
        raise InvalidInputError(
            f"Requested time is outside operating hours ({window[0]}-{window[1]})"
        )

    conflicts = find_conflicting_bookings(
        db, court.id, data.booking_date, data.start_time, data.end_time
    )
    if conflicts:
        db.rollback()
        logger.info(
            "Rejected booking on court %s %s %s-%s: overlaps %d booking(s)",
            court.id, data.booking_date, data.start_time, data.end_time, len(conflicts),
        )
        raise ConflictError("Selected time slot is not available")

    rate = court.hourly_rate_for(data.start_time, data.end_time)
    booking = Booking(
        user_id=user.id,
        venue_id=venue.id,
        court_id=court.id,
        booking_date=data.booking_date,
        start_time=data.start_time,
        end_time=data.end_time,
        duration=data.duration,
        total_amount=calculate_total_amount(rate, data.duration),
        status=BookingStatus.pending,
        payment_status=PaymentStatus.pending,
    )
    db.add(booking)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent writer committed the same interval first
        db.rollback()
        logger.warning(
            "Lost booking race on court %s %s %s-%s",
            court.id, data.booking_date, data.start_time, data.end_time,
        )
        raise ConflictError("Selected time slot is no longer available")

    db.refresh(booking)
    logger.info("Created booking %s for user %s", booking.id, user.id)
    return booking


# ---------------------------------------------------------------------------
# Cancel / status changes
# ---------------------------------------------------------------------------


def cancel_booking(
    db: Session,
    booking_id: UUID,
    actor: User,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Booking:
    """
    Cancel a booking on behalf of its owner or an admin.

    Only bookings that start strictly after ``now`` (server local time) can
    be cancelled. The row is kept with the reason, actor and timestamp.
    """
    booking = _get_booking(db, booking_id)
    if booking.user_id != actor.id and not actor.is_admin:
        raise ForbiddenError("Not authorized to cancel this booking")
    return _apply_cancellation(db, booking, actor, reason, now)


def _apply_cancellation(
    db: Session,
    booking: Booking,
    actor: User,
    reason: Optional[str],
    now: Optional[datetime],
) -> Booking:
    if booking.status == BookingStatus.cancelled:
        raise InvalidStateError("Booking is already cancelled")

    now = now or datetime.now()
    if not starts_after(booking.booking_date, booking.start_time, now):
        raise InvalidStateError("Cannot cancel past bookings")

    _transition(booking, BookingStatus.cancelled)
    booking.cancellation_reason = reason
    booking.cancelled_by = actor.id
    booking.cancelled_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(booking)
    logger.info("Cancelled booking %s by %s", booking.id, actor.id)
    return booking


def update_booking_status(
    db: Session, booking_id: UUID, actor: User, new_status: BookingStatus
) -> Booking:
    """Owner/admin override, e.g. confirming a pay-at-venue booking or completing it."""
    booking = _get_booking(db, booking_id)
    if not actor.is_admin and not _is_venue_owner(booking.venue, actor):
        raise ForbiddenError("Not authorized to update this booking")

    if new_status == BookingStatus.cancelled:
        return _apply_cancellation(db, booking, actor, reason=None, now=None)

    _transition(booking, new_status)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s moved to %s by %s", booking.id, new_status.value, actor.id)
    return booking


def record_payment_result(
    db: Session,
    booking_id: UUID,
    succeeded: bool,
    payment_reference: Optional[str] = None,
) -> Booking:
    """
    Apply the payment collaborator's verdict.

    Success confirms a pending booking and marks it paid; failure marks the
    payment failed and leaves the booking pending. Signatures are verified
    upstream.
    """
    booking = _get_booking(db, booking_id)
    if booking.status in (BookingStatus.cancelled, BookingStatus.completed):
        raise InvalidStateError(
            f"Cannot record a payment for a {booking.status.value} booking"
        )

    if payment_reference:
        booking.payment_reference = payment_reference

    if succeeded:
        if booking.status == BookingStatus.pending:
            _transition(booking, BookingStatus.confirmed)
        booking.payment_status = PaymentStatus.paid
    else:
        booking.payment_status = PaymentStatus.failed

    db.commit()
    db.refresh(booking)
    logger.info(
        "Payment %s for booking %s", "succeeded" if succeeded else "failed", booking.id
    )
    return booking


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_booking(db: Session, booking_id: UUID, actor: User) -> Booking:
    booking = _get_booking(db, booking_id)
    if (
        booking.user_id != actor.id
        and not actor.is_admin
        and not _is_venue_owner(booking.venue, actor)
    ):
        raise ForbiddenError("Not authorized to view this booking")
    return booking


def list_user_bookings(
    db: Session, user_id: UUID, filters: UserBookingFilter
) -> Tuple[List[Booking], int]:
    query = (
        db.query(Booking)
        .options(joinedload(Booking.venue), joinedload(Booking.court))
        .filter(Booking.user_id == user_id)
    )
    if filters.status:
        query = query.filter(Booking.status == filters.status)
    return _paginate(query.order_by(Booking.created_at.desc()), filters.page, filters.limit)


def list_upcoming_bookings(db: Session, user_id: UUID, today: Optional[date] = None) -> List[Booking]:
    today = today or date.today()
    return (
        db.query(Booking)
        .options(joinedload(Booking.venue), joinedload(Booking.court))
        .filter(
            Booking.user_id == user_id,
            Booking.booking_date >= today,
            Booking.status.notin_([BookingStatus.cancelled, BookingStatus.completed]),
        )
        .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
        .all()
    )


def list_past_bookings(
    db: Session,
    user_id: UUID,
    page: int = 1,
    limit: int = 10,
    today: Optional[date] = None,
) -> Tuple[List[Booking], int]:
    today = today or date.today()
    query = (
        db.query(Booking)
        .options(joinedload(Booking.venue), joinedload(Booking.court))
        .filter(Booking.user_id == user_id, Booking.booking_date < today)
        .order_by(Booking.booking_date.desc(), Booking.start_time.desc())
    )
    return _paginate(query, page, limit)


def list_venue_bookings(
    db: Session, venue_id: UUID, actor: User, filters: VenueBookingFilter
) -> Tuple[List[Booking], int]:
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    if not actor.is_admin and not _is_venue_owner(venue, actor):
        raise ForbiddenError("Not authorized to view venue bookings")

    query = (
        db.query(Booking)
        .options(joinedload(Booking.user), joinedload(Booking.court))
        .filter(Booking.venue_id == venue_id)
    )
    if filters.status:
        query = query.filter(Booking.status == filters.status)
    if filters.on_date:
        query = query.filter(Booking.booking_date == filters.on_date)
    if filters.court_id:
        query = query.filter(Booking.court_id == filters.court_id)

    query = query.order_by(Booking.booking_date.desc(), Booking.start_time.asc())
    return _paginate(query, filters.page, filters.limit)


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


def add_review(
    db: Session, booking_id: UUID, user: User, rating: int, comment: Optional[str] = None
) -> Review:
    booking = _get_booking(db, booking_id)
    if booking.user_id != user.id:
        raise ForbiddenError("Not authorized to review this booking")
    if booking.status != BookingStatus.completed:
        raise InvalidStateError("Can only review completed bookings")
    if booking.review is not None:
        raise ConflictError("Booking already reviewed")
    if not 1 <= rating <= 5:
        raise InvalidInputError("Rating must be between 1 and 5")

    review = Review(
        booking_id=booking.id,
        user_id=user.id,
        court_id=booking.court_id,
        rating=rating,
        comment=comment or "",
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review
