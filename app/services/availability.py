"""
Availability calculator and slot conflict checker.

``compute_slots`` lists the fixed-duration candidate slots for a court on a
date and marks each one against the booking ledger. ``is_slot_available``
answers the same question for a single interval, and
``find_conflicting_bookings`` returns the rows in the way; the booking
lifecycle re-runs the latter right before writing.

Two intervals [a, b) and [c, d) overlap iff a < d and c < b, so a booking
that ends exactly when another starts does not conflict.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.booking import Booking, BookingStatus
from app.models.court import Court, CourtDaySchedule
from app.models.venue import Venue
from app.utils.timeslots import (
    from_minutes,
    intervals_overlap,
    is_valid_hhmm,
    parse_booking_date,
    to_minutes,
    weekday_of,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    start_time: str
    end_time: str
    available: bool
    price: Decimal
    duration: int


# ---------------------------------------------------------------------------
# Conflict checker
# ---------------------------------------------------------------------------


def _active_bookings_query(db: Session, court_id: UUID, booking_date: date):
    return db.query(Booking).filter(
        Booking.court_id == court_id,
        Booking.booking_date == booking_date,
        Booking.status != BookingStatus.cancelled,
    )


def find_conflicting_bookings(
    db: Session,
    court_id: UUID,
    booking_date: Union[date, str],
    start_time: str,
    end_time: str,
) -> List[Booking]:
    """Non-cancelled bookings on the court/date overlapping [start_time, end_time)."""
    day = parse_booking_date(booking_date)
    return (
        _active_bookings_query(db, court_id, day)
        .filter(Booking.start_time < end_time, Booking.end_time > start_time)
        .order_by(Booking.start_time)
        .all()
    )


def is_slot_available(
    db: Session,
    court_id: UUID,
    booking_date: Union[date, str],
    start_time: str,
    end_time: str,
) -> bool:
    day = parse_booking_date(booking_date)
    conflict = (
        _active_bookings_query(db, court_id, day)
        .filter(Booking.start_time < end_time, Booking.end_time > start_time)
        .first()
    )
    return conflict is None


# ---------------------------------------------------------------------------
# Availability calculator
# ---------------------------------------------------------------------------


def _load_court(db: Session, court_id: UUID) -> Court:
    court = (
        db.query(Court)
        .options(joinedload(Court.schedule).joinedload(CourtDaySchedule.intervals))
        .filter(Court.id == court_id, Court.is_active == True)  # noqa: E712
        .first()
    )
    if not court:
        raise NotFoundError("Court not found")
    # Same rule as booking creation: no slots are offered for an inactive venue
    if court.venue is None or not court.venue.is_active:
        raise NotFoundError("Venue not found")
    return court


def operating_window(db: Session, court: Court, day: date) -> Optional[Tuple[str, str]]:
    """
    The (open, close) window for the court on ``day``, or None when closed.

    A day entry with hours uses its first interval only, even when several
    are configured. A day entry without hours falls back to the venue's
    default open/close time.
    """
    day_schedule = court.day_schedule(weekday_of(day))
    if day_schedule is None or not day_schedule.is_open:
        return None

    if day_schedule.intervals:
        first = day_schedule.intervals[0]
        return first.start_time, first.end_time

    venue = db.query(Venue).filter(Venue.id == court.venue_id).first()
    if not venue:
        raise NotFoundError("Venue not found")
    return venue.open_time, venue.close_time


def candidate_intervals(open_time: str, close_time: str, slot_duration: int) -> List[Tuple[str, str]]:
    """Back-to-back intervals of exactly ``slot_duration`` minutes; no partial trailing slot."""
    if not (is_valid_hhmm(open_time) and is_valid_hhmm(close_time)):
        logger.warning("Ignoring malformed operating window %r-%r", open_time, close_time)
        return []

    current = to_minutes(open_time)
    close = to_minutes(close_time)
    intervals = []
    while current + slot_duration <= close:
        intervals.append((from_minutes(current), from_minutes(current + slot_duration)))
        current += slot_duration
    return intervals


def compute_slots(
    db: Session,
    court_id: UUID,
    booking_date: Union[date, str],
    slot_duration: Optional[int] = None,
) -> List[Slot]:
    """
    Ordered candidate slots for a court on a date, each marked available or not.

    Raises NotFoundError for an unknown court (or its venue, when the venue
    hours are needed) and InvalidInputError for a bad date or duration. A
    closed day or an empty/inverted window gives an empty list.
    """
    if slot_duration is None:
        slot_duration = settings.DEFAULT_SLOT_DURATION_MINUTES
    if isinstance(slot_duration, bool) or not isinstance(slot_duration, int) or slot_duration <= 0:
        raise InvalidInputError("Slot duration must be a positive number of minutes")

    day = parse_booking_date(booking_date)
    court = _load_court(db, court_id)

    window = operating_window(db, court, day)
    if window is None:
        logger.debug("Court %s is closed on %s", court_id, day)
        return []

    intervals = candidate_intervals(window[0], window[1], slot_duration)
    if not intervals:
        return []

    # One ledger read for the whole day; each candidate is checked in memory
    booked = [
        (b.start_time, b.end_time)
        for b in _active_bookings_query(db, court.id, day).all()
    ]

    price = Decimal(court.price_per_hour)
    return [
        Slot(
            start_time=start,
            end_time=end,
            available=not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in booked),
            price=price,
            duration=slot_duration,
        )
        for start, end in intervals
    ]
