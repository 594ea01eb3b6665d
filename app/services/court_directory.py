"""
Venue/court directory: the read side the booking engine consumes, plus the
owner-side writes that put venues and courts into it.
"""
import logging
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.court import Court, CourtDaySchedule, CourtOpenInterval, CourtPeakWindow, Weekday
from app.models.user import User
from app.models.venue import Venue
from app.schemas.venue import (
    Court as CourtSchema,
    CourtCreate,
    DaySchedule,
    PeakPricing,
    TimeRange,
    VenueCreate,
)

logger = logging.getLogger(__name__)


def get_venue_for_owner(db: Session, venue_id: UUID, actor: User) -> Venue:
    venue = db.query(Venue).filter(Venue.id == venue_id, Venue.is_active == True).first()  # noqa: E712
    if not venue:
        raise NotFoundError("Venue not found")
    if not actor.is_admin and venue.owner_id != actor.id:
        raise ForbiddenError("Not authorized to manage this venue")
    return venue


def create_venue(db: Session, owner: User, data: VenueCreate) -> Venue:
    venue = Venue(owner_id=owner.id, **data.model_dump())
    db.add(venue)
    db.commit()
    db.refresh(venue)
    logger.info("Venue %s created by %s", venue.id, owner.id)
    return venue


def create_court(db: Session, venue: Venue, data: CourtCreate) -> Court:
    """
    Add a court with its weekly schedule. Every weekday gets a row; days not
    given in ``data.availability`` are open on the venue's default hours.
    """
    court = Court(
        venue_id=venue.id,
        name=data.name,
        sport=data.sport,
        court_type=data.court_type,
        price_per_hour=data.price_per_hour,
        peak_pricing_enabled=data.peak_pricing.enabled,
        peak_price_per_hour=data.peak_pricing.price_per_hour,
    )
    for weekday in Weekday:
        day = data.availability.get(weekday, DaySchedule())
        court.schedule.append(
            CourtDaySchedule(
                weekday=weekday,
                is_open=day.is_open,
                intervals=[
                    CourtOpenInterval(position=i, start_time=r.start, end_time=r.end)
                    for i, r in enumerate(day.hours)
                ],
            )
        )
    for window in data.peak_pricing.hours:
        court.peak_windows.append(CourtPeakWindow(start_time=window.start, end_time=window.end))

    db.add(court)
    db.commit()
    db.refresh(court)
    logger.info("Court %s added to venue %s", court.id, venue.id)
    return court


def get_court(db: Session, court_id: UUID) -> Court:
    court = (
        db.query(Court)
        .options(
            joinedload(Court.schedule).joinedload(CourtDaySchedule.intervals),
            joinedload(Court.peak_windows),
        )
        .filter(Court.id == court_id, Court.is_active == True)  # noqa: E712
        .first()
    )
    if not court:
        raise NotFoundError("Court not found")
    return court


def serialize_court(court: Court) -> CourtSchema:
    return CourtSchema(
        id=court.id,
        venue_id=court.venue_id,
        name=court.name,
        sport=court.sport,
        court_type=court.court_type,
        price_per_hour=court.price_per_hour,
        is_active=court.is_active,
        peak_pricing=PeakPricing(
            enabled=bool(court.peak_pricing_enabled),
            price_per_hour=court.peak_price_per_hour,
            hours=[TimeRange(start=w.start_time, end=w.end_time) for w in court.peak_windows],
        ),
        availability={
            day.weekday: DaySchedule(
                is_open=day.is_open,
                hours=[TimeRange(start=i.start_time, end=i.end_time) for i in day.intervals],
            )
            for day in court.schedule
        },
    )
