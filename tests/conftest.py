"""
Shared test fixtures.

Tests run against a single in-memory SQLite database (``sqlite://`` with a
static pool), so the app's own engine, ``get_db`` dependency and the
sessions opened here all see the same data. Tables are recreated for every
test.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Callable, Dict, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.court import (  # noqa: E402
    Court,
    CourtDaySchedule,
    CourtOpenInterval,
    CourtPeakWindow,
    SportType,
    Weekday,
)
from app.models.user import User, UserRole  # noqa: E402
from app.models.venue import Venue, VenueType  # noqa: E402


# ── Helpers ────────────────────────────────────────────────────────────────


def next_weekday(weekday: int, after: Optional[date] = None) -> date:
    """First date strictly after ``after`` (default today) on ``weekday`` (Mon=0)."""
    start = (after or date.today()) + timedelta(days=1)
    return start + timedelta(days=(weekday - start.weekday()) % 7)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(subject=str(user.id), role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


ALL_DAY = {weekday: (True, [("06:00", "22:00")]) for weekday in Weekday}


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.user, email: Optional[str] = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            password_hash=get_password_hash("password123"),
            full_name=f"{role.value.title()} {counter['n']}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture()
def user(make_user) -> User:
    return make_user()


@pytest.fixture()
def owner(make_user) -> User:
    return make_user(UserRole.owner)


@pytest.fixture()
def admin(make_user) -> User:
    return make_user(UserRole.admin)


@pytest.fixture()
def make_venue(db, owner) -> Callable[..., Venue]:
    def _make(open_time: str = "06:00", close_time: str = "22:00", venue_owner: Optional[User] = None) -> Venue:
        venue = Venue(
            owner_id=(venue_owner or owner).id,
            name="Smash Arena",
            venue_type=VenueType.indoor,
            city="Pune",
            open_time=open_time,
            close_time=close_time,
            is_approved=True,
        )
        db.add(venue)
        db.commit()
        db.refresh(venue)
        return venue

    return _make


@pytest.fixture()
def make_court(db, make_venue) -> Callable[..., Court]:
    """
    Build a court. ``schedule`` maps Weekday -> (is_open, [(start, end), ...]);
    weekdays left out get no schedule row at all.
    """

    def _make(
        schedule=None,
        venue: Optional[Venue] = None,
        price: str = "500",
        peak_price: Optional[str] = None,
        peak_hours=(),
    ) -> Court:
        venue = venue or make_venue()
        court = Court(
            venue_id=venue.id,
            name="Court 1",
            sport=SportType.badminton,
            price_per_hour=Decimal(price),
            peak_pricing_enabled=peak_price is not None,
            peak_price_per_hour=Decimal(peak_price) if peak_price else None,
        )
        for weekday, (is_open, hours) in (ALL_DAY if schedule is None else schedule).items():
            court.schedule.append(
                CourtDaySchedule(
                    weekday=weekday,
                    is_open=is_open,
                    intervals=[
                        CourtOpenInterval(position=i, start_time=s, end_time=e)
                        for i, (s, e) in enumerate(hours)
                    ],
                )
            )
        for start, end in peak_hours:
            court.peak_windows.append(CourtPeakWindow(start_time=start, end_time=end))
        db.add(court)
        db.commit()
        db.refresh(court)
        return court

    return _make


@pytest.fixture()
def court(make_court) -> Court:
    return make_court()


@pytest.fixture()
def client() -> TestClient:
    """TestClient with the full lifespan (table creation, token blacklist)."""
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
    app.dependency_overrides.clear()
