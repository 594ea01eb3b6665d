"""HTTP surface: auth, slot listing, booking lifecycle and the error body shape."""

import uuid
from decimal import Decimal

from app.models.user import UserRole
from tests.conftest import auth_headers, next_weekday

API = "/api/v1"
MONDAY = next_weekday(0)
SUNDAY = next_weekday(6)


def _book(client, user, court, start="14:00", end="16:00", duration=120, day=MONDAY):
    return client.post(
        f"{API}/bookings/",
        json={
            "court_id": str(court.id),
            "booking_date": day.isoformat(),
            "start_time": start,
            "end_time": end,
            "duration": duration,
        },
        headers=auth_headers(user),
    )


def test_root(client):
    assert client.get("/").json() == {"Hello": "Courtside"}


class TestAuth:
    def test_register_and_login(self, client):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "player@example.com", "password": "secret123", "full_name": "Player One"},
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "user"

        login = client.post(
            f"{API}/auth/login",
            data={"username": "player@example.com", "password": "secret123"},
        )
        assert login.status_code == 200
        assert login.json()["token_type"] == "bearer"

    def test_duplicate_email(self, client, user):
        response = client.post(
            f"{API}/auth/register",
            json={"email": user.email, "password": "x", "full_name": "Dup"},
        )
        assert response.status_code == 400

    def test_wrong_password(self, client, user):
        response = client.post(f"{API}/auth/login", data={"username": user.email, "password": "nope"})
        assert response.status_code == 401

    def test_admin_register_needs_secret(self, client):
        response = client.post(
            f"{API}/auth/admin/register",
            json={"email": "a@example.com", "password": "x", "full_name": "A", "admin_secret": "guess"},
        )
        assert response.status_code == 403

    def test_logout_revokes_token(self, client, user):
        headers = auth_headers(user)
        assert client.get(f"{API}/bookings/", headers=headers).status_code == 200

        assert client.post(f"{API}/auth/logout", headers=headers).status_code == 200

        assert client.get(f"{API}/bookings/", headers=headers).status_code == 401

    def test_missing_token(self, client):
        assert client.get(f"{API}/bookings/").status_code == 401


class TestSlots:
    def test_lists_slots_for_day(self, client, court, user):
        assert _book(client, user, court).status_code == 201

        response = client.get(f"{API}/courts/{court.id}/slots", params={"date": MONDAY.isoformat()})

        assert response.status_code == 200
        body = response.json()
        assert body["duration"] == 60
        assert len(body["slots"]) == 16
        taken = [s["start_time"] for s in body["slots"] if not s["available"]]
        assert taken == ["14:00", "15:00"]

    def test_custom_duration(self, client, court):
        response = client.get(
            f"{API}/courts/{court.id}/slots", params={"date": MONDAY.isoformat(), "duration": 120}
        )

        assert [s["end_time"] for s in response.json()["slots"]][:2] == ["08:00", "10:00"]

    def test_unknown_court(self, client):
        response = client.get(f"{API}/courts/{uuid.uuid4()}/slots", params={"date": MONDAY.isoformat()})

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_inactive_venue(self, client, court, db):
        court.venue.is_active = False
        db.commit()

        response = client.get(f"{API}/courts/{court.id}/slots", params={"date": MONDAY.isoformat()})

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "message": "Venue not found"}

    def test_non_positive_duration(self, client, court):
        response = client.get(
            f"{API}/courts/{court.id}/slots", params={"date": MONDAY.isoformat(), "duration": 0}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestBookings:
    def test_create_then_conflict(self, client, court, user, make_user):
        created = _book(client, user, court)
        assert created.status_code == 201
        body = created.json()
        assert body["status"] == "pending"
        assert body["court"]["id"] == str(court.id)
        assert Decimal(body["total_amount"]) == Decimal("1000")

        clash = _book(client, make_user(), court, "15:00", "16:00", 60)

        assert clash.status_code == 409
        assert clash.json()["error"] == "conflict"

    def test_out_of_hours_request(self, client, court, user):
        response = _book(client, user, court, "22:00", "23:00", 60)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_invalid_interval(self, client, court, user):
        response = _book(client, user, court, "16:00", "14:00", 120)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_cancel_and_rebook(self, client, court, user, make_user):
        booking_id = _book(client, user, court).json()["id"]

        cancelled = client.patch(
            f"{API}/bookings/{booking_id}/cancel", json={"reason": "Rain"}, headers=auth_headers(user)
        )
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert cancelled.json()["cancellation_reason"] == "Rain"

        again = client.patch(f"{API}/bookings/{booking_id}/cancel", headers=auth_headers(user))
        assert again.status_code == 409
        assert again.json()["error"] == "invalid_state"

        assert _book(client, make_user(), court).status_code == 201

    def test_cancel_someone_elses_booking(self, client, court, user, make_user):
        booking_id = _book(client, user, court).json()["id"]

        response = client.patch(f"{API}/bookings/{booking_id}/cancel", headers=auth_headers(make_user()))

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_my_bookings(self, client, court, user):
        _book(client, user, court, "08:00", "09:00", 60)
        _book(client, user, court, "09:00", "10:00", 60)

        page = client.get(f"{API}/bookings/", headers=auth_headers(user)).json()
        upcoming = client.get(f"{API}/bookings/upcoming", headers=auth_headers(user)).json()

        assert page["total"] == 2 and page["total_pages"] == 1
        assert [b["start_time"] for b in upcoming] == ["08:00", "09:00"]

    def test_payment_result_requires_admin(self, client, court, user, admin):
        booking_id = _book(client, user, court).json()["id"]
        url = f"{API}/payments/bookings/{booking_id}/result"

        assert client.post(url, json={"succeeded": True}, headers=auth_headers(user)).status_code == 403

        paid = client.post(url, json={"succeeded": True, "payment_reference": "pay_1"}, headers=auth_headers(admin))
        assert paid.status_code == 200
        assert paid.json()["status"] == "confirmed"
        assert paid.json()["payment_status"] == "paid"


class TestOwner:
    def test_owner_sets_up_venue_and_court(self, client, owner):
        headers = auth_headers(owner)
        venue = client.post(
            f"{API}/owner/venues/",
            json={"name": "Baseline Club", "venue_type": "outdoor", "city": "Pune"},
            headers=headers,
        )
        assert venue.status_code == 201
        venue_id = venue.json()["id"]

        court = client.post(
            f"{API}/owner/venues/{venue_id}/courts",
            json={
                "name": "Court A",
                "sport": "tennis",
                "price_per_hour": "400",
                "availability": {
                    "monday": {"is_open": True, "hours": [{"start": "07:00", "end": "10:00"}]},
                    "sunday": {"is_open": False},
                },
            },
            headers=headers,
        )
        assert court.status_code == 201
        court_id = court.json()["id"]
        assert len(court.json()["availability"]) == 7

        monday = client.get(f"{API}/courts/{court_id}/slots", params={"date": MONDAY.isoformat()}).json()
        sunday = client.get(f"{API}/courts/{court_id}/slots", params={"date": SUNDAY.isoformat()}).json()
        tuesday = client.get(
            f"{API}/courts/{court_id}/slots", params={"date": next_weekday(1).isoformat()}
        ).json()

        assert [s["start_time"] for s in monday["slots"]] == ["07:00", "08:00", "09:00"]
        assert sunday["slots"] == []
        assert len(tuesday["slots"]) == 16

    def test_plain_user_cannot_create_venue(self, client, user):
        response = client.post(
            f"{API}/owner/venues/",
            json={"name": "X", "venue_type": "indoor", "city": "Pune"},
            headers=auth_headers(user),
        )
        assert response.status_code == 403

    def test_court_on_foreign_venue(self, client, court, make_user):
        other_owner = make_user(UserRole.owner)

        response = client.post(
            f"{API}/owner/venues/{court.venue_id}/courts",
            json={"name": "Sneaky", "sport": "tennis", "price_per_hour": "1"},
            headers=auth_headers(other_owner),
        )
        assert response.status_code == 403

    def test_venue_bookings_and_status(self, client, court, user, owner):
        booking_id = _book(client, user, court).json()["id"]

        listing = client.get(
            f"{API}/owner/venues/{court.venue_id}/bookings",
            params={"date": MONDAY.isoformat()},
            headers=auth_headers(owner),
        ).json()
        assert listing["total"] == 1
        assert listing["data"][0]["user"]["email"] == user.email

        confirmed = client.patch(
            f"{API}/owner/bookings/{booking_id}/status",
            json={"status": "confirmed"},
            headers=auth_headers(owner),
        )
        assert confirmed.json()["status"] == "confirmed"

        skipped = client.patch(
            f"{API}/owner/bookings/{booking_id}/status",
            json={"status": "pending"},
            headers=auth_headers(owner),
        )
        assert skipped.status_code == 409
