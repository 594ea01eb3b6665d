from datetime import date, datetime

import pytest

from app.core.exceptions import InvalidInputError
from app.models.court import Weekday
from app.utils.timeslots import (
    from_minutes,
    intervals_overlap,
    minutes_between,
    parse_booking_date,
    starts_after,
    to_minutes,
    weekday_of,
)


class TestTimeArithmetic:
    def test_to_and_from_minutes(self):
        assert to_minutes("06:30") == 390
        assert from_minutes(390) == "06:30"
        assert from_minutes(0) == "00:00"

    @pytest.mark.parametrize("value", ["6:30", "24:00", "12:60", "noon", ""])
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidInputError):
            to_minutes(value)

    def test_minutes_between(self):
        assert minutes_between("14:00", "16:00") == 120

    def test_from_minutes_outside_day(self):
        with pytest.raises(ValueError):
            from_minutes(24 * 60)


class TestOverlap:
    def test_touching_intervals_do_not_overlap(self):
        assert not intervals_overlap("14:00", "16:00", "16:00", "17:00")
        assert not intervals_overlap("16:00", "17:00", "14:00", "16:00")

    def test_partial_and_containing_overlap(self):
        assert intervals_overlap("14:00", "15:00", "14:30", "15:30")
        assert intervals_overlap("14:00", "18:00", "15:00", "16:00")
        assert intervals_overlap("15:00", "16:00", "14:00", "18:00")


class TestDates:
    def test_parse_iso_string(self):
        assert parse_booking_date("2026-10-25") == date(2026, 10, 25)

    def test_datetime_is_stripped(self):
        assert parse_booking_date(datetime(2026, 10, 25, 18, 30)) == date(2026, 10, 25)

    def test_invalid_date(self):
        with pytest.raises(InvalidInputError):
            parse_booking_date("2026-02-30")

    @pytest.mark.parametrize("value", ["2026-10-25garbage", "2026-10-25T10:00", "20261025", "2026-W43-7"])
    def test_rejects_trailing_text_and_other_iso_forms(self, value):
        with pytest.raises(InvalidInputError):
            parse_booking_date(value)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_booking_date(" 2026-10-25 ") == date(2026, 10, 25)

    def test_weekday_of(self):
        assert weekday_of(date(2026, 10, 25)) == Weekday.sunday
        assert weekday_of(date(2026, 10, 19)) == Weekday.monday

    def test_starts_after_is_strict(self):
        day = date(2026, 10, 25)
        assert starts_after(day, "10:00", datetime(2026, 10, 25, 9, 59))
        assert not starts_after(day, "10:00", datetime(2026, 10, 25, 10, 0))
