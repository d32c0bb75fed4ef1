"""Tests for calendar arithmetic."""

from datetime import date, datetime, timedelta

import pytest

from skincare.organizer.datemath import (
    MonthsDays,
    add_months,
    days_between,
    format_display_date,
    format_relative_time,
    months_days_between,
    pao_expiry_date,
    parse_date,
    parse_months,
    time_since_opening,
)

TODAY = date(2026, 10, 18)


class TestAddMonths:
    def test_leap_year_clamp(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_non_leap_year_clamp(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_clamp_does_not_roll_into_next_month(self):
        assert add_months(date(2024, 8, 31), 1) == date(2024, 9, 30)
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)

    def test_preserves_day_of_month(self):
        assert add_months(date(2024, 1, 15), 12) == date(2025, 1, 15)

    def test_negative_months(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
        assert add_months(date(2024, 1, 15), -13) == date(2022, 12, 15)

    def test_zero(self):
        assert add_months(date(2024, 5, 5), 0) == date(2024, 5, 5)


class TestDaysBetween:
    def test_today_is_zero(self):
        assert days_between("2026-10-18", today=TODAY) == 0

    def test_tomorrow_and_yesterday(self):
        assert days_between("2026-10-19", today=TODAY) == 1
        assert days_between("2026-10-17", today=TODAY) == -1

    def test_time_of_day_is_stripped(self):
        assert days_between("2026-10-18T23:59:59.000Z", today=TODAY) == 0
        assert days_between(datetime(2026, 10, 19, 0, 1), today=TODAY) == 1

    def test_today_as_datetime(self):
        assert days_between("2026-10-18", today=datetime(2026, 10, 18, 18, 30)) == 0

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2026-13-40"])
    def test_invalid_input(self, value):
        assert days_between(value, today=TODAY) is None

    def test_defaults_to_current_date(self):
        assert days_between(date.today()) == 0

    def test_unparseable_today(self):
        assert days_between("2026-10-18", today="garbage") is None


class TestMonthsDaysBetween:
    def test_forward(self):
        assert months_days_between("2024-01-15", "2024-03-20") == MonthsDays(2, 5)

    def test_reversed_is_negated(self):
        assert months_days_between("2024-03-20", "2024-01-15") == MonthsDays(-2, -5)

    def test_anchor_overshoot_is_corrected(self):
        assert months_days_between("2024-01-20", "2024-02-10") == MonthsDays(0, 21)
        assert months_days_between("2024-01-31", "2024-03-01") == MonthsDays(1, 1)

    def test_clamped_anchor(self):
        assert months_days_between("2023-01-31", "2023-02-28") == MonthsDays(1, 0)

    def test_same_day(self):
        assert months_days_between(TODAY, TODAY) == MonthsDays(0, 0)

    def test_day_remainder_never_negative(self):
        start = date(2024, 1, 31)
        for offset in range(0, 400, 7):
            result = months_days_between(start, start + timedelta(days=offset))
            assert result.months >= 0
            assert result.days >= 0

    def test_invalid(self):
        assert months_days_between("", "2024-01-01") is None
        assert months_days_between("2024-01-01", "nope") is None


class TestPaoExpiryDate:
    def test_six_months(self):
        assert pao_expiry_date("2024-01-01", "6") == date(2024, 7, 1)

    def test_integer_months(self):
        assert pao_expiry_date("2024-01-01", 12) == date(2025, 1, 1)

    def test_clamps_month_end(self):
        assert pao_expiry_date("2024-08-31", "6") == date(2025, 2, 28)

    @pytest.mark.parametrize("months", ["0", "-3", "", "abc", "6.5", None, True, 0])
    def test_invalid_months(self, months):
        assert pao_expiry_date("2024-01-01", months) is None

    def test_missing_opening(self):
        assert pao_expiry_date("", "6") is None
        assert pao_expiry_date(None, "6") is None


class TestTimeSinceOpening:
    def test_days_elapsed(self):
        assert time_since_opening("2026-10-01", today=TODAY) == 17

    def test_same_day_is_zero(self):
        assert time_since_opening("2026-10-18T22:00:00", today=TODAY) == 0

    def test_missing(self):
        assert time_since_opening(None, today=TODAY) is None
        assert time_since_opening("bad", today=TODAY) is None

    def test_unparseable_today(self):
        assert time_since_opening("2026-10-01", today="garbage") is None


class TestFormatRelativeTime:
    def test_same_day_is_left(self):
        assert format_relative_time(TODAY, today=TODAY) == "0d left"

    def test_future_and_past(self):
        assert format_relative_time("2026-10-19", today=TODAY) == "1d left"
        assert format_relative_time("2026-10-17", today=TODAY) == "1d past"

    def test_years_months_days(self):
        target = TODAY + timedelta(days=400)
        assert format_relative_time(target, today=TODAY) == "1y 1m 10d left"

    def test_omits_zero_years(self):
        target = TODAY - timedelta(days=45)
        assert format_relative_time(target, today=TODAY) == "1m 15d past"

    def test_omits_zero_middle_unit(self):
        target = TODAY + timedelta(days=365)
        assert format_relative_time(target, today=TODAY) == "1y 5d left"

    def test_invalid(self):
        assert format_relative_time("", today=TODAY) is None

    def test_unparseable_today(self):
        assert format_relative_time("2026-10-19", today="31/12/2026") is None


class TestFormatDisplayDate:
    def test_string(self):
        assert format_display_date("2024-03-05") == "05/03/2024"

    def test_date_and_datetime(self):
        assert format_display_date(date(2025, 12, 1)) == "01/12/2025"
        assert format_display_date(datetime(2025, 12, 1, 10, 0)) == "01/12/2025"

    @pytest.mark.parametrize("value", [None, "", "garbage"])
    def test_placeholder(self, value):
        assert format_display_date(value) == "—"


def test_parse_date_timestamp():
    assert parse_date("2024-05-06T10:30:00.000Z") == date(2024, 5, 6)


def test_parse_months():
    assert parse_months(" 12 ") == 12
    assert parse_months(3) == 3
    assert parse_months(3.0) is None
