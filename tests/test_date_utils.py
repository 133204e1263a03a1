"""
Tests for calendar date helpers used by the tape chart.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from hotel_admin.application.utils.date_utils import (
    days_in_month,
    format_date,
    is_weekend,
    iter_days,
    nights_between,
    occupies,
    overlaps,
    parse_date,
    shift_month,
    window_for_anchor,
)


def test_format_and_parse_date():
    assert format_date(date(2025, 3, 7)) == "2025-03-07"
    assert parse_date("2025-03-07") == date(2025, 3, 7)
    assert parse_date("2025-03-07T00:00:00Z") == date(2025, 3, 7)
    assert parse_date(datetime(2025, 3, 7, 15, 30)) == date(2025, 3, 7)


@pytest.mark.parametrize("value", [None, "", "not-a-date", "2025-02-30", 20250307])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_iter_days_is_half_open():
    days = list(iter_days(date(2025, 3, 1), date(2025, 3, 4)))
    assert days == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]
    assert list(iter_days(date(2025, 3, 4), date(2025, 3, 4))) == []


def test_departure_day_is_not_occupied():
    check_in, check_out = date(2025, 3, 1), date(2025, 3, 3)
    assert occupies(check_in, check_out, date(2025, 3, 1))
    assert occupies(check_in, check_out, date(2025, 3, 2))
    assert not occupies(check_in, check_out, date(2025, 3, 3))
    assert not occupies(check_in, check_out, date(2025, 2, 28))


def test_overlaps_treats_back_to_back_stays_as_disjoint():
    assert overlaps(date(2025, 3, 1), date(2025, 3, 3), date(2025, 3, 2), date(2025, 3, 4))
    assert not overlaps(date(2025, 3, 1), date(2025, 3, 3), date(2025, 3, 3), date(2025, 3, 5))


def test_nights_between():
    assert nights_between(date(2025, 3, 10), date(2025, 3, 13)) == 3


def test_window_length_follows_anchor_month():
    assert days_in_month(date(2024, 2, 10)) == 29
    assert window_for_anchor(date(2025, 3, 1)) == (date(2025, 3, 1), date(2025, 4, 1))
    # Anchors mid-month still span the anchor month's length.
    assert window_for_anchor(date(2025, 2, 15)) == (date(2025, 2, 15), date(2025, 3, 15))


def test_shift_month_clamps_day():
    assert shift_month(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert shift_month(date(2025, 1, 15), -1) == date(2024, 12, 15)
    assert shift_month(date(2025, 11, 1), 2) == date(2026, 1, 1)


def test_weekend_flag():
    assert is_weekend(date(2025, 3, 1))  # Saturday
    assert is_weekend(date(2025, 3, 2))
    assert not is_weekend(date(2025, 3, 3))
