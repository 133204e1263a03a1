"""
Tests for tape chart grid layout: bar placement, clamping and malformed records.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hotel_admin.application.exceptions import MalformedBookingError
from hotel_admin.application.use_cases.grid_layout import layout_grid, place_bar
from hotel_admin.domain.entities.booking import Booking, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RoomStatus

MARCH = (date(2025, 3, 1), date(2025, 4, 1))


def _booking(booking_id: str, room_type: RoomTypeKey, check_in, check_out, **kwargs) -> Booking:
    return Booking(
        id=booking_id,
        reference=f"DHV-{booking_id}",
        room_type=room_type,
        check_in=check_in,
        check_out=check_out,
        guest_name=f"Guest {booking_id}",
        **kwargs,
    )


def _settings(**inventory: int) -> HotelSettings:
    return HotelSettings(
        prices={RoomTypeKey.single: Decimal("180"), RoomTypeKey.deluxe: Decimal("320"), RoomTypeKey.family: Decimal("420")},
        inventory={RoomTypeKey(key): count for key, count in inventory.items()},
    )


def test_bar_inside_window_starts_at_check_in():
    bar = place_bar(_booking("1", RoomTypeKey.single, date(2025, 3, 10), date(2025, 3, 13)), MARCH, day_width=40)
    assert bar.start_index == 9
    assert bar.span_days == 3
    assert bar.width == 120
    assert not bar.continues_before
    assert not bar.continues_after


def test_bar_spanning_whole_window_is_clamped():
    bar = place_bar(_booking("1", RoomTypeKey.single, date(2025, 2, 20), date(2025, 4, 10)), MARCH)
    assert bar.start_index == 0
    assert bar.span_days == 31
    assert bar.continues_before
    assert bar.continues_after


def test_bar_clamped_at_window_end():
    bar = place_bar(_booking("1", RoomTypeKey.single, date(2025, 3, 30), date(2025, 4, 3)), MARCH)
    assert bar.start_index == 29
    assert bar.span_days == 2


def test_bookings_outside_window_have_no_bar():
    assert place_bar(_booking("1", RoomTypeKey.single, date(2025, 2, 25), date(2025, 3, 1)), MARCH) is None
    assert place_bar(_booking("2", RoomTypeKey.single, date(2025, 4, 1), date(2025, 4, 3)), MARCH) is None


def test_malformed_booking_raises_in_place_bar():
    with pytest.raises(MalformedBookingError):
        place_bar(_booking("1", RoomTypeKey.single, date(2025, 3, 5), date(2025, 3, 5)), MARCH)
    with pytest.raises(MalformedBookingError):
        place_bar(_booking("2", RoomTypeKey.single, None, date(2025, 3, 5)), MARCH)


def test_layout_rows_per_inventory_slot():
    grid = layout_grid(MARCH, list(RoomTypeKey), [], _settings(single=2, deluxe=1, family=0), {})

    assert len(grid.days) == 31
    assert [len(s.slot_rows) for s in grid.sections] == [2, 1, 0]
    single = grid.section(RoomTypeKey.single)
    assert single.label == "Single Room"
    assert single.nightly_price == Decimal("180")
    assert [row.room_number for row in single.slot_rows] == [101, 102]
    assert len(single.occupancy) == 31
    assert all(len(row.cells) == 31 for row in single.slot_rows)


def test_layout_places_bar_on_effective_start_cell():
    bookings = [
        _booking("1", RoomTypeKey.deluxe, date(2025, 2, 27), date(2025, 3, 3)),
        _booking("2", RoomTypeKey.deluxe, date(2025, 3, 10), date(2025, 3, 12)),
    ]
    grid = layout_grid(MARCH, [RoomTypeKey.deluxe], bookings, _settings(deluxe=2), {})
    rows = grid.section(RoomTypeKey.deluxe).slot_rows

    # DHV-1 -> slot 1, DHV-2 -> slot 2 by reference order.
    assert [bar.booking_id for bar in rows[0].cells[0].bars] == ["1"]
    assert rows[0].cells[0].bars[0].span_days == 2
    assert [bar.booking_id for bar in rows[1].cells[9].bars] == ["2"]
    assert sum(len(cell.bars) for cell in rows[1].cells) == 1


def test_layout_honours_overrides():
    bookings = [_booking("1", RoomTypeKey.single, date(2025, 3, 10), date(2025, 3, 12))]
    grid = layout_grid(MARCH, [RoomTypeKey.single], bookings, _settings(single=3), {"1": 3})
    rows = grid.section(RoomTypeKey.single).slot_rows

    assert rows[0].bars == []
    assert [bar.booking_id for bar in rows[2].bars] == ["1"]


def test_override_outside_inventory_is_not_drawn():
    bookings = [_booking("1", RoomTypeKey.single, date(2025, 3, 10), date(2025, 3, 12))]
    grid = layout_grid(MARCH, [RoomTypeKey.single], bookings, _settings(single=1), {"1": 4})
    assert grid.section(RoomTypeKey.single).slot_rows[0].bars == []


def test_malformed_booking_does_not_abort_layout():
    bookings = [
        _booking("bad", RoomTypeKey.single, date(2025, 3, 12), date(2025, 3, 10)),
        _booking("good", RoomTypeKey.single, date(2025, 3, 10), date(2025, 3, 12)),
    ]
    grid = layout_grid(MARCH, [RoomTypeKey.single], bookings, _settings(single=1), {})
    bars = grid.section(RoomTypeKey.single).slot_rows[0].bars

    assert [bar.booking_id for bar in bars] == ["good"]
    assert grid.error is None


def test_today_and_weekend_hints():
    grid = layout_grid(MARCH, [RoomTypeKey.single], [], _settings(single=1), {}, today=date(2025, 3, 4))

    assert [d.date for d in grid.days if d.is_today] == [date(2025, 3, 4)]
    assert grid.days[0].is_weekend  # 2025-03-01 is a Saturday
    assert not grid.days[2].is_weekend


def test_today_outside_window_is_not_flagged():
    grid = layout_grid(MARCH, [RoomTypeKey.single], [], _settings(single=1), {}, today=date(2025, 5, 1))
    assert not any(d.is_today for d in grid.days)


def test_room_status_is_carried_on_rows():
    settings = HotelSettings(
        inventory={RoomTypeKey.family: 2},
        room_statuses={"302": RoomStatus.maintenance},
    )
    rows = layout_grid(MARCH, [RoomTypeKey.family], [], settings, {}).section(RoomTypeKey.family).slot_rows
    assert [row.room_status for row in rows] == [RoomStatus.clean, RoomStatus.maintenance]
