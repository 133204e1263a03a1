"""
Tests for default (round robin / packed) and manual slot assignment.
"""

from __future__ import annotations

from datetime import date

import pytest

from hotel_admin.application.use_cases.slot_assignment import (
    PACKED,
    ROUND_ROBIN,
    SlotAssignmentResolver,
    resolve_slot,
    stable_order,
)
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey


def _booking(ref: str, check_in: date, check_out: date, **kwargs) -> Booking:
    return Booking(
        id=f"id-{ref}",
        reference=ref,
        room_type=RoomTypeKey.single,
        check_in=check_in,
        check_out=check_out,
        **kwargs,
    )


BOOKINGS = [
    _booking("DHV-C", date(2025, 3, 1), date(2025, 3, 3)),
    _booking("DHV-A", date(2025, 3, 5), date(2025, 3, 7)),
    _booking("DHV-B", date(2025, 3, 2), date(2025, 3, 4)),
]


def test_stable_order_sorts_by_reference():
    assert [b.reference for b in stable_order(BOOKINGS)] == ["DHV-A", "DHV-B", "DHV-C"]


def test_round_robin_by_position():
    ordered = stable_order(BOOKINGS)
    slots = [resolve_slot(b, ordered, 2, {}) for b in ordered]
    assert slots == [1, 2, 1]


def test_round_robin_is_deterministic_regardless_of_input_order():
    resolver = SlotAssignmentResolver(ROUND_ROBIN)
    first = resolver.assign(BOOKINGS, 2, {})
    second = resolver.assign(list(reversed(BOOKINGS)), 2, {})
    assert first == second


def test_override_wins_verbatim():
    ordered = stable_order(BOOKINGS)
    overrides = {"id-DHV-A": 2}
    assert resolve_slot(ordered[0], ordered, 2, overrides) == 2
    # Overrides are not bounds-checked here; the drop controller validated them.
    assert resolve_slot(ordered[0], ordered, 2, {"id-DHV-A": 9}) == 9
    assert SlotAssignmentResolver().assign(BOOKINGS, 2, overrides)["id-DHV-A"] == 2


def test_no_inventory_means_no_slot():
    ordered = stable_order(BOOKINGS)
    assert resolve_slot(ordered[0], ordered, 0, {}) is None
    assert SlotAssignmentResolver().assign(BOOKINGS, 0, {}) == {}


def test_unknown_booking_is_rejected():
    stranger = _booking("DHV-Z", date(2025, 3, 1), date(2025, 3, 2))
    with pytest.raises(ValueError):
        resolve_slot(stranger, stable_order(BOOKINGS), 2, {})


def test_cancelled_bookings_take_no_slot():
    bookings = BOOKINGS + [_booking("DHV-0", date(2025, 3, 1), date(2025, 3, 2), status=BookingStatus.cancelled)]
    assignments = SlotAssignmentResolver().assign(bookings, 2, {})
    assert "id-DHV-0" not in assignments
    assert assignments == SlotAssignmentResolver().assign(BOOKINGS, 2, {})


def test_round_robin_can_stack_overlapping_stays():
    """Known limitation kept for parity: position-based dealing ignores dates."""
    bookings = [
        _booking("DHV-A", date(2025, 3, 1), date(2025, 3, 5)),
        _booking("DHV-B", date(2025, 3, 10), date(2025, 3, 12)),
        _booking("DHV-C", date(2025, 3, 2), date(2025, 3, 4)),
    ]
    assignments = SlotAssignmentResolver(ROUND_ROBIN).assign(bookings, 2, {})
    assert assignments["id-DHV-A"] == assignments["id-DHV-C"] == 1


def test_packed_strategy_avoids_overlaps():
    bookings = [
        _booking("DHV-A", date(2025, 3, 1), date(2025, 3, 5)),
        _booking("DHV-B", date(2025, 3, 10), date(2025, 3, 12)),
        _booking("DHV-C", date(2025, 3, 2), date(2025, 3, 4)),
        _booking("DHV-D", date(2025, 3, 5), date(2025, 3, 8)),
    ]
    assignments = SlotAssignmentResolver(PACKED).assign(bookings, 2, {})

    assert assignments["id-DHV-A"] == 1
    assert assignments["id-DHV-C"] == 2
    # Back-to-back stays can share a room.
    assert assignments["id-DHV-D"] == 1
    assert assignments["id-DHV-B"] == 1


def test_packed_strategy_respects_overrides():
    bookings = [
        _booking("DHV-A", date(2025, 3, 1), date(2025, 3, 5)),
        _booking("DHV-B", date(2025, 3, 2), date(2025, 3, 4)),
    ]
    assignments = SlotAssignmentResolver(PACKED).assign(bookings, 2, {"id-DHV-A": 2})
    assert assignments == {"id-DHV-A": 2, "id-DHV-B": 1}


def test_packed_strategy_falls_back_when_full():
    bookings = [
        _booking("DHV-A", date(2025, 3, 1), date(2025, 3, 5)),
        _booking("DHV-B", date(2025, 3, 1), date(2025, 3, 5)),
    ]
    assignments = SlotAssignmentResolver(PACKED).assign(bookings, 1, {})
    assert assignments == {"id-DHV-A": 1, "id-DHV-B": 1}


def test_unknown_strategy():
    with pytest.raises(ValueError):
        SlotAssignmentResolver("random")
