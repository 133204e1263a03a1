from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from hotel_admin.application.utils.date_utils import overlaps
from hotel_admin.domain.entities.booking import Booking

ROUND_ROBIN = "round_robin"
PACKED = "packed"
STRATEGIES = (ROUND_ROBIN, PACKED)


def stable_order(bookings: Iterable[Booking]) -> list[Booking]:
    """Repeatable order for default slot assignment; references are unique and immutable."""
    return sorted(bookings, key=lambda b: (b.reference, b.id))


def resolve_slot(
    booking: Booking,
    ordered_bookings: Sequence[Booking],
    inventory_count: int,
    overrides: Mapping[str, int],
) -> int | None:
    """
    Slot (1-based) for a booking within its room type.

    A manual override wins verbatim. Otherwise slots are dealt round robin by
    position in `ordered_bookings`. Returns None when the type has no rooms.
    """
    override = overrides.get(booking.id)
    if override is not None:
        return override
    if inventory_count <= 0:
        return None
    for index, candidate in enumerate(ordered_bookings):
        if candidate.id == booking.id:
            return index % inventory_count + 1
    raise ValueError(f"Booking {booking.id} is not part of the ordered booking list")


class SlotAssignmentResolver:
    """Assigns every booking of one room type to a slot row."""

    def __init__(self, strategy: str = ROUND_ROBIN) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown slot assignment strategy: {strategy}")
        self._strategy = strategy
        self._logger = logging.getLogger(__name__)

    @property
    def strategy(self) -> str:
        return self._strategy

    def assign(
        self,
        bookings: Iterable[Booking],
        inventory_count: int,
        overrides: Mapping[str, int],
    ) -> dict[str, int]:
        ordered = stable_order(b for b in bookings if b.is_active)
        if self._strategy == PACKED:
            return self._pack(ordered, inventory_count, overrides)

        assignments: dict[str, int] = {}
        for booking in ordered:
            slot = resolve_slot(booking, ordered, inventory_count, overrides)
            if slot is not None:
                assignments[booking.id] = slot
        return assignments

    def _pack(
        self,
        ordered: list[Booking],
        inventory_count: int,
        overrides: Mapping[str, int],
    ) -> dict[str, int]:
        """Greedy interval packing: earliest stays first, lowest free slot wins."""
        assignments: dict[str, int] = {}
        taken: dict[int, list[Booking]] = {slot: [] for slot in range(1, max(inventory_count, 0) + 1)}

        for booking in ordered:
            override = overrides.get(booking.id)
            if override is not None:
                assignments[booking.id] = override
                taken.setdefault(override, []).append(booking)

        pending = sorted(
            (b for b in ordered if b.id not in assignments),
            key=lambda b: (b.check_in, b.check_out, b.reference, b.id),
        )
        for booking in pending:
            for slot in range(1, inventory_count + 1):
                if not any(overlaps(booking.check_in, booking.check_out, o.check_in, o.check_out) for o in taken[slot]):
                    assignments[booking.id] = slot
                    taken[slot].append(booking)
                    break
            else:
                fallback = resolve_slot(booking, ordered, inventory_count, {})
                if fallback is None:
                    continue
                self._logger.warning(
                    "No free slot for booking, falling back to round robin",
                    extra={"booking_id": booking.id, "slot": fallback},
                )
                assignments[booking.id] = fallback
                taken[fallback].append(booking)
        return assignments
