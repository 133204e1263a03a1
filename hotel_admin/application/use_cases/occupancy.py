from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import date

from hotel_admin.application.utils.date_utils import iter_days, occupies
from hotel_admin.domain.entities.booking import Booking, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import RoomTypeConfig
from hotel_admin.domain.entities.occupancy import OccupancyCell, OccupancyTier

HIGH_OCCUPANCY_PCT = 80
MEDIUM_OCCUPANCY_PCT = 40


def occupancy_tier(occupancy_pct: int) -> OccupancyTier:
    if occupancy_pct >= HIGH_OCCUPANCY_PCT:
        return OccupancyTier.high
    if occupancy_pct >= MEDIUM_OCCUPANCY_PCT:
        return OccupancyTier.medium
    return OccupancyTier.low


def occupancy_pct(booked_count: int, inventory_count: int) -> int:
    """Percentage rounded half up and clamped to [0, 100]; 0 without inventory."""
    if inventory_count <= 0:
        return 0
    pct = math.floor(booked_count / inventory_count * 100 + 0.5)
    return max(0, min(pct, 100))


def build_cell(room_type: RoomTypeKey, day: date, booked_count: int, inventory_count: int) -> OccupancyCell:
    inventory_count = max(inventory_count, 0)
    pct = occupancy_pct(booked_count, inventory_count)
    return OccupancyCell(
        room_type=room_type,
        date=day,
        booked_count=booked_count,
        inventory_count=inventory_count,
        available=max(inventory_count - booked_count, 0),
        occupancy_pct=pct,
        tier=occupancy_tier(pct),
    )


def compute_occupancy(
    bookings: Iterable[Booking],
    configs: Mapping[RoomTypeKey, RoomTypeConfig],
    window: tuple[date, date],
) -> dict[RoomTypeKey, list[OccupancyCell]]:
    """Per room type, one cell per day of the half-open window, in date order."""
    start, end = window
    active: dict[RoomTypeKey, list[Booking]] = {room_type: [] for room_type in configs}
    for booking in bookings:
        if booking.is_active and booking.room_type in active:
            active[booking.room_type].append(booking)

    result: dict[RoomTypeKey, list[OccupancyCell]] = {}
    for room_type, config in configs.items():
        cells: list[OccupancyCell] = []
        for day in iter_days(start, end):
            booked = sum(1 for b in active[room_type] if occupies(b.check_in, b.check_out, day))
            cells.append(build_cell(room_type, day, booked, config.inventory_count))
        result[room_type] = cells
    return result


def occupancy_on(
    bookings: Iterable[Booking],
    configs: Mapping[RoomTypeKey, RoomTypeConfig],
    day: date,
) -> int:
    """Hotel-wide occupancy percentage for a single day across all room types."""
    total_inventory = sum(config.inventory_count for config in configs.values())
    booked = sum(
        1
        for b in bookings
        if b.is_active and b.room_type in configs and occupies(b.check_in, b.check_out, day)
    )
    return occupancy_pct(booked, total_inventory)
