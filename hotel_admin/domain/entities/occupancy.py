from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from hotel_admin.domain.entities.booking import RoomTypeKey


class OccupancyTier(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


@dataclass(frozen=True)
class OccupancyCell:
    room_type: RoomTypeKey
    date: date
    booked_count: int
    inventory_count: int
    available: int
    occupancy_pct: int
    tier: OccupancyTier
