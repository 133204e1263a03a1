from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from hotel_admin.domain.entities.booking import RoomTypeKey


class RoomStatus(str, Enum):
    clean = "clean"
    dirty = "dirty"
    maintenance = "maintenance"

    def next(self) -> "RoomStatus":
        return _STATUS_CYCLE[self]


_STATUS_CYCLE = {
    RoomStatus.clean: RoomStatus.dirty,
    RoomStatus.dirty: RoomStatus.maintenance,
    RoomStatus.maintenance: RoomStatus.clean,
}


@dataclass(frozen=True)
class RoomTypeConfig:
    inventory_count: int = 0
    nightly_price: Decimal = Decimal("0")


@dataclass(frozen=True)
class RatePlan:
    code: str
    name: str
    room_type: RoomTypeKey
    nightly_price: Decimal


@dataclass(frozen=True)
class HotelSettings:
    """Singleton settings aggregate (row id 1 in the store)."""

    prices: dict[RoomTypeKey, Decimal] = field(default_factory=dict)
    inventory: dict[RoomTypeKey, int] = field(default_factory=dict)
    rate_plans: tuple[RatePlan, ...] = ()
    room_statuses: dict[str, RoomStatus] = field(default_factory=dict)  # keyed by room number, e.g. "203"

    def config_for(self, room_type: RoomTypeKey) -> RoomTypeConfig:
        return RoomTypeConfig(
            inventory_count=max(int(self.inventory.get(room_type, 0)), 0),
            nightly_price=self.prices.get(room_type, Decimal("0")),
        )

    def configs(self) -> dict[RoomTypeKey, RoomTypeConfig]:
        return {room_type: self.config_for(room_type) for room_type in RoomTypeKey}

    def room_status(self, room_number: int) -> RoomStatus:
        return self.room_statuses.get(str(room_number), RoomStatus.clean)
