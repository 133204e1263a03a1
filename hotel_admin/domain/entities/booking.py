from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class RoomTypeKey(str, Enum):
    single = "single"
    deluxe = "deluxe"
    family = "family"

    @property
    def prefix(self) -> int:
        """Leading digit of the physical room numbers of this type (single -> 1xx)."""
        return _ROOM_PREFIXES[self]

    @property
    def display_name(self) -> str:
        return f"{self.value.capitalize()} Room"

    def room_number(self, slot_number: int) -> int:
        return self.prefix * 100 + slot_number

    def room_label(self, slot_number: int) -> str:
        return f"{self.display_name} {self.room_number(slot_number)}"

    @classmethod
    def from_label(cls, label: str) -> "RoomTypeKey":
        """Resolve a free-form room label ("Deluxe Room 203", "family") to a key."""
        normalized = (label or "").lower().strip()
        for key in cls:
            if key.value in normalized:
                return key
        raise ValueError(f"Unknown room type: {label!r}")

    @classmethod
    def from_room_number(cls, room_number: int) -> "RoomTypeKey":
        prefix = room_number // 100
        for key, key_prefix in _ROOM_PREFIXES.items():
            if key_prefix == prefix:
                return key
        raise ValueError(f"Room number {room_number} does not belong to any room type")


_ROOM_PREFIXES = {
    RoomTypeKey.single: 1,
    RoomTypeKey.deluxe: 2,
    RoomTypeKey.family: 3,
}


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    checked_in = "checked-in"
    cancelled = "cancelled"


@dataclass(frozen=True)
class Booking:
    id: str
    reference: str
    room_type: RoomTypeKey
    check_in: date
    check_out: date
    status: BookingStatus = BookingStatus.pending
    guest_name: str = ""
    guest_email: str = ""
    guest_phone: str = ""
    amount: Decimal = Decimal("0")
    room_label: str | None = None  # persisted physical room, e.g. "Deluxe Room 203"
    created_at: datetime | None = None

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.cancelled
