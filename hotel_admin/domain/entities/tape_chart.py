from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from hotel_admin.domain.entities.booking import BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import RoomStatus
from hotel_admin.domain.entities.occupancy import OccupancyCell


@dataclass(frozen=True)
class DayColumn:
    index: int
    date: date
    is_today: bool = False
    is_weekend: bool = False


@dataclass(frozen=True)
class BookingBar:
    booking_id: str
    reference: str
    guest_name: str
    status: BookingStatus
    start_index: int  # column of max(check_in, window_start)
    span_days: int
    width: int
    continues_before: bool = False  # check-in falls before the window
    continues_after: bool = False  # check-out falls after the window


@dataclass(frozen=True)
class GridCell:
    date: date
    bars: tuple[BookingBar, ...] = ()


@dataclass(frozen=True)
class SlotRow:
    room_type: RoomTypeKey
    slot_number: int
    room_number: int
    room_status: RoomStatus
    cells: tuple[GridCell, ...] = ()

    @property
    def bars(self) -> list[BookingBar]:
        return [bar for cell in self.cells for bar in cell.bars]


@dataclass(frozen=True)
class RoomTypeSection:
    room_type: RoomTypeKey
    label: str
    nightly_price: Decimal
    inventory_count: int
    slot_rows: tuple[SlotRow, ...] = ()
    occupancy: tuple[OccupancyCell, ...] = ()


@dataclass(frozen=True)
class GridDescription:
    window_start: date
    window_end: date  # exclusive
    day_width: int
    days: tuple[DayColumn, ...] = ()
    sections: tuple[RoomTypeSection, ...] = ()
    notices: tuple[str, ...] = ()
    error: str | None = None  # set when the grid could not be built

    def section(self, room_type: RoomTypeKey) -> RoomTypeSection:
        for section in self.sections:
            if section.room_type == room_type:
                return section
        raise KeyError(room_type)

    def with_notices(self, notices: list[str]) -> "GridDescription":
        return GridDescription(
            window_start=self.window_start,
            window_end=self.window_end,
            day_width=self.day_width,
            days=self.days,
            sections=self.sections,
            notices=tuple(self.notices) + tuple(notices),
            error=self.error,
        )


class DragStatus(str, Enum):
    idle = "idle"
    dragging = "dragging"


class DropOutcome(str, Enum):
    dropped_valid = "dropped_valid"
    dropped_invalid = "dropped_invalid"
    ignored = "ignored"


@dataclass(frozen=True)
class DropTarget:
    room_type: RoomTypeKey
    slot_number: int
    date: date


@dataclass(frozen=True)
class DragState:
    status: DragStatus = DragStatus.idle
    booking_id: str | None = None
    room_type: RoomTypeKey | None = None


@dataclass(frozen=True)
class DropResult:
    outcome: DropOutcome
    booking_id: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    slot_number: int | None = None
    room_label: str | None = None
    reason: str | None = None
