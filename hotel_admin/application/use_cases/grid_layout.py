from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from hotel_admin.application.exceptions import MalformedBookingError
from hotel_admin.application.use_cases.occupancy import compute_occupancy
from hotel_admin.application.use_cases.slot_assignment import SlotAssignmentResolver, stable_order
from hotel_admin.application.utils.date_utils import is_weekend, iter_days
from hotel_admin.domain.entities.booking import Booking, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings
from hotel_admin.domain.entities.tape_chart import (
    BookingBar,
    DayColumn,
    GridCell,
    GridDescription,
    RoomTypeSection,
    SlotRow,
)

DEFAULT_DAY_WIDTH = 40

logger = logging.getLogger(__name__)


def check_booking_dates(booking: Booking) -> None:
    """Raise MalformedBookingError unless the booking has dates with check_out > check_in."""
    if not isinstance(booking.check_in, date) or not isinstance(booking.check_out, date):
        raise MalformedBookingError(f"Booking {booking.id} has missing or unparseable dates")
    if booking.check_out <= booking.check_in:
        raise MalformedBookingError(f"Booking {booking.id} checks out on or before check-in")


def place_bar(booking: Booking, window: tuple[date, date], day_width: int = DEFAULT_DAY_WIDTH) -> BookingBar | None:
    """
    Bar for a booking clamped to the visible window, or None if they do not intersect.

    The bar sits on the column of max(check_in, window_start) and spans
    min(check_out, window_end) - effective_start days, never less than one.
    """
    check_booking_dates(booking)
    start, end = window
    if booking.check_out <= start or booking.check_in >= end:
        return None

    effective_start = max(booking.check_in, start)
    effective_end = min(booking.check_out, end)
    span_days = max(1, (effective_end - effective_start).days)
    return BookingBar(
        booking_id=booking.id,
        reference=booking.reference,
        guest_name=booking.guest_name,
        status=booking.status,
        start_index=(effective_start - start).days,
        span_days=span_days,
        width=span_days * day_width,
        continues_before=booking.check_in < start,
        continues_after=booking.check_out > end,
    )


def build_day_columns(window: tuple[date, date], today: date | None) -> list[DayColumn]:
    start, end = window
    return [
        DayColumn(index=index, date=day, is_today=day == today, is_weekend=is_weekend(day))
        for index, day in enumerate(iter_days(start, end))
    ]


def _well_formed(bookings: Iterable[Booking]) -> list[Booking]:
    valid: list[Booking] = []
    for booking in bookings:
        try:
            check_booking_dates(booking)
        except MalformedBookingError as e:
            logger.warning("Skipping malformed booking", extra={"booking_id": booking.id, "reason": str(e)})
            continue
        valid.append(booking)
    return valid


def layout_grid(
    window: tuple[date, date],
    room_types: Sequence[RoomTypeKey],
    bookings: Iterable[Booking],
    settings: HotelSettings,
    overrides: Mapping[str, int],
    today: date | None = None,
    resolver: SlotAssignmentResolver | None = None,
    day_width: int = DEFAULT_DAY_WIDTH,
) -> GridDescription:
    """Build the renderable tape chart for the window: one section per room type."""
    resolver = resolver or SlotAssignmentResolver()
    valid = _well_formed(bookings)
    days = build_day_columns(window, today)
    configs = {room_type: settings.config_for(room_type) for room_type in room_types}
    occupancy = compute_occupancy(valid, configs, window)

    sections: list[RoomTypeSection] = []
    for room_type in room_types:
        config = configs[room_type]
        of_type = [b for b in valid if b.room_type == room_type and b.is_active]
        assignments = resolver.assign(of_type, config.inventory_count, overrides)

        bars_by_slot: dict[int, dict[int, list[BookingBar]]] = defaultdict(lambda: defaultdict(list))
        for booking in stable_order(of_type):
            slot = assignments.get(booking.id)
            if slot is None:
                continue
            if not 1 <= slot <= config.inventory_count:
                logger.warning(
                    "Booking assigned to a slot outside the inventory",
                    extra={"booking_id": booking.id, "room_type": room_type.value, "slot": slot},
                )
                continue
            bar = place_bar(booking, window, day_width)
            if bar is not None:
                bars_by_slot[slot][bar.start_index].append(bar)

        slot_rows = []
        for slot in range(1, config.inventory_count + 1):
            room_number = room_type.room_number(slot)
            cells = tuple(
                GridCell(date=column.date, bars=tuple(bars_by_slot[slot].get(column.index, ())))
                for column in days
            )
            slot_rows.append(
                SlotRow(
                    room_type=room_type,
                    slot_number=slot,
                    room_number=room_number,
                    room_status=settings.room_status(room_number),
                    cells=cells,
                )
            )

        sections.append(
            RoomTypeSection(
                room_type=room_type,
                label=room_type.display_name,
                nightly_price=config.nightly_price,
                inventory_count=config.inventory_count,
                slot_rows=tuple(slot_rows),
                occupancy=tuple(occupancy[room_type]),
            )
        )

    return GridDescription(
        window_start=window[0],
        window_end=window[1],
        day_width=day_width,
        days=tuple(days),
        sections=tuple(sections),
    )
