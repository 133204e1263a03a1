from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping

from hotel_admin.application.exceptions import BookingStoreError, InvalidDropError, WriteFailureError
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.utils.write_locks import BookingWriteLocks
from hotel_admin.domain.entities.booking import Booking
from hotel_admin.domain.entities.hotel_settings import HotelSettings
from hotel_admin.domain.entities.tape_chart import DragState, DragStatus, DropOutcome, DropResult, DropTarget


class DragReassignmentController:
    """
    Drag-and-drop reassignment of a booking bar onto a room row.

    idle -> dragging -> (dropped_valid | dropped_invalid) -> idle

    A valid drop keeps the stay's length, moves check-in to the target cell's
    date, records a manual slot override and writes the new dates and room
    label to the store. If the write fails the override is restored to what it
    was before the drop and WriteFailureError is raised.
    """

    def __init__(
        self,
        store: BookingStorePort,
        overrides: MutableMapping[str, int],
        on_committed: Callable[[Booking], None] | None = None,
        write_locks: BookingWriteLocks | None = None,
    ) -> None:
        self._store = store
        self._overrides = overrides
        self._on_committed = on_committed
        self._write_locks = write_locks or BookingWriteLocks()
        self._state = DragState()
        self._booking: Booking | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> DragState:
        return self._state

    def start_drag(self, booking: Booking) -> DragState:
        if not booking.is_active:
            raise ValueError(f"Booking #{booking.reference} is cancelled and cannot be moved")
        self._booking = booking
        self._state = DragState(
            status=DragStatus.dragging,
            booking_id=booking.id,
            room_type=booking.room_type,
        )
        return self._state

    def cancel(self) -> DragState:
        self._reset()
        return self._state

    def drop(self, target: DropTarget, settings: HotelSettings) -> DropResult:
        if self._state.status != DragStatus.dragging or self._booking is None:
            return DropResult(outcome=DropOutcome.ignored, reason="No drag in progress")

        booking = self._booking
        try:
            self._validate(booking, target, settings)
        except InvalidDropError as e:
            self._logger.info("Drop rejected", extra={"booking_id": booking.id, "reason": str(e)})
            self._reset()
            return DropResult(outcome=DropOutcome.dropped_invalid, booking_id=booking.id, reason=str(e))

        duration = booking.check_out - booking.check_in
        new_check_in = target.date
        new_check_out = new_check_in + duration
        room_label = target.room_type.room_label(target.slot_number)

        try:
            with self._write_locks.hold(booking.id):
                previous = self._overrides.get(booking.id)
                self._overrides[booking.id] = target.slot_number
                try:
                    updated = self._store.assign_booking(booking.id, new_check_in, new_check_out, room_label)
                except (BookingStoreError, KeyError) as e:
                    if previous is None:
                        self._overrides.pop(booking.id, None)
                    else:
                        self._overrides[booking.id] = previous
                    self._logger.error(
                        "Reassignment write failed",
                        extra={"booking_id": booking.id, "room_type": booking.room_type.value, "error": str(e)},
                    )
                    raise WriteFailureError(f"Could not move booking #{booking.reference}: {e}") from e
        finally:
            self._reset()

        self._logger.info(
            "Booking moved",
            extra={"booking_id": booking.id, "room_type": booking.room_type.value, "slot": target.slot_number},
        )
        if self._on_committed is not None:
            self._on_committed(updated)

        return DropResult(
            outcome=DropOutcome.dropped_valid,
            booking_id=booking.id,
            check_in=new_check_in,
            check_out=new_check_out,
            slot_number=target.slot_number,
            room_label=room_label,
        )

    def _validate(self, booking: Booking, target: DropTarget, settings: HotelSettings) -> None:
        if target.room_type != booking.room_type:
            raise InvalidDropError(
                f"Cannot move a {booking.room_type.value} booking onto a {target.room_type.value} room"
            )
        inventory_count = settings.config_for(target.room_type).inventory_count
        if not 1 <= target.slot_number <= inventory_count:
            raise InvalidDropError(f"Room slot {target.slot_number} does not exist for {target.room_type.value}")

    def _reset(self) -> None:
        self._booking = None
        self._state = DragState()
