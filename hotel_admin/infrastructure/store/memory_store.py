from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from hotel_admin.application.exceptions import BookingStoreError
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.domain.entities.booking import Booking, BookingStatus
from hotel_admin.domain.entities.hotel_settings import HotelSettings


class MemoryBookingStore(BookingStorePort):
    def __init__(self, bookings: list[Booking] | None = None, settings: HotelSettings | None = None) -> None:
        self._bookings: dict[str, Booking] = {b.id: b for b in bookings or []}
        self._settings = settings or HotelSettings()
        self._logger = logging.getLogger(__name__)

    def list_bookings(self, include_cancelled: bool = True) -> list[Booking]:
        bookings = sorted(
            self._bookings.values(),
            key=lambda b: (b.created_at.timestamp() if b.created_at else 0.0, b.reference),
            reverse=True,
        )
        if include_cancelled:
            return bookings
        return [b for b in bookings if b.is_active]

    def get_settings(self) -> HotelSettings:
        return self._settings

    def assign_booking(self, booking_id: str, check_in: date, check_out: date, room_label: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise KeyError(booking_id)
        updated = replace(booking, check_in=check_in, check_out=check_out, room_label=room_label)
        self._bookings[booking_id] = updated
        self._logger.info("Booking reassigned", extra={"booking_id": booking_id, "room": room_label})
        return updated

    def update_booking_status(self, reference: str, status: BookingStatus) -> Booking:
        booking = self._by_reference(reference)
        updated = replace(booking, status=status)
        self._bookings[booking.id] = updated
        return updated

    def delete_booking(self, reference: str) -> None:
        booking = self._by_reference(reference)
        del self._bookings[booking.id]

    def insert_booking(self, booking: Booking) -> Booking:
        if booking.id in self._bookings:
            raise BookingStoreError(f"Booking {booking.id} already exists")
        if any(b.reference == booking.reference for b in self._bookings.values()):
            raise BookingStoreError(f"Booking reference {booking.reference} already exists")
        self._bookings[booking.id] = booking
        return booking

    def update_settings(self, settings: HotelSettings) -> HotelSettings:
        self._settings = settings
        return settings

    def _by_reference(self, reference: str) -> Booking:
        for booking in self._bookings.values():
            if booking.reference == reference:
                return booking
        raise KeyError(reference)
