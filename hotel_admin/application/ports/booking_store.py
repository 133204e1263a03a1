from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from hotel_admin.domain.entities.booking import Booking, BookingStatus
from hotel_admin.domain.entities.hotel_settings import HotelSettings


class BookingStorePort(ABC):
    """External record store holding `bookings` and the singleton `settings` row.

    Adapters raise BookingStoreError when the store cannot be reached or rejects a request,
    and KeyError when a write targets a booking id or reference that does not exist.
    """

    @abstractmethod
    def list_bookings(self, include_cancelled: bool = True) -> list[Booking]:
        """All bookings, newest first. Malformed rows are skipped."""
        raise NotImplementedError

    @abstractmethod
    def get_settings(self) -> HotelSettings:
        raise NotImplementedError

    @abstractmethod
    def assign_booking(self, booking_id: str, check_in: date, check_out: date, room_label: str) -> Booking:
        """Move a booking to new dates and a physical room. Returns the updated booking."""
        raise NotImplementedError

    @abstractmethod
    def update_booking_status(self, reference: str, status: BookingStatus) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def delete_booking(self, reference: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def update_settings(self, settings: HotelSettings) -> HotelSettings:
        """Persist prices, inventory, rate plans and room statuses of the singleton row."""
        raise NotImplementedError
