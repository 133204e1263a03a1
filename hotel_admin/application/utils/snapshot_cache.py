from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from hotel_admin.domain.entities.booking import Booking
from hotel_admin.domain.entities.hotel_settings import HotelSettings


@dataclass(frozen=True)
class StoreSnapshot:
    bookings: tuple[Booking, ...]
    settings: HotelSettings

    def booking(self, booking_id: str) -> Booking:
        for booking in self.bookings:
            if booking.id == booking_id:
                return booking
        raise KeyError(booking_id)


class SnapshotCache:
    """Holds the last bookings/settings read for `ttl_seconds`."""

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: StoreSnapshot | None = None
        self._stored_at: float | None = None

    def get(self) -> StoreSnapshot | None:
        if self._snapshot is None or self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self._ttl_seconds:
            self.invalidate()
            return None
        return self._snapshot

    def put(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._snapshot = None
        self._stored_at = None
