from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.use_cases.occupancy import occupancy_on
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RatePlan


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: Decimal
    booking_count: int
    guest_count: int
    pending_count: int
    occupancy_pct_today: int


@dataclass(frozen=True)
class GuestSummary:
    guest_name: str
    email: str
    phone: str
    total_stays: int
    total_spent: Decimal
    last_visit: date


def dashboard_stats(bookings: list[Booking], settings: HotelSettings, today: date) -> DashboardStats:
    return DashboardStats(
        total_revenue=sum((b.amount for b in bookings if b.is_active), Decimal("0")),
        booking_count=len(bookings),
        guest_count=len({b.guest_email.lower() for b in bookings if b.guest_email}),
        pending_count=sum(1 for b in bookings if b.status == BookingStatus.pending),
        occupancy_pct_today=occupancy_on(bookings, settings.configs(), today),
    )


def guest_directory(bookings: Iterable[Booking]) -> list[GuestSummary]:
    """One entry per guest email, in order of first appearance."""
    guests: dict[str, GuestSummary] = {}
    for b in bookings:
        key = b.guest_email.lower()
        current = guests.get(key)
        if current is None:
            guests[key] = GuestSummary(
                guest_name=b.guest_name,
                email=b.guest_email,
                phone=b.guest_phone or "N/A",
                total_stays=1,
                total_spent=b.amount,
                last_visit=b.check_in,
            )
            continue
        guests[key] = replace(
            current,
            total_stays=current.total_stays + 1,
            total_spent=current.total_spent + b.amount,
            last_visit=max(current.last_visit, b.check_in),
        )
    return list(guests.values())


def filter_bookings(bookings: Iterable[Booking], query: str = "", status: str = "all") -> list[Booking]:
    """Case-insensitive match on guest name or reference, optionally restricted to one status."""
    needle = query.lower().strip()
    result = []
    for b in bookings:
        matches_query = not needle or needle in b.guest_name.lower() or needle in b.reference.lower()
        matches_status = status == "all" or b.status.value == status
        if matches_query and matches_status:
            result.append(b)
    return result


class AdminUseCase:
    """Staff actions on bookings and on the settings aggregate."""

    def __init__(self, store: BookingStorePort, on_change: Callable[[], None] | None = None) -> None:
        self._store = store
        self._on_change = on_change
        self._logger = logging.getLogger(__name__)

    def confirm_booking(self, reference: str) -> Booking:
        booking = self._find(reference)
        if booking.status != BookingStatus.pending:
            raise ValueError(f"Only pending bookings can be confirmed (#{reference} is {booking.status.value})")
        updated = self._store.update_booking_status(reference, BookingStatus.confirmed)
        self._changed("Booking confirmed", reference)
        return updated

    def cancel_booking(self, reference: str) -> Booking:
        booking = self._find(reference)
        if booking.status == BookingStatus.cancelled:
            raise ValueError(f"Booking #{reference} is already cancelled")
        updated = self._store.update_booking_status(reference, BookingStatus.cancelled)
        self._changed("Booking cancelled", reference)
        return updated

    def delete_booking(self, reference: str) -> None:
        self._store.delete_booking(reference)
        self._changed("Booking deleted", reference)

    def update_inventory(self, room_type: RoomTypeKey, count: int) -> HotelSettings:
        if count < 0:
            raise ValueError("Please enter a valid number of rooms.")
        settings = self._store.get_settings()
        inventory = dict(settings.inventory)
        inventory[room_type] = count
        updated = self._store.update_settings(replace(settings, inventory=inventory))
        self._changed("Inventory updated", room_type.value)
        return updated

    def update_prices(self, prices: Mapping[RoomTypeKey, Decimal]) -> HotelSettings:
        missing = [key.value for key in RoomTypeKey if key not in prices]
        if missing:
            raise ValueError(f"Missing prices for: {', '.join(missing)}")
        if any(value < 0 for value in prices.values()):
            raise ValueError("Prices must not be negative.")
        settings = self._store.get_settings()
        updated = self._store.update_settings(replace(settings, prices=dict(prices)))
        self._changed("Prices updated", None)
        return updated

    def replace_rate_plans(self, plans: list[RatePlan]) -> HotelSettings:
        codes = [plan.code for plan in plans]
        if len(codes) != len(set(codes)):
            raise ValueError("Rate plan codes must be unique.")
        if any(plan.nightly_price < 0 for plan in plans):
            raise ValueError("Rate plan prices must not be negative.")
        settings = self._store.get_settings()
        updated = self._store.update_settings(replace(settings, rate_plans=tuple(plans)))
        self._changed("Rate plans updated", None)
        return updated

    def _find(self, reference: str) -> Booking:
        for booking in self._store.list_bookings():
            if booking.reference == reference:
                return booking
        raise KeyError(reference)

    def _changed(self, event: str, reference: str | None) -> None:
        self._logger.info(event, extra={"reason": reference})
        if self._on_change is not None:
            self._on_change()
