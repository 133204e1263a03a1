from __future__ import annotations

import logging
import random
import re
import string
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal

from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.utils.date_utils import nights_between
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REFERENCE_PREFIX = "DHV-"
REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class StayQuote:
    room_type: RoomTypeKey
    nights: int
    nightly_price: Decimal
    room_total: Decimal
    addon_cost: Decimal
    total: Decimal


@dataclass(frozen=True)
class BookingRequest:
    room_type: RoomTypeKey
    check_in: date
    check_out: date
    first_name: str
    last_name: str
    email: str
    phone: str
    addon_cost: Decimal = Decimal("0")

    @property
    def guest_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}".strip()


def quote_stay(
    settings: HotelSettings,
    room_type: RoomTypeKey,
    check_in: date,
    check_out: date,
    addon_cost: Decimal = Decimal("0"),
) -> StayQuote:
    """Price summary shown while booking: nightly price x nights (at least one) plus add-on."""
    nights = nights_between(check_in, check_out)
    if nights <= 0:
        nights = 1
    nightly_price = settings.config_for(room_type).nightly_price
    room_total = nightly_price * nights
    return StayQuote(
        room_type=room_type,
        nights=nights,
        nightly_price=nightly_price,
        room_total=room_total,
        addon_cost=addon_cost,
        total=room_total + addon_cost,
    )


def validate_booking_request(request: BookingRequest, today: date) -> list[str]:
    errors: list[str] = []
    if request.check_in < today:
        errors.append("Check-in cannot be in the past.")
    if request.check_out <= request.check_in:
        errors.append("Check-out must be after check-in.")
    if len(request.first_name.strip()) < 2:
        errors.append("First name must be at least 2 characters.")
    if len(request.last_name.strip()) < 2:
        errors.append("Last name must be at least 2 characters.")
    if not EMAIL_PATTERN.match(request.email):
        errors.append("Please enter a valid email address.")
    if len(request.phone.strip()) < 6:
        errors.append("Please enter a valid phone number.")
    if request.addon_cost < 0:
        errors.append("Add-on cost must not be negative.")
    return errors


def generate_reference(rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    return REFERENCE_PREFIX + "".join(rng.choice(REFERENCE_ALPHABET) for _ in range(6))


class BookingFlowUseCase:
    """Public website booking: quote a stay and submit it as a pending booking."""

    def __init__(
        self,
        store: BookingStorePort,
        on_change: Callable[[], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._on_change = on_change
        self._rng = rng
        self._logger = logging.getLogger(__name__)

    def quote(self, room_type: RoomTypeKey, check_in: date, check_out: date, addon_cost: Decimal = Decimal("0")) -> StayQuote:
        return quote_stay(self._store.get_settings(), room_type, check_in, check_out, addon_cost)

    def create_booking(self, request: BookingRequest, today: date) -> Booking:
        errors = validate_booking_request(request, today)
        if errors:
            raise ValueError(" ".join(errors))

        quote = self.quote(request.room_type, request.check_in, request.check_out, request.addon_cost)
        booking = Booking(
            id=uuid.uuid4().hex,
            reference=generate_reference(self._rng),
            room_type=request.room_type,
            check_in=request.check_in,
            check_out=request.check_out,
            status=BookingStatus.pending,
            guest_name=request.guest_name,
            guest_email=request.email.strip(),
            guest_phone=request.phone.strip(),
            amount=quote.total,
            room_label=request.room_type.display_name,
            created_at=datetime.now(timezone.utc),
        )
        created = self._store.insert_booking(booking)
        self._logger.info("Booking submitted", extra={"booking_id": created.id, "room_type": created.room_type.value})
        if self._on_change is not None:
            self._on_change()
        return created
