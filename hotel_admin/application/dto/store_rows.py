from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hotel_admin.application.exceptions import MalformedBookingError
from hotel_admin.application.utils.date_utils import format_date, parse_date
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RatePlan, RoomStatus

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value if value not in (None, "") else 0))
    except InvalidOperation as e:
        raise ValueError(f"Not a number: {value!r}") from e


class BookingRowDTO(BaseModel):
    """One row of the store's `bookings` relation, as the website writes it."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | int
    ref: str | None = None
    guest: str | None = ""
    email: str | None = ""
    phone: str | None = ""
    room: str | None = ""
    checkin: Any = None
    checkout: Any = None
    nights: int | None = None
    amount: Any = 0
    status: str = BookingStatus.pending.value
    created_at: str | None = Field(default=None, alias="createdAt")

    def to_domain(self) -> Booking:
        booking_id = str(self.id)
        try:
            check_in = parse_date(self.checkin)
            check_out = parse_date(self.checkout)
        except ValueError as e:
            raise MalformedBookingError(f"Booking {booking_id} has unparseable dates: {e}") from e
        if check_out <= check_in:
            raise MalformedBookingError(f"Booking {booking_id} checks out on or before check-in")

        try:
            room_type = RoomTypeKey.from_label(self.room or "")
            status = BookingStatus(self.status)
            amount = _to_decimal(self.amount)
        except ValueError as e:
            raise MalformedBookingError(f"Booking {booking_id}: {e}") from e

        created_at = None
        if self.created_at:
            try:
                created_at = datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))
            except ValueError:
                created_at = None

        return Booking(
            id=booking_id,
            reference=self.ref or booking_id,
            room_type=room_type,
            check_in=check_in,
            check_out=check_out,
            status=status,
            guest_name=self.guest or "",
            guest_email=self.email or "",
            guest_phone=self.phone or "",
            amount=amount,
            room_label=self.room or None,
            created_at=created_at,
        )

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingRowDTO":
        return cls(
            id=booking.id,
            ref=booking.reference,
            guest=booking.guest_name,
            email=booking.guest_email,
            phone=booking.guest_phone,
            room=booking.room_label or booking.room_type.display_name,
            checkin=format_date(booking.check_in),
            checkout=format_date(booking.check_out),
            nights=booking.nights,
            amount=float(booking.amount),
            status=booking.status.value,
            createdAt=booking.created_at.isoformat() if booking.created_at else None,
        )

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def parse_booking_row(row: dict[str, Any]) -> Booking:
    try:
        dto = BookingRowDTO.model_validate(row)
    except ValidationError as e:
        raise MalformedBookingError(f"Invalid booking row: {e.error_count()} error(s)") from e
    return dto.to_domain()


def parse_booking_rows(rows: list[dict[str, Any]]) -> list[Booking]:
    """Ingest store rows, skipping (and logging) malformed records."""
    bookings: list[Booking] = []
    for row in rows:
        try:
            bookings.append(parse_booking_row(row))
        except MalformedBookingError as e:
            logger.warning("Skipping malformed booking row", extra={"booking_id": row.get("id"), "reason": str(e)})
    return bookings


class SettingsRowDTO(BaseModel):
    """The singleton `settings` row."""

    model_config = ConfigDict(extra="ignore")

    id: int = 1
    prices: dict[str, Any] = Field(default_factory=dict)
    inventory: dict[str, Any] = Field(default_factory=dict)
    rate_plans: list[dict[str, Any]] | None = Field(default_factory=list)
    room_statuses: dict[str, str] | None = Field(default_factory=dict)

    def to_domain(self) -> HotelSettings:
        prices: dict[RoomTypeKey, Decimal] = {}
        for key, value in (self.prices or {}).items():
            try:
                prices[RoomTypeKey(key)] = _to_decimal(value)
            except ValueError:
                logger.warning("Ignoring price entry", extra={"room_type": key})

        inventory: dict[RoomTypeKey, int] = {}
        for key, value in (self.inventory or {}).items():
            try:
                inventory[RoomTypeKey(key)] = max(int(value), 0)
            except (TypeError, ValueError):
                logger.warning("Ignoring inventory entry", extra={"room_type": key})

        rate_plans: list[RatePlan] = []
        for plan in self.rate_plans or []:
            try:
                rate_plans.append(
                    RatePlan(
                        code=str(plan["code"]),
                        name=str(plan.get("name") or plan["code"]),
                        room_type=RoomTypeKey(plan["room_type"]),
                        nightly_price=_to_decimal(plan.get("nightly_price")),
                    )
                )
            except (KeyError, ValueError):
                logger.warning("Ignoring malformed rate plan", extra={"reason": str(plan)})

        room_statuses: dict[str, RoomStatus] = {}
        for room_number, status in (self.room_statuses or {}).items():
            try:
                room_statuses[str(room_number)] = RoomStatus(status)
            except ValueError:
                logger.warning("Ignoring room status entry", extra={"reason": f"{room_number}={status}"})

        return HotelSettings(
            prices=prices,
            inventory=inventory,
            rate_plans=tuple(rate_plans),
            room_statuses=room_statuses,
        )

    @classmethod
    def from_domain(cls, settings: HotelSettings, settings_id: int = 1) -> "SettingsRowDTO":
        return cls(
            id=settings_id,
            prices={key.value: float(value) for key, value in settings.prices.items()},
            inventory={key.value: value for key, value in settings.inventory.items()},
            rate_plans=[
                {
                    "code": plan.code,
                    "name": plan.name,
                    "room_type": plan.room_type.value,
                    "nightly_price": float(plan.nightly_price),
                }
                for plan in settings.rate_plans
            ],
            room_statuses={number: status.value for number, status in settings.room_statuses.items()},
        )


def default_settings(prices: dict[str, Any], inventory: dict[str, Any]) -> HotelSettings:
    """Settings used when the store cannot be read."""
    return SettingsRowDTO(prices=prices, inventory=inventory).to_domain()
