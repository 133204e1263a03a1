from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from hotel_admin.application.dto.store_rows import (
    BookingRowDTO,
    SettingsRowDTO,
    parse_booking_row,
    parse_booking_rows,
)
from hotel_admin.application.exceptions import BookingStoreError
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.utils.date_utils import format_date
from hotel_admin.core.config import settings as app_settings
from hotel_admin.domain.entities.booking import Booking, BookingStatus
from hotel_admin.domain.entities.hotel_settings import HotelSettings


class SupabaseBookingStore(BookingStorePort):
    """Booking store backed by a hosted Supabase project, spoken to over its PostgREST API."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        settings_id: int | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url or app_settings.SUPABASE_URL
        self._api_key = api_key or app_settings.SUPABASE_ANON_KEY
        self._settings_id = settings_id or app_settings.SUPABASE_SETTINGS_ID
        self._logger = logging.getLogger(__name__)

        if not self._url or not self._api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required for the Supabase store")

        self._base_url = f"{self._url.rstrip('/')}/rest/v1"
        self._client = client or httpx.Client(timeout=timeout or app_settings.STORE_TIMEOUT_SECONDS)

    def list_bookings(self, include_cancelled: bool = True) -> list[Booking]:
        params = {"select": "*", "order": "createdAt.desc"}
        if not include_cancelled:
            params["status"] = f"neq.{BookingStatus.cancelled.value}"
        rows = self._request("GET", "/bookings", params=params)
        return parse_booking_rows(rows)

    def get_settings(self) -> HotelSettings:
        rows = self._request("GET", "/settings", params={"select": "*", "id": f"eq.{self._settings_id}"})
        if not rows:
            raise BookingStoreError(f"Settings row {self._settings_id} is missing")
        return SettingsRowDTO.model_validate(rows[0]).to_domain()

    def assign_booking(self, booking_id: str, check_in: date, check_out: date, room_label: str) -> Booking:
        payload = {
            "checkin": format_date(check_in),
            "checkout": format_date(check_out),
            "nights": (check_out - check_in).days,
            "room": room_label,
        }
        rows = self._request("PATCH", "/bookings", params={"id": f"eq.{booking_id}"}, json=payload, returning=True)
        if not rows:
            raise KeyError(booking_id)
        self._logger.info("Booking reassigned", extra={"booking_id": booking_id, "room": room_label})
        return parse_booking_row(rows[0])

    def update_booking_status(self, reference: str, status: BookingStatus) -> Booking:
        rows = self._request(
            "PATCH",
            "/bookings",
            params={"ref": f"eq.{reference}"},
            json={"status": status.value},
            returning=True,
        )
        if not rows:
            raise KeyError(reference)
        return parse_booking_row(rows[0])

    def delete_booking(self, reference: str) -> None:
        rows = self._request("DELETE", "/bookings", params={"ref": f"eq.{reference}"}, returning=True)
        if not rows:
            raise KeyError(reference)

    def insert_booking(self, booking: Booking) -> Booking:
        row = BookingRowDTO.from_domain(booking).to_row()
        row.pop("id", None)  # generated by the store
        rows = self._request("POST", "/bookings", json=row, returning=True)
        if not rows:
            raise BookingStoreError("Store returned no row for the inserted booking")
        return parse_booking_row(rows[0])

    def update_settings(self, settings: HotelSettings) -> HotelSettings:
        row = SettingsRowDTO.from_domain(settings, self._settings_id).model_dump(mode="json")
        row.pop("id", None)
        rows = self._request(
            "PATCH",
            "/settings",
            params={"id": f"eq.{self._settings_id}"},
            json=row,
            returning=True,
        )
        if not rows:
            raise BookingStoreError(f"Settings row {self._settings_id} is missing")
        return SettingsRowDTO.model_validate(rows[0]).to_domain()

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        returning: bool = False,
    ) -> list[dict[str, Any]]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if returning:
            headers["Prefer"] = "return=representation"

        try:
            response = self._client.request(method, f"{self._base_url}{path}", params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Booking store rejected request",
                extra={"status": e.response.status_code, "path": path, "error": e.response.text},
            )
            raise BookingStoreError(f"{method} {path} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            self._logger.error("Booking store unreachable", extra={"path": path, "error": str(e)})
            raise BookingStoreError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return []
        data = response.json()
        if isinstance(data, dict):
            return [data]
        return list(data)
