from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from hotel_admin.api.v1.schemas import (
    BookingListSchema,
    BookingSchema,
    DashboardSchema,
    GuestSchema,
    InventoryUpdateSchema,
    PricesUpdateSchema,
    RatePlanSchema,
    SettingsSchema,
)
from hotel_admin.application.exceptions import BookingStoreError
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.use_cases.admin import (
    AdminUseCase,
    dashboard_stats,
    filter_bookings,
    guest_directory,
)
from hotel_admin.application.utils.date_utils import today_in
from hotel_admin.core.config import settings
from hotel_admin.domain.entities.booking import Booking, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RatePlan
from hotel_admin.wiring.dependencies import get_admin_use_case, get_booking_store

router = APIRouter()
logger = logging.getLogger(__name__)

RECENT_BOOKINGS = 5


def booking_schema(b: Booking) -> BookingSchema:
    return BookingSchema(
        id=b.id,
        reference=b.reference,
        room_type=b.room_type,
        room_label=b.room_label,
        check_in=b.check_in,
        check_out=b.check_out,
        nights=b.nights,
        status=b.status.value,
        guest_name=b.guest_name,
        guest_email=b.guest_email,
        guest_phone=b.guest_phone,
        amount=float(b.amount),
    )


def _settings_schema(s: HotelSettings) -> SettingsSchema:
    return SettingsSchema(
        prices={key.value: float(value) for key, value in s.prices.items()},
        inventory={key.value: value for key, value in s.inventory.items()},
        rate_plans=[
            RatePlanSchema(code=p.code, name=p.name, room_type=p.room_type, nightly_price=p.nightly_price)
            for p in s.rate_plans
        ],
        room_statuses={number: status.value for number, status in s.room_statuses.items()},
    )


def _store_failure(e: BookingStoreError) -> HTTPException:
    logger.error("Booking store request failed", extra={"error": str(e)})
    return HTTPException(status_code=502, detail=str(e))


@router.get("/dashboard", response_model=DashboardSchema)
def get_dashboard(store: BookingStorePort = Depends(get_booking_store)):
    try:
        bookings = store.list_bookings()
        hotel_settings = store.get_settings()
    except BookingStoreError as e:
        raise _store_failure(e)
    stats = dashboard_stats(bookings, hotel_settings, today_in(settings.HOTEL_TIMEZONE))
    return DashboardSchema(
        total_revenue=float(stats.total_revenue),
        booking_count=stats.booking_count,
        guest_count=stats.guest_count,
        pending_count=stats.pending_count,
        occupancy_pct_today=stats.occupancy_pct_today,
        recent_bookings=[booking_schema(b) for b in bookings[:RECENT_BOOKINGS]],
    )


@router.get("/bookings", response_model=BookingListSchema)
def list_bookings(
    q: str = Query(""),
    status: str = Query("all"),
    store: BookingStorePort = Depends(get_booking_store),
):
    try:
        bookings = store.list_bookings()
    except BookingStoreError as e:
        raise _store_failure(e)
    filtered = filter_bookings(bookings, query=q, status=status)
    return BookingListSchema(total=len(filtered), bookings=[booking_schema(b) for b in filtered])


@router.get("/guests", response_model=list[GuestSchema])
def list_guests(store: BookingStorePort = Depends(get_booking_store)):
    try:
        bookings = store.list_bookings()
    except BookingStoreError as e:
        raise _store_failure(e)
    return [
        GuestSchema(
            guest_name=g.guest_name,
            email=g.email,
            phone=g.phone,
            total_stays=g.total_stays,
            total_spent=float(g.total_spent),
            last_visit=g.last_visit,
        )
        for g in guest_directory(bookings)
    ]


@router.post("/bookings/{reference}/confirm", response_model=BookingSchema)
def confirm_booking(reference: str, uc: AdminUseCase = Depends(get_admin_use_case)):
    try:
        return booking_schema(uc.confirm_booking(reference))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Booking #{reference} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise _store_failure(e)


@router.post("/bookings/{reference}/cancel", response_model=BookingSchema)
def cancel_booking(reference: str, uc: AdminUseCase = Depends(get_admin_use_case)):
    try:
        return booking_schema(uc.cancel_booking(reference))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Booking #{reference} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise _store_failure(e)


@router.delete("/bookings/{reference}", status_code=204)
def delete_booking(reference: str, uc: AdminUseCase = Depends(get_admin_use_case)):
    try:
        uc.delete_booking(reference)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Booking #{reference} not found")
    except BookingStoreError as e:
        raise _store_failure(e)


@router.get("/settings", response_model=SettingsSchema)
def get_settings(store: BookingStorePort = Depends(get_booking_store)):
    try:
        return _settings_schema(store.get_settings())
    except BookingStoreError as e:
        raise _store_failure(e)


@router.put("/settings/inventory/{room_type}", response_model=SettingsSchema)
def update_inventory(
    room_type: RoomTypeKey,
    req: InventoryUpdateSchema,
    uc: AdminUseCase = Depends(get_admin_use_case),
):
    try:
        return _settings_schema(uc.update_inventory(room_type, req.count))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise _store_failure(e)


@router.put("/settings/prices", response_model=SettingsSchema)
def update_prices(req: PricesUpdateSchema, uc: AdminUseCase = Depends(get_admin_use_case)):
    prices = {
        RoomTypeKey.single: req.single,
        RoomTypeKey.deluxe: req.deluxe,
        RoomTypeKey.family: req.family,
    }
    try:
        return _settings_schema(uc.update_prices(prices))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise _store_failure(e)


@router.put("/settings/rate-plans", response_model=SettingsSchema)
def replace_rate_plans(req: list[RatePlanSchema], uc: AdminUseCase = Depends(get_admin_use_case)):
    plans = [
        RatePlan(code=p.code, name=p.name, room_type=p.room_type, nightly_price=p.nightly_price)
        for p in req
    ]
    try:
        return _settings_schema(uc.replace_rate_plans(plans))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise _store_failure(e)
