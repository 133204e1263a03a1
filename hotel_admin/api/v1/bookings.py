from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from hotel_admin.api.v1.admin import booking_schema
from hotel_admin.api.v1.schemas import (
    BookingCreateSchema,
    BookingSchema,
    QuoteRequestSchema,
    QuoteResponseSchema,
)
from hotel_admin.application.exceptions import BookingStoreError
from hotel_admin.application.use_cases.booking_flow import BookingFlowUseCase, BookingRequest
from hotel_admin.application.utils.date_utils import today_in
from hotel_admin.core.config import settings
from hotel_admin.wiring.dependencies import get_booking_flow_use_case

router = APIRouter()


@router.post("/quote", response_model=QuoteResponseSchema)
def quote(req: QuoteRequestSchema, uc: BookingFlowUseCase = Depends(get_booking_flow_use_case)):
    try:
        q = uc.quote(req.room_type, req.check_in, req.check_out, req.addon_cost)
    except BookingStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return QuoteResponseSchema(
        room_type=q.room_type,
        nights=q.nights,
        nightly_price=float(q.nightly_price),
        room_total=float(q.room_total),
        addon_cost=float(q.addon_cost),
        total=float(q.total),
    )


@router.post("", response_model=BookingSchema, status_code=201)
def create_booking(req: BookingCreateSchema, uc: BookingFlowUseCase = Depends(get_booking_flow_use_case)):
    request = BookingRequest(
        room_type=req.room_type,
        check_in=req.check_in,
        check_out=req.check_out,
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        phone=req.phone,
        addon_cost=req.addon_cost,
    )
    try:
        booking = uc.create_booking(request, today=today_in(settings.HOTEL_TIMEZONE))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return booking_schema(booking)
