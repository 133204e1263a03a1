from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from hotel_admin.api.v1.schemas import (
    BookingBarSchema,
    DayColumnSchema,
    DragRequestSchema,
    DragStateSchema,
    DropRequestSchema,
    DropResponseSchema,
    OccupancyCellSchema,
    RoomStatusResponseSchema,
    RoomTypeSectionSchema,
    SlotRowSchema,
    TapeChartResponseSchema,
)
from hotel_admin.application.exceptions import BookingStoreError, WriteFailureError
from hotel_admin.application.use_cases.tape_chart_session import TapeChartSession, TapeChartSessionRegistry
from hotel_admin.application.utils.date_utils import month_start, shift_month, today_in
from hotel_admin.core.config import settings
from hotel_admin.domain.entities.tape_chart import DragState, DropOutcome, DropTarget, GridDescription
from hotel_admin.wiring.dependencies import get_session_registry

router = APIRouter()
logger = logging.getLogger(__name__)


def _chart_schema(session_id: str, anchor: date, grid: GridDescription) -> TapeChartResponseSchema:
    return TapeChartResponseSchema(
        session_id=session_id,
        window_start=grid.window_start,
        window_end=grid.window_end,
        prev_anchor=shift_month(anchor, -1),
        next_anchor=shift_month(anchor, 1),
        day_width=grid.day_width,
        days=[
            DayColumnSchema(index=d.index, date=d.date, is_today=d.is_today, is_weekend=d.is_weekend)
            for d in grid.days
        ],
        sections=[
            RoomTypeSectionSchema(
                room_type=s.room_type,
                label=s.label,
                nightly_price=float(s.nightly_price),
                inventory_count=s.inventory_count,
                slot_rows=[
                    SlotRowSchema(
                        slot_number=row.slot_number,
                        room_number=row.room_number,
                        room_status=row.room_status.value,
                        bars=[
                            BookingBarSchema(
                                booking_id=bar.booking_id,
                                reference=bar.reference,
                                guest_name=bar.guest_name,
                                status=bar.status.value,
                                start_index=bar.start_index,
                                span_days=bar.span_days,
                                width=bar.width,
                                continues_before=bar.continues_before,
                                continues_after=bar.continues_after,
                            )
                            for bar in row.bars
                        ],
                    )
                    for row in s.slot_rows
                ],
                occupancy=[
                    OccupancyCellSchema(
                        date=c.date,
                        booked_count=c.booked_count,
                        inventory_count=c.inventory_count,
                        available=c.available,
                        occupancy_pct=c.occupancy_pct,
                        tier=c.tier.value,
                    )
                    for c in s.occupancy
                ],
            )
            for s in grid.sections
        ],
        notices=list(grid.notices),
        error=grid.error,
    )


def _drag_schema(session_id: str, state: DragState) -> DragStateSchema:
    return DragStateSchema(
        session_id=session_id,
        status=state.status.value,
        booking_id=state.booking_id,
        room_type=state.room_type,
    )


def _session(
    registry: TapeChartSessionRegistry,
    session_id: str | None,
) -> tuple[str, TapeChartSession]:
    return registry.get_or_create(session_id)


@router.get("/tape-chart", response_model=TapeChartResponseSchema)
def get_tape_chart(
    anchor: date | None = Query(None),
    nav: int = Query(0, description="Months to move the anchor by (-1 back, 1 forward)"),
    x_session_id: str | None = Header(None),
    registry: TapeChartSessionRegistry = Depends(get_session_registry),
):
    session_id, session = _session(registry, x_session_id)
    anchor = anchor or month_start(today_in(settings.HOTEL_TIMEZONE))
    if nav:
        anchor = shift_month(anchor, nav)
    grid = session.render(anchor)
    return _chart_schema(session_id, anchor, grid)


@router.post("/tape-chart/drag", response_model=DragStateSchema)
def start_drag(
    req: DragRequestSchema,
    x_session_id: str | None = Header(None),
    registry: TapeChartSessionRegistry = Depends(get_session_registry),
):
    session_id, session = _session(registry, x_session_id)
    try:
        state = session.start_drag(req.booking_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Booking {req.booking_id} not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _drag_schema(session_id, state)


@router.post("/tape-chart/drag/cancel", response_model=DragStateSchema)
def cancel_drag(
    x_session_id: str | None = Header(None),
    registry: TapeChartSessionRegistry = Depends(get_session_registry),
):
    session_id, session = _session(registry, x_session_id)
    return _drag_schema(session_id, session.cancel_drag())


@router.post("/tape-chart/drop", response_model=DropResponseSchema)
def drop(
    req: DropRequestSchema,
    x_session_id: str | None = Header(None),
    registry: TapeChartSessionRegistry = Depends(get_session_registry),
):
    session_id, session = _session(registry, x_session_id)
    target = DropTarget(room_type=req.room_type, slot_number=req.slot_number, date=req.date)
    try:
        result = session.drop(target)
    except WriteFailureError as e:
        raise HTTPException(status_code=502, detail=str(e))

    chart = None
    if result.outcome == DropOutcome.dropped_valid:
        anchor = req.anchor or month_start(req.date)
        chart = _chart_schema(session_id, anchor, session.render(anchor))

    return DropResponseSchema(
        session_id=session_id,
        outcome=result.outcome.value,
        booking_id=result.booking_id,
        check_in=result.check_in,
        check_out=result.check_out,
        slot_number=result.slot_number,
        room_label=result.room_label,
        reason=result.reason,
        chart=chart,
    )


@router.post("/rooms/{room_number}/status/cycle", response_model=RoomStatusResponseSchema)
def cycle_room_status(
    room_number: int,
    x_session_id: str | None = Header(None),
    registry: TapeChartSessionRegistry = Depends(get_session_registry),
):
    _, session = _session(registry, x_session_id)
    try:
        status = session.cycle_room_status(room_number)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BookingStoreError as e:
        logger.exception("Room status update failed", extra={"room": room_number, "error": str(e)})
        raise HTTPException(status_code=502, detail=str(e))
    return RoomStatusResponseSchema(room_number=room_number, status=status.value)
