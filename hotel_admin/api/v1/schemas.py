from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from hotel_admin.domain.entities.booking import RoomTypeKey


class DayColumnSchema(BaseModel):
    index: int
    date: date
    is_today: bool
    is_weekend: bool


class BookingBarSchema(BaseModel):
    booking_id: str
    reference: str
    guest_name: str
    status: str
    start_index: int
    span_days: int
    width: int
    continues_before: bool
    continues_after: bool


class SlotRowSchema(BaseModel):
    slot_number: int
    room_number: int
    room_status: str
    bars: list[BookingBarSchema] = Field(default_factory=list)


class OccupancyCellSchema(BaseModel):
    date: date
    booked_count: int
    inventory_count: int
    available: int
    occupancy_pct: int
    tier: str


class RoomTypeSectionSchema(BaseModel):
    room_type: RoomTypeKey
    label: str
    nightly_price: float
    inventory_count: int
    slot_rows: list[SlotRowSchema] = Field(default_factory=list)
    occupancy: list[OccupancyCellSchema] = Field(default_factory=list)


class TapeChartResponseSchema(BaseModel):
    session_id: str
    window_start: date
    window_end: date
    prev_anchor: date
    next_anchor: date
    day_width: int
    days: list[DayColumnSchema] = Field(default_factory=list)
    sections: list[RoomTypeSectionSchema] = Field(default_factory=list)
    notices: list[str] = Field(default_factory=list)
    error: str | None = None


class DragRequestSchema(BaseModel):
    booking_id: str


class DragStateSchema(BaseModel):
    session_id: str
    status: str
    booking_id: str | None = None
    room_type: RoomTypeKey | None = None


class DropRequestSchema(BaseModel):
    room_type: RoomTypeKey
    slot_number: int
    date: date
    anchor: date | None = None


class DropResponseSchema(BaseModel):
    session_id: str
    outcome: str
    booking_id: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    slot_number: int | None = None
    room_label: str | None = None
    reason: str | None = None
    chart: TapeChartResponseSchema | None = None


class RoomStatusResponseSchema(BaseModel):
    room_number: int
    status: str


class BookingSchema(BaseModel):
    id: str
    reference: str
    room_type: RoomTypeKey
    room_label: str | None = None
    check_in: date
    check_out: date
    nights: int
    status: str
    guest_name: str
    guest_email: str
    guest_phone: str
    amount: float


class BookingListSchema(BaseModel):
    total: int
    bookings: list[BookingSchema]


class DashboardSchema(BaseModel):
    total_revenue: float
    booking_count: int
    guest_count: int
    pending_count: int
    occupancy_pct_today: int
    recent_bookings: list[BookingSchema] = Field(default_factory=list)


class GuestSchema(BaseModel):
    guest_name: str
    email: str
    phone: str
    total_stays: int
    total_spent: float
    last_visit: date


class InventoryUpdateSchema(BaseModel):
    count: int


class PricesUpdateSchema(BaseModel):
    single: Decimal
    deluxe: Decimal
    family: Decimal


class RatePlanSchema(BaseModel):
    code: str
    name: str
    room_type: RoomTypeKey
    nightly_price: Decimal


class SettingsSchema(BaseModel):
    prices: dict[str, float]
    inventory: dict[str, int]
    rate_plans: list[RatePlanSchema] = Field(default_factory=list)
    room_statuses: dict[str, str] = Field(default_factory=dict)


class QuoteRequestSchema(BaseModel):
    room_type: RoomTypeKey
    check_in: date
    check_out: date
    addon_cost: Decimal = Decimal("0")


class QuoteResponseSchema(BaseModel):
    room_type: RoomTypeKey
    nights: int
    nightly_price: float
    room_total: float
    addon_cost: float
    total: float


class BookingCreateSchema(BaseModel):
    room_type: RoomTypeKey
    check_in: date
    check_out: date
    first_name: str
    last_name: str
    email: str
    phone: str
    addon_cost: Decimal = Decimal("0")
