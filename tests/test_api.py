"""
Tests for the HTTP surface: tape chart, admin and public booking routes.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from hotel_admin.application.use_cases.admin import AdminUseCase
from hotel_admin.application.use_cases.booking_flow import BookingFlowUseCase
from hotel_admin.application.use_cases.tape_chart_session import TapeChartSession, TapeChartSessionRegistry
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings
from hotel_admin.infrastructure.store.memory_store import MemoryBookingStore
from hotel_admin.main import app
from hotel_admin.wiring.dependencies import (
    get_admin_use_case,
    get_booking_flow_use_case,
    get_booking_store,
    get_session_registry,
)

MAX_SESSIONS = 8

SETTINGS = HotelSettings(
    prices={RoomTypeKey.single: Decimal("180"), RoomTypeKey.deluxe: Decimal("320"), RoomTypeKey.family: Decimal("420")},
    inventory={RoomTypeKey.single: 2, RoomTypeKey.deluxe: 2, RoomTypeKey.family: 1},
)


def _bookings() -> list[Booking]:
    return [
        Booking(
            id="1",
            reference="DHV-000001",
            room_type=RoomTypeKey.single,
            check_in=date(2025, 3, 1),
            check_out=date(2025, 3, 3),
            status=BookingStatus.confirmed,
            guest_name="Ana Cruz",
            guest_email="ana@example.com",
            amount=Decimal("360"),
        ),
        Booking(
            id="2",
            reference="DHV-000002",
            room_type=RoomTypeKey.single,
            check_in=date(2025, 3, 2),
            check_out=date(2025, 3, 4),
            guest_name="Ben Reyes",
            guest_email="ben@example.com",
            amount=Decimal("360"),
        ),
    ]


@pytest.fixture
def store():
    return MemoryBookingStore(bookings=_bookings(), settings=SETTINGS)


@pytest.fixture
def registry(store):
    registry = TapeChartSessionRegistry(
        factory=lambda: TapeChartSession(store=store, default_settings=SETTINGS, on_change=registry.invalidate_all),
        max_sessions=MAX_SESSIONS,
    )
    return registry


@pytest.fixture
def client(store, registry):
    app.dependency_overrides[get_booking_store] = lambda: store
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_admin_use_case] = lambda: AdminUseCase(store, on_change=registry.invalidate_all)
    app.dependency_overrides[get_booking_flow_use_case] = lambda: BookingFlowUseCase(
        store, on_change=registry.invalidate_all
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


HEADERS = {"X-Session-Id": "front-desk"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_tape_chart_for_anchor(client):
    response = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=HEADERS)
    assert response.status_code == 200

    data = response.json()
    assert data["session_id"] == "front-desk"
    assert data["window_start"] == "2025-03-01"
    assert data["window_end"] == "2025-04-01"
    assert data["prev_anchor"] == "2025-02-01"
    assert data["next_anchor"] == "2025-04-01"
    assert len(data["days"]) == 31

    single = data["sections"][0]
    assert single["room_type"] == "single"
    assert [row["room_number"] for row in single["slot_rows"]] == [101, 102]
    assert [cell["occupancy_pct"] for cell in single["occupancy"][:4]] == [50, 100, 50, 0]


def test_tape_chart_navigation(client):
    data = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01", "nav": 1}).json()
    assert data["window_start"] == "2025-04-01"
    assert len(data["days"]) == 30
    assert data["session_id"]


def test_drag_and_drop_moves_booking(client, store):
    drag = client.post("/api/v1/tape-chart/drag", json={"booking_id": "1"}, headers=HEADERS)
    assert drag.status_code == 200
    assert drag.json()["status"] == "dragging"

    drop = client.post(
        "/api/v1/tape-chart/drop",
        json={"room_type": "single", "slot_number": 2, "date": "2025-03-20", "anchor": "2025-03-01"},
        headers=HEADERS,
    )
    assert drop.status_code == 200

    data = drop.json()
    assert data["outcome"] == "dropped_valid"
    assert data["check_in"] == "2025-03-20"
    assert data["check_out"] == "2025-03-22"
    assert data["room_label"] == "Single Room 102"
    bars = data["chart"]["sections"][0]["slot_rows"][1]["bars"]
    assert [bar["booking_id"] for bar in bars] == ["2", "1"]

    moved = next(b for b in store.list_bookings() if b.id == "1")
    assert moved.room_label == "Single Room 102"


def test_cross_type_drop_is_rejected(client):
    client.post("/api/v1/tape-chart/drag", json={"booking_id": "1"}, headers=HEADERS)
    data = client.post(
        "/api/v1/tape-chart/drop",
        json={"room_type": "family", "slot_number": 1, "date": "2025-03-20"},
        headers=HEADERS,
    ).json()

    assert data["outcome"] == "dropped_invalid"
    assert data["chart"] is None


def test_drop_without_drag_is_ignored(client):
    data = client.post(
        "/api/v1/tape-chart/drop",
        json={"room_type": "single", "slot_number": 1, "date": "2025-03-20"},
        headers=HEADERS,
    ).json()
    assert data["outcome"] == "ignored"


def test_drag_unknown_booking(client):
    response = client.post("/api/v1/tape-chart/drag", json={"booking_id": "missing"}, headers=HEADERS)
    assert response.status_code == 404


def test_cancel_drag(client):
    client.post("/api/v1/tape-chart/drag", json={"booking_id": "1"}, headers=HEADERS)
    assert client.post("/api/v1/tape-chart/drag/cancel", headers=HEADERS).json()["status"] == "idle"


def test_cycle_room_status(client):
    response = client.post("/api/v1/rooms/101/status/cycle", headers=HEADERS)
    assert response.json() == {"room_number": 101, "status": "dirty"}

    chart = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=HEADERS).json()
    assert chart["sections"][0]["slot_rows"][0]["room_status"] == "dirty"

    assert client.post("/api/v1/rooms/103/status/cycle").status_code == 400


def test_move_from_one_admin_refreshes_another(client):
    night_audit = {"X-Session-Id": "night-audit"}
    before = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=night_audit).json()
    assert before["sections"][0]["occupancy"][0]["booked_count"] == 1

    client.post("/api/v1/tape-chart/drag", json={"booking_id": "1"}, headers=HEADERS)
    drop = client.post(
        "/api/v1/tape-chart/drop",
        json={"room_type": "single", "slot_number": 2, "date": "2025-03-20"},
        headers=HEADERS,
    ).json()
    assert drop["outcome"] == "dropped_valid"

    after = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=night_audit).json()
    occupancy = after["sections"][0]["occupancy"]
    assert occupancy[0]["booked_count"] == 0
    assert occupancy[0]["occupancy_pct"] == 0
    assert occupancy[19]["booked_count"] == 1


def test_anonymous_requests_do_not_grow_sessions_without_bound(client, registry):
    session_ids = {
        client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}).json()["session_id"] for _ in range(50)
    }

    assert len(session_ids) == 50
    assert len(registry) == MAX_SESSIONS


def test_dashboard(client):
    data = client.get("/api/v1/admin/dashboard").json()
    assert data["booking_count"] == 2
    assert data["pending_count"] == 1
    assert data["guest_count"] == 2
    assert data["total_revenue"] == 720.0


def test_booking_list_filters(client):
    data = client.get("/api/v1/admin/bookings", params={"q": "ben"}).json()
    assert data["total"] == 1
    assert data["bookings"][0]["reference"] == "DHV-000002"


def test_confirm_and_delete_booking(client):
    confirmed = client.post("/api/v1/admin/bookings/DHV-000002/confirm")
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"

    assert client.post("/api/v1/admin/bookings/DHV-000002/confirm").status_code == 400
    assert client.post("/api/v1/admin/bookings/DHV-NOPE00/confirm").status_code == 404
    assert client.delete("/api/v1/admin/bookings/DHV-000002").status_code == 204
    assert client.get("/api/v1/admin/bookings").json()["total"] == 1


def test_admin_change_refreshes_tape_chart(client):
    before = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=HEADERS).json()
    assert len(before["sections"][2]["slot_rows"]) == 1

    response = client.put("/api/v1/admin/settings/inventory/family", json={"count": 3})
    assert response.status_code == 200
    assert response.json()["inventory"]["family"] == 3

    after = client.get("/api/v1/tape-chart", params={"anchor": "2025-03-01"}, headers=HEADERS).json()
    assert len(after["sections"][2]["slot_rows"]) == 3


def test_invalid_inventory(client):
    response = client.put("/api/v1/admin/settings/inventory/deluxe", json={"count": -1})
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid number of rooms."


def test_quote(client):
    data = client.post(
        "/api/v1/bookings/quote",
        json={"room_type": "family", "check_in": "2099-05-01", "check_out": "2099-05-03"},
    ).json()
    assert data["nights"] == 2
    assert data["total"] == 840.0


def test_create_booking(client, store):
    response = client.post(
        "/api/v1/bookings",
        json={
            "room_type": "deluxe",
            "check_in": "2099-05-01",
            "check_out": "2099-05-04",
            "first_name": "Cara",
            "last_name": "Lim",
            "email": "cara@example.com",
            "phone": "09170000000",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["amount"] == 960.0
    assert len(store.list_bookings()) == 3


def test_create_booking_validation_error(client):
    response = client.post(
        "/api/v1/bookings",
        json={
            "room_type": "deluxe",
            "check_in": "2099-05-04",
            "check_out": "2099-05-01",
            "first_name": "Cara",
            "last_name": "Lim",
            "email": "not-an-email",
            "phone": "09170000000",
        },
    )
    assert response.status_code == 400
