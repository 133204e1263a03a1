#!/usr/bin/env python3
"""
Interactive local tape chart harness (no HTTP, no Supabase unless configured).

Usage:
  python3 scripts/tape_chart_local.py

What it does:
- Builds a tape chart session through the project wiring
- Seeds the in-memory store with a few demo bookings when it is empty
- Prints the chart as text and lets you move bookings and cycle room statuses
"""

from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hotel_admin.application.exceptions import WriteFailureError
from hotel_admin.application.utils.date_utils import month_start, parse_date, shift_month, today_in
from hotel_admin.core.config import settings
from hotel_admin.domain.entities.booking import Booking, BookingStatus, RoomTypeKey
from hotel_admin.domain.entities.tape_chart import DropTarget, GridDescription
from hotel_admin.infrastructure.store.memory_store import MemoryBookingStore
from hotel_admin.wiring.dependencies import get_booking_store, get_session_registry

TIER_MARKS = {"high": "#", "medium": "+", "low": "."}


def _seed(store: MemoryBookingStore, anchor: date) -> None:
    demo = [
        ("Ana Cruz", RoomTypeKey.single, 1, 3, BookingStatus.confirmed),
        ("Ben Reyes", RoomTypeKey.single, 2, 4, BookingStatus.pending),
        ("Cara Lim", RoomTypeKey.deluxe, 5, 9, BookingStatus.checked_in),
        ("Dan Sy", RoomTypeKey.family, 10, 12, BookingStatus.confirmed),
    ]
    for i, (guest, room_type, start, end, status) in enumerate(demo, 1):
        nights = end - start
        store.insert_booking(
            Booking(
                id=f"demo-{i}",
                reference=f"DHV-DEMO0{i}",
                room_type=room_type,
                check_in=anchor + timedelta(days=start - 1),
                check_out=anchor + timedelta(days=end - 1),
                status=status,
                guest_name=guest,
                guest_email=f"{guest.split()[0].lower()}@example.com",
                amount=Decimal(nights * 200),
                room_label=room_type.display_name,
                created_at=datetime.now(timezone.utc),
            )
        )


def _print_header(session_id: str) -> None:
    print("\nLocal Tape Chart")
    print("-" * 60)
    print(f"session_id: {session_id}")
    print("Commands: /prev, /next, /move <booking_id> <room_number> <YYYY-MM-DD>,")
    print("          /status <room_number>, /list, /quit, /help")
    print("-" * 60)


def _print_chart(grid: GridDescription) -> None:
    print(f"\n{grid.window_start} .. {grid.window_end - timedelta(days=1)}")
    for notice in grid.notices:
        print(f"! {notice}")
    if grid.error:
        print(f"ERROR: {grid.error}")
        return

    day_row = "".join(f"{d.date.day:>3}" for d in grid.days)
    for section in grid.sections:
        print(f"\n{section.label} ({section.inventory_count} rooms, {section.nightly_price}/night)")
        print(f"{'':>12}{day_row}")
        for row in section.slot_rows:
            cells = ["  ."] * len(grid.days)
            for bar in row.bars:
                mark = bar.reference[-1]
                for i in range(bar.start_index, bar.start_index + bar.span_days):
                    cells[i] = f"  {mark}"
            print(f"{row.room_number:>5} {row.room_status.value[:5]:<6}{''.join(cells)}")
        occupancy = "".join(f"  {TIER_MARKS[c.tier.value]}" for c in section.occupancy)
        print(f"{'occupancy':>12}{occupancy}")


def main() -> None:
    anchor = month_start(today_in(settings.HOTEL_TIMEZONE))
    store = get_booking_store()
    if isinstance(store, MemoryBookingStore) and not store.list_bookings():
        _seed(store, anchor)

    session_id, session = get_session_registry().get_or_create("local")
    _print_header(session_id)
    _print_chart(session.render(anchor))

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        parts = user_text.split()
        cmd = parts[0].lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /prev, /next -> move the visible window by one month")
            print("  /move <booking_id> <room_number> <date> -> drag a booking onto a room and day")
            print("  /status <room_number> -> cycle clean -> dirty -> maintenance")
            print("  /list -> show booking ids")
            print("  /quit -> exit")
            continue
        if cmd in ("/prev", "/next"):
            anchor = shift_month(anchor, -1 if cmd == "/prev" else 1)
        elif cmd == "/list":
            for b in store.list_bookings():
                print(f"{b.id:<10} {b.reference:<12} {b.room_type.value:<7} {b.check_in} -> {b.check_out} {b.guest_name}")
            continue
        elif cmd == "/status" and len(parts) == 2:
            try:
                status = session.cycle_room_status(int(parts[1]))
            except ValueError as e:
                print(f"ERROR: {e}")
                continue
            print(f"Room {parts[1]} is now {status.value}")
        elif cmd == "/move" and len(parts) == 4:
            booking_id, room_number, day = parts[1], parts[2], parts[3]
            try:
                room_type = RoomTypeKey.from_room_number(int(room_number))
                target = DropTarget(
                    room_type=room_type,
                    slot_number=int(room_number) - room_type.prefix * 100,
                    date=parse_date(day),
                )
                session.start_drag(booking_id)
                result = session.drop(target)
            except KeyError:
                print(f"ERROR: Booking {booking_id} not found")
                continue
            except (ValueError, WriteFailureError) as e:
                print(f"ERROR: {e}")
                continue
            print(f"{result.outcome.value}: {result.reason or result.room_label}")
        else:
            print("Unknown command. Type /help.")
            continue

        _print_chart(session.render(anchor))


if __name__ == "__main__":
    main()
