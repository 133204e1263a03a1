from __future__ import annotations

import logging
from dataclasses import replace

from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.domain.entities.booking import RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RoomStatus

logger = logging.getLogger(__name__)


def validate_room_number(settings: HotelSettings, room_number: int) -> RoomTypeKey:
    """Room numbers are prefix * 100 + slot, with the slot within the type's inventory."""
    room_type = RoomTypeKey.from_room_number(room_number)
    slot = room_number - room_type.prefix * 100
    inventory_count = settings.config_for(room_type).inventory_count
    if not 1 <= slot <= inventory_count:
        raise ValueError(f"Room {room_number} does not exist ({room_type.value} has {inventory_count} rooms)")
    return room_type


def cycle_room_status(store: BookingStorePort, room_number: int) -> RoomStatus:
    """Advance clean -> dirty -> maintenance -> clean and persist the whole status map."""
    settings = store.get_settings()
    validate_room_number(settings, room_number)

    new_status = settings.room_status(room_number).next()
    statuses = dict(settings.room_statuses)
    statuses[str(room_number)] = new_status
    store.update_settings(replace(settings, room_statuses=statuses))

    logger.info("Room status changed", extra={"room": room_number, "reason": new_status.value})
    return new_status
