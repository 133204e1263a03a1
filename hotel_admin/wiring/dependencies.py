from functools import lru_cache
import logging

from hotel_admin.core.config import settings
from hotel_admin.application.dto.store_rows import default_settings
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.use_cases.admin import AdminUseCase
from hotel_admin.application.use_cases.booking_flow import BookingFlowUseCase
from hotel_admin.application.use_cases.slot_assignment import SlotAssignmentResolver
from hotel_admin.application.use_cases.tape_chart_session import TapeChartSession, TapeChartSessionRegistry
from hotel_admin.application.utils.write_locks import BookingWriteLocks
from hotel_admin.infrastructure.store.memory_store import MemoryBookingStore
from hotel_admin.infrastructure.store.supabase_store import SupabaseBookingStore


@lru_cache
def get_booking_store() -> BookingStorePort:
    logger = logging.getLogger(__name__)
    if settings.STORE_PROVIDER.lower() == "supabase":
        logger.info("Using SupabaseBookingStore")
        return SupabaseBookingStore()
    if settings.ENV.lower() not in {"dev", "local", "test"}:
        raise ValueError("STORE_PROVIDER=supabase is required outside dev/local.")
    logger.info("Using MemoryBookingStore (ENV=%s)", settings.ENV)
    return MemoryBookingStore(settings=get_default_settings())


@lru_cache
def get_default_settings():
    return default_settings(settings.DEFAULT_PRICES, settings.DEFAULT_INVENTORY)


@lru_cache
def get_write_locks() -> BookingWriteLocks:
    return BookingWriteLocks()


def build_tape_chart_session() -> TapeChartSession:
    return TapeChartSession(
        store=get_booking_store(),
        default_settings=get_default_settings(),
        resolver=SlotAssignmentResolver(settings.SLOT_ASSIGNMENT_STRATEGY),
        cache_ttl_seconds=settings.SNAPSHOT_CACHE_TTL_SECONDS,
        day_width=settings.DAY_CELL_WIDTH,
        timezone=settings.HOTEL_TIMEZONE,
        write_locks=get_write_locks(),
        on_change=get_session_registry().invalidate_all,
    )


@lru_cache
def get_session_registry() -> TapeChartSessionRegistry:
    return TapeChartSessionRegistry(factory=build_tape_chart_session, max_sessions=settings.TAPE_CHART_MAX_SESSIONS)


def get_admin_use_case() -> AdminUseCase:
    return AdminUseCase(store=get_booking_store(), on_change=get_session_registry().invalidate_all)


def get_booking_flow_use_case() -> BookingFlowUseCase:
    return BookingFlowUseCase(store=get_booking_store(), on_change=get_session_registry().invalidate_all)
