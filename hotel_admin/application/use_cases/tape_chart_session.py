from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable, Mapping
from datetime import date
from types import MappingProxyType

from hotel_admin.application.exceptions import BookingStoreError, DataFetchError, RenderError
from hotel_admin.application.ports.booking_store import BookingStorePort
from hotel_admin.application.use_cases.drag_reassignment import DragReassignmentController
from hotel_admin.application.use_cases.grid_layout import DEFAULT_DAY_WIDTH, layout_grid
from hotel_admin.application.use_cases.room_status import cycle_room_status
from hotel_admin.application.use_cases.slot_assignment import SlotAssignmentResolver
from hotel_admin.application.utils.date_utils import today_in, window_for_anchor
from hotel_admin.application.utils.snapshot_cache import SnapshotCache, StoreSnapshot
from hotel_admin.application.utils.write_locks import BookingWriteLocks
from hotel_admin.domain.entities.booking import Booking, RoomTypeKey
from hotel_admin.domain.entities.hotel_settings import HotelSettings, RoomStatus
from hotel_admin.domain.entities.tape_chart import DragState, DropResult, DropTarget, GridDescription

FETCH_FAILED_NOTICE = "Could not load bookings; showing an empty chart with default settings."
DEFAULT_MAX_SESSIONS = 256


class TapeChartSession:
    """
    State owned by one admin's tape chart: manual slot overrides, the drag
    controller and a short-lived cache of the store's bookings and settings.

    `on_change` runs after every successful move or room status change so the
    caches of other sessions can be dropped too.
    """

    def __init__(
        self,
        store: BookingStorePort,
        default_settings: HotelSettings,
        resolver: SlotAssignmentResolver | None = None,
        cache_ttl_seconds: float = 30.0,
        day_width: int = DEFAULT_DAY_WIDTH,
        timezone: str = "UTC",
        write_locks: BookingWriteLocks | None = None,
        clock: Callable[[], float] = time.monotonic,
        layout: Callable[..., GridDescription] = layout_grid,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._store = store
        self._default_settings = default_settings
        self._resolver = resolver or SlotAssignmentResolver()
        self._day_width = day_width
        self._timezone = timezone
        self._layout = layout
        self._on_change = on_change
        self._overrides: dict[str, int] = {}
        self._cache = SnapshotCache(cache_ttl_seconds, clock)
        self._controller = DragReassignmentController(
            store=store,
            overrides=self._overrides,
            on_committed=self._on_committed,
            write_locks=write_locks,
        )
        self._logger = logging.getLogger(__name__)

    @property
    def overrides(self) -> Mapping[str, int]:
        return MappingProxyType(self._overrides)

    @property
    def drag_state(self) -> DragState:
        return self._controller.state

    def invalidate(self) -> None:
        self._cache.invalidate()

    def load_snapshot(self) -> tuple[StoreSnapshot, list[str]]:
        """Cached snapshot if fresh, else a store read; a failed read degrades to defaults."""
        cached = self._cache.get()
        if cached is not None:
            return cached, []
        try:
            snapshot = self._fetch()
        except DataFetchError as e:
            self._logger.warning("Tape chart data fetch failed", extra={"error": str(e)})
            return StoreSnapshot(bookings=(), settings=self._default_settings), [FETCH_FAILED_NOTICE]
        self._cache.put(snapshot)
        return snapshot, []

    def render(self, anchor: date, today: date | None = None) -> GridDescription:
        window = window_for_anchor(anchor)
        snapshot, notices = self.load_snapshot()
        try:
            grid = self._build_grid(window, snapshot, today or today_in(self._timezone))
        except RenderError as e:
            self._logger.exception("Tape chart render failed", extra={"error": str(e)})
            return GridDescription(
                window_start=window[0],
                window_end=window[1],
                day_width=self._day_width,
                notices=tuple(notices),
                error=str(e),
            )
        return grid.with_notices(notices)

    def start_drag(self, booking_id: str) -> DragState:
        snapshot, _ = self.load_snapshot()
        return self._controller.start_drag(snapshot.booking(booking_id))

    def cancel_drag(self) -> DragState:
        return self._controller.cancel()

    def drop(self, target: DropTarget) -> DropResult:
        snapshot, _ = self.load_snapshot()
        return self._controller.drop(target, snapshot.settings)

    def cycle_room_status(self, room_number: int) -> RoomStatus:
        status = cycle_room_status(self._store, room_number)
        self._changed()
        return status

    def _fetch(self) -> StoreSnapshot:
        try:
            bookings = self._store.list_bookings()
            settings = self._store.get_settings()
        except BookingStoreError as e:
            raise DataFetchError(str(e)) from e
        return StoreSnapshot(bookings=tuple(bookings), settings=settings)

    def _build_grid(self, window: tuple[date, date], snapshot: StoreSnapshot, today: date) -> GridDescription:
        try:
            return self._layout(
                window,
                list(RoomTypeKey),
                snapshot.bookings,
                snapshot.settings,
                self._overrides,
                today=today,
                resolver=self._resolver,
                day_width=self._day_width,
            )
        except Exception as e:
            raise RenderError(f"Could not render the tape chart: {e}") from e

    def _on_committed(self, booking: Booking) -> None:
        self._logger.info("Tape chart invalidated after move", extra={"booking_id": booking.id})
        self._changed()

    def _changed(self) -> None:
        self.invalidate()
        if self._on_change is not None:
            self._on_change()


class TapeChartSessionRegistry:
    """
    Hands out one TapeChartSession per admin session id.

    At most `max_sessions` are kept; the least recently used one is dropped
    when a new id arrives at capacity.
    """

    def __init__(self, factory: Callable[[], TapeChartSession], max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, TapeChartSession] = OrderedDict()
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get_or_create(self, session_id: str | None) -> tuple[str, TapeChartSession]:
        with self._lock:
            if not session_id:
                session_id = uuid.uuid4().hex
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                return session_id, session

            session = self._factory()
            self._sessions[session_id] = session
            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                self._logger.info("Tape chart session evicted", extra={"reason": evicted})
            return session_id, session

    def invalidate_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
        for session in sessions:
            session.invalidate()
