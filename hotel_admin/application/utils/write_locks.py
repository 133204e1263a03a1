from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0  # writers holding or waiting on the lock


class BookingWriteLocks:
    """
    One lock per booking id so writes to the same booking never interleave.

    An entry only lives while some writer holds or waits on it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _LockEntry] = {}
        self._entries_lock = threading.Lock()

    def __len__(self) -> int:
        with self._entries_lock:
            return len(self._entries)

    def _acquire_entry(self, booking_id: str) -> _LockEntry:
        with self._entries_lock:
            entry = self._entries.get(booking_id)
            if entry is None:
                entry = self._entries[booking_id] = _LockEntry()
            entry.holders += 1
            return entry

    def _release_entry(self, booking_id: str, entry: _LockEntry) -> None:
        with self._entries_lock:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[booking_id]

    @contextmanager
    def hold(self, booking_id: str) -> Iterator[None]:
        entry = self._acquire_entry(booking_id)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(booking_id, entry)
