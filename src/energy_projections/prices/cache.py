"""In-memory TTL cache for upstream provider responses.

Entries expire lazily: ``get`` treats an entry older than the TTL as absent
but leaves it in place until it is overwritten (or pushed out by the optional
``max_entries`` bound).
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A stored payload and the clock reading at which it was stored."""

    key: str
    payload: Any
    stored_at: float


class TTLCache:
    """Thread-safe key/value store with time-bounded reuse.

    Parameters
    ----------
    ttl_seconds : float
        An entry is reusable iff ``clock() - stored_at < ttl_seconds``.
    max_entries : int | None
        Optional physical size bound. When set, the least recently used
        entry is dropped on overflow. ``None`` means unbounded.
    clock : Callable[[], float]
        Monotonic time source. Override in tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = float(ttl_seconds)
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """Return the cached payload, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self._ttl:
                return None
            if self._max_entries is not None:
                self._entries.move_to_end(key)
            return entry.payload

    def put(self, key: str, payload: Any) -> None:
        """Store or overwrite ``payload`` under ``key``."""
        with self._lock:
            self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        """Physical entry count, including expired entries not yet overwritten."""
        with self._lock:
            return len(self._entries)
