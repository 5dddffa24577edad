from __future__ import annotations

import logging
import threading
from collections import OrderedDict, deque
from typing import Iterator

from truthguard.models.types import AnalyzedContent

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10
DEFAULT_MAX_SESSIONS = 1000


class HistoryBuffer:
    """Most-recent-first list of analyses with a fixed capacity."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._items: deque[AnalyzedContent] = deque(maxlen=capacity)

    def add(self, item: AnalyzedContent) -> None:
        # appendleft on a bounded deque drops the oldest entry from the right
        self._items.appendleft(item)

    def items(self) -> list[AnalyzedContent]:
        return list(self._items)

    def get(self, item_id: str) -> AnalyzedContent | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AnalyzedContent]:
        return iter(list(self._items))


class SessionHistoryStore:
    """In-memory history buffers keyed by session. Nothing outlives the process.

    Buffers are created only when a session adds an analysis. Past
    ``max_sessions`` the least recently used session is forgotten.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self._capacity = capacity
        self._max_sessions = max_sessions
        self._lock = threading.Lock()
        self._buffers: OrderedDict[str, HistoryBuffer] = OrderedDict()

    def _lookup(self, session_key: str | None) -> HistoryBuffer | None:
        # caller holds the lock
        if session_key is None:
            return None
        buffer = self._buffers.get(session_key)
        if buffer is not None:
            self._buffers.move_to_end(session_key)
        return buffer

    def add(self, session_key: str, item: AnalyzedContent) -> None:
        with self._lock:
            buffer = self._lookup(session_key)
            if buffer is None:
                buffer = HistoryBuffer(self._capacity)
                self._buffers[session_key] = buffer
                logger.debug("Created history for session %s", session_key)
                while len(self._buffers) > self._max_sessions:
                    evicted, _ = self._buffers.popitem(last=False)
                    logger.info("Evicted history for idle session %s", evicted)
            buffer.add(item)

    def items(self, session_key: str | None) -> list[AnalyzedContent]:
        with self._lock:
            buffer = self._lookup(session_key)
            return buffer.items() if buffer is not None else []

    def get(self, session_key: str | None, item_id: str) -> AnalyzedContent | None:
        with self._lock:
            buffer = self._lookup(session_key)
            return buffer.get(item_id) if buffer is not None else None

    def clear(self, session_key: str | None) -> None:
        with self._lock:
            buffer = self._lookup(session_key)
            if buffer is not None:
                buffer.clear()

    def drop(self, session_key: str) -> bool:
        with self._lock:
            return self._buffers.pop(session_key, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)
