"""Prefixed identifier generators and the writer clock."""

import threading
import time
import uuid

from pughrepo.constants import (
    COMMIT_ID_PREFIX,
    CRITERION_ID_PREFIX,
    EVENT_ID_PREFIX,
    ID_HEX_LENGTH,
    TOOL_ID_PREFIX,
)


def _make_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:ID_HEX_LENGTH]}"


def event_id() -> str:
    return _make_id(EVENT_ID_PREFIX)


def commit_id() -> str:
    return _make_id(COMMIT_ID_PREFIX)


def criterion_id() -> str:
    return _make_id(CRITERION_ID_PREFIX)


def tool_id() -> str:
    return _make_id(TOOL_ID_PREFIX)


class _WriterClock:
    """Millisecond clock that never repeats a value within one process."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            current = time.time_ns() // 1_000_000
            self._last = max(current, self._last + 1)
            return self._last


_clock = _WriterClock()


def now_ms() -> int:
    """Strictly increasing wall-clock milliseconds for this writer.

    Used for display and tie-breaking only; causal order is the log order.
    """
    return _clock.now()
