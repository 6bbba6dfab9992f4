# path: route-playback/route_playback/services/sinks.py

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, List, Optional
import logging
import threading

from route_playback.models.route_models import Fix


logger = logging.getLogger(__name__)

FixSink = Callable[[Fix], None]


class RecentFixesSink:
    """Keeps the latest ``maxlen`` fixes in emission order."""

    def __init__(self, maxlen: int = 500) -> None:
        self._lock = threading.Lock()
        self._fixes: Deque[Fix] = deque(maxlen=maxlen)

    def __call__(self, fix: Fix) -> None:
        with self._lock:
            self._fixes.append(fix)

    def snapshot(self, limit: Optional[int] = None) -> List[Fix]:
        with self._lock:
            fixes = list(self._fixes)
        if limit is not None:
            fixes = fixes[-limit:] if limit > 0 else []
        return fixes

    def clear(self) -> None:
        with self._lock:
            self._fixes.clear()


class LoggingSink:
    def __init__(self, level: int = logging.DEBUG) -> None:
        self._level = level

    def __call__(self, fix: Fix) -> None:
        logger.log(
            self._level,
            "fix #%s (%.6f, %.6f) %.2f m/s %.1f deg",
            fix.route_index,
            fix.latitude,
            fix.longitude,
            fix.speed_mps,
            fix.bearing_deg,
        )


def fan_out(*sinks: FixSink) -> FixSink:
    """Combine sinks into one callable; each fix reaches them in the given order."""
    targets = tuple(sinks)

    def deliver(fix: Fix) -> None:
        for sink in targets:
            sink(fix)

    return deliver
