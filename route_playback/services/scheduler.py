# path: route-playback/route_playback/services/scheduler.py

from __future__ import annotations

from typing import Callable, Protocol, Set
import threading


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Cancellable: ...


class TimerHandle:
    """Cancels a pending timer and stops the scheduler from tracking it."""

    def __init__(self, scheduler: "ThreadingScheduler", timer: threading.Timer) -> None:
        self._scheduler = scheduler
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()
        self._scheduler._forget(self._timer)


class ThreadingScheduler:
    """Runs each callback on its own daemon ``threading.Timer``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timers: Set[threading.Timer] = set()
        self._closed = False

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        def run() -> None:
            self._forget(timer)
            callback()

        timer = threading.Timer(max(0.0, delay_s), run)
        timer.daemon = True
        with self._lock:
            if self._closed:
                raise RuntimeError("scheduler is shut down")
            self._timers.add(timer)
        timer.start()
        return TimerHandle(self, timer)

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            timers = list(self._timers)
            self._timers.clear()
        for t in timers:
            t.cancel()

    def _forget(self, timer: threading.Timer) -> None:
        with self._lock:
            self._timers.discard(timer)
