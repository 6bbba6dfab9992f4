from __future__ import annotations

from typing import Callable, List, Optional

from route_playback.models.route_models import Coordinate


class FakeClock:
    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(round(seconds * 1000))


class ManualHandle:
    def __init__(self, delay_s: float, callback: Callable[[], None]) -> None:
        self.delay_s = delay_s
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self, clock: Optional[FakeClock] = None) -> None:
        self.clock = clock
        self.calls: List[ManualHandle] = []

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(delay_s, callback)
        self.calls.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.calls if not h.cancelled and not h.fired]

    def run_next(self) -> ManualHandle:
        handle = self.pending[0]
        handle.fired = True
        if self.clock is not None:
            self.clock.advance(handle.delay_s)
        handle.callback()
        return handle


def coord(lat: float, lon: float) -> Coordinate:
    return Coordinate(latitude=lat, longitude=lon)
