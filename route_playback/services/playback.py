# path: route-playback/route_playback/services/playback.py

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple
import logging
import math
import threading
import time

from route_playback.core.config import DEFAULT_ACCURACY_M, DEFAULT_SPEED_MPS
from route_playback.core.errors import InvalidConfigurationError
from route_playback.models.route_models import (
    Coordinate,
    Fix,
    Geofence,
    PlaybackState,
    PlaybackStatus,
)
from route_playback.services.geofence import GeofenceGuard
from route_playback.services.route_interpolator import circular_route, densify, square_route
from route_playback.services.route_parser import parse_waypoints
from route_playback.services.scheduler import Cancellable, Scheduler, ThreadingScheduler
from route_playback.services.sinks import FixSink
from route_playback.utils.geo import bearing_deg, distance_m


logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _validate_speed(mps: float) -> float:
    try:
        value = float(mps)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"speed must be a number: {mps!r}") from None
    if not (value > 0 and math.isfinite(value)):
        raise InvalidConfigurationError(f"speed must be > 0 m/s: {mps}")
    return value


class PlaybackEngine:
    """
    Walks a route at a given speed and emits one Fix per route point.

    The engine never sleeps: each tick computes the delay until the next point
    (distance / speed) and hands it to the scheduler. All state lives behind one
    re-entrant lock, so control calls from other threads are serialized against
    ticks and the sink sees fixes in emission order.

    Every scheduled callback carries the generation it was scheduled under.
    Cancelling bumps the generation, so a timer that already fired and is waiting
    on the lock is dropped instead of producing a duplicate tick.

    States: idle (no route) -> running -> stopped -> running | idle.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        *,
        clock: Optional[Clock] = None,
        sink: Optional[FixSink] = None,
        speed_mps: float = DEFAULT_SPEED_MPS,
        looping: bool = True,
        geofence: Optional[GeofenceGuard] = None,
        accuracy_m: float = DEFAULT_ACCURACY_M,
    ) -> None:
        self._speed = _validate_speed(speed_mps)
        self._owns_scheduler = scheduler is None
        self._scheduler: Scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self._clock: Clock = clock or wall_clock_ms
        self._sink = sink
        self._looping = looping
        self._geofence = geofence or GeofenceGuard()
        self._accuracy_m = accuracy_m

        self._lock = threading.RLock()
        self._route: List[Coordinate] = []
        self._index = 0
        self._state = PlaybackState.IDLE
        self._last_fix: Optional[Fix] = None
        self._pending: Optional[Cancellable] = None
        self._generation = 0
        self._next_delay_s: Optional[float] = None
        self._closed = False

    ### Queries

    @property
    def state(self) -> PlaybackState:
        with self._lock:
            return self._state

    @property
    def index(self) -> int:
        with self._lock:
            return self._index

    @property
    def route(self) -> Tuple[Coordinate, ...]:
        with self._lock:
            return tuple(self._route)

    @property
    def speed_mps(self) -> float:
        with self._lock:
            return self._speed

    @property
    def looping(self) -> bool:
        with self._lock:
            return self._looping

    @property
    def last_fix(self) -> Optional[Fix]:
        with self._lock:
            return self._last_fix

    @property
    def next_delay_s(self) -> Optional[float]:
        """Delay of the currently pending tick, None when nothing is scheduled."""
        with self._lock:
            return self._next_delay_s if self._pending is not None else None

    @property
    def geofence(self) -> Geofence:
        return self._geofence.fence

    def status(self) -> PlaybackStatus:
        with self._lock:
            return PlaybackStatus(
                state=self._state,
                index=self._index,
                route_length=len(self._route),
                speed_mps=self._speed,
                looping=self._looping,
                geofence=self._geofence.fence,
                last_fix=self._last_fix,
            )

    ### Control

    def set_sink(self, sink: Optional[FixSink]) -> None:
        # Only one sink is held; the last registration wins.
        with self._lock:
            self._ensure_open()
            self._sink = sink

    def set_route(
        self,
        route: Sequence[Coordinate],
        interpolate: bool = True,
        interval_m: Optional[float] = None,
        autostart: bool = True,
    ) -> List[Coordinate]:
        """Replace the route and restart from its first point.

        ``interval_m`` defaults to the current speed, so an interpolated walk gets
        roughly one point per second. Densification runs before the lock is
        taken, so ticks keep flowing while a long route is prepared. Returns the
        route actually stored.
        """
        points = parse_waypoints(route)
        with self._lock:
            self._ensure_open()
            interval = self._speed if interval_m is None else interval_m
        if interpolate:
            points = densify(points, interval)

        with self._lock:
            self._ensure_open()
            self._cancel_pending()
            self._route = points
            self._index = 0
            if not points:
                self._set_state(PlaybackState.IDLE)
            elif autostart:
                self._set_state(PlaybackState.RUNNING)
                self._schedule(0.0)
            else:
                self._set_state(PlaybackState.STOPPED)
            logger.info("Route set: %d points (interpolate=%s)", len(points), interpolate)
            return list(points)

    def start_circular_route(self, center: Coordinate, radius_m: float) -> List[Coordinate]:
        return self.set_route(circular_route(center, radius_m), interpolate=True)

    def start_square_route(self, center: Coordinate, size_m: float) -> List[Coordinate]:
        return self.set_route(square_route(center, size_m), interpolate=True)

    def clear_route(self) -> None:
        with self._lock:
            self._ensure_open()
            self._cancel_pending()
            self._route = []
            self._index = 0
            self._set_state(PlaybackState.IDLE)

    def set_speed(self, mps: float) -> None:
        """Change the walking speed; a pending tick is rescheduled at the new pace."""
        speed = _validate_speed(mps)
        with self._lock:
            self._ensure_open()
            self._speed = speed
            if self._state is PlaybackState.RUNNING:
                self._schedule(self._compute_delay_s())
            logger.info("Speed set to %.2f m/s", speed)

    def set_looping(self, looping: bool) -> None:
        with self._lock:
            self._ensure_open()
            self._looping = bool(looping)

    def set_geofence(self, center: Coordinate, radius_m: float) -> Geofence:
        with self._lock:
            self._ensure_open()
            return self._geofence.set(center, radius_m)

    def disable_geofence(self) -> Geofence:
        with self._lock:
            self._ensure_open()
            return self._geofence.disable()

    def stop(self) -> None:
        """Pause the walk; index and last fix are kept."""
        with self._lock:
            self._cancel_pending()
            if self._state is PlaybackState.RUNNING:
                self._set_state(PlaybackState.STOPPED)

    def resume(self) -> None:
        with self._lock:
            self._ensure_open()
            if self._state is not PlaybackState.STOPPED:
                return
            if self._index >= len(self._route) and not self._looping:
                # A finished one-shot walk starts over.
                self._index = 0
            self._set_state(PlaybackState.RUNNING)
            self._schedule(0.0)

    start = resume

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._cancel_pending()
            if self._state is PlaybackState.RUNNING:
                self._set_state(PlaybackState.STOPPED)
            self._sink = None
            self._closed = True
        if self._owns_scheduler:
            self._scheduler.shutdown()  # type: ignore[attr-defined]

    def __enter__(self) -> "PlaybackEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    ### Advancement

    def tick(self) -> Optional[Fix]:
        """Advance one route point.

        Returns the emitted fix, or None when nothing was emitted (not running,
        walk finished, or the point fell outside the geofence). A rejected point
        still advances the index so the walk cannot stall on it.
        """
        with self._lock:
            if self._closed or not self._route or self._state is not PlaybackState.RUNNING:
                return None

            if self._index >= len(self._route):
                if not self._looping:
                    self._cancel_pending()
                    self._set_state(PlaybackState.STOPPED)
                    logger.info("Walk finished after %d points", len(self._route))
                    return None
                self._index = 0

            index = self._index
            candidate = self._route[index]
            fix = None
            if self._geofence.allows(candidate):
                fix = self._build_fix(candidate, index)
                self._emit(fix)
            else:
                logger.debug("Point %d outside geofence, skipped", index)

            self._index += 1
            self._schedule(self._compute_delay_s())
            return fix

    def move_to(self, coordinate: Coordinate) -> Optional[Fix]:
        """Emit a fix at an arbitrary position without touching the route.

        Returns None when the geofence rejects the position.
        """
        with self._lock:
            self._ensure_open()
            if not self._geofence.allows(coordinate):
                logger.debug("Manual move outside geofence ignored")
                return None
            fix = self._build_fix(coordinate, None)
            self._emit(fix)
            return fix

    ### Internals

    def _compute_delay_s(self) -> float:
        if self._index == 0:
            return 0.0
        if self._index < len(self._route):
            current = self._route[self._index - 1]
            nxt = self._route[self._index]
            return distance_m(current, nxt) / self._speed
        return 1.0 / self._speed

    def _build_fix(self, candidate: Coordinate, index: Optional[int]) -> Fix:
        now_ms = self._clock()
        last = self._last_fix
        if last is None:
            return Fix(
                coordinate=candidate,
                timestamp_ms=now_ms,
                accuracy_m=self._accuracy_m,
                route_index=index,
            )

        timestamp_ms = max(now_ms, last.timestamp_ms)
        dt_s = (timestamp_ms - last.timestamp_ms) / 1000.0
        speed = distance_m(last.coordinate, candidate) / dt_s if dt_s > 0 else 0.0
        acceleration = (speed - last.speed_mps) / dt_s if dt_s > 0 else 0.0
        return Fix(
            coordinate=candidate,
            timestamp_ms=timestamp_ms,
            accuracy_m=self._accuracy_m,
            speed_mps=speed,
            bearing_deg=bearing_deg(last.coordinate, candidate),
            acceleration_mps2=acceleration,
            route_index=index,
        )

    def _emit(self, fix: Fix) -> None:
        self._last_fix = fix
        sink = self._sink
        if sink is None:
            return
        try:
            sink(fix)
        except Exception:
            # A broken consumer must not kill the walk.
            logger.exception("Fix sink raised; continuing playback")

    def _schedule(self, delay_s: float) -> None:
        self._cancel_pending()
        generation = self._generation
        self._next_delay_s = delay_s
        self._pending = self._scheduler.call_later(delay_s, lambda: self._on_timer(generation))

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
            self.tick()

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _set_state(self, state: PlaybackState) -> None:
        if state is not self._state:
            logger.info("Playback %s -> %s", self._state.value, state.value)
            self._state = state

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("playback engine is closed")
