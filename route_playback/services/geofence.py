# path: route-playback/route_playback/services/geofence.py

from __future__ import annotations

import logging
import math
import threading

from route_playback.core.config import DEFAULT_GEOFENCE_RADIUS_M
from route_playback.core.errors import InvalidConfigurationError
from route_playback.models.route_models import Coordinate, Geofence
from route_playback.utils.geo import distance_m


logger = logging.getLogger(__name__)


def is_allowed(fence: Geofence, candidate: Coordinate) -> bool:
    """True when ``candidate`` lies inside (or on the edge of) an enabled fence."""
    if not fence.enabled or fence.center is None:
        return True
    return distance_m(fence.center, candidate) <= fence.radius_m


class GeofenceGuard:
    """Holds the active geofence; can be toggled without touching playback."""

    def __init__(self, fence: Geofence | None = None) -> None:
        self._lock = threading.Lock()
        self._fence = fence or Geofence(radius_m=DEFAULT_GEOFENCE_RADIUS_M)

    @property
    def fence(self) -> Geofence:
        with self._lock:
            return self._fence

    def set(self, center: Coordinate, radius_m: float) -> Geofence:
        if not (radius_m >= 0 and math.isfinite(radius_m)):
            raise InvalidConfigurationError(f"geofence radius must be >= 0 m: {radius_m}")
        fence = Geofence(center=center, radius_m=radius_m, enabled=True)
        with self._lock:
            self._fence = fence
        logger.info("Geofence enabled at (%.6f, %.6f) r=%.1f m", center.latitude, center.longitude, radius_m)
        return fence

    def disable(self) -> Geofence:
        with self._lock:
            self._fence = self._fence.model_copy(update={"enabled": False})
            fence = self._fence
        logger.info("Geofence disabled")
        return fence

    def allows(self, candidate: Coordinate) -> bool:
        return is_allowed(self.fence, candidate)
