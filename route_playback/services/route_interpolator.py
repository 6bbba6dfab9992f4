# path: route-playback/route_playback/services/route_interpolator.py

from __future__ import annotations

from typing import List, Sequence
import math

from route_playback.core.errors import InvalidConfigurationError
from route_playback.models.route_models import Coordinate
from route_playback.utils.geo import METERS_PER_DEGREE, distance_m, lerp, offset_by_radius


CIRCLE_STEPS = 360
MAX_POINTS = 100_000


def densify(
    route: Sequence[Coordinate],
    target_interval_m: float,
    max_points: int = MAX_POINTS,
) -> List[Coordinate]:
    """
    Insert evenly spaced points so that no segment is longer than the target interval.

    For each segment longer than the interval, ``floor(d / interval) - 1`` points
    are inserted at fractions ``j / segments``. Endpoints are never duplicated and
    the first and last input coordinates are kept as-is.

    The output size is computed before any point is built; a route that would
    exceed ``max_points`` is rejected with InvalidConfigurationError.
    """
    if not target_interval_m > 0:
        raise InvalidConfigurationError(f"interval must be > 0 m: {target_interval_m}")
    if len(route) < 2:
        return list(route)

    segment_counts = []
    total = 1
    for i in range(1, len(route)):
        d = distance_m(route[i - 1], route[i])
        segments = int(d // target_interval_m) if d > target_interval_m else 1
        segment_counts.append(max(1, segments))
        total += max(1, segments)
        if total > max_points:
            raise InvalidConfigurationError(
                f"Interpolated route exceeds {max_points} points; use an interval larger than {target_interval_m} m"
            )

    out = [route[0]]
    for i, segments in enumerate(segment_counts, start=1):
        start = route[i - 1]
        end = route[i]
        for j in range(1, segments):
            out.append(lerp(start, end, j / segments))
        out.append(end)
    return out


def circular_route(center: Coordinate, radius_m: float, steps: int = CIRCLE_STEPS) -> List[Coordinate]:
    """Closed circle around ``center``: ``steps + 1`` points, angle 0 through 360 degrees."""
    if radius_m < 0:
        raise InvalidConfigurationError(f"radius must be >= 0 m: {radius_m}")
    if steps < 1:
        raise InvalidConfigurationError(f"steps must be >= 1: {steps}")
    return [
        offset_by_radius(center, radius_m, math.radians(i * (360.0 / steps)))
        for i in range(steps + 1)
    ]


def square_route(center: Coordinate, size_m: float) -> List[Coordinate]:
    """Closed square of side ``size_m`` centered on ``center`` (5 corners, first == last)."""
    if size_m < 0:
        raise InvalidConfigurationError(f"size must be >= 0 m: {size_m}")
    half = size_m / 2
    dlat = half / METERS_PER_DEGREE
    dlng = half / (METERS_PER_DEGREE * math.cos(math.radians(center.latitude)))

    def corner(lat_sign: int, lng_sign: int) -> Coordinate:
        return Coordinate(
            latitude=center.latitude + lat_sign * dlat,
            longitude=center.longitude + lng_sign * dlng,
        )

    first = corner(1, 1)
    return [first, corner(1, -1), corner(-1, -1), corner(-1, 1), first]
