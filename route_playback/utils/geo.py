# path: route-playback/route_playback/utils/geo.py

from __future__ import annotations

from typing import Dict, Iterable, Sequence
import math

from route_playback.models.route_models import Coordinate


EARTH_RADIUS_M = 6371000.0
# Flat-earth meters per degree used by the procedural route generators.
METERS_PER_DEGREE = 111111.0


def haversine_m(a_lon: float, a_lat: float, b_lon: float, b_lat: float) -> float:
    # Spherical earth; good enough for walk-scale playback.
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(b_lon - a_lon)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(s)))


def bearing_deg_true(a_lon: float, a_lat: float, b_lon: float, b_lat: float) -> float:
    # Initial bearing (forward azimuth), degrees true, [0,360)
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dlmb = math.radians(b_lon - a_lon)

    y = math.sin(dlmb) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlmb)
    brng = math.degrees(math.atan2(y, x))
    return (brng + 360.0) % 360.0


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""
    if a == b:
        return 0.0
    return haversine_m(a.longitude, a.latitude, b.longitude, b.latitude)


def bearing_deg(frm: Coordinate, to: Coordinate) -> float:
    """Initial bearing from ``frm`` to ``to`` in [0, 360); 0 when the points coincide."""
    if frm == to:
        return 0.0
    return bearing_deg_true(frm.longitude, frm.latitude, to.longitude, to.latitude)


def lerp(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Interpolate linearly in lat/lng space.

    This is not a geodesic interpolation; it is only accurate for short
    segments, which is what route densification produces.
    """
    f = min(1.0, max(0.0, fraction))
    return Coordinate(
        latitude=a.latitude + (b.latitude - a.latitude) * f,
        longitude=a.longitude + (b.longitude - a.longitude) * f,
    )


def offset_by_radius(center: Coordinate, radius_m: float, bearing_rad: float) -> Coordinate:
    """Point ``radius_m`` away from ``center`` along ``bearing_rad`` (0 = north).

    Uses the 111111 m/degree approximation, with longitude scaled by the cosine
    of the center latitude.
    """
    lat = center.latitude + (radius_m / METERS_PER_DEGREE) * math.cos(bearing_rad)
    lng = center.longitude + (
        radius_m / (METERS_PER_DEGREE * math.cos(math.radians(center.latitude)))
    ) * math.sin(bearing_rad)
    return Coordinate(latitude=lat, longitude=lng)


def polyline_length_m(route: Sequence[Coordinate]) -> float:
    total = 0.0
    for i in range(1, len(route)):
        total += distance_m(route[i - 1], route[i])
    return total


def bbox_wgs84(route: Iterable[Coordinate]) -> Dict[str, float]:
    points = list(route)
    if not points:
        raise ValueError("Cannot compute bbox of an empty route")
    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return {
        "min_lat": min(lats),
        "min_lon": min(lons),
        "max_lat": max(lats),
        "max_lon": max(lons),
    }
