# path: route-playback/route_playback/services/route_summary.py

from __future__ import annotations

from typing import Optional, Sequence

from route_playback.models.route_models import BBoxWGS84, Coordinate, RouteSummary
from route_playback.utils.geo import bbox_wgs84, polyline_length_m


def summarize_route(route: Sequence[Coordinate], parse_error: Optional[str] = None) -> RouteSummary:
    bbox = BBoxWGS84(**bbox_wgs84(route)) if route else None
    return RouteSummary(
        point_count=len(route),
        total_distance_m=float(polyline_length_m(route)),
        bbox_wgs84=bbox,
        parse_error=parse_error,
    )
