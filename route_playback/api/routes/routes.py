# path: route-playback/route_playback/api/routes/routes.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from route_playback.api.deps import get_engine, get_settings
from route_playback.core.config import Settings
from route_playback.models.route_models import (
    CircleRouteRequest,
    RouteSummary,
    SquareRouteRequest,
    TrackKind,
    WaypointsRequest,
)
from route_playback.services.playback import PlaybackEngine
from route_playback.services.route_parser import parse_track_document
from route_playback.services.route_summary import summarize_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("", response_model=RouteSummary)
def create_route(body: WaypointsRequest, engine: PlaybackEngine = Depends(get_engine)) -> RouteSummary:
    try:
        route = engine.set_route(
            body.points,
            interpolate=body.interpolate,
            interval_m=body.interval_m,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return summarize_route(route)


@router.post("/track", response_model=RouteSummary)
async def create_route_from_track(
    request: Request,
    kind: TrackKind = Query(...),
    interpolate: bool = Query(True),
    interval_m: Optional[float] = Query(None, gt=0),
    engine: PlaybackEngine = Depends(get_engine),
) -> RouteSummary:
    # Partial tracks are still played; the parser diagnostic is echoed back.
    parsed = parse_track_document(kind, await request.body())
    try:
        route = engine.set_route(parsed.route, interpolate=interpolate, interval_m=interval_m)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return summarize_route(route, parse_error=parsed.error)


@router.post("/circle", response_model=RouteSummary)
def create_circle_route(
    body: CircleRouteRequest,
    engine: PlaybackEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> RouteSummary:
    radius = settings.circle_radius_m if body.radius_m is None else body.radius_m
    try:
        route = engine.start_circular_route(body.center, radius)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return summarize_route(route)


@router.post("/square", response_model=RouteSummary)
def create_square_route(
    body: SquareRouteRequest,
    engine: PlaybackEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> RouteSummary:
    size = settings.square_size_m if body.size_m is None else body.size_m
    try:
        route = engine.start_square_route(body.center, size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return summarize_route(route)


@router.delete("", status_code=204)
def clear_route(engine: PlaybackEngine = Depends(get_engine)) -> None:
    engine.clear_route()
