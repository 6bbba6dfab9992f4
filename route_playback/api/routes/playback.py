# path: route-playback/route_playback/api/routes/playback.py

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from route_playback.api.deps import get_engine, get_recent_fixes, get_settings
from route_playback.core.config import Settings
from route_playback.models.route_models import (
    Fix,
    Geofence,
    GeofenceRequest,
    LoopingRequest,
    MoveRequest,
    PlaybackStatus,
    SpeedRequest,
)
from route_playback.services.playback import PlaybackEngine
from route_playback.services.sinks import RecentFixesSink

router = APIRouter(prefix="/playback", tags=["playback"])


@router.get("", response_model=PlaybackStatus)
def get_status(engine: PlaybackEngine = Depends(get_engine)) -> PlaybackStatus:
    return engine.status()


@router.put("/speed", response_model=PlaybackStatus)
def set_speed(body: SpeedRequest, engine: PlaybackEngine = Depends(get_engine)) -> PlaybackStatus:
    try:
        engine.set_speed(body.speed_mps)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return engine.status()


@router.put("/looping", response_model=PlaybackStatus)
def set_looping(body: LoopingRequest, engine: PlaybackEngine = Depends(get_engine)) -> PlaybackStatus:
    engine.set_looping(body.looping)
    return engine.status()


@router.post("/stop", response_model=PlaybackStatus)
def stop(engine: PlaybackEngine = Depends(get_engine)) -> PlaybackStatus:
    engine.stop()
    return engine.status()


@router.post("/resume", response_model=PlaybackStatus)
def resume(engine: PlaybackEngine = Depends(get_engine)) -> PlaybackStatus:
    engine.resume()
    return engine.status()


@router.post("/move", response_model=Fix)
def move(body: MoveRequest, engine: PlaybackEngine = Depends(get_engine)) -> Fix:
    fix = engine.move_to(body.coordinate)
    if fix is None:
        raise HTTPException(status_code=409, detail="Position is outside the geofence")
    return fix


@router.put("/geofence", response_model=Geofence)
def set_geofence(
    body: GeofenceRequest,
    engine: PlaybackEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
) -> Geofence:
    radius = settings.geofence_radius_m if body.radius_m is None else body.radius_m
    try:
        return engine.set_geofence(body.center, radius)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/geofence", response_model=Geofence)
def disable_geofence(engine: PlaybackEngine = Depends(get_engine)) -> Geofence:
    return engine.disable_geofence()


@router.get("/fixes", response_model=List[Fix])
def recent_fixes(
    limit: Optional[int] = Query(None, ge=0),
    fixes: RecentFixesSink = Depends(get_recent_fixes),
) -> List[Fix]:
    return fixes.snapshot(limit)


@router.get("/last-fix", response_model=Fix)
def last_fix(engine: PlaybackEngine = Depends(get_engine)) -> Fix:
    fix = engine.last_fix
    if fix is None:
        raise HTTPException(status_code=404, detail="No fix emitted yet")
    return fix
