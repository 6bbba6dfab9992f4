# path: route-playback/route_playback/core/config.py

from __future__ import annotations

from typing import Mapping, Optional
import os

from pydantic import BaseModel, Field


ENV_PREFIX = "ROUTE_PLAYBACK_"

DEFAULT_SPEED_MPS = 5.0
DEFAULT_ACCURACY_M = 3.0
DEFAULT_GEOFENCE_RADIUS_M = 1000.0
DEFAULT_CIRCLE_RADIUS_M = 50.0
DEFAULT_SQUARE_SIZE_M = 100.0
DEFAULT_RECENT_FIXES = 500


class Settings(BaseModel):
    speed_mps: float = Field(default=DEFAULT_SPEED_MPS, gt=0)
    looping: bool = True
    accuracy_m: float = Field(default=DEFAULT_ACCURACY_M, ge=0)
    geofence_radius_m: float = Field(default=DEFAULT_GEOFENCE_RADIUS_M, ge=0)
    circle_radius_m: float = Field(default=DEFAULT_CIRCLE_RADIUS_M, ge=0)
    square_size_m: float = Field(default=DEFAULT_SQUARE_SIZE_M, ge=0)
    recent_fixes: int = Field(default=DEFAULT_RECENT_FIXES, gt=0)
    log_level: str = "INFO"


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``ROUTE_PLAYBACK_*`` variables.

    Unset variables keep their defaults; pydantic does the type coercion, so
    ``ROUTE_PLAYBACK_LOOPING=false`` works as expected.
    """
    source = os.environ if env is None else env
    values = {}
    for name in Settings.model_fields:
        raw = source.get(ENV_PREFIX + name.upper())
        if raw is not None and raw != "":
            values[name] = raw
    return Settings.model_validate(values)
