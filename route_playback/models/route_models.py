# path: route-playback/route_playback/models/route_models.py

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TrackKind = Literal["gpx", "kml"]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class Fix(BaseModel):
    """One simulated position sample."""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    timestamp_ms: int
    accuracy_m: float = Field(default=3.0, ge=0)
    altitude_m: float = 0.0
    speed_mps: float = Field(default=0.0, ge=0)
    bearing_deg: float = Field(default=0.0, ge=0, lt=360)
    # Change in speed over the elapsed time since the previous fix.
    acceleration_mps2: float = 0.0
    # Route point that produced this fix; None for manual moves.
    route_index: Optional[int] = Field(default=None, ge=0)

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude


class Geofence(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: Optional[Coordinate] = None
    radius_m: float = Field(default=1000.0, ge=0)
    enabled: bool = False


class PlaybackState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class PlaybackStatus(BaseModel):
    state: PlaybackState
    index: int = Field(ge=0)
    route_length: int = Field(ge=0)
    speed_mps: float = Field(gt=0)
    looping: bool
    geofence: Geofence
    last_fix: Optional[Fix] = None


class ParsedTrack(BaseModel):
    """Best-effort result of parsing a track document.

    ``route`` holds every coordinate read before any failure; ``error`` carries
    the parser diagnostic when the document was malformed.
    """

    kind: TrackKind
    route: List[Coordinate] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BBoxWGS84(BaseModel):
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


class RouteSummary(BaseModel):
    point_count: int = Field(ge=0)
    total_distance_m: float = Field(ge=0)
    bbox_wgs84: Optional[BBoxWGS84] = None
    parse_error: Optional[str] = None


### Request bodies for the HTTP surface


class WaypointsRequest(BaseModel):
    points: List[Coordinate]
    interpolate: bool = True
    interval_m: Optional[float] = Field(default=None, gt=0)


class CircleRouteRequest(BaseModel):
    center: Coordinate
    radius_m: Optional[float] = Field(default=None, ge=0)


class SquareRouteRequest(BaseModel):
    center: Coordinate
    size_m: Optional[float] = Field(default=None, ge=0)


class SpeedRequest(BaseModel):
    speed_mps: float

    @field_validator("speed_mps")
    @classmethod
    def validate_speed(cls, v: float) -> float:
        if not v > 0:
            raise ValueError(f"speed must be > 0 m/s: {v}")
        return v


class LoopingRequest(BaseModel):
    looping: bool


class GeofenceRequest(BaseModel):
    center: Coordinate
    radius_m: Optional[float] = Field(default=None, ge=0)


class MoveRequest(BaseModel):
    coordinate: Coordinate
