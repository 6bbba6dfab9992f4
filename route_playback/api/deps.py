# path: route-playback/route_playback/api/deps.py

from __future__ import annotations

from fastapi import Request

from route_playback.core.config import Settings
from route_playback.services.playback import PlaybackEngine
from route_playback.services.sinks import RecentFixesSink


def get_engine(request: Request) -> PlaybackEngine:
    return request.app.state.engine


def get_recent_fixes(request: Request) -> RecentFixesSink:
    return request.app.state.recent_fixes


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
