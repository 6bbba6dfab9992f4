# path: route-playback/route_playback/main.py

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from route_playback.api.routes.playback import router as playback_router
from route_playback.api.routes.routes import router as routes_router
from route_playback.core.config import Settings, load_settings
from route_playback.services.playback import PlaybackEngine
from route_playback.services.sinks import LoggingSink, RecentFixesSink, fan_out


def build_engine(settings: Settings, recent: RecentFixesSink) -> PlaybackEngine:
    return PlaybackEngine(
        sink=fan_out(recent, LoggingSink()),
        speed_mps=settings.speed_mps,
        looping=settings.looping,
        accuracy_m=settings.accuracy_m,
    )


def create_app(settings: Optional[Settings] = None, engine: Optional[PlaybackEngine] = None) -> FastAPI:
    settings = settings or load_settings()
    recent = RecentFixesSink(maxlen=settings.recent_fixes)
    if engine is None:
        engine = build_engine(settings, recent)
    else:
        engine.set_sink(fan_out(recent, LoggingSink()))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        engine.close()

    app = FastAPI(title="route-playback", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.recent_fixes = recent

    app.include_router(routes_router)
    app.include_router(playback_router)
    return app
