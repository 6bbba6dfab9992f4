# path: route-playback/route_playback/core/errors.py

from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """A setter rejected its input; the engine state was left unchanged."""


class UnsupportedTrackKindError(ValueError):
    pass
