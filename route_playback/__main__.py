"""Module entry point: python -m route_playback ..."""

from __future__ import annotations

from route_playback.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
