"""Command-line interface for route_playback.

Run:
    python -m route_playback play track.gpx --speed 1.4 --count 20
    python -m route_playback serve --port 8000
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading

from route_playback.core.config import load_settings
from route_playback.core.logging import configure
from route_playback.models.route_models import Fix, PlaybackState
from route_playback.services.playback import PlaybackEngine
from route_playback.services.route_interpolator import densify
from route_playback.services.route_parser import parse_track_file

logger = logging.getLogger(__name__)


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "route_playback.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


def _load(path: str):
    try:
        return parse_track_file(path)
    except (OSError, ValueError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return None


def _cmd_play(args: argparse.Namespace) -> int:
    parsed = _load(args.file)
    if parsed is None:
        return 2
    if not parsed.route:
        print(f"No points found in {args.file}" + (f": {parsed.error}" if parsed.error else ""), file=sys.stderr)
        return 1

    done = threading.Event()
    emitted = 0

    def sink(fix: Fix) -> None:
        nonlocal emitted
        print(fix.model_dump_json(), flush=True)
        emitted += 1
        if args.count and emitted >= args.count:
            done.set()

    try:
        with PlaybackEngine(sink=sink, speed_mps=args.speed, looping=not args.no_loop) as engine:
            engine.set_route(parsed.route, interpolate=not args.no_interpolate, interval_m=args.interval)
            # Poll so that a finished one-shot walk ends the command too.
            while not done.wait(0.2):
                if engine.state is not PlaybackState.RUNNING:
                    break
    except ValueError as e:
        print(f"Invalid playback settings: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


def _cmd_densify(args: argparse.Namespace) -> int:
    parsed = _load(args.file)
    if parsed is None:
        return 2
    try:
        route = densify(parsed.route, args.interval)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2
    for point in route:
        print(point.model_dump_json())
    logger.info("%d points in, %d points out", len(parsed.route), len(route))
    return 0 if parsed.error is None else 1


def build_parser() -> argparse.ArgumentParser:
    settings = load_settings()

    p = argparse.ArgumentParser(prog="route_playback", description="Synthetic location playback along GPX/KML routes.")
    p.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("serve", help="Run the HTTP control API")
    s.add_argument("--host", default="127.0.0.1")
    s.add_argument("--port", type=int, default=8000)
    s.set_defaults(func=_cmd_serve)

    pl = sub.add_parser("play", help="Play a GPX/KML file and print fixes as JSON lines")
    pl.add_argument("file", help="Path to a .gpx or .kml file")
    pl.add_argument("--speed", type=float, default=settings.speed_mps, help="Meters per second (default: %(default)s)")
    pl.add_argument("--interval", type=float, default=None, help="Interpolation interval in meters (default: speed)")
    pl.add_argument("--no-interpolate", action="store_true", help="Play the raw track points")
    pl.add_argument("--no-loop", action="store_true", help="Stop after the last point")
    pl.add_argument("--count", type=int, default=0, help="Exit after this many fixes (0 = unlimited)")
    pl.set_defaults(func=_cmd_play)

    d = sub.add_parser("densify", help="Print the interpolated route as JSON lines")
    d.add_argument("file", help="Path to a .gpx or .kml file")
    d.add_argument("--interval", type=float, required=True, help="Target spacing in meters")
    d.set_defaults(func=_cmd_densify)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure(args.log_level)
    return args.func(args)
