# path: route-playback/route_playback/services/route_parser.py

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging
import xml.etree.ElementTree as ET

from route_playback.core.errors import UnsupportedTrackKindError
from route_playback.models.route_models import Coordinate, ParsedTrack, TrackKind


logger = logging.getLogger(__name__)

GPX_POINT_TAGS = ("trkpt", "wpt")
KML_COORDINATES_TAG = "coordinates"
_CHUNK_SIZE = 64 * 1024

_EXTENSIONS = {".gpx": "gpx", ".kml": "kml"}


def parse_waypoints(points: Iterable[Coordinate]) -> List[Coordinate]:
    return list(points)


def _local_name(tag: str) -> str:
    # "{http://www.topografix.com/GPX/1/1}trkpt" -> "trkpt"
    return tag.rpartition("}")[2]


def _gpx_point(elem: ET.Element) -> Optional[Coordinate]:
    try:
        return Coordinate(latitude=float(elem.get("lat")), longitude=float(elem.get("lon")))
    except (TypeError, ValueError):
        # Missing, non-numeric or out-of-range attributes are skipped
        return None


def _kml_points(text: Optional[str]) -> List[Coordinate]:
    out = []
    for token in (text or "").split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        try:
            out.append(Coordinate(latitude=float(parts[1]), longitude=float(parts[0])))
        except ValueError:
            continue
    return out


def parse_track_document(kind: TrackKind, content: Union[bytes, str]) -> ParsedTrack:
    """Extract route coordinates from a GPX or KML document.

    The document is read incrementally so that a malformed tail does not cost
    the points already read: on a parse failure the partial route is returned
    together with the parser diagnostic in ``error``. This never raises for bad
    documents, only for an unknown ``kind``.
    """
    if kind not in ("gpx", "kml"):
        raise UnsupportedTrackKindError(f"Unsupported track kind: {kind!r}")

    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    route: List[Coordinate] = []
    # GPX attributes are complete on "start"; KML text only on "end".
    # GPX "end" events are only used to release finished point elements.
    parser = ET.XMLPullParser(events=("start", "end") if kind == "gpx" else ("end",))
    error: Optional[str] = None

    try:
        for offset in range(0, max(len(data), 1), _CHUNK_SIZE):
            parser.feed(data[offset:offset + _CHUNK_SIZE])
            _drain(parser, kind, route)
        parser.close()
        _drain(parser, kind, route)
    except ET.ParseError as e:
        error = str(e)
        logger.warning("Malformed %s document after %d points: %s", kind.upper(), len(route), error)

    return ParsedTrack(kind=kind, route=route, error=error)


def _drain(parser: ET.XMLPullParser, kind: TrackKind, route: List[Coordinate]) -> None:
    for event, elem in parser.read_events():
        name = _local_name(elem.tag)
        if kind == "gpx":
            if name not in GPX_POINT_TAGS:
                continue
            if event == "start":
                point = _gpx_point(elem)
                if point is not None:
                    route.append(point)
            else:
                elem.clear()
        elif name == KML_COORDINATES_TAG:
            route.extend(_kml_points(elem.text))
            elem.clear()


def track_kind_for_path(path: Union[str, Path]) -> TrackKind:
    suffix = Path(path).suffix.lower()
    try:
        return _EXTENSIONS[suffix]  # type: ignore[return-value]
    except KeyError:
        raise UnsupportedTrackKindError(f"Cannot infer track kind from extension {suffix!r}") from None


def parse_track_file(path: Union[str, Path], kind: Optional[TrackKind] = None) -> ParsedTrack:
    p = Path(path)
    resolved = kind or track_kind_for_path(p)
    return parse_track_document(resolved, p.read_bytes())
