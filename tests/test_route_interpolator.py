import pytest

from tests.helpers import coord
from route_playback.core.errors import InvalidConfigurationError
from route_playback.services.route_interpolator import circular_route, densify, square_route
from route_playback.utils.geo import distance_m


def test_short_routes_are_returned_unchanged():
    assert densify([], 5.0) == []
    assert densify([coord(1, 1)], 5.0) == [coord(1, 1)]


def test_endpoints_preserved_and_never_shrinks():
    route = [coord(0, 0), coord(0, 0.01), coord(0.01, 0.01), coord(0.01, 0.01), coord(0.02, 0.0)]
    out = densify(route, 100.0)
    assert out[0] == route[0]
    assert out[-1] == route[-1]
    assert len(out) >= len(route)


def test_inserts_points_strictly_between_endpoints():
    start, end = coord(0, 0), coord(0, 1)
    out = densify([start, end], 10_000.0)
    # 111.19 km / 10 km -> 11 segments -> 10 inserted points
    assert len(out) == 12
    inner = out[1:-1]
    assert inner
    assert all(0.0 < p.longitude < 1.0 for p in inner)
    assert [p.longitude for p in out] == sorted(p.longitude for p in out)
    assert inner[0].longitude == pytest.approx(1 / 11)


def test_segment_within_interval_is_left_alone():
    route = [coord(0, 0), coord(0, 0.0001)]  # ~11 m
    assert densify(route, 20.0) == route
    assert densify(route, distance_m(*route)) == route


def test_duplicate_points_produce_no_insertions():
    route = [coord(5, 5), coord(5, 5), coord(5, 5)]
    assert densify(route, 1.0) == route


@pytest.mark.parametrize("interval", [0.0, -1.0, float("nan")])
def test_rejects_non_positive_interval(interval):
    with pytest.raises(InvalidConfigurationError):
        densify([coord(0, 0), coord(0, 1)], interval)


def test_circular_route_is_closed():
    center = coord(0, 0)
    route = circular_route(center, 50.0)
    assert len(route) == 361
    assert route[0].latitude == pytest.approx(route[-1].latitude, abs=1e-12)
    assert route[0].longitude == pytest.approx(route[-1].longitude, abs=1e-12)
    for p in route[::45]:
        assert distance_m(center, p) == pytest.approx(50.0, rel=1e-2)


def test_circular_route_rejects_negative_radius():
    with pytest.raises(InvalidConfigurationError):
        circular_route(coord(0, 0), -1.0)


def test_square_route_is_closed_with_expected_sides():
    center = coord(48.85, 2.35)
    route = square_route(center, 100.0)
    assert len(route) == 5
    assert route[0] == route[-1]
    for a, b in zip(route, route[1:]):
        assert distance_m(a, b) == pytest.approx(100.0, rel=1e-2)


def test_square_route_rejects_negative_size():
    with pytest.raises(InvalidConfigurationError):
        square_route(coord(0, 0), -5.0)


def test_rejects_interpolation_beyond_point_cap():
    # ~1112 km at 1 m spacing
    with pytest.raises(InvalidConfigurationError):
        densify([coord(0, 0), coord(0, 10)], 1.0)


def test_point_cap_boundary():
    route = [coord(0, 0), coord(0, 0.001)]  # ~111 m
    assert len(densify(route, 10.0, max_points=12)) == 12
    with pytest.raises(InvalidConfigurationError):
        densify(route, 10.0, max_points=11)
