import json

from route_playback.cli import main


GPX = '<gpx><trk><trkseg><trkpt lat="0" lon="0"/><trkpt lat="0" lon="0.001"/></trkseg></trk></gpx>'


def test_densify_prints_points(tmp_path, capsys):
    track = tmp_path / "walk.gpx"
    track.write_text(GPX, encoding="utf-8")

    assert main(["densify", str(track), "--interval", "50"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert json.loads(lines[0]) == {"latitude": 0.0, "longitude": 0.0}


def test_play_stops_after_count(tmp_path, capsys):
    track = tmp_path / "walk.gpx"
    track.write_text(GPX, encoding="utf-8")

    assert main(["play", str(track), "--speed", "1000", "--no-interpolate", "--count", "3"]) == 0
    fixes = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert [f["route_index"] for f in fixes[:3]] == [0, 1, 0]


def test_play_rejects_bad_speed(tmp_path, capsys):
    track = tmp_path / "walk.gpx"
    track.write_text(GPX, encoding="utf-8")

    assert main(["play", str(track), "--speed", "0"]) == 2
    assert "speed" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["play", str(tmp_path / "nope.kml")]) == 2
    assert "Cannot read" in capsys.readouterr().err
