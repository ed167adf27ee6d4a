import pytest

from rkperiph.lidar_demo import format_scan, main
from rkperiph.lidar_driver import SDK_VERSION
from rkperiph.lidar_types import PointData


def test_format_scan_summary_and_points():
    points = [PointData(12.5, 42, 7, 100), PointData(13.0, 5, 9, 200)]
    lines = format_scan(10.0, points)
    assert lines[0] == "speed(Hz):10.000000, size:2, stamp_front:100,  stamp_back:200"
    assert lines[1] == "angle:12.500,  distance(cm):0042,  intensity:7"
    assert len(lines) == len(points) + 1


def test_format_scan_line_per_point():
    points = [PointData(float(i), i, i, i) for i in range(10)]
    lines = format_scan(1.0, points)
    assert len(lines) == 11
    assert all(line.startswith("angle:") for line in lines[1:])


def test_format_scan_rejects_empty():
    with pytest.raises(ValueError):
        format_scan(10.0, [])


def test_main_without_port(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().err


def test_main_with_missing_device(capsys):
    assert main(["/nonexistent/tty-fake"]) == 1
    out = capsys.readouterr().out
    assert SDK_VERSION in out
    assert "start is fail" in out