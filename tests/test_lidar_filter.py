import pytest

from rkperiph.lidar_filter import FilterType, Tofbf
from rkperiph.lidar_types import LDType, PointData

SPEED = 3600


def run(start, count, step, distance, intensity):
    return [
        PointData(angle=start + i * step, distance=distance, intensity=intensity, stamp=i)
        for i in range(count)
    ]


@pytest.mark.parametrize(
    "lidar_type, expected",
    [
        (LDType.LD_06, FilterType.NEAR_FILTER),
        (LDType.LD_19, FilterType.NEAR_FILTER),
        (LDType.STL_06P, FilterType.NOISE_FILTER),
        (LDType.STL_26, FilterType.NOISE_FILTER),
        (LDType.STL_27L, FilterType.NOISE_FILTER),
        (LDType.NO_VERSION, FilterType.NO_FILTER),
    ],
)
def test_filter_type_per_model(lidar_type, expected):
    assert Tofbf(SPEED, lidar_type).filter_type is expected


def test_near_filter_thresholds():
    tofbf = Tofbf(SPEED, LDType.LD_19)
    assert tofbf.intensity_low == 15
    assert tofbf.intensity_single == 220
    assert tofbf.scan_frequency == 4500


def test_no_filter_returns_equal_copy():
    points = run(10, 5, 0.5, 1000, 3)
    result = Tofbf(SPEED, LDType.NO_VERSION).filter(points)
    assert result == points
    assert result is not points


@pytest.mark.parametrize("lidar_type", [LDType.LD_19, LDType.STL_26])
def test_empty_scan(lidar_type):
    assert Tofbf(SPEED, lidar_type).filter([]) == []


def test_near_filter_keeps_far_points():
    far = run(100, 3, 10, 6000, 1)
    result = Tofbf(SPEED, LDType.LD_19).filter(far)
    assert result == far


def test_near_filter_zeroes_lone_weak_point():
    points = [PointData(angle=50, distance=1000, intensity=10)]
    result = Tofbf(SPEED, LDType.LD_19).filter(points)
    assert len(result) == 1
    assert result[0].distance == 0
    assert result[0].intensity == 0
    assert result[0].angle == 50


def test_near_filter_keeps_large_group():
    points = run(10, 20, 0.5, 1000, 5)
    result = Tofbf(SPEED, LDType.LD_19).filter(points)
    assert result == points


def test_near_filter_keeps_bright_small_group():
    points = run(10, 5, 0.5, 1000, 100)
    assert Tofbf(SPEED, LDType.LD_19).filter(points) == points


def test_near_filter_zeroes_dim_small_group():
    points = run(10, 5, 0.5, 1000, 10)
    result = Tofbf(SPEED, LDType.LD_19).filter(points)
    assert [p.angle for p in result] == [p.angle for p in points]
    assert all(p.distance == 0 and p.intensity == 0 for p in result)


def test_near_filter_preserves_count_and_does_not_mutate():
    points = run(10, 5, 0.5, 1000, 10) + run(200, 3, 0.5, 7000, 1) + run(300, 2, 0.5, 800, 240)
    snapshot = [PointData(**vars(p)) for p in points]
    result = Tofbf(SPEED, LDType.LD_06).filter(points)
    assert len(result) == len(points)
    assert sorted(p.angle for p in result) == sorted(p.angle for p in points)
    assert points == snapshot


def test_near_filter_far_points_come_first():
    near = run(10, 20, 0.5, 1000, 100)
    far = run(200, 2, 1, 6000, 100)
    result = Tofbf(SPEED, LDType.LD_19).filter(near + far)
    assert result[:2] == far
    assert result[2:] == near


def test_noise_filter_zeroes_weak_near_point():
    points = run(0, 6, 1, 1000, 100)
    points[3] = PointData(angle=3, distance=1000, intensity=5)
    result = Tofbf(SPEED, LDType.STL_26).filter(points)
    assert result[3].distance == 0
    assert result[3].intensity == 0
    assert result[:3] == points[:3]
    assert result[4:] == points[4:]


def test_noise_filter_keeps_smooth_bright_scan():
    points = run(0, 10, 1, 1500, 150)
    assert Tofbf(SPEED, LDType.STL_27L).filter(points) == points


def test_noise_filter_removes_dim_spike():
    points = run(0, 5, 1, 400, 100)
    points[2] = PointData(angle=2, distance=300, intensity=50)
    result = Tofbf(SPEED, LDType.STL_06P).filter(points)
    assert result[2].distance == 0
    assert len(result) == len(points)


def test_noise_filter_keeps_far_points():
    points = run(0, 4, 1, 8000, 1)
    assert Tofbf(SPEED, LDType.STL_26).filter(points) == points