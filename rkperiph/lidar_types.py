"""Data types shared by the lidar packet decoder, filter and driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

_PI_MILLI = 3141.59


def angle_to_radian(angle: float) -> float:
    """Degrees to radians, with the constant the lidar firmware uses."""
    return angle * _PI_MILLI / 180000


def radian_to_angle(angle: float) -> float:
    """Radians to degrees, with the constant the lidar firmware uses."""
    return angle * 180000 / _PI_MILLI


class LDType(IntEnum):
    """Supported lidar models."""

    NO_VERSION = 0
    LD_06 = 1
    LD_19 = 2
    STL_06P = 3
    STL_26 = 4
    STL_27L = 5


class LidarStatus(IntEnum):
    """State reported when asking the driver for a scan."""

    NORMAL = 0
    ERROR = 1
    DATA_TIME_OUT = 2
    DATA_WAIT = 3
    STOP = 4


@dataclass
class PointData:
    """One measurement: polar angle (degrees), distance (mm), intensity, stamp (ns)."""

    angle: float = 0.0
    distance: int = 0
    intensity: int = 0
    stamp: int = 0
    x: float = 0.0
    y: float = 0.0


@dataclass
class LaserScan:
    """A full revolution of points with the stamp of its first point."""

    stamp: int = 0
    points: list[PointData] = field(default_factory=list)