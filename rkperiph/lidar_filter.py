"""Near-range and noise filtering of lidar scans."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from enum import Enum

from .lidar_types import LDType, PointData

_log = logging.getLogger(__name__)

_NEAR_RANGE = 5000


class FilterType(Enum):
    """Filtering applied to a scan."""

    NO_FILTER = 0
    NEAR_FILTER = 1
    NOISE_FILTER = 2


def _zeroed(point: PointData) -> PointData:
    return replace(point, distance=0, intensity=0)


class Tofbf:
    """Filter chosen for a lidar model, running at ``speed`` degrees per second."""

    def __init__(self, speed: float, lidar_type: LDType) -> None:
        self.curr_speed = float(speed)
        self.intensity_low = 0
        self.intensity_single = 0
        self.scan_frequency = 0
        if lidar_type in (LDType.LD_06, LDType.LD_19):
            self.intensity_low = 15
            self.intensity_single = 220
            self.scan_frequency = 4500
            self.filter_type = FilterType.NEAR_FILTER
        elif lidar_type in (LDType.STL_06P, LDType.STL_26, LDType.STL_27L):
            self.filter_type = FilterType.NOISE_FILTER
        else:
            _log.warning("tofbf input ldlidar type error!")
            self.filter_type = FilterType.NO_FILTER

    def filter(self, points: Sequence[PointData]) -> list[PointData]:
        """Return a filtered copy; rejected points keep their place with zero range."""
        if self.filter_type is FilterType.NEAR_FILTER:
            return self._near_filter(points)
        if self.filter_type is FilterType.NOISE_FILTER:
            return self._noise_filter(points)
        return list(points)

    def _near_filter(self, points: Sequence[PointData]) -> list[PointData]:
        normal = [p for p in points if p.distance >= _NEAR_RANGE]
        pending = [p for p in points if p.distance < _NEAR_RANGE]
        if not points:
            return normal

        limit = self.curr_speed / self.scan_frequency * 2
        pending.sort(key=lambda p: p.angle)

        groups: list[list[PointData]] = []
        item: list[PointData] = []
        last = PointData(angle=-10, distance=0, intensity=0)
        for point in pending:
            if (abs(point.angle - last.angle) > limit
                    or abs(point.distance - last.distance) > last.distance * 0.03):
                if item:
                    groups.append(item)
                    item = []
            item.append(point)
            last = point
        if item:
            groups.append(item)
        if not groups:
            return normal

        first_item = groups[0][0]
        last_item = groups[-1][-1]
        if (len(groups) > 1
                and abs(first_item.angle + 360.0 - last_item.angle) < limit
                and abs(first_item.distance - last_item.distance) < last.distance * 0.03):
            groups[0] = groups[-1] + groups[0]
            groups.pop()

        for group in groups:
            if len(group) > 15:
                normal.extend(group)
                continue
            if len(group) < 3:
                mean = sum(p.intensity for p in group) // len(group)
                if mean < self.intensity_single:
                    normal.extend(_zeroed(p) for p in group)
                    continue
            intensity_avg = sum(p.intensity for p in group) / len(group)
            if intensity_avg > self.intensity_low:
                normal.extend(group)
            else:
                normal.extend(_zeroed(p) for p in group)
        return normal

    def _noise_filter(self, points: Sequence[PointData]) -> list[PointData]:
        normal: list[PointData] = []
        count = len(points)
        for index, point in enumerate(points):
            prev = points[index - 1].distance
            nxt = points[(index + 1) % count].distance
            dist = point.distance
            intensity = point.intensity

            def jumps(gap: int) -> bool:
                return ((dist + gap < prev and dist + gap < nxt)
                        or (dist > prev + gap and dist > nxt + gap))

            reject = False
            if dist < 500:
                if jumps(10):
                    reject = intensity < 60
                elif jumps(7):
                    reject = intensity < 45
                elif jumps(5):
                    reject = intensity < 30

            if not reject and dist < _NEAR_RANGE:
                if dist < 200:
                    reject = intensity < 25
                else:
                    reject = intensity < 10
                if not reject:
                    apart_prev = dist + 30 < prev or dist > prev + 30
                    apart_next = dist + 30 < nxt or dist > nxt + 30
                    if apart_prev and apart_next:
                        reject = (dist < 2000 and intensity < 30) or intensity < 20

            normal.append(_zeroed(point) if reject else replace(point))
        return normal