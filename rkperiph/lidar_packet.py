"""Decoding of lidar measurement packets and assembly of full scans."""

from __future__ import annotations

import struct
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .lidar_filter import Tofbf
from .lidar_types import LDType, LidarStatus, PointData

PKG_HEADER = 0x54
PKG_VER_LEN = 0x2C
POINT_PER_PACK = 12

_FRAME = struct.Struct("<BBHH" + "HB" * POINT_PER_PACK + "HHB")
FRAME_SIZE = _FRAME.size

_MEASURE_FREQUENCY = {
    LDType.LD_06: 4500,
    LDType.LD_19: 4500,
    LDType.STL_06P: 5000,
    LDType.STL_26: 5000,
    LDType.STL_27L: 21600,
}
_DEFAULT_MEASURE_FREQUENCY = 4500


def _build_crc_table() -> list[int]:
    table = []
    for value in range(256):
        crc = value
        for _ in range(8):
            crc = ((crc << 1) ^ 0x4D) & 0xFF if crc & 0x80 else (crc << 1) & 0xFF
        table.append(crc)
    return table


_CRC_TABLE = _build_crc_table()


def crc8(data: bytes) -> int:
    """CRC-8 (polynomial 0x4D, initial value 0) closing every packet."""
    crc = 0
    for byte in data:
        crc = _CRC_TABLE[(crc ^ byte) & 0xFF]
    return crc


@dataclass(frozen=True)
class LidarFrame:
    """One packet: twelve (distance, intensity) measurements over an angular span.

    Speed is in degrees per second, angles in hundredths of a degree and the
    timestamp in milliseconds.
    """

    header: int
    ver_len: int
    speed: int
    start_angle: int
    points: tuple[tuple[int, int], ...]
    end_angle: int
    timestamp: int
    crc: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "LidarFrame":
        """Decode a packet of exactly :data:`FRAME_SIZE` bytes."""
        if len(data) != FRAME_SIZE:
            raise ValueError(f"packet must be {FRAME_SIZE} bytes, got {len(data)}")
        fields = _FRAME.unpack(bytes(data))
        header, ver_len, speed, start_angle = fields[:4]
        raw = fields[4:4 + 2 * POINT_PER_PACK]
        points = tuple(zip(raw[0::2], raw[1::2]))
        end_angle, timestamp, crc = fields[4 + 2 * POINT_PER_PACK:]
        return cls(header, ver_len, speed, start_angle, points, end_angle, timestamp, crc)


class _State(Enum):
    HEADER = 0
    VER_LEN = 1
    DATA = 2


class PacketProcessor:
    """Turns the lidar byte stream into complete, optionally filtered scans.

    Bytes are given to :meth:`feed` (usually from the receive thread); a
    finished revolution is collected with :meth:`take_scan`.
    """

    def __init__(self) -> None:
        self.lidar_type = LDType.NO_VERSION
        self.filter_enabled = True
        self.status = LidarStatus.NORMAL
        self.measure_point_frequency = _DEFAULT_MEASURE_FREQUENCY
        self._timestamp_source: Optional[Callable[[], int]] = None
        self._speed = 0
        self._packet_timestamp = 0
        self._frame_ready = False
        self._power_on = False
        self._last_pkg_stamp = 0
        self._first_frame = True
        self._state = _State.HEADER
        self._pending = bytearray()
        self._points: list[PointData] = []
        self._scan: list[PointData] = []
        self._lock = threading.Lock()

    @property
    def speed_origin(self) -> int:
        """Last reported rotation speed in degrees per second."""
        return self._speed

    @property
    def packet_timestamp(self) -> int:
        """Timestamp field of the last accepted packet, in milliseconds."""
        return self._packet_timestamp

    def reset(self, lidar_type: LDType, timestamp_source: Optional[Callable[[], int]] = None) -> None:
        """Clear the processing status and configure model and clock (ns)."""
        with self._lock:
            self._frame_ready = False
        self._power_on = False
        self.status = LidarStatus.NORMAL
        self._last_pkg_stamp = 0
        self._first_frame = True
        self._timestamp_source = timestamp_source
        self.lidar_type = lidar_type
        self.measure_point_frequency = _MEASURE_FREQUENCY.get(lidar_type, _DEFAULT_MEASURE_FREQUENCY)

    def scan_frequency(self) -> float:
        """Rotation frequency in Hz."""
        return self._speed / 360.0

    def consume_power_on_status(self) -> bool:
        """Return whether a valid packet arrived since the last call, and clear it."""
        if self._power_on:
            self._power_on = False
            return True
        return False

    def take_scan(self) -> Optional[list[PointData]]:
        """Return the newest finished scan once, or None if none is waiting."""
        with self._lock:
            if not self._frame_ready:
                return None
            self._frame_ready = False
            return list(self._scan)

    def feed(self, data: Iterable[int]) -> None:
        """Process received bytes and assemble a scan if a revolution is complete."""
        self._parse(data)
        self._assemble()

    def _now(self) -> int:
        source = self._timestamp_source or time.time_ns
        return int(source())

    def _analysis_one(self, byte: int) -> Optional[LidarFrame]:
        if self._state is _State.HEADER:
            if byte == PKG_HEADER:
                self._pending.append(byte)
                self._state = _State.VER_LEN
        elif self._state is _State.VER_LEN:
            if byte == PKG_VER_LEN:
                self._pending.append(byte)
                self._state = _State.DATA
            else:
                self._state = _State.HEADER
                self._pending.clear()
        else:
            self._pending.append(byte)
            if len(self._pending) >= FRAME_SIZE:
                raw = bytes(self._pending[:FRAME_SIZE])
                self._state = _State.HEADER
                self._pending.clear()
                frame = LidarFrame.from_bytes(raw)
                if crc8(raw[:-1]) == frame.crc:
                    return frame
        return None

    def _parse(self, data: Iterable[int]) -> None:
        for byte in data:
            frame = self._analysis_one(byte & 0xFF)
            if frame is None:
                continue
            self._power_on = True
            span = (frame.end_angle // 100 - frame.start_angle // 100 + 360) % 360
            limit = frame.speed * POINT_PER_PACK / self.measure_point_frequency * 1.5
            if span > limit:
                continue
            if self._last_pkg_stamp == 0:
                self._last_pkg_stamp = self._now()
                continue
            current = self._now()
            stamp_step = (current - self._last_pkg_stamp) / (POINT_PER_PACK - 1)
            self._speed = frame.speed
            self._packet_timestamp = frame.timestamp
            arc = (frame.end_angle + 36000 - frame.start_angle) % 36000
            step = (arc // (POINT_PER_PACK - 1)) / 100.0
            start = frame.start_angle / 100.0
            for index, (distance, intensity) in enumerate(frame.points):
                angle = start + index * step
                if angle >= 360.0:
                    angle -= 360.0
                stamp = int(self._last_pkg_stamp + stamp_step * index)
                self._points.append(PointData(angle, distance, intensity, stamp))
            self._last_pkg_stamp = current

    def _drop(self, count: int) -> None:
        del self._points[:count]

    def _assemble(self) -> bool:
        last_angle = 0.0
        count = 0
        speed_hz = self.scan_frequency()
        for point in self._points:
            if point.angle < 20.0 and last_angle > 340.0:
                if count * speed_hz > self.measure_point_frequency * 1.4:
                    self._drop(count)
                    return False
                data = self._points[:count]
                if self.filter_enabled:
                    result = Tofbf(int(self._speed), self.lidar_type).filter(data)
                else:
                    result = list(data)
                result.sort(key=lambda p: p.stamp)
                if result:
                    if self._first_frame:
                        self._first_frame = False
                    else:
                        with self._lock:
                            self._scan = result
                            self._frame_ready = True
                    self._drop(count)
                    return True
            count += 1
            if count * speed_hz > self.measure_point_frequency * 2:
                self._drop(count)
                return False
            last_angle = point.angle
        return False