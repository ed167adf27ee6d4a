"""High-level lidar driver: opens the link, decodes packets and hands out scans."""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import IntEnum
from typing import Any, Optional

from .lidar_packet import PacketProcessor
from .lidar_serial import LidarSerial
from .lidar_types import LaserScan, LDType, LidarStatus

SDK_VERSION = "v3.0.3"
DEFAULT_BAUDRATE = 115200


class CommunicationMode(IntEnum):
    """How the lidar is connected; only the serial link is supported."""

    NO_NULL = 0
    SERIAL = 1
    UDP_CLIENT = 2
    UDP_SERVER = 3
    TCP_CLIENT = 4
    TCP_SERVER = 5


class LidarDriver:
    """Drives one lidar.

    ``serial_factory()`` returns a link object with ``open(port, baudrate,
    on_data)`` and ``close()``; by default a :class:`LidarSerial` is made.
    """

    def __init__(self, serial_factory: Optional[Callable[[], Any]] = None) -> None:
        self._serial_factory = serial_factory or LidarSerial
        self.sdk_version = SDK_VERSION
        self._processor = PacketProcessor()
        self._link: Any = None
        self._started = False
        self._is_ok = False
        self._timestamp_source: Optional[Callable[[], int]] = None
        self._last_publish = time.monotonic()

    @property
    def is_ok(self) -> bool:
        """Whether the driver is running."""
        return self._is_ok

    @property
    def is_started(self) -> bool:
        return self._started

    def register_timestamp_source(self, source: Callable[[], int]) -> None:
        """Set the clock (nanoseconds) used to stamp measured points."""
        self._timestamp_source = source

    def enable_filter(self, enabled: bool) -> None:
        """Switch the noise and near-range filtering on or off."""
        self._processor.filter_enabled = bool(enabled)

    def start(
        self,
        lidar_type: LDType,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        mode: CommunicationMode = CommunicationMode.SERIAL,
    ) -> None:
        """Open the link and begin decoding; does nothing if already started.

        Raises ValueError for bad arguments, RuntimeError if no timestamp
        source is registered and OSError if the port cannot be opened.
        """
        if self._started:
            return
        if lidar_type == LDType.NO_VERSION:
            raise ValueError("lidar type is not set")
        if not port or baudrate == 0:
            raise ValueError("serial port name and baud rate are required")
        if self._timestamp_source is None:
            raise RuntimeError("no timestamp source registered")
        if mode != CommunicationMode.SERIAL:
            raise ValueError(f"communication mode {mode!r} is not supported")
        self._processor.reset(LDType(lidar_type), self._timestamp_source)
        link = self._serial_factory()
        link.open(port, baudrate, self._processor.feed)
        self._link = link
        self._started = True
        self._is_ok = True

    def stop(self) -> None:
        """Close the link; does nothing if not started."""
        if not self._started:
            return
        self._link.close()
        self._started = False
        self._is_ok = False

    def wait_for_connection(self, timeout_ms: float) -> bool:
        """Wait up to ``timeout_ms`` for a valid packet; return whether one came."""
        began = time.monotonic()
        while True:
            if self._processor.consume_power_on_status():
                self._last_publish = time.monotonic()
                return True
            time.sleep(0.001)
            if (time.monotonic() - began) * 1000 >= timeout_ms:
                return False

    def get_laser_scan(self, timeout_ms: float = 1000) -> tuple[LidarStatus, Optional[LaserScan]]:
        """Return the status and, when it is NORMAL, the newest full scan."""
        if not self._started:
            return LidarStatus.STOP, None
        status = self._processor.status
        if status != LidarStatus.NORMAL:
            self._last_publish = time.monotonic()
            return status, None
        points = self._processor.take_scan()
        if points is not None:
            self._last_publish = time.monotonic()
            stamp = points[0].stamp if points else 0
            return LidarStatus.NORMAL, LaserScan(stamp, points)
        elapsed_ms = (time.monotonic() - self._last_publish) * 1000
        if elapsed_ms > timeout_ms:
            return LidarStatus.DATA_TIME_OUT, None
        return LidarStatus.DATA_WAIT, None

    def get_scan_frequency(self) -> float:
        """Rotation frequency in Hz; raises RuntimeError if not started."""
        if not self._started:
            raise RuntimeError("driver is not started")
        return self._processor.scan_frequency()