"""Start a lidar on a serial port and print every scan it delivers."""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence
from typing import Optional

from .lidar_driver import CommunicationMode, LidarDriver
from .lidar_types import LDType, LidarStatus, PointData

LIDAR_TYPE = LDType.LD_19
BAUDRATE = 230400
CONNECT_TIMEOUT_MS = 3500
SCAN_TIMEOUT_MS = 1500
POLL_INTERVAL = 0.1


def format_scan(frequency: float, points: Sequence[PointData]) -> list[str]:
    """Summary line followed by one line per point."""
    if not points:
        raise ValueError("a scan needs at least one point")
    lines = [
        f"speed(Hz):{frequency:f}, size:{len(points)}, "
        f"stamp_front:{points[0].stamp},  stamp_back:{points[-1].stamp}"
    ]
    lines.extend(
        f"angle:{p.angle:0.3f},  distance(cm):{p.distance:04d},  intensity:{p.intensity}"
        for p in points
    )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("usage: lidar_demo <serial port>", file=sys.stderr)
        return 1
    port = args[0]
    driver = LidarDriver()
    print(f"LDLiDAR SDK Pack Version is {driver.sdk_version}")
    driver.register_timestamp_source(time.time_ns)
    driver.enable_filter(True)
    try:
        driver.start(LIDAR_TYPE, port, BAUDRATE, CommunicationMode.SERIAL)
    except (OSError, ValueError, RuntimeError) as exc:
        print(f"ldlidar node start is fail: {exc}")
        return 1
    print("ldlidar node start is success")
    print(f"Attempting to connect to lidar on {port} at baud rate {BAUDRATE}")
    if driver.wait_for_connection(CONNECT_TIMEOUT_MS):
        print("ldlidar communication is normal.")
    else:
        print("ldlidar communication is abnormal.")
        driver.stop()
    try:
        while driver.is_ok:
            status, scan = driver.get_laser_scan(SCAN_TIMEOUT_MS)
            if status == LidarStatus.NORMAL and scan is not None and scan.points:
                for line in format_scan(driver.get_scan_frequency(), scan.points):
                    print(line)
            elif status == LidarStatus.DATA_TIME_OUT:
                print("ldlidar publish data is time out, please check your lidar device.")
                driver.stop()
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        pass
    finally:
        driver.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())