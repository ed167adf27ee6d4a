"""Command frames for the robot chassis controller and a simple drive loop."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterable, Iterator, Sequence
from functools import reduce
from operator import xor
from typing import Optional

from .gesture import open_uart

UART_TTL_NAME = "/dev/ttyUSB0"
CHASSIS_BAUDRATE = 115200
FRAME_SIZE = 12

_HEADER = bytes([0x0A, 0x0C])
_MOTION_LENGTH = 0x06
_MOTION_RESPONSE_ID = 0x02


def encode_motion(vel: int, yaw: int, ang: int) -> bytes:
    """Pack velocity, yaw and spin rate as three little-endian 16-bit values."""
    return b"".join(bytes([value & 0xFF, (value >> 8) & 0xFF]) for value in (vel, yaw, ang))


def xor_checksum(length: int, response_id: int, data: Iterable[int]) -> int:
    """XOR of the length, the response id and the first ``length`` data bytes."""
    payload = list(data)[:length]
    return reduce(xor, payload, length ^ response_id) & 0xFF


def motion_frame(vel: int, yaw: int, ang: int) -> bytes:
    """Twelve-byte frame asking the chassis to move."""
    data = encode_motion(vel, yaw, ang)
    check = xor_checksum(_MOTION_LENGTH, _MOTION_RESPONSE_ID, data)
    return (
        _HEADER
        + bytes([_MOTION_LENGTH, 0x00, _MOTION_RESPONSE_ID])
        + data
        + bytes([check])
    )


def power_frame(state: int) -> bytes:
    """Twelve-byte frame switching chassis power on (1) or off (0)."""
    if state not in (0, 1):
        raise ValueError(f"power state must be 0 or 1, got {state}")
    body = _HEADER + bytes([0x01, 0x00, 0x01, state, state])
    return body.ljust(FRAME_SIZE, b"\x00")


def drive(port, vel: int, yaw: int, ang: int, interval: float) -> Iterator[int]:
    """Power the chassis on, then keep sending a motion command.

    Yields the number of bytes each motion command wrote, waiting
    ``interval`` seconds after each.
    """
    port.write(power_frame(1))
    frame = motion_frame(vel, yaw, ang)
    while True:
        written = port.write(frame)
        yield len(frame) if written is None else written
        time.sleep(interval)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    device = args[0] if args else UART_TTL_NAME
    try:
        port = open_uart(device, CHASSIS_BAUDRATE)
    except (OSError, ValueError) as exc:
        print(f"open file fail: {exc}", file=sys.stderr)
        return 1
    try:
        for written in drive(port, 0, 0, -200, 0.3):
            print("send success, data is  " if written > 0 else "send error!")
    except KeyboardInterrupt:
        pass
    finally:
        port.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())