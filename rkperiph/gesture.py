"""Read and report events from a serial gesture sensor."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence
from enum import IntEnum
from typing import BinaryIO, Optional, Union

import serial

UART_TTL_NAME = "/dev/ttyS1"
FRAME_LEN = 4
RECV_HEAD = 0xAA
RECV_END = 0x55
DEFAULT_BAUDRATE = 9600

_SUPPORTED_BAUDRATES = frozenset({9600, 19200, 38400, 115200, 1152000})
_FALLBACK_BAUDRATE = 1152000


class Gesture(IntEnum):
    """Event codes carried in the second byte of a frame."""

    RIGHT = 0x01
    LEFT = 0x02
    BACK = 0x03
    FORWARD = 0x04
    PULLUP = 0x05
    PULLDOWN = 0x06
    PULLREMOVE = 0x07
    TOUCH1 = 0x21
    TOUCH2 = 0x22
    TOUCH3 = 0x23
    TOUCH4 = 0x24
    TOUCH5 = 0x25


_DESCRIPTIONS = {
    Gesture.BACK: "get event back",
    Gesture.FORWARD: "get event forward",
    Gesture.RIGHT: "get event right",
    Gesture.LEFT: "get event left",
    Gesture.PULLUP: "get event pull up",
    Gesture.PULLDOWN: "get event pull down",
    Gesture.PULLREMOVE: "get event pull and remove",
    Gesture.TOUCH1: "get event touch1",
    Gesture.TOUCH2: "get event touch2",
    Gesture.TOUCH3: "get event touch3",
    Gesture.TOUCH4: "get event touch4",
    Gesture.TOUCH5: "get event touch5",
}


class GestureFrameError(ValueError):
    """A received frame is malformed or names no known event."""


def convert_baudrate(baudrate: int) -> int:
    """Return ``baudrate`` if the link supports it, otherwise 1152000."""
    return baudrate if baudrate in _SUPPORTED_BAUDRATES else _FALLBACK_BAUDRATE


def data_bits_setting(bits: int) -> int:
    """Byte size for 5 to 8 data bits."""
    sizes = {5: serial.FIVEBITS, 6: serial.SIXBITS, 7: serial.SEVENBITS, 8: serial.EIGHTBITS}
    try:
        return sizes[bits]
    except KeyError:
        raise ValueError(f"unsupported number of data bits: {bits}") from None


def parity_setting(parity: str) -> str:
    """Parity for a letter: n(one), o(dd), e(ven), m(ark) or s(pace), any case."""
    parities = {
        "n": serial.PARITY_NONE,
        "o": serial.PARITY_ODD,
        "e": serial.PARITY_EVEN,
        "m": serial.PARITY_MARK,
        "s": serial.PARITY_SPACE,
    }
    if not isinstance(parity, str) or len(parity) != 1 or parity.lower() not in parities:
        raise ValueError(f"unsupported parity: {parity!r}")
    return parities[parity.lower()]


def stop_bits_setting(stopbits: int) -> float:
    """Stop bits for 1 or 2."""
    if stopbits == 1:
        return serial.STOPBITS_ONE
    if stopbits == 2:
        return serial.STOPBITS_TWO
    raise ValueError(f"unsupported number of stop bits: {stopbits}")


def open_uart(device: str, baudrate: int) -> serial.SerialBase:
    """Open ``device`` 8N1 without flow control.

    A read waits for its first byte, then gives up after a one second gap.
    """
    port = serial.serial_for_url(
        device,
        baudrate=convert_baudrate(baudrate),
        bytesize=data_bits_setting(8),
        parity=parity_setting("n"),
        stopbits=stop_bits_setting(1),
        rtscts=False,
        timeout=None,
        inter_byte_timeout=1.0,
    )
    port.reset_input_buffer()
    return port


def decode_frame(frame: Sequence[int]) -> Gesture:
    """Decode one four-byte frame: head, code, inverted code, end."""
    if len(frame) != FRAME_LEN:
        raise GestureFrameError(f"frame must be {FRAME_LEN} bytes, got {len(frame)}")
    head, code, check, end = frame
    if head != RECV_HEAD or end != RECV_END or code != 0xFF - check:
        raise GestureFrameError(f"malformed frame {bytes(frame).hex()}")
    try:
        return Gesture(code)
    except ValueError:
        raise GestureFrameError(f"no such event: {code:#04x}") from None


def describe(gesture: Union[Gesture, int]) -> str:
    """Text reported for an event."""
    return _DESCRIPTIONS[Gesture(gesture)]


def read_gestures(port: BinaryIO) -> Iterator[Gesture]:
    """Yield events from ``port`` until it runs out of complete frames."""
    while True:
        frame = port.read(FRAME_LEN)
        if len(frame) < FRAME_LEN:
            return
        yield decode_frame(frame)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    device = args[0] if args else UART_TTL_NAME
    try:
        port = open_uart(device, DEFAULT_BAUDRATE)
    except (OSError, ValueError) as exc:
        print(f"open file fail: {exc}", file=sys.stderr)
        return 1
    print("Gesture Sensor Ready!")
    try:
        for gesture in read_gestures(port):
            print(describe(gesture))
    except GestureFrameError as exc:
        print(f"data process error: {exc}", file=sys.stderr)
    except KeyboardInterrupt:
        pass
    finally:
        port.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())