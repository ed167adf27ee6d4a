"""A raw serial port opened 8N1 with non-blocking reads."""

from __future__ import annotations

import serial

_SUPPORTED_BAUDRATES = frozenset({2400, 4800, 9600, 115200, 230400, 460800})
_DEFAULT_BAUDRATE = 9600


def normalize_baudrate(baudrate: int) -> int:
    """Return ``baudrate`` if the port supports it, otherwise 9600."""
    return baudrate if baudrate in _SUPPORTED_BAUDRATES else _DEFAULT_BAUDRATE


class SerialPort:
    """Serial device opened with eight data bits, no parity and one stop bit.

    Reads never block: they return whatever is already waiting.
    """

    def __init__(self, device: str, baudrate: int) -> None:
        self.device = device
        self.baudrate = normalize_baudrate(baudrate)
        self._port = serial.serial_for_url(
            device,
            baudrate=self.baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=0,
        )
        self._port.reset_input_buffer()

    def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes that have already arrived."""
        return bytes(self._port.read(size))

    def write(self, data: bytes) -> int:
        """Send ``data`` and return the number of bytes written."""
        written = self._port.write(data)
        return len(data) if written is None else written

    def close(self) -> None:
        """Close the port."""
        self._port.close()

    def __enter__(self) -> "SerialPort":
        return self

    def __exit__(self, *args) -> None:
        self.close()