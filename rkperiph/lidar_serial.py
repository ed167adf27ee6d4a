"""Serial link to a lidar with a background receive thread."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Optional

import serial

MAX_ACK_BUF_LEN = 4096
_READ_TIMEOUT = 0.1

DataCallback = Callable[[bytes], None]


def _open_serial(port: str, baudrate: int) -> Any:
    handle = serial.serial_for_url(
        port,
        baudrate=baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        timeout=_READ_TIMEOUT,
        xonxoff=False,
        rtscts=False,
    )
    handle.reset_input_buffer()
    return handle


class LidarSerial:
    """Opens a raw 8N1 port and hands every received chunk to ``on_data``.

    ``port_factory(port, baudrate)`` returns an object with ``read``, ``write``
    and ``close``; by default a pyserial port is opened.
    """

    def __init__(self, port_factory: Optional[Callable[[str, int], Any]] = None) -> None:
        self._factory = port_factory or _open_serial
        self._port: Any = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.on_data: Optional[DataCallback] = None
        self.rx_count = 0
        self.baudrate = 0

    @property
    def is_open(self) -> bool:
        return self._port is not None

    def open(self, port: str, baudrate: int, on_data: Optional[DataCallback] = None) -> None:
        """Open ``port`` and start receiving; raises OSError if it cannot be opened."""
        if self.is_open:
            self.close()
        handle = self._factory(port, baudrate)
        if on_data is not None:
            self.on_data = on_data
        self.baudrate = baudrate
        self._port = handle
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._receive, args=(handle,), name="lidar-rx", daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the receive thread and close the port."""
        if not self.is_open:
            return
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._port.close()
        self._port = None

    def write(self, data: bytes) -> int:
        """Send ``data`` and return the number of bytes written."""
        if not self.is_open:
            raise OSError("serial port is not open")
        written = self._port.write(data)
        return len(data) if written is None else written

    def _receive(self, handle: Any) -> None:
        while not self._stop.is_set():
            try:
                chunk = handle.read(1)
                if chunk:
                    waiting = getattr(handle, "in_waiting", 0)
                    if waiting:
                        chunk += handle.read(min(waiting, MAX_ACK_BUF_LEN - 1))
            except (OSError, ValueError):
                if self._stop.is_set():
                    break
                self._stop.wait(_READ_TIMEOUT)
                continue
            if chunk:
                self.rx_count += len(chunk)
                callback = self.on_data
                if callback is not None:
                    callback(bytes(chunk))