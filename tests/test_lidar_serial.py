import threading
import time
from collections import deque

import pytest

from rkperiph.lidar_serial import LidarSerial


class FakePort:
    def __init__(self, chunks=()):
        self.chunks = deque(chunks)
        self.buffer = bytearray()
        self.written = bytearray()
        self.closed = False

    @property
    def in_waiting(self):
        return len(self.buffer)

    def read(self, size):
        if not self.buffer and self.chunks:
            self.buffer.extend(self.chunks.popleft())
        if not self.buffer:
            time.sleep(0.01)
            return b""
        out = bytes(self.buffer[:size])
        del self.buffer[:size]
        return out

    def write(self, data):
        self.written.extend(data)
        return len(data)

    def close(self):
        self.closed = True


class Collector:
    def __init__(self, expected):
        self.expected = expected
        self.data = bytearray()
        self.done = threading.Event()

    def __call__(self, chunk):
        self.data.extend(chunk)
        if len(self.data) >= self.expected:
            self.done.set()


def test_chunks_are_delivered_in_order():
    fake = FakePort([b"abc", b"defg"])
    opened = []

    def factory(port, baudrate):
        opened.append((port, baudrate))
        return fake

    link = LidarSerial(factory)
    collector = Collector(7)
    link.open("/dev/ttyFAKE0", 230400, collector)
    try:
        assert collector.done.wait(2.0)
    finally:
        link.close()
    assert bytes(collector.data) == b"abcdefg"
    assert link.rx_count == 7
    assert opened == [("/dev/ttyFAKE0", 230400)]


def test_close_closes_port_and_is_idempotent():
    fake = FakePort()
    link = LidarSerial(lambda port, baud: fake)
    link.open("/dev/ttyFAKE0", 230400)
    assert link.is_open
    link.close()
    link.close()
    assert fake.closed is True
    assert link.is_open is False


def test_write_goes_to_port():
    fake = FakePort()
    link = LidarSerial(lambda port, baud: fake)
    link.open("/dev/ttyFAKE0", 230400)
    try:
        assert link.write(b"\xa5\x5a") == 2
    finally:
        link.close()
    assert bytes(fake.written) == b"\xa5\x5a"


def test_write_when_closed_raises():
    link = LidarSerial(lambda port, baud: FakePort())
    with pytest.raises(OSError):
        link.write(b"x")


def test_factory_failure_propagates():
    def factory(port, baudrate):
        raise OSError("no such device")

    link = LidarSerial(factory)
    with pytest.raises(OSError):
        link.open("/dev/ttyFAKE0", 230400)
    assert link.is_open is False


def test_loopback_round_trip_with_default_factory():
    link = LidarSerial()
    collector = Collector(5)
    link.open("loop://", 230400, collector)
    try:
        link.write(b"hello")
        assert collector.done.wait(2.0)
    finally:
        link.close()
    assert bytes(collector.data) == b"hello"


def test_default_factory_missing_device_raises():
    link = LidarSerial()
    with pytest.raises(OSError):
        link.open("/nonexistent/ttyFAKE9", 230400)
    assert link.is_open is False