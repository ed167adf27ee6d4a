from functools import reduce
from itertools import islice
from operator import xor

import pytest

from rkperiph.chassis import (
    drive,
    encode_motion,
    motion_frame,
    power_frame,
    xor_checksum,
)


class _FakePort:
    def __init__(self):
        self.writes = []

    def write(self, data):
        self.writes.append(bytes(data))
        return len(data)


def test_encode_motion_round_trip():
    data = encode_motion(300, -5, -200)
    assert len(data) == 6
    values = [int.from_bytes(data[i:i + 2], "little", signed=True) for i in (0, 2, 4)]
    assert values == [300, -5, -200]


def test_xor_checksum_only_length_bytes():
    assert xor_checksum(2, 0, [0x0F, 0xF0, 0xFF]) == 0x0F ^ 0xF0 ^ 2


def test_xor_checksum_zero_data():
    assert xor_checksum(6, 2, bytes(6)) == 6 ^ 2


def test_motion_frame_header():
    frame = motion_frame(0, 0, -200)
    assert len(frame) == 12
    assert frame[:5] == bytes([0x0A, 0x0C, 0x06, 0x00, 0x02])
    assert frame[5:11] == encode_motion(0, 0, -200)


@pytest.mark.parametrize("args", [(0, 0, -200), (100, 50, 0), (-1, 32767, -32768)])
def test_motion_frame_checksum_invariant(args):
    frame = motion_frame(*args)
    assert reduce(xor, frame[2:11]) == frame[11]


def test_power_on_frame():
    assert power_frame(1) == bytes([0x0A, 0x0C, 0x01, 0x00, 0x01, 0x01, 0x01, 0, 0, 0, 0, 0])


def test_power_off_frame():
    assert power_frame(0) == bytes([0x0A, 0x0C, 0x01, 0x00, 0x01, 0x00, 0x00, 0, 0, 0, 0, 0])


def test_power_invalid_state():
    with pytest.raises(ValueError):
        power_frame(2)


def test_drive_powers_on_then_sends_motion():
    port = _FakePort()
    results = list(islice(drive(port, 1, 2, 3, 0), 2))
    assert results == [12, 12]
    assert port.writes[0] == power_frame(1)
    assert port.writes[1:] == [motion_frame(1, 2, 3)] * 2