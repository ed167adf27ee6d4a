"""Control of the board's PWM outputs through the sysfs PWM interface."""

from __future__ import annotations

import os
import re
from enum import IntEnum
from pathlib import Path
from typing import Union

DEFAULT_ROOT = "/sys/class/pwm"
_CHANNELS = {0: "pwmchip0", 1: "pwmchip1"}
_READ_LIMIT = 32
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class Polarity(IntEnum):
    """Output polarity of a PWM channel."""

    NORMAL = 0
    INVERSED = 1


class PwmError(Exception):
    """A PWM operation failed."""


class PwmChannelError(PwmError, ValueError):
    """The requested PWM channel does not exist."""


class PwmFileMissing(PwmError, FileNotFoundError):
    """A control file of the PWM channel is missing or cannot be opened."""


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class Pwm:
    """One PWM channel (0 or 1), driving output ``pwm0`` of its chip.

    ``period`` and ``duty_cycle`` are in nanoseconds. Assigning zero to
    either leaves the hardware value unchanged.
    """

    def __init__(self, channel: int, root: Union[str, os.PathLike] = DEFAULT_ROOT) -> None:
        if channel not in _CHANNELS:
            raise PwmChannelError(f"no PWM channel {channel}")
        self.channel = channel
        self.chip = Path(root) / _CHANNELS[channel]

    @property
    def _output(self) -> Path:
        return self.chip / "pwm0"

    def _existing(self, path: Path) -> Path:
        if not path.exists():
            raise PwmFileMissing(f"{path} does not exist")
        return path

    def _write(self, path: Path, text: str) -> None:
        path = self._existing(path)
        try:
            with open(path, "w", encoding="ascii") as handle:
                handle.write(text)
        except OSError as exc:
            raise PwmFileMissing(f"cannot open {path}: {exc}") from exc

    def _read(self, path: Path) -> str:
        path = self._existing(path)
        try:
            with open(path, encoding="ascii", errors="replace") as handle:
                return handle.read(_READ_LIMIT)
        except OSError as exc:
            raise PwmFileMissing(f"cannot open {path}: {exc}") from exc

    def export(self) -> None:
        """Export output 0 of the chip so its control files appear."""
        self._write(self.chip / "export", "0")

    def enable(self, enabled: bool = True) -> None:
        """Switch the output on or off."""
        self._write(self._output / "enable", str(int(bool(enabled))))

    def is_enabled(self) -> bool:
        """Whether the output is switched on."""
        return _leading_int(self._read(self._output / "enable")) != 0

    @property
    def period(self) -> int:
        """Length of one PWM cycle."""
        return _leading_int(self._read(self._output / "period"))

    @period.setter
    def period(self, value: int) -> None:
        path = self._existing(self._output / "period")
        if value:
            self._write(path, str(int(value)))

    @property
    def duty_cycle(self) -> int:
        """Time the output is high in each cycle."""
        return _leading_int(self._read(self._output / "duty_cycle"))

    @duty_cycle.setter
    def duty_cycle(self, value: int) -> None:
        path = self._existing(self._output / "duty_cycle")
        if value:
            self._write(path, str(int(value)))

    @property
    def polarity(self) -> Polarity:
        """Output polarity; raises PwmError if the file holds neither value."""
        text = self._read(self._output / "polarity")
        if "normal" in text:
            return Polarity.NORMAL
        if "inversed" in text:
            return Polarity.INVERSED
        raise PwmError(f"unknown polarity {text.strip()!r}")

    @polarity.setter
    def polarity(self, value: Union[Polarity, int]) -> None:
        polarity = Polarity(value)
        text = "normal" if polarity is Polarity.NORMAL else "inversed"
        self._write(self._output / "polarity", text)