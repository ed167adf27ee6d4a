"""Sweep a servo back and forth by stepping a PWM duty cycle."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator, Sequence
from typing import Optional

from .pwm import Polarity, Pwm, PwmError

INIT_DUTY = 0
MAX_DUTY = 2500000
STEP_INTERVAL = 0.05


def sweep_duty(step: int, start: int = INIT_DUTY, maximum: int = MAX_DUTY) -> Iterator[int]:
    """Yield duty values from ``start``, moving by ``step`` and turning back.

    The direction reverses once a value reaches ``maximum`` or falls to
    :data:`INIT_DUTY` or below.
    """
    current = start
    rising = True
    while True:
        current = current + step if rising else current - step
        if current <= INIT_DUTY:
            rising = True
        elif current >= maximum:
            rising = False
        yield current


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        print("error")
        return 0
    try:
        channel, period, step = (int(arg) for arg in args)
    except ValueError:
        print("error")
        return 0
    try:
        pwm = Pwm(channel)
        pwm.export()
        pwm.enable(True)
        pwm.period = period
        pwm.polarity = Polarity.NORMAL
        current = pwm.duty_cycle
        print(f"current duty is {current}")
        pwm.duty_cycle = current
        for duty in sweep_duty(step, current):
            pwm.duty_cycle = duty
            print(f"current duty is {duty}")
            time.sleep(STEP_INTERVAL)
            measured = pwm.duty_cycle
            if measured <= INIT_DUTY:
                pwm.duty_cycle = INIT_DUTY
                measured = pwm.duty_cycle
            angle = float(measured - INIT_DUTY)
            print(f"The current angle {angle:.2f}, about to turn:{float(step):.2f}.")
    except PwmError as exc:
        print(f"pwm error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())