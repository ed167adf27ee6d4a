"""Peripheral protocols and tools for RK3588 boards: serial port, gesture sensor, chassis, PWM and lidar."""

__version__ = "0.1.0"