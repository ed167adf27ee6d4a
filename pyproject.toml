[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rkperiph"
version = "0.1.0"
description = "Serial, PWM and lidar peripheral tools for RK3588 boards: gesture sensor, chassis control, servo PWM and LD-series lidar."
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = [
    "rk3588",
    "lidar",
    "ldlidar",
    "pwm",
    "sysfs",
    "uart",
    "serial",
    "gesture",
    "robotics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rkperiph-gesture = "rkperiph.gesture:main"
rkperiph-chassis = "rkperiph.chassis:main"
rkperiph-lidar = "rkperiph.lidar_demo:main"
rkperiph-servo = "rkperiph.servo_sweep:main"

[tool.hatch.build.targets.wheel]
packages = ["rkperiph"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
