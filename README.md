# rkperiph

Tools and libraries for talking to peripherals commonly wired to an RK3588
board from Linux user space:

- a raw 8N1 **serial port** with non-blocking reads (`rkperiph.serial_port`)
- a **UART gesture sensor** (`rkperiph.gesture`)
- a **chassis motor controller** speaking a small framed serial protocol
  (`rkperiph.chassis`)
- **sysfs PWM** channels, e.g. for driving a servo (`rkperiph.pwm`,
  `rkperiph.servo_sweep`)
- **LD-series 2D lidars** (LD06, LD19, STL-06P, STL-26, STL-27L): packet
  decoding, noise and near-range filtering, a threaded serial link and a scan
  driver (`rkperiph.lidar_types`, `rkperiph.lidar_packet`,
  `rkperiph.lidar_filter`, `rkperiph.lidar_serial`, `rkperiph.lidar_driver`)

Serial access goes through `pyserial`.

## Installation

```
pip install .
```

For running the test suite:

```
pip install .[test]
pytest
```

## Command-line tools

| Command            | Arguments                     | What it does |
|--------------------|-------------------------------|--------------|
| `rkperiph-gesture` | `[device]` (default `/dev/ttyS1`) | Opens the sensor at 9600 baud, reads 4-byte frames and prints each gesture |
| `rkperiph-chassis` | `[device]` (default `/dev/ttyUSB0`) | Opens the controller at 115200 baud, powers it on and sends a spin command every 0.3 s |
| `rkperiph-lidar`   | `<serial port>`               | Starts an LD19 lidar at 230400 baud and prints every scan |
| `rkperiph-servo`   | `<channel> <period> <step>`   | Sets up a PWM channel and sweeps its duty cycle up to 2500000 and back in steps of `step` |

Examples:

```
rkperiph-gesture /dev/ttyS1
rkperiph-lidar /dev/ttyUSB0
rkperiph-servo 0 2500000 100000
```

Stop any of them with Ctrl-C.

## Library use

### Gesture sensor

```python
from rkperiph.gesture import open_uart, read_gestures, describe

port = open_uart("/dev/ttyS1", 9600)
for gesture in read_gestures(port):
    print(gesture.name, describe(gesture))
```

`decode_frame` turns one 4-byte frame into a `Gesture`; a malformed frame or
an unknown event code raises `GestureFrameError`.

### Lidar

```python
import time
from rkperiph.lidar_driver import LidarDriver
from rkperiph.lidar_types import LDType, LidarStatus

driver = LidarDriver()
driver.register_timestamp_source(time.time_ns)
driver.enable_filter(True)
driver.start(LDType.LD_19, "/dev/ttyUSB0", 230400)
if driver.wait_for_connection(3500):
    status, scan = driver.get_laser_scan(1500)
    if status == LidarStatus.NORMAL:
        print(driver.get_scan_frequency(), len(scan.points))
driver.stop()
```

`get_laser_scan` returns a `LidarStatus` and, when it is `NORMAL`, a
`LaserScan`. Each point is a `PointData` carrying angle (degrees), distance
(mm), intensity and a nanosecond timestamp. `start` raises `ValueError` for
bad arguments, `RuntimeError` when no timestamp source is registered and
`OSError` when the port cannot be opened.

The pieces can also be used on their own: `PacketProcessor.feed` accepts raw
bytes and `take_scan` returns a finished revolution; `Tofbf(speed,
lidar_type).filter(points)` filters a list of points.

### PWM

```python
from rkperiph.pwm import Polarity, Pwm

pwm = Pwm(0)
pwm.export()
pwm.enable(True)
pwm.period = 2500000
pwm.polarity = Polarity.NORMAL
pwm.duty_cycle = 1500000
print(pwm.is_enabled(), pwm.duty_cycle)
```

Assigning zero to `period` or `duty_cycle` leaves the value unchanged.
Unknown channels raise `PwmChannelError`; missing sysfs files raise
`PwmFileMissing`. `sweep_duty` in `rkperiph.servo_sweep` yields the
back-and-forth sequence of duty values the servo command uses.

### Chassis

```python
from rkperiph.chassis import motion_frame, power_frame

port.write(power_frame(1))
port.write(motion_frame(0, 0, -200))
```

Both frames are 12 bytes; motion frames end in an XOR checksum
(`xor_checksum`).

## What it does not do

- There is no IMU support: no inertial-sensor protocol decoding or
  configuration commands are included.
- The lidar driver only talks over a serial link; `CommunicationMode` lists
  UDP and TCP modes, but `LidarDriver.start` rejects them.