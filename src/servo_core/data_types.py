"""Stable register/command/state data model for the servo core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Tuple


class Register(IntEnum):
    """Holding register addresses fixed by the drive firmware."""

    ALARM = 0
    STATUS = 1
    ENCODER_HIGH = 4
    ENCODER_LOW = 5
    ACCELERATION = 27
    DECELERATION = 28
    VELOCITY = 29
    DISTANCE_HIGH = 30
    DISTANCE_LOW = 31
    EXECUTE_COMMAND = 124
    MODE_SELECT = 125


# Last register worth showing in a diagnostic dump (inclusive).
MAX_DUMP_REGISTER = 56


class ExecuteCommand(IntEnum):
    """Codes written to the execute-command register (124)."""

    MOVE = 103
    HOME = 120
    DISABLE = 158
    ENABLE = 159
    RESET = 186
    DISCONNECT = 254


class ModeSelect(IntEnum):
    """Values written to the mode-select register (125)."""

    NORMAL = 0
    HOMING = 1


# Status register names, bit 0 first.
MOTOR_ENABLED = "Motor Enabled"
TUNING = "Tuning"
FAULT = "Fault"
IN_POSITION = "In Position"
MOVING = "Moving"
JOGGING = "Jogging"
STOPPING = "Stopping"
WAIT_FOR_INPUT = "Wait for Input"
SAVING = "Saving"
ALARM = "Alarm"
HOMING = "Homing"
DELAY = "Delay"
WIZARD_RUNNING = "Wizard Running"
INITIALIZING = "Initializing"

STATUS_FLAG_NAMES: Tuple[str, ...] = (
    MOTOR_ENABLED,
    TUNING,
    FAULT,
    IN_POSITION,
    MOVING,
    JOGGING,
    STOPPING,
    WAIT_FOR_INPUT,
    SAVING,
    ALARM,
    HOMING,
    DELAY,
    WIZARD_RUNNING,
    INITIALIZING,
)

ALARM_FLAG_NAMES: Tuple[str, ...] = (
    "Position Limit Error",
    "CCW Limit Error",
    "CW Limit Error",
    "Over Temp Error",
    "Internal Voltage Error",
    "Over Voltage Error",
    "Under Voltage Error",
    "Over Current Error",
    "Open Motor Winding Error",
    "Bad Encoder Error",
    "Comm Error",
    "Bad Flash Error",
    "No Move Error",
    "Motor resistance out of range",
    "Blank Q Segment",
    "No Move",
)


class OperationResult(Enum):
    """Terminal outcome of a sequenced homing or move operation."""

    SUCCEEDED = "succeeded"
    ALREADY_IN_POSITION = "already_in_position"
    TIMED_OUT = "timed_out"
    OUT_OF_TOLERANCE = "out_of_tolerance"


@dataclass(slots=True, frozen=True)
class DeviceRecord:
    """Static identity and addressing info for one controlled servo."""

    name: str
    address: str
    resource_location: str = ""


@dataclass(slots=True, frozen=True)
class ControllerTiming:
    """
    Delays, poll interval and deadlines used by the controller sequences.

    All durations are seconds. Defaults match the drive's documented
    behaviour; tests shrink or simulate them.
    """

    settle_s: float = 1.0
    parameter_settle_s: float = 0.025
    command_settle_s: float = 0.01
    disconnect_settle_s: float = 0.01
    poll_interval_s: float = 0.3
    homing_timeout_s: float = 60.0
    move_timeout_s: float = 30.0
    reset_attempts: int = 3
    position_tolerance: int = 1000
