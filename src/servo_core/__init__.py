"""Modbus servo command-and-control core."""

from .bootstrap import create_controller
from .codec import decode_alarms, decode_flags, decode_position, decode_status, encode_position, in_tolerance
from .config import DeviceConfig, DeviceConfigError, load_device_config, resource_location
from .controller import ServoController
from .data_types import (
    ALARM_FLAG_NAMES,
    STATUS_FLAG_NAMES,
    ControllerTiming,
    DeviceRecord,
    ExecuteCommand,
    ModeSelect,
    OperationResult,
    Register,
)
from .transport import ModbusTcpTransport, RegisterTransport, TransportError

__all__ = [
    "Register",
    "ExecuteCommand",
    "ModeSelect",
    "STATUS_FLAG_NAMES",
    "ALARM_FLAG_NAMES",
    "OperationResult",
    "DeviceRecord",
    "ControllerTiming",
    "decode_flags",
    "decode_status",
    "decode_alarms",
    "encode_position",
    "decode_position",
    "in_tolerance",
    "TransportError",
    "RegisterTransport",
    "ModbusTcpTransport",
    "DeviceConfigError",
    "DeviceConfig",
    "load_device_config",
    "resource_location",
    "ServoController",
    "create_controller",
]
