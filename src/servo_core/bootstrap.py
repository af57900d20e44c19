"""Build a connected `ServoController` from a device configuration file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .config import DEFAULT_RESOURCE_DIR, load_device_config, resource_location
from .controller import ServoController
from .data_types import ControllerTiming, DeviceRecord
from .transport import ModbusTcpTransport, RegisterTransport

logger = logging.getLogger(__name__)

TransportFactory = Callable[..., RegisterTransport]


def create_controller(
    device_name: str,
    servo_name: str,
    *,
    resource_dir: str | Path = DEFAULT_RESOURCE_DIR,
    timing: ControllerTiming | None = None,
    transport_factory: TransportFactory = ModbusTcpTransport,
    allow_default_address: bool = True,
) -> ServoController:
    """
    Resolve `servo_name` through `<resource_dir>/<device_name>.json`,
    open its transport and return a controller bound to it.

    Raises `DeviceConfigError` for configuration problems and
    `TransportError` if the connection cannot be opened.
    """

    location = resource_location(device_name, resource_dir)
    logger.info("Creating applied device: %s", servo_name)
    logger.info("Using device configuration at: %s", location)

    config = load_device_config(location)
    address = config.resolve_address(servo_name, allow_default=allow_default_address)

    logger.info("Connecting to device at %s", address)
    transport = transport_factory(
        address,
        port=config.port,
        unit_id=config.unit_id,
        timeout_s=config.timeout_s,
    )
    connect = getattr(transport, "connect", None)
    if callable(connect):
        connect()

    record = DeviceRecord(name=servo_name, address=address, resource_location=str(location))
    return ServoController(record, transport, timing)
