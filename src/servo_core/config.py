"""Device configuration files and servo address resolution."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_DIR = Path("./thingy/resources")
DEFAULT_ADDRESS = "127.0.0.1"


class DeviceConfigError(RuntimeError):
    """Raised for a missing, unreadable or malformed device configuration."""


@dataclass(slots=True)
class DeviceConfig:
    """Device configuration loaded from a JSON resource file."""

    path: Path
    servos: Dict[str, str] = field(default_factory=dict)
    port: int = 502
    unit_id: int = 1
    timeout_s: float = 1.0

    def resolve_address(self, servo_name: str, allow_default: bool = True) -> str:
        """
        Return the configured address for `servo_name`.

        An absent entry falls back to the loopback address unless
        `allow_default` is False, in which case it is an error.
        """

        address = self.servos.get(servo_name)
        if address is not None:
            return address
        if not allow_default:
            raise DeviceConfigError(f"No address configured for '{servo_name}' in {self.path}.")
        logger.warning("Using default coupler IP of %s", DEFAULT_ADDRESS)
        return DEFAULT_ADDRESS


def resource_location(device_name: str, resource_dir: str | Path = DEFAULT_RESOURCE_DIR) -> Path:
    return Path(resource_dir) / f"{device_name}.json"


def load_device_config(path: str | Path) -> DeviceConfig:
    """Load a device JSON file into a typed config."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise DeviceConfigError(f"Unable to read device config: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DeviceConfigError(f"Unable to parse config file: {exc}") from exc

    if not isinstance(raw, dict):
        raise DeviceConfigError(f"Device config {path} must be a JSON object.")

    raw_servos = raw.get("device", {})
    if not isinstance(raw_servos, dict):
        raise DeviceConfigError(f"Device config 'device' in {path} must map servo names to addresses.")

    servos: Dict[str, str] = {}
    for name, address in raw_servos.items():
        if not isinstance(address, str) or not address.strip():
            raise DeviceConfigError(f"Address for '{name}' in {path} must be a non-empty string.")
        servos[name] = address.strip()

    try:
        return DeviceConfig(
            path=path,
            servos=servos,
            port=int(raw.get("port", 502)),
            unit_id=int(raw.get("unit_id", 1)),
            timeout_s=float(raw.get("timeout_s", 1.0)),
        )
    except (TypeError, ValueError) as exc:
        raise DeviceConfigError(f"Invalid transport settings in {path}: {exc}") from exc
