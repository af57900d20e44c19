"""Status/alarm bitmask decoding and 32-bit position register helpers."""

from __future__ import annotations

from typing import Sequence, Tuple

from .data_types import ALARM_FLAG_NAMES, STATUS_FLAG_NAMES

WORD_SPAN = 0x10000
MAX_POSITION = 0xFFFFFFFF


def check_u16(value: int, what: str = "register value") -> int:
    """Return `value` as int, raising if it does not fit one register."""

    value = int(value)
    if value < 0 or value > 0xFFFF:
        raise ValueError(f"{what} out of range for a 16-bit register: {value}")
    return value


def decode_flags(value: int, names: Sequence[str]) -> Tuple[str, ...]:
    """Return the names whose bit position is set in `value`, in table order."""

    return tuple(name for i, name in enumerate(names) if value & (1 << i))


def decode_status(value: int) -> Tuple[str, ...]:
    return decode_flags(value, STATUS_FLAG_NAMES)


def decode_alarms(value: int) -> Tuple[str, ...]:
    return decode_flags(value, ALARM_FLAG_NAMES)


def encode_position(position: int) -> Tuple[int, int]:
    """Split an unsigned 32-bit position into (high, low) register words."""

    position = int(position)
    if position < 0 or position > MAX_POSITION:
        raise ValueError(f"Position out of unsigned 32-bit range: {position}")
    high, low = divmod(position, WORD_SPAN)
    return high, low


def decode_position(high: int, low: int) -> int:
    """Join (high, low) register words; high is the lower register address."""

    return check_u16(low, "low word") + check_u16(high, "high word") * WORD_SPAN


def in_tolerance(current: int, target: int, tolerance: int) -> bool:
    """True if `current` lies within `target +/- tolerance` (inclusive)."""

    return target - tolerance <= current <= target + tolerance
