"""Sequenced enable, fault-reset, homing and move operations for one servo."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Tuple

from .codec import check_u16, decode_alarms, decode_position, decode_status, encode_position, in_tolerance
from .data_types import (
    ALARM,
    FAULT,
    HOMING,
    IN_POSITION,
    MAX_DUMP_REGISTER,
    MOTOR_ENABLED,
    MOVING,
    ControllerTiming,
    DeviceRecord,
    ExecuteCommand,
    ModeSelect,
    OperationResult,
    Register,
)
from .transport import RegisterTransport, TransportError

logger = logging.getLogger(__name__)


class ServoController:
    """
    Blocking command/poll state machines over one register transport.

    Every operation runs to completion (or to its deadline) on the calling
    thread. The controller owns the transport; callers must not issue
    concurrent operations against the same instance.
    """

    def __init__(
        self,
        record: DeviceRecord,
        transport: RegisterTransport,
        timing: ControllerTiming | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._record = record
        self._transport = transport
        self._timing = timing or ControllerTiming()
        self._clock = clock
        self._sleep = sleep

        self._last_status: Tuple[str, ...] = ()
        self._last_alarms: Tuple[str, ...] = ()
        self._cycle_count = 0

    def __str__(self) -> str:
        return f"For applied device {self.name} using address of: {self.address}"

    @property
    def record(self) -> DeviceRecord:
        return self._record

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def address(self) -> str:
        return self._record.address

    @property
    def resource_location(self) -> str:
        return self._record.resource_location

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def timing(self) -> ControllerTiming:
        return self._timing

    @property
    def transport(self) -> RegisterTransport:
        return self._transport

    @property
    def last_status(self) -> Tuple[str, ...]:
        """Flags decoded by the most recent `read_status` call."""
        return self._last_status

    @property
    def last_alarms(self) -> Tuple[str, ...]:
        """Flags decoded by the most recent `read_alarms` call."""
        return self._last_alarms

    # --- register access ---
    def read_register(self, address: int) -> int:
        return self._read_block(address, 1)[0]

    def write_register(self, address: int, value: int) -> None:
        self._transport.write_register(int(address), check_u16(value))

    def _read_block(self, start: int, count: int) -> List[int]:
        values = list(self._transport.read_registers(int(start), count))
        if len(values) < count:
            raise TransportError(
                f"Short read at register {start}: expected={count} got={len(values)}"
            )
        return [int(v) for v in values[:count]]

    # --- status ---
    def read_status(self) -> Tuple[str, ...]:
        self._last_status = decode_status(self.read_register(Register.STATUS))
        return self._last_status

    def read_alarms(self) -> Tuple[str, ...]:
        self._last_alarms = decode_alarms(self.read_register(Register.ALARM))
        return self._last_alarms

    def get_encoder_count(self) -> int:
        high, low = self._read_block(Register.ENCODER_HIGH, 2)
        return decode_position(high, low)

    def in_range(self, target_position: int) -> bool:
        """True if the encoder is within the tolerance window of `target_position`."""
        return in_tolerance(
            self.get_encoder_count(), int(target_position), self._timing.position_tolerance
        )

    # --- motor enable ---
    def enable_motor(self) -> None:
        if MOTOR_ENABLED in self.read_status():
            return
        self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.ENABLE)
        self._sleep(self._timing.settle_s)

    def disable_motor(self) -> None:
        if MOTOR_ENABLED in self.read_status():
            self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.DISABLE)
            self._sleep(self._timing.settle_s)

    def reset_alarm_or_fault(self) -> bool:
        """
        Clear any alarm/fault, then make sure the motor is enabled.

        Issues at most `timing.reset_attempts` reset commands. Returns False
        (motor left un-enabled) if the condition survives all of them.
        """

        status = self.read_status()
        if ALARM not in status and FAULT not in status:
            self.enable_motor()
            return True

        logger.warning("Active alarms on %s: %s", self.name, ", ".join(self.read_alarms()) or "none")
        attempts = self._timing.reset_attempts
        for attempt in range(1, attempts + 1):
            logger.warning(
                "Found alarm: %s or fault: %s, trying to reset (attempt %d/%d)",
                ALARM in status,
                FAULT in status,
                attempt,
                attempts,
            )
            self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.RESET)
            self._sleep(self._timing.settle_s)
            status = self.read_status()
            if ALARM not in status and FAULT not in status:
                self.enable_motor()
                return True

        logger.warning("!!Unable to reset alarm or fault on %s!!", self.name)
        return False

    # --- homing ---
    def _issue_home(self) -> None:
        self.write_register(Register.MODE_SELECT, ModeSelect.HOMING)
        self._sleep(self._timing.settle_s)
        self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.HOME)
        self._sleep(self._timing.settle_s)

    def initialize(self) -> None:
        """Start homing for device bring-up without waiting for completion."""
        self._issue_home()

    def home_servo(self) -> OperationResult:
        self.reset_alarm_or_fault()

        logger.info("Starting to home servo: %s", self.name)
        self._issue_home()

        started = self._clock()
        while True:
            status = self.read_status()
            if HOMING not in status:
                break
            logger.debug("Servo status: %s", list(status))
            if ALARM in status:
                logger.warning("Got alarm during homing.  Trying to reset.")
                self.reset_alarm_or_fault()
                logger.warning("Restarting homing procedure.")
                self._issue_home()
            if self._clock() - started > self._timing.homing_timeout_s:
                logger.warning("!!Unable to finish homing procedure!!")
                return OperationResult.TIMED_OUT
            self._sleep(self._timing.poll_interval_s)

        logger.info("Finished homing servo: %s", self.name)
        return OperationResult.SUCCEEDED

    # --- moves ---
    def move_servo(
        self,
        acceleration: int,
        deceleration: int,
        velocity: int,
        target_position: int,
    ) -> OperationResult:
        acceleration = check_u16(acceleration, "acceleration")
        deceleration = check_u16(deceleration, "deceleration")
        velocity = check_u16(velocity, "velocity")
        distance_high, distance_low = encode_position(target_position)

        if self.in_range(target_position):
            logger.debug("Servo %s already at %d", self.name, target_position)
            return OperationResult.ALREADY_IN_POSITION

        logger.info(
            "Moving to position: %d (move 1: %d, move 2: %d)",
            target_position,
            distance_high,
            distance_low,
        )
        self.reset_alarm_or_fault()

        # Parameters must latch before the move command is accepted.
        self.write_register(Register.ACCELERATION, acceleration)
        self.write_register(Register.DECELERATION, deceleration)
        self.write_register(Register.VELOCITY, velocity)
        self.write_register(Register.DISTANCE_HIGH, distance_high)
        self.write_register(Register.DISTANCE_LOW, distance_low)
        self._sleep(self._timing.parameter_settle_s)

        latched_high, latched_low = self._read_block(Register.DISTANCE_HIGH, 2)
        logger.info("D1: %d, D2: %d", latched_high, latched_low)

        self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.MOVE)
        self._sleep(self._timing.command_settle_s)

        timed_out = False
        started = self._clock()
        while MOVING in self.read_status():
            self.reset_alarm_or_fault()
            if IN_POSITION in self.read_status():
                break
            if self._clock() - started > self._timing.move_timeout_s:
                logger.error("!!Unable to finish requested move!!")
                timed_out = True
                break
            self._sleep(self._timing.poll_interval_s)

        actual = self.get_encoder_count()
        if not in_tolerance(actual, target_position, self._timing.position_tolerance):
            logger.warning(
                "Unable to reach requested encoder position of %d (actual: %d)",
                target_position,
                actual,
            )
            return OperationResult.TIMED_OUT if timed_out else OperationResult.OUT_OF_TOLERANCE

        self._cycle_count += 1
        logger.info("Encoder count (FINAL): %d", actual)
        return OperationResult.SUCCEEDED

    # --- session ---
    def shutdown(self) -> None:
        """Issue the disconnect handshake so another client may connect."""

        logger.info("Issuing disconnect commands")
        delay = self._timing.disconnect_settle_s
        self.write_register(Register.MODE_SELECT, ModeSelect.HOMING)
        self._sleep(delay)
        self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.DISCONNECT)
        self._sleep(delay)
        self.write_register(Register.MODE_SELECT, ModeSelect.NORMAL)
        self._sleep(delay)
        self.write_register(Register.EXECUTE_COMMAND, ExecuteCommand.DISCONNECT)
        self._sleep(delay)
        logger.info("Done disconnecting.")

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    def dump_registers(self) -> Dict[int, int]:
        logger.info("Dumping registers up to %d", MAX_DUMP_REGISTER)
        values = self._read_block(0, MAX_DUMP_REGISTER + 1)
        for address, value in enumerate(values):
            logger.info("Register %d: %d", address, value)
        logger.info("Done reading registers.")
        return dict(enumerate(values))
