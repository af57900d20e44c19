"""Shared fixtures for the servo_core unit tests."""

from __future__ import annotations

import pytest

from servo_core.controller import ServoController
from servo_core.data_types import ControllerTiming, DeviceRecord
from servo_sim import ENABLED, FakeClock, SimulatedServo


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def servo() -> SimulatedServo:
    sim = SimulatedServo()
    sim.status = ENABLED
    return sim


@pytest.fixture
def controller(servo: SimulatedServo, clock: FakeClock) -> ServoController:
    record = DeviceRecord(name="servo_a", address="10.0.0.5", resource_location="rig.json")
    return ServoController(record, servo, ControllerTiming(), clock=clock, sleep=clock.sleep)
