#!/usr/bin/env python3
"""Minimal bring-up runner: connect, dump registers, optionally home/move, disconnect."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running this script directly before packaging/install.
REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from servo_core.bootstrap import create_controller
from servo_core.config import DEFAULT_RESOURCE_DIR
from servo_core.data_types import OperationResult


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run servo bring-up sequence.")
    parser.add_argument("device", help="Device config name (<resource-dir>/<device>.json).")
    parser.add_argument("servo", help="Servo entry to resolve inside the device config.")
    parser.add_argument(
        "--resource-dir",
        default=str(DEFAULT_RESOURCE_DIR),
        help="Directory holding device config files.",
    )
    parser.add_argument(
        "--initialize",
        action="store_true",
        help="Start homing without waiting for completion.",
    )
    parser.add_argument(
        "--home",
        action="store_true",
        help="Run the full homing sequence and wait for it.",
    )
    parser.add_argument(
        "--move-to",
        type=int,
        default=None,
        help="Absolute encoder position to move to after homing.",
    )
    parser.add_argument("--accel", type=int, default=100, help="Move acceleration register value.")
    parser.add_argument("--decel", type=int, default=100, help="Move deceleration register value.")
    parser.add_argument("--velocity", type=int, default=200, help="Move velocity register value.")
    parser.add_argument(
        "--skip-dump",
        action="store_true",
        help="Do not dump registers after connecting.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    controller = create_controller(args.device, args.servo, resource_dir=args.resource_dir)
    print(controller)

    exit_code = 0
    try:
        if not args.skip_dump:
            controller.dump_registers()

        if args.initialize:
            controller.initialize()

        if args.home and controller.home_servo() is not OperationResult.SUCCEEDED:
            exit_code = 1

        if args.move_to is not None:
            result = controller.move_servo(args.accel, args.decel, args.velocity, args.move_to)
            print(f"move={result.value} encoder={controller.get_encoder_count()} cycles={controller.cycle_count}")
            if result not in (OperationResult.SUCCEEDED, OperationResult.ALREADY_IN_POSITION):
                exit_code = 1

        print(f"status={list(controller.read_status())} alarms={list(controller.read_alarms())}")
        controller.shutdown()
        return exit_code
    finally:
        controller.close()


if __name__ == "__main__":
    raise SystemExit(main())
