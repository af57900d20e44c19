#!/usr/bin/env python3
"""Read-only servo monitor for encoder registers 4/5 and the status bitmask."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

# Allow direct execution before install.
REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from servo_core.bootstrap import create_controller
from servo_core.config import DEFAULT_RESOURCE_DIR


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read and print servo encoder position and status flags."
    )
    parser.add_argument("device", help="Device config name.")
    parser.add_argument("servo", help="Servo entry to resolve inside the device config.")
    parser.add_argument(
        "--resource-dir",
        default=str(DEFAULT_RESOURCE_DIR),
        help="Directory holding device config files.",
    )
    parser.add_argument(
        "--duration-s",
        type=float,
        default=60.0,
        help="Monitor duration in seconds.",
    )
    parser.add_argument(
        "--print-hz",
        type=float,
        default=5.0,
        help="Terminal update rate.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    controller = create_controller(args.device, args.servo, resource_dir=args.resource_dir)

    try:
        deadline = time.monotonic() + max(0.0, args.duration_s)
        print_period = 1.0 / max(args.print_hz, 0.1)

        print(f"Monitoring '{controller.name}' at {controller.address} for {args.duration_s:.1f}s")

        while time.monotonic() < deadline:
            # Reads only; no command or parameter register is touched.
            print(
                f"encoder={controller.get_encoder_count()} "
                f"status={list(controller.read_status())} "
                f"alarms={list(controller.read_alarms())}"
            )
            time.sleep(print_period)
        return 0
    finally:
        controller.close()


if __name__ == "__main__":
    raise SystemExit(main())
