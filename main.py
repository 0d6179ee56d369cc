"""Command-line demo for the shot predictor."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from pygame.math import Vector3

from aimsolver.engine.logger import init_logger
from aimsolver.engine.settings import SolverSettings
from aimsolver.math.ballistics import KinematicState, ShotQuery


SETTINGS_PATH = Path("settings.json")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Solve a sample ballistic intercept.")
    parser.add_argument("--settings", type=Path, default=SETTINGS_PATH)
    parser.add_argument("--muzzle-speed", type=float, default=30.0)
    parser.add_argument(
        "--target",
        type=float,
        nargs=3,
        default=(40.0, 10.0, 0.0),
        metavar=("X", "Y", "Z"),
        help="target position; the shooter stands at the origin",
    )
    parser.add_argument(
        "--target-velocity",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 3.0),
        metavar=("VX", "VY", "VZ"),
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = SolverSettings.from_settings(args.settings)
    logger = init_logger(args.settings)
    log = logger.channel("ballistics")

    query = ShotQuery.create(
        shooter=KinematicState.grounded(Vector3(), Vector3()),
        target=KinematicState.grounded(Vector3(args.target), Vector3(args.target_velocity)),
        muzzle_speed=args.muzzle_speed,
        projectile_acceleration=settings.gravity_vector(),
    )

    timings: List[float] = []
    count = query.find_hit_timings(
        timings, settings.delay, settings.tolerance, settings.max_iterations, logger
    )
    if count == 0:
        log.warning("No firing solution at muzzle speed %.1f", args.muzzle_speed)
        print("No firing solution.")
        return 1

    print(f"Hit timings: {', '.join(f'{t:.3f}s' for t in timings)}")
    for label, solver in (("fastball", query.try_fastball), ("mortar", query.try_mortar)):
        ok, direction = solver(
            settings.delay, settings.tolerance, settings.max_iterations, logger
        )
        if ok:
            print(f"{label:>8}: aim ({direction.x:.4f}, {direction.y:.4f}, {direction.z:.4f})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
