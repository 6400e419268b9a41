"""
Application Entry Point
=======================
Runs the simulation headless and reports the world of every entity.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Sets up logging.
2. Builds the SimulationConfig from the command line.
3. Runs the Simulation and, on request, opens the PyVista scene.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from trefoilworlds.config import DEFAULT_TICKS, DEFAULT_TIME_STEP, PLAYER_START, SimulationConfig
from trefoilworlds.logging_config import setup_logging
from trefoilworlds.simulation import Simulation

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trefoilworlds",
        description="Move entities through six worlds glued along a trefoil membrane.",
    )
    parser.add_argument("--ticks", type=int, default=DEFAULT_TICKS, help="number of steps to simulate")
    parser.add_argument("--dt", type=float, default=DEFAULT_TIME_STEP, help="seconds per step")
    parser.add_argument("--start", type=float, nargs=3, default=list(PLAYER_START),
                        metavar=("X", "Y", "Z"), help="player start position")
    parser.add_argument("--world", type=int, default=0, help="player start world")
    parser.add_argument("--keys", default="", help="keys held for the whole run, e.g. 'wd'")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    parser.add_argument("--plot", action="store_true", help="show the final scene with PyVista")
    parser.add_argument("--screenshot", default=None, help="save the final scene to an image instead")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        config = SimulationConfig(
            ticks=args.ticks,
            time_step=args.dt,
            player_start=tuple(args.start),
            player_world=args.world,
        )
        simulation = Simulation(config)
        simulation.run(keys=tuple(args.keys))

        for name, world in simulation.worlds().items():
            print(f"{name}: world {world}")

        if args.plot or args.screenshot:
            # Imported lazily so headless runs do not pay for VTK.
            from trefoilworlds.view.scene import show_scene
            show_scene(simulation, screenshot=args.screenshot)
    except Exception:
        logger.exception("Simulation failed.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
