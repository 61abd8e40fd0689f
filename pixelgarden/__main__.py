"""Entry point for ``python -m pixelgarden``.

Loads the default YAML config, builds a simulation engine, optionally
restores a saved garden or share code, and opens a Pygame window.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from pixelgarden.simulation.config import SimulationConfig
from pixelgarden.simulation.engine import SimulationEngine
from pixelgarden.storage.persistence import load_from_file, load_share_code

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)

logger = logging.getLogger("pixelgarden")


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="pixelgarden",
        description="Pixel Garden - a cellular plant ecosystem",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=12,
        help="Pixel size per grid cell (default: 12)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=30.0,
        help="Simulation ticks per second (default: 30)",
    )
    parser.add_argument(
        "--load",
        type=pathlib.Path,
        help="Saved garden to load on start (also the F5/F9 save file)",
    )
    parser.add_argument(
        "--share",
        help="Share code to load on start",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    args = build_parser().parse_args()
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config.exists():
        config = SimulationConfig.from_yaml(args.config)
    else:
        logger.warning("config %s not found, using defaults", args.config)
        config = SimulationConfig()
    engine = SimulationEngine(config=config)

    if args.load is not None and args.load.exists():
        load_from_file(engine, args.load)
    if args.share:
        load_share_code(engine, args.share)

    from pixelgarden.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        ticks_per_second=args.speed,
        save_path=args.load,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
