"""Entry point for ``python -m tilefall``.

Loads the YAML config, builds a level session, and lets the player
strike random highlighted tiles so the collapse can be watched as a
text dump of the grid.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from tilefall.simulation.config import TilefallConfig
from tilefall.simulation.session import LevelSession

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def run(session: LevelSession, strikes: int) -> list[str]:
    """Strike up to ``strikes`` highlighted tiles and describe each hit.

    Stops early once the player is dead or nothing is left to strike.

    Returns:
        One summary line per strike.
    """
    lines: list[str] = []
    for turn in range(strikes):
        if not session.player_alive or not session.grid.highlighted:
            break
        targets = session.grid.highlighted
        target = targets[int(session.rng.integers(len(targets)))]
        report = session.strike(target.coordinate)
        if report is None:
            continue
        lines.append(
            f"{turn + 1:>3}: hit ({target.coordinate.x}, {target.coordinate.y})"
            f" -> {report.response.name.lower()}, {len(report.fallen)} fell",
        )
    return lines


def main() -> None:
    """Parse CLI args, build the session, run the strikes, print the grid."""
    parser = argparse.ArgumentParser(
        prog="tilefall",
        description="Tilefall - destructible tile grid collapse engine",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=0,
        help="Index of the level layout to load (default: 0)",
    )
    parser.add_argument(
        "--strikes",
        type=int,
        default=10,
        help="Number of player strikes to perform (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the config seed",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every tile transition",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = TilefallConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    session = LevelSession(config=config)
    if args.level:
        session.load_level(args.level)

    for line in run(session, args.strikes):
        print(line)

    marks = {}
    for enemy in session.enemies:
        if enemy.alive:
            marks[enemy.coordinate] = "E"
    if session.player is not None and session.player.alive:
        marks[session.player.coordinate] = "P"
    print(session.grid.pretty(marks))
    print(
        f"available: {len(session.grid.available_tiles())}/{len(session.grid)}"
        f"  enemies left: {session.enemies_remaining}"
        f"  player alive: {session.player_alive}",
    )


if __name__ == "__main__":
    main()
