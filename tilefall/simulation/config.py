"""Config — load collapse parameters from YAML files.

All tunable constants (support threshold, drop drag, crumble size,
hit acknowledgement delay, level layouts) live in YAML and are parsed
into a typed dataclass here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

_DEFAULT_LEVEL = [
    "#########",
    "#E#####E#",
    "#########",
    "###...###",
    "####P####",
    "###...###",
    "#########",
    "#E#####E#",
    "#########",
]


@dataclass
class TilefallConfig:
    """Top-level configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        min_support: Sides (1-4) whose rays must reach the map edge for a
            tile to count as supported.
        min_tiles_falling: Region size above which the big crumble cue
            plays instead of the small one.
        drop_drag: (min, max) drag drawn for each dropping tile.
        hit_process_delay: Seconds before a hit counts as processed.
        levels: Level layouts, each a list of rows (top row first).
    """

    seed: int = 42
    min_support: int = 1
    min_tiles_falling: int = 6
    drop_drag: tuple[float, float] = (0.25, 1.0)
    hit_process_delay: float = 0.25
    levels: list[list[str]] = field(default_factory=lambda: [list(_DEFAULT_LEVEL)])

    def __post_init__(self) -> None:
        """Validate ranges.

        Raises:
            ValueError: If any value is out of range.
        """
        self.drop_drag = (float(self.drop_drag[0]), float(self.drop_drag[1]))
        if not 1 <= self.min_support <= 4:
            msg = f"min_support must be between 1 and 4, got {self.min_support}"
            raise ValueError(msg)
        if self.drop_drag[0] > self.drop_drag[1]:
            msg = f"drop_drag range is inverted: {self.drop_drag}"
            raise ValueError(msg)
        if self.hit_process_delay < 0:
            msg = f"hit_process_delay must be >= 0, got {self.hit_process_delay}"
            raise ValueError(msg)
        if not self.levels:
            msg = "at least one level layout is required"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> TilefallConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated TilefallConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a value is out of range.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        defaults = cls()
        return cls(
            seed=data.get("seed", defaults.seed),
            min_support=data.get("min_support", defaults.min_support),
            min_tiles_falling=data.get(
                "min_tiles_falling",
                defaults.min_tiles_falling,
            ),
            drop_drag=tuple(data.get("drop_drag", defaults.drop_drag)),
            hit_process_delay=data.get(
                "hit_process_delay",
                defaults.hit_process_delay,
            ),
            levels=data.get("levels", defaults.levels),
        )
