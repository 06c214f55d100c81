"""LevelLayout — build a grid from a character map.

Each character is one cell.  The first row is the top of the map, so it
receives the highest ``y``.

Legend:

- ``#`` plain tile
- ``.`` void tile (present but out of play)
- ``P`` tile with the player spawn
- ``E`` tile with an enemy spawn
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from tilefall.grid.coordinate import Coordinate
from tilefall.grid.grid import Grid
from tilefall.grid.tile import TileState

logger = logging.getLogger(__name__)

TILE = "#"
VOID = "."
PLAYER = "P"
ENEMY = "E"


@dataclass
class BuiltLevel:
    """A freshly built, wired grid plus its spawn points.

    Attributes:
        grid: The level's grid.
        player_spawn: Where the player starts, if the layout has one.
        enemy_spawns: Where enemies start, in reading order.
    """

    grid: Grid
    player_spawn: Coordinate | None = None
    enemy_spawns: list[Coordinate] = field(default_factory=list)


@dataclass
class LevelLayout:
    """A rectangular character map describing one level.

    Attributes:
        rows: Map rows, top row first.
    """

    rows: list[str]

    def __post_init__(self) -> None:
        if not self.rows or not self.rows[0]:
            msg = "level layout must have at least one row and one column"
            raise ValueError(msg)
        widths = {len(row) for row in self.rows}
        if len(widths) != 1:
            msg = f"level layout rows must share one width, got {sorted(widths)}"
            raise ValueError(msg)

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def build(self) -> BuiltLevel:
        """Place every tile, then wire neighbours once."""
        grid = Grid(width=self.width, height=self.height)
        level = BuiltLevel(grid=grid)
        for row_index, row in enumerate(self.rows):
            y = self.height - 1 - row_index
            for x, char in enumerate(row):
                coord = Coordinate(x, y)
                if char == VOID:
                    grid.place(coord, TileState.VOID)
                    continue
                grid.place(coord)
                if char == PLAYER:
                    level.player_spawn = coord
                elif char == ENEMY:
                    level.enemy_spawns.append(coord)
                elif char != TILE:
                    logger.warning("unknown layout character %r at %s", char, coord)
        grid.wire_neighbors()
        logger.info(
            "built %dx%d level with %d enemies",
            self.width,
            self.height,
            len(level.enemy_spawns),
        )
        return level
