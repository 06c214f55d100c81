"""Grid — the coordinate-indexed container of tiles for one level.

The Grid owns every Tile of its level and answers spatial queries
(tile lookup, stepping rules, highlight rings, wandering destinations).
It is built once per level: tiles are placed, then neighbours are wired
exactly once.  Tiles are never removed afterwards; destruction only
changes their state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tilefall.grid.coordinate import (
    ALL_DIRECTIONS,
    CARDINAL_DIRECTIONS,
    CORNER_DIRECTIONS,
    Coordinate,
)
from tilefall.grid.tile import Tile, TileState
from tilefall.structure.connectivity import reachable_available

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from numpy.random import Generator

logger = logging.getLogger(__name__)

_GLYPHS: dict[TileState, str] = {
    TileState.ACTIVE: "#",
    TileState.HIGHLIGHTED: "+",
    TileState.DESTROYED: "x",
    TileState.FALLEN: "~",
    TileState.VOID: " ",
}


@dataclass(frozen=True)
class BoundarySides:
    """Which of the four map edges a set of tiles touches.

    Attributes:
        left: Some tile has ``x == 0``.
        right: Some tile has ``x == width - 1``.
        top: Some tile has ``y == height - 1``.
        bottom: Some tile has ``y == 0``.
    """

    left: bool = False
    right: bool = False
    top: bool = False
    bottom: bool = False


@dataclass
class Grid:
    """All tiles of a level keyed by coordinate.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tiles: Mapping from coordinate to tile.
        highlighted: Tiles highlighted by the last ``highlight_around``.
    """

    width: int
    height: int
    tiles: dict[Coordinate, Tile] = field(default_factory=dict, repr=False)
    highlighted: list[Tile] = field(default_factory=list, repr=False)
    _wired: bool = field(default=False, init=False, repr=False)

    @classmethod
    def rectangle(cls, width: int, height: int) -> Grid:
        """Build and wire a fully active ``width`` x ``height`` grid."""
        grid = cls(width=width, height=height)
        for y in range(height):
            for x in range(width):
                grid.place(Coordinate(x, y))
        grid.wire_neighbors()
        return grid

    @property
    def is_wired(self) -> bool:
        return self._wired

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles.values())

    def __len__(self) -> int:
        return len(self.tiles)

    def place(self, coord: Coordinate, state: TileState = TileState.ACTIVE) -> Tile:
        """Create the tile at ``coord`` during level build.

        Args:
            coord: Position of the new tile.
            state: ACTIVE, or VOID for cells excluded from play.

        Raises:
            ValueError: If the grid is already wired, ``coord`` is out of
                bounds or already holds a tile.
        """
        if self._wired:
            msg = "tiles cannot be placed after neighbours are wired"
            raise ValueError(msg)
        if not (0 <= coord.x < self.width and 0 <= coord.y < self.height):
            msg = f"{coord} out of bounds for {self.width}x{self.height}"
            raise ValueError(msg)
        if coord in self.tiles:
            msg = f"a tile already exists at {coord}"
            raise ValueError(msg)
        tile = Tile(coord, state)
        self.tiles[coord] = tile
        return tile

    def wire_neighbors(self) -> None:
        """Record every tile's cardinal neighbours.

        Must run after all tiles are placed.  Running it again rebuilds
        the same neighbour lists.
        """
        for tile in self.tiles.values():
            neighbors = []
            for direction in CARDINAL_DIRECTIONS:
                neighbor = self.tiles.get(tile.coordinate + direction)
                if neighbor is not None:
                    neighbors.append(neighbor)
            tile.wire(tuple(neighbors))
        self._wired = True
        logger.debug(
            "wired %d tiles on a %dx%d grid",
            len(self.tiles),
            self.width,
            self.height,
        )

    def require_wired(self) -> None:
        """Raise RuntimeError if neighbours have not been wired yet."""
        if not self._wired:
            msg = "grid neighbours must be wired before the grid is mutated"
            raise RuntimeError(msg)

    def tile_at(self, coord: Coordinate) -> Tile | None:
        """Return the tile at ``coord``, or None if there is none."""
        return self.tiles.get(coord)

    def tile_available_at(
        self,
        coord: Coordinate,
        *,
        must_be_empty: bool = True,
    ) -> bool:
        """Return True if a usable tile exists at ``coord``.

        Args:
            coord: Position to check.
            must_be_empty: Also require that nobody stands on the tile.
        """
        tile = self.tile_at(coord)
        if tile is None:
            return False
        return tile.is_available_and_empty if must_be_empty else tile.is_available

    def available_tiles(self) -> list[Tile]:
        return [tile for tile in self.tiles.values() if tile.is_available]

    def boundary_sides(self, tiles: Iterable[Tile]) -> BoundarySides:
        """Classify which map edges ``tiles`` touch."""
        left = right = top = bottom = False
        for tile in tiles:
            x, y = tile.coordinate.x, tile.coordinate.y
            left = left or x == 0
            right = right or x == self.width - 1
            top = top or y == self.height - 1
            bottom = bottom or y == 0
        return BoundarySides(left=left, right=right, top=top, bottom=bottom)

    def highlight_around(self, coord: Coordinate) -> list[Tile]:
        """Highlight the free tiles in the eight cells around ``coord``.

        The previous highlight is cleared first: highlighted tiles that
        are still available go back to ACTIVE.

        Returns:
            The newly highlighted tiles.
        """
        self.require_wired()
        for tile in self.highlighted:
            if tile.is_available:
                tile.enter(TileState.ACTIVE)
        self.highlighted.clear()

        for direction in ALL_DIRECTIONS:
            tile = self.tile_at(coord + direction)
            if tile is not None and tile.is_available_and_empty:
                tile.enter(TileState.HIGHLIGHTED)
                self.highlighted.append(tile)
        return list(self.highlighted)

    def random_available_tile(self, near: Coordinate, rng: Generator) -> Tile:
        """Pick a destination for a wandering avatar.

        Prefers the land mass connected to the tile at ``near``; falls
        back to the whole grid when that land mass is empty.

        Args:
            near: Where the avatar currently is.
            rng: Seeded random generator.

        Raises:
            LookupError: If no tile on the grid is available.
        """
        self.require_wired()
        pool = list(self.tiles.values())
        origin = self.tile_at(near)
        if origin is not None:
            land_mass = reachable_available(origin)
            if land_mass:
                pool = land_mass

        if not any(tile.is_available for tile in pool):
            msg = "no available tile left on the grid"
            raise LookupError(msg)

        while True:
            candidate = pool[int(rng.integers(len(pool)))]
            if candidate.is_available:
                return candidate

    def can_step(self, src: Coordinate, dst: Coordinate) -> bool:
        """Return True if an avatar at ``src`` may move onto ``dst``.

        The destination must be available.  A diagonal step is refused
        when every tile shared as a neighbour by both ends is unavailable.
        """
        if not self.tile_available_at(dst, must_be_empty=False):
            return False
        if dst - src not in CORNER_DIRECTIONS:
            return True

        origin = self.tile_at(src)
        target = self.tile_at(dst)
        if origin is None or target is None:
            return False
        shared = [tile for tile in target.neighbors if tile in origin.neighbors]
        return any(tile.is_available for tile in shared)

    def pretty(self, marks: dict[Coordinate, str] | None = None) -> str:
        """Render the grid as text, top row first.

        Args:
            marks: Optional per-coordinate characters drawn over tiles.
        """
        marks = marks or {}
        lines: list[str] = []
        for y in reversed(range(self.height)):
            row: list[str] = []
            for x in range(self.width):
                coord = Coordinate(x, y)
                tile = self.tiles.get(coord)
                if coord in marks:
                    row.append(marks[coord])
                elif tile is None:
                    row.append(" ")
                else:
                    row.append(_GLYPHS[tile.state])
            lines.append("".join(row))
        return "\n".join(lines)
