"""Support analysis — is a tile still held up by the rest of the map?

A ray is cast from the tile in each cardinal direction.  It walks over
available tiles until it either leaves the grid (the edge carries load,
so that side counts as supported) or meets an unavailable tile (that
side is cut).  A tile is supported when enough sides reach the edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tilefall.grid.coordinate import CARDINAL_DIRECTIONS

if TYPE_CHECKING:
    from tilefall.grid.grid import Grid
    from tilefall.grid.tile import Tile


@dataclass
class SupportAnalyzer:
    """Ray-cast support check against one grid.

    Attributes:
        grid: The grid to cast rays through.
        min_support: Number of supported sides (1-4) a tile needs.
    """

    grid: Grid
    min_support: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.min_support <= len(CARDINAL_DIRECTIONS):
            msg = f"min_support must be between 1 and 4, got {self.min_support}"
            raise ValueError(msg)

    def supported_sides(self, tile: Tile) -> int:
        """Count the cardinal rays from ``tile`` that reach the grid edge."""
        count = 0
        for direction in CARDINAL_DIRECTIONS:
            cursor = tile.coordinate + direction
            ahead = self.grid.tile_at(cursor)
            while ahead is not None and ahead.is_available:
                cursor = cursor + direction
                ahead = self.grid.tile_at(cursor)
            if ahead is None:
                count += 1
        return count

    def is_supported(self, tile: Tile) -> bool:
        """Return True if ``tile`` is available and sufficiently supported."""
        if not tile.is_available:
            return False
        return self.supported_sides(tile) >= self.min_support
