"""Coordinate — an integer position on the tile grid.

Coordinates double as offsets: adding a direction vector to a coordinate
yields the neighbouring position.  ``y`` grows upward, so ``UP`` is
``(0, 1)`` and the top row of a map has the highest ``y``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """A 2D integer grid position, hashable by value.

    Attributes:
        x: Column index.
        y: Row index (grows upward).
    """

    x: int
    y: int

    def __add__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Coordinate:
        return Coordinate(-self.x, -self.y)

    def __mul__(self, factor: int) -> Coordinate:
        return Coordinate(self.x * factor, self.y * factor)

    def is_adjacent(self, other: Coordinate) -> bool:
        """Return True if ``other`` is one of the eight surrounding cells."""
        return any(other + offset == self for offset in ALL_DIRECTIONS)


UP = Coordinate(0, 1)
LEFT = Coordinate(-1, 0)
DOWN = Coordinate(0, -1)
RIGHT = Coordinate(1, 0)

# Order matters: neighbour lists and flood fills follow it.
CARDINAL_DIRECTIONS: tuple[Coordinate, ...] = (UP, LEFT, DOWN, RIGHT)

CORNER_DIRECTIONS: tuple[Coordinate, ...] = (
    Coordinate(-1, 1),
    Coordinate(-1, -1),
    Coordinate(1, -1),
    Coordinate(1, 1),
)

ALL_DIRECTIONS: tuple[Coordinate, ...] = CARDINAL_DIRECTIONS + CORNER_DIRECTIONS
