"""Connectivity — flood fills over the tile neighbour graph.

Grid adjacency is cyclic, so every fill keeps a visited set.  The walk
is depth-first with an explicit stack of neighbour iterators: results
come back in the same order a recursive walk would produce, while the
Python stack depth stays constant regardless of region size.

The seed tile is not pre-marked as visited.  It only shows up in the
result when the walk comes back to it through a neighbour, so a seed
with no matching neighbours yields an empty list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from tilefall.grid.tile import Tile


def flood_fill(root: Tile, accept: Callable[[Tile], bool]) -> list[Tile]:
    """Collect every tile reachable from ``root`` through accepted tiles.

    Args:
        root: Tile whose neighbours start the walk.
        accept: Predicate a tile must satisfy to be visited.

    Returns:
        Visited tiles in discovery order, without duplicates.
    """
    found: list[Tile] = []
    seen: set[Tile] = set()
    stack: list[Iterator[Tile]] = [iter(root.neighbors)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        if child in seen or not accept(child):
            continue
        seen.add(child)
        found.append(child)
        stack.append(iter(child.neighbors))
    return found


def reachable_available(root: Tile) -> list[Tile]:
    """Return the land mass of available tiles connected to ``root``."""
    return flood_fill(root, lambda tile: tile.is_available)


def reachable_unavailable(root: Tile) -> list[Tile]:
    """Return the cluster of destroyed, fallen or void tiles touching ``root``."""
    return flood_fill(root, lambda tile: not tile.is_available)


def same_land_mass(a: list[Tile], b: list[Tile]) -> bool:
    """Return True if two fills hold exactly the same tiles."""
    return len(a) == len(b) and set(a) == set(b)
