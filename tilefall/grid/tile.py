"""Tile — a single destructible cell of the grid.

A tile never leaves its grid once placed.  Destruction only moves it
through its state machine::

    ACTIVE <-> HIGHLIGHTED -> DESTROYED | FALLEN

``VOID`` is assigned at build time only.  ``DESTROYED``, ``FALLEN`` and
``VOID`` are terminal: once there, a tile can never walk back.

Tiles also track which occupants (player, enemies) currently stand on
them.  Occupancy is fed by the collision layer and is independent of
the tile state.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tilefall.grid.coordinate import Coordinate

logger = logging.getLogger(__name__)


class TileState(Enum):
    """Lifecycle state of a tile."""

    ACTIVE = auto()
    HIGHLIGHTED = auto()
    DESTROYED = auto()  # hit directly
    FALLEN = auto()  # lost its support or was cut off
    VOID = auto()  # excluded from play at build time


TERMINAL_STATES = frozenset({TileState.DESTROYED, TileState.FALLEN, TileState.VOID})


@runtime_checkable
class Occupant(Protocol):
    """Anything that can stand on a tile and die when it drops."""

    @property
    def is_hittable(self) -> bool: ...

    def can_be_hit(self) -> bool: ...

    def on_hit(self, now: float) -> None: ...

    def hit_processed(self, now: float) -> bool: ...

    def trigger_death_by_fall(self) -> None: ...


class Occupants:
    """Insertion-ordered set of the occupants standing on one tile."""

    def __init__(self) -> None:
        self._members: dict[int, Occupant] = {}

    def add(self, occupant: Occupant) -> None:
        self._members.setdefault(id(occupant), occupant)

    def remove(self, occupant: Occupant) -> None:
        """Forget ``occupant``; a no-op if it is not on the tile."""
        self._members.pop(id(occupant), None)

    def clear(self) -> None:
        self._members.clear()

    def __contains__(self, occupant: object) -> bool:
        return id(occupant) in self._members

    def __iter__(self) -> Iterator[Occupant]:
        return iter(list(self._members.values()))

    def __len__(self) -> int:
        return len(self._members)


class Tile:
    """A grid cell with a destructible surface.

    Attributes:
        coordinate: Fixed grid position of the tile.
        occupants: Occupants currently overlapping the tile.
        acknowledge_at: Clock time after which the last hit on this tile
            counts as processed, or None if it was never hit.
        drag: Drag applied to the tile's drop, or None if it has not
            dropped.
    """

    def __init__(
        self,
        coordinate: Coordinate,
        state: TileState = TileState.ACTIVE,
    ) -> None:
        """Create a tile at ``coordinate``.

        Args:
            coordinate: Grid position.
            state: Initial state; only ACTIVE or VOID are valid at build.

        Raises:
            ValueError: If ``state`` is not a valid initial state.
        """
        if state not in (TileState.ACTIVE, TileState.VOID):
            msg = f"tile cannot be built in state {state.name}"
            raise ValueError(msg)
        self.coordinate = coordinate
        self._state = state
        self._neighbors: tuple[Tile, ...] = ()
        self.occupants = Occupants()
        self.acknowledge_at: float | None = None
        self.drag: float | None = None

    def __repr__(self) -> str:
        return f"Tile({self.coordinate.x}, {self.coordinate.y}, {self._state.name})"

    @property
    def state(self) -> TileState:
        return self._state

    @property
    def neighbors(self) -> tuple[Tile, ...]:
        """Tiles at the four cardinal offsets that exist in the grid."""
        return self._neighbors

    @property
    def is_available(self) -> bool:
        """Return True unless the tile is destroyed, fallen or void."""
        return self._state not in TERMINAL_STATES

    @property
    def is_available_and_empty(self) -> bool:
        return self.is_available and len(self.occupants) == 0

    @property
    def visible(self) -> bool:
        return self._state is not TileState.VOID

    @property
    def barrier(self) -> bool:
        """Return True if an impassable wall stands in the tile's footprint."""
        return self._state in (TileState.DESTROYED, TileState.VOID)

    def enter(self, state: TileState) -> None:
        """Move the tile to ``state``.

        Active and Highlighted may swap freely.  Any available tile may
        become Destroyed or Fallen.  Nothing leaves a terminal state and
        nothing enters Void after build.

        Raises:
            ValueError: If the transition is not allowed.
        """
        if self._state in TERMINAL_STATES or state is TileState.VOID:
            msg = (
                f"illegal transition {self._state.name} -> {state.name} "
                f"at {self.coordinate}"
            )
            raise ValueError(msg)
        logger.debug(
            "tile %s: %s -> %s",
            self.coordinate,
            self._state.name,
            state.name,
        )
        self._state = state

    def drop(self, drag: float, acknowledge_at: float) -> list[Occupant]:
        """Release the tile so it falls, killing everyone standing on it.

        Args:
            drag: Drag for the physical drop.
            acknowledge_at: Clock time after which the drop counts as a
                processed hit.

        Returns:
            The occupants that were killed.
        """
        self.drag = drag
        victims = list(self.occupants)
        for occupant in victims:
            occupant.trigger_death_by_fall()
        self.occupants.clear()
        self.acknowledge_at = acknowledge_at
        return victims

    def hit_processed(self, now: float) -> bool:
        """Return True once the latest hit on this tile has been acknowledged."""
        return self.acknowledge_at is not None and now >= self.acknowledge_at

    def wire(self, neighbors: tuple[Tile, ...]) -> None:
        """Set the cardinal neighbours; called by the grid at build time."""
        self._neighbors = neighbors
