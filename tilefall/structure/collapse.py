"""CollapseOrchestrator — destroys tiles and propagates the collapse.

When a tile is destroyed two responses are tried in order:

1. **Land-mass cut.**  The cluster of unavailable tiles touching the
   destroyed tile is classified by the map edges it reaches.  Two probe
   tiles are picked on either side of the cluster and flood-filled.  If
   the fills differ, the cut split the map and the smaller land mass
   falls (ties spare the player's side).
2. **Local unsupported neighbours.**  Each direct neighbour that lost
   its support is flood-filled; the region falls when none of its tiles
   is supported on its own.

The probe choice is a geometric heuristic, not a minimum-cut search.
It can miss splits on irregular maps, and that limitation is kept.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from tilefall.effects.sink import TILE_BREAK_CUES, SoundCue
from tilefall.grid.coordinate import RIGHT, UP
from tilefall.grid.tile import TileState
from tilefall.structure.connectivity import (
    reachable_available,
    reachable_unavailable,
    same_land_mass,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.random import Generator

    from tilefall.effects.sink import EffectsSink
    from tilefall.grid.coordinate import Coordinate
    from tilefall.grid.grid import Grid
    from tilefall.grid.tile import Occupant, Tile
    from tilefall.structure.support import SupportAnalyzer

logger = logging.getLogger(__name__)


class Response(Enum):
    """How a hit or destroy call was resolved."""

    REJECTED = auto()  # the tile could not be hit
    OCCUPANTS = auto()  # occupants took the hit instead of the tile
    NONE = auto()  # only the target tile went down
    LAND_MASS = auto()
    LOCAL = auto()


@dataclass
class CollapseReport:
    """Outcome of a single hit or destroy call.

    Attributes:
        target: The tile that was hit.
        response: Which response resolved the call.
        fallen: Tiles that fell as a consequence, in drop order.
        struck: Occupants that were hit instead of the tile.
        acknowledge_at: Clock time after which the hit counts as
            processed, or None if nothing happened.
    """

    target: Tile
    response: Response
    fallen: list[Tile] = field(default_factory=list)
    struck: list[Occupant] = field(default_factory=list)
    acknowledge_at: float | None = None

    def hit_processed(self, now: float) -> bool:
        return self.acknowledge_at is not None and now >= self.acknowledge_at


@dataclass
class CollapseOrchestrator:
    """Mediates every destructive change to a grid.

    Attributes:
        grid: The level's grid.
        support: Support analyzer bound to the same grid.
        effects: Receiver for sounds, drops and camera cues.
        rng: Seeded random generator for drag and cue choice.
        player_locator: Returns the primary avatar's coordinate, or None
            if there is no live player on the map.
        drop_drag: (min, max) drag drawn for each dropping tile.
        min_tiles_falling: Region size above which the big crumble plays.
        hit_process_delay: Seconds before a hit counts as processed.
        clock: Time source for acknowledgement deadlines.
    """

    grid: Grid
    support: SupportAnalyzer
    effects: EffectsSink
    rng: Generator
    player_locator: Callable[[], Coordinate | None] = lambda: None
    drop_drag: tuple[float, float] = (0.25, 1.0)
    min_tiles_falling: int = 6
    hit_process_delay: float = 0.25
    clock: Callable[[], float] = time.monotonic

    # -- Hits ----------------------------------------------------------------

    def can_be_hit(self, tile: Tile) -> bool:
        """Return True if ``tile`` is available and next to the player."""
        player = self.player_locator()
        if player is None or not tile.is_available:
            return False
        return tile.coordinate.is_adjacent(player)

    def hit(self, tile: Tile) -> CollapseReport:
        """Resolve a player hit on ``tile``.

        Hittable occupants standing on the tile take the hit first, even
        while stunned.  A tile holding none of them is destroyed.
        """
        self.grid.require_wired()
        if not self.can_be_hit(tile):
            return CollapseReport(target=tile, response=Response.REJECTED)

        shields = [o for o in tile.occupants if o.is_hittable]
        if shields:
            now = self.clock()
            struck = [o for o in shields if o.can_be_hit()]
            for occupant in struck:
                occupant.on_hit(now)
            tile.acknowledge_at = now + self.hit_process_delay
            return CollapseReport(
                target=tile,
                response=Response.OCCUPANTS,
                struck=struck,
                acknowledge_at=tile.acknowledge_at,
            )
        return self.destroy(tile)

    # -- Destruction ---------------------------------------------------------

    def destroy(self, tile: Tile) -> CollapseReport:
        """Destroy ``tile`` and collapse whatever it no longer holds up.

        Raises:
            RuntimeError: If the grid has not been wired.
            ValueError: If ``tile`` is already destroyed, fallen or void.
        """
        self.grid.require_wired()
        self.effects.look_at(tile)
        tile.enter(TileState.DESTROYED)
        cue = TILE_BREAK_CUES[int(self.rng.integers(len(TILE_BREAK_CUES)))]
        self.effects.play_sound(cue)
        self._drop(tile)

        fallen = self._land_mass_cut(tile)
        if fallen is not None:
            response = Response.LAND_MASS
        else:
            fallen = self._unsupported_neighbors(tile)
            response = Response.LOCAL if fallen else Response.NONE

        return CollapseReport(
            target=tile,
            response=response,
            fallen=fallen,
            acknowledge_at=tile.acknowledge_at,
        )

    def collapse(self, region: list[Tile]) -> list[Tile]:
        """Make every tile of ``region`` fall, with one aggregate sound cue."""
        if len(region) > self.min_tiles_falling:
            self.effects.play_sound(SoundCue.CRUMBLE_BIG)
        else:
            self.effects.play_sound(SoundCue.CRUMBLE_SMALL)
        for tile in region:
            self._fall(tile)
        return list(region)

    # -- Land-mass cut -------------------------------------------------------

    def _land_mass_cut(self, tile: Tile) -> list[Tile] | None:
        """Collapse one side of a cut through the map, if there is one.

        Returns:
            The tiles that fell, or None if the response did not trigger.
        """
        cluster = reachable_unavailable(tile)
        if not cluster:
            return None

        sides = self.grid.boundary_sides(cluster)
        up, down = self._first_available_along(cluster, UP)
        right, left = self._first_available_along(cluster, RIGHT)

        probe_a: Tile | None = None
        probe_b: Tile | None = None
        # Second candidate for probe_b when the cut may curl back to the
        # same edge (a "U" shape)
        wild: Tile | None = None

        if sides.left and sides.right:
            probe_a, probe_b = up, down
        elif sides.top and sides.bottom:
            probe_a, probe_b = right, left
        elif (sides.left or sides.right) and (sides.top or sides.bottom):
            probe_a = left if sides.left else right
            probe_b = up if sides.bottom else down
        elif sides.top:
            probe_a, probe_b, wild = up, right, left
        elif sides.bottom:
            probe_a, probe_b, wild = down, right, left
        elif sides.left:
            probe_a, probe_b, wild = left, up, down
        elif sides.right:
            probe_a, probe_b, wild = right, up, down

        if probe_a is None or probe_b is None:
            logger.debug("no probe pair around cluster of %d tiles", len(cluster))
            return None

        mass_a = reachable_available(probe_a)
        mass_b = reachable_available(probe_b)
        same = same_land_mass(mass_a, mass_b)
        if same and wild is not None:
            mass_b = reachable_available(wild)
            same = same_land_mass(mass_a, mass_b)

        if same or not mass_a or not mass_b:
            return None

        logger.info(
            "cut at %s split the map into %d and %d tiles",
            tile.coordinate,
            len(mass_a),
            len(mass_b),
        )
        return self.collapse(self._pick_doomed(mass_a, mass_b))

    def _first_available_along(
        self,
        cluster: list[Tile],
        axis: Coordinate,
    ) -> tuple[Tile | None, Tile | None]:
        """Find the first available tiles beside ``cluster`` along ``axis``.

        Cluster members are scanned in order, looking one step in the
        positive and one step in the negative direction of ``axis``.

        Returns:
            ``(positive, negative)``, either of which may be None.
        """
        positive: Tile | None = None
        negative: Tile | None = None
        for member in cluster:
            if positive is not None and negative is not None:
                break
            if positive is None:
                candidate = self.grid.tile_at(member.coordinate + axis)
                if candidate is not None and candidate.is_available:
                    positive = candidate
            if negative is None:
                candidate = self.grid.tile_at(member.coordinate - axis)
                if candidate is not None and candidate.is_available:
                    negative = candidate
        return positive, negative

    def _pick_doomed(self, mass_a: list[Tile], mass_b: list[Tile]) -> list[Tile]:
        """Choose which of two land masses falls.

        The smaller one falls.  On a tie the one without the player falls.
        """
        if len(mass_a) < len(mass_b):
            return mass_a
        if len(mass_b) < len(mass_a):
            return mass_b

        player = self.player_locator()
        player_tile = self.grid.tile_at(player) if player is not None else None
        if player_tile is not None and player_tile in mass_a:
            return mass_b
        return mass_a

    # -- Local collapse ------------------------------------------------------

    def _unsupported_neighbors(self, tile: Tile) -> list[Tile]:
        """Drop the neighbours of ``tile`` that nothing holds up anymore.

        Returns:
            The tiles that fell.
        """
        candidates = [
            n
            for n in tile.neighbors
            if n.is_available and not self.support.is_supported(n)
        ]
        fallen: list[Tile] = []
        for candidate in candidates:
            # An earlier region may already have taken this one down
            if not candidate.is_available:
                continue
            region = reachable_available(candidate)
            if not region:
                self._fall(candidate)
                fallen.append(candidate)
                continue
            if not any(self.support.is_supported(t) for t in region):
                fallen.extend(self.collapse(region))
        return fallen

    # -- Tile side effects ---------------------------------------------------

    def _fall(self, tile: Tile) -> None:
        tile.enter(TileState.FALLEN)
        self._drop(tile)

    def _drop(self, tile: Tile) -> None:
        lo, hi = self.drop_drag
        drag = float(self.rng.uniform(lo, hi))
        self.effects.start_drop(tile, drag)
        victims = tile.drop(drag, self.clock() + self.hit_process_delay)
        if victims:
            logger.debug("%d occupant(s) fell with %s", len(victims), tile.coordinate)
