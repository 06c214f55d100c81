"""LevelSession — owns everything that lives for one level.

A session builds the grid from a layout, places the avatars, and wires
the collapse orchestrator with its collaborators (player locator,
effects sink, seeded RNG).  Loading another level throws the old grid
away entirely; nothing carries over between levels.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator

from tilefall.actors.avatar import Avatar, AvatarKind
from tilefall.effects.sink import EffectLog
from tilefall.level.layout import LevelLayout
from tilefall.structure.collapse import CollapseOrchestrator, CollapseReport
from tilefall.structure.support import SupportAnalyzer

if TYPE_CHECKING:
    from collections.abc import Callable

    from tilefall.grid.coordinate import Coordinate
    from tilefall.grid.grid import Grid
    from tilefall.grid.tile import Tile
    from tilefall.simulation.config import TilefallConfig

logger = logging.getLogger(__name__)


@dataclass
class LevelSession:
    """State for the level currently in play.

    Attributes:
        config: Loaded configuration.
        clock: Time source for hit acknowledgement.
        rng: Master seeded random generator.
        effects: Recorded side effects of the current level.
        level_index: Index of the loaded layout in ``config.levels``.
        grid: The current level's grid.
        player: The player avatar, if the layout spawns one.
        enemies: Enemy avatars.
        orchestrator: Collapse orchestrator bound to ``grid``.
    """

    config: TilefallConfig
    clock: Callable[[], float] = time.monotonic
    rng: Generator = field(init=False)
    effects: EffectLog = field(init=False)
    level_index: int = field(init=False, default=0)
    grid: Grid = field(init=False)
    player: Avatar | None = field(init=False, default=None)
    enemies: list[Avatar] = field(init=False, default_factory=list)
    orchestrator: CollapseOrchestrator = field(init=False)

    def __post_init__(self) -> None:
        """Seed the RNG and load the first level."""
        self.rng = np.random.default_rng(self.config.seed)
        self.load_level(0)

    def load_level(self, index: int) -> None:
        """Discard the current level and build layout ``index``.

        Raises:
            IndexError: If ``index`` is not a configured level.
        """
        if not 0 <= index < len(self.config.levels):
            msg = f"level {index} out of range for {len(self.config.levels)} levels"
            raise IndexError(msg)

        built = LevelLayout(rows=self.config.levels[index]).build()
        self.level_index = index
        self.grid = built.grid
        self.effects = EffectLog()
        delay = self.config.hit_process_delay

        self.player = None
        if built.player_spawn is not None:
            self.player = Avatar(
                kind=AvatarKind.PLAYER,
                coordinate=built.player_spawn,
                hit_delay=delay,
            )
        self.enemies = [
            Avatar(kind=AvatarKind.ENEMY, coordinate=spawn, hit_delay=delay)
            for spawn in built.enemy_spawns
        ]
        for avatar in self.avatars:
            self._occupy(avatar)

        self.orchestrator = CollapseOrchestrator(
            grid=self.grid,
            support=SupportAnalyzer(self.grid, min_support=self.config.min_support),
            effects=self.effects,
            rng=self.rng,
            player_locator=self._player_coordinate,
            drop_drag=self.config.drop_drag,
            min_tiles_falling=self.config.min_tiles_falling,
            hit_process_delay=delay,
            clock=self.clock,
        )
        if self.player is not None:
            self.grid.highlight_around(self.player.coordinate)
        logger.info("loaded level %d", index)

    @property
    def avatars(self) -> list[Avatar]:
        players = [self.player] if self.player is not None else []
        return players + self.enemies

    @property
    def player_alive(self) -> bool:
        return self.player is not None and self.player.alive

    @property
    def enemies_remaining(self) -> int:
        return sum(1 for enemy in self.enemies if enemy.alive)

    def move(self, avatar: Avatar, dst: Coordinate) -> bool:
        """Step ``avatar`` onto ``dst`` if the grid allows it.

        Moves the avatar between the two tiles' occupant sets.  Moving
        the player refreshes the highlight ring.

        Returns:
            True if the avatar moved.
        """
        if not avatar.alive or not self.grid.can_step(avatar.coordinate, dst):
            return False
        self._vacate(avatar)
        avatar.coordinate = dst
        self._occupy(avatar)
        if avatar.is_player:
            self.grid.highlight_around(dst)
        return True

    def strike(self, coord: Coordinate) -> CollapseReport | None:
        """Let the player hit the tile at ``coord``.

        Returns:
            The hit's report, or None if there is no tile there.
        """
        tile = self.grid.tile_at(coord)
        if tile is None:
            return None
        report = self.orchestrator.hit(tile)
        if self.player is not None and self.player.alive:
            self.grid.highlight_around(self.player.coordinate)
        return report

    def wander_target(self, enemy: Avatar) -> Tile:
        """Pick a random destination for ``enemy`` on its land mass."""
        return self.grid.random_available_tile(enemy.coordinate, self.rng)

    def _player_coordinate(self) -> Coordinate | None:
        if self.player is None or not self.player.alive:
            return None
        return self.player.coordinate

    def _occupy(self, avatar: Avatar) -> None:
        tile = self.grid.tile_at(avatar.coordinate)
        if tile is not None:
            tile.occupants.add(avatar)

    def _vacate(self, avatar: Avatar) -> None:
        tile = self.grid.tile_at(avatar.coordinate)
        if tile is not None:
            tile.occupants.remove(avatar)
