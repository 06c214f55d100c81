"""Avatar — player and enemy bodies that stand on tiles.

Avatars implement the ``Occupant`` capability so tiles can kill them
when they drop.  Enemies can also be hit: a hit stuns them until they
``recover``.  The player cannot be hit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tilefall.grid.coordinate import Coordinate


class AvatarKind(Enum):
    PLAYER = auto()
    ENEMY = auto()


@dataclass(eq=False)
class Avatar:
    """A body on the map.

    Attributes:
        kind: Player or enemy.
        coordinate: Tile the avatar currently stands on.
        alive: False once the avatar has fallen.
        stunned: True while an enemy recovers from a hit.
        hit_delay: Seconds before a hit on this avatar counts as processed.
        acknowledge_at: Clock time of that acknowledgement, if hit.
    """

    kind: AvatarKind
    coordinate: Coordinate
    alive: bool = True
    stunned: bool = False
    hit_delay: float = 0.25
    acknowledge_at: float | None = None

    @property
    def is_player(self) -> bool:
        return self.kind is AvatarKind.PLAYER

    @property
    def is_hittable(self) -> bool:
        """Return True for bodies that take hammer hits, even while stunned."""
        return not self.is_player

    def can_be_hit(self) -> bool:
        return self.is_hittable and self.alive and not self.stunned

    def on_hit(self, now: float) -> None:
        self.stunned = True
        self.acknowledge_at = now + self.hit_delay

    def hit_processed(self, now: float) -> bool:
        return self.acknowledge_at is not None and now >= self.acknowledge_at

    def recover(self) -> None:
        """End the stun so the enemy can move and be hit again."""
        self.stunned = False

    def trigger_death_by_fall(self) -> None:
        self.alive = False
