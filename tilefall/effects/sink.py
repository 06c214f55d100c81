"""Effects — outward side effects the collapse engine asks for.

The engine never plays audio or moves bodies itself.  It names the
effect and hands it to an ``EffectsSink`` supplied by the caller.
``EffectLog`` is a sink that simply records what was asked, which is
enough for headless sessions and tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tilefall.grid.coordinate import Coordinate
    from tilefall.grid.tile import Tile

logger = logging.getLogger(__name__)


class SoundCue(Enum):
    """Named audio cues."""

    TILE_BREAK_ONE = auto()
    TILE_BREAK_TWO = auto()
    TILE_BREAK_THREE = auto()
    CRUMBLE_BIG = auto()
    CRUMBLE_SMALL = auto()


TILE_BREAK_CUES: tuple[SoundCue, ...] = (
    SoundCue.TILE_BREAK_ONE,
    SoundCue.TILE_BREAK_TWO,
    SoundCue.TILE_BREAK_THREE,
)


class EffectKind(Enum):
    SOUND = auto()
    DROP = auto()
    LOOK_AT = auto()


class EffectsSink(Protocol):
    """Receiver for the engine's side effects."""

    def play_sound(self, cue: SoundCue) -> None: ...

    def start_drop(self, tile: Tile, drag: float) -> None: ...

    def look_at(self, tile: Tile) -> None: ...


@dataclass(frozen=True)
class Effect:
    """One recorded side effect.

    Attributes:
        kind: What was requested.
        cue: Sound played, for SOUND effects.
        coordinate: Tile involved, for DROP and LOOK_AT effects.
        drag: Drop drag, for DROP effects.
    """

    kind: EffectKind
    cue: SoundCue | None = None
    coordinate: Coordinate | None = None
    drag: float | None = None


@dataclass
class EffectLog:
    """An ``EffectsSink`` that records every effect in order."""

    effects: list[Effect] = field(default_factory=list)

    def play_sound(self, cue: SoundCue) -> None:
        logger.debug("sound %s", cue.name)
        self.effects.append(Effect(kind=EffectKind.SOUND, cue=cue))

    def start_drop(self, tile: Tile, drag: float) -> None:
        logger.debug("drop %s with drag %.3f", tile.coordinate, drag)
        self.effects.append(
            Effect(kind=EffectKind.DROP, coordinate=tile.coordinate, drag=drag),
        )

    def look_at(self, tile: Tile) -> None:
        self.effects.append(
            Effect(kind=EffectKind.LOOK_AT, coordinate=tile.coordinate),
        )

    def sounds(self) -> list[SoundCue]:
        return [
            e.cue
            for e in self.effects
            if e.kind is EffectKind.SOUND and e.cue is not None
        ]

    def drops(self) -> list[Coordinate]:
        return [
            e.coordinate
            for e in self.effects
            if e.kind is EffectKind.DROP and e.coordinate is not None
        ]

    def clear(self) -> None:
        self.effects.clear()
