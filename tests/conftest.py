"""Shared fixtures for the Tilefall test suite."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pytest
from numpy.random import Generator

from tilefall.effects.sink import EffectLog
from tilefall.grid.coordinate import Coordinate
from tilefall.grid.grid import Grid
from tilefall.simulation.config import TilefallConfig
from tilefall.structure.collapse import CollapseOrchestrator
from tilefall.structure.support import SupportAnalyzer


@dataclass
class FakeClock:
    """A manually advanced time source."""

    now: float = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def grid5() -> Grid:
    """A fully active, wired 5x5 grid."""
    return Grid.rectangle(5, 5)


@pytest.fixture
def effects() -> EffectLog:
    return EffectLog()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def default_config() -> TilefallConfig:
    """Default configuration (no YAML file needed)."""
    return TilefallConfig()


@pytest.fixture
def make_orchestrator(rng: Generator, effects: EffectLog, clock: FakeClock):
    """Factory binding an orchestrator to a grid with a fixed player spot."""

    def _make(
        grid: Grid,
        player: Coordinate | None = None,
        min_support: int = 1,
    ) -> CollapseOrchestrator:
        return CollapseOrchestrator(
            grid=grid,
            support=SupportAnalyzer(grid, min_support=min_support),
            effects=effects,
            rng=rng,
            player_locator=lambda: player,
            clock=clock,
        )

    return _make
