"""Tests for tilefall.grid.grid and tilefall.grid.coordinate."""

import pytest
from numpy.random import Generator

from tilefall.actors.avatar import Avatar, AvatarKind
from tilefall.grid.coordinate import ALL_DIRECTIONS, CARDINAL_DIRECTIONS, Coordinate
from tilefall.grid.grid import Grid
from tilefall.grid.tile import TileState
from tilefall.level.layout import LevelLayout


class TestCoordinate:
    """Tests for the Coordinate value type."""

    def test_value_equality_and_hash(self) -> None:
        assert Coordinate(2, 3) == Coordinate(2, 3)
        assert {Coordinate(2, 3): "a"}[Coordinate(2, 3)] == "a"

    def test_offset_arithmetic(self) -> None:
        assert Coordinate(2, 3) + Coordinate(0, 1) == Coordinate(2, 4)
        assert Coordinate(2, 3) - Coordinate(1, 0) == Coordinate(1, 3)
        assert -Coordinate(1, -1) == Coordinate(-1, 1)
        assert Coordinate(1, 0) * 3 == Coordinate(3, 0)

    def test_direction_sets(self) -> None:
        assert len(CARDINAL_DIRECTIONS) == 4
        assert len(ALL_DIRECTIONS) == 8
        assert len(set(ALL_DIRECTIONS)) == 8

    def test_adjacency_includes_diagonals(self) -> None:
        origin = Coordinate(2, 2)
        assert origin.is_adjacent(Coordinate(3, 3))
        assert origin.is_adjacent(Coordinate(2, 1))
        assert not origin.is_adjacent(origin)
        assert not origin.is_adjacent(Coordinate(4, 2))


class TestGridBuild:
    """Tests for placing tiles and wiring neighbours."""

    def test_rectangle_dimensions(self, grid5: Grid) -> None:
        assert len(grid5) == 25
        assert grid5.is_wired

    def test_tile_at(self, grid5: Grid) -> None:
        tile = grid5.tile_at(Coordinate(3, 1))
        assert tile is not None
        assert tile.coordinate == Coordinate(3, 1)

    def test_tile_at_missing(self, grid5: Grid) -> None:
        assert grid5.tile_at(Coordinate(5, 0)) is None
        assert grid5.tile_at(Coordinate(-1, 2)) is None

    def test_neighbour_counts(self, grid5: Grid) -> None:
        assert len(grid5.tile_at(Coordinate(0, 0)).neighbors) == 2
        assert len(grid5.tile_at(Coordinate(0, 2)).neighbors) == 3
        assert len(grid5.tile_at(Coordinate(2, 2)).neighbors) == 4

    def test_neighbours_are_symmetric(self) -> None:
        built = LevelLayout(rows=["#.##", "####", "##.#"]).build()
        for tile in built.grid:
            for neighbor in tile.neighbors:
                assert tile in neighbor.neighbors

    def test_wiring_is_idempotent(self, grid5: Grid) -> None:
        before = {t.coordinate: t.neighbors for t in grid5}
        grid5.wire_neighbors()
        assert {t.coordinate: t.neighbors for t in grid5} == before

    def test_place_out_of_bounds(self) -> None:
        grid = Grid(width=2, height=2)
        with pytest.raises(ValueError):
            grid.place(Coordinate(2, 0))

    def test_place_twice(self) -> None:
        grid = Grid(width=2, height=2)
        grid.place(Coordinate(0, 0))
        with pytest.raises(ValueError):
            grid.place(Coordinate(0, 0))

    def test_place_after_wiring(self, grid5: Grid) -> None:
        with pytest.raises(ValueError):
            grid5.place(Coordinate(0, 0))

    def test_mutation_requires_wiring(self, rng: Generator) -> None:
        grid = Grid(width=2, height=2)
        grid.place(Coordinate(0, 0))
        with pytest.raises(RuntimeError):
            grid.highlight_around(Coordinate(0, 0))
        with pytest.raises(RuntimeError):
            grid.random_available_tile(Coordinate(0, 0), rng)

    def test_boundary_sides(self, grid5: Grid) -> None:
        column = [grid5.tile_at(Coordinate(2, y)) for y in range(5)]
        sides = grid5.boundary_sides(column)
        assert sides.top
        assert sides.bottom
        assert not sides.left
        assert not sides.right


class TestHighlight:
    """Tests for highlight_around."""

    def test_highlights_all_eight(self, grid5: Grid) -> None:
        highlighted = grid5.highlight_around(Coordinate(2, 2))
        assert len(highlighted) == 8
        assert all(t.state is TileState.HIGHLIGHTED for t in highlighted)
        assert grid5.tile_at(Coordinate(2, 2)).state is TileState.ACTIVE

    def test_corner_origin(self, grid5: Grid) -> None:
        assert len(grid5.highlight_around(Coordinate(0, 0))) == 3

    def test_previous_highlight_cleared(self, grid5: Grid) -> None:
        grid5.highlight_around(Coordinate(1, 1))
        grid5.highlight_around(Coordinate(4, 4))
        states = {t.coordinate: t.state for t in grid5}
        assert states[Coordinate(0, 0)] is TileState.ACTIVE
        assert states[Coordinate(3, 3)] is TileState.HIGHLIGHTED
        assert len(grid5.highlighted) == 3

    def test_idempotent(self, grid5: Grid) -> None:
        first = {t.coordinate for t in grid5.highlight_around(Coordinate(2, 2))}
        second = {t.coordinate for t in grid5.highlight_around(Coordinate(2, 2))}
        assert first == second

    def test_skips_occupied_and_unavailable(self, grid5: Grid) -> None:
        grid5.tile_at(Coordinate(1, 1)).enter(TileState.DESTROYED)
        enemy = Avatar(kind=AvatarKind.ENEMY, coordinate=Coordinate(3, 3))
        grid5.tile_at(Coordinate(3, 3)).occupants.add(enemy)
        highlighted = {t.coordinate for t in grid5.highlight_around(Coordinate(2, 2))}
        assert Coordinate(1, 1) not in highlighted
        assert Coordinate(3, 3) not in highlighted
        assert len(highlighted) == 6

    def test_destroyed_highlight_is_not_reset(self, grid5: Grid) -> None:
        grid5.highlight_around(Coordinate(2, 2))
        grid5.tile_at(Coordinate(1, 1)).enter(TileState.DESTROYED)
        grid5.highlight_around(Coordinate(0, 4))
        assert grid5.tile_at(Coordinate(1, 1)).state is TileState.DESTROYED


class TestRandomAvailableTile:
    """Tests for wandering destinations."""

    def test_stays_on_own_land_mass(self, grid5: Grid, rng: Generator) -> None:
        for y in range(5):
            grid5.tile_at(Coordinate(2, y)).enter(TileState.DESTROYED)
        for _ in range(30):
            tile = grid5.random_available_tile(Coordinate(0, 0), rng)
            assert tile.is_available
            assert tile.coordinate.x < 2

    def test_isolated_origin_uses_whole_grid(
        self,
        grid5: Grid,
        rng: Generator,
    ) -> None:
        for coord in [Coordinate(0, 1), Coordinate(1, 0)]:
            grid5.tile_at(coord).enter(TileState.DESTROYED)
        picks = {
            grid5.random_available_tile(Coordinate(0, 0), rng).coordinate
            for _ in range(50)
        }
        assert len(picks) > 1
        assert all(grid5.tile_at(c).is_available for c in picks)

    def test_no_available_tile(self, rng: Generator) -> None:
        grid = Grid.rectangle(2, 1)
        for tile in grid:
            tile.enter(TileState.FALLEN)
        with pytest.raises(LookupError):
            grid.random_available_tile(Coordinate(0, 0), rng)

    def test_deterministic_for_seed(self, grid5: Grid) -> None:
        import numpy as np

        a = grid5.random_available_tile(Coordinate(2, 2), np.random.default_rng(7))
        b = grid5.random_available_tile(Coordinate(2, 2), np.random.default_rng(7))
        assert a is b


class TestStepping:
    """Tests for can_step."""

    def test_cardinal_step(self, grid5: Grid) -> None:
        assert grid5.can_step(Coordinate(2, 2), Coordinate(2, 3))

    def test_step_onto_destroyed(self, grid5: Grid) -> None:
        grid5.tile_at(Coordinate(2, 3)).enter(TileState.DESTROYED)
        assert not grid5.can_step(Coordinate(2, 2), Coordinate(2, 3))

    def test_diagonal_needs_one_open_side(self, grid5: Grid) -> None:
        grid5.tile_at(Coordinate(2, 3)).enter(TileState.DESTROYED)
        assert grid5.can_step(Coordinate(2, 2), Coordinate(3, 3))
        grid5.tile_at(Coordinate(3, 2)).enter(TileState.DESTROYED)
        assert not grid5.can_step(Coordinate(2, 2), Coordinate(3, 3))

    def test_off_grid(self, grid5: Grid) -> None:
        assert not grid5.can_step(Coordinate(0, 0), Coordinate(-1, 0))


class TestPretty:
    def test_top_row_first(self) -> None:
        grid = Grid.rectangle(3, 2)
        grid.tile_at(Coordinate(0, 1)).enter(TileState.DESTROYED)
        grid.tile_at(Coordinate(2, 0)).enter(TileState.FALLEN)
        assert grid.pretty() == "x##\n##~"

    def test_marks(self) -> None:
        grid = Grid.rectangle(2, 1)
        assert grid.pretty({Coordinate(1, 0): "P"}) == "#P"
