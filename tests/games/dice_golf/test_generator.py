"""Tests for procedural course generation."""

from __future__ import annotations

import pytest

from dicegolf.games.dice_golf.generator import (
    BONUS_LAYOUT,
    create_grid,
    generate_bonuses,
    generate_control_points,
    generate_course,
    generate_fairway_segments,
    generate_green,
    generate_hazards,
    place_start_and_end,
)
from dicegolf.games.dice_golf.hexgrid import hex_distance, hex_neighbors
from dicegolf.games.dice_golf.types import (
    CubeCoord,
    TerrainType,
    coord_to_key,
    key_to_coord,
)

SEEDS = [0, 1, 42, 12345, 20261019, 999_999]


class TestGrid:
    def test_cell_count(self) -> None:
        assert len(create_grid(8)) == 217
        assert len(create_grid(1)) == 7

    def test_all_rough(self) -> None:
        assert set(create_grid(3).values()) == {TerrainType.ROUGH}


class TestStartAndEnd:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_default_grid(self, seed: int) -> None:
        start, end = place_start_and_end(8, seed)
        assert start == CubeCoord(0, 7, -7)
        assert -2 <= end.q <= 2
        assert end.r == -6

    @pytest.mark.parametrize("size", [1, 2, 3, 4, 5])
    def test_small_grids_stay_on_grid(self, size: int) -> None:
        grid = create_grid(size)
        start, end = place_start_and_end(size, 7)
        assert coord_to_key(start) in grid
        assert coord_to_key(end) in grid
        assert start != end


class TestPath:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_control_points(self, seed: int) -> None:
        start, end = CubeCoord(0, 7, -7), CubeCoord(1, -6, 5)
        points = generate_control_points(start, end, seed)
        assert 6 <= len(points) <= 8
        assert points[0] == start
        assert points[-1] == end
        for p in points:
            assert p.q + p.r + p.s == 0

    @pytest.mark.parametrize("seed", SEEDS)
    def test_segments_cover_both_ends(self, seed: int) -> None:
        segments = generate_fairway_segments(seed)
        assert segments[0][0] == 0.0
        assert segments[-1][1] == 1.0
        for (_, prev_end), (next_start, _) in zip(segments, segments[1:]):
            # Gaps only open in the interior of the path.
            assert 0.15 < prev_end < 0.85
            assert prev_end < next_start


class TestGreen:
    def test_hole_neighbors_are_green(self) -> None:
        grid = create_grid(4)
        end = CubeCoord(0, -2, 2)
        generate_green(grid, end, 3)
        for n in hex_neighbors(end):
            assert grid[coord_to_key(n)] == TerrainType.GREEN

    def test_green_stays_within_radius_two(self) -> None:
        grid = create_grid(6)
        end = CubeCoord(1, -3, 2)
        generate_green(grid, end, 77)
        for key, terrain in grid.items():
            if terrain == TerrainType.GREEN:
                assert hex_distance(key_to_coord(key), end) <= 2

    def test_clipped_at_grid_edge(self) -> None:
        grid = create_grid(2)
        generate_green(grid, CubeCoord(0, -2, 2), 5)
        assert len(grid) == 19


class TestHazards:
    def test_feature_count(self) -> None:
        grid = create_grid(8)
        assert 3 <= generate_hazards(grid, 42) <= 6

    def test_only_rough_is_repainted(self) -> None:
        grid = create_grid(8)
        grid["0,0,0"] = TerrainType.FAIRWAY
        grid["1,0,-1"] = TerrainType.GREEN
        generate_hazards(grid, 42)
        assert grid["0,0,0"] == TerrainType.FAIRWAY
        assert grid["1,0,-1"] == TerrainType.GREEN
        assert set(grid.values()) <= {
            TerrainType.ROUGH, TerrainType.FAIRWAY, TerrainType.GREEN,
            TerrainType.TREES, TerrainType.SAND, TerrainType.WATER,
        }

    def test_no_rough_no_features(self) -> None:
        grid = {k: TerrainType.FAIRWAY for k in create_grid(3)}
        assert generate_hazards(grid, 1) == 0


class TestBonuses:
    def test_layout_counts(self) -> None:
        bonuses = generate_bonuses(create_grid(8), 42)
        assert len(bonuses) == sum(count for _, _, count in BONUS_LAYOUT)
        for bonus_type, _, count in BONUS_LAYOUT:
            assert sum(1 for b in bonuses.values() if b.type == bonus_type) == count

    def test_only_on_fairway_or_rough(self) -> None:
        grid = create_grid(8)
        for key in list(grid)[::2]:
            grid[key] = TerrainType.WATER
        for key in generate_bonuses(grid, 9):
            assert grid[key] == TerrainType.ROUGH

    def test_stops_when_out_of_cells(self) -> None:
        grid = {"0,0,0": TerrainType.FAIRWAY, "1,-1,0": TerrainType.ROUGH}
        assert len(generate_bonuses(grid, 4)) == 2


class TestGenerateCourse:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_deterministic(self, seed: int) -> None:
        assert generate_course(seed) == generate_course(seed)

    def test_different_seeds_differ(self) -> None:
        assert generate_course(1).grid != generate_course(2).grid

    @pytest.mark.parametrize("seed", SEEDS)
    def test_grid_invariant(self, seed: int) -> None:
        course = generate_course(seed)
        assert len(course.grid) == 217
        for key in course.grid:
            q, r, s = key_to_coord(key)
            assert q + r + s == 0
            assert max(abs(q), abs(r), abs(s)) <= 8

    @pytest.mark.parametrize("seed", SEEDS)
    def test_tee_and_hole_stamped_last(self, seed: int) -> None:
        course = generate_course(seed)
        assert course.terrain_at(course.start) == TerrainType.TEE
        assert course.terrain_at(course.end) == TerrainType.HOLE
        assert list(course.grid.values()).count(TerrainType.TEE) == 1
        assert list(course.grid.values()).count(TerrainType.HOLE) == 1

    @pytest.mark.parametrize("seed", SEEDS)
    def test_bonuses_fresh_and_on_grid(self, seed: int) -> None:
        course = generate_course(seed)
        assert len(course.bonuses) == 7
        for key, bonus in course.bonuses.items():
            assert key in course.grid
            assert not bonus.used

    @pytest.mark.parametrize("seed", SEEDS)
    def test_has_fairway_and_green(self, seed: int) -> None:
        terrain = set(generate_course(seed).grid.values())
        assert TerrainType.FAIRWAY in terrain
        assert TerrainType.GREEN in terrain

    def test_seed_recorded(self) -> None:
        assert generate_course(31337).seed == 31337

    @pytest.mark.parametrize("size", [1, 2, 3, 4])
    def test_small_grids(self, size: int) -> None:
        course = generate_course(5, grid_size=size)
        assert course.terrain_at(course.start) == TerrainType.TEE
        assert course.terrain_at(course.end) == TerrainType.HOLE
        for key in course.grid:
            assert max(abs(c) for c in key_to_coord(key)) <= size

    def test_grid_size_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from dicegolf.config import settings

        monkeypatch.setattr(settings, "grid_size", 5)
        assert len(generate_course(3).grid) == 91
