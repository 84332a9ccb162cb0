"""Procedural course generation.

A single pass over a fixed seed:

1. fill a hexagon of radius ``grid_size`` with rough,
2. place the tee near the southern edge and the hole in the top third,
3. lay a wobbly Bezier path of control points between them,
4. split the path into fairway segments separated by noise-chosen gaps,
5. carve the fairway, widening it at landing zones and noisy spots,
6. flood-fill an irregular green around the hole,
7. blend hazard features (trees, sand, water) into the remaining rough,
8. scatter bonus cells over fairway and rough,
9. stamp the tee and hole last.
"""

from __future__ import annotations

import logging
import math
from collections import deque

from dicegolf.config import settings
from dicegolf.games.dice_golf.hexgrid import (
    bezier_point,
    hex_distance,
    hex_neighbors,
    in_hex_radius,
    manhattan_distance,
    round_half_up,
)
from dicegolf.games.dice_golf.noise import noise_2d, random_from_seed
from dicegolf.games.dice_golf.types import (
    Bonus,
    BonusType,
    Course,
    CubeCoord,
    TerrainType,
    coord_to_key,
    cube,
    key_to_coord,
)

logger = logging.getLogger(__name__)

EDGE_BUFFER = 2
PATH_STEP = 0.01

GAP_THRESHOLD = 0.85
GAP_MIN_T = 0.15
GAP_MAX_T = 0.85
WIDTH_THRESHOLD = 0.7
NEIGHBOR_THRESHOLD = 0.3

GREEN_RADIUS = 2
GREEN_THRESHOLD = 0.3
GREEN_SEED_OFFSET = 1000

HAZARD_THRESHOLD = 0.3

# (type, value, count) placed in this order; the index keys the random slot.
BONUS_LAYOUT: list[tuple[BonusType, float, int]] = [
    (BonusType.MULTIPLIER_2X, 2, 2),
    (BonusType.MULTIPLIER_3X, 3, 1),
    (BonusType.POINTS_500, 500, 3),
    (BonusType.EXTRA_MULLIGAN, 1, 1),
]

Grid = dict[str, TerrainType]


def generate_course(seed: int, grid_size: int | None = None) -> Course:
    """Generate a complete course from *seed*. Same inputs, same course."""
    size = settings.grid_size if grid_size is None else grid_size
    grid = create_grid(size)

    start, end = place_start_and_end(size, seed)
    control_points = generate_control_points(start, end, seed)
    segments = generate_fairway_segments(seed)
    carve_fairway(grid, control_points, segments, seed)
    generate_green(grid, end, seed)
    features = generate_hazards(grid, seed)
    bonuses = generate_bonuses(grid, seed)

    grid[coord_to_key(start)] = TerrainType.TEE
    grid[coord_to_key(end)] = TerrainType.HOLE

    logger.debug(
        "Generated course seed=%d size=%d start=%s end=%s features=%d "
        "fairway=%d bonuses=%d",
        seed, size, start, end, features,
        sum(1 for t in grid.values() if t == TerrainType.FAIRWAY),
        len(bonuses),
    )

    return Course(grid=grid, bonuses=bonuses, start=start, end=end, seed=seed)


def create_grid(grid_size: int) -> Grid:
    """All cells with max(|q|, |r|, |s|) <= grid_size, as rough."""
    grid: Grid = {}
    for q in range(-grid_size, grid_size + 1):
        for r in range(-grid_size, grid_size + 1):
            cell = cube(q, r)
            if in_hex_radius(cell, grid_size):
                grid[coord_to_key(cell)] = TerrainType.ROUGH
    return grid


def place_start_and_end(grid_size: int, seed: int) -> tuple[CubeCoord, CubeCoord]:
    """Tee near the bottom centre, hole somewhere in the inset top third."""
    start = cube(0, grid_size - 1)

    top_third = math.floor(grid_size * 0.33)
    min_q = -(grid_size // 2) + EDGE_BUFFER
    max_q = grid_size // 2 - EDGE_BUFFER
    min_r = -grid_size + EDGE_BUFFER
    max_r = -grid_size + top_third

    # Small grids leave no room for the buffer: collapse to a single row/column.
    if min_q > max_q:
        min_q = max_q = 0
    if min_r > max_r:
        min_r = max_r = min(-grid_size + 1, -1)

    q = min_q + _pick_index(random_from_seed(0, 1, seed), max_q - min_q + 1)
    r = min_r + _pick_index(random_from_seed(1, 1, seed), max_r - min_r + 1)
    return start, cube(q, r)


def generate_control_points(
    start: CubeCoord, end: CubeCoord, seed: int,
) -> list[CubeCoord]:
    """Tee, 4-6 laterally jittered waypoints, hole."""
    num_points = 6 + _pick_index(random_from_seed(0, 2, seed), 3)
    points = [start]

    for i in range(1, num_points - 1):
        progress = i / (num_points - 1)
        base_r = start.r + (end.r - start.r) * progress

        # Jitter is strongest mid-path and fades towards tee and hole.
        lateral_variation = math.sin(progress * math.pi) * 2.5
        lateral_random = random_from_seed(i, 2, seed) - 0.5

        q = math.floor(
            start.q + (end.q - start.q) * progress
            + lateral_random * lateral_variation
        )
        r = math.floor(base_r + (random_from_seed(i, 3, seed) - 0.5))
        points.append(cube(q, r))

    points.append(end)
    return points


def generate_fairway_segments(seed: int) -> list[tuple[float, float]]:
    """Split the path parameter range [0, 1] into (start_t, end_t) segments.

    A gap opens wherever the noise along the path spikes, but only in the
    interior of the hole so the tee and green stay connected to fairway.
    """
    segments: list[tuple[float, float]] = []
    seg_start = 0.0
    in_gap = False

    for t in _path_steps(0.0, 1.0):
        gap = (
            noise_2d(t * 10, 0, seed) > GAP_THRESHOLD
            and GAP_MIN_T < t < GAP_MAX_T
        )
        if gap and not in_gap:
            segments.append((seg_start, t))
            in_gap = True
        elif not gap and in_gap:
            seg_start = t
            in_gap = False

    if not in_gap:
        segments.append((seg_start, 1.0))

    return segments


def carve_fairway(
    grid: Grid,
    control_points: list[CubeCoord],
    segments: list[tuple[float, float]],
    seed: int,
) -> None:
    """Mark fairway along the curve, widening at landing zones and noisy spots."""
    processed: set[str] = set()

    for seg_start, seg_end in segments:
        for t in _path_steps(seg_start, seg_end):
            fq, fr, _fs = bezier_point(control_points, t)
            q = round_half_up(fq)
            r = round_half_up(fr)
            cell = cube(q, r)
            key = coord_to_key(cell)
            if key not in grid:
                continue

            landing_zone = any(
                abs(cp.q - q) + abs(cp.r - r) < 2 for cp in control_points
            )
            wide = noise_2d(t * 5, 0, seed) > WIDTH_THRESHOLD

            grid[key] = TerrainType.FAIRWAY
            processed.add(key)

            if not (landing_zone or wide):
                continue

            for n in hex_neighbors(cell):
                n_key = coord_to_key(n)
                if n_key not in grid or n_key in processed:
                    continue
                if noise_2d(n.q / 2, n.r / 2, seed) > NEIGHBOR_THRESHOLD:
                    grid[n_key] = TerrainType.FAIRWAY
                    processed.add(n_key)


def generate_green(grid: Grid, end: CubeCoord, seed: int) -> None:
    """Breadth-first flood fill of green around the hole.

    Cells adjacent to the hole are always green; the second ring is green
    only where the noise allows, which roughens the edge.
    """
    queue: deque[CubeCoord] = deque([end])
    visited: set[str] = set()

    while queue:
        current = queue.popleft()
        key = coord_to_key(current)
        if key in visited:
            continue
        visited.add(key)

        if key not in grid:
            continue

        dist = hex_distance(current, end)
        if dist > GREEN_RADIUS:
            continue

        noise = noise_2d(current.q, current.r, seed + GREEN_SEED_OFFSET)
        if dist > 1 and noise <= GREEN_THRESHOLD:
            continue

        grid[key] = TerrainType.GREEN
        if dist < GREEN_RADIUS:
            queue.extend(hex_neighbors(current))


def generate_hazards(grid: Grid, seed: int) -> int:
    """Blend 3-6 hazard features into the rough. Returns the feature count.

    Each rough cell takes the type of the feature with the strongest
    noise-scaled influence, provided it clears the threshold; features
    therefore overlap and their borders are textured rather than straight.
    """
    rough_keys = [k for k, t in grid.items() if t == TerrainType.ROUGH]
    if not rough_keys:
        return 0

    features: list[tuple[CubeCoord, TerrainType, int]] = []
    num_features = 3 + _pick_index(random_from_seed(0, 0, seed), 4)

    for i in range(num_features):
        center = key_to_coord(
            rough_keys[_pick_index(random_from_seed(i, 0, seed), len(rough_keys))]
        )
        position_noise = noise_2d(center.q / 3, center.r / 3, seed + i)
        if position_noise < 0.4:
            hazard = TerrainType.TREES
        elif position_noise < 0.7:
            hazard = TerrainType.SAND
        else:
            hazard = TerrainType.WATER
        size = 2 + _pick_index(random_from_seed(i, 1, seed), 3)
        features.append((center, hazard, size))

    for key in rough_keys:
        cell = key_to_coord(key)
        best_influence = 0.0
        best_type = TerrainType.ROUGH

        for center, hazard, size in features:
            influence = max(0.0, 1 - manhattan_distance(cell, center) / (size * 2))
            influence *= 0.7 + 0.3 * noise_2d(
                cell.q / 2 + center.q, cell.r / 2 + center.r, seed,
            )
            if influence > best_influence:
                best_influence = influence
                best_type = hazard

        if best_influence > HAZARD_THRESHOLD:
            grid[key] = best_type

    return len(features)


def generate_bonuses(grid: Grid, seed: int) -> dict[str, Bonus]:
    """Draw bonus cells without replacement from fairway and rough."""
    candidates = [
        k for k, t in grid.items()
        if t in (TerrainType.FAIRWAY, TerrainType.ROUGH)
    ]
    bonuses: dict[str, Bonus] = {}

    for type_index, (bonus_type, value, count) in enumerate(BONUS_LAYOUT):
        for i in range(count):
            if not candidates:
                return bonuses
            idx = _pick_index(
                random_from_seed(i, type_index + 10, seed), len(candidates),
            )
            key = candidates.pop(idx)
            bonuses[key] = Bonus(type=bonus_type, value=value)

    return bonuses


def _path_steps(start: float, end: float):
    """Yield path parameters from *start* to *end* inclusive in PATH_STEP strides."""
    t = start
    while t <= end:
        yield t
        t += PATH_STEP


def _pick_index(value: float, length: int) -> int:
    """Scale a [0, 1) draw to an index in range(length)."""
    return min(math.floor(value * length), length - 1)
