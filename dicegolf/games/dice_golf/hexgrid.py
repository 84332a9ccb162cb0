"""Cube-coordinate hex geometry: neighbors, distance, lines and curves."""

from __future__ import annotations

import math
from typing import Sequence

from dicegolf.games.dice_golf.types import CubeCoord

# A point in continuous cube space, used while shaping curves.
FractionalCube = tuple[float, float, float]

CUBE_DIRECTIONS: list[CubeCoord] = [
    CubeCoord(1, -1, 0),
    CubeCoord(1, 0, -1),
    CubeCoord(0, 1, -1),
    CubeCoord(-1, 1, 0),
    CubeCoord(-1, 0, 1),
    CubeCoord(0, -1, 1),
]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def hex_neighbors(coord: CubeCoord) -> list[CubeCoord]:
    """Return the 6 cube-coordinate neighbors of *coord*."""
    return [
        CubeCoord(coord.q + d.q, coord.r + d.r, coord.s + d.s)
        for d in CUBE_DIRECTIONS
    ]


def hex_distance(a: CubeCoord, b: CubeCoord) -> int:
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def manhattan_distance(a: CubeCoord, b: CubeCoord) -> int:
    """Sum of absolute component differences (twice the hex distance)."""
    return abs(a.q - b.q) + abs(a.r - b.r) + abs(a.s - b.s)


def hexes_in_line(start: CubeCoord, end: CubeCoord) -> list[CubeCoord]:
    """Return the cells on the straight line from *start* to *end*, inclusive.

    The line is sampled at ``distance + 1`` evenly spaced points. Each sample
    is rounded component-wise and the component with the largest rounding
    error is recomputed from the other two so the result stays on the grid.
    """
    n = hex_distance(start, end)
    results: list[CubeCoord] = []

    for i in range(n + 1):
        t = 0.0 if n == 0 else i / n
        fq = start.q + (end.q - start.q) * t
        fr = start.r + (end.r - start.r) * t
        fs = start.s + (end.s - start.s) * t
        q, r, s = round_half_up(fq), round_half_up(fr), round_half_up(fs)

        q_diff = abs(q - fq)
        r_diff = abs(r - fr)
        s_diff = abs(s - fs)

        if q_diff > r_diff and q_diff > s_diff:
            results.append(CubeCoord(-r - s, r, s))
        elif r_diff > s_diff:
            results.append(CubeCoord(q, -q - s, s))
        else:
            results.append(CubeCoord(q, r, -q - r))

    return results


def bezier_point(
    points: Sequence[CubeCoord | FractionalCube], t: float,
) -> FractionalCube:
    """Evaluate the Bezier curve through *points* at *t* (de Casteljau).

    Components are treated as reals; callers round the result to a cell.
    """
    current: list[FractionalCube] = [tuple(map(float, p)) for p in points]
    while len(current) > 1:
        current = [
            (
                a[0] * (1 - t) + b[0] * t,
                a[1] * (1 - t) + b[1] * t,
                a[2] * (1 - t) + b[2] * t,
            )
            for a, b in zip(current, current[1:])
        ]
    return current[0]


def hex_ring(center: CubeCoord, radius: int) -> list[CubeCoord]:
    """All cells at exactly *radius* from *center* (just *center* for 0)."""
    cells: list[CubeCoord] = []
    for dq in range(-radius, radius + 1):
        for dr in range(-radius, radius + 1):
            ds = -dq - dr
            if max(abs(dq), abs(dr), abs(ds)) == radius:
                cells.append(
                    CubeCoord(center.q + dq, center.r + dr, center.s + ds)
                )
    return cells


def in_hex_radius(coord: CubeCoord, radius: int) -> bool:
    """True when *coord* lies in the hexagon of *radius* around the origin."""
    return max(abs(coord.q), abs(coord.r), abs(coord.s)) <= radius
