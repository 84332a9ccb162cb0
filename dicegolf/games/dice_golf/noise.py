"""Seeded hash randomness and smooth value noise.

Every random draw during course generation goes through these pure
functions, keyed by two integer slots and the course seed, so the same
seed always reproduces the same course.
"""

from __future__ import annotations

import math


def random_from_seed(x: float, y: float, seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) for slot (x, y)."""
    dot = math.sin(x * 12.9898 + y * 78.233 + seed) * 43758.5453
    return dot - math.floor(dot)


def noise_2d(x: float, y: float, seed: float) -> float:
    """Bilinear value noise over the integer lattice with smoothstep easing."""
    x0 = math.floor(x)
    y0 = math.floor(y)
    xf = x - x0
    yf = y - y0

    v00 = random_from_seed(x0, y0, seed)
    v10 = random_from_seed(x0 + 1, y0, seed)
    v01 = random_from_seed(x0, y0 + 1, seed)
    v11 = random_from_seed(x0 + 1, y0 + 1, seed)

    sx = xf * xf * (3 - 2 * xf)
    sy = yf * yf * (3 - 2 * yf)

    vx0 = v00 * (1 - sx) + v10 * sx
    vx1 = v01 * (1 - sx) + v11 * sx
    return vx0 * (1 - sy) + vx1 * sy
