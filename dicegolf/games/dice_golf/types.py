"""Domain models for Dice Golf."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field

GRID_SIZE = 8


class CubeCoord(NamedTuple):
    """A hex cell in cube coordinates (q + r + s == 0)."""

    q: int
    r: int
    s: int


class TerrainType(str, Enum):
    EMPTY = "empty"
    FAIRWAY = "fairway"
    ROUGH = "rough"
    SAND = "sand"
    WATER = "water"
    TREES = "trees"
    TEE = "tee"
    HOLE = "hole"
    GREEN = "green"


class BonusType(str, Enum):
    MULTIPLIER_2X = "multiplier_2x"
    MULTIPLIER_3X = "multiplier_3x"
    POINTS_500 = "points_500"
    EXTRA_MULLIGAN = "extra_mulligan"


def cube(q: int, r: int) -> CubeCoord:
    """Build a cube coordinate from its axial (q, r) part."""
    return CubeCoord(q, r, -q - r)


def coord_to_key(coord: CubeCoord) -> str:
    return f"{coord.q},{coord.r},{coord.s}"


def key_to_coord(key: str) -> CubeCoord:
    q, r, s = key.split(",")
    return CubeCoord(int(q), int(r), int(s))


class Bonus(BaseModel):
    type: BonusType
    value: float
    used: bool = False


class Course(BaseModel):
    """A generated hole: terrain grid, bonus cells, tee and hole positions.

    Only ``bonuses[...].used`` changes after generation.
    """

    grid: dict[str, TerrainType]
    bonuses: dict[str, Bonus] = Field(default_factory=dict)
    start: CubeCoord
    end: CubeCoord
    seed: int

    def terrain_at(self, coord: CubeCoord) -> TerrainType | None:
        """Terrain of *coord*, or None when it lies outside the grid."""
        return self.grid.get(coord_to_key(coord))
