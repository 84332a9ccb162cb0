from __future__ import annotations

import pytest

from dicegolf.games.dice_golf.types import (
    Bonus,
    BonusType,
    Course,
    CubeCoord,
    TerrainType,
)

F = TerrainType.FAIRWAY
R = TerrainType.ROUGH
G = TerrainType.GREEN
T = TerrainType.TREES
W = TerrainType.WATER
H = TerrainType.HOLE

# Radius-3 hex around the origin: trees two cells north-west, water two
# cells south-east, a green patch to the north-east.
RULES_GRID: dict[str, TerrainType] = {
    # Distance 0
    "0,0,0": F,
    # Distance 1
    "-1,0,1": R, "-1,1,0": R, "0,-1,1": R, "0,1,-1": R, "1,-1,0": G, "1,0,-1": R,
    # Distance 2
    "-2,0,2": R, "-2,1,1": R, "-2,2,0": R, "-1,-1,2": T, "-1,2,-1": R,
    "0,-2,2": R, "0,2,-2": R, "1,-2,1": G, "1,1,-2": W, "2,-2,0": H,
    "2,-1,-1": G, "2,0,-2": R,
    # Distance 3
    "-3,0,3": R, "-3,1,2": R, "-3,2,1": R, "-3,3,0": R, "-2,-1,3": R,
    "-2,3,-1": R, "-1,-2,3": R, "-1,3,-2": R, "0,-3,3": R, "0,3,-3": R,
    "1,-3,2": R, "1,2,-3": R, "2,-3,1": G, "2,1,-3": R, "3,-3,0": G,
    "3,-2,-1": G, "3,-1,-2": R, "3,0,-3": R,
}


def make_rules_course() -> Course:
    return Course(
        grid=dict(RULES_GRID),
        start=CubeCoord(0, 0, 0),
        end=CubeCoord(2, -1, -1),
        seed=12345,
    )


def make_scoring_course() -> Course:
    """A straight hole east along r=0 with water either side of (2, 0, -2)."""
    return Course(
        grid={
            "0,0,0": TerrainType.TEE,
            "1,0,-1": F,
            "2,0,-2": F,
            "3,0,-3": F,
            "4,0,-4": H,
            "2,-1,-1": W,
            "2,1,-3": W,
        },
        bonuses={
            "2,0,-2": Bonus(type=BonusType.MULTIPLIER_2X, value=2),
            "1,0,-1": Bonus(type=BonusType.POINTS_500, value=500),
        },
        start=CubeCoord(0, 0, 0),
        end=CubeCoord(4, 0, -4),
        seed=12345,
    )


@pytest.fixture
def rules_course() -> Course:
    return make_rules_course()


@pytest.fixture
def scoring_course() -> Course:
    return make_scoring_course()
