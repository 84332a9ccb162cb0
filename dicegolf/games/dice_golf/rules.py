"""Move legality and the turn state machine for Dice Golf.

Every action takes the current GameState and returns the next one. An
action that is not allowed in the current state returns its input
unchanged rather than raising.
"""

from __future__ import annotations

import random

from pydantic import BaseModel, Field

from dicegolf.config import settings
from dicegolf.games.dice_golf.hexgrid import hex_distance, hex_ring, hexes_in_line
from dicegolf.games.dice_golf.types import (
    Course,
    CubeCoord,
    TerrainType,
)

# Terrain that can never be a landing spot.
BLOCKED_TERRAIN = frozenset({TerrainType.WATER, TerrainType.TREES})

ROLL_MODIFIERS: dict[TerrainType, int] = {
    TerrainType.TEE: 1,
    TerrainType.SAND: -1,
}


class GameState(BaseModel):
    player_position: CubeCoord
    strokes: int = 0
    mulligans_left: int = Field(default_factory=lambda: settings.starting_mulligans)
    last_roll: int | None = None
    blocked_rolls: set[int] = Field(default_factory=set)
    valid_moves: list[CubeCoord] = Field(default_factory=list)
    game_over: bool = False
    is_putting: bool = False


def create_game_state(course: Course) -> GameState:
    return GameState(player_position=course.start)


def reset(course: Course) -> GameState:
    """Fresh state for *course*, discarding everything from the old round."""
    return create_game_state(course)


# ── Move computation ──

def is_path_blocked_by_trees(
    start: CubeCoord,
    end: CubeCoord,
    course: Course,
    from_fairway: bool,
) -> bool:
    """True if a tree stands between *start* and *end* (endpoints excluded).

    Shots played from the fairway fly over trees.
    """
    if from_fairway:
        return False
    return any(
        course.terrain_at(cell) == TerrainType.TREES
        for cell in hexes_in_line(start, end)[1:-1]
    )


def calculate_valid_moves(
    position: CubeCoord,
    distance: int,
    course: Course,
) -> list[CubeCoord]:
    """All legal landing cells for a shot of *distance* from *position*.

    Candidates are the ring at *distance*, plus the adjacent ring (a putt
    is always an option). A candidate must lie on the grid, must not
    be water or trees, and its line from *position* must not cross trees
    unless the ball sits on the fairway.
    """
    from_fairway = course.terrain_at(position) == TerrainType.FAIRWAY
    moves: list[CubeCoord] = []

    for radius in sorted({1, distance}):
        for target in hex_ring(position, radius):
            terrain = course.terrain_at(target)
            if terrain is None or terrain in BLOCKED_TERRAIN:
                continue
            if is_path_blocked_by_trees(position, target, course, from_fairway):
                continue
            moves.append(target)

    return moves


def check_game_over(
    new_position: CubeCoord,
    roll: int | None,
    prior_position: CubeCoord,
    end: CubeCoord,
) -> tuple[bool, bool]:
    """Return ``(game_over, is_overshoot_sink)`` for a move.

    Landing on the hole always ends the round. Landing next to it also
    counts when the roll was exactly one more than the distance that
    remained before the shot: the extra step carries the ball in.
    """
    dist_to_hole = hex_distance(new_position, end)
    if dist_to_hole == 0:
        return True, False

    overshoot = (
        roll is not None
        and dist_to_hole == 1
        and hex_distance(prior_position, end) == roll - 1
    )
    return overshoot, overshoot


def shot_roll(state: GameState, coord: CubeCoord) -> int | None:
    """The roll that carries the ball to *coord*, or None for a putt.

    Only a shot of the full rolled length has an extra step that can carry
    the ball in; a step onto an adjacent cell plays like a putt.
    """
    if state.is_putting or state.last_roll is None:
        return None
    if hex_distance(state.player_position, coord) != state.last_roll:
        return None
    return state.last_roll


def roll_modifier(terrain: TerrainType | None) -> int:
    return ROLL_MODIFIERS.get(terrain, 0) if terrain is not None else 0


def draw_roll(
    rng: random.Random,
    modifier: int,
    blocked_rolls: set[int],
) -> int:
    """Roll a d6, apply *modifier* (floor 1) and re-roll blocked values.

    Gives up and returns the last draw if every reachable value is
    blocked, so the loop is always finite.
    """
    reachable = {max(1, face + modifier) for face in range(1, 7)}
    while True:
        roll = max(1, rng.randint(1, 6) + modifier)
        if roll not in blocked_rolls or reachable <= blocked_rolls:
            return roll


# ── Actions ──

def roll_dice(state: GameState, course: Course, rng: random.Random) -> GameState:
    """Roll for the next shot and compute where it can land."""
    if state.game_over or state.valid_moves:
        return state

    modifier = roll_modifier(course.terrain_at(state.player_position))
    roll = draw_roll(rng, modifier, state.blocked_rolls)
    return state.model_copy(update={
        "last_roll": roll,
        "is_putting": False,
        "valid_moves": calculate_valid_moves(state.player_position, roll, course),
    })


def take_putt(state: GameState, course: Course) -> GameState:
    if state.game_over or state.valid_moves:
        return state

    return state.model_copy(update={
        "is_putting": True,
        "valid_moves": calculate_valid_moves(state.player_position, 1, course),
    })


def cancel_putt(state: GameState) -> GameState:
    if state.game_over:
        return state
    return state.model_copy(update={"is_putting": False, "valid_moves": []})


def move_to_hex(state: GameState, coord: CubeCoord, course: Course) -> GameState:
    """Play the pending shot to *coord*, which must be one of the valid moves."""
    if state.game_over or coord not in state.valid_moves:
        return state

    game_over, overshoot = check_game_over(
        coord, shot_roll(state, coord), state.player_position, course.end,
    )

    return state.model_copy(update={
        "player_position": course.end if overshoot else coord,
        "strokes": state.strokes + 1,
        "valid_moves": [],
        "last_roll": None,
        "blocked_rolls": set(),
        "is_putting": False,
        "game_over": game_over,
    })


def use_mulligan(state: GameState) -> GameState:
    """Throw away the pending roll; that value cannot come up again this shot."""
    if state.mulligans_left <= 0 or state.game_over or state.last_roll is None:
        return state

    return state.model_copy(update={
        "mulligans_left": state.mulligans_left - 1,
        "blocked_rolls": state.blocked_rolls | {state.last_roll},
        "valid_moves": [],
        "last_roll": None,
        "is_putting": False,
    })


def grant_mulligan(state: GameState, cap: int | None = None) -> GameState:
    """Award one extra mulligan, never exceeding *cap* (starting allowance)."""
    limit = settings.starting_mulligans if cap is None else cap
    if state.mulligans_left >= limit:
        return state
    return state.model_copy(update={"mulligans_left": state.mulligans_left + 1})
