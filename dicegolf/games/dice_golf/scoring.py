"""Shot scoring, streaks, par and the end-of-round bonus.

Scoring never touches the Course: it reports which bonus cells a shot
collected and leaves marking them used to the caller.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from dicegolf.games.dice_golf.hexgrid import hex_distance, hexes_in_line
from dicegolf.games.dice_golf.types import (
    BonusType,
    Course,
    CubeCoord,
    TerrainType,
    coord_to_key,
)

BASE_POINTS = 100
MIN_BASE_POINTS = 25
OVER_PAR_DECAY = 25
WATER_CARRY_POINTS = 250
LONG_PUTT_MIN_DISTANCE = 3
LONG_PUTT_POINTS_PER_CELL = 100
POINTS_BONUS = 500

STREAK_STEP = 0.1
MAX_STREAK_BONUS = 0.5

EXTRA_SHOTS = 6
MULLIGAN_BONUS = 200
UNDER_PAR_BONUS = 2000
PER_STROKE_UNDER_PAR = 1000
PER_STROKE_OVER_PAR = 500

BONUS_MULTIPLIERS: dict[BonusType, float] = {
    BonusType.MULTIPLIER_2X: 2,
    BonusType.MULTIPLIER_3X: 3,
}


class ShotScore(BaseModel):
    points: float = 0
    bonuses_collected: list[str] = Field(default_factory=list)
    multiplier: float = 1
    is_skill_shot: bool = False


class ScoreState(BaseModel):
    total_score: float = 0
    current_multiplier: float = 1
    shot_history: list[ShotScore] = Field(default_factory=list)
    collected_bonuses: set[str] = Field(default_factory=set)
    skill_shot_streak: int = 0
    strokes_over_par: int = 0
    par: int


def calculate_par(course: Course) -> int:
    return hex_distance(course.start, course.end) // 4 + 2


def max_shots(par: int) -> int:
    return par + EXTRA_SHOTS


def create_score_state(course: Course) -> ScoreState:
    return ScoreState(par=calculate_par(course))


def crosses_water(from_: CubeCoord, to: CubeCoord, course: Course) -> bool:
    return any(
        course.terrain_at(cell) == TerrainType.WATER
        for cell in hexes_in_line(from_, to)
    )


def calculate_shot_score(
    state: ScoreState,
    course: Course,
    from_: CubeCoord,
    to: CubeCoord,
    is_game_over: bool,
    current_strokes: int,
) -> ShotScore:
    """Score a single shot from *from_* to *to* without changing *state*.

    *current_strokes* is the number of strokes played before this one.
    """
    over_par = max(0, current_strokes - state.par)
    shot = ShotScore(
        points=max(MIN_BASE_POINTS, BASE_POINTS - OVER_PAR_DECAY * over_par),
        multiplier=state.current_multiplier,
    )

    if crosses_water(from_, to, course):
        shot.points += WATER_CARRY_POINTS
        shot.is_skill_shot = True

    if is_game_over:
        distance = hex_distance(from_, to)
        if distance >= LONG_PUTT_MIN_DISTANCE:
            shot.points += distance * LONG_PUTT_POINTS_PER_CELL
            shot.is_skill_shot = True

    key = coord_to_key(to)
    bonus = course.bonuses.get(key)
    if bonus is not None and not bonus.used and key not in state.collected_bonuses:
        if bonus.type in BONUS_MULTIPLIERS:
            shot.multiplier = BONUS_MULTIPLIERS[bonus.type]
        elif bonus.type == BonusType.POINTS_500:
            shot.points += POINTS_BONUS
        # Extra mulligans live in GameState; the caller grants them.
        shot.bonuses_collected.append(key)

    return shot


def record_shot(
    state: ScoreState,
    course: Course,
    from_: CubeCoord,
    to: CubeCoord,
    is_game_over: bool,
    current_strokes: int,
    mulligans_left: int,
) -> tuple[ScoreState, ShotScore] | None:
    """Score a shot and fold it into the running state.

    Returns ``(new_state, shot)``, or None once *current_strokes* has reached
    the shot ceiling; in that case nothing is recorded. A round-ending shot
    also adds the final mulligan and par adjustment, exactly once.
    """
    if current_strokes >= max_shots(state.par):
        return None

    shot = calculate_shot_score(
        state, course, from_, to, is_game_over, current_strokes,
    )

    streak = state.skill_shot_streak + 1 if shot.is_skill_shot else 0
    streak_bonus = min(streak * STREAK_STEP, MAX_STREAK_BONUS)
    strokes = current_strokes + 1

    new_state = state.model_copy(update={
        "total_score": state.total_score + shot.points * shot.multiplier,
        "current_multiplier": max(1, shot.multiplier + streak_bonus),
        "shot_history": [*state.shot_history, shot],
        "collected_bonuses": state.collected_bonuses | set(shot.bonuses_collected),
        "skill_shot_streak": streak,
        "strokes_over_par": max(0, strokes - state.par),
    })

    if is_game_over:
        new_state = new_state.model_copy(update={
            "total_score": calculate_final_score(new_state, strokes, mulligans_left),
        })

    return new_state, shot


def par_bonus(par: int, strokes: int) -> float:
    if strokes <= par:
        return UNDER_PAR_BONUS + (par - strokes) * PER_STROKE_UNDER_PAR
    return -PER_STROKE_OVER_PAR * (strokes - par)


def calculate_final_score(state: ScoreState, strokes: int, mulligans_left: int) -> float:
    """Total plus mulligan and par adjustments.

    Pure in *state*; callers apply the result once, when the round ends.
    """
    return (
        state.total_score
        + mulligans_left * MULLIGAN_BONUS
        + par_bonus(state.par, strokes)
    )
