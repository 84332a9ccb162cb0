"""Tests for shot scoring, streaks and the final score."""

from __future__ import annotations

import pytest

from dicegolf.games.dice_golf.scoring import (
    ScoreState,
    calculate_final_score,
    calculate_par,
    calculate_shot_score,
    create_score_state,
    crosses_water,
    max_shots,
    par_bonus,
    record_shot,
)
from dicegolf.games.dice_golf.types import Bonus, BonusType, Course, CubeCoord

ORIGIN = CubeCoord(0, 0, 0)
OVER_WATER = (CubeCoord(1, -1, 0), CubeCoord(3, 1, -4))


def _record(state: ScoreState, course: Course, from_, to, game_over=False, strokes=1, mulligans=0):
    recorded = record_shot(state, course, from_, to, game_over, strokes, mulligans)
    assert recorded is not None
    return recorded


class TestPar:
    def test_par_and_ceiling(self, scoring_course: Course) -> None:
        assert calculate_par(scoring_course) == 3
        assert max_shots(3) == 9

    def test_par_is_pure(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        before = state.model_copy(deep=True)
        assert calculate_par(scoring_course) == calculate_par(scoring_course)
        assert state == before

    def test_long_hole(self, scoring_course: Course) -> None:
        course = scoring_course.model_copy(update={"end": CubeCoord(0, -8, 8)})
        assert calculate_par(course) == 4


class TestShotScore:
    def test_base_case(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        new_state, shot = _record(state, scoring_course, ORIGIN, CubeCoord(1, -1, 0))
        assert shot.points == 100
        assert shot.multiplier == 1
        assert not shot.is_skill_shot
        assert new_state.total_score == 100
        assert new_state.shot_history == [shot]

    def test_water_carry(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        new_state, shot = _record(state, scoring_course, *OVER_WATER)
        assert shot.points == 350
        assert shot.is_skill_shot
        assert new_state.skill_shot_streak == 1

    def test_crosses_water_includes_endpoints(self, scoring_course: Course) -> None:
        assert crosses_water(CubeCoord(1, -1, 0), CubeCoord(2, -1, -1), scoring_course)
        assert not crosses_water(ORIGIN, CubeCoord(3, 0, -3), scoring_course)

    def test_long_putt_into_hole(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        new_state, shot = _record(
            state, scoring_course, CubeCoord(1, 0, -1), CubeCoord(4, 0, -4),
            game_over=True, strokes=1, mulligans=2,
        )
        assert shot.points == 400
        assert shot.is_skill_shot
        # 400 shot + 2 mulligans * 200 + 2 strokes on par 3 (2000 + 1000)
        assert new_state.total_score == 3800

    def test_short_sink_is_not_skill(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        shot = calculate_shot_score(
            state, scoring_course, CubeCoord(3, 0, -3), CubeCoord(4, 0, -4), True, 2,
        )
        assert shot.points == 100
        assert not shot.is_skill_shot

    @pytest.mark.parametrize("strokes,points", [(3, 100), (4, 75), (5, 50), (8, 25)])
    def test_base_decays_past_par(self, scoring_course: Course, strokes: int, points: int) -> None:
        state = create_score_state(scoring_course)
        _, shot = _record(state, scoring_course, ORIGIN, CubeCoord(0, 1, -1), strokes=strokes)
        assert shot.points == points


class TestBonuses:
    def test_points_bonus(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        new_state, shot = _record(state, scoring_course, ORIGIN, CubeCoord(1, 0, -1))
        assert shot.points == 600
        assert shot.bonuses_collected == ["1,0,-1"]
        assert new_state.collected_bonuses == {"1,0,-1"}

    def test_collected_once(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        state, _ = _record(state, scoring_course, ORIGIN, CubeCoord(1, 0, -1))
        _, again = _record(state, scoring_course, ORIGIN, CubeCoord(1, 0, -1), strokes=2)
        assert again.points == 100
        assert again.bonuses_collected == []

    def test_used_bonus_ignored(self, scoring_course: Course) -> None:
        scoring_course.bonuses["1,0,-1"].used = True
        state = create_score_state(scoring_course)
        _, shot = _record(state, scoring_course, ORIGIN, CubeCoord(1, 0, -1))
        assert shot.points == 100

    def test_scoring_does_not_touch_course(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        _record(state, scoring_course, ORIGIN, CubeCoord(1, 0, -1))
        assert not scoring_course.bonuses["1,0,-1"].used

    def test_multiplier_persists(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        state, shot = _record(state, scoring_course, CubeCoord(1, 0, -1), CubeCoord(2, 0, -2))
        assert shot.multiplier == 2
        assert state.current_multiplier == 2
        assert state.total_score == 200

        state, shot = _record(
            state, scoring_course, CubeCoord(2, 0, -2), CubeCoord(3, 0, -3), strokes=2,
        )
        assert shot.multiplier >= 2
        assert state.current_multiplier >= 2
        assert state.total_score == 400

    def test_three_x_overrides(self, scoring_course: Course) -> None:
        scoring_course.bonuses["3,0,-3"] = Bonus(type=BonusType.MULTIPLIER_3X, value=3)
        state = create_score_state(scoring_course).model_copy(update={"current_multiplier": 2})
        state, shot = _record(state, scoring_course, CubeCoord(2, 0, -2), CubeCoord(3, 0, -3))
        assert shot.multiplier == 3
        assert state.total_score == 300

    def test_extra_mulligan_left_to_caller(self, scoring_course: Course) -> None:
        scoring_course.bonuses["3,0,-3"] = Bonus(type=BonusType.EXTRA_MULLIGAN, value=1)
        state = create_score_state(scoring_course)
        _, shot = _record(state, scoring_course, CubeCoord(2, 0, -2), CubeCoord(3, 0, -3))
        assert shot.points == 100
        assert shot.multiplier == 1
        assert shot.bonuses_collected == ["3,0,-3"]


class TestStreak:
    def test_consecutive_skill_shots(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        state, _ = _record(state, scoring_course, *OVER_WATER)
        assert state.current_multiplier == pytest.approx(1.1)

        state, shot = _record(state, scoring_course, *OVER_WATER, strokes=2)
        assert shot.multiplier == pytest.approx(1.1)
        assert state.skill_shot_streak == 2
        assert state.current_multiplier == pytest.approx(1.3)
        assert state.total_score == pytest.approx(735)

    def test_plain_shot_breaks_streak(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        state, _ = _record(state, scoring_course, *OVER_WATER)
        state, _ = _record(state, scoring_course, ORIGIN, CubeCoord(0, 1, -1), strokes=2)
        assert state.skill_shot_streak == 0
        assert state.current_multiplier >= 1

    def test_streak_bonus_caps(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course).model_copy(
            update={"skill_shot_streak": 9}
        )
        state, _ = _record(state, scoring_course, *OVER_WATER)
        assert state.current_multiplier == pytest.approx(1.5)


class TestShotLimit:
    def test_none_at_ceiling(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        assert record_shot(state, scoring_course, ORIGIN, CubeCoord(1, -1, 0), False, 9, 0) is None
        assert record_shot(state, scoring_course, ORIGIN, CubeCoord(1, -1, 0), False, 12, 0) is None

    def test_last_shot_allowed(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        assert record_shot(state, scoring_course, ORIGIN, CubeCoord(1, -1, 0), False, 8, 0) is not None

    def test_strokes_over_par(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        state, _ = _record(state, scoring_course, ORIGIN, CubeCoord(1, -1, 0), strokes=5)
        assert state.strokes_over_par == 3


class TestFinalScore:
    def test_under_par(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        assert calculate_final_score(state, 3, 4) == 2800
        assert calculate_final_score(state, 1, 0) == 4000

    def test_over_par(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course)
        assert calculate_final_score(state, 5, 4) == -200

    def test_does_not_mutate(self, scoring_course: Course) -> None:
        state = create_score_state(scoring_course).model_copy(update={"total_score": 500})
        calculate_final_score(state, 3, 0)
        assert state.total_score == 500

    def test_par_bonus(self) -> None:
        assert par_bonus(4, 4) == 2000
        assert par_bonus(4, 2) == 4000
        assert par_bonus(4, 7) == -1500
