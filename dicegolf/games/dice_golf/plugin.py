"""DiceGolfPlugin implements the GamePlugin protocol for Dice Golf.

The plugin is the layer that sequences the rules engine and the scoring
engine on every action: it records the shot, moves the ball, consumes
collected bonus cells and grants extra mulligans. Course, GameState and
ScoreState are kept in ``game_data`` as JSON-ready dicts.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import ClassVar

from dicegolf.config import settings
from dicegolf.engine.models import (
    Action,
    EndReason,
    Event,
    GameConfig,
    GameResult,
    Phase,
    PhaseName,
    PlayPayload,
    Player,
    PlayerId,
    ShotAction,
    TransitionResult,
)
from dicegolf.games.dice_golf.generator import generate_course
from dicegolf.games.dice_golf.rules import (
    GameState,
    cancel_putt,
    create_game_state,
    grant_mulligan,
    move_to_hex,
    roll_dice,
    take_putt,
    use_mulligan,
)
from dicegolf.games.dice_golf.scoring import (
    ScoreState,
    calculate_final_score,
    create_score_state,
    max_shots,
    record_shot,
)
from dicegolf.games.dice_golf.seeds import daily_seed, random_seed
from dicegolf.games.dice_golf.types import BonusType, Course, CubeCoord

logger = logging.getLogger(__name__)


class DiceGolfPlugin:
    """Dice Golf: a solo round on a procedurally generated hex hole."""

    game_id: ClassVar[str] = "dice_golf"
    display_name: ClassVar[str] = "Dice Golf"
    description: ClassVar[str] = (
        "Roll a die, pick a landing cell, and sink the ball in as few "
        "strokes as possible on a seeded hexagonal course."
    )

    # ── Lifecycle ──

    def create_initial_state(
        self,
        player: Player,
        config: GameConfig,
    ) -> tuple[dict, Phase, list[Event]]:
        seed = _resolve_seed(config)
        course = generate_course(seed, config.options.grid_size)
        game = create_game_state(course)
        score = create_score_state(course)

        dice_seed = config.random_seed if config.random_seed is not None else seed
        rng = random.Random(dice_seed)

        game_data: dict = {
            "player_id": player.player_id,
            "seed": seed,
            "course": course.model_dump(mode="json"),
            "game": game.model_dump(mode="json"),
            "score": score.model_dump(mode="json"),
            "final_score": None,
            "rng_state": _serialize_rng_state(rng.getstate()),
        }

        events = [
            Event(event_type="game_started", player_id=player.player_id, payload={
                "seed": seed,
                "par": score.par,
                "max_shots": max_shots(score.par),
            }),
        ]

        return game_data, _play_phase(player.player_id), events

    # ── Core game loop ──

    def get_valid_actions(self, game_data: dict, phase: Phase) -> list[PlayPayload]:
        if phase.name != PhaseName.PLAY:
            return []

        game = GameState.model_validate(game_data["game"])
        if game.game_over:
            return []

        actions: list[PlayPayload] = []
        if game.valid_moves:
            actions.extend(PlayPayload.move(c) for c in game.valid_moves)
            if game.is_putting:
                actions.append(PlayPayload(action=ShotAction.CANCEL_PUTT))
        else:
            actions.append(PlayPayload(action=ShotAction.ROLL))
            actions.append(PlayPayload(action=ShotAction.PUTT))

        if game.last_roll is not None and game.mulligans_left > 0:
            actions.append(PlayPayload(action=ShotAction.MULLIGAN))

        return actions

    def validate_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> str | None:
        if phase.name == PhaseName.ROLL_DICE:
            return "Dice are still rolling"
        if phase.name != PhaseName.PLAY:
            return "The round is over"
        if action.payload is None:
            return "Missing payload"

        game = GameState.model_validate(game_data["game"])
        if game.game_over:
            return "The round is over"

        kind = action.payload.action
        if kind in (ShotAction.ROLL, ShotAction.PUTT) and game.valid_moves:
            return "A shot is already pending"
        if kind == ShotAction.CANCEL_PUTT and not game.is_putting:
            return "Not putting"
        if kind == ShotAction.MULLIGAN:
            if game.mulligans_left <= 0:
                return "No mulligans left"
            if game.last_roll is None:
                return "Nothing to take back"
        if kind == ShotAction.MOVE:
            target = action.payload.target
            if target not in game.valid_moves:
                return f"Cell {target.q},{target.r},{target.s} is not a valid move"
        return None

    def apply_action(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> TransitionResult:
        if phase.name == PhaseName.PLAY:
            if action.payload is None:
                raise ValueError("A play action needs a payload")
            return self._apply_play(game_data, phase, action)

        if phase.name == PhaseName.ROLL_DICE:
            return self._apply_roll_dice(game_data, action)

        raise ValueError(f"Unknown phase: {phase.name}")

    # ── View filtering ──

    def get_player_view(self, game_data: dict, phase: Phase) -> dict:
        # No hidden info, return everything
        par = game_data["score"]["par"]
        return {
            "seed": game_data["seed"],
            "course": game_data["course"],
            "game": game_data["game"],
            "score": game_data["score"],
            "par": par,
            "max_shots": max_shots(par),
            "rolling": phase.name == PhaseName.ROLL_DICE,
            "final_score": game_data["final_score"],
        }

    # ── Private handlers ──

    def _apply_play(
        self,
        game_data: dict,
        phase: Phase,
        action: Action,
    ) -> TransitionResult:
        course, game, score = _load_round(game_data)
        kind = action.payload.action
        player_id = action.player_id
        events: list[Event] = []

        if kind == ShotAction.ROLL:
            if game.game_over or game.valid_moves:
                return _transition(game_data, events, phase)
            return _transition(
                game_data,
                [Event(event_type="roll_started", player_id=player_id)],
                Phase(name=PhaseName.ROLL_DICE, player_id=player_id),
            )

        if kind == ShotAction.MOVE:
            target = action.payload.target
            if not game.game_over and target in game.valid_moves:
                return self._apply_move(game_data, course, game, score, target)
            return _transition(game_data, events, phase)

        if kind == ShotAction.PUTT:
            new_game = take_putt(game, course)
        elif kind == ShotAction.CANCEL_PUTT:
            new_game = cancel_putt(game)
        else:
            new_game = use_mulligan(game)

        if new_game is not game:
            events.append(Event(event_type=_EVENT_NAMES[kind], player_id=player_id, payload={
                "valid_moves": [list(c) for c in new_game.valid_moves],
                "mulligans_left": new_game.mulligans_left,
            }))
            game_data["game"] = new_game.model_dump(mode="json")

        return _transition(game_data, events, phase)

    def _apply_roll_dice(self, game_data: dict, action: Action) -> TransitionResult:
        course, game, _score = _load_round(game_data)
        rng = _restore_rng(game_data["rng_state"])

        new_game = roll_dice(game, course, rng)
        game_data["rng_state"] = _serialize_rng_state(rng.getstate())
        game_data["game"] = new_game.model_dump(mode="json")

        events = [
            Event(event_type="dice_rolled", player_id=action.player_id, payload={
                "roll": new_game.last_roll,
                "valid_moves": [list(c) for c in new_game.valid_moves],
            }),
        ]
        return _transition(game_data, events, _play_phase(action.player_id))

    def _apply_move(
        self,
        game_data: dict,
        course: Course,
        game: GameState,
        score: ScoreState,
        coord: CubeCoord,
    ) -> TransitionResult:
        player_id = game_data["player_id"]
        prior = game.player_position
        moved = move_to_hex(game, coord, course)

        recorded = record_shot(
            score, course, prior, coord, moved.game_over,
            game.strokes, moved.mulligans_left,
        )
        if recorded is None:
            # Out of shots: the ball stays where it is.
            final = calculate_final_score(score, game.strokes, game.mulligans_left)
            game_data["game"] = game.model_copy(update={"game_over": True}).model_dump(mode="json")
            return self._end_round(game_data, [], final, EndReason.OUT_OF_SHOTS)

        new_score, shot = recorded
        events = [
            Event(event_type="shot_played", player_id=player_id, payload={
                "from": list(prior),
                "to": list(coord),
                "landed": list(moved.player_position),
                "points": shot.points,
                "multiplier": shot.multiplier,
                "skill_shot": shot.is_skill_shot,
            }),
        ]

        for key in shot.bonuses_collected:
            bonus = course.bonuses[key]
            bonus.used = True
            events.append(Event(event_type="bonus_collected", player_id=player_id,
                                payload={"cell": key, "type": bonus.type.value}))
            if bonus.type == BonusType.EXTRA_MULLIGAN:
                granted = grant_mulligan(moved, settings.starting_mulligans)
                if granted is not moved:
                    events.append(Event(event_type="mulligan_granted", player_id=player_id,
                                        payload={"mulligans_left": granted.mulligans_left}))
                moved = granted

        game_data["course"] = course.model_dump(mode="json")
        game_data["score"] = new_score.model_dump(mode="json")

        if moved.game_over:
            game_data["game"] = moved.model_dump(mode="json")
            return self._end_round(game_data, events, new_score.total_score, EndReason.HOLED)

        if moved.strokes >= max_shots(new_score.par):
            moved = moved.model_copy(update={"game_over": True})
            game_data["game"] = moved.model_dump(mode="json")
            final = calculate_final_score(new_score, moved.strokes, moved.mulligans_left)
            return self._end_round(game_data, events, final, EndReason.OUT_OF_SHOTS)

        game_data["game"] = moved.model_dump(mode="json")
        return _transition(game_data, events, _play_phase(player_id))

    def _end_round(
        self,
        game_data: dict,
        events: list[Event],
        final_score: float,
        reason: EndReason,
    ) -> TransitionResult:
        game_data["score"]["total_score"] = final_score
        game_data["final_score"] = final_score
        result = GameResult(
            player_id=game_data["player_id"],
            reason=reason,
            final_score=final_score,
            strokes=game_data["game"]["strokes"],
            par=game_data["score"]["par"],
            mulligans_left=game_data["game"]["mulligans_left"],
            seed=game_data["seed"],
        )

        events.append(Event(
            event_type="game_ended",
            player_id=result.player_id,
            payload=result.model_dump(mode="json"),
        ))
        logger.info(
            "Round on seed %s ended (%s): strokes=%d par=%d score=%.1f",
            result.seed, reason.value, result.strokes, result.par, final_score,
        )

        return TransitionResult(
            game_data=game_data,
            events=events,
            next_phase=Phase(name=PhaseName.GAME_OVER),
            score=final_score,
            game_over=result,
        )


_EVENT_NAMES = {
    ShotAction.PUTT: "putt_started",
    ShotAction.CANCEL_PUTT: "putt_cancelled",
    ShotAction.MULLIGAN: "mulligan_used",
}


def _play_phase(player_id: PlayerId) -> Phase:
    return Phase(name=PhaseName.PLAY, player_id=player_id)


def _transition(game_data: dict, events: list[Event], next_phase: Phase) -> TransitionResult:
    return TransitionResult(
        game_data=game_data,
        events=events,
        next_phase=next_phase,
        score=game_data["score"]["total_score"],
    )


def _load_round(game_data: dict) -> tuple[Course, GameState, ScoreState]:
    return (
        Course.model_validate(game_data["course"]),
        GameState.model_validate(game_data["game"]),
        ScoreState.model_validate(game_data["score"]),
    )


def _resolve_seed(config: GameConfig) -> int:
    """Explicit seed option, then the daily seed, then the config seed."""
    options = config.options
    if options.seed is not None:
        return options.seed
    if options.daily:
        return daily_seed(options.day or date.today())
    if config.random_seed is not None:
        return config.random_seed
    return random_seed()


def _serialize_rng_state(state: tuple) -> list:
    """Convert random.Random.getstate() to a JSON-serializable list."""
    version, internalstate, gauss_next = state
    return [version, list(internalstate), gauss_next]


def _restore_rng(serialized: list) -> random.Random:
    """Restore a random.Random from serialized state."""
    version, internalstate, gauss_next = serialized
    rng = random.Random()
    rng.setstate((version, tuple(internalstate), gauss_next))
    return rng
