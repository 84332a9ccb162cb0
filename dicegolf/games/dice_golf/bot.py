"""A simple greedy Dice Golf bot: always play the shot that ends nearest the hole."""

from __future__ import annotations

from dicegolf.engine.models import Phase, PlayPayload, ShotAction
from dicegolf.engine.protocol import GamePlugin
from dicegolf.games.dice_golf.hexgrid import hex_distance
from dicegolf.games.dice_golf.rules import GameState, check_game_over, shot_roll
from dicegolf.games.dice_golf.types import CubeCoord


class GreedyGolfStrategy:
    """Rolls when far, putts when adjacent, and takes the closest landing cell.

    A mulligan is spent when no offered cell gets the ball closer to the hole.
    """

    def choose_action(
        self,
        game_data: dict,
        phase: Phase,
        plugin: GamePlugin,
    ) -> PlayPayload:
        valid = plugin.get_valid_actions(game_data, phase)
        by_kind: dict[ShotAction, list[PlayPayload]] = {}
        for payload in valid:
            by_kind.setdefault(payload.action, []).append(payload)

        game = GameState.model_validate(game_data["game"])
        hole = CubeCoord(*game_data["course"]["end"])
        remaining = hex_distance(game.player_position, hole)

        moves = by_kind.get(ShotAction.MOVE, [])
        if moves:
            def rank(payload: PlayPayload) -> tuple[int, int]:
                target = payload.target
                sinks, _overshoot = check_game_over(
                    target, shot_roll(game, target), game.player_position, hole,
                )
                return (0 if sinks else 1, hex_distance(target, hole))

            best = min(moves, key=rank)
            misses, distance_after = rank(best)
            if misses and distance_after >= remaining and ShotAction.MULLIGAN in by_kind:
                return by_kind[ShotAction.MULLIGAN][0]
            return best

        if remaining == 1 and ShotAction.PUTT in by_kind:
            return by_kind[ShotAction.PUTT][0]
        if ShotAction.ROLL in by_kind:
            return by_kind[ShotAction.ROLL][0]
        return valid[0]
