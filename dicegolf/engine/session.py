from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from dicegolf.engine.errors import (
    InvalidActionError,
    NotYourTurnError,
    PluginError,
    RoundOverError,
)
from dicegolf.engine.game_simulator import (
    RoundState,
    apply_action_and_resolve,
    start_round,
)
from dicegolf.engine.models import (
    Action,
    Event,
    GameConfig,
    GameResult,
    GameStatus,
    PlayPayload,
    Player,
)

if TYPE_CHECKING:
    from dicegolf.engine.protocol import GamePlugin

logger = logging.getLogger(__name__)


class GameSession:
    """Runs one round for a caller.

    The rules core quietly ignores input that makes no sense; the session
    rejects it with an error instead, so a front end can say why.
    """

    def __init__(
        self,
        plugin: GamePlugin,
        player: Player,
        config: GameConfig | None = None,
    ) -> None:
        self.plugin = plugin
        self.config = config or GameConfig()
        self.state: RoundState = start_round(plugin, player, self.config)

    @property
    def status(self) -> GameStatus:
        return GameStatus.FINISHED if self.state.finished else GameStatus.ACTIVE

    @property
    def result(self) -> GameResult | None:
        return self.state.result

    @property
    def events(self) -> list[Event]:
        return self.state.events

    def handle_action(self, action: Action) -> list[Event]:
        """Validate *action*, apply it and let any roll land.

        Returns the events produced by this action.
        """
        if self.state.finished:
            raise RoundOverError(f"Round finished ({self.state.result.reason.value})")
        if action.player_id != self.state.player.player_id:
            raise NotYourTurnError(
                f"Expected {self.state.player.player_id}, got {action.player_id}"
            )

        reason = self.plugin.validate_action(self.state.game_data, self.state.phase, action)
        if reason:
            logger.warning(f"Rejected {action.payload} from {action.player_id}: {reason}")
            raise InvalidActionError(reason, action.payload)

        try:
            events = apply_action_and_resolve(self.plugin, self.state, action)
        except ValueError as e:
            raise PluginError(f"{self.plugin.game_id} failed to apply action", e) from e

        if self.state.finished:
            result = self.state.result
            logger.info(
                f"{self.plugin.game_id} finished ({result.reason.value}): "
                f"{result.final_score} in {result.strokes} strokes"
            )
        return events

    def play(self, payload: PlayPayload | dict) -> list[Event]:
        """Submit *payload* for the round's player. Dicts are parsed first."""
        if not isinstance(payload, PlayPayload):
            try:
                payload = PlayPayload.model_validate(payload)
            except ValidationError as e:
                reason = "; ".join(err["msg"] for err in e.errors())
                raise InvalidActionError(reason, payload) from e
        return self.handle_action(
            Action(player_id=self.state.player.player_id, payload=payload)
        )

    def valid_actions(self) -> list[PlayPayload]:
        return self.plugin.get_valid_actions(self.state.game_data, self.state.phase)

    def view(self) -> dict:
        return self.plugin.get_player_view(self.state.game_data, self.state.phase)
