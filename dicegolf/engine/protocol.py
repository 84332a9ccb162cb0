from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from dicegolf.engine.models import (
    Action,
    Event,
    GameConfig,
    Phase,
    PlayPayload,
    Player,
    TransitionResult,
)


@runtime_checkable
class GamePlugin(Protocol):
    """A solo game played one payload at a time.

    ``game_data`` is JSON-ready data owned by the caller. The plugin reads
    it and returns the next version inside a TransitionResult; phases that
    auto-resolve are applied with a payload-less Action.
    """

    game_id: ClassVar[str]
    display_name: ClassVar[str]
    description: ClassVar[str]

    def create_initial_state(
        self, player: Player, config: GameConfig,
    ) -> tuple[dict, Phase, list[Event]]:
        ...

    def get_valid_actions(self, game_data: dict, phase: Phase) -> list[PlayPayload]:
        """Every payload that would change the round right now."""
        ...

    def validate_action(self, game_data: dict, phase: Phase, action: Action) -> str | None:
        """Why *action* would be refused, or None when it is accepted."""
        ...

    def apply_action(self, game_data: dict, phase: Phase, action: Action) -> TransitionResult:
        ...

    def get_player_view(self, game_data: dict, phase: Phase) -> dict:
        ...
