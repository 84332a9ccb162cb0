"""Synchronous round driver: apply a payload, then let the dice land.

Shared by GameSession (one caller, validated input) and the arena (bots,
trusted input). The roll delay is collapsed to zero: an auto-resolve phase
is applied as soon as it is entered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dicegolf.config import settings
from dicegolf.engine.models import (
    Action,
    Event,
    GameConfig,
    GameResult,
    Phase,
    Player,
    TransitionResult,
)
from dicegolf.engine.protocol import GamePlugin

logger = logging.getLogger(__name__)


@dataclass
class RoundState:
    """Everything held between two actions of one round."""

    game_data: dict
    phase: Phase
    player: Player
    score: float = 0.0
    result: GameResult | None = None
    events: list[Event] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.result is not None


def start_round(plugin: GamePlugin, player: Player, config: GameConfig) -> RoundState:
    game_data, phase, events = plugin.create_initial_state(player, config)
    state = RoundState(game_data=game_data, phase=phase, player=player, events=list(events))
    resolve_auto_phases(plugin, state)
    return state


def apply_transition(state: RoundState, result: TransitionResult) -> None:
    state.game_data = result.game_data
    state.phase = result.next_phase
    state.score = result.score
    state.result = result.game_over
    state.events.extend(result.events)


def apply_action_and_resolve(
    plugin: GamePlugin,
    state: RoundState,
    action: Action,
) -> list[Event]:
    """Apply *action* and any auto-resolve phases it leads into.

    Mutates *state* in place and returns the events this produced.
    """
    before = len(state.events)
    apply_transition(state, plugin.apply_action(state.game_data, state.phase, action))
    resolve_auto_phases(plugin, state)
    return state.events[before:]


def resolve_auto_phases(plugin: GamePlugin, state: RoundState) -> None:
    """Resolve auto phases until the player must act or the round is over."""
    for _ in range(settings.max_auto_resolve):
        if state.finished or not state.phase.auto_resolve:
            return
        landing = Action(player_id=state.player.player_id)
        apply_transition(state, plugin.apply_action(state.game_data, state.phase, landing))

    if not state.finished and state.phase.auto_resolve:
        logger.warning(
            f"Phase {state.phase.name.value} still auto-resolving after "
            f"{settings.max_auto_resolve} steps"
        )
