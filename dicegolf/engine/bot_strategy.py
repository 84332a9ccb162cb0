"""Bot strategies by name: each picks the next PlayPayload for a round."""

from __future__ import annotations

import random as _random
from typing import Callable, Protocol

from dicegolf.engine.models import Phase, PlayPayload
from dicegolf.engine.protocol import GamePlugin


class BotStrategy(Protocol):
    def choose_action(
        self,
        game_data: dict,
        phase: Phase,
        plugin: GamePlugin,
    ) -> PlayPayload:
        """Return one of ``plugin.get_valid_actions(game_data, phase)``."""
        ...


class RandomStrategy:
    """Picks a uniformly random valid payload."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = _random.Random(seed)

    def choose_action(
        self,
        game_data: dict,
        phase: Phase,
        plugin: GamePlugin,
    ) -> PlayPayload:
        return self._rng.choice(plugin.get_valid_actions(game_data, phase))


def _greedy(seed: int | None = None) -> BotStrategy:
    from dicegolf.games.dice_golf.bot import GreedyGolfStrategy

    return GreedyGolfStrategy()


_STRATEGIES: dict[str, Callable[[int | None], BotStrategy]] = {
    "random": RandomStrategy,
    "greedy": _greedy,
}


def get_strategy(name: str, seed: int | None = None) -> BotStrategy:
    """Build the strategy called *name*; *seed* feeds strategies that draw."""
    factory = _STRATEGIES.get(name)
    if factory is None:
        raise ValueError(
            f"Unknown strategy {name!r}; choose from {', '.join(list_strategies())}"
        )
    return factory(seed)


def register_strategy(name: str, factory: Callable[[int | None], BotStrategy]) -> None:
    if name in _STRATEGIES:
        raise ValueError(f"Strategy '{name}' already registered")
    _STRATEGIES[name] = factory


def list_strategies() -> list[str]:
    return sorted(_STRATEGIES)
