from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dicegolf.engine.protocol import GamePlugin

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Registers game plugins by their game_id."""

    def __init__(self) -> None:
        self._plugins: dict[str, GamePlugin] = {}

    def register(self, plugin: GamePlugin) -> None:
        game_id = plugin.game_id
        if game_id in self._plugins:
            raise ValueError(f"Game '{game_id}' already registered")
        self._plugins[game_id] = plugin

    def get(self, game_id: str) -> GamePlugin:
        if game_id not in self._plugins:
            raise KeyError(f"Unknown game: {game_id}")
        return self._plugins[game_id]

    def list_games(self) -> list[dict]:
        return [
            {
                "game_id": p.game_id,
                "display_name": p.display_name,
                "description": p.description,
            }
            for p in self._plugins.values()
        ]

    def register_builtin(self) -> None:
        """Register the games that ship with this package."""
        from dicegolf.games.dice_golf.plugin import DiceGolfPlugin

        self.register(DiceGolfPlugin())
        logger.info(f"Registered {len(self._plugins)} game plugins")


def default_registry() -> PluginRegistry:
    registry = PluginRegistry()
    registry.register_builtin()
    return registry
