"""Bot arena: play every strategy over the same seeds and report results."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable

from dicegolf.config import settings
from dicegolf.engine.bot_strategy import BotStrategy
from dicegolf.engine.game_simulator import apply_action_and_resolve, start_round
from dicegolf.engine.models import (
    Action,
    CourseOptions,
    GameConfig,
    GameResult,
    Player,
    PlayerId,
)
from dicegolf.engine.protocol import GamePlugin

logger = logging.getLogger(__name__)


@dataclass
class ArenaResult:
    """Aggregated results from an arena run."""

    num_games: int
    total_scores: dict[str, list[float]]
    strokes: dict[str, list[int]]
    holed: dict[str, int]
    game_durations_ms: list[float] = field(default_factory=list)

    def avg_score(self, name: str) -> float:
        scores = self.total_scores.get(name, [])
        return sum(scores) / max(len(scores), 1)

    def score_stddev(self, name: str) -> float:
        scores = self.total_scores.get(name, [])
        if len(scores) < 2:
            return 0.0
        avg = self.avg_score(name)
        variance = sum((s - avg) ** 2 for s in scores) / (len(scores) - 1)
        return math.sqrt(variance)

    def avg_strokes(self, name: str) -> float:
        strokes = self.strokes.get(name, [])
        return sum(strokes) / max(len(strokes), 1)

    def sink_rate(self, name: str) -> float:
        return self.holed.get(name, 0) / max(self.num_games, 1)

    def confidence_interval_95(self, name: str) -> tuple[float, float]:
        """95% Wilson score confidence interval for the sink rate."""
        n = self.num_games
        if n == 0:
            return (0.0, 0.0)
        p = self.sink_rate(name)
        z = 1.96
        denom = 1 + z**2 / n
        center = (p + z**2 / (2 * n)) / denom
        margin = z * math.sqrt((p * (1 - p) + z**2 / (4 * n)) / n) / denom
        return (max(0.0, center - margin), min(1.0, center + margin))

    def best_strategy(self) -> str | None:
        if not self.total_scores:
            return None
        return max(self.total_scores, key=self.avg_score)

    def summary(self) -> str:
        lines = [f"Arena Results ({self.num_games} courses)"]
        lines.append("=" * 60)
        for name in self.total_scores:
            ci_lo, ci_hi = self.confidence_interval_95(name)
            lines.append(
                f"  {name:>12s}: score={self.avg_score(name):8.1f} "
                f"+/- {self.score_stddev(name):6.1f}  "
                f"strokes={self.avg_strokes(name):4.1f}  "
                f"holed={self.sink_rate(name):5.1%} "
                f"[95% CI: {ci_lo:.1%}-{ci_hi:.1%}]"
            )
        if self.game_durations_ms:
            avg_ms = sum(self.game_durations_ms) / len(self.game_durations_ms)
            total_s = sum(self.game_durations_ms) / 1000
            lines.append(f"  Avg round: {avg_ms:.0f}ms  |  Total: {total_s:.1f}s")
        return "\n".join(lines)


def run_arena(
    plugin: GamePlugin,
    strategies: dict[str, BotStrategy],
    num_games: int = 100,
    base_seed: int = 0,
    options: CourseOptions | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> ArenaResult:
    """Play *num_games* courses with each strategy and return aggregated stats.

    Parameters
    ----------
    plugin:
        The game plugin to use.
    strategies:
        Mapping of ``strategy_name -> BotStrategy``. Every strategy plays
        every course.
    num_games:
        How many courses to play.
    base_seed:
        Course *i* uses ``random_seed = base_seed + i``.
    options:
        Course options shared by every round, e.g. a smaller grid.
    progress_callback:
        Called with ``(courses_completed, total_courses)`` after each course.
    """
    names = list(strategies.keys())
    result = ArenaResult(
        num_games=num_games,
        total_scores={n: [] for n in names},
        strokes={n: [] for n in names},
        holed={n: 0 for n in names},
    )

    for game_idx in range(num_games):
        seed = base_seed + game_idx
        config = GameConfig(random_seed=seed, options=options or CourseOptions())

        for name in names:
            player = Player(
                player_id=PlayerId("p0"),
                display_name=name,
                is_bot=True,
                bot_id=name,
            )

            t0 = time.monotonic()
            game_result = play_one_game(plugin, player, config, strategies[name])
            result.game_durations_ms.append((time.monotonic() - t0) * 1000)

            if game_result is None:
                logger.warning(f"{name} did not finish course {seed}")
                result.total_scores[name].append(0.0)
                continue

            result.total_scores[name].append(game_result.final_score)
            result.strokes[name].append(game_result.strokes)
            if game_result.holed:
                result.holed[name] += 1

        if progress_callback:
            progress_callback(game_idx + 1, num_games)

    return result


def play_one_game(
    plugin: GamePlugin,
    player: Player,
    config: GameConfig,
    strategy: BotStrategy,
) -> GameResult | None:
    """Play a single round synchronously. None if it never finished."""
    state = start_round(plugin, player, config)

    for _ in range(settings.max_actions_per_round):
        if state.finished:
            break
        payload = strategy.choose_action(state.game_data, state.phase, plugin)
        apply_action_and_resolve(
            plugin, state, Action(player_id=player.player_id, payload=payload),
        )

    return state.result
