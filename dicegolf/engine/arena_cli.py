"""CLI for running bots over a batch of courses.

Usage::

    python -m dicegolf.engine.arena_cli --strategies greedy random --games 50

    # Today's course only
    python -m dicegolf.engine.arena_cli --daily --strategies greedy

    # Smaller courses, fixed starting seed
    python -m dicegolf.engine.arena_cli --grid-size 5 --seed 1000 --games 20
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from pydantic import ValidationError

from dicegolf.config import settings
from dicegolf.engine.arena import run_arena
from dicegolf.engine.bot_strategy import get_strategy, list_strategies
from dicegolf.engine.models import CourseOptions
from dicegolf.engine.registry import default_registry
from dicegolf.games.dice_golf.seeds import daily_seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dice Golf bot arena")
    parser.add_argument("--game", default="dice_golf")
    parser.add_argument("--games", type=int, default=50)
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first course")
    parser.add_argument(
        "--daily",
        action="store_true",
        help="Play only the daily course (overrides --seed and --games)",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Date for --daily (YYYY-MM-DD, default today)",
    )
    parser.add_argument(
        "--strategies",
        nargs="+",
        default=["greedy", "random"],
        help=f"Strategies to compare ({', '.join(list_strategies())})",
    )
    parser.add_argument("--grid-size", type=int, default=None)
    parser.add_argument("--bot-seed", type=int, default=None, help="Seed for random bots")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    registry = default_registry()
    try:
        plugin = registry.get(args.game)
    except KeyError:
        print(f"Unknown game: {args.game}", file=sys.stderr)
        sys.exit(1)

    strategies = {}
    for name in args.strategies:
        try:
            strategies[name] = get_strategy(name, seed=args.bot_seed)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

    base_seed, num_games = args.seed, args.games
    if args.daily:
        base_seed, num_games = daily_seed(args.date or date.today()), 1

    try:
        options = CourseOptions(grid_size=args.grid_size)
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    print(f"Arena: {' vs '.join(strategies)}, {num_games} courses from seed {base_seed}")
    print()

    result = run_arena(
        plugin=plugin,
        strategies=strategies,
        num_games=num_games,
        base_seed=base_seed,
        options=options,
        progress_callback=lambda done, total: print(
            f"\r  Course {done}/{total}", end="", flush=True
        ),
    )
    print()
    print()
    print(result.summary())


if __name__ == "__main__":
    main()
