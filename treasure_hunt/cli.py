"""
Command-line interface for the treasure hunt core.

Usage:
    python -m treasure_hunt.cli generate             Generate a map and print it
    python -m treasure_hunt.cli generate --seed 7    Reproducible map
    python -m treasure_hunt.cli simulate --games 50  Auto-play games following hints
"""

import argparse
import logging
import random
import sys

from treasure_hunt.api.pathfinding import SearchAlgorithm
from treasure_hunt.config import ObstacleDensity, load_config, setup_logging
from treasure_hunt.game import GameSession, play_with_hints
from treasure_hunt.generation import GenerationExhausted

logger = logging.getLogger(__name__)


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate one map and dump it with everything revealed."""
    game_config = args.config.game
    if args.seed is not None:
        game_config.seed = args.seed
    if args.density:
        game_config.obstacle_density = args.density

    session = GameSession(game_config)
    try:
        session.init()
    except GenerationExhausted as e:
        print(f"Error generating map: {e}")
        return 1

    session.toggle_transparent_mode()
    for row in session.snapshot().render():
        print(row)
    print()
    print(f"Obstacles: {game_config.obstacle_count}  Treasures: {', '.join(map(str, session.treasures))}")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    """Auto-play several games and report how hint-following fares."""
    if args.games < 1:
        print("Error: --games must be at least 1")
        return 1

    game_config = args.config.game
    if args.density:
        game_config.obstacle_density = args.density
    algorithm = SearchAlgorithm.parse(args.algorithm or game_config.algorithm)

    rng = random.Random(args.seed if args.seed is not None else game_config.seed)
    session = GameSession(game_config, rng=rng)

    wins = 0
    total_score = 0
    total_found = 0
    for game in range(1, args.games + 1):
        try:
            session.init()
        except GenerationExhausted as e:
            print(f"Error generating map: {e}")
            return 1

        summary = play_with_hints(session, algorithm)
        wins += summary.won
        total_score += summary.score
        total_found += summary.treasures_found
        logger.info(
            f"Game {game}: outcome={summary.outcome.value if summary.outcome else 'unfinished'} "
            f"score={summary.score} found={summary.treasures_found}/{summary.treasure_count}"
        )

    print(f"Algorithm: {algorithm.value}  Density: {game_config.get_density().value}")
    print(f"Games: {args.games}  Wins: {wins}")
    print(f"Average score: {total_score / args.games:.1f}")
    print(f"Average treasures found: {total_found / args.games:.2f}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Treasure Hunt - grid exploration with BFS/A* hints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    densities = [d.value for d in ObstacleDensity]

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate and print a map")
    generate_parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed")
    generate_parser.add_argument("--density", "-d", choices=densities, default=None, help="Obstacle density")
    generate_parser.set_defaults(func=cmd_generate)

    # simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Auto-play games following hints")
    simulate_parser.add_argument("--games", "-n", type=int, default=10, help="Number of games")
    simulate_parser.add_argument(
        "--algorithm",
        "-a",
        choices=[a.value for a in SearchAlgorithm],
        default=None,
        help="Hint search algorithm",
    )
    simulate_parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--density", "-d", choices=densities, default=None, help="Obstacle density")
    simulate_parser.set_defaults(func=cmd_simulate)

    args = parser.parse_args()

    # Load config and set up logging
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    if args.command is None:
        parser.print_help()
        return 1

    args.config = config
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
