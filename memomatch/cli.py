"""
Memomatch CLI - Command-line interface for the engine.

Usage:
    memomatch levels                          List difficulty levels
    memomatch deal --difficulty Hard --seed 7 Print a generated board
    memomatch serve --port 8000               Run the HTTP API
"""

import argparse
import logging
import os
import random
import sys


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Memomatch - Timed Memory-Matching Card Game Engine",
        prog="memomatch",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("MEMOMATCH_LOG_LEVEL", "INFO"),
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("levels", help="List difficulty levels")

    deal_parser = subparsers.add_parser("deal", help="Generate and print a board")
    deal_parser.add_argument("--difficulty", "-d", default="Normal", help="Difficulty name")
    deal_parser.add_argument("--seed", type=int, help="Seed for a reproducible board")
    deal_parser.add_argument("--columns", type=int, default=4, help="Cards per printed row")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "levels":
        cmd_levels(args)
    elif args.command == "deal":
        cmd_deal(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_levels(args):
    """List difficulty levels."""
    from .catalog import DIFFICULTY_LEVELS

    for level in DIFFICULTY_LEVELS:
        print(f"{level.name:<8} {level.pairs:>2} pairs  {level.time_limit_seconds:>3}s")


def cmd_deal(args):
    """Print a generated board, one row per line."""
    from .catalog import get_difficulty
    from .engine_core.board import BoardGenerator
    from .errors import ConfigurationError

    try:
        difficulty = get_difficulty(args.difficulty)
        deck = BoardGenerator(rng=random.Random(args.seed)).generate(difficulty)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"{difficulty.name}: {difficulty.pairs} pairs, {difficulty.time_limit_seconds}s")
    columns = max(1, args.columns)
    for start in range(0, len(deck), columns):
        row = deck[start:start + columns]
        print("  ".join(
            f"[{card.id:>2}] {card.name:<9}{card.suit.value[0].upper()}"
            for card in row
        ))


def cmd_serve(args):
    """Run the HTTP API under uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
