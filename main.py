#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty NAME | --rows R --columns C --mines M]
    python main.py demo [--games N] [--seed S]
"""
import argparse
import logging
import random
import uuid
from typing import Optional

import numpy as np

from src.minesweeper import (
    Difficulty,
    Game,
    GameStatus,
    MinesweeperEnv,
    Position,
    create_game,
)

HELP = "commands: r ROW COL (reveal) | f ROW COL (flag) | q ROW COL (question) | p (pause) | u (resume) | s (stats) | x (quit)"


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least one."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def resolve_difficulty(args: argparse.Namespace) -> Optional[Difficulty]:
    """Build the difficulty from CLI flags, printing the reason on failure."""
    if args.rows or args.columns or args.mines is not None:
        result = Difficulty.custom(
            "Custom", args.rows or 9, args.columns or 9, args.mines or 0
        )
        if result.failed:
            print(f"Invalid board: {result.error}")
            return None
        return result.value
    difficulty = Difficulty.from_name(args.difficulty)
    if difficulty is None:
        print(f"Unknown difficulty: {args.difficulty}")
    return difficulty


def print_status(game: Game) -> None:
    stats = game.statistics()
    print(
        f"{stats.status.name} | Mines left: {stats.remaining_mines} | "
        f"Progress: {stats.progress_percentage:.0f}% | "
        f"Moves: {stats.move_count} | Time: {stats.duration.total_seconds():.0f}s"
    )


def play(args: argparse.Namespace) -> None:
    """Play an interactive game in the terminal."""
    difficulty = resolve_difficulty(args)
    if difficulty is None:
        return

    rng = random.Random(args.seed) if args.seed is not None else None
    game = create_game(
        uuid.uuid4().hex, "local", difficulty, rng=rng, protect_neighbors=args.protect
    )
    print(f"New game: {difficulty}")
    print(HELP)

    while not game.is_completed:
        print()
        print(game.board.render())
        print_status(game)
        try:
            line = input("> ").split()
        except EOFError:
            break
        if not line:
            continue

        command, params = line[0].lower(), line[1:]
        if command == "x":
            break
        if command == "p":
            result = game.pause()
        elif command == "u":
            result = game.resume()
        elif command == "s":
            print(game.statistics())
            continue
        elif command in ("r", "f", "q") and len(params) == 2:
            try:
                position = Position(int(params[0]), int(params[1]))
            except ValueError:
                print("Row and column must be non-negative integers")
                continue
            action = {"r": game.reveal, "f": game.toggle_flag, "q": game.toggle_question}
            result = action[command](position)
        else:
            print(HELP)
            continue

        if result.failed:
            print(f"Rejected: {result.error}")

    print()
    print(game.board.render())
    print_status(game)
    if game.status == GameStatus.WON:
        print("\n*** WIN! ***")
    elif game.status == GameStatus.LOST:
        print("\n*** LOST (hit mine) ***")


def demo(args: argparse.Namespace) -> None:
    """Let a random player run through several games."""
    difficulty = resolve_difficulty(args)
    if difficulty is None:
        return

    env = MinesweeperEnv(
        difficulty=difficulty, render_mode="ansi", protect_neighbors=args.protect
    )
    player = np.random.default_rng(args.seed)
    wins = 0

    for game_number in range(args.games):
        seed = args.seed + game_number if args.seed is not None else None
        env.reset(seed=seed)
        done = False
        info = {}
        while not done:
            valid_indices = np.flatnonzero(env.get_action_mask())
            action = int(player.choice(valid_indices))
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        if info.get("game_state") == "WON":
            wins += 1
        print(f"=== Game {game_number + 1}/{args.games}: {info.get('game_state')} "
              f"({info.get('progress', 0.0):.0f}% cleared) ===")
        if args.show:
            print(env.render())

    print(f"\n=== Final: {wins}/{args.games} wins ({100 * wins / args.games:.0f}%) ===")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minesweeper - terminal game and demo")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_board_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--difficulty", default="beginner",
                         help="Preset: beginner, intermediate, expert")
        sub.add_argument("--rows", type=int, default=None, help="Custom board rows")
        sub.add_argument("--columns", type=int, default=None, help="Custom board columns")
        sub.add_argument("--mines", type=int, default=None, help="Custom mine count")
        sub.add_argument("--seed", type=int, default=None, help="Random seed")
        sub.add_argument("--protect", action="store_true",
                         help="Keep the first click's neighbours mine-free")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    add_board_args(play_parser)

    demo_parser = subparsers.add_parser("demo", help="Watch a random player")
    add_board_args(demo_parser)
    demo_parser.add_argument("--games", type=positive_int, default=5, help="Number of games")
    demo_parser.add_argument("--show", action="store_true", help="Print final boards")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        play(args)
    elif args.command == "demo":
        demo(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
