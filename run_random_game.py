from __future__ import annotations

import argparse

from config import setup_logging
from checkerboard.demo import play_random_game
from checkerboard.types import Color, MoveResult


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Play a game of uniformly random checkers moves")
    ap.add_argument("--size", type=int, default=None, help="Board size (defaults to configuration)")
    ap.add_argument("--max-moves", type=int, default=200, help="Stop after this many moves")
    ap.add_argument("--seed", type=int, default=None, help="Seed for reproducible games")
    ap.add_argument("--verbose", action="store_true", help="Print every move")
    return ap.parse_args()


def _print_move(color: Color, result: MoveResult) -> None:
    caps = "".join(f" x[{r.row},{r.col}]" for r in result.removed)
    king = " (king)" if result.made_king else ""
    print(f"{color.value:>5}: [{result.from_row},{result.from_col}] -> [{result.to_row},{result.to_col}]{caps}{king}")


def main() -> None:
    args = parse_args()
    setup_logging("DEBUG" if args.verbose else None)

    summary = play_random_game(
        size=args.size,
        max_moves=args.max_moves,
        seed=args.seed,
        on_move=_print_move if args.verbose else None,
    )
    print(summary.final_board)
    print(f"moves: {summary.moves_played}  captures: {summary.captures}  promotions: {summary.promotions}")
    if summary.stalled is not None:
        print(f"{summary.stalled.value} has no legal move")


if __name__ == "__main__":
    main()
