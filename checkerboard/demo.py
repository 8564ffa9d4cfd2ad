"""
Random self-play on a freshly prepared board.

Turn order is the caller's concern in the engine; this driver owns it here:
dark (+1) moves first, then colors alternate until a side cannot move.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from checkerboard.board import Board
from checkerboard.events import BoardEvent, EventKind
from checkerboard.rules import Rules
from checkerboard.types import Color, MoveResult

logger = logging.getLogger(__name__)


@dataclass
class GameSummary:
    moves_played: int = 0
    last_mover: Optional[Color] = None
    stalled: Optional[Color] = None  # color left without a legal move, if any
    captures: int = 0
    promotions: int = 0
    final_board: str = ""
    results: List[MoveResult] = field(default_factory=list)


def play_random_game(size: Optional[int] = None, max_moves: int = 200, seed: Optional[int] = None,
                     on_move: Optional[Callable[[Color, MoveResult], None]] = None) -> GameSummary:
    """Play random moves until a side is stuck or ``max_moves`` is reached."""
    board = Board(size)
    rules = Rules(board, rng=random.Random(seed) if seed is not None else None)
    summary = GameSummary()

    def _count_promotion(event: BoardEvent) -> None:
        summary.promotions += 1

    board.subscribe(EventKind.PROMOTE, _count_promotion)
    board.prepare_new_game()

    turn = Color.DARK
    while summary.moves_played < max_moves:
        result = rules.attempt_random_move(turn, turn.direction)
        if result is None:
            summary.stalled = turn
            logger.info("%s has no legal move after %d moves", turn.value, summary.moves_played)
            break
        summary.moves_played += 1
        summary.captures += result.captured_count
        summary.last_mover = turn
        summary.results.append(result)
        if on_move is not None:
            on_move(turn, result)
        turn = turn.opponent

    summary.final_board = board.render()
    return summary
