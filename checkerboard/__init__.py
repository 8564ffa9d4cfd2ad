"""Checkerboard package: board state, change notifications and move rules.

Usage examples:
    from checkerboard import Board, Rules, Piece, Color
    board = Board(8)
    board.prepare_new_game()
    rules = Rules(board)
"""
from __future__ import annotations

from .types import (
    Color,
    Piece,
    Square,
    JumpStep,
    MoveCandidate,
    MoveResult,
    RemovedPiece,
)
from .errors import (
    CheckerboardError,
    OutOfBoundsError,
    InvalidDirectionError,
    RepresentationError,
)
from .events import (
    EventKind,
    EventBus,
    BoardEvent,
    AddDetails,
    RemoveDetails,
    MoveDetails,
    PromoteDetails,
)
from .board import Board
from .rules import Rules, collapse_jump_chain

__all__ = [
    "Color",
    "Piece",
    "Square",
    "JumpStep",
    "MoveCandidate",
    "MoveResult",
    "RemovedPiece",
    "CheckerboardError",
    "OutOfBoundsError",
    "InvalidDirectionError",
    "RepresentationError",
    "EventKind",
    "EventBus",
    "BoardEvent",
    "AddDetails",
    "RemoveDetails",
    "MoveDetails",
    "PromoteDetails",
    "Board",
    "Rules",
    "collapse_jump_chain",
]
