"""
The rules of checkers, layered on a Board.

This variant does not force a player to capture when a capture is available:
``legal_moves_for`` returns simple steps and capture chains together, and a
capture chain may stop after any jump.

Directions, not colors, identify players here: +1 advances toward the last row
and -1 toward row 0. A move is rejected when the piece's direction is not the
direction whose turn it is. Kings may step and jump both ways.
"""
from __future__ import annotations

import logging
import random
from typing import Any, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from config import get_rules_settings
from checkerboard.board import Board
from checkerboard.errors import InvalidDirectionError
from checkerboard.types import (
    Color,
    Direction,
    JumpStep,
    MoveCandidate,
    MoveResult,
    Piece,
    RemovedPiece,
    Square,
    is_valid_direction,
)

logger = logging.getLogger(__name__)

JumpChain = List[JumpStep]

_STEP_COLS = (-1, 1)
_JUMP_OFFSETS: Tuple[Tuple[int, int], ...] = ((2, 2), (2, -2), (-2, 2), (-2, -2))


def _require_direction(direction: Any) -> Direction:
    if not is_valid_direction(direction):
        raise InvalidDirectionError(direction)
    return direction


def collapse_jump_chain(chain: Sequence[JumpStep]) -> MoveCandidate:
    """Turn a jump chain into a candidate ending on its last landing square."""
    last = chain[-1]
    return MoveCandidate(
        to_row=last.row,
        to_col=last.col,
        captures=tuple(step.captured for step in chain),
    )


def _default_rng() -> Any:
    seed = get_rules_settings().random_seed
    return random.Random(seed) if seed is not None else random


class Rules:
    """Legal-move enumeration and move application for one Board."""

    def __init__(self, board: Board, rng: Optional[Any] = None) -> None:
        self.board = board
        self.rng = rng if rng is not None else _default_rng()

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------
    def legal_moves_for(self, piece: Piece, piece_direction: Direction) -> List[MoveCandidate]:
        """
        All moves available to ``piece``: forward steps, backward steps for
        kings, then every capture chain (including chains that stop early).
        A piece that is not on this board has no moves.
        """
        _require_direction(piece_direction)
        if not self.board.contains(piece):
            return []

        moves: List[MoveCandidate] = []
        row, col = self.board.location_of(piece)

        for dc in _STEP_COLS:
            to_row, to_col = row + piece_direction, col + dc
            if self.board.is_valid_location(to_row, to_col) and self.board.is_empty(to_row, to_col):
                moves.append(MoveCandidate(to_row, to_col))

        if piece.is_king:
            for dc in _STEP_COLS:
                to_row, to_col = row - piece_direction, col + dc
                if self.board.is_valid_location(to_row, to_col) and self.board.is_empty(to_row, to_col):
                    moves.append(MoveCandidate(to_row, to_col))

        for chain in self.jump_sequences(piece, piece_direction):
            moves.append(collapse_jump_chain(chain))
        return moves

    def is_valid_jump(self, piece: Piece, from_row: int, from_col: int,
                      to_row: int, to_col: int, piece_direction: Direction) -> bool:
        """Check a single two-square diagonal jump over an opposing piece."""
        if not self.board.is_valid_location(to_row, to_col):
            return False
        if not self.board.is_empty(to_row, to_col):
            return False
        # Men must not jump backward
        if (to_row - from_row) * piece_direction < 0 and not piece.is_king:
            return False
        if abs(to_row - from_row) != 2 or abs(to_col - from_col) != 2:
            return False
        jumped = self.board.piece_at((to_row + from_row) // 2, (to_col + from_col) // 2)
        if jumped is None:
            return False
        return jumped.color is not piece.color

    def jump_sequences(self, piece: Piece, piece_direction: Direction,
                       already_captured: Iterable[Tuple[int, int]] = (),
                       from_row: Optional[int] = None,
                       from_col: Optional[int] = None) -> List[JumpChain]:
        """
        Every capture chain for ``piece`` starting at (from_row, from_col),
        which defaults to the piece's own square.

        Each valid landing yields its continuation chains first, then the chain
        that stops on the landing itself. ``already_captured`` holds the squares
        captured earlier in the chain; they cannot be jumped again.
        """
        _require_direction(piece_direction)
        if from_row is None or from_col is None:
            if not piece.is_placed:
                return []
            from_row, from_col = self.board.location_of(piece)
        captured: FrozenSet[Tuple[int, int]] = frozenset(Square(*sq) for sq in already_captured)

        chains: List[JumpChain] = []
        for dr, dc in _JUMP_OFFSETS:
            to_row, to_col = from_row + dr, from_col + dc
            if not self.is_valid_jump(piece, from_row, from_col, to_row, to_col, piece_direction):
                continue
            step = JumpStep(
                captured_row=(from_row + to_row) // 2,
                captured_col=(from_col + to_col) // 2,
                row=to_row,
                col=to_col,
            )
            if step.captured in captured:
                continue
            for tail in self.jump_sequences(piece, piece_direction, captured | {step.captured}, to_row, to_col):
                chains.append([step] + tail)
            chains.append([step])
        return chains

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------
    def find_move(self, piece: Piece, piece_direction: Direction, to_row: int, to_col: int,
                  captures: Optional[Sequence[Tuple[int, int]]] = None) -> Optional[MoveCandidate]:
        """The first legal candidate ending on (to_row, to_col), or None."""
        wanted = tuple(Square(*sq) for sq in captures) if captures is not None else None
        for move in self.legal_moves_for(piece, piece_direction):
            if move.destination != (to_row, to_col):
                continue
            if wanted is None or move.captures == wanted:
                return move
        return None

    def attempt_move(self, piece: Piece, turn_direction: Direction, piece_direction: Direction,
                     to_row: int, to_col: int,
                     captures: Optional[Sequence[Tuple[int, int]]] = None) -> Optional[MoveResult]:
        """
        Attempt to move ``piece`` to (to_row, to_col).

        Returns None, leaving the board untouched, when it is not this piece's
        turn or the destination is not a legal move. Otherwise moves the piece,
        removes the captured pieces in chain order and reports what happened.
        ``captures`` selects a specific chain when several end on the same square.
        """
        _require_direction(turn_direction)
        _require_direction(piece_direction)
        if piece_direction != turn_direction:
            logger.debug("move rejected: direction %d does not have the turn", piece_direction)
            return None

        move = self.find_move(piece, piece_direction, to_row, to_col, captures)
        if move is None:
            logger.debug("move rejected: %s cannot reach [%d,%d]", piece, to_row, to_col)
            return None

        # Captured pieces are gone after the move, so record them first
        doomed: List[Tuple[Piece, RemovedPiece]] = []
        for sq in move.captures:
            victim = self.board.piece_at(sq.row, sq.col)
            if victim is not None:
                doomed.append((victim, RemovedPiece(row=sq.row, col=sq.col,
                                                    color=victim.color, is_king=victim.is_king)))

        from_row, from_col = self.board.location_of(piece)
        was_king = piece.is_king
        if not self.board.move_to(piece, to_row, to_col):
            return None

        for victim, _ in doomed:
            self.board.remove(victim)

        result = MoveResult(
            from_row=from_row,
            from_col=from_col,
            to_row=to_row,
            to_col=to_col,
            made_king=(not was_king) and piece.is_king,
            removed=tuple(info for _, info in doomed),
        )
        logger.debug("applied move %s: [%d,%d] -> [%d,%d], captured %d%s", piece,
                     result.from_row, result.from_col, to_row, to_col,
                     result.captured_count, ", crowned" if result.made_king else "")
        return result

    def attempt_random_move(self, color: Union[Color, str], direction: Direction) -> Optional[MoveResult]:
        """
        Make a uniformly random legal move for ``color``.

        Pieces are tried in shuffled order; the first one with any legal move
        plays one of them at random. Returns None when no piece can move.
        """
        _require_direction(direction)
        pieces = self.board.pieces_of(color)
        self.rng.shuffle(pieces)

        for piece in pieces:
            moves = self.legal_moves_for(piece, direction)
            if moves:
                self.rng.shuffle(moves)
                move = moves[0]
                return self.attempt_move(piece, direction, direction, move.to_row, move.to_col,
                                         captures=move.captures)
        logger.debug("no legal move for %s", Color(color).value)
        return None

    def has_any_move(self, color: Union[Color, str], direction: Direction) -> bool:
        """Check whether any piece of ``color`` has a legal move."""
        return any(self.legal_moves_for(p, direction) for p in self.board.pieces_of(color))
