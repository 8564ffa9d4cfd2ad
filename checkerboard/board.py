"""
Board: the authoritative grid of pieces.

Square [0,0] is the upper-left corner. Rows are numbered downward and columns
to the right. Dark squares are those with ``(row + col)`` odd; play happens on
them. The board broadcasts ``add``, ``remove``, ``move`` and ``promote``
events through its own EventBus, after every mutation has been committed and
the representation invariant checked.
"""
from __future__ import annotations

import logging
import random
from typing import Any, List, Optional, Union

import numpy as np

from config import get_board_settings
from checkerboard.errors import OutOfBoundsError, RepresentationError
from checkerboard.events import (
    AddDetails,
    BoardEvent,
    EventBus,
    EventKind,
    Handler,
    MoveDetails,
    PromoteDetails,
    RemoveDetails,
)
from checkerboard.types import Color, Piece, Square

logger = logging.getLogger(__name__)

EMPTY_SYMBOL = "_"


class Board:
    """A square, fixed-size checkerboard holding at most one Piece per cell."""

    def __init__(self, size: Optional[int] = None, check_rep: Optional[bool] = None):
        if size is None or check_rep is None:
            settings = get_board_settings()
            size = settings.size if size is None else size
            check_rep = settings.check_representation if check_rep is None else check_rep
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f"board size must be a positive integer, got {size!r}")
        self._size: int = size
        self.check_rep_enabled: bool = bool(check_rep)
        # _squares[row][col] is the Piece there, or None
        self._squares: List[List[Optional[Piece]]] = [[None] * size for _ in range(size)]
        self._events = EventBus()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def size(self) -> int:
        return self._size

    @property
    def events(self) -> EventBus:
        return self._events

    def is_valid_location(self, row: int, col: int) -> bool:
        """Test whether (row, col) identifies a square. Never raises."""
        return 0 <= row < self._size and 0 <= col < self._size

    def _require_location(self, row: int, col: int) -> None:
        if not self.is_valid_location(row, col):
            raise OutOfBoundsError(row, col, self._size)

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        """Get the piece on [row, col], or None if the square is empty."""
        self._require_location(row, col)
        return self._squares[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.piece_at(row, col) is None

    def location_of(self, piece: Piece) -> Square:
        """Read the piece's own recorded position (no grid scan)."""
        if piece.row is None or piece.col is None:
            raise ValueError(f"{piece} is not placed on a board")
        return Square(piece.row, piece.col)

    def contains(self, piece: Piece) -> bool:
        """True if ``piece`` sits on this board at its recorded position."""
        row, col = piece.row, piece.col
        if row is None or col is None or not self.is_valid_location(row, col):
            return False
        return self._squares[row][col] is piece

    def all_pieces(self) -> List[Piece]:
        """All pieces on the board, in no particular order."""
        return [p for row in self._squares for p in row if p is not None]

    def pieces_of(self, color: Union[Color, str]) -> List[Piece]:
        color = Color(color)
        return [p for p in self.all_pieces() if p.color is color]

    def can_be_king(self, piece: Piece, row: int) -> bool:
        """Check if a piece landing on ``row`` reaches its far edge."""
        if piece.color is Color.DARK:
            return row == self._size - 1
        return row == 0

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add(self, piece: Piece, row: int, col: int) -> bool:
        """
        Place a new piece on the board.

        Requires the piece to be not currently placed and (row, col) to be a
        valid empty square. Returns False, without firing events, otherwise.
        """
        if not self.is_empty(row, col):
            logger.debug("add rejected: [%d,%d] is occupied", row, col)
            return False
        if piece.is_placed:
            logger.debug("add rejected: piece already placed at [%s,%s]", piece.row, piece.col)
            return False

        piece.row = row
        piece.col = col
        self._squares[row][col] = piece

        # rep invariant must hold before any event fires
        self.check_rep()
        logger.debug("added %s at [%d,%d]", piece, row, col)
        self._dispatch(EventKind.ADD, AddDetails(piece=piece, row=row, col=col))
        return True

    def move_to(self, piece: Piece, to_row: int, to_col: int) -> bool:
        """
        Move a piece from its current square to (to_row, to_col).

        Requires the piece to be on this board and the target to be a valid
        empty square. Promotes the piece when it lands on its far edge.
        """
        if not self.is_empty(to_row, to_col):
            logger.debug("move rejected: [%d,%d] is occupied", to_row, to_col)
            return False
        if not self.contains(piece):
            logger.debug("move rejected: %s is not on this board", piece)
            return False

        from_row, from_col = self.location_of(piece)
        self._squares[from_row][from_col] = None
        self._squares[to_row][to_col] = piece

        promoted = not piece.is_king and self.can_be_king(piece, to_row)
        if promoted:
            piece.is_king = True

        piece.row = to_row
        piece.col = to_col

        self.check_rep()
        logger.debug("moved %s [%d,%d] -> [%d,%d]", piece, from_row, from_col, to_row, to_col)
        self._dispatch(EventKind.MOVE, MoveDetails(
            piece=piece, from_row=from_row, from_col=from_col, to_row=to_row, to_col=to_col,
        ))
        if promoted:
            logger.debug("promoted %s at [%d,%d]", piece, to_row, to_col)
            self._dispatch(EventKind.PROMOTE, PromoteDetails(piece=piece))
        return True

    def remove(self, piece: Piece) -> bool:
        """Remove a piece from this board. Returns False if it is not here."""
        if not self.contains(piece):
            logger.debug("remove rejected: %s is not on this board", piece)
            return False
        row, col = self.location_of(piece)
        return self.remove_at(row, col)

    def remove_at(self, row: int, col: int) -> bool:
        """Remove the piece on (row, col). Returns False if the square is empty."""
        piece = self.piece_at(row, col)
        if piece is None:
            logger.debug("remove rejected: no piece at [%d,%d]", row, col)
            return False

        self._squares[row][col] = None
        piece.row = None
        piece.col = None

        self.check_rep()
        logger.debug("removed %s from [%d,%d]", piece, row, col)
        self._dispatch(EventKind.REMOVE, RemoveDetails(piece=piece, row=row, col=col))
        return True

    def clear(self) -> None:
        """Remove every piece, one ``remove`` event per occupied square."""
        for r in range(self._size):
            for c in range(self._size):
                if self._squares[r][c] is not None:
                    self.remove_at(r, c)

    def check_rep(self) -> None:
        """Verify that every occupied square matches its piece's position."""
        if not self.check_rep_enabled:
            return
        for r, row in enumerate(self._squares):
            for c, piece in enumerate(row):
                if piece is not None and (piece.row != r or piece.col != c):
                    logger.error("representation invariant broken at [%d,%d] (piece says [%s,%s])",
                                 r, c, piece.row, piece.col)
                    raise RepresentationError(r, c, piece.row, piece.col)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def subscribe(self, kind: Union[EventKind, str], handler: Handler) -> Handler:
        """Register ``handler`` for every future event of ``kind``."""
        return self._events.subscribe(kind, handler)

    def unsubscribe(self, kind: Union[EventKind, str], handler: Handler) -> bool:
        return self._events.unsubscribe(kind, handler)

    def _dispatch(self, kind: EventKind, details: Any) -> None:
        self._events.dispatch(BoardEvent(kind=kind, details=details))

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------
    def prepare_new_game(self, rows: Optional[int] = None) -> None:
        """
        Set up a new game: dark pieces on the dark squares of the top ``rows``
        rows, light pieces on the dark squares of the bottom ``rows`` rows.
        """
        if rows is None:
            rows = get_board_settings().setup_rows
        rows = min(rows, self._size // 2)

        self.check_rep()
        self.clear()

        for r in range(rows):
            for c in range(self._size):
                if (r + c) % 2 == 1:
                    self.add(Piece(Color.DARK), r, c)
                bottom = self._size - 1 - r
                if (bottom + c) % 2 == 1:
                    self.add(Piece(Color.LIGHT), bottom, c)
        logger.info("prepared new %dx%d game with %d pieces", self._size, self._size, len(self.all_pieces()))

    def random_piece(self, rng: Any = random) -> Optional[Piece]:
        pieces = self.all_pieces()
        return rng.choice(pieces) if pieces else None

    def random_non_king(self, rng: Any = random) -> Optional[Piece]:
        pieces = [p for p in self.all_pieces() if not p.is_king]
        return rng.choice(pieces) if pieces else None

    def random_empty_location(self, rng: Any = random) -> Optional[Square]:
        free = [Square(r, c) for r in range(self._size) for c in range(self._size)
                if self._squares[r][c] is None]
        return rng.choice(free) if free else None

    def to_array(self) -> np.ndarray:
        """Encode the grid as int8: +1/+2 dark man/king, -1/-2 light man/king, 0 empty."""
        grid = np.zeros((self._size, self._size), dtype=np.int8)
        for r, row in enumerate(self._squares):
            for c, piece in enumerate(row):
                if piece is None:
                    continue
                value = 2 if piece.is_king else 1
                grid[r, c] = value if piece.color is Color.DARK else -value
        return grid

    def render(self) -> str:
        """One character per square: d/l for men, D/L for kings, _ for empty."""
        lines = []
        for row in self._squares:
            lines.append(" ".join(p.symbol if p is not None else EMPTY_SYMBOL for p in row))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board(size={self._size}, pieces={len(self.all_pieces())})"
