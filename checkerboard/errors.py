"""
Exception taxonomy for the checkerboard engine.

Usage errors (bad coordinates, bad direction) raise. Illegal moves are not
exceptions: the board and rules return ``False``/``None`` for them.
RepresentationError marks a defect inside the engine itself.
"""
from __future__ import annotations


class CheckerboardError(Exception):
    """Base class for all engine errors."""


class OutOfBoundsError(CheckerboardError, IndexError):
    """Coordinates fall outside ``[0, size)``."""

    def __init__(self, row: int, col: int, size: int) -> None:
        self.row = row
        self.col = col
        self.size = size
        super().__init__(f"square [{row},{col}] is not on this {size}x{size} board")


class InvalidDirectionError(CheckerboardError, ValueError):
    """A player direction other than +1 or -1 was supplied."""

    def __init__(self, direction: object) -> None:
        self.direction = direction
        super().__init__(f"direction must be 1 or -1, got {direction!r}")


class RepresentationError(CheckerboardError):
    """The grid and the positions recorded on pieces disagree."""

    def __init__(self, row: int, col: int, piece_row: object, piece_col: object) -> None:
        self.row = row
        self.col = col
        self.piece_row = piece_row
        self.piece_col = piece_col
        super().__init__(
            f"board representation invariant broken at {row},{col} != {piece_row},{piece_col}"
        )
