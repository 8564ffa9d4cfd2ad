"""
Value types for the checkerboard engine.

This module provides:
- The Color enum and its advancing direction
- The Piece token, whose position is written only by Board
- Fixed-shape records for squares, jump steps, move candidates and move results
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Tuple

# Basic type aliases
Direction = int  # +1 advances toward the last row, -1 toward row 0
VALID_DIRECTIONS = (1, -1)


class Color(str, Enum):
    """Piece colors. Dark starts at the top and advances toward the last row."""

    LIGHT = "light"
    DARK = "dark"

    @property
    def direction(self) -> Direction:
        return 1 if self is Color.DARK else -1

    @property
    def opponent(self) -> "Color":
        return Color.LIGHT if self is Color.DARK else Color.DARK


class Square(NamedTuple):
    row: int
    col: int


@dataclass(eq=False)
class Piece:
    """
    A playing token on the board.

    Pieces compare by identity. ``row`` and ``col`` are maintained by Board and
    are ``None`` while the piece is not placed.
    """

    color: Color
    is_king: bool = False
    row: Optional[int] = field(default=None, init=False, compare=False)
    col: Optional[int] = field(default=None, init=False, compare=False)

    def __post_init__(self) -> None:
        try:
            self.color = Color(self.color)
        except ValueError:
            raise ValueError(f"color must be one of {[c.value for c in Color]}, got {self.color!r}") from None
        self.is_king = bool(self.is_king)

    @property
    def is_placed(self) -> bool:
        return self.row is not None and self.col is not None

    @property
    def symbol(self) -> str:
        ch = self.color.value[0]
        return ch.upper() if self.is_king else ch

    def __str__(self) -> str:
        name = self.color.value
        return name.upper() if self.is_king else name


@dataclass(frozen=True)
class JumpStep:
    """One jump inside a capture chain: the square jumped over and the landing."""

    captured_row: int
    captured_col: int
    row: int
    col: int

    @property
    def captured(self) -> Square:
        return Square(self.captured_row, self.captured_col)


@dataclass(frozen=True)
class MoveCandidate:
    """A reachable destination and the opposing squares captured on the way."""

    to_row: int
    to_col: int
    captures: Tuple[Square, ...] = ()

    @property
    def destination(self) -> Square:
        return Square(self.to_row, self.to_col)

    @property
    def is_capture(self) -> bool:
        return len(self.captures) > 0


@dataclass(frozen=True)
class RemovedPiece:
    """State of a captured piece just before it left the board."""

    row: int
    col: int
    color: Color
    is_king: bool


@dataclass(frozen=True)
class MoveResult:
    """What changed on the board when a move was applied."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    made_king: bool = False
    removed: Tuple[RemovedPiece, ...] = ()

    @property
    def captured_count(self) -> int:
        return len(self.removed)


def is_valid_direction(direction: object) -> bool:
    """Check if a value is a valid player direction."""
    return isinstance(direction, int) and not isinstance(direction, bool) and direction in VALID_DIRECTIONS
