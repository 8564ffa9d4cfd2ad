"""
Board change notifications.

Each Board owns one EventBus. Handlers run synchronously, in registration
order, after the mutation has been committed and checked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Union

from checkerboard.types import Piece

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    MOVE = "move"
    PROMOTE = "promote"


@dataclass(frozen=True)
class AddDetails:
    piece: Piece
    row: int
    col: int


@dataclass(frozen=True)
class RemoveDetails:
    piece: Piece
    row: int
    col: int


@dataclass(frozen=True)
class MoveDetails:
    piece: Piece
    from_row: int
    from_col: int
    to_row: int
    to_col: int


@dataclass(frozen=True)
class PromoteDetails:
    piece: Piece


EventDetails = Union[AddDetails, RemoveDetails, MoveDetails, PromoteDetails]

_DETAILS_FOR_KIND = {
    EventKind.ADD: AddDetails,
    EventKind.REMOVE: RemoveDetails,
    EventKind.MOVE: MoveDetails,
    EventKind.PROMOTE: PromoteDetails,
}


@dataclass(frozen=True)
class BoardEvent:
    """An immutable notification of a committed board mutation."""

    kind: EventKind
    details: EventDetails

    def __post_init__(self) -> None:
        expected = _DETAILS_FOR_KIND[EventKind(self.kind)]
        if not isinstance(self.details, expected):
            raise TypeError(f"{self.kind.value} event needs {expected.__name__}, got {type(self.details).__name__}")


Handler = Callable[[BoardEvent], None]


class EventBus:
    """Typed publish/subscribe keyed by EventKind."""

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[Handler]] = {kind: [] for kind in EventKind}

    def subscribe(self, kind: Union[EventKind, str], handler: Handler) -> Handler:
        """Register a handler for every future event of ``kind``."""
        kind = EventKind(kind)
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers[kind].append(handler)
        return handler

    def unsubscribe(self, kind: Union[EventKind, str], handler: Handler) -> bool:
        """Remove a handler. Returns False if it was not registered."""
        handlers = self._handlers[EventKind(kind)]
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        return True

    def handler_count(self, kind: Union[EventKind, str]) -> int:
        return len(self._handlers[EventKind(kind)])

    def dispatch(self, event: BoardEvent) -> None:
        # Snapshot so handlers that (un)subscribe do not disturb this dispatch
        handlers = list(self._handlers[event.kind])
        logger.debug("dispatching %s to %d handler(s)", event.kind.value, len(handlers))
        for handler in handlers:
            handler(event)
