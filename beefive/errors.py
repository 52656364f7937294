"""
Bee-Five error hierarchy.

All engine exceptions inherit from BeeFiveError so collaborators can catch
the whole family in one place.

Usage:
    from beefive.errors import InvalidMoveError

    try:
        result = apply_move(board, ages, point, player)
    except InvalidMoveError as e:
        logger.info(f"Rejected move: {e.message}")
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "BeeFiveError",
    "InvalidMoveError",
    "NoLegalMovesError",
    "OutOfBoundsError",
    "SearchCancelledError",
]


class BeeFiveError(Exception):
    """Base exception for all Bee-Five errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra values useful when debugging
    """
    code: str = "BEEFIVE_ERROR"

    def __init__(self, message: str = "", context: Optional[dict[str, Any]] = None) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({details})"
        return f"[{self.code}] {self.message}"


class InvalidMoveError(BeeFiveError):
    """Target cell is occupied or blocked."""
    code = "INVALID_MOVE"


class OutOfBoundsError(InvalidMoveError, ValueError):
    """Coordinates outside the 10x10 board. Programmer error."""
    code = "OUT_OF_BOUNDS"


class NoLegalMovesError(BeeFiveError):
    """No empty cell left. Signals a draw, not a fault."""
    code = "NO_LEGAL_MOVES"


class SearchCancelledError(BeeFiveError):
    """A background search was superseded by a reset."""
    code = "SEARCH_CANCELLED"
