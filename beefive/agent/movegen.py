"""Candidate generation for the search engine."""

from __future__ import annotations

from beefive.game.board import BOARD_SIZE, Board
from beefive.game.lines import would_win
from beefive.game.types import Player, Point

# Max candidates to evaluate at each search depth
MAX_CANDIDATES = 20

CENTER = BOARD_SIZE // 2


def _distance_to_center(point: Point) -> int:
    return abs(point.row - CENTER) + abs(point.col - CENTER)


def candidate_moves(board: Board, limit: int = MAX_CANDIDATES) -> list[Point]:
    """Empty cells sorted by Manhattan distance to the centre, truncated to `limit`.

    Ties keep row-major order.
    """
    moves = sorted(board.empty_points(), key=_distance_to_center)
    return moves[:limit]


def winning_moves(board: Board, player: Player) -> list[Point]:
    return [p for p in board.empty_points() if would_win(board, p, player)]


def forcing_moves(board: Board, player: Player) -> list[Point]:
    """Moves that must be played now: own wins first, else blocks of opponent wins.

    Scans the whole board, so a forced reply is never lost to candidate truncation.
    """
    wins = winning_moves(board, player)
    if wins:
        return wins
    return winning_moves(board, player.other)
