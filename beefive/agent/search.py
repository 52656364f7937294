"""Minimax with alpha-beta pruning over the centre-ordered candidate list."""

from __future__ import annotations

import logging
import math
from typing import Optional

from beefive.game.board import Board, format_point
from beefive.game.lines import has_win
from beefive.game.types import Player, Point

from .base import Agent
from .config import Tier
from .evaluation import evaluate
from .movegen import MAX_CANDIDATES, candidate_moves, forcing_moves

logger = logging.getLogger(__name__)

INF = math.inf

# Terminal score magnitude; well above any evaluate() total on a 10x10 board
WIN_SCORE = 100_000

# Reference depth per difficulty tier
TIER_DEPTHS: dict[Tier, int] = {
    Tier.EASY: 2,
    Tier.MEDIUM: 3,
    Tier.HARD: 4,
}


def _terminal_score(won: Player, ai_player: Player, depth: int) -> int:
    """Win/loss score; more remaining depth means the result came sooner.

    The depth is added rather than subtracted from the magnitude so that a
    sooner win scores higher and a later loss scores less badly. WIN_SCORE
    sits far above 1000 because evaluate() totals can pass 1000.
    """
    if won is ai_player:
        return WIN_SCORE + depth
    return -(WIN_SCORE + depth)


def minimax(
    board: Board,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    ai_player: Player,
    last_move: Optional[Point] = None,
    prune: bool = True,
    limit: int = MAX_CANDIDATES,
) -> float:
    """Minimax value of `board` for `ai_player`.

    `maximizing` says whose turn it is now (True = ai_player). `last_move`
    is the move that produced this board; it is checked for a win before
    anything else. With prune=False the search never cuts off, which gives
    plain minimax.
    """
    if last_move is not None:
        mover = ai_player.other if maximizing else ai_player
        if has_win(board, last_move, mover):
            return _terminal_score(mover, ai_player, depth)
    if depth == 0 or board.is_full():
        return evaluate(board, ai_player)

    to_move = ai_player if maximizing else ai_player.other
    moves = candidate_moves(board, limit)

    if maximizing:
        best = -INF
        for move in moves:
            board.place(move, to_move)
            score = minimax(board, depth - 1, alpha, beta, False, ai_player, move, prune, limit)
            board.remove(move)
            best = max(best, score)
            alpha = max(alpha, score)
            if prune and beta <= alpha:
                break
        return best

    best = INF
    for move in moves:
        board.place(move, to_move)
        score = minimax(board, depth - 1, alpha, beta, True, ai_player, move, prune, limit)
        board.remove(move)
        best = min(best, score)
        beta = min(beta, score)
        if prune and beta <= alpha:
            break
    return best


def search_root(
    board: Board,
    depth: int,
    player: Player,
    prune: bool = True,
    limit: int = MAX_CANDIDATES,
) -> tuple[float, Optional[Point]]:
    """Return (value, move) of the best root move for `player`.

    Works on a private copy; the caller's board is never touched.
    """
    assert depth >= 1, "Search depth must be at least 1"
    work = board.copy()
    best_value = -INF
    best: Optional[Point] = None
    alpha = -INF

    for move in candidate_moves(work, limit):
        work.place(move, player)
        value = minimax(work, depth - 1, alpha, INF, False, player, move, prune, limit)
        work.remove(move)
        if value > best_value:
            best_value = value
            best = move
        if prune:
            alpha = max(alpha, value)

    return best_value, best


def best_move(board: Board, depth: int, maximizing_player: Player) -> Optional[Point]:
    """Best move for `maximizing_player`, or None if no candidate exists (draw)."""
    value, move = search_root(board, depth, maximizing_player)
    if move is not None:
        logger.debug("search d=%d picked %s (%s)", depth, format_point(move), value)
    return move


class MinimaxAgent(Agent):
    """Alpha-beta agent: forced wins and blocks first, then search."""

    def __init__(self, depth: int = 2) -> None:
        self.depth = depth

    @property
    def name(self) -> str:
        return f"MinimaxAgent(d={self.depth})"

    def select_move(self, board: Board, player: Player) -> Point:
        forced = forcing_moves(board, player)
        if forced:
            return forced[0]

        move = best_move(board, self.depth, player)
        assert move is not None, "No candidates found"
        return move
