"""Move application and game-state bookkeeping."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from beefive.errors import InvalidMoveError

from .board import (
    Board,
    PieceAges,
    check_on_grid,
    copy_piece_ages,
    format_point,
    new_piece_ages,
)
from .lines import winning_run
from .types import Cell, Player, Point

logger = logging.getLogger(__name__)


@dataclass
class WinResult:
    player: Player
    run: list[Point]


@dataclass
class MoveResult:
    board: Board
    piece_ages: PieceAges
    win: Optional[WinResult] = None

    @property
    def is_draw(self) -> bool:
        return self.win is None and self.board.is_full()

    @property
    def is_over(self) -> bool:
        return self.win is not None or self.board.is_full()


def apply_move(board: Board, piece_ages: PieceAges, point: Point, player: Player) -> MoveResult:
    """Place a piece for `player` on a copy of the board.

    The input board and ages are never modified. Raises InvalidMoveError
    (board unchanged) if the target cell is not empty, OutOfBoundsError if
    the point is off the grid.
    """
    check_on_grid(point)
    target = board.get(point)
    if target is not Cell.EMPTY:
        raise InvalidMoveError(
            f"{format_point(point)} is {target.name.lower()}",
            {"row": point.row, "col": point.col},
        )

    new_board = board.copy()
    new_board.place(point, player)
    new_ages = copy_piece_ages(piece_ages)
    new_ages[point.row][point.col] = 0

    run = winning_run(new_board, point, player)
    win = WinResult(player, run) if run else None
    if win is not None:
        logger.debug("%s wins with %s", player, " ".join(format_point(p) for p in run))
    return MoveResult(new_board, new_ages, win)


@dataclass
class GameState:
    """Snapshot of a game, owned by the turn-sequencing collaborator."""

    board: Board = field(default_factory=Board)
    piece_ages: PieceAges = field(default_factory=new_piece_ages)
    current_player: Player = Player.BLACK
    winner: Optional[Player] = None
    is_active: bool = True
    move_count: int = 0
    winning_run: list[Point] = field(default_factory=list)

    @property
    def is_draw(self) -> bool:
        return not self.is_active and self.winner is None

    def legal_moves(self) -> list[Point]:
        if not self.is_active:
            return []
        return self.board.empty_points()

    def play(self, point: Point) -> MoveResult:
        """Apply a move for the current player and advance the turn."""
        assert self.is_active, "Game is already over"
        result = apply_move(self.board, self.piece_ages, point, self.current_player)
        self.board = result.board
        self.piece_ages = result.piece_ages
        self.move_count += 1

        if result.win is not None:
            self.winner = result.win.player
            self.winning_run = result.win.run
            self.is_active = False
        elif result.board.is_full():
            self.is_active = False
        else:
            self.current_player = self.current_player.other
        return result

    def sync(self) -> None:
        """Recompute is_active after an external board mutation (aging, shifting)."""
        if self.winner is None and self.board.is_full():
            self.is_active = False
