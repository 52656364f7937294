"""Heuristic board evaluation shared by the search engine and the cascade."""

from __future__ import annotations

from beefive.game.board import BOARD_SIZE, Board
from beefive.game.lines import scan_lines
from beefive.game.types import Cell, Player, Point

# L1 distance is measured to the geometric centre (4.5, 4.5); doubled to stay integral
_CENTER_X2 = BOARD_SIZE - 1
CENTER_BONUS_MAX = 10

_NEIGHBOURS = [(dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)]


def line_value(length: int) -> int:
    """Super-linear value of a run: length**2 from two stones up."""
    if length < 2:
        return 0
    return length * length


def center_distance(point: Point) -> int:
    """Manhattan distance from the geometric centre. Exact on an even-sized board."""
    return (abs(2 * point.row - _CENTER_X2) + abs(2 * point.col - _CENTER_X2)) // 2


def center_bonus(point: Point) -> int:
    return max(0, CENTER_BONUS_MAX - center_distance(point))


def _line_terms(board: Board, point: Point, player: Player) -> int:
    """Sum of line_value over the open lines a piece at `point` would join."""
    total = 0
    for pattern in scan_lines(board, point, player):
        if pattern.is_open:
            total += line_value(pattern.length)
    return total


def position_value(board: Board, point: Point, player: Player) -> int:
    """Value of placing `player` at the empty cell `point`."""
    return _line_terms(board, point, player) + center_bonus(point)


def _has_neighbour(grid: list[list[Cell]], row: int, col: int) -> bool:
    for dr, dc in _NEIGHBOURS:
        r, c = row + dr, col + dc
        if 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and grid[r][c].is_piece:
            return True
    return False


def evaluate(board: Board, for_player: Player) -> int:
    """Score the board from `for_player`'s point of view (higher is better).

    Sums position_value over every empty cell for `for_player` minus the
    same for the opponent. The centre bonus is identical for both sides and
    cancels, and a cell with no adjacent piece can only form runs of one,
    so only empty cells touching a piece are scanned.
    """
    grid = board.grid
    opponent = for_player.other
    score = 0
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if grid[row][col] is not Cell.EMPTY or not _has_neighbour(grid, row, col):
                continue
            point = Point(row, col)
            score += _line_terms(board, point, for_player)
            score -= _line_terms(board, point, opponent)
    return score
