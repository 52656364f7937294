"""Line scanning: win detection, open-line patterns and threat classification.

Every other component goes through these primitives. A scan always treats the
scanned cell as holding the player's piece, so the same code answers both
"did this move win?" and "would a move here win?".
"""

from __future__ import annotations

import enum
from typing import NamedTuple

from .board import BOARD_SIZE, WIN_LENGTH, Board
from .types import Cell, Player, Point

# Fixed scan order: horizontal, vertical, diagonal \, diagonal /
AXES: list[tuple[int, int]] = [(0, 1), (1, 0), (1, 1), (1, -1)]

# Cells examined on each side of the scanned cell
REACH = WIN_LENGTH - 1


class LinePattern(NamedTuple):
    axis: tuple[int, int]
    length: int       # contiguous run through the cell, cell included
    open_start: bool  # cell before the run (negative direction) is empty
    open_end: bool    # cell after the run (positive direction) is empty
    room: int         # player-or-empty span through the cell, capped at 9

    @property
    def open_ends(self) -> int:
        return int(self.open_start) + int(self.open_end)

    @property
    def is_open(self) -> bool:
        """True if the run can still grow into five, or already has."""
        if self.length >= WIN_LENGTH:
            return True
        return self.open_ends > 0 and self.room >= WIN_LENGTH


class Threat(enum.IntEnum):
    NONE = 0
    TWO = 1    # open two
    THREE = 2  # open three, or split three with gap detection
    FOUR = 3   # one move from five
    FIVE = 4


def _on_grid(r: int, c: int) -> bool:
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def _walk(grid: list[list[Cell]], row: int, col: int, dr: int, dc: int, own: Cell) -> int:
    """Count consecutive `own` cells starting one step away from (row, col)."""
    count = 0
    r, c = row + dr, col + dc
    while _on_grid(r, c) and grid[r][c] is own:
        count += 1
        r += dr
        c += dc
    return count


def scan_axis(board: Board, point: Point, player: Player, axis: tuple[int, int]) -> LinePattern:
    grid = board.grid
    own = player.cell
    dr, dc = axis
    row, col = point

    fwd = _walk(grid, row, col, dr, dc, own)
    bwd = _walk(grid, row, col, -dr, -dc, own)

    er, ec = row + dr * (fwd + 1), col + dc * (fwd + 1)
    open_end = _on_grid(er, ec) and grid[er][ec] is Cell.EMPTY
    sr, sc = row - dr * (bwd + 1), col - dc * (bwd + 1)
    open_start = _on_grid(sr, sc) and grid[sr][sc] is Cell.EMPTY

    room = 1
    for sign in (1, -1):
        for step in range(1, REACH + 1):
            r, c = row + sign * dr * step, col + sign * dc * step
            if not _on_grid(r, c) or grid[r][c] not in (own, Cell.EMPTY):
                break
            room += 1

    return LinePattern(axis, fwd + bwd + 1, open_start, open_end, room)


def scan_lines(board: Board, point: Point, player: Player) -> list[LinePattern]:
    """Return the line pattern through `point` on each of the four axes."""
    return [scan_axis(board, point, player, axis) for axis in AXES]


def would_win(board: Board, point: Point, player: Player) -> bool:
    """True if placing `player` at `point` completes five or more in a row."""
    grid = board.grid
    own = player.cell
    row, col = point
    for dr, dc in AXES:
        if 1 + _walk(grid, row, col, dr, dc, own) + _walk(grid, row, col, -dr, -dc, own) >= WIN_LENGTH:
            return True
    return False


def has_win(board: Board, point: Point, player: Player) -> bool:
    """True iff `point` holds `player`'s piece inside a run of five or more."""
    if board.get(point) is not player.cell:
        return False
    return would_win(board, point, player)


def winning_run(board: Board, point: Point, player: Player) -> list[Point]:
    """Return the cells of the first winning run through `point`, in board order.

    Axes are tried in AXES order. Returns an empty list if there is no win.
    """
    if board.get(point) is not player.cell:
        return []
    grid = board.grid
    own = player.cell
    for dr, dc in AXES:
        run = [point]
        r, c = point.row + dr, point.col + dc
        while _on_grid(r, c) and grid[r][c] is own:
            run.append(Point(r, c))
            r += dr
            c += dc
        r, c = point.row - dr, point.col - dc
        while _on_grid(r, c) and grid[r][c] is own:
            run.insert(0, Point(r, c))
            r -= dr
            c -= dc
        if len(run) >= WIN_LENGTH:
            return run
    return []


# ---------------------------------------------------------------------------
# Threat classification
# ---------------------------------------------------------------------------

# Patterns over the 9-cell window centred on the scanned cell.
# X = own piece, _ = empty, anything else is a wall.
FOUR_WINDOWS = ("X_XXX", "XX_XX", "XXX_X")
SPLIT_THREES = ("_X_XX_", "_XX_X_")


def line_window(board: Board, point: Point, player: Player, axis: tuple[int, int]) -> str:
    """Render the axis through `point` as a 9-char string with `point` as X."""
    grid = board.grid
    own = player.cell
    dr, dc = axis
    chars = []
    for step in range(-REACH, REACH + 1):
        if step == 0:
            chars.append("X")
            continue
        r, c = point.row + dr * step, point.col + dc * step
        if not _on_grid(r, c):
            chars.append("|")
        elif grid[r][c] is own:
            chars.append("X")
        elif grid[r][c] is Cell.EMPTY:
            chars.append("_")
        else:
            chars.append("|")
    return "".join(chars)


def _matches_through_center(window: str, pattern: str) -> bool:
    """True if `pattern` occurs in `window` covering its centre cell."""
    start = window.find(pattern)
    while start != -1:
        if start <= REACH < start + len(pattern):
            return True
        start = window.find(pattern, start + 1)
    return False


def line_threat(
    board: Board,
    point: Point,
    player: Player,
    axis: tuple[int, int],
    gaps: bool = False,
) -> Threat:
    """Classify the line a virtual placement at `point` would make on `axis`.

    With gaps=False only contiguous runs count. With gaps=True single-gap
    shapes such as XX_XX or _X_XX_ are recognised as well.
    """
    pattern = scan_axis(board, point, player, axis)
    if pattern.length >= WIN_LENGTH:
        return Threat.FIVE
    if not pattern.is_open:
        return Threat.NONE

    if pattern.length == 4:
        return Threat.FOUR

    window = line_window(board, point, player, axis) if gaps else ""
    # A one-gap four outranks the open three it may also contain
    if gaps and any(_matches_through_center(window, p) for p in FOUR_WINDOWS):
        return Threat.FOUR
    if pattern.length == 3 and pattern.open_ends == 2:
        return Threat.THREE
    if gaps and any(_matches_through_center(window, p) for p in SPLIT_THREES):
        return Threat.THREE
    if pattern.length >= 2 and pattern.open_ends == 2:
        return Threat.TWO
    return Threat.NONE


def threats(board: Board, point: Point, player: Player, gaps: bool = False) -> list[Threat]:
    return [line_threat(board, point, player, axis, gaps) for axis in AXES]
