from __future__ import annotations

from typing import Iterable, Iterator, Optional

from beefive.errors import OutOfBoundsError

from .types import Cell, Player, Point


BOARD_SIZE = 10
WIN_LENGTH = 5

# Column labels: A-J for 10x10
COL_LABELS = "ABCDEFGHIJ"

# Text fixture symbols, used by Board.from_rows and Board.__str__
SYMBOLS = {Cell.EMPTY: ".", Cell.BLACK: "X", Cell.YELLOW: "O", Cell.BLOCKED: "#"}
_FROM_SYMBOL = {v: k for k, v in SYMBOLS.items()}

PieceAges = list[list[int]]


def parse_coordinate(text: str) -> Optional[Point]:
    """Parse a coordinate string like 'C2' into a Point.

    Column is a letter A-J, row is a number 0-9.
    Returns None if the string is invalid.
    """
    text = text.strip().upper()
    if len(text) != 2:
        return None
    col_char, row_char = text
    if col_char not in COL_LABELS or not row_char.isdigit():
        return None
    return Point(int(row_char), COL_LABELS.index(col_char))


def format_point(point: Point) -> str:
    """Format a Point as a coordinate string like 'C2'."""
    return f"{COL_LABELS[point.col]}{point.row}"


def is_on_grid(point: Point) -> bool:
    return 0 <= point.row < BOARD_SIZE and 0 <= point.col < BOARD_SIZE


def check_on_grid(point: Point) -> None:
    """Fail fast on coordinates outside the board."""
    if not is_on_grid(point):
        raise OutOfBoundsError("Point is off the grid", {"row": point.row, "col": point.col})


def new_piece_ages() -> PieceAges:
    return [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def copy_piece_ages(ages: PieceAges) -> PieceAges:
    return [list(row) for row in ages]


class Board:
    """10x10 Bee-Five board. Tracks pieces and obstacles."""

    def __init__(self, cells: Optional[Iterable[Iterable[Cell]]] = None) -> None:
        if cells is None:
            self._grid: list[list[Cell]] = [[Cell.EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        else:
            self._grid = [list(row) for row in cells]
            assert len(self._grid) == BOARD_SIZE, "Board must have 10 rows"
            assert all(len(row) == BOARD_SIZE for row in self._grid), "Board must have 10 columns"

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> Board:
        """Build a board from text rows: '.' empty, 'X' black, 'O' yellow, '#' blocked."""
        return cls([[_FROM_SYMBOL[ch] for ch in row.replace(" ", "")] for row in rows])

    def copy(self) -> Board:
        return Board(self._grid)

    @property
    def grid(self) -> list[list[Cell]]:
        """Raw row-major grid. Search code reads it directly for speed."""
        return self._grid

    def get(self, point: Point) -> Cell:
        return self._grid[point.row][point.col]

    def set(self, point: Point, cell: Cell) -> None:
        self._grid[point.row][point.col] = cell

    def place(self, point: Point, player: Player) -> None:
        assert self.is_empty(point), f"{format_point(point)} is not empty"
        self._grid[point.row][point.col] = player.cell

    def remove(self, point: Point) -> None:
        self._grid[point.row][point.col] = Cell.EMPTY

    def block(self, point: Point) -> None:
        self._grid[point.row][point.col] = Cell.BLOCKED

    def is_empty(self, point: Point) -> bool:
        return self._grid[point.row][point.col] is Cell.EMPTY

    def is_on_grid(self, point: Point) -> bool:
        return is_on_grid(point)

    def points(self) -> Iterator[Point]:
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                yield Point(r, c)

    def points_of(self, cell: Cell) -> list[Point]:
        return [p for p in self.points() if self._grid[p.row][p.col] is cell]

    def empty_points(self) -> list[Point]:
        return self.points_of(Cell.EMPTY)

    @property
    def piece_count(self) -> int:
        return sum(1 for row in self._grid for cell in row if cell.is_piece)

    def is_full(self) -> bool:
        return all(cell is not Cell.EMPTY for row in self._grid for cell in row)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        return "\n".join("".join(SYMBOLS[cell] for cell in row) for row in self._grid)
