from __future__ import annotations

import enum
from typing import NamedTuple, Optional


class Player(enum.Enum):
    BLACK = 1
    YELLOW = 2

    @property
    def other(self) -> Player:
        return Player.YELLOW if self is Player.BLACK else Player.BLACK

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    def __str__(self) -> str:
        return self.name.capitalize()


class Cell(enum.Enum):
    EMPTY = 0
    BLACK = 1
    YELLOW = 2
    BLOCKED = 3  # obstacle, never receives a piece

    @property
    def player(self) -> Optional[Player]:
        if self is Cell.BLACK:
            return Player.BLACK
        if self is Cell.YELLOW:
            return Player.YELLOW
        return None

    @property
    def is_piece(self) -> bool:
        return self is Cell.BLACK or self is Cell.YELLOW


class Point(NamedTuple):
    row: int  # 0-indexed, 0 = top
    col: int  # 0-indexed, 0 = left
