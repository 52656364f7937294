from __future__ import annotations

import abc

from beefive.game.board import Board
from beefive.game.types import Player, Point


class Agent(abc.ABC):
    @abc.abstractmethod
    def select_move(self, board: Board, player: Player) -> Point:
        """Return the empty cell where `player` wants to play on `board`."""

    @property
    def name(self) -> str:
        return self.__class__.__name__
