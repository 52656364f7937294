from __future__ import annotations

import random
from typing import Optional

from beefive.errors import NoLegalMovesError
from beefive.game.board import Board
from beefive.game.types import Player, Point

from .base import Agent


class RandomAgent(Agent):
    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def select_move(self, board: Board, player: Player) -> Point:
        moves = board.empty_points()
        if not moves:
            raise NoLegalMovesError("Board is full")
        return self.rng.choice(moves)
