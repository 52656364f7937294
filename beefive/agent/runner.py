"""Runs computer-move searches off the caller's thread.

Each reset() bumps a generation counter. A ticket from an older generation
is stale: its worker stops after the think delay and result() reports None,
so a search started before a reset never lands on the new game.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from beefive.errors import SearchCancelledError
from beefive.game.board import Board
from beefive.game.state import GameState
from beefive.game.types import Player, Point

from .config import OpponentConfig
from .opponent import request_computer_move

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchTicket:
    generation: int
    future: Future


class SearchRunner:
    def __init__(self, max_workers: int = 1) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="beefive-search")
        self._lock = threading.Lock()
        self._generation = 0
        self._cancel = threading.Event()

    @property
    def generation(self) -> int:
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        with self._lock:
            return generation != self._generation

    def _run(
        self,
        generation: int,
        cancel: threading.Event,
        board: Board,
        config: OpponentConfig,
        player: Player,
    ) -> Point:
        if config.think_delay > 0:
            cancel.wait(config.think_delay)
        if self._is_stale(generation):
            raise SearchCancelledError("Search superseded", {"generation": generation})
        move = request_computer_move(board, config, player)
        if self._is_stale(generation):
            raise SearchCancelledError("Search superseded", {"generation": generation})
        return move

    def submit(self, state: GameState, config: Optional[OpponentConfig] = None) -> SearchTicket:
        """Start a search for `state.current_player` on a snapshot of the board."""
        config = config or OpponentConfig()
        with self._lock:
            generation = self._generation
            cancel = self._cancel
        future = self._executor.submit(
            self._run, generation, cancel, state.board.copy(), config, state.current_player,
        )
        return SearchTicket(generation, future)

    def reset(self) -> None:
        """Invalidate every in-flight search."""
        with self._lock:
            self._generation += 1
            self._cancel.set()
            self._cancel = threading.Event()
        logger.debug("search runner reset to generation %d", self._generation)

    def result(self, ticket: SearchTicket, timeout: Optional[float] = None) -> Optional[Point]:
        """Wait for `ticket`; None if it was superseded by a reset."""
        if self._is_stale(ticket.generation):
            return None
        try:
            move = ticket.future.result(timeout)
        except SearchCancelledError:
            logger.debug("discarding search from generation %d", ticket.generation)
            return None
        if self._is_stale(ticket.generation):
            return None
        return move

    def shutdown(self, wait: bool = True) -> None:
        self.reset()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> SearchRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
