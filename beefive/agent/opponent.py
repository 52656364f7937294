"""Routes a computer-move request to the configured engine.

A failing engine must never stall the game: any error (or an illegal answer)
is logged and replaced by a uniformly random legal move.
"""

from __future__ import annotations

import logging
from typing import Optional

from beefive.errors import NoLegalMovesError
from beefive.game.board import Board, format_point, is_on_grid
from beefive.game.types import Player, Point

from .base import Agent
from .cascade import CascadeAgent
from .config import Engine, OpponentConfig, Tier
from .random_agent import RandomAgent
from .search import TIER_DEPTHS, MinimaxAgent

logger = logging.getLogger(__name__)


def create_agent(config: OpponentConfig) -> Agent:
    """Build the agent described by `config`.

    An explicit depth always selects the search engine. Otherwise the HARD
    search tier hands over to the hard cascade unless `hard_uses_cascade`
    is off.
    """
    if config.depth is not None:
        return MinimaxAgent(depth=config.depth)
    if config.engine is Engine.CASCADE:
        return CascadeAgent(config.tier, seed=config.seed)
    if config.tier is Tier.HARD and config.hard_uses_cascade:
        return CascadeAgent(Tier.HARD, seed=config.seed)
    return MinimaxAgent(depth=TIER_DEPTHS[config.tier])


def request_computer_move(
    board: Board,
    config: Optional[OpponentConfig] = None,
    player: Player = Player.YELLOW,
    agent: Optional[Agent] = None,
) -> Point:
    """Choose the computer's next cell on `board`.

    Raises NoLegalMovesError when no EMPTY cell remains (the caller ends the
    game as a draw). `agent` overrides the one built from `config`.
    """
    if config is None:
        config = OpponentConfig()
    if board.is_full():
        raise NoLegalMovesError("Board is full", {"player": str(player)})

    if agent is None:
        agent = create_agent(config)

    try:
        move = agent.select_move(board.copy(), player)
    except Exception:
        logger.exception("%s failed, falling back to a random move", agent.name)
        return RandomAgent(config.seed).select_move(board, player)

    if not is_on_grid(move) or not board.is_empty(move):
        logger.warning(
            "%s returned illegal cell %s, falling back to a random move",
            agent.name, move,
        )
        return RandomAgent(config.seed).select_move(board, player)

    logger.debug("%s plays %s for %s", agent.name, format_point(move), player)
    return move
