"""Opponent configuration."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
    """Named opponent difficulty."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Engine(str, Enum):
    """Which decision engine backs the opponent."""
    SEARCH = "search"
    CASCADE = "cascade"


class OpponentConfig(BaseModel):
    """How the computer opponent picks its moves.

    `depth` overrides the tier's reference search depth and forces the search
    engine. `think_delay` is the pause (seconds) before a move is surfaced so
    turn-taking stays perceptible; it is honoured by SearchRunner only.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tier: Tier = Tier.MEDIUM
    engine: Engine = Engine.SEARCH
    depth: Optional[int] = Field(None, ge=1, le=6)
    seed: Optional[int] = None
    think_delay: float = Field(0.5, ge=0, alias="thinkDelay")
    hard_uses_cascade: bool = Field(True, alias="hardUsesCascade")
