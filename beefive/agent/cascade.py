"""Rule-cascade opponent: ordered tactical rules per difficulty tier.

Each empty cell is classified once, then the rules are tried from the top:

    1. WIN         complete own five now
    2. BLOCK_WIN   take the cell where the opponent would complete five
    3. FORK        create two or more THREE-or-better lines at once
    4. BLOCK_FORK  take the cell where the opponent would fork
    5. EXTEND      extend own strongest open line (to THREE or better)
    6. BLOCK_LINE  block the opponent's strongest open line
    7. POSITIONAL  centre bias and proximity to own pieces

The first rule with at least one matching cell decides. Ties within that rule
are broken by a weighted draw over the top-N cells (weight 0.7**rank).
"""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import NamedTuple, Optional

from beefive.errors import NoLegalMovesError
from beefive.game.board import BOARD_SIZE, Board, format_point
from beefive.game.lines import Threat, threats
from beefive.game.types import Cell, Player, Point

from .base import Agent
from .config import Tier
from .evaluation import center_bonus, center_distance, position_value

logger = logging.getLogger(__name__)

RANK_DECAY = 0.7

# Easy tier: share of fully random moves, the rest go to a centre-biased draw
EASY_RANDOM_SHARE = 0.7
EASY_CENTER_RADIUS = 3

PROXIMITY_RADIUS = 2
ISOLATION_PENALTY = 5


class Rule(enum.IntEnum):
    WIN = 1
    BLOCK_WIN = 2
    FORK = 3
    BLOCK_FORK = 4
    EXTEND = 5
    BLOCK_LINE = 6
    POSITIONAL = 7
    RANDOM = 8


@dataclass(frozen=True)
class TierProfile:
    gaps: bool            # recognise split threes / broken fours
    top_n: int            # candidates in the weighted tie-break
    block_chance: float   # probability of honouring BLOCK_WIN
    full_cascade: bool    # rules 3-7 enabled


TIER_PROFILES: dict[Tier, TierProfile] = {
    Tier.EASY: TierProfile(gaps=False, top_n=3, block_chance=0.5, full_cascade=False),
    Tier.MEDIUM: TierProfile(gaps=False, top_n=3, block_chance=1.0, full_cascade=True),
    Tier.HARD: TierProfile(gaps=True, top_n=2, block_chance=1.0, full_cascade=True),
}


class CascadeChoice(NamedTuple):
    point: Point
    rule: Rule
    score: int


@dataclass
class _CellInfo:
    point: Point
    own: list[Threat]
    opp: list[Threat]
    basis: int  # attack + defence value, used to rank within a rule

    @property
    def own_top(self) -> Threat:
        return max(self.own)

    @property
    def opp_top(self) -> Threat:
        return max(self.opp)

    @property
    def own_forks(self) -> int:
        return sum(1 for t in self.own if t >= Threat.THREE)

    @property
    def opp_forks(self) -> int:
        return sum(1 for t in self.opp if t >= Threat.THREE)


def positional_score(board: Board, point: Point, player: Player) -> int:
    """Centre bonus plus closeness to own pieces, minus a penalty for isolation."""
    grid = board.grid
    own = player.cell
    score = center_bonus(point)
    nearby = 0
    for r in range(max(0, point.row - PROXIMITY_RADIUS), min(BOARD_SIZE, point.row + PROXIMITY_RADIUS + 1)):
        for c in range(max(0, point.col - PROXIMITY_RADIUS), min(BOARD_SIZE, point.col + PROXIMITY_RADIUS + 1)):
            cell = grid[r][c]
            if cell is Cell.EMPTY:
                continue
            nearby += 1
            if cell is own:
                distance = abs(point.row - r) + abs(point.col - c)
                if distance <= PROXIMITY_RADIUS:
                    score += 5 - distance
    if nearby == 0:
        score -= ISOLATION_PENALTY
    return score


def weighted_pick(
    scored: list[tuple[Point, int]],
    top_n: int,
    rng: random.Random,
) -> tuple[Point, int]:
    """Draw one of the best `top_n` entries with weight RANK_DECAY**rank."""
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)[:top_n]
    weights = [RANK_DECAY ** rank for rank in range(len(ranked))]
    return rng.choices(ranked, weights=weights, k=1)[0]


def _classify(board: Board, player: Player, gaps: bool) -> list[_CellInfo]:
    opponent = player.other
    infos = []
    for point in board.empty_points():
        infos.append(
            _CellInfo(
                point=point,
                own=threats(board, point, player, gaps),
                opp=threats(board, point, opponent, gaps),
                basis=position_value(board, point, player) + position_value(board, point, opponent),
            )
        )
    return infos


def _rule_candidates(rule: Rule, infos: list[_CellInfo]) -> list[tuple[Point, int]]:
    """Cells matching `rule`, each with its ranking score."""
    if rule is Rule.WIN:
        return [(i.point, i.basis) for i in infos if i.own_top is Threat.FIVE]
    if rule is Rule.BLOCK_WIN:
        return [(i.point, i.basis) for i in infos if i.opp_top is Threat.FIVE]
    if rule is Rule.FORK:
        return [(i.point, 1000 * i.own_forks + i.basis) for i in infos if i.own_forks >= 2]
    if rule is Rule.BLOCK_FORK:
        return [(i.point, 1000 * i.opp_forks + i.basis) for i in infos if i.opp_forks >= 2]
    if rule is Rule.EXTEND:
        return [(i.point, 1000 * int(i.own_top) + i.basis) for i in infos if i.own_top >= Threat.THREE]
    if rule is Rule.BLOCK_LINE:
        return [(i.point, 1000 * int(i.opp_top) + i.basis) for i in infos if i.opp_top >= Threat.THREE]
    raise ValueError(f"Rule {rule.name} is not cell-classified")


def _easy_fallback(board: Board, rng: random.Random) -> CascadeChoice:
    cells = board.empty_points()
    if rng.random() < EASY_RANDOM_SHARE:
        return CascadeChoice(rng.choice(cells), Rule.RANDOM, 0)
    central = [p for p in cells if center_distance(p) <= EASY_CENTER_RADIUS]
    return CascadeChoice(rng.choice(central or cells), Rule.POSITIONAL, 0)


def choose(board: Board, tier: Tier, player: Player, rng: random.Random) -> CascadeChoice:
    """Run the cascade for `tier` and explain the chosen cell."""
    if board.is_full():
        raise NoLegalMovesError("Board is full")

    profile = TIER_PROFILES[tier]
    infos = _classify(board, player, profile.gaps)

    rules = [Rule.WIN, Rule.BLOCK_WIN]
    if profile.full_cascade:
        rules += [Rule.FORK, Rule.BLOCK_FORK, Rule.EXTEND, Rule.BLOCK_LINE]

    for rule in rules:
        if rule is Rule.BLOCK_WIN and rng.random() >= profile.block_chance:
            continue
        scored = _rule_candidates(rule, infos)
        if scored:
            point, score = weighted_pick(scored, profile.top_n, rng)
            return CascadeChoice(point, rule, score)

    if not profile.full_cascade:
        return _easy_fallback(board, rng)

    scored = [(i.point, positional_score(board, i.point, player)) for i in infos]
    point, score = weighted_pick(scored, profile.top_n, rng)
    return CascadeChoice(point, Rule.POSITIONAL, score)


def strategy_move(
    board: Board,
    tier: Tier,
    player: Player = Player.YELLOW,
    rng: Optional[random.Random] = None,
) -> Point:
    """Cell chosen by the `tier` cascade for `player`."""
    return choose(board, tier, player, rng or random.Random()).point


class CascadeAgent(Agent):
    """Rule-cascade agent with its own RNG."""

    def __init__(self, tier: Tier = Tier.MEDIUM, seed: Optional[int] = None) -> None:
        self.tier = tier
        self.rng = random.Random(seed)

    @property
    def name(self) -> str:
        return f"CascadeAgent({self.tier.value})"

    def select_move(self, board: Board, player: Player) -> Point:
        choice = choose(board, self.tier, player, self.rng)
        logger.debug(
            "%s: %s at %s (score %d)",
            self.name, choice.rule.name, format_point(choice.point), choice.score,
        )
        return choice.point
