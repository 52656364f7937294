"""Deterministic per-level modifiers: obstacles, piece aging and board mutations.

Everything here is a pure function of (level, match). Obstacle and mud-zone
positions come from a small linear-congruential generator seeded from the
level number, so a given level always has the same layout.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional

from .board import BOARD_SIZE, Board, format_point
from .types import Player, Point

# LCG constants
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

MUD_ZONE_COUNT = 5
MUD_SEED_FACTOR = 7
MUD_STUCK_TURNS = 2

DEFAULT_CAPACITY = 35
DEFAULT_TIME_LIMIT = 15

# Moves between the periodic block effects that have no fixed cadence of their own
DISAPPEARING_BLOCKS_INTERVAL = 6
ROAMING_BLOCK_INTERVAL = 6
STRATEGIC_BLOCK_INTERVAL = 6
SERIES_BLOCK_INTERVAL = 6
OLDEST_PIECE_INTERVAL = 6

# (first level, last level, seconds); levels outside every band get DEFAULT_TIME_LIMIT
TIME_LIMITS = [
    (1, 200, 12),
    (201, 400, 10),
    (401, 600, 9),
    (601, 800, 8),
    (801, 1000, 7),
    (1001, 1200, 6),
    (1201, 1400, 5),
    (1401, 1600, 4),
    (1601, 1800, 3),
    (1801, 2000, 2),
]


class SeededRandom:
    """The level generator's LCG: seed = (seed * 9301 + 49297) % 233280."""

    def __init__(self, seed: int) -> None:
        self.seed = seed

    def random(self) -> float:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS

    def point(self) -> Point:
        row = int(self.random() * BOARD_SIZE)
        col = int(self.random() * BOARD_SIZE)
        return Point(row, col)


def sample_positions(seed: int, count: int, exclude: Iterable[Point] = ()) -> list[Point]:
    """Draw `count` distinct cells from an LCG seeded with `seed`.

    Duplicates (and cells in `exclude`) are skipped, so the result is always
    `count` long as long as enough cells remain.
    """
    used = set(exclude)
    assert 0 <= count <= BOARD_SIZE * BOARD_SIZE - len(used), "Not enough cells"
    rng = SeededRandom(seed)
    positions: list[Point] = []
    while len(positions) < count:
        point = rng.point()
        if point not in used:
            used.add(point)
            positions.append(point)
    return positions


# ---------------------------------------------------------------------------
# Gate predicates
# ---------------------------------------------------------------------------

def _last_digit(level: int) -> int:
    return level % 10


def _multiple_of_10_not_50(level: int) -> bool:
    return level % 10 == 0 and level % 50 != 0


def ends_with_3(level: int) -> bool:
    """Progressive blocks."""
    return _last_digit(level) == 3 and level > 50


def ends_with_4(level: int) -> bool:
    """16 blocks that disappear over time."""
    return _last_digit(level) == 4 and level >= 400


def ends_with_5(level: int) -> bool:
    return _last_digit(level) == 5 and level >= 100


def ends_with_7(level: int) -> bool:
    return _last_digit(level) == 7 and level >= 27


def ends_with_8(level: int) -> bool:
    return _last_digit(level) == 8 and level >= 38


def ends_with_9(level: int) -> bool:
    return _last_digit(level) == 9 and level >= 50


def shifting_blocks(level: int) -> bool:
    return (_last_digit(level) == 7 and level > 250) or (_last_digit(level) == 8 and level > 600)


def roaming_block(level: int) -> bool:
    return ends_with_9(level) and level >= 400


def multiple_of_10_match_1_from(level: int, match: int, start: int) -> bool:
    return level >= start and _multiple_of_10_not_50(level) and match == 1


def multiple_of_10_match_2_from(level: int, match: int, start: int) -> bool:
    return level >= start and _multiple_of_10_not_50(level) and match == 2


def multiple_of_50_match(level: int, match: int, wanted: int) -> bool:
    return level % 50 == 0 and match == wanted


def has_mud_zones(level: int) -> bool:
    return level % 200 == 0


def is_mud_stage(level: int) -> bool:
    return level % 40 == 0


def lifetime_4(level: int) -> bool:
    return 500 <= level <= 1000 and level % 7 == 0


def lifetime_3(level: int) -> bool:
    return level >= 1000 and level % 4 == 0


def has_capacity_limit(level: int) -> bool:
    return level % 17 == 0


def is_first_game_of_series(level: int) -> bool:
    """200, 250, 300, ... open a five-match series."""
    return level >= 200 and (level - 200) % 50 == 0


def ends_with_1_after_200(level: int) -> bool:
    """Levels ending in 1 from 200 on, except the first five games of a series."""
    if level < 200 or _last_digit(level) != 1:
        return False
    series_start = (level - 200) // 50 * 50 + 200
    return not 0 <= level - series_start <= 4


def ends_with_1_in_ranges(level: int) -> bool:
    if _last_digit(level) != 1:
        return False
    return 500 <= level <= 700 or 1001 <= level <= 1591


def is_challenge_stage(level: int) -> bool:
    """42, 92, 142, ... (42 + 50n)."""
    return level >= 42 and (level - 42) % 50 == 0


# ---------------------------------------------------------------------------
# Parameter tables
# ---------------------------------------------------------------------------

class Schedule(NamedTuple):
    """Apply an effect of magnitude `count` every `interval` moves."""
    count: int
    interval: int

    def due(self, move_count: int) -> bool:
        return move_count > 0 and move_count % self.interval == 0


def progressive_block_rule(level: int) -> Optional[Schedule]:
    """Blocks added per trigger and the trigger interval; None below level 50."""
    if 50 <= level <= 200:
        return Schedule(1, 5)
    if 201 <= level <= 399:
        return Schedule(1, 4)
    if 400 <= level <= 599:
        return Schedule(2, 5)
    if 600 <= level <= 799:
        return Schedule(2, 4)
    if level >= 800:
        return Schedule(2, 3)
    return None


def blocked_cell_count(level: int, match: int = 1) -> int:
    if _last_digit(level) == 3:
        return 0
    if ends_with_4(level):
        return 16
    if ends_with_5(level):
        return 5
    if ends_with_7(level):
        return 6
    if ends_with_8(level):
        return 8
    if ends_with_9(level):
        return 10
    if multiple_of_10_match_1_from(level, match, 60):
        return 5
    if level % 5 == 0:
        return 4
    return 0


def turn_time_limit(level: int) -> int:
    """Seconds per turn. A parameter only; the core runs no clock."""
    for first, last, seconds in TIME_LIMITS:
        if first <= level <= last:
            return seconds
    return DEFAULT_TIME_LIMIT


def starting_player(level: int) -> Player:
    """YELLOW (the computer) opens levels ending in 1 and the special-mechanic levels."""
    digit = _last_digit(level)
    computer_first = (
        digit == 1
        or (digit == 3 and level > 50)
        or (digit == 4 and level >= 400)
        or (digit == 5 and level >= 100)
        or (digit == 7 and level >= 27)
        or (digit == 8 and level >= 600)
        or (digit == 9 and level >= 50)
    )
    return Player.YELLOW if computer_first else Player.BLACK


def generate_blocked_cells(level: int, match: int = 1) -> list[Point]:
    return sample_positions(level, blocked_cell_count(level, match))


def generate_mud_zones(level: int) -> list[Point]:
    if not has_mud_zones(level):
        return []
    return sample_positions(level * MUD_SEED_FACTOR, MUD_ZONE_COUNT)


# ---------------------------------------------------------------------------
# ModifierSet
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ModifierSet:
    level: int
    match: int
    starting_player: Player
    time_limit: int
    blocked_cells: tuple[Point, ...] = ()
    blind_play: bool = False
    blind_after_moves: Optional[int] = None
    mud_zones: tuple[Point, ...] = ()
    mud_stage: bool = False
    mud_stuck_turns: int = 0
    piece_lifetime: Optional[int] = None
    capacity: Optional[int] = None
    progressive_blocks: Optional[Schedule] = None
    disappearing_blocks: Optional[Schedule] = None
    shifting_blocks: bool = False
    roaming_block: Optional[Schedule] = None
    strategic_block: Optional[Schedule] = None
    series_block: Optional[Schedule] = None
    remove_oldest: Optional[Schedule] = None
    rearrange: Optional[Schedule] = None
    swap: Optional[Schedule] = None
    challenge_stage: bool = False

    def to_dict(self) -> dict:
        def schedule(value: Optional[Schedule]) -> Optional[dict]:
            if value is None:
                return None
            return {"count": value.count, "interval": value.interval}

        return {
            "level": self.level,
            "match": self.match,
            "startingPlayer": str(self.starting_player),
            "timeLimit": self.time_limit,
            "blockedCells": [format_point(p) for p in self.blocked_cells],
            "blindPlay": self.blind_play,
            "blindAfterMoves": self.blind_after_moves,
            "mudZones": [format_point(p) for p in self.mud_zones],
            "mudStage": self.mud_stage,
            "mudStuckTurns": self.mud_stuck_turns,
            "pieceLifetime": self.piece_lifetime,
            "capacity": self.capacity,
            "progressiveBlocks": schedule(self.progressive_blocks),
            "disappearingBlocks": schedule(self.disappearing_blocks),
            "shiftingBlocks": self.shifting_blocks,
            "roamingBlock": schedule(self.roaming_block),
            "strategicBlock": schedule(self.strategic_block),
            "seriesBlock": schedule(self.series_block),
            "removeOldest": schedule(self.remove_oldest),
            "rearrange": schedule(self.rearrange),
            "swap": schedule(self.swap),
            "challengeStage": self.challenge_stage,
        }

    def to_json(self) -> str:
        """Canonical JSON: equal modifier sets serialize to identical text."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def _piece_lifetime(level: int) -> Optional[int]:
    if lifetime_4(level):
        return 4
    if lifetime_3(level):
        return 3
    return None


def _swap_schedule(level: int, match: int) -> Optional[Schedule]:
    if multiple_of_50_match(level, match, 4):
        return Schedule(2, 15)
    if multiple_of_10_match_2_from(level, match, 1200):
        return Schedule(3, 15)
    if multiple_of_10_match_2_from(level, match, 30):
        return Schedule(2, 17)
    return None


def _blind_after(level: int, match: int) -> Optional[int]:
    if multiple_of_10_match_1_from(level, match, 810):
        return 17
    if multiple_of_10_match_1_from(level, match, 110):
        return 21
    return None


def get_level_modifiers(level: int, match: int = 1) -> ModifierSet:
    """Every modifier active at (`level`, `match`). Pure and deterministic."""
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")
    if match < 1:
        raise ValueError(f"match must be >= 1, got {match}")

    blind_play = multiple_of_50_match(level, match, 2)
    mud_zones = tuple(generate_mud_zones(level))

    return ModifierSet(
        level=level,
        match=match,
        starting_player=starting_player(level),
        time_limit=turn_time_limit(level),
        blocked_cells=() if blind_play else tuple(generate_blocked_cells(level, match)),
        blind_play=blind_play,
        blind_after_moves=_blind_after(level, match),
        mud_zones=mud_zones,
        mud_stage=is_mud_stage(level),
        mud_stuck_turns=MUD_STUCK_TURNS if mud_zones else 0,
        piece_lifetime=_piece_lifetime(level),
        capacity=DEFAULT_CAPACITY if has_capacity_limit(level) else None,
        progressive_blocks=progressive_block_rule(level) if ends_with_3(level) else None,
        disappearing_blocks=Schedule(2, DISAPPEARING_BLOCKS_INTERVAL) if ends_with_4(level) else None,
        shifting_blocks=shifting_blocks(level),
        roaming_block=Schedule(1, ROAMING_BLOCK_INTERVAL) if roaming_block(level) else None,
        strategic_block=(
            Schedule(1, STRATEGIC_BLOCK_INTERVAL) if ends_with_1_after_200(level) else None
        ),
        series_block=Schedule(1, SERIES_BLOCK_INTERVAL) if is_first_game_of_series(level) else None,
        remove_oldest=Schedule(1, OLDEST_PIECE_INTERVAL) if ends_with_1_in_ranges(level) else None,
        rearrange=Schedule(1, 21) if multiple_of_50_match(level, match, 3) else None,
        swap=_swap_schedule(level, match),
        challenge_stage=is_challenge_stage(level),
    )


def initial_board(modifiers: ModifierSet) -> Board:
    """Empty board with the level's obstacles in place."""
    board = Board()
    for point in modifiers.blocked_cells:
        board.block(point)
    return board
