"""Per-turn board mutations driven by a level's ModifierSet.

Every function is pure: it takes a board and its piece-age grid and returns a
fresh Mutation, leaving the inputs untouched. Randomness always comes from the
`rng` argument so callers control reproducibility.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from .board import BOARD_SIZE, Board, PieceAges, copy_piece_ages, format_point
from .lines import AXES, REACH
from .modifiers import ModifierSet
from .types import Cell, Player, Point

logger = logging.getLogger(__name__)

PROXIMITY_RADIUS = 2


class Mutation(NamedTuple):
    board: Board
    piece_ages: PieceAges


def _fresh(board: Board, piece_ages: PieceAges) -> Mutation:
    return Mutation(board.copy(), copy_piece_ages(piece_ages))


def _pieces_oldest_first(board: Board, ages: PieceAges, player: Optional[Player] = None) -> list[Point]:
    """Piece cells sorted by age, oldest first; ties stay in row-major order."""
    if player is None:
        cells = [p for p in board.points() if board.get(p).is_piece]
    else:
        cells = board.points_of(player.cell)
    return sorted(cells, key=lambda p: ages[p.row][p.col], reverse=True)


def _clear(result: Mutation, point: Point) -> None:
    result.board.remove(point)
    result.piece_ages[point.row][point.col] = 0


# ---------------------------------------------------------------------------
# Piece aging and removal
# ---------------------------------------------------------------------------

def age_pieces(board: Board, piece_ages: PieceAges) -> Mutation:
    """+1 for every piece, 0 for every other cell."""
    ages = [
        [piece_ages[r][c] + 1 if board.grid[r][c].is_piece else 0 for c in range(BOARD_SIZE)]
        for r in range(BOARD_SIZE)
    ]
    return Mutation(board.copy(), ages)


def remove_expired_pieces(board: Board, piece_ages: PieceAges, lifetime: int) -> Mutation:
    """Remove every piece whose age has reached `lifetime`."""
    result = _fresh(board, piece_ages)
    for point in _pieces_oldest_first(board, piece_ages):
        if piece_ages[point.row][point.col] >= lifetime:
            _clear(result, point)
    return result


def enforce_capacity(board: Board, piece_ages: PieceAges, max_pieces: int = 35) -> Mutation:
    """Remove the oldest pieces until at most `max_pieces` remain."""
    excess = board.piece_count - max_pieces
    if excess <= 0:
        return _fresh(board, piece_ages)
    result = _fresh(board, piece_ages)
    for point in _pieces_oldest_first(board, piece_ages)[:excess]:
        _clear(result, point)
    return result


def remove_oldest_of_player(
    board: Board,
    piece_ages: PieceAges,
    player: Player,
    count: int = 1,
) -> Mutation:
    result = _fresh(board, piece_ages)
    for point in _pieces_oldest_first(board, piece_ages, player)[:count]:
        _clear(result, point)
    return result


# ---------------------------------------------------------------------------
# Obstacles
# ---------------------------------------------------------------------------

def add_random_blocks(board: Board, piece_ages: PieceAges, count: int, rng: random.Random) -> Mutation:
    """Block up to `count` random empty cells."""
    result = _fresh(board, piece_ages)
    empty = board.empty_points()
    for point in rng.sample(empty, min(count, len(empty))):
        result.board.block(point)
    return result


def remove_random_blocks(board: Board, piece_ages: PieceAges, count: int, rng: random.Random) -> Mutation:
    """Clear up to `count` random obstacles."""
    result = _fresh(board, piece_ages)
    blocks = board.points_of(Cell.BLOCKED)
    for point in rng.sample(blocks, min(count, len(blocks))):
        result.board.remove(point)
    return result


def _next_cell(point: Point) -> Point:
    """One step right, wrapping to the start of the next row (and back to the top)."""
    if point.col + 1 < BOARD_SIZE:
        return Point(point.row, point.col + 1)
    return Point((point.row + 1) % BOARD_SIZE, 0)


def shift_blocks(board: Board, piece_ages: PieceAges) -> Mutation:
    """Move every obstacle one cell right, wrapping rows.

    Obstacles are lifted first, then re-placed in row-major order; an
    obstacle whose target is taken slides on to the next empty cell.
    """
    result = _fresh(board, piece_ages)
    blocks = board.points_of(Cell.BLOCKED)
    for point in blocks:
        result.board.remove(point)
    for point in blocks:
        target = _next_cell(point)
        for _ in range(BOARD_SIZE * BOARD_SIZE):
            if result.board.is_empty(target):
                result.board.block(target)
                break
            target = _next_cell(target)
    return result


def _blocking_value(board: Board, point: Point, player: Player) -> int:
    """10 per piece on each axis through `point` holding two or more of `player`'s pieces."""
    grid = board.grid
    own = player.cell
    value = 0
    for dr, dc in AXES:
        count = 0
        for i in range(-REACH, REACH + 1):
            r, c = point.row + i * dr, point.col + i * dc
            if not (0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE):
                continue
            cell = grid[r][c]
            if cell is own:
                count += 1
            elif cell is not Cell.EMPTY:
                break
        if count >= 2:
            value += count * 10
    return value


def _proximity_value(board: Board, point: Point, player: Player) -> int:
    grid = board.grid
    own = player.cell
    value = 0
    for dr in range(-PROXIMITY_RADIUS, PROXIMITY_RADIUS + 1):
        for dc in range(-PROXIMITY_RADIUS, PROXIMITY_RADIUS + 1):
            r, c = point.row + dr, point.col + dc
            if 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and grid[r][c] is own:
                value += max(0, 5 - abs(dr) - abs(dc))
    return value


def strategic_block_point(board: Board, human: Player = Player.BLACK) -> Optional[Point]:
    """Empty cell where an obstacle hurts `human` most, or None on a full board.

    Scores lines of the human's pieces and closeness to them, plus lines of
    the computer's pieces. The first best cell in row-major order wins.
    """
    best: Optional[Point] = None
    best_score = -1
    for point in board.empty_points():
        score = (
            _blocking_value(board, point, human)
            + _proximity_value(board, point, human)
            + _blocking_value(board, point, human.other)
        )
        if score > best_score:
            best, best_score = point, score
    return best


def add_strategic_block(board: Board, piece_ages: PieceAges, human: Player = Player.BLACK) -> Mutation:
    result = _fresh(board, piece_ages)
    point = strategic_block_point(board, human)
    if point is not None:
        result.board.block(point)
    return result


def move_block_to_strategic(
    board: Board,
    piece_ages: PieceAges,
    rng: random.Random,
    human: Player = Player.BLACK,
) -> Mutation:
    """Lift one random obstacle and drop it on the strategic cell."""
    result = _fresh(board, piece_ages)
    blocks = board.points_of(Cell.BLOCKED)
    if not blocks:
        return result
    result.board.remove(rng.choice(blocks))
    target = strategic_block_point(result.board, human)
    if target is not None:
        result.board.block(target)
    return result


# ---------------------------------------------------------------------------
# Whole-board reshuffles
# ---------------------------------------------------------------------------

def rearrange_board(board: Board, piece_ages: PieceAges, rng: random.Random) -> Mutation:
    """Shuffle every non-empty cell (with its age) and repack them in row-major order."""
    occupied = [
        (board.get(p), piece_ages[p.row][p.col])
        for p in board.points()
        if not board.is_empty(p)
    ]
    rng.shuffle(occupied)

    new_board = Board()
    ages = [[0] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    for index, (cell, age) in enumerate(occupied):
        point = Point(*divmod(index, BOARD_SIZE))
        new_board.set(point, cell)
        ages[point.row][point.col] = age
    return Mutation(new_board, ages)


def swap_piece_pairs(board: Board, piece_ages: PieceAges, pairs: int, rng: random.Random) -> Mutation:
    """Exchange `pairs` random BLACK/YELLOW piece pairs, ages included.

    Does nothing unless both players have at least `pairs` pieces.
    """
    result = _fresh(board, piece_ages)
    black = board.points_of(Cell.BLACK)
    yellow = board.points_of(Cell.YELLOW)
    if len(black) < pairs or len(yellow) < pairs:
        return result

    ages = result.piece_ages
    for _ in range(pairs):
        b = black.pop(rng.randrange(len(black)))
        y = yellow.pop(rng.randrange(len(yellow)))
        result.board.set(b, Cell.YELLOW)
        result.board.set(y, Cell.BLACK)
        ages[b.row][b.col], ages[y.row][y.col] = ages[y.row][y.col], ages[b.row][b.col]
    return result


# ---------------------------------------------------------------------------
# Mud zones
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MudZones:
    """Mud cells and how many more turns each player stays stuck."""

    zones: tuple[Point, ...] = ()
    stuck_turns: int = 2
    stuck: dict[Player, int] = field(default_factory=dict)

    @classmethod
    def for_level(cls, modifiers: ModifierSet) -> MudZones:
        return cls(modifiers.mud_zones, modifiers.mud_stuck_turns)

    def contains(self, point: Point) -> bool:
        return point in self.zones

    def is_stuck(self, player: Player) -> bool:
        return self.stuck.get(player, 0) > 0

    def enter(self, point: Point, player: Player) -> MudZones:
        """Record `player` landing on `point`; landing in mud gets them stuck."""
        if not self.contains(point):
            return self
        stuck = dict(self.stuck)
        stuck[player] = self.stuck_turns
        logger.debug("%s stuck in mud at %s for %d turns", player, format_point(point), self.stuck_turns)
        return MudZones(self.zones, self.stuck_turns, stuck)

    def tick(self) -> MudZones:
        """One turn passes: every count drops by one and expired entries go."""
        stuck = {player: turns - 1 for player, turns in self.stuck.items() if turns > 1}
        return MudZones(self.zones, self.stuck_turns, stuck)


# ---------------------------------------------------------------------------
# Turn driver
# ---------------------------------------------------------------------------

def apply_turn_effects(
    board: Board,
    piece_ages: PieceAges,
    modifiers: ModifierSet,
    move_count: int,
    rng: random.Random,
) -> Mutation:
    """Run every effect scheduled for the move that just brought the game to `move_count`."""
    result = age_pieces(board, piece_ages)
    applied = []

    if modifiers.piece_lifetime is not None:
        result = remove_expired_pieces(*result, modifiers.piece_lifetime)
    if modifiers.capacity is not None:
        result = enforce_capacity(*result, modifiers.capacity)

    schedule = modifiers.progressive_blocks
    if schedule is not None and schedule.due(move_count):
        result = add_random_blocks(*result, schedule.count, rng)
        applied.append("progressive blocks")
    schedule = modifiers.disappearing_blocks
    if schedule is not None and schedule.due(move_count):
        result = remove_random_blocks(*result, schedule.count, rng)
        applied.append("disappearing blocks")
    if modifiers.shifting_blocks:
        result = shift_blocks(*result)
    schedule = modifiers.roaming_block
    if schedule is not None and schedule.due(move_count):
        result = move_block_to_strategic(*result, rng)
        applied.append("roaming block")
    schedule = modifiers.strategic_block
    if schedule is not None and schedule.due(move_count):
        result = add_strategic_block(*result)
        applied.append("strategic block")
    schedule = modifiers.series_block
    if schedule is not None and schedule.due(move_count):
        result = add_random_blocks(*result, schedule.count, rng)
        applied.append("series block")
    schedule = modifiers.remove_oldest
    if schedule is not None and schedule.due(move_count):
        result = remove_oldest_of_player(*result, Player.BLACK, schedule.count)
        applied.append("oldest piece removed")
    schedule = modifiers.rearrange
    if schedule is not None and schedule.due(move_count):
        result = rearrange_board(*result, rng)
        applied.append("rearrange")
    schedule = modifiers.swap
    if schedule is not None and schedule.due(move_count):
        result = swap_piece_pairs(*result, schedule.count, rng)
        applied.append("swap")

    if applied:
        logger.debug("level %d move %d: %s", modifiers.level, move_count, ", ".join(applied))
    return result
