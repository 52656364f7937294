"""Tests for the per-turn board mutations."""

import random

import pytest

from beefive.game.board import BOARD_SIZE, Board, new_piece_ages
from beefive.game.modifiers import Schedule, get_level_modifiers
from beefive.game.mutations import (
    MudZones,
    add_random_blocks,
    add_strategic_block,
    age_pieces,
    apply_turn_effects,
    enforce_capacity,
    move_block_to_strategic,
    rearrange_board,
    remove_expired_pieces,
    remove_oldest_of_player,
    remove_random_blocks,
    shift_blocks,
    strategic_block_point,
    swap_piece_pairs,
)
from beefive.game.types import Cell, Player, Point


def _setup(black=(), yellow=(), blocked=(), ages=None):
    board = Board()
    piece_ages = new_piece_ages()
    for p in black:
        board.place(Point(*p), Player.BLACK)
    for p in yellow:
        board.place(Point(*p), Player.YELLOW)
    for p in blocked:
        board.block(Point(*p))
    for (r, c), age in (ages or {}).items():
        piece_ages[r][c] = age
    return board, piece_ages


def _cells(board: Board) -> dict:
    return {cell: len(board.points_of(cell)) for cell in Cell}


# ---------------------------------------------------------------------------
# Aging and removal
# ---------------------------------------------------------------------------

class TestAging:
    def test_age_pieces(self):
        board, ages = _setup(black=[(0, 0)], blocked=[(1, 1)], ages={(0, 0): 2, (1, 1): 9, (2, 2): 4})
        result = age_pieces(board, ages)
        assert result.piece_ages[0][0] == 3
        assert result.piece_ages[1][1] == 0
        assert result.piece_ages[2][2] == 0
        assert ages[0][0] == 2  # input untouched

    def test_remove_expired(self):
        board, ages = _setup(black=[(0, 0), (0, 1)], yellow=[(5, 5)], ages={(0, 0): 4, (0, 1): 3, (5, 5): 5})
        result = remove_expired_pieces(board, ages, lifetime=4)
        assert result.board.is_empty(Point(0, 0))
        assert result.board.is_empty(Point(5, 5))
        assert result.board.get(Point(0, 1)) is Cell.BLACK
        assert result.piece_ages[0][0] == 0
        assert board.get(Point(0, 0)) is Cell.BLACK

    def test_enforce_capacity_removes_oldest(self):
        board, ages = _setup(
            black=[(0, 0), (0, 1)],
            yellow=[(1, 0), (1, 1)],
            ages={(0, 0): 1, (0, 1): 7, (1, 0): 5, (1, 1): 2},
        )
        result = enforce_capacity(board, ages, max_pieces=2)
        assert result.board.piece_count == 2
        assert result.board.is_empty(Point(0, 1))
        assert result.board.is_empty(Point(1, 0))

    def test_enforce_capacity_under_limit(self):
        board, ages = _setup(black=[(0, 0)])
        result = enforce_capacity(board, ages, max_pieces=35)
        assert result.board == board
        assert result.board is not board

    def test_remove_oldest_of_player(self):
        board, ages = _setup(
            black=[(0, 0), (0, 1)],
            yellow=[(9, 9)],
            ages={(0, 0): 2, (0, 1): 6, (9, 9): 10},
        )
        result = remove_oldest_of_player(board, ages, Player.BLACK)
        assert result.board.is_empty(Point(0, 1))
        assert result.board.get(Point(0, 0)) is Cell.BLACK
        assert result.board.get(Point(9, 9)) is Cell.YELLOW


# ---------------------------------------------------------------------------
# Obstacles
# ---------------------------------------------------------------------------

class TestBlocks:
    def test_add_random_blocks(self):
        board, ages = _setup(black=[(5, 5)])
        result = add_random_blocks(board, ages, 3, random.Random(1))
        assert len(result.board.points_of(Cell.BLOCKED)) == 3
        assert result.board.get(Point(5, 5)) is Cell.BLACK

    def test_add_more_blocks_than_cells(self):
        board = Board([[Cell.BLOCKED] * BOARD_SIZE for _ in range(BOARD_SIZE)])
        board.remove(Point(0, 0))
        result = add_random_blocks(board, new_piece_ages(), 5, random.Random(1))
        assert result.board.is_full()

    def test_remove_random_blocks(self):
        board, ages = _setup(blocked=[(0, 0), (4, 4), (9, 9)])
        result = remove_random_blocks(board, ages, 2, random.Random(2))
        assert len(result.board.points_of(Cell.BLOCKED)) == 1

    def test_shift_wraps(self):
        board, ages = _setup(blocked=[(2, 3), (4, 9), (9, 9)])
        result = shift_blocks(board, ages)
        assert sorted(result.board.points_of(Cell.BLOCKED)) == [Point(0, 0), Point(2, 4), Point(5, 0)]

    def test_shift_skips_pieces(self):
        board, ages = _setup(blocked=[(3, 3)], black=[(3, 4)])
        result = shift_blocks(board, ages)
        assert result.board.points_of(Cell.BLOCKED) == [Point(3, 5)]
        assert result.board.get(Point(3, 4)) is Cell.BLACK

    def test_strategic_point_hugs_human_line(self):
        board, _ = _setup(black=[(5, 3), (5, 4), (5, 5)])
        point = strategic_block_point(board)
        assert point in (Point(5, 2), Point(5, 6))

    def test_strategic_point_full_board(self):
        board = Board([[Cell.BLOCKED] * BOARD_SIZE for _ in range(BOARD_SIZE)])
        assert strategic_block_point(board) is None

    def test_add_strategic_block(self):
        board, ages = _setup(black=[(5, 3), (5, 4), (5, 5)])
        result = add_strategic_block(board, ages)
        assert result.board.get(strategic_block_point(board)) is Cell.BLOCKED

    def test_move_block_to_strategic(self):
        board, ages = _setup(black=[(5, 3), (5, 4), (5, 5)], blocked=[(0, 9)])
        result = move_block_to_strategic(board, ages, random.Random(0))
        assert result.board.is_empty(Point(0, 9))
        assert result.board.points_of(Cell.BLOCKED) == [strategic_block_point(board)]

    def test_move_block_without_blocks(self):
        board, ages = _setup(black=[(5, 5)])
        assert move_block_to_strategic(board, ages, random.Random(0)).board == board


# ---------------------------------------------------------------------------
# Reshuffles
# ---------------------------------------------------------------------------

class TestReshuffles:
    def test_rearrange_preserves_contents(self):
        board, ages = _setup(
            black=[(9, 9), (5, 5)],
            yellow=[(7, 2)],
            blocked=[(3, 3)],
            ages={(9, 9): 4, (5, 5): 1, (7, 2): 3},
        )
        result = rearrange_board(board, ages, random.Random(7))
        assert _cells(result.board) == _cells(board)
        # Occupied cells are packed into the first row
        assert all(not result.board.is_empty(Point(0, c)) for c in range(4))
        assert sorted(result.piece_ages[0][:4]) == [0, 1, 3, 4]

    def test_swap_pairs(self):
        board, ages = _setup(
            black=[(0, 0), (0, 1)],
            yellow=[(9, 8), (9, 9)],
            ages={(0, 0): 1, (0, 1): 2, (9, 8): 3, (9, 9): 4},
        )
        result = swap_piece_pairs(board, ages, 2, random.Random(0))
        for p in (Point(0, 0), Point(0, 1)):
            assert result.board.get(p) is Cell.YELLOW
        for p in (Point(9, 8), Point(9, 9)):
            assert result.board.get(p) is Cell.BLACK
        assert sorted(result.piece_ages[0][:2]) == [3, 4]

    def test_swap_needs_enough_pieces(self):
        board, ages = _setup(black=[(0, 0), (0, 1), (0, 2)], yellow=[(9, 9), (9, 8)])
        result = swap_piece_pairs(board, ages, 3, random.Random(0))
        assert result.board == board


# ---------------------------------------------------------------------------
# Mud zones
# ---------------------------------------------------------------------------

class TestMudZones:
    def test_from_level(self):
        mud = MudZones.for_level(get_level_modifiers(400))
        assert len(mud.zones) == 5
        assert mud.stuck_turns == 2

    def test_enter_and_tick(self):
        mud = MudZones((Point(3, 3),), stuck_turns=2)
        mud = mud.enter(Point(3, 3), Player.BLACK)
        assert mud.is_stuck(Player.BLACK)
        assert not mud.is_stuck(Player.YELLOW)
        mud = mud.tick()
        assert mud.is_stuck(Player.BLACK)
        mud = mud.tick()
        assert not mud.is_stuck(Player.BLACK)
        assert mud.stuck == {}

    def test_enter_dry_cell(self):
        mud = MudZones((Point(3, 3),))
        assert mud.enter(Point(4, 4), Player.YELLOW) is mud


# ---------------------------------------------------------------------------
# Turn driver
# ---------------------------------------------------------------------------

class TestApplyTurnEffects:
    def test_plain_level_only_ages(self):
        board, ages = _setup(black=[(5, 5)])
        result = apply_turn_effects(board, ages, get_level_modifiers(12), 1, random.Random(0))
        assert result.board == board
        assert result.piece_ages[5][5] == 1

    def test_lifetime_removes_old_pieces(self):
        mods = get_level_modifiers(504)
        board, ages = _setup(black=[(5, 5)], yellow=[(4, 4)], ages={(5, 5): 3, (4, 4): 1})
        result = apply_turn_effects(board, ages, mods, 1, random.Random(0))
        assert result.board.is_empty(Point(5, 5))
        assert result.board.get(Point(4, 4)) is Cell.YELLOW

    def test_progressive_blocks_on_schedule(self):
        mods = get_level_modifiers(63)
        assert mods.progressive_blocks == Schedule(1, 5)
        board, ages = _setup()
        quiet = apply_turn_effects(board, ages, mods, 4, random.Random(0))
        assert quiet.board.points_of(Cell.BLOCKED) == []
        due = apply_turn_effects(board, ages, mods, 5, random.Random(0))
        assert len(due.board.points_of(Cell.BLOCKED)) == 1

    def test_shifting_every_move(self):
        mods = get_level_modifiers(257)
        board = Board()
        for p in mods.blocked_cells:
            board.block(p)
        result = apply_turn_effects(board, new_piece_ages(), mods, 1, random.Random(0))
        assert len(result.board.points_of(Cell.BLOCKED)) == len(mods.blocked_cells)
        assert result.board != board

    @pytest.mark.parametrize("move_count", [1, 15, 30])
    def test_never_mutates_inputs(self, move_count):
        mods = get_level_modifiers(50, 4)
        board, ages = _setup(black=[(0, 0), (0, 1), (0, 2)], yellow=[(9, 9), (9, 8)])
        before_board, before_ages = board.copy(), [list(r) for r in ages]
        apply_turn_effects(board, ages, mods, move_count, random.Random(0))
        assert board == before_board
        assert ages == before_ages
