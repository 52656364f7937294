"""Tests for the heuristic evaluator."""

from beefive.agent.evaluation import (
    center_bonus,
    center_distance,
    evaluate,
    line_value,
    position_value,
)
from beefive.game.board import Board
from beefive.game.types import Player, Point


def _row_of_three(block_left: bool = False) -> Board:
    b = Board()
    for c in (5, 6, 7):
        b.place(Point(5, c), Player.BLACK)
    if block_left:
        b.block(Point(5, 4))
    return b


class TestLineValue:
    def test_short_runs_are_worthless(self):
        assert line_value(0) == 0
        assert line_value(1) == 0

    def test_super_linear(self):
        assert line_value(2) == 4
        assert line_value(3) == 9
        assert line_value(4) == 16
        assert line_value(4) > 2 * line_value(2)


class TestCenter:
    def test_distance(self):
        assert center_distance(Point(4, 4)) == 1
        assert center_distance(Point(5, 5)) == 1
        assert center_distance(Point(0, 0)) == 9
        assert center_distance(Point(9, 0)) == 9

    def test_bonus(self):
        assert center_bonus(Point(4, 5)) == 9
        assert center_bonus(Point(0, 0)) == 1

    def test_position_value_on_empty_board(self):
        b = Board()
        assert position_value(b, Point(4, 4), Player.BLACK) == center_bonus(Point(4, 4))


class TestEvaluate:
    def test_empty_board_is_zero(self):
        assert evaluate(Board(), Player.BLACK) == 0

    def test_zero_sum(self):
        b = _row_of_three()
        b.place(Point(2, 2), Player.YELLOW)
        b.place(Point(2, 3), Player.YELLOW)
        assert evaluate(b, Player.BLACK) == -evaluate(b, Player.YELLOW)

    def test_own_line_is_positive(self):
        b = _row_of_three()
        assert evaluate(b, Player.BLACK) > 0
        assert evaluate(b, Player.YELLOW) < 0

    def test_open_three_beats_blocked_three(self):
        assert evaluate(_row_of_three(), Player.BLACK) > evaluate(_row_of_three(block_left=True), Player.BLACK)

    def test_does_not_mutate(self):
        b = _row_of_three()
        before = b.copy()
        evaluate(b, Player.BLACK)
        assert b == before
