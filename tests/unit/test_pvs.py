"""
Unit tests for the PVS search engine.

Tests verify:
1. Depth-1 search scores a move as the negated static eval of the child
2. Engine finds an immediate connecting move
3. PVS root scores agree with plain negamax
4. Degenerate inputs (depth 0, no moves) fall back without raising
5. Move ordering puts the TT move and captures first
"""

import sys
from pathlib import Path

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from loa_engine.engine.evaluator import SCORE_WIN, evaluate
from loa_engine.engine.move_ordering import order_moves
from loa_engine.engine.pvs import PVSEngine, search_best
from loa_engine.game.lines_of_action import Move, Piece, Position


def board_with(black=(), white=()):
    board = np.zeros(64, dtype=np.int8)
    for sq in black:
        board[sq] = Piece.BLACK
    for sq in white:
        board[sq] = Piece.WHITE
    return board


def single_move_position():
    """Black: a8 can only step to a7, h1 is boxed in."""
    return Position(board_with(black=[0, 63], white=[1, 9, 54, 55, 62]), Piece.BLACK)


def connect_in_one_position():
    """Black a8 and c8: c8-b7 joins them."""
    return Position(board_with(black=[0, 2], white=[61, 63]), Piece.BLACK)


def negamax(position, depth):
    """Reference search without pruning or TT."""
    if depth == 0:
        return evaluate(position)
    moves = position.generate_moves()
    if not moves:
        return 0
    return max(-negamax(position.apply(m), depth - 1) for m in moves)


class TestPVSEngine:
    """Test PVS search results."""

    def test_single_move_position(self):
        position = single_move_position()
        assert position.generate_moves() == [Move(0, 8)]

        result = search_best(position, depth=1)
        assert result.best_move == Move(0, 8)
        assert result.score == -evaluate(position.apply(Move(0, 8)))

    def test_single_move_deeper(self):
        result = search_best(single_move_position(), depth=3)
        assert result.best_move == Move(0, 8)
        assert result.depth_reached == 3

    def test_finds_connecting_move(self):
        position = connect_in_one_position()
        for depth in (1, 2):
            result = search_best(position, depth=depth)
            assert result.best_move == Move(2, 9)
            assert result.score == SCORE_WIN

    def test_connected_side_is_searched_past(self):
        """
        A connected side does not end the search. After any Black move White
        can play f1-g2, joining f1 and h1; at depth 3 Black must then move
        again and every leaf has White connected and to move.
        """
        position = connect_in_one_position()
        after_join = position.apply(Move(2, 9)).apply(Move(61, 54))
        assert after_join.generate_moves()
        assert -negamax(position.apply(Move(2, 9)), 2) == -SCORE_WIN

        result = search_best(position, depth=3)
        expected = max(-negamax(position.apply(m), 2) for m in position.generate_moves())
        assert expected == -SCORE_WIN
        assert result.score == expected

    def test_matches_negamax(self):
        position = Position(board_with(black=[0, 9, 27, 36, 45], white=[1, 18, 28, 35, 63]), Piece.BLACK)
        engine = PVSEngine(max_depth=2)
        result = engine.search(position)

        expected = max(-negamax(position.apply(m), 1) for m in position.generate_moves())
        assert result.score == expected

    def test_depth_zero_fallback(self):
        position = Position.initial()
        result = search_best(position, depth=0)
        assert result.best_move == position.generate_moves()[0]
        assert result.score == 0
        assert result.depth_reached == 0

    def test_no_legal_moves(self):
        # Both black pieces are boxed into corners
        position = Position(board_with(black=[0, 63], white=[1, 8, 9, 54, 55, 62]), Piece.BLACK)
        result = search_best(position, depth=3)
        assert result.best_move is None
        assert result.score == 0

    def test_principal_variation_is_legal(self):
        position = Position.initial()
        result = search_best(position, depth=2)

        assert result.principal_variation[0] == result.best_move
        current = position
        for move in result.principal_variation:
            assert move in current.generate_moves()
            current = current.apply(move)

    def test_tt_reused_between_searches(self):
        engine = PVSEngine(max_depth=2)
        position = Position(board_with(black=[0, 9, 27, 36, 45], white=[1, 18, 28, 35, 63]), Piece.BLACK)

        first = engine.search(position)
        second = engine.search(position)

        assert second.score == first.score
        assert second.tt_stats['hits'] > 0
        assert second.tt_stats['entries'] <= engine.tt.max_entries

    def test_small_tt_still_searches(self):
        result = search_best(Position.initial(), depth=2, tt_size=8)
        assert result.best_move in Position.initial().generate_moves()
        assert result.tt_stats['entries'] <= 8

    def test_time_limit_is_not_enforced(self):
        engine = PVSEngine()
        result = engine.search(single_move_position(), max_depth=2, time_limit_ms=1)
        assert result.depth_reached == 2
        assert engine.time_limit_ms == 1

    def test_verbose_prints_iterations(self, capsys):
        search_best(single_move_position(), depth=2, verbose=True)
        out = capsys.readouterr().out
        assert "info depth 1" in out
        assert "info depth 2" in out


class TestMoveOrdering:
    def test_tt_move_then_captures(self):
        position = Position(board_with(black=[32], white=[34, 63]), Piece.BLACK)
        moves = position.generate_moves()
        capture = Move(32, 34)
        assert capture in moves

        ordered = order_moves(position, moves)
        assert ordered[0] == capture

        hint = next(m for m in moves if m != capture)
        ordered = order_moves(position, moves, tt_move=hint)
        assert ordered[0] == hint
        assert ordered[1] == capture
        assert sorted(ordered) == sorted(moves)

    def test_central_destinations_first(self):
        position = Position.initial()
        ordered = order_moves(position, [Move(1, 7), Move(1, 17)])
        # b8-b6 lands closer to the center than b8-h8
        assert ordered == [Move(1, 17), Move(1, 7)]
