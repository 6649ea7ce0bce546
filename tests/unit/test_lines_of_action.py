"""
Unit tests for the Lines of Action position model.

Tests verify:
1. Move distance equals the piece count on the full line
2. Moves never land on the mover's own pieces, never jump opponents
3. apply() is pure, deterministic and captures by landing
4. Incremental Zobrist keys match full recomputation
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from loa_engine.game.lines_of_action import DIRECTIONS, Move, Piece, Position
from loa_engine.game.notation import apply_algebraic_moves
from loa_engine.game.zobrist import get_zobrist_hasher


def board_with(black=(), white=()):
    board = np.zeros(64, dtype=np.int8)
    for sq in black:
        board[sq] = Piece.BLACK
    for sq in white:
        board[sq] = Piece.WHITE
    return board


def line_count(board, sq, dx, dy):
    """Pieces on the full line through sq along (dx, dy), origin included."""
    x, y = sq % 8, sq // 8
    count = 1
    for sign in (1, -1):
        cx, cy = x + sign * dx, y + sign * dy
        while 0 <= cx < 8 and 0 <= cy < 8:
            if board[cy * 8 + cx] != 0:
                count += 1
            cx += sign * dx
            cy += sign * dy
    return count


def direction_and_distance(move):
    fx, fy = move.from_sq % 8, move.from_sq // 8
    tx, ty = move.to_sq % 8, move.to_sq // 8
    dist = max(abs(tx - fx), abs(ty - fy))
    return ((tx - fx) // dist, (ty - fy) // dist), dist


def sample_positions():
    start = Position.initial()
    return [
        start,
        start.with_side_to_move(Piece.WHITE),
        apply_algebraic_moves(start, "b1-b3 a2-c2 c8-a6"),
        Position(board_with(black=[0, 9, 27, 36, 45], white=[1, 18, 28, 35, 63]), Piece.WHITE),
    ]


class TestMoveGeneration:
    """Test the LoA movement rule."""

    def test_initial_position_move_count(self):
        """Both sides have 36 moves in the standard start."""
        start = Position.initial()
        assert len(start.generate_moves()) == 36
        assert len(start.with_side_to_move(Piece.WHITE).generate_moves()) == 36

    @pytest.mark.parametrize("position", sample_positions())
    def test_distance_equals_line_count(self, position):
        for move in position.generate_moves():
            (dx, dy), dist = direction_and_distance(move)
            assert (dx, dy) in DIRECTIONS
            assert dist == line_count(position.board, move.from_sq, dx, dy)

    @pytest.mark.parametrize("position", sample_positions())
    def test_never_lands_on_own_piece(self, position):
        for move in position.generate_moves():
            assert position.piece_at(move.from_sq) == position.to_move
            assert position.piece_at(move.to_sq) != position.to_move

    def test_cannot_jump_opponent(self):
        # Row 4: black a4, white b4 -> distance 2 would jump the white piece
        position = Position(board_with(black=[32], white=[33]), Piece.BLACK)
        assert Move(32, 34) not in position.generate_moves()

    def test_can_jump_own_piece(self):
        position = Position(board_with(black=[32, 33]), Piece.BLACK)
        assert Move(32, 34) in position.generate_moves()

    def test_capture_by_landing(self):
        position = Position(board_with(black=[32], white=[34]), Piece.BLACK)
        assert Move(32, 34) in position.generate_moves()

        child = position.apply(Move(32, 34))
        assert child.piece_at(34) == Piece.BLACK
        assert child.piece_at(32) == Piece.EMPTY
        assert child.count(Piece.WHITE) == 0

    def test_boxed_corner_has_no_moves(self):
        position = Position(board_with(black=[0], white=[1, 8, 9]), Piece.BLACK)
        assert position.generate_moves() == []


class TestApply:
    """Test successor positions."""

    def test_apply_is_pure(self):
        start = Position.initial()
        before = start.board.copy()
        move = start.generate_moves()[0]

        child_a = start.apply(move)
        child_b = start.apply(move)

        assert np.array_equal(start.board, before)
        assert start.to_move == Piece.BLACK
        assert np.array_equal(child_a.board, child_b.board)
        assert child_a == child_b
        assert child_a.to_move == Piece.WHITE

    def test_only_origin_and_destination_change(self):
        start = Position.initial()
        move = Move(1, 17)  # b8 down two
        child = start.apply(move)

        changed = np.flatnonzero(child.board != start.board)
        assert set(changed.tolist()) == {1, 17}
        assert child.count(Piece.BLACK) == 12

    def test_board_is_read_only(self):
        start = Position.initial()
        with pytest.raises(ValueError):
            start.board[0] = 1

    def test_apply_rejects_wrong_origin(self):
        start = Position.initial()
        with pytest.raises(ValueError):
            start.apply(Move(8, 10))  # a7 is a white piece, black to move

    def test_rejects_malformed_board(self):
        with pytest.raises(ValueError):
            Position(np.zeros(63))
        with pytest.raises(ValueError):
            Position(np.full(64, 2))
        with pytest.raises(ValueError):
            Position(None, to_move=0)


class TestZobrist:
    """Test Zobrist keys on positions."""

    def test_incremental_key_matches_full_hash(self):
        hasher = get_zobrist_hasher()
        position = Position.initial()
        position.zobrist_key()

        for token in ["b1-b3", "a2-c2", "c8-a6"]:
            position = apply_algebraic_moves(position, token)
            assert hasher.verify_hash(position.board, position.to_move, position.zobrist_key())

    def test_incremental_key_with_capture(self):
        hasher = get_zobrist_hasher()
        position = Position(board_with(black=[32], white=[34, 63]), Piece.BLACK)
        position.zobrist_key()
        child = position.apply(Move(32, 34))
        assert child.zobrist_key() == hasher.hash_position(child.board, child.to_move)

    def test_side_to_move_changes_key(self):
        start = Position.initial()
        assert start.zobrist_key() != start.with_side_to_move(Piece.WHITE).zobrist_key()


class TestWinner:
    def test_no_winner_at_start(self):
        assert Position.initial().winner() is None

    def test_connected_side_wins(self):
        position = Position(board_with(black=[27, 28, 36], white=[0, 63]), Piece.WHITE)
        assert position.winner() == Piece.BLACK

    def test_side_to_move_checked_first(self):
        position = Position(board_with(black=[27, 28], white=[0, 1]), Piece.WHITE)
        assert position.winner() == Piece.WHITE


def test_move_index_round_trip():
    move = Move(12, 40)
    assert move.index == 12 * 64 + 40
    assert Move.from_index(move.index) == move
