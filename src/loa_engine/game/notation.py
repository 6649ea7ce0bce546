"""
Text notation for Lines of Action positions and moves.

- FEN-like:  "1bbbbbb1/w6w/w6w/w6w/w6w/w6w/w6w/1bbbbbb1 b"
  8 ranks from rank 8 (top) to rank 1, 'b'/'w' pieces, digits or '.' for
  empty squares, then the side to move ('b' or '1' for Black, else White).
- ASCII: the same rank strings, separated by '/' or newlines.
- Squares: "a1" is the bottom-left corner (index 56), "h8" the top-right (7).
- Moves: "b1-b3" or "b1->b3".

All parsers raise ValueError on malformed input.
"""

import re

import numpy as np

from loa_engine.game.connectivity import BOARD_SIZE, NUM_SQUARES
from loa_engine.game.lines_of_action import Move, Piece, Position

INITIAL_FEN = "1bbbbbb1/w6w/w6w/w6w/w6w/w6w/w6w/1bbbbbb1 b"

_SQUARE_RE = re.compile(r"^[a-h][1-8]$", re.IGNORECASE)
_MOVE_RE = re.compile(r"^([a-h][1-8])-([a-h][1-8])$", re.IGNORECASE)


def str_to_square(name: str) -> int:
    if not _SQUARE_RE.match(name):
        raise ValueError(f"Bad square: {name}")
    x = ord(name[0].lower()) - ord('a')
    y = BOARD_SIZE - int(name[1])
    return y * BOARD_SIZE + x


def square_to_str(sq: int) -> str:
    if not 0 <= sq < NUM_SQUARES:
        raise ValueError(f"Bad square index: {sq}")
    x, y = sq % BOARD_SIZE, sq // BOARD_SIZE
    return f"{chr(ord('a') + x)}{BOARD_SIZE - y}"


def move_to_str(move: Move) -> str:
    return f"{square_to_str(move.from_sq)}->{square_to_str(move.to_sq)}"


def str_to_move(token: str) -> Move:
    match = _MOVE_RE.match(token.replace("->", "-"))
    if not match:
        raise ValueError(f"Bad move token: {token}")
    return Move(str_to_square(match.group(1)), str_to_square(match.group(2)))


def _parse_rows(rows: list[str], label: str) -> np.ndarray:
    """FEN ranks are reported by rank number (8 at the top), ASCII rows by index."""
    board = np.zeros(NUM_SQUARES, dtype=np.int8)
    for r, row in enumerate(rows):
        name = f"{label} {BOARD_SIZE - r}" if label == "rank" else f"{label} {r}"
        x = 0
        for i, ch in enumerate(row):
            if '1' <= ch <= '8':
                x += int(ch)
            elif ch == '.':
                x += 1
            elif ch in 'bBwW':
                if x >= BOARD_SIZE:
                    raise ValueError(f"Rank overflow in {name}")
                board[r * BOARD_SIZE + x] = Piece.BLACK if ch.lower() == 'b' else Piece.WHITE
                x += 1
            else:
                raise ValueError(f"Bad char '{ch}' in {name}, col {i}")
        if x != BOARD_SIZE:
            raise ValueError(f"{name.capitalize()} has {x} files (need {BOARD_SIZE})")
    return board


def from_fen(fen: str) -> Position:
    """Parse a FEN-like string into a Position."""
    parts = fen.strip().split()
    if not parts:
        raise ValueError("Missing board in FEN")
    ranks = parts[0].split("/")
    if len(ranks) != BOARD_SIZE:
        raise ValueError(f"FEN must have {BOARD_SIZE} ranks, got {len(ranks)}")

    board = _parse_rows(ranks, "rank")
    side = parts[1] if len(parts) > 1 else "b"
    to_move = Piece.BLACK if side.lower() in ("b", "1") else Piece.WHITE
    return Position(board, to_move)


def to_fen(position: Position) -> str:
    ranks = []
    for row in range(BOARD_SIZE):
        out = ""
        empty = 0
        for col in range(BOARD_SIZE):
            piece = position.piece_at(row * BOARD_SIZE + col)
            if piece == Piece.EMPTY:
                empty += 1
                continue
            if empty:
                out += str(empty)
                empty = 0
            out += "b" if piece == Piece.BLACK else "w"
        if empty:
            out += str(empty)
        ranks.append(out)
    side = "b" if position.to_move == Piece.BLACK else "w"
    return "/".join(ranks) + " " + side


def from_ascii(text: str, to_move: int = Piece.BLACK) -> Position:
    """Parse 8 rows (top to bottom) separated by '/' or newlines."""
    stripped = text.strip()
    rows = stripped.split("/") if "/" in stripped else stripped.splitlines()
    rows = [row.strip() for row in rows]
    if len(rows) != BOARD_SIZE:
        raise ValueError(f"ASCII board must have {BOARD_SIZE} rows, got {len(rows)}")
    return Position(_parse_rows(rows, "row"), to_move)


def apply_algebraic_moves(position: Position, moves: str) -> Position:
    """
    Apply a sequence like "b1-b3 a2-c2" (or comma separated, or '->'),
    checking every move against the legal move generator.
    """
    current = position
    for token in filter(None, re.split(r"[\s,]+", moves)):
        move = str_to_move(token)
        if move not in current.generate_moves():
            raise ValueError(f"Illegal move in sequence: {token}")
        current = current.apply(move)
    return current
