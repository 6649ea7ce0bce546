"""
Lines of Action position model and move generation.

Board: 8x8, stored as a flat read-only numpy array of 64 cells
(index = row * 8 + col, row 0 is the top rank).
Cells: 0 empty, 1 black, -1 white. A side is identified by its piece value,
so the opponent of `player` is always `-player`.

Move rule: a piece moves in any of the 8 compass directions exactly as many
squares as there are pieces (both colors, origin included) on the whole line
through it along that axis. It may jump its own pieces but not the
opponent's, may not land on its own piece, and captures an opponent piece by
landing on it.
"""

from enum import IntEnum
from typing import NamedTuple, Optional

import numpy as np

from loa_engine.game.connectivity import BOARD_SIZE, NUM_SQUARES, count_groups
from loa_engine.game.zobrist import get_zobrist_hasher


class Piece(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = -1


class Move(NamedTuple):
    """A move from one square index to another."""
    from_sq: int
    to_sq: int

    @property
    def index(self) -> int:
        """Integer key for move -> value mappings (from * 64 + to)."""
        return self.from_sq * NUM_SQUARES + self.to_sq

    @classmethod
    def from_index(cls, index: int) -> "Move":
        return cls(index // NUM_SQUARES, index % NUM_SQUARES)


# (dx, dy) compass directions
DIRECTIONS = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (1, 1), (-1, 1), (1, -1),
)


def _axis_of(dx: int, dy: int) -> int:
    if dy == 0:
        return 0  # horizontal: same row
    if dx == 0:
        return 1  # vertical: same column
    if dx == dy:
        return 2  # x - y constant
    return 3      # x + y constant


DIRECTION_AXES = tuple(_axis_of(dx, dy) for dx, dy in DIRECTIONS)

_xs = np.arange(NUM_SQUARES) % BOARD_SIZE
_ys = np.arange(NUM_SQUARES) // BOARD_SIZE

# Line id of every square on each axis (rows, columns, diagonals, anti-diagonals)
LINE_IDS = np.stack([_ys, _xs, _xs - _ys + BOARD_SIZE - 1, _xs + _ys])
NUM_LINES = 2 * BOARD_SIZE - 1
_LINE_IDS_LIST = LINE_IDS.tolist()


def _build_rays() -> list[tuple[tuple[int, ...], ...]]:
    rays = []
    for sq in range(NUM_SQUARES):
        x, y = sq % BOARD_SIZE, sq // BOARD_SIZE
        per_dir = []
        for dx, dy in DIRECTIONS:
            ray = []
            cx, cy = x + dx, y + dy
            while 0 <= cx < BOARD_SIZE and 0 <= cy < BOARD_SIZE:
                ray.append(cy * BOARD_SIZE + cx)
                cx += dx
                cy += dy
            per_dir.append(tuple(ray))
        rays.append(tuple(per_dir))
    return rays


# RAYS[sq][d]: squares from sq outward in direction d, nearest first
RAYS = _build_rays()


class Position:
    """
    Immutable LoA position: board contents plus the side to move.

    apply() returns a new Position; nothing ever mutates an existing one, so
    positions can be shared freely between search branches.
    """

    def __init__(self, board=None, to_move: int = Piece.BLACK, zobrist_key: Optional[int] = None):
        if board is None:
            arr = np.zeros(NUM_SQUARES, dtype=np.int8)
        else:
            arr = np.array(board, dtype=np.int8).reshape(-1)
            if arr.size != NUM_SQUARES:
                raise ValueError(f"Board must have {NUM_SQUARES} cells, got {arr.size}")
            if not np.isin(arr, (-1, 0, 1)).all():
                raise ValueError("Board cells must be 0 (empty), 1 (black) or -1 (white)")
        if to_move not in (Piece.BLACK, Piece.WHITE):
            raise ValueError(f"Side to move must be 1 (black) or -1 (white), got {to_move}")

        arr.flags.writeable = False
        self.board = arr
        self.to_move = Piece(to_move)
        self._cells = arr.tolist()
        self._key = zobrist_key
        self._moves: Optional[tuple[Move, ...]] = None

    @classmethod
    def initial(cls) -> "Position":
        """Standard start: Black on b-g of ranks 1 and 8, White on a and h of ranks 2-7."""
        board = np.zeros(NUM_SQUARES, dtype=np.int8)
        for x in range(1, 7):
            board[x] = Piece.BLACK
            board[7 * BOARD_SIZE + x] = Piece.BLACK
        for y in range(1, 7):
            board[y * BOARD_SIZE] = Piece.WHITE
            board[y * BOARD_SIZE + 7] = Piece.WHITE
        return cls(board, Piece.BLACK)

    def piece_at(self, sq: int) -> Piece:
        return Piece(self._cells[sq])

    def opponent(self) -> Piece:
        return Piece(-self.to_move)

    def count(self, player: int) -> int:
        return self._cells.count(player)

    def with_side_to_move(self, player: int) -> "Position":
        """Same board with a different side to move."""
        return Position(self.board, player)

    def zobrist_key(self) -> int:
        if self._key is None:
            self._key = get_zobrist_hasher().hash_position(self._cells, self.to_move)
        return self._key

    def _line_counts(self) -> list[list[int]]:
        occupied = np.flatnonzero(self.board)
        return [
            np.bincount(LINE_IDS[axis][occupied], minlength=NUM_LINES).tolist()
            for axis in range(4)
        ]

    def generate_moves(self) -> list[Move]:
        """All legal moves for the side to move, in square then direction order."""
        if self._moves is None:
            cells = self._cells
            me = int(self.to_move)
            opp = -me
            line_counts = self._line_counts()
            moves = []

            for sq in range(NUM_SQUARES):
                if cells[sq] != me:
                    continue
                for d, axis in enumerate(DIRECTION_AXES):
                    dist = line_counts[axis][_LINE_IDS_LIST[axis][sq]]
                    ray = RAYS[sq][d]
                    if dist > len(ray):
                        continue
                    target = ray[dist - 1]
                    if cells[target] == me:
                        continue
                    # Own pieces can be jumped, opponent pieces cannot
                    if any(cells[p] == opp for p in ray[:dist - 1]):
                        continue
                    moves.append(Move(sq, target))

            self._moves = tuple(moves)
        return list(self._moves)

    def apply(self, move: Move) -> "Position":
        """Return the successor position; captures by overwriting the target."""
        from_sq, to_sq = move
        if not (0 <= from_sq < NUM_SQUARES and 0 <= to_sq < NUM_SQUARES):
            raise ValueError(f"Move squares out of range: {move}")
        mover = self._cells[from_sq]
        if mover != self.to_move:
            raise ValueError(f"No piece of the side to move on square {from_sq}")

        captured = self._cells[to_sq]
        board = self.board.copy()
        board[from_sq] = Piece.EMPTY
        board[to_sq] = mover

        key = None
        if self._key is not None:
            key = get_zobrist_hasher().hash_after_move(self._key, from_sq, to_sq, mover, captured)
        return Position(board, -mover, zobrist_key=key)

    def winner(self) -> Optional[Piece]:
        """Side whose pieces form a single group (side to move checked first), else None."""
        if count_groups(self._cells, self.to_move) == 1:
            return self.to_move
        if count_groups(self._cells, -self.to_move) == 1:
            return self.opponent()
        return None

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.to_move == other.to_move and self._cells == other._cells

    def __hash__(self):
        return hash((self.board.tobytes(), int(self.to_move)))

    def __repr__(self):
        side = "black" if self.to_move == Piece.BLACK else "white"
        return f"Position(to_move={side}, black={self.count(Piece.BLACK)}, white={self.count(Piece.WHITE)})"

    def __str__(self):
        symbols = {Piece.BLACK: 'b', Piece.WHITE: 'w', Piece.EMPTY: '.'}
        lines = []
        for row in range(BOARD_SIZE):
            rank = BOARD_SIZE - row
            cells = self._cells[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]
            lines.append(f"{rank} " + " ".join(symbols[c] for c in cells))
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
