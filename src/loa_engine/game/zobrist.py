"""
Zobrist hashing for Lines of Action positions.

Zobrist hashing gives every (board, side to move) pair a 64-bit fingerprint
used as the transposition table key. The key is updated incrementally when
a move is applied, so positions produced during search never rehash the
whole board.

Implementation:
- Pre-generate random 64-bit keys for each (square, color) combination
- Hash = XOR of all keys corresponding to occupied squares
- XOR one extra key when White is to move
"""

import numpy as np
from typing import Optional

NUM_SQUARES = 64


class ZobristHasher:
    """
    Zobrist hashing for LoA board positions.

    LoA board: 64 squares x 2 colors = 128 zobrist keys, plus one
    side-to-move key.
    """

    def __init__(self, num_squares: int = NUM_SQUARES, seed: int = 42):
        """
        Initialize Zobrist hash table with random 64-bit keys.

        Args:
            num_squares: Number of board cells
            seed: Random seed for reproducibility
        """
        self.num_squares = num_squares

        # Use seeded RNG for reproducible hashes
        rng = np.random.RandomState(seed)

        # Keys indexed [square][color_idx], color_idx: 0 for White (-1), 1 for Black (1)
        table = rng.randint(0, 2**63 - 1, size=(num_squares, 2), dtype=np.uint64)
        self.zobrist_table = [[int(k) for k in row] for row in table]

        # Side-to-move hash (XOR this if White is to move)
        self.side_to_move_hash = int(rng.randint(0, 2**63 - 1, dtype=np.uint64))

    @staticmethod
    def _color_idx(piece: int) -> int:
        return 0 if piece == -1 else 1

    def hash_position(self, board, player: int = 1) -> int:
        """
        Compute Zobrist hash for a board from scratch.

        Args:
            board: Flat board with values in {-1, 0, 1}
            player: Side to move (1 = Black, -1 = White)

        Returns:
            64-bit hash value (int)
        """
        cells = board.tolist() if isinstance(board, np.ndarray) else board
        hash_value = 0

        for sq, piece in enumerate(cells):
            if piece != 0:
                hash_value ^= self.zobrist_table[sq][self._color_idx(piece)]

        if player == -1:
            hash_value ^= self.side_to_move_hash

        return hash_value

    def hash_after_move(
        self,
        current_hash: int,
        from_sq: int,
        to_sq: int,
        mover: int,
        captured: int = 0
    ) -> int:
        """
        Incremental hash update for a piece moving from_sq -> to_sq.

        Args:
            current_hash: Hash of the position before the move
            from_sq: Origin square
            to_sq: Destination square
            mover: Piece value of the moving side
            captured: Piece value found on to_sq before the move (0 if empty)

        Returns:
            Hash of the successor position (side to move flipped)
        """
        mover_idx = self._color_idx(mover)
        new_hash = current_hash ^ self.zobrist_table[from_sq][mover_idx]
        if captured != 0:
            new_hash ^= self.zobrist_table[to_sq][self._color_idx(captured)]
        new_hash ^= self.zobrist_table[to_sq][mover_idx]

        # Flip side-to-move hash (player changes)
        new_hash ^= self.side_to_move_hash

        return new_hash

    def verify_hash(self, board, player: int, claimed_hash: int) -> bool:
        """Check a claimed hash against a full recomputation."""
        return self.hash_position(board, player) == claimed_hash


# Global singleton instance
_global_hasher: Optional[ZobristHasher] = None


def get_zobrist_hasher(seed: int = 42) -> ZobristHasher:
    """
    Get or create global Zobrist hasher singleton.

    This ensures every Position and table uses the same zobrist keys.
    """
    global _global_hasher

    if _global_hasher is None:
        _global_hasher = ZobristHasher(NUM_SQUARES, seed)

    return _global_hasher
