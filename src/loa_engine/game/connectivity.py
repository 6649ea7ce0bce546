"""
Board features for Lines of Action evaluation.

All functions take a flat board (64 cells, index = row * 8 + col, values in
{-1, 0, 1}) and the piece value of the side being measured:

- count_groups: number of 8-connected groups (the win condition is 1 group)
- quad_score: density of the side's pieces over all 2x2 windows
- centralization: negated sum of squared distances to the board center
"""

import numpy as np

BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE

# Weight per number of own pieces inside a 2x2 window (0..4)
QUAD_WEIGHTS = np.array([0, 1, 3, 6, 10], dtype=np.int64)

_coords = np.arange(NUM_SQUARES)
_dx = (_coords % BOARD_SIZE) - 3.5
_dy = (_coords // BOARD_SIZE) - 3.5
CENTER_DISTANCE_SQ = _dx * _dx + _dy * _dy


def _build_neighbours() -> list[tuple[int, ...]]:
    neighbours = []
    for sq in range(NUM_SQUARES):
        x, y = sq % BOARD_SIZE, sq // BOARD_SIZE
        adj = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    continue
                nx, ny = x + dx, y + dy
                if 0 <= nx < BOARD_SIZE and 0 <= ny < BOARD_SIZE:
                    adj.append(ny * BOARD_SIZE + nx)
        neighbours.append(tuple(adj))
    return neighbours


# 8-connected neighbours of every square
NEIGHBOURS = _build_neighbours()


def count_groups(board, player: int) -> int:
    """
    Count 8-connected groups of the player's pieces.

    Args:
        board: Flat board (numpy array or sequence of 64 cells)
        player: Piece value of the side (1 or -1)

    Returns:
        Number of groups (0 if the side has no pieces)
    """
    cells = board.tolist() if isinstance(board, np.ndarray) else list(board)
    seen = [False] * NUM_SQUARES
    groups = 0

    for start in range(NUM_SQUARES):
        if cells[start] != player or seen[start]:
            continue
        groups += 1
        seen[start] = True
        stack = [start]
        while stack:
            sq = stack.pop()
            for nb in NEIGHBOURS[sq]:
                if not seen[nb] and cells[nb] == player:
                    seen[nb] = True
                    stack.append(nb)

    return groups


def quad_score(board, player: int) -> int:
    """Sum of QUAD_WEIGHTS over the 7x7 grid of 2x2 windows."""
    mine = (np.asarray(board).reshape(BOARD_SIZE, BOARD_SIZE) == player).astype(np.int64)
    counts = mine[:-1, :-1] + mine[:-1, 1:] + mine[1:, :-1] + mine[1:, 1:]
    return int(QUAD_WEIGHTS[counts].sum())


def centralization(board, player: int) -> float:
    """Negated sum of squared distances to (3.5, 3.5); closer is higher."""
    mine = np.asarray(board) == player
    return -float(CENTER_DISTANCE_SQ[mine].sum())
