"""
Move ordering heuristics for PVS search.

Ordering priority (high to low):
1. TT move (best move from the transposition table or previous iteration)
2. Captures (destination holds an opponent piece)
3. Destination centrality (closer to the board center first)
Moves that tie keep their generation order.
"""

from typing import Optional

from loa_engine.game.connectivity import CENTER_DISTANCE_SQ
from loa_engine.game.lines_of_action import Move, Position

_CENTER_DISTANCE = CENTER_DISTANCE_SQ.tolist()


def is_capture(position: Position, move: Move) -> bool:
    return position.piece_at(move.to_sq) == -position.to_move


def order_moves(
    position: Position,
    moves: list[Move],
    tt_move: Optional[Move] = None
) -> list[Move]:
    """
    Order moves for alpha-beta pruning.

    Args:
        position: Position the moves belong to
        moves: Legal moves
        tt_move: Hint searched first when present

    Returns:
        New list of moves sorted by priority (best first)
    """
    def sort_key(move: Move):
        return (
            move != tt_move,
            not is_capture(position, move),
            _CENTER_DISTANCE[move.to_sq],
        )

    return sorted(moves, key=sort_key)
