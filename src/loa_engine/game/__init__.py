"""
Lines of Action rules: position model, board features and notation.
"""

from loa_engine.game.lines_of_action import Piece, Move, Position, DIRECTIONS
from loa_engine.game.connectivity import count_groups, quad_score, centralization
from loa_engine.game.zobrist import ZobristHasher, get_zobrist_hasher

__all__ = [
    'Piece',
    'Move',
    'Position',
    'DIRECTIONS',
    'count_groups',
    'quad_score',
    'centralization',
    'ZobristHasher',
    'get_zobrist_hasher',
]
