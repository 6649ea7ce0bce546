"""
Lines of Action move-search engine: PVS alpha-beta and PUCT MCTS.
"""

from loa_engine.game.lines_of_action import Piece, Move, Position
from loa_engine.engine.pvs import PVSEngine, SearchResult, search_best
from loa_engine.mcts.mcts import MCTS, MCTSResult

__version__ = "0.1"

__all__ = [
    'Piece',
    'Move',
    'Position',
    'PVSEngine',
    'SearchResult',
    'search_best',
    'MCTS',
    'MCTSResult',
]
