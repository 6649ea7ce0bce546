"""
Alpha-beta search engine for Lines of Action.

This module contains the search components:
- Static evaluator (connectivity, density, centralization, mobility)
- Transposition table for caching search results
- Move ordering heuristics
- PVS negamax search with iterative deepening
"""

from loa_engine.engine.evaluator import evaluate, SCORE_WIN, SCORE_LOSS, SCORE_DRAW
from loa_engine.engine.transposition_table import TranspositionTable, BoundType, TTEntry
from loa_engine.engine.move_ordering import order_moves, is_capture
from loa_engine.engine.pvs import PVSEngine, SearchResult, search_best

__all__ = [
    'evaluate',
    'SCORE_WIN',
    'SCORE_LOSS',
    'SCORE_DRAW',
    'TranspositionTable',
    'BoundType',
    'TTEntry',
    'order_moves',
    'is_capture',
    'PVSEngine',
    'SearchResult',
    'search_best',
]
