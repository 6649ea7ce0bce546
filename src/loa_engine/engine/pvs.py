"""
Principal variation search (PVS) for Lines of Action.

Negamax alpha-beta search where the first move at each node is searched with
the full window and the rest with a null window, re-searching only when a
null-window result lands inside the original window.

Key features:
- Negamax framework (each recursive call negates the child's score)
- Transposition table probing for cutoffs and best-move hints
- Move ordering: TT move, captures, central destinations
- Iterative deepening from depth 1 to the requested depth
- Principal variation read back from the transposition table

Algorithm overview:

    def pvs(position, depth, alpha, beta):
        if tt entry deep enough:
            tighten alpha/beta, return on EXACT or collapsed window
        if depth == 0:
            return evaluate(position)
        for i, move in enumerate(ordered_moves):
            if i == 0:
                score = -pvs(child, depth-1, -beta, -alpha)
            else:
                score = -pvs(child, depth-1, -alpha-1, -alpha)
                if alpha < score < beta:
                    score = -pvs(child, depth-1, -beta, -alpha)
            ...
            if alpha >= beta:
                break  # Beta cutoff
        tt.store(position, depth, best_score, bound, best_move)
        return best_score

A time budget may be passed in and is reported back, but search always runs
to the requested depth.
"""

import time
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from loa_engine.config import DEFAULT_WEIGHTS, SEARCH_CONFIG, EvalWeights
from loa_engine.engine.evaluator import SCORE_DRAW, evaluate
from loa_engine.engine.move_ordering import order_moves
from loa_engine.engine.transposition_table import BoundType, TranspositionTable
from loa_engine.game.lines_of_action import Move, Position
from loa_engine.game.notation import move_to_str


@dataclass
class SearchResult:
    """Result of a PVS search."""
    best_move: Optional[Move]
    score: float
    depth_reached: int
    nodes_searched: int
    time_ms: int
    principal_variation: list[Move]
    tt_stats: dict


# Window bound, larger than any evaluation
SCORE_INF = 1000000


class PVSEngine:
    """
    Iterative-deepening PVS engine.

    The transposition table lives on the engine, so repeated searches with
    the same engine reuse earlier results. Use search_best() for a one-shot
    search with a fresh table.
    """

    def __init__(
        self,
        weights: EvalWeights = DEFAULT_WEIGHTS,
        evaluator: Optional[Callable[[Position], float]] = None,
        tt_size: int = SEARCH_CONFIG['tt_size'],
        max_depth: int = SEARCH_CONFIG['depth'],
        verbose: bool = False
    ):
        """
        Args:
            weights: Evaluation weights for the default evaluator
            evaluator: Position -> score for the side to move (overrides weights)
            tt_size: Maximum transposition table entries
            max_depth: Default search depth
            verbose: Print one info line per completed iteration
        """
        self.evaluator = evaluator if evaluator is not None else partial(evaluate, weights=weights)
        self.tt = TranspositionTable(tt_size)
        self.max_depth = max_depth
        self.verbose = verbose

        # Search statistics
        self.nodes_searched = 0
        self.time_limit_ms = None
        self.pv: list[Move] = []

    def search(
        self,
        position: Position,
        max_depth: Optional[int] = None,
        time_limit_ms: Optional[int] = None
    ) -> SearchResult:
        """
        Main search entry point with iterative deepening.

        Args:
            position: Root position
            max_depth: Override the engine's default depth
            time_limit_ms: Recorded for callers, not enforced

        Returns:
            SearchResult from the deepest iteration. With depth <= 0 or no
            legal moves, the first generated move (or None) with score 0.
        """
        start_time = time.time() * 1000
        self.time_limit_ms = time_limit_ms
        self.nodes_searched = 0
        self.pv = []

        depth = self.max_depth if max_depth is None else max_depth
        moves = position.generate_moves()

        if depth <= 0 or not moves:
            return SearchResult(
                best_move=moves[0] if moves else None,
                score=SCORE_DRAW,
                depth_reached=0,
                nodes_searched=0,
                time_ms=int(time.time() * 1000 - start_time),
                principal_variation=[],
                tt_stats=self.tt.get_stats()
            )

        best_move = None
        best_score = SCORE_DRAW
        depth_reached = 0

        for current_depth in range(1, depth + 1):
            best_score, best_move = self._search_root(position, moves, current_depth, best_move)
            depth_reached = current_depth
            self.pv = self._extract_pv(position, best_move, current_depth)

            if self.verbose:
                pv_str = " ".join(move_to_str(m) for m in self.pv)
                print(f"info depth {current_depth} score {best_score:.1f} "
                      f"nodes {self.nodes_searched} pv {pv_str}")

        return SearchResult(
            best_move=best_move,
            score=best_score,
            depth_reached=depth_reached,
            nodes_searched=self.nodes_searched,
            time_ms=int(time.time() * 1000 - start_time),
            principal_variation=list(self.pv),
            tt_stats=self.tt.get_stats()
        )

    def _search_root(
        self,
        position: Position,
        moves: list[Move],
        depth: int,
        hint: Optional[Move]
    ) -> tuple[float, Move]:
        """
        Root search: every move gets the full window so each score is exact.

        Returns:
            (score, best_move)
        """
        ordered = order_moves(position, moves, hint)
        best_move = ordered[0]
        best_score = -SCORE_INF

        for move in ordered:
            score = -self._pvs(position.apply(move), depth - 1, -SCORE_INF, SCORE_INF)
            if score > best_score:
                best_score = score
                best_move = move

        self.tt.store(position.zobrist_key(), depth, best_score, BoundType.EXACT, best_move)
        return best_score, best_move

    def _pvs(self, position: Position, depth: int, alpha: float, beta: float) -> float:
        """
        PVS node.

        Returns:
            Score from the perspective of position's side to move
        """
        self.nodes_searched += 1

        key = position.zobrist_key()
        entry = self.tt.get(key)
        if entry is not None and entry.depth >= depth:
            if entry.bound == BoundType.EXACT:
                return entry.value
            if entry.bound == BoundType.LOWER and entry.value > alpha:
                alpha = entry.value
            elif entry.bound == BoundType.UPPER and entry.value < beta:
                beta = entry.value
            if alpha >= beta:
                return entry.value

        if depth <= 0:
            return self.evaluator(position)

        moves = position.generate_moves()
        if not moves:
            # No legal moves is rare in LoA; treat as drawish
            return SCORE_DRAW

        best_move = entry.best_move if entry is not None else None
        ordered = order_moves(position, moves, best_move)

        best_score = -SCORE_INF
        bound = BoundType.UPPER

        for i, move in enumerate(ordered):
            child = position.apply(move)
            if i == 0:
                score = -self._pvs(child, depth - 1, -beta, -alpha)
            else:
                # Null window search
                score = -self._pvs(child, depth - 1, -alpha - 1, -alpha)
                if alpha < score < beta:
                    score = -self._pvs(child, depth - 1, -beta, -alpha)

            if score > best_score:
                best_score = score
                best_move = move
                if score > alpha:
                    alpha = score
                    bound = BoundType.EXACT
                    if alpha >= beta:
                        bound = BoundType.LOWER
                        break

        self.tt.store(key, depth, best_score, bound, best_move)
        return best_score

    def _extract_pv(self, position: Position, best_move: Move, depth: int) -> list[Move]:
        """Follow TT best moves from the root, checking each is still legal."""
        pv = [best_move]
        current = position.apply(best_move)
        while len(pv) < depth:
            move = self.tt.get_best_move(current.zobrist_key())
            if move is None or move not in current.generate_moves():
                break
            pv.append(move)
            current = current.apply(move)
        return pv

    def clear_tt(self):
        """Clear transposition table."""
        self.tt.clear()

    def get_stats(self) -> dict:
        return {
            'nodes_searched': self.nodes_searched,
            'tt_stats': self.tt.get_stats(),
            'tt_fill_rate': self.tt.get_fill_rate(),
        }


def search_best(
    position: Position,
    depth: Optional[int] = None,
    tt_size: Optional[int] = None,
    time_limit_ms: Optional[int] = None,
    weights: EvalWeights = DEFAULT_WEIGHTS,
    verbose: bool = False
) -> SearchResult:
    """One-shot PVS search with a fresh transposition table."""
    engine = PVSEngine(
        weights=weights,
        tt_size=SEARCH_CONFIG['tt_size'] if tt_size is None else tt_size,
        max_depth=SEARCH_CONFIG['depth'] if depth is None else depth,
        verbose=verbose
    )
    return engine.search(position, time_limit_ms=time_limit_ms)
