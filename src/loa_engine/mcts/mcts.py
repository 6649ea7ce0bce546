"""
Monte-Carlo Tree Search with PUCT selection for Lines of Action.

The tree is stored as a node arena: every node is a row in a set of growable
numpy arrays, and a node's children occupy a contiguous block of rows
[first_child, first_child + num_children). The tree only lives for a single
search() call.

Values are backed up negamax-style: a node's value_sum is kept from the
perspective of the side that played the move into it, so a parent simply
picks the child with the highest Q + U.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from tqdm import tqdm

from loa_engine.config import DEFAULT_WEIGHTS, MCTS_CONFIG, EvalWeights
from loa_engine.engine.evaluator import evaluate
from loa_engine.game.lines_of_action import Move, Position

# Floor for the temperature in the final move choice
EPS = 1e-9

# Divisor mapping heuristic scores into tanh's responsive range
VALUE_SCALE = 1000.0


@dataclass
class MCTSResult:
    """Result of an MCTS search."""
    best_move: Optional[Move]
    visit_counts: dict[Move, int]
    root_visits: int
    root_value: float


class NodeArena:
    """Flat storage for MCTS nodes, addressed by integer index."""

    def __init__(self, capacity: int = 1024):
        self.size = 0
        self.visit_count = np.zeros(capacity, dtype=np.int64)
        self.value_sum = np.zeros(capacity, dtype=np.float64)
        self.mean_value = np.zeros(capacity, dtype=np.float64)
        self.prior = np.zeros(capacity, dtype=np.float64)
        self.move_index = np.full(capacity, -1, dtype=np.int32)
        self.first_child = np.full(capacity, -1, dtype=np.int32)
        self.num_children = np.zeros(capacity, dtype=np.int32)
        self.expanded = np.zeros(capacity, dtype=bool)

    def _grow(self, needed: int):
        capacity = len(self.visit_count)
        if needed <= capacity:
            return
        new_capacity = max(needed, capacity * 2)
        for name in ('visit_count', 'value_sum', 'mean_value', 'prior',
                     'move_index', 'first_child', 'num_children', 'expanded'):
            old = getattr(self, name)
            fill = -1 if name in ('move_index', 'first_child') else 0
            new = np.full(new_capacity, fill, dtype=old.dtype)
            new[:capacity] = old
            setattr(self, name, new)

    def new_root(self, prior: float = 1.0) -> int:
        self._grow(self.size + 1)
        node = self.size
        self.prior[node] = prior
        self.size += 1
        return node

    def add_children(self, parent: int, moves: list[Move], priors: np.ndarray):
        """Append one child row per move and link them to parent."""
        count = len(moves)
        self._grow(self.size + count)
        start = self.size
        end = start + count
        self.prior[start:end] = priors
        self.move_index[start:end] = [move.index for move in moves]
        self.first_child[parent] = start
        self.num_children[parent] = count
        self.size = end

    def children(self, node: int) -> range:
        start = self.first_child[node]
        return range(start, start + self.num_children[node]) if start >= 0 else range(0)

    def move_of(self, node: int) -> Move:
        return Move.from_index(int(self.move_index[node]))

    def update(self, node: int, value: float):
        self.visit_count[node] += 1
        self.value_sum[node] += value
        self.mean_value[node] = self.value_sum[node] / self.visit_count[node]


class MCTS:
    """
    PUCT Monte-Carlo Tree Search.

    args keys (defaults from MCTS_CONFIG):
        num_searches: Number of simulations
        C: PUCT exploration constant
        temperature: Sharpening of root visit counts for the final pick
    """

    def __init__(self, args: Optional[dict] = None, provider=None, weights: EvalWeights = DEFAULT_WEIGHTS):
        """
        Args:
            args: MCTS settings, merged over MCTS_CONFIG
            provider: Optional policy/value provider (see loa_engine.model)
            weights: Evaluation weights for heuristic leaf values
        """
        self.args = {**MCTS_CONFIG, **(args or {})}
        self.provider = provider
        self.weights = weights

    def run(self, position: Position) -> Optional[Move]:
        """Search the position and return the chosen move."""
        return self.search(position).best_move

    def search(self, position: Position, verbose: bool = False) -> MCTSResult:
        """
        Run num_searches simulations from position.

        The first simulation expands the root itself, so afterwards the root
        has num_searches visits and its children num_searches - 1 in total.
        With num_searches <= 0 no tree is built and the first legal move is
        returned.
        """
        num_searches = int(self.args['num_searches'])
        if num_searches <= 0:
            moves = position.generate_moves()
            return MCTSResult(
                best_move=moves[0] if moves else None,
                visit_counts={},
                root_visits=0,
                root_value=0.0
            )

        arena = NodeArena()
        root = arena.new_root()

        iterator = tqdm(range(num_searches), desc="MCTS", ncols=80) if verbose else range(num_searches)
        for _ in iterator:
            self._simulate(arena, root, position)

        children = arena.children(root)
        visit_counts = {arena.move_of(child): int(arena.visit_count[child]) for child in children}

        return MCTSResult(
            best_move=self._select_move(arena, root),
            visit_counts=visit_counts,
            root_visits=int(arena.visit_count[root]),
            # Root stats are from the opponent's perspective; flip for the mover
            root_value=-float(arena.mean_value[root])
        )

    def _simulate(self, arena: NodeArena, root: int, position: Position):
        node = root
        path = [root]

        # Selection
        while arena.expanded[node] and arena.num_children[node] > 0:
            node = self._select_child(arena, node)
            position = position.apply(arena.move_of(node))
            path.append(node)

        # Expansion / evaluation: value is for position's side to move
        if not arena.expanded[node]:
            value = self._expand(arena, node, position)
        else:
            value = self._leaf_value(position)

        # Backup: each node stores the value for the side that moved into it
        for n in reversed(path):
            arena.update(n, -value)
            value = -value

    def _select_child(self, arena: NodeArena, node: int) -> int:
        start = arena.first_child[node]
        end = start + arena.num_children[node]
        parent_visits = max(1, int(arena.visit_count[node]))

        u = (self.args['C'] * arena.prior[start:end] * math.sqrt(parent_visits)
             / (1 + arena.visit_count[start:end]))
        scores = arena.mean_value[start:end] + u

        # argmax takes the first maximum, so ties follow generation order
        return start + int(np.argmax(scores))

    def _expand(self, arena: NodeArena, node: int, position: Position) -> float:
        """Mark node expanded, add its children and return its leaf value."""
        arena.expanded[node] = True

        # Only a position without legal moves is terminal; a connected side
        # is scored by the evaluator like any other leaf
        moves = position.generate_moves()
        if not moves:
            return self._leaf_value(position)

        value = None
        priors = np.full(len(moves), 1.0 / len(moves))
        if self.provider is not None:
            policy, value = self.provider.predict(position)
            if policy:
                weights = np.array([policy.get(move.index, 0.0) for move in moves], dtype=np.float64)
                total = weights.sum()
                if total > 0:
                    priors = weights / total

        arena.add_children(node, moves, priors)

        if value is None:
            return self._leaf_value(position)
        return float(np.clip(value, -1.0, 1.0))

    def _leaf_value(self, position: Position) -> float:
        """Heuristic value squashed into [-1, 1] for the side to move."""
        return math.tanh(evaluate(position, self.weights) / VALUE_SCALE)

    def _select_move(self, arena: NodeArena, root: int) -> Optional[Move]:
        """Arg-max of visit counts sharpened by 1 / temperature."""
        children = arena.children(root)
        if len(children) == 0:
            return None

        visits = arena.visit_count[children.start:children.stop].astype(np.float64)
        if visits.max() == 0:
            return arena.move_of(children.start)

        temperature = max(EPS, float(self.args['temperature']))
        # Normalising by the max first keeps v ** (1 / T) finite for tiny T
        probs = (visits / visits.max()) ** (1.0 / temperature)
        probs /= probs.sum()
        return arena.move_of(children.start + int(np.argmax(probs)))
