"""
Transposition table for caching PVS search results.

Entries are keyed by the position's Zobrist key (board contents and side to
move). The table holds at most `max_entries` entries.

Key concepts:
- Bound types: EXACT (PV node), LOWER (fail-high/beta cutoff), UPPER (fail-low)
- An entry is only trusted for cutoffs when its depth >= the queried depth
- Replacement policy: round-robin over a fixed ring of slots. A new key takes
  the next slot; once every slot is used, the key already in that slot is
  evicted. Overwriting a key that is already stored keeps its slot.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loa_engine.game.lines_of_action import Move


class BoundType(Enum):
    """Type of bound stored in transposition table entry."""
    EXACT = 0   # Exact value (PV node, searched with full window)
    LOWER = 1   # Lower bound (beta cutoff, actual value >= stored value)
    UPPER = 2   # Upper bound (no move raised alpha, actual value <= stored value)


@dataclass
class TTEntry:
    """
    Transposition table entry storing a cached search result.

    Attributes:
        depth: Search depth when this entry was stored
        value: Evaluation score (or bound)
        bound: Type of bound (EXACT/LOWER/UPPER)
        best_move: Best move found at this position, if any
    """
    depth: int
    value: float
    bound: BoundType
    best_move: Optional[Move]


class TranspositionTable:
    """
    Bounded transposition table with round-robin replacement.

    Memory is proportional to max_entries; the slot ring records which key
    occupies each slot so eviction is O(1).
    """

    def __init__(self, max_entries: int = 1 << 16):
        """
        Args:
            max_entries: Maximum number of stored entries (at least 1)
        """
        self.max_entries = max(1, int(max_entries))
        self._table: dict[int, TTEntry] = {}
        self._slots: list[Optional[int]] = [None] * self.max_entries
        self._cursor = 0

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.evictions = 0

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: int) -> bool:
        return key in self._table

    def get(self, key: int) -> Optional[TTEntry]:
        """Return the entry stored for key, or None."""
        entry = self._table.get(key)
        if entry is None:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def store(
        self,
        key: int,
        depth: int,
        value: float,
        bound: BoundType,
        best_move: Optional[Move]
    ):
        """Insert or overwrite the entry for key."""
        entry = TTEntry(depth=depth, value=value, bound=bound, best_move=best_move)
        self.stores += 1

        if key in self._table:
            self._table[key] = entry
            return

        victim = self._slots[self._cursor]
        if victim is not None:
            del self._table[victim]
            self.evictions += 1

        self._slots[self._cursor] = key
        self._table[key] = entry
        self._cursor = (self._cursor + 1) % self.max_entries

    def get_best_move(self, key: int) -> Optional[Move]:
        """Best move hint for ordering, regardless of stored depth."""
        entry = self._table.get(key)
        return entry.best_move if entry is not None else None

    def clear(self):
        """Clear all entries and statistics."""
        self._table.clear()
        self._slots = [None] * self.max_entries
        self._cursor = 0
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.evictions = 0

    def get_stats(self) -> dict:
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'stores': self.stores,
            'evictions': self.evictions,
            'entries': len(self._table),
            'size_entries': self.max_entries,
        }

    def get_fill_rate(self) -> float:
        """Percentage of slots occupied (0-100)."""
        return (len(self._table) / self.max_entries) * 100.0
