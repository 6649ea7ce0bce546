"""
Configuration for the Lines of Action engine.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EvalWeights:
    groups: float = 1200.0   # biggest driver: make one group
    quads: float = 3.0       # density / connectivity proxy
    central: float = 2.0     # mild pull to center
    mobility: float = 1.0    # tie-break


DEFAULT_WEIGHTS = EvalWeights()

# Alpha-beta (PVS) Configuration
SEARCH_CONFIG = {
    'depth': 5,                 # Iterative deepening runs 1..depth
    'tt_size': 1 << 16,         # Max transposition table entries
    'time_limit_ms': None,      # Accepted and reported, never enforced
}

# MCTS Configuration
MCTS_CONFIG = {
    'num_searches': 1000,       # Simulations per move
    'C': 1.4,                   # PUCT exploration constant
    'temperature': 1.0,         # Visit-count sharpening for the final pick
}

# Policy/value network Configuration
MODEL_CONFIG = {
    'device': 'cpu',            # Checkpoint sizes are read from the weights
}

# Command-line front end
CLI_CONFIG = {
    'temperature': 1e-3,        # Near-greedy final pick, unlike MCTS_CONFIG's 1.0
}
