from loa_engine.mcts.mcts import MCTS, MCTSResult, NodeArena

__all__ = ['MCTS', 'MCTSResult', 'NodeArena']
