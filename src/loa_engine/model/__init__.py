"""
Optional policy/value network support for MCTS.
"""

from loa_engine.model.network import PolicyValueNet, ResidualBlock, ACTION_SIZE, build_move_slots
from loa_engine.model.policy_value import (
    PolicyValueProvider,
    NullPolicyValue,
    TorchPolicyValue,
    encode_position,
)

__all__ = [
    'PolicyValueNet',
    'ResidualBlock',
    'build_move_slots',
    'ACTION_SIZE',
    'PolicyValueProvider',
    'NullPolicyValue',
    'TorchPolicyValue',
    'encode_position',
]
