"""
Unit tests for the policy/value network and providers.
"""

import sys
from pathlib import Path

import numpy as np
import torch

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from loa_engine.game.lines_of_action import Move, Piece, Position
from loa_engine.mcts.mcts import MCTS
from loa_engine.model.network import (
    ACTION_SIZE,
    NUM_MOVE_PLANES,
    UNREACHABLE_LOGIT,
    PolicyValueNet,
    build_move_slots,
)
from loa_engine.model.policy_value import (
    NullPolicyValue,
    TorchPolicyValue,
    encode_position,
)


def small_model():
    torch.manual_seed(0)
    return PolicyValueNet(num_res_blocks=1, num_hidden=8)


class TestEncoding:
    def test_planes_follow_side_to_move(self):
        start = Position.initial()
        planes = encode_position(start)

        assert planes.shape == (3, 8, 8)
        assert planes.dtype == np.float32
        assert planes[0].sum() == 12
        assert planes[0, 0, 1] == 1  # black on b8
        assert planes[1, 1, 0] == 1  # white on a7
        assert np.all(planes[2] == 1)

        flipped = encode_position(start.with_side_to_move(Piece.WHITE))
        assert np.array_equal(flipped[0], planes[1])
        assert np.all(flipped[2] == -1)


class TestNetwork:
    def test_output_shapes(self):
        model = small_model()
        model.eval()
        policy, value = model(torch.zeros(2, 3, 8, 8))

        assert policy.shape == (2, ACTION_SIZE)
        assert value.shape == (2, 1)
        assert torch.all(value.abs() <= 1)

    def test_policy_only_on_shared_lines(self):
        model = small_model()
        model.eval()
        with torch.no_grad():
            policy, _ = model(torch.randn(1, 3, 8, 8))

        # a8-b6 is a knight jump: no LoA move connects the squares
        assert policy[0, Move(0, 17).index] == UNREACHABLE_LOGIT
        assert policy[0, Move(1, 17).index] > UNREACHABLE_LOGIT
        assert int((policy[0] > UNREACHABLE_LOGIT).sum()) == 1456

    def test_move_slots(self):
        slots = build_move_slots()
        padding = NUM_MOVE_PLANES * 64

        # Queen-line pairs on an empty 8x8 board: 896 rook + 560 bishop
        assert int((slots < padding).sum()) == 1456
        assert slots[Move(5, 5).index] == padding
        # b8-b6: direction (0, 1) is index 3, distance 2
        assert slots[Move(1, 17).index] == (3 * 7 + 1) * 64 + 1
        assert len(set(slots[slots < padding].tolist())) == 1456


class TestProviders:
    def test_null_provider(self):
        assert NullPolicyValue().predict(Position.initial()) == ({}, None)

    def test_torch_priors_cover_legal_moves(self):
        provider = TorchPolicyValue(small_model(), device='cpu')
        position = Position.initial()
        priors, value = provider.predict(position)

        assert set(priors) == {move.index for move in position.generate_moves()}
        assert abs(sum(priors.values()) - 1.0) < 1e-5
        assert -1.0 <= value <= 1.0

    def test_from_checkpoint(self, tmp_path):
        model = small_model()
        path = tmp_path / "model.pt"
        torch.save(model.state_dict(), path)

        provider = TorchPolicyValue.from_checkpoint(path, device='cpu')

        assert len(provider.model.trunk) == 1
        assert provider.model.stem[0].out_channels == 8
        assert provider.model.value_mlp[0].out_features == 64

    def test_mcts_with_torch_provider(self):
        provider = TorchPolicyValue(small_model(), device='cpu')
        position = Position.initial()
        result = MCTS({'num_searches': 20}, provider=provider).search(position)

        assert result.root_visits == 20
        assert result.best_move in position.generate_moves()
