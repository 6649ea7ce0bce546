"""
Policy/value providers for MCTS.

A provider is any object with

    predict(position) -> (priors, value)

where priors maps Move.index (from * 64 + to) to a probability and value is
a score in [-1, 1] for the side to move, or None to let MCTS fall back to its
heuristic leaf value. An empty priors dict means uniform priors.

Calls are synchronous: MCTS blocks on predict() at every expansion.
"""

from typing import Optional, Protocol

import numpy as np
import torch

from loa_engine.config import MODEL_CONFIG
from loa_engine.game.lines_of_action import Position
from loa_engine.model.network import PolicyValueNet


class PolicyValueProvider(Protocol):
    def predict(self, position: Position) -> tuple[dict[int, float], Optional[float]]:
        ...


class NullPolicyValue:
    """Uniform priors and heuristic values."""

    def predict(self, position: Position) -> tuple[dict[int, float], Optional[float]]:
        return {}, None


def encode_position(position: Position) -> np.ndarray:
    """
    Encode a position as 3 planes from the side to move's perspective:
    - Channel 0: side-to-move pieces
    - Channel 1: opponent pieces
    - Channel 2: constant +1 (Black to move) or -1 (White to move)

    Returns:
        float32 array (3, 8, 8)
    """
    board = position.board.reshape(8, 8)
    me = int(position.to_move)
    return np.stack([
        board == me,
        board == -me,
        np.full((8, 8), me),
    ]).astype(np.float32)


class TorchPolicyValue:
    """
    Provider backed by a PolicyValueNet.

    Policy logits are restricted to the legal moves and softmaxed, so the
    returned priors always sum to 1 over the moves MCTS will expand.
    """

    def __init__(self, model: PolicyValueNet, device: Optional[str] = None):
        self.device = torch.device(device) if device is not None else next(model.parameters()).device
        self.model = model.to(self.device)
        self.model.eval()

    @classmethod
    def from_checkpoint(cls, model_path, device: str = MODEL_CONFIG['device']) -> "TorchPolicyValue":
        """
        Load a PolicyValueNet state_dict, inferring its size from the checkpoint.

        Args:
            model_path: Path to a .pt file saved with torch.save(model.state_dict())
            device: Device for inference
        """
        print(f"Loading policy/value model from {model_path}...")
        checkpoint = torch.load(model_path, map_location=device)

        num_res_blocks = sum(1 for key in checkpoint.keys() if key.startswith('trunk.') and key.endswith('body.0.weight'))
        num_hidden = checkpoint['stem.0.weight'].shape[0]
        value_hidden = checkpoint['value_mlp.0.weight'].shape[0]

        model = PolicyValueNet(num_res_blocks, num_hidden, value_hidden)
        model.load_state_dict(checkpoint)
        print(f"✓ Loaded policy/value model (ResNet-{num_res_blocks}, {num_hidden} hidden) on {device}")
        return cls(model, device)

    @torch.no_grad()
    def predict(self, position: Position) -> tuple[dict[int, float], Optional[float]]:
        encoded = torch.from_numpy(encode_position(position)).unsqueeze(0).to(self.device)
        policy_logits, value = self.model(encoded)
        value = float(np.clip(value.item(), -1.0, 1.0))

        moves = position.generate_moves()
        if not moves:
            return {}, value

        indices = [move.index for move in moves]
        legal_logits = policy_logits[0, torch.tensor(indices, device=self.device)]
        probs = torch.softmax(legal_logits, dim=0).cpu().numpy()

        priors = {index: float(p) for index, p in zip(indices, probs)}
        return priors, value
