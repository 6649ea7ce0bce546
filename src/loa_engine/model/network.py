"""
Policy/value ResNet for Lines of Action.

Input: (batch, 3, 8, 8) planes - side-to-move pieces, opponent pieces and a
constant plane holding +1 (Black to move) or -1 (White to move).

Policy: every LoA move is a slide along one of the 8 compass directions by
1-7 squares, so the head predicts 8 x 7 = 56 move planes over the board
(plane = direction * 7 + distance - 1, cell = from-square). forward()
gathers those into the flat from * 64 + to action index MCTS uses; from/to
pairs that share no line get UNREACHABLE_LOGIT.

Value: trunk features are averaged over the board and mapped through a small
MLP to a tanh score in [-1, 1] for the side to move.
"""

import numpy as np
import torch
import torch.nn as nn
import torch.nn.functional as F

from loa_engine.game.lines_of_action import DIRECTIONS

BOARD_SIZE = 8
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE
ACTION_SIZE = NUM_SQUARES * NUM_SQUARES
NUM_PLANES = 3
MAX_DISTANCE = BOARD_SIZE - 1
NUM_MOVE_PLANES = len(DIRECTIONS) * MAX_DISTANCE

# Logit given to from/to pairs no move can connect
UNREACHABLE_LOGIT = -1e4


def build_move_slots() -> np.ndarray:
    """
    Map each action index (from * 64 + to) to its cell in the flattened
    (56, 8, 8) move planes.

    Returns:
        int64 array of ACTION_SIZE slots; pairs without a common line point
        at NUM_MOVE_PLANES * NUM_SQUARES, the padding column.
    """
    slots = np.full(ACTION_SIZE, NUM_MOVE_PLANES * NUM_SQUARES, dtype=np.int64)
    for from_sq in range(NUM_SQUARES):
        x, y = from_sq % BOARD_SIZE, from_sq // BOARD_SIZE
        for d, (dx, dy) in enumerate(DIRECTIONS):
            for dist in range(1, MAX_DISTANCE + 1):
                tx, ty = x + dx * dist, y + dy * dist
                if not (0 <= tx < BOARD_SIZE and 0 <= ty < BOARD_SIZE):
                    break
                plane = d * MAX_DISTANCE + dist - 1
                slots[from_sq * NUM_SQUARES + ty * BOARD_SIZE + tx] = plane * NUM_SQUARES + from_sq
    return slots


class ResidualBlock(nn.Module):
    """conv-BN-ReLU-conv-BN with an identity skip."""

    def __init__(self, channels: int):
        super().__init__()
        self.body = nn.Sequential(
            nn.Conv2d(channels, channels, kernel_size=3, padding=1, bias=False),
            nn.BatchNorm2d(channels),
            nn.ReLU(),
            nn.Conv2d(channels, channels, kernel_size=3, padding=1, bias=False),
            nn.BatchNorm2d(channels),
        )

    def forward(self, x):
        return F.relu(x + self.body(x))


class PolicyValueNet(nn.Module):
    """
    Args:
        num_res_blocks: Residual blocks in the trunk
        num_hidden: Trunk channels
        value_hidden: Width of the value MLP
    """

    def __init__(self, num_res_blocks: int, num_hidden: int, value_hidden: int = 64):
        super().__init__()
        self.stem = nn.Sequential(
            nn.Conv2d(NUM_PLANES, num_hidden, kernel_size=3, padding=1, bias=False),
            nn.BatchNorm2d(num_hidden),
            nn.ReLU()
        )
        self.trunk = nn.Sequential(*[ResidualBlock(num_hidden) for _ in range(num_res_blocks)])

        # 1x1 conv: one logit per (direction, distance) from each square
        self.move_planes = nn.Conv2d(num_hidden, NUM_MOVE_PLANES, kernel_size=1)

        self.value_mlp = nn.Sequential(
            nn.Linear(num_hidden, value_hidden),
            nn.ReLU(),
            nn.Linear(value_hidden, 1),
            nn.Tanh()
        )

        # Derived from the board geometry, so not saved with the weights
        self.register_buffer('move_slots', torch.from_numpy(build_move_slots()), persistent=False)

    def forward(self, x):
        features = self.trunk(self.stem(x))

        planes = self.move_planes(features).flatten(1)  # (batch, 56 * 64)
        padding = planes.new_full((planes.shape[0], 1), UNREACHABLE_LOGIT)
        policy = torch.cat([planes, padding], dim=1)[:, self.move_slots]

        value = self.value_mlp(features.mean(dim=(2, 3)))
        return policy, value
