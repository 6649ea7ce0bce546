"""
Static evaluation for Lines of Action positions.

Scores are from the perspective of the side to move (positive is good for
the mover). A side whose pieces already form one group short-circuits to
+/- SCORE_WIN; otherwise the score mixes group count, 2x2 density,
centralization and mobility.
"""

from loa_engine.config import DEFAULT_WEIGHTS, EvalWeights
from loa_engine.game.connectivity import centralization, count_groups, quad_score
from loa_engine.game.lines_of_action import Position

SCORE_WIN = 100000
SCORE_LOSS = -100000
SCORE_DRAW = 0


def evaluate(position: Position, weights: EvalWeights = DEFAULT_WEIGHTS) -> float:
    """
    Evaluate a position for the side to move.

    Args:
        position: Position to score
        weights: Feature weights

    Returns:
        SCORE_WIN if the mover is connected, SCORE_LOSS if the opponent is,
        otherwise the weighted feature difference.
    """
    board = position.board
    me = int(position.to_move)
    opp = -me

    g_me = count_groups(board, me)
    if g_me == 1:
        return SCORE_WIN
    g_opp = count_groups(board, opp)
    if g_opp == 1:
        return SCORE_LOSS

    q_me = quad_score(board, me)
    q_opp = quad_score(board, opp)
    c_me = centralization(board, me)
    c_opp = centralization(board, opp)

    # Opponent mobility is counted on the same board with only the side flag
    # swapped: a one-ply approximation, not a replayed position.
    mob_me = len(position.generate_moves())
    mob_opp = len(position.with_side_to_move(opp).generate_moves())

    return (
        weights.groups * ((2 - g_me) - (2 - g_opp))
        + weights.quads * (q_me - q_opp)
        + weights.central * (c_me - c_opp)
        + weights.mobility * (mob_me - mob_opp)
    )
