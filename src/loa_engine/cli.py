#!/usr/bin/env python3
"""
Command-line front end: pick a move for a Lines of Action position.

Examples:
    loa-engine --engine ab --depth 4
    loa-engine --engine mcts --sims 2000 --moves "b1-b3 a2-c2"
    loa-engine --fen "1bbbbbb1/w6w/w6w/w6w/w6w/w6w/w6w/1bbbbbb1 b"
"""

import argparse
import sys

from loa_engine.config import CLI_CONFIG, MCTS_CONFIG, SEARCH_CONFIG
from loa_engine.engine.pvs import search_best
from loa_engine.game.lines_of_action import Piece, Position
from loa_engine.game.notation import apply_algebraic_moves, from_ascii, from_fen, move_to_str
from loa_engine.mcts.mcts import MCTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Lines of Action move search')
    parser.add_argument('--engine', choices=['ab', 'mcts'], default='ab',
                        help='ab = PVS alpha-beta, mcts = PUCT tree search')
    parser.add_argument('--fen', type=str, default=None,
                        help='FEN-like position, e.g. "1bbbbbb1/w6w/.../1bbbbbb1 b"')
    parser.add_argument('--board', type=str, default=None,
                        help='ASCII board, 8 rows separated by "/" or newlines')
    parser.add_argument('--to', type=str, default='b',
                        help='Side to move for --board (b/w or 1/2)')
    parser.add_argument('--moves', type=str, default=None,
                        help='Moves to apply first, e.g. "b1-b3 a2-c2"')
    parser.add_argument('--depth', type=int, default=SEARCH_CONFIG['depth'],
                        help='PVS search depth')
    parser.add_argument('--tt-size', type=int, default=SEARCH_CONFIG['tt_size'],
                        help='Max transposition table entries')
    parser.add_argument('--time-ms', type=int, default=None,
                        help='Time budget (reported only, not enforced)')
    parser.add_argument('--sims', type=int, default=MCTS_CONFIG['num_searches'],
                        help='MCTS simulations')
    parser.add_argument('--c-puct', type=float, default=MCTS_CONFIG['C'],
                        help='MCTS exploration constant')
    parser.add_argument('--temperature', type=float, default=CLI_CONFIG['temperature'],
                        help='MCTS visit-count temperature')
    parser.add_argument('--model', type=str, default=None,
                        help='Policy/value network checkpoint for MCTS')
    parser.add_argument('--verbose', action='store_true',
                        help='Print search progress')
    return parser


def build_position(args: argparse.Namespace) -> Position:
    """--fen takes priority over --board; otherwise the start position. Then --moves."""
    if args.fen:
        position = from_fen(args.fen)
    elif args.board:
        to_move = Piece.WHITE if args.to.lower() in ('w', '2') else Piece.BLACK
        position = from_ascii(args.board, to_move)
    else:
        position = Position.initial()

    if args.moves:
        position = apply_algebraic_moves(position, args.moves)
    return position


def run(args: argparse.Namespace) -> str:
    position = build_position(args)
    if args.verbose:
        print(position)

    if args.engine == 'ab':
        result = search_best(
            position,
            depth=args.depth,
            tt_size=args.tt_size,
            time_limit_ms=args.time_ms,
            verbose=args.verbose
        )
        if result.best_move is None:
            return "bestmove (none)"
        return f"bestmove {move_to_str(result.best_move)} score {result.score:.1f} (AB depth {args.depth})"

    provider = None
    if args.model:
        from loa_engine.model.policy_value import TorchPolicyValue
        provider = TorchPolicyValue.from_checkpoint(args.model)

    mcts = MCTS({'num_searches': args.sims, 'C': args.c_puct, 'temperature': args.temperature},
                provider=provider)
    result = mcts.search(position, verbose=args.verbose)
    if result.best_move is None:
        return "bestmove (none)"
    return f"bestmove {move_to_str(result.best_move)} (MCTS sims {args.sims})"


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        print(run(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
