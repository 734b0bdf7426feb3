#!/usr/bin/env python3
"""
Terminal move lister for Hive positions.

Reads a board in the text notation and prints the legal moves, either for
one piece (--at Q R) or for every supported piece of a color.
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hive.core.hexgrid import Hex
from hive.core.board import Board, Color
from hive.core.moves import MoveGenerator, SUPPORTED_KINDS
from hive.core.notation import dsl_to_board, board_to_dsl, selector_string


def read_board(path: str) -> Board:
    """Load a board from a file, or stdin when path is '-'."""
    if path == '-':
        text = sys.stdin.read()
    else:
        text = Path(path).read_text()
    return dsl_to_board(text)


def show_piece_moves(board: Board, location: Hex, show_boards: bool = False) -> int:
    """Print destinations for one piece. Returns number of moves."""
    piece = board.top(location)
    if piece is None:
        raise ValueError(f"No piece at {location.q},{location.r}")
    if piece.kind not in SUPPORTED_KINDS:
        raise ValueError(f"Moves for {piece.kind.name.lower()} are not supported")
    if board.height(location) != 1:
        raise ValueError(f"Piece at {location.q},{location.r} is part of a stack; "
                         f"climbing moves are not supported")

    generator = MoveGenerator(board)
    destinations = generator.destinations(location)

    print(f"{piece.kind.name.capitalize()} ({piece.color.name.lower()}) at {location.q},{location.r}: "
          f"{len(destinations)} moves")
    if location in generator.pinned:
        print("Pinned: moving it would split the hive")
    print(selector_string(board, destinations))

    if show_boards:
        for new_board in generator.moves(location):
            print(board_to_dsl(new_board))

    return len(destinations)


def show_color_moves(board: Board, color: Color) -> int:
    """Print every move for a color. Returns number of moves."""
    moves = MoveGenerator(board).moves_for(color)
    print(f"{color.name.capitalize()}: {len(moves)} moves")
    for move in moves:
        print(f"  {move}")
    return len(moves)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='List legal Hive moves for a position')
    parser.add_argument('board', type=str, help="Board file in text notation ('-' for stdin)")
    parser.add_argument('--at', type=int, nargs=2, metavar=('Q', 'R'),
                        help='Axial coordinate of the piece to move')
    parser.add_argument('--color', choices=['white', 'black'],
                        help='Only list moves for this color')
    parser.add_argument('--show-boards', action='store_true',
                        help='Print every resulting board (with --at)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        board = read_board(args.board)
    except (OSError, ValueError) as e:
        parser.error(f"Could not read board: {e}")

    if not board.is_connected():
        logging.warning("Board is not a single hive; moves may be wrong")

    try:
        if args.at:
            show_piece_moves(board, Hex(*args.at), args.show_boards)
        else:
            colors = [Color[args.color.upper()]] if args.color else list(Color)
            for color in colors:
                show_color_moves(board, color)
    except ValueError as e:
        parser.error(str(e))

    return 0


if __name__ == '__main__':
    sys.exit(main())
