"""Core game logic: hex geometry, board, move generation and notation."""

from .hexgrid import *
from .board import Board, Piece, PieceKind, Color, StackFullError
from .moves import MoveGenerator, Move
