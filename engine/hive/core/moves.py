"""
Move generation for Hive.

For a piece sitting alone on a cell, produces every position reachable by
one legal move, enforcing:
- One hive: a pinned piece (articulation point of the hive) cannot move.
- Freedom to move: sliding pieces cannot pass through a gate formed by
  two occupied cells flanking the edge they cross.

Climbing pieces (beetle, ladybug, mosquito) and the pillbug are not
handled. The input position is assumed to be a single connected hive.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .hexgrid import SPIDER_STEPS, Direction, Hex, line
from .board import Board, Color, Piece, PieceKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """A piece moving from one cell to another."""
    src: Hex
    dst: Hex
    piece: Piece

    def apply(self, board: Board) -> Board:
        """Return a new board with this move played."""
        new_board = board.copy()
        new_board.move_piece(self.src, self.dst)
        return new_board

    def __str__(self) -> str:
        return f"{self.piece.letter()} {self.src.q},{self.src.r} -> {self.dst.q},{self.dst.r}"


def _hugs_hive(board: Board, src: Hex, dst: Hex) -> bool:
    """True if a piece sliding src -> dst stays in contact with the hive."""
    left, right = board.flanking(src, dst)
    return board.is_occupied(left) or board.is_occupied(right)


class MoveGenerator:
    """
    Generates moves for pieces on a snapshot of a board.

    The board is copied on construction, so later changes to the caller's
    board are not seen and the generator never modifies it.
    """

    def __init__(self, board: Board):
        self.board = board.copy()
        self.pinned = self.board.pinned()
        self.outside = self.board.outside()

    def _check_source(self, location: Hex, kind: PieceKind) -> None:
        stack = self.board.peek(location)
        assert len(stack) == 1, f"Expected a single piece at {location}, found {len(stack)}"
        assert stack[0].kind is kind, f"Expected {kind.name} at {location}, found {stack[0].kind.name}"

    def _lift(self, location: Hex, kind: PieceKind) -> Board:
        """Board with the piece at `location` removed."""
        self._check_source(location, kind)
        removed = self.board.copy()
        removed.remove(location)
        return removed

    def queen_destinations(self, location: Hex) -> set[Hex]:
        """One slide to a perimeter cell."""
        removed = self._lift(location, PieceKind.QUEEN)
        if location in self.pinned:
            return set()

        outside = removed.outside()
        return {cell for cell in removed.slidable(location) if cell in outside}

    def grasshopper_destinations(self, location: Hex) -> set[Hex]:
        """
        Jump in a straight line over at least one piece, landing on the
        first empty cell.
        """
        self._check_source(location, PieceKind.GRASSHOPPER)
        if location in self.pinned:
            return set()

        result = set()
        for direction in Direction:
            # Nothing to jump over
            if not self.board.is_occupied(location.apply(direction)):
                continue
            landing = next(cell for cell in line(location, direction)
                           if not self.board.is_occupied(cell))
            result.add(landing)

        return result

    def spider_destinations(self, location: Hex) -> set[Hex]:
        """
        Exactly three slides around the hive without revisiting a cell.

        The starting cell counts as visited, so the spider cannot pass back
        through it. Each slide must keep the spider touching the hive.
        """
        removed = self._lift(location, PieceKind.SPIDER)
        if location in self.pinned:
            return set()

        result = set()
        paths = [[location]]
        while paths:
            path = paths.pop()
            cell = path[-1]
            if len(path) == SPIDER_STEPS + 1:
                result.add(cell)
                continue
            for step in removed.slidable(cell):
                if step in path or not _hugs_hive(removed, cell, step):
                    continue
                paths.append(path + [step])

        return result

    def ant_destinations(self, location: Hex) -> set[Hex]:
        """Any number of slides, staying in contact with the hive."""
        removed = self._lift(location, PieceKind.ANT)
        if location in self.pinned:
            return set()

        visited = {location}
        frontier = [location]
        while frontier:
            cell = frontier.pop()
            for step in removed.slidable(cell):
                if step in visited or not removed.occupied_neighbors(step):
                    continue
                visited.add(step)
                frontier.append(step)

        visited.discard(location)
        return visited

    def destinations(self, location: Hex) -> set[Hex]:
        """Destination cells for the piece at `location`."""
        piece = self.board.top(location)
        if piece is None:
            raise ValueError(f"No piece at {location}")

        method = _DESTINATIONS.get(piece.kind)
        if method is None:
            raise NotImplementedError(f"Moves for {piece.kind.name} are not supported")

        result = method(self, location)
        logger.debug(f"{piece.kind.name} at {location}: {len(result)} destinations")
        return result

    def _materialize(self, location: Hex, destinations: set[Hex]) -> list[Board]:
        """One board per destination, in a stable order."""
        lifted = self.board.copy()
        piece = lifted.remove(location)

        result = []
        for destination in sorted(destinations):
            new_board = lifted.copy()
            new_board.place(piece, destination)
            result.append(new_board)
        return result

    def queen_moves(self, location: Hex) -> list[Board]:
        return self._materialize(location, self.queen_destinations(location))

    def grasshopper_moves(self, location: Hex) -> list[Board]:
        return self._materialize(location, self.grasshopper_destinations(location))

    def spider_moves(self, location: Hex) -> list[Board]:
        return self._materialize(location, self.spider_destinations(location))

    def ant_moves(self, location: Hex) -> list[Board]:
        return self._materialize(location, self.ant_destinations(location))

    def moves(self, location: Hex) -> list[Board]:
        """Resulting boards for every legal move of the piece at `location`."""
        return self._materialize(location, self.destinations(location))

    def moves_for(self, color: Color) -> list[Move]:
        """
        All moves for `color`'s supported pieces.

        Pieces that are part of a stack, and piece kinds without a move
        rule here, are skipped.
        """
        moves = []
        for location, piece in sorted(self.board.pieces(), key=lambda item: item[0]):
            if piece.color is not color or piece.kind not in _DESTINATIONS:
                continue
            if self.board.height(location) != 1:
                continue
            for destination in sorted(self.destinations(location)):
                moves.append(Move(location, destination, piece))

        logger.debug(f"{color.name}: {len(moves)} moves")
        return moves


_DESTINATIONS = {
    PieceKind.QUEEN: MoveGenerator.queen_destinations,
    PieceKind.GRASSHOPPER: MoveGenerator.grasshopper_destinations,
    PieceKind.SPIDER: MoveGenerator.spider_destinations,
    PieceKind.ANT: MoveGenerator.ant_destinations,
}

SUPPORTED_KINDS = frozenset(_DESTINATIONS)


# Convenience functions
def get_destinations(board: Board, location: Hex) -> set[Hex]:
    """Destination cells for the piece at `location`."""
    return MoveGenerator(board).destinations(location)


def get_moves(board: Board, location: Hex) -> list[Board]:
    """Resulting boards for the piece at `location`."""
    return MoveGenerator(board).moves(location)


def get_legal_moves(board: Board, color: Color) -> list[Move]:
    """All moves for the given color's supported pieces."""
    return MoveGenerator(board).moves_for(color)
