"""
Board representation for Hive.

A sparse hex grid of piece stacks. Only the top of a stack occupies the
cell for adjacency and connectivity; buried pieces are ignored by the
mobility primitives.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional
import numpy as np

from .hexgrid import MAX_HEIGHT, Hex, Direction


class PieceKind(Enum):
    QUEEN = 'Q'
    GRASSHOPPER = 'G'
    SPIDER = 'S'
    BEETLE = 'B'
    ANT = 'A'
    PILLBUG = 'P'
    LADYBUG = 'L'
    MOSQUITO = 'M'

    @classmethod
    def from_letter(cls, letter: str) -> PieceKind:
        """Look up a kind by its one-letter code (case-insensitive)."""
        try:
            return cls(letter.upper())
        except ValueError:
            raise ValueError(f"Unknown piece letter: {letter!r}") from None


class Color(Enum):
    WHITE = 0
    BLACK = 1

    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE


@dataclass(frozen=True)
class Piece:
    """A tile: kind and owner. Compared by value."""
    kind: PieceKind
    color: Color

    @classmethod
    def from_letter(cls, letter: str) -> Piece:
        """Parse 'Q' (white queen) or 'q' (black queen)."""
        if len(letter) != 1 or not letter.isalpha():
            raise ValueError(f"Invalid piece token: {letter!r}")
        color = Color.WHITE if letter.isupper() else Color.BLACK
        return cls(PieceKind.from_letter(letter), color)

    def letter(self) -> str:
        """Uppercase letter for white, lowercase for black."""
        code = self.kind.value
        return code if self.color is Color.WHITE else code.lower()

    def __str__(self) -> str:
        return self.letter()


class StackFullError(ValueError):
    """Raised when placing onto a stack already at MAX_HEIGHT."""


class Board:
    """
    Hexagonal grid of piece stacks keyed by axial coordinate.

    Stacks are filled bottom-up: `place` appends above the current pieces
    and `remove` takes the lowest one, so `peek` lists pieces in the order
    they were placed. Empty stacks are never stored.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[dict[Hex, Iterable[Piece]]] = None):
        self._cells: dict[Hex, list[Piece]] = {}
        if cells:
            for loc, stack in cells.items():
                for piece in stack:
                    self.place(piece, Hex(*loc))

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def place(self, piece: Piece, loc: Hex) -> None:
        """Put a piece in the next free slot at `loc`."""
        stack = self._cells.get(loc)
        if stack is None:
            self._cells[loc] = [piece]
            return
        if len(stack) >= MAX_HEIGHT:
            raise StackFullError(f"Stack at {loc} is already {MAX_HEIGHT} high")
        stack.append(piece)

    def remove(self, loc: Hex) -> Optional[Piece]:
        """Take the lowest piece at `loc` (None if the cell is empty)."""
        stack = self._cells.get(loc)
        if not stack:
            return None
        piece = stack.pop(0)
        if not stack:
            del self._cells[loc]
        return piece

    def peek(self, loc: Hex) -> list[Piece]:
        """Pieces at `loc`, bottom to top."""
        return list(self._cells.get(loc, ()))

    def top(self, loc: Hex) -> Optional[Piece]:
        stack = self._cells.get(loc)
        return stack[-1] if stack else None

    def height(self, loc: Hex) -> int:
        return len(self._cells.get(loc, ()))

    def is_occupied(self, loc: Hex) -> bool:
        return loc in self._cells

    def move_piece(self, src: Hex, dst: Hex) -> None:
        """Lift the piece at `src` and put it on `dst`."""
        if dst in self._cells and len(self._cells[dst]) >= MAX_HEIGHT:
            raise StackFullError(f"Stack at {dst} is already {MAX_HEIGHT} high")
        piece = self.remove(src)
        if piece is None:
            raise ValueError(f"No piece at {src} to move")
        self.place(piece, dst)

    def find(self, piece: Piece) -> Optional[Hex]:
        """
        Return a cell holding a piece equal to `piece`.

        If several cells match, any one of them may be returned.
        """
        for loc, stack in self._cells.items():
            if piece in stack:
                return loc
        return None

    def occupied(self) -> set[Hex]:
        """All cells with at least one piece."""
        return set(self._cells)

    def pieces(self) -> Iterator[tuple[Hex, Piece]]:
        """Iterate (location, top piece) for every occupied cell."""
        for loc, stack in self._cells.items():
            yield loc, stack[-1]

    def is_empty(self) -> bool:
        return not self._cells

    def copy(self) -> Board:
        """Independent clone; mutating the copy never touches this board."""
        board = Board()
        board._cells = {loc: list(stack) for loc, stack in self._cells.items()}
        return board

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    @staticmethod
    def neighbors_of(loc: Hex) -> list[Hex]:
        return loc.neighbors()

    def occupied_neighbors(self, loc: Hex) -> list[Hex]:
        """Adjacent cells with a non-empty stack."""
        return [n for n in loc.neighbors() if n in self._cells]

    def outside(self) -> set[Hex]:
        """Empty cells touching the hive (its perimeter)."""
        result = set()
        for loc in self._cells:
            for n in loc.neighbors():
                if n not in self._cells:
                    result.add(n)
        return result

    @staticmethod
    def flanking(loc: Hex, neighbor: Hex) -> tuple[Hex, Hex]:
        """The two cells adjacent to both ends of the edge loc-neighbor."""
        direction = loc.direction_to(neighbor)
        if direction is None:
            raise ValueError(f"{loc} and {neighbor} are not adjacent")
        left, right = direction.flanks()
        return loc.apply(left), loc.apply(right)

    def slidable(self, loc: Hex) -> list[Hex]:
        """
        Neighbors the top piece at `loc` can slide onto in one step.

        A neighbor qualifies when it is empty and at least one of the two
        cells flanking the shared edge is empty. Two occupied flanks form a
        gate the piece cannot squeeze through.

        Hive contact is not checked here.
        """
        result = []
        for direction in Direction:
            n = loc.apply(direction)
            if n in self._cells:
                continue
            left, right = direction.flanks()
            if loc.apply(left) in self._cells and loc.apply(right) in self._cells:
                continue
            result.append(n)
        return result

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    def is_connected(self) -> bool:
        """Check if all occupied cells form a single cluster."""
        if len(self._cells) <= 1:
            return True

        start = next(iter(self._cells))
        seen = {start}
        frontier = [start]
        while frontier:
            cell = frontier.pop()
            for n in cell.neighbors():
                if n in self._cells and n not in seen:
                    seen.add(n)
                    frontier.append(n)
        return len(seen) == len(self._cells)

    def pinned(self) -> set[Hex]:
        """
        Occupied cells whose top piece cannot be lifted without splitting
        the hive.

        These are the articulation points of the graph of occupied cells,
        found with an iterative Tarjan low-link sweep. A cell holding a
        stack stays occupied when its top piece leaves, so only single
        pieces can be pinned.
        """
        discovery: dict[Hex, int] = {}
        low: dict[Hex, int] = {}
        articulation: set[Hex] = set()
        counter = 0

        for root in self._cells:
            if root in discovery:
                continue

            discovery[root] = low[root] = counter
            counter += 1
            root_children = 0
            # (cell, parent, iterator over neighbors)
            stack = [(root, None, iter(self.occupied_neighbors(root)))]

            while stack:
                cell, parent, children = stack[-1]
                advanced = False
                for child in children:
                    if child not in discovery:
                        discovery[child] = low[child] = counter
                        counter += 1
                        if cell == root:
                            root_children += 1
                        stack.append((child, cell, iter(self.occupied_neighbors(child))))
                        advanced = True
                        break
                    if child != parent:
                        low[cell] = min(low[cell], discovery[child])
                if advanced:
                    continue

                stack.pop()
                if parent is not None:
                    low[parent] = min(low[parent], low[cell])
                    if parent != root and low[cell] >= discovery[parent]:
                        articulation.add(parent)

            if root_children > 1:
                articulation.add(root)

        return {loc for loc in articulation if len(self._cells[loc]) == 1}

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def to_tensor(self, center: Hex = Hex(0, 0), radius: int = 6) -> np.ndarray:
        """
        Encode the window of cells around `center` as feature planes.

        Returns (17, 2*radius+1, 2*radius+1) float32 array indexed by
        [plane, r - center.r + radius, q - center.q + radius]:
          - Planes 0-7: White top pieces, one plane per PieceKind
          - Planes 8-15: Black top pieces, one plane per PieceKind
          - Plane 16: Stack height / MAX_HEIGHT
        Cells outside the window are dropped.
        """
        kinds = list(PieceKind)
        size = 2 * radius + 1
        planes = np.zeros((2 * len(kinds) + 1, size, size), dtype=np.float32)

        for loc, stack in self._cells.items():
            row = loc.r - center.r + radius
            col = loc.q - center.q + radius
            if not (0 <= row < size and 0 <= col < size):
                continue
            piece = stack[-1]
            plane = kinds.index(piece.kind) + piece.color.value * len(kinds)
            planes[plane, row, col] = 1.0
            planes[-1, row, col] = len(stack) / MAX_HEIGHT

        return planes

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        """Number of occupied cells."""
        return len(self._cells)

    def __contains__(self, loc: object) -> bool:
        return loc in self._cells

    def __hash__(self) -> int:
        return hash(frozenset((loc, tuple(stack)) for loc, stack in self._cells.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return self._cells == other._cells

    def __repr__(self) -> str:
        from .notation import board_to_dsl
        return board_to_dsl(self)
