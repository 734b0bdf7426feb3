"""
Hex geometry for the Hive engine.

Cells use axial coordinates (q, r) as described at
https://www.redblobgames.com/grids/hexagons/#coordinates-axial

Pointy-top hexes, directions listed clockwise starting at NW:

        NW   NE
          \\ /
     W --  o  -- E
          / \\
        SW   SE

The text diagrams use the "odd-r" offset layout, where odd rows are
shoved half a cell to the right:

   row -1 |  . . .
   row  0 | . . .
   row  1 |  . . .

Coordinates are unbounded; the board stores cells sparsely.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterator, NamedTuple

__all__ = [
    'MAX_HEIGHT', 'SPIDER_STEPS', 'Hex', 'Direction', 'CLOCKWISE', 'DELTA_TO_DIRECTION',
    'is_adjacent', 'distance', 'axial_to_oddr', 'oddr_to_axial', 'line',
]

# Tallest legal stack is 5 (four beetles/mosquitoes on a piece), plus headroom
MAX_HEIGHT = 7

# Number of slides a spider must make
SPIDER_STEPS = 3


class Hex(NamedTuple):
    """Axial coordinate of a cell."""
    q: int
    r: int

    def apply(self, direction: Direction) -> Hex:
        """Neighbor one step away in `direction`."""
        dq, dr = direction.delta
        return Hex(self.q + dq, self.r + dr)

    def neighbors(self) -> list[Hex]:
        """All six neighbors, clockwise from NW."""
        return [self.apply(d) for d in Direction]

    def direction_to(self, other: Hex) -> Direction | None:
        """Direction of an adjacent cell (None if not adjacent)."""
        return DELTA_TO_DIRECTION.get((other.q - self.q, other.r - self.r))

    def __repr__(self) -> str:
        return f"Hex({self.q}, {self.r})"


class Direction(Enum):
    NW = (0, -1)
    NE = (1, -1)
    E = (1, 0)
    SE = (0, 1)
    SW = (-1, 1)
    W = (-1, 0)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value

    def rotate(self, steps: int) -> Direction:
        """Rotate clockwise by `steps` sixths of a turn (negative = counter-clockwise)."""
        return CLOCKWISE[(CLOCKWISE.index(self) + steps) % 6]

    def flanks(self) -> tuple[Direction, Direction]:
        """
        The two directions adjacent to this one.

        For an edge from `a` to `a.apply(d)`, the cells
        `a.apply(d.rotate(-1))` and `a.apply(d.rotate(1))` touch both ends.
        """
        return self.rotate(-1), self.rotate(1)

    def opposite(self) -> Direction:
        return self.rotate(3)


CLOCKWISE = list(Direction)
DELTA_TO_DIRECTION = {d.delta: d for d in Direction}


def is_adjacent(a: Hex, b: Hex) -> bool:
    """Check if two cells share an edge."""
    return a.direction_to(b) is not None


def distance(a: Hex, b: Hex) -> int:
    """Number of steps between two cells."""
    dq = a.q - b.q
    dr = a.r - b.r
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def axial_to_oddr(h: Hex) -> tuple[int, int]:
    """Convert axial coordinate to odd-r offset (row, col)."""
    row = h.r
    col = h.q + (h.r - (h.r & 1)) // 2
    return row, col


def oddr_to_axial(row: int, col: int) -> Hex:
    """Convert odd-r offset (row, col) to axial coordinate."""
    q = col - (row - (row & 1)) // 2
    return Hex(q, row)


def line(start: Hex, direction: Direction) -> Iterator[Hex]:
    """Walk cells from `start` (exclusive) in a straight line, forever."""
    cell = start.apply(direction)
    while True:
        yield cell
        cell = cell.apply(direction)
