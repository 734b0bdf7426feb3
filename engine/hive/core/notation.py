"""
Text notation for Hive boards.

Format example:
```
 . . . . . .
. . Q 3 g .
 . . A b . .
. . 2 . m .
 . . . . . .

start - [ 1, -2 ]
3 - [ G b B ]
2 - [ a M ]
```

Diagram:
- Rows use the odd-r offset layout. A row starting with a space is shifted
  half a cell to the right; rows must alternate.
- "." is an empty cell, "*" a highlighted empty cell (selectors).
- A letter is a single piece: Q G S B A P L M, uppercase = white,
  lowercase = black.
- A digit is a stack of that height; its pieces are listed in the stacks
  section.

Start line: axial coordinate of the first token of the first row.

Stacks section: one "<height> - [ <pieces> ]" line per digit token, in
reading order (row by row, left to right), pieces bottom to top.

An empty board is the single token ".".
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Iterator

from .hexgrid import MAX_HEIGHT, Hex, axial_to_oddr, oddr_to_axial
from .board import Board, Piece

EMPTY = '.'
SELECTED = '*'

START_PATTERN = re.compile(r'^start\s*-\s*\[\s*(-?\d+)\s*,?\s*(-?\d+)\s*\]$')
STACK_PATTERN = re.compile(r'^(\d+)\s*-\s*\[(.*)\]$')


@dataclass
class Diagram:
    """A parsed (or about to be printed) board diagram."""

    rows: list[list[str]] = field(default_factory=lambda: [[EMPTY]])
    indented: list[bool] = field(default_factory=lambda: [False])
    start: Hex = Hex(0, 0)
    stacks: list[list[Piece]] = field(default_factory=list)

    @classmethod
    def from_board(cls, board: Board) -> Diagram:
        """Lay out a board with one cell of padding around the hive."""
        if board.is_empty():
            return cls()

        offsets = [axial_to_oddr(loc) for loc in board.occupied()]
        top = min(row for row, _ in offsets) - 1
        bottom = max(row for row, _ in offsets) + 1
        left = min(col for _, col in offsets) - 1
        right = max(col for _, col in offsets) + 1

        diagram = cls(rows=[], indented=[], start=oddr_to_axial(top, left))
        for row in range(top, bottom + 1):
            tokens = []
            for col in range(left, right + 1):
                loc = oddr_to_axial(row, col)
                height = board.height(loc)
                if height == 0:
                    tokens.append(EMPTY)
                elif height == 1:
                    tokens.append(board.top(loc).letter())
                else:
                    tokens.append(str(height))
                    diagram.stacks.append(board.peek(loc))
            diagram.rows.append(tokens)
            diagram.indented.append(bool(row & 1))

        return diagram

    def is_blank(self) -> bool:
        """True if no token holds a piece."""
        return all(token in (EMPTY, SELECTED) for row in self.rows for token in row)

    def board_string(self) -> str:
        if self.rows == [[EMPTY]]:
            return EMPTY
        lines = []
        for tokens, indented in zip(self.rows, self.indented):
            lines.append((" " if indented else "") + " ".join(tokens) + "\n")
        return "".join(lines)

    def start_string(self) -> str:
        return f"start - [ {self.start.q}, {self.start.r} ]"

    def stacks_string(self) -> str:
        lines = []
        for stack in self.stacks:
            pieces = "".join(f"{piece.letter()} " for piece in stack)
            lines.append(f"{len(stack)} - [ {pieces}]\n")
        return "".join(lines)

    def to_dsl(self) -> str:
        return self.board_string() + "\n" + self.start_string() + "\n" + self.stacks_string()

    def cells(self) -> Iterator[tuple[Hex, str]]:
        """Yield (axial coordinate, token) for every token in the diagram."""
        first_shift = int(self.indented[0]) if self.indented else 0
        for i, (tokens, indented) in enumerate(zip(self.rows, self.indented)):
            # Each row down moves half a cell left unless the indent cancels it
            shift = int(indented) - first_shift - i
            if shift % 2:
                raise ValueError(f"Row {i} breaks the alternating indentation")
            for c, token in enumerate(tokens):
                yield Hex(self.start.q + c + shift // 2, self.start.r + i), token

    def selected(self) -> set[Hex]:
        """Cells marked with '*'."""
        return {loc for loc, token in self.cells() if token == SELECTED}

    def mark(self, cells: set[Hex]) -> None:
        """Replace the empty tokens at `cells` with '*'."""
        locations = self.cells()
        for tokens in self.rows:
            for c, token in enumerate(tokens):
                loc, _ = next(locations)
                if loc in cells and token == EMPTY:
                    tokens[c] = SELECTED

    def to_board(self) -> Board:
        board = Board()
        stacks = iter(self.stacks)
        for loc, token in self.cells():
            if token in (EMPTY, SELECTED):
                continue
            if token.isdigit():
                stack = next(stacks, None)
                if stack is None:
                    raise ValueError(f"No stacks entry for '{token}' at {loc}")
                if len(stack) != int(token):
                    raise ValueError(
                        f"Stack at {loc} should hold {token} pieces, got {len(stack)}"
                    )
                for piece in stack:
                    board.place(piece, loc)
            else:
                board.place(Piece.from_letter(token), loc)

        if next(stacks, None) is not None:
            raise ValueError("More stacks entries than stacks in the diagram")
        return board

    @classmethod
    def from_dsl(cls, text: str) -> Diagram:
        """Parse the diagram, start line and stacks section."""
        lines = text.splitlines()

        # Skip leading blank lines
        index = 0
        while index < len(lines) and not lines[index].strip():
            index += 1

        raw_rows = []
        while index < len(lines):
            line = lines[index].rstrip()
            stripped = line.strip()
            if not stripped or stripped.startswith('start') or '[' in stripped:
                break
            raw_rows.append(line)
            index += 1

        if not raw_rows:
            raise ValueError("Board diagram is missing")

        margin = min(len(row) - len(row.lstrip()) for row in raw_rows)
        rows = []
        indented = []
        for row in raw_rows:
            tokens = row.split()
            for token in tokens:
                _check_token(token)
            rows.append(tokens)
            indented.append(len(row) - len(row.lstrip()) > margin)

        start = None
        stacks = []
        for line in lines[index:]:
            stripped = line.strip()
            if not stripped:
                continue
            match = START_PATTERN.match(stripped)
            if match:
                start = Hex(int(match.group(1)), int(match.group(2)))
                continue
            match = STACK_PATTERN.match(stripped)
            if match:
                height = int(match.group(1))
                pieces = [Piece.from_letter(token) for token in match.group(2).split()]
                if len(pieces) != height:
                    raise ValueError(f"Stack line lists {len(pieces)} pieces: {stripped!r}")
                stacks.append(pieces)
                continue
            raise ValueError(f"Unrecognized line: {stripped!r}")

        diagram = cls(rows=rows, indented=indented, start=start or Hex(0, 0), stacks=stacks)
        if start is None and not diagram.is_blank():
            raise ValueError("Missing start line")
        return diagram


def _check_token(token: str) -> None:
    if token in (EMPTY, SELECTED):
        return
    if token.isdigit():
        if not 2 <= int(token) <= MAX_HEIGHT:
            raise ValueError(f"Invalid stack height: {token!r}")
        return
    # Raises ValueError for anything that is not a piece letter
    Piece.from_letter(token)


def board_string(board: Board) -> str:
    """Diagram rows only."""
    return Diagram.from_board(board).board_string()


def start_string(board: Board) -> str:
    """Start line for the diagram of `board`."""
    return Diagram.from_board(board).start_string()


def stacks_string(board: Board) -> str:
    """Stacks section for the diagram of `board`."""
    return Diagram.from_board(board).stacks_string()


def board_to_dsl(board: Board) -> str:
    """Convert a board to its full text form."""
    return Diagram.from_board(board).to_dsl()


def dsl_to_board(text: str) -> Board:
    """Parse a board from its text form."""
    return Diagram.from_dsl(text).to_board()


def selector_string(board: Board, cells: set[Hex]) -> str:
    """Text form of `board` with `cells` marked by '*'."""
    diagram = Diagram.from_board(board)
    diagram.mark(cells)
    return diagram.to_dsl()


def parse_selector(text: str) -> set[Hex]:
    """Parse a diagram and return the cells marked with '*'."""
    return Diagram.from_dsl(text).selected()
