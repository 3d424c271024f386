"""
grid.py — Grid Model & Generators
==================================
Single source of truth for the pathfinding board.  Search strategies
and the renderer both talk to this object.

Responsibilities:
  1. Cell access & neighbour queries        (4-directional, walls skipped)
  2. Endpoint lookup                        (start / end, NoEndpoints if missing)
  3. Edit operations                        (wall / start / end / erase / toggle)
  4. Factories                              (default, random maze, from text)
  5. Annotation reset                       (visited / path → empty, walls kept)

Invariants:
  - Exactly one START and one END.  place_start / place_end clear the
    previous occurrence first; erase never touches an endpoint.
  - Every edit validates before it mutates (validate-then-commit).
"""

import random
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from models.cell import Cell, CellKind, Pos
from models.errors import InvalidEdit, NoEndpoints


# right, down, left, up (DFS depends on this order)
DIRECTIONS: Tuple[Pos, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

_CHAR_TO_KIND = {
    ".": CellKind.EMPTY,
    "#": CellKind.WALL,
    "S": CellKind.START,
    "E": CellKind.END,
    "o": CellKind.VISITED,
    "*": CellKind.PATH,
}
_KIND_TO_CHAR = {v: k for k, v in _CHAR_TO_KIND.items()}


class EditOp(Enum):
    WALL   = "wall"
    START  = "start"
    END    = "end"
    ERASE  = "erase"
    TOGGLE = "toggle"


class Grid:
    """
    Attributes:
        rows, cols : Fixed dimensions.
        cells      : rows × cols matrix of Cell.
    """

    def __init__(self, rows: int, cols: int):
        self.rows: int = rows
        self.cols: int = cols
        self.cells: List[List[Cell]] = [[Cell(r, c) for c in range(cols)] for r in range(rows)]

    # ==================================================================
    # FACTORIES
    # ==================================================================
    @staticmethod
    def default_endpoints(rows: int, cols: int) -> Tuple[Pos, Pos]:
        col = min(5, cols // 4)
        return (rows // 2, col), (rows // 2, cols - 1 - col)

    @classmethod
    def default(cls, rows: int, cols: int) -> "Grid":
        """Empty board with start on the left and end on the right."""
        grid = cls(rows, cols)
        start, end = cls.default_endpoints(rows, cols)
        grid.cell(start).kind = CellKind.START
        grid.cell(end).kind = CellKind.END
        return grid

    @classmethod
    def random_maze(cls, rows: int, cols: int, density: float = 0.3, seed: Optional[int] = None) -> "Grid":
        """
        Default board where every empty cell becomes a wall with
        probability `density`.  Not guaranteed solvable.
        """
        rng  = random.Random(seed)
        grid = cls.default(rows, cols)
        for cell in grid.iter_cells():
            if cell.kind is CellKind.EMPTY and rng.random() < density:
                cell.kind = CellKind.WALL
        return grid

    @classmethod
    def from_rows(cls, lines: Iterable[str]) -> "Grid":
        """
        Build a grid from text, one string per row:
            S start   E end   # wall   . empty
        """
        lines = [ln.strip() for ln in lines if ln.strip()]
        if not lines:
            raise InvalidEdit("empty layout")
        width = len(lines[0])
        if any(len(ln) != width for ln in lines):
            raise InvalidEdit("ragged layout", details={"widths": sorted({len(ln) for ln in lines})})
        grid = cls(len(lines), width)
        for r, line in enumerate(lines):
            for c, ch in enumerate(line):
                if ch not in _CHAR_TO_KIND:
                    raise InvalidEdit(f"unknown cell character {ch!r}", details={"row": r, "col": c})
                grid.cells[r][c].kind = _CHAR_TO_KIND[ch]
        for kind in (CellKind.START, CellKind.END):
            count = sum(1 for cell in grid.iter_cells() if cell.kind is kind)
            if count > 1:
                raise InvalidEdit(f"layout has {count} {kind.value} cells")
        return grid

    # ==================================================================
    # ACCESS
    # ==================================================================
    def in_bounds(self, pos: Pos) -> bool:
        r, c = pos
        return 0 <= r < self.rows and 0 <= c < self.cols

    def cell(self, pos: Pos) -> Cell:
        return self.cells[pos[0]][pos[1]]

    def kind(self, pos: Pos) -> CellKind:
        return self.cell(pos).kind

    def iter_cells(self) -> Iterable[Cell]:
        for row in self.cells:
            yield from row

    def find(self, kind: CellKind) -> Optional[Pos]:
        for cell in self.iter_cells():
            if cell.kind is kind:
                return cell.pos
        return None

    @property
    def start(self) -> Optional[Pos]:
        return self.find(CellKind.START)

    @property
    def end(self) -> Optional[Pos]:
        return self.find(CellKind.END)

    def endpoints(self) -> Tuple[Pos, Pos]:
        start, end = self.start, self.end
        if start is None or end is None:
            raise NoEndpoints(
                "grid is missing its start or end cell",
                details={"start": start, "end": end},
            )
        return start, end

    def neighbours(self, pos: Pos) -> List[Pos]:
        """In-bounds, non-wall cells up/down/left/right of `pos`."""
        r, c = pos
        result = []
        for dr, dc in DIRECTIONS:
            nxt = (r + dr, c + dc)
            if self.in_bounds(nxt) and self.cell(nxt).passable:
                result.append(nxt)
        return result

    def count(self, kind: CellKind) -> int:
        return sum(1 for cell in self.iter_cells() if cell.kind is kind)

    # ==================================================================
    # ANNOTATIONS (written by search strategies)
    # ==================================================================
    def mark_visited(self, pos: Pos) -> bool:
        return self.cell(pos).mark_visited()

    def mark_path(self, pos: Pos) -> bool:
        return self.cell(pos).mark_path()

    def clear_annotations(self) -> None:
        """visited / path → empty.  Walls and endpoints untouched."""
        for cell in self.iter_cells():
            cell.clear_annotation()

    # ==================================================================
    # EDITS (user paint operations)
    # ==================================================================
    def apply(self, op: EditOp, row: int, col: int) -> None:
        """Single entry point for paint operations."""
        pos = (row, col)
        if not self.in_bounds(pos):
            raise InvalidEdit(
                f"cell ({row}, {col}) is outside the {self.rows}x{self.cols} grid",
                details={"row": row, "col": col, "rows": self.rows, "cols": self.cols},
            )
        target = self.cell(pos)

        if op is EditOp.START or op is EditOp.END:
            kind  = CellKind.START if op is EditOp.START else CellKind.END
            other = CellKind.END if kind is CellKind.START else CellKind.START
            if target.kind is other:
                raise InvalidEdit(f"cannot place {kind.value} on the {other.value} cell", details={"row": row, "col": col})
            self.clear_annotations()
            previous = self.find(kind)
            if previous is not None:
                self.cell(previous).kind = CellKind.EMPTY
            target.kind = kind
            return

        self.clear_annotations()
        if target.is_endpoint:
            return
        if op is EditOp.WALL:
            target.kind = CellKind.WALL
        elif op is EditOp.ERASE:
            target.kind = CellKind.EMPTY
        elif op is EditOp.TOGGLE:
            target.kind = CellKind.EMPTY if target.kind is CellKind.WALL else CellKind.WALL

    def place_wall(self, row: int, col: int) -> None:
        self.apply(EditOp.WALL, row, col)

    def place_start(self, row: int, col: int) -> None:
        self.apply(EditOp.START, row, col)

    def place_end(self, row: int, col: int) -> None:
        self.apply(EditOp.END, row, col)

    def erase(self, row: int, col: int) -> None:
        self.apply(EditOp.ERASE, row, col)

    def toggle_wall(self, row: int, col: int) -> None:
        self.apply(EditOp.TOGGLE, row, col)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def snapshot(self) -> List[List[str]]:
        return [[cell.kind.value for cell in row] for row in self.cells]

    def to_rows(self) -> List[str]:
        """Inverse of from_rows (annotations included)."""
        return ["".join(_KIND_TO_CHAR[cell.kind] for cell in row) for row in self.cells]

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, start={self.start}, end={self.end})"
