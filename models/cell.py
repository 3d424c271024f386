from enum import Enum
from typing import Tuple


Pos = Tuple[int, int]   # (row, col)


# ---------------------------------------------------------------------------
# Cell Kind Enum — maps 1-to-1 with the grid colour palette
# ---------------------------------------------------------------------------
class CellKind(Enum):
    EMPTY   = "empty"     # transparent
    WALL    = "wall"      # dark grey, user-placed obstacle
    START   = "start"     # green, exactly one
    END     = "end"       # red, exactly one
    VISITED = "visited"   # translucent blue, expanded by the search
    PATH    = "path"      # amber, on the reconstructed path


# Kinds a search leaves behind; wiped by clear_annotations().
ANNOTATIONS = (CellKind.VISITED, CellKind.PATH)


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------
class Cell:
    """
    Fixed position, mutable kind.

    Attributes:
        row, col : Position in the grid.
        kind     : Current CellKind.
    """

    __slots__ = ("row", "col", "kind")

    def __init__(self, row: int, col: int, kind: CellKind = CellKind.EMPTY):
        self.row: int       = row
        self.col: int       = col
        self.kind: CellKind = kind

    @property
    def pos(self) -> Pos:
        return (self.row, self.col)

    @property
    def passable(self) -> bool:
        return self.kind is not CellKind.WALL

    @property
    def is_endpoint(self) -> bool:
        return self.kind in (CellKind.START, CellKind.END)

    # ------------------------------------------------------------------
    # Annotation helpers: endpoints are never overwritten by a search
    # ------------------------------------------------------------------
    def mark_visited(self) -> bool:
        if self.is_endpoint:
            return False
        self.kind = CellKind.VISITED
        return True

    def mark_path(self) -> bool:
        if self.is_endpoint:
            return False
        self.kind = CellKind.PATH
        return True

    def clear_annotation(self) -> None:
        if self.kind in ANNOTATIONS:
            self.kind = CellKind.EMPTY

    def __repr__(self) -> str:
        return f"Cell({self.row},{self.col},{self.kind.value})"
