"""
path.py — Path reconstruction shared by every search strategy.
"""

from typing import Dict, Generator, List

from models import Grid, Pos
from algorithms.step import StepEvent, path


def reconstruct(parent: Dict[Pos, Pos], end: Pos) -> List[Pos]:
    """Walk the parent map back from `end`.  Start itself is excluded."""
    cells = []
    cur = end
    while cur in parent:
        cells.append(cur)
        cur = parent[cur]
    cells.reverse()
    return cells


def trace_path(grid: Grid, parent: Dict[Pos, Pos], end: Pos, stats) -> Generator[StepEvent, None, int]:
    """
    Mark every intermediate cell PATH, one step each, then record the
    path length (cells after start, end included) in the stats.
    """
    cells = reconstruct(parent, end)
    for cell in cells:
        if grid.mark_path(cell):
            yield path(cell, why=f"Cell {cell} is on the path.")
    stats.set_path_length(len(cells))
    return len(cells)
