"""
dfs.py — Depth-First Search
============================
Generator-based DFS using an explicit stack (no Python recursion limit
issues).  Cells are marked seen when pushed and VISITED when popped.

DFS finds *a* path, not the shortest one.  On an open grid it happily
wanders around the board before reaching `end`, which is the point of
showing it next to BFS.
"""

from typing import Dict, Generator, Optional

from models import Grid, Pos
from algorithms.step import StepEvent, visit
from algorithms.path import trace_path


def dfs(grid: Grid, stats) -> Generator[StepEvent, None, Optional[int]]:
    start, end = grid.endpoints()

    stack = [start]
    seen = {start}
    parent: Dict[Pos, Pos] = {}

    while stack:
        cell = stack.pop()
        stats.increment_visited()

        if cell == end:
            return (yield from trace_path(grid, parent, end, stats))

        grid.mark_visited(cell)
        yield visit(cell, why=f"Pop {cell}: the most recently discovered cell (LIFO).")

        for nbr in grid.neighbours(cell):
            if nbr not in seen:
                seen.add(nbr)
                parent[nbr] = cell
                stack.append(nbr)

    return None
