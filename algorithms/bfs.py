"""
bfs.py — Breadth-First Search
==============================
Generator-based BFS on the 4-connected grid.  FIFO frontier, so cells
are expanded in non-decreasing distance from start and the first time
`end` is dequeued the path is a shortest one (by cell count).

A cell is counted and marked VISITED exactly once, when it is dequeued.
Walls are never enqueued.
"""

from collections import deque
from typing import Dict, Generator, Optional

from models import Grid, Pos
from algorithms.step import StepEvent, visit
from algorithms.path import trace_path


def bfs(grid: Grid, stats) -> Generator[StepEvent, None, Optional[int]]:
    """
    Yields:
        StepEvent – one per expanded cell, then one per path cell.

    Returns:
        Path length when `end` is reached, None when it is unreachable.
    """
    start, end = grid.endpoints()

    queue = deque([start])
    seen = {start}
    parent: Dict[Pos, Pos] = {}

    while queue:
        cell = queue.popleft()
        stats.increment_visited()

        if cell == end:
            return (yield from trace_path(grid, parent, end, stats))

        grid.mark_visited(cell)
        yield visit(cell, why=f"Dequeue {cell}: the oldest discovered cell (FIFO).")

        for nbr in grid.neighbours(cell):
            if nbr not in seen:
                seen.add(nbr)
                parent[nbr] = cell
                queue.append(nbr)

    return None
