"""
astar.py — A* Search
=====================
Best-first search ordered by f = g + h, where g is the number of moves
from start and h estimates the moves left to `end`.

Heuristics (both take two (row, col) cells):
  • manhattan – |Δr| + |Δc|   admissible AND consistent on a 4-connected
                              unit-cost grid, so A* returns a shortest path
  • zero      – h = 0         A* degrades to Dijkstra

Frontier ties are broken by smaller h (prefer cells closer to the goal),
then by insertion order, which keeps runs deterministic.

Each cell is expanded (counted + marked VISITED) at most once; stale heap
entries for already-closed cells are skipped.
"""

import heapq
import itertools
from typing import Callable, Dict, Generator, Optional

from models import Grid, Pos
from algorithms.step import StepEvent, visit
from algorithms.path import trace_path


Heuristic = Callable[[Pos, Pos], float]


def manhattan(a: Pos, b: Pos) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])

def zero(a: Pos, b: Pos) -> float:
    return 0


def best_first(grid: Grid, stats, heuristic: Heuristic) -> Generator[StepEvent, None, Optional[int]]:
    start, end = grid.endpoints()

    order = itertools.count()
    g_score: Dict[Pos, int] = {start: 0}
    parent: Dict[Pos, Pos] = {}
    closed = set()

    h = heuristic(start, end)
    open_set = [(h, h, next(order), start)]

    while open_set:
        f, h, _, cell = heapq.heappop(open_set)
        if cell in closed:
            continue
        closed.add(cell)
        stats.increment_visited()

        if cell == end:
            return (yield from trace_path(grid, parent, end, stats))

        grid.mark_visited(cell)
        yield visit(cell, why=f"Expand {cell}: g={g_score[cell]}, h={h}, f={f} is the lowest in the open set.")

        for nbr in grid.neighbours(cell):
            if nbr in closed:
                continue
            tentative = g_score[cell] + 1
            if tentative < g_score.get(nbr, float("inf")):
                g_score[nbr] = tentative
                parent[nbr] = cell
                h_nbr = heuristic(nbr, end)
                heapq.heappush(open_set, (tentative + h_nbr, h_nbr, next(order), nbr))

    return None


def astar(grid: Grid, stats) -> Generator[StepEvent, None, Optional[int]]:
    return (yield from best_first(grid, stats, manhattan))
