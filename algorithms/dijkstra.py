"""
dijkstra.py — Dijkstra's Algorithm
===================================
Every move costs 1, so Dijkstra is BFS with an explicit priority queue:
expand the lowest-g frontier cell, relax neighbours when a strictly
shorter tentative distance turns up.  Shares the best-first core with
A*, using the zero heuristic.
"""

from typing import Generator, Optional

from models import Grid
from algorithms.step import StepEvent
from algorithms.astar import best_first, zero


def dijkstra(grid: Grid, stats) -> Generator[StepEvent, None, Optional[int]]:
    return (yield from best_first(grid, stats, zero))
