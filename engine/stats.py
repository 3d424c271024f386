"""
stats.py — Stats Collector & Run Metrics
=========================================
StatsCollector is the live tally a strategy bumps while it runs;
RunMetrics is the frozen-in-time card the Analytics panel renders.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


class StatsCollector:
    """
    Counters are monotonic within a run; reset() starts a new one.

    Attributes:
        comparisons   : Logical comparisons (sorting).
        swaps         : Logical exchanges / moves (sorting).
        cells_visited : Cells expanded (pathfinding).
        path_length   : Cells on the reconstructed path (pathfinding).
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.comparisons:   int = 0
        self.swaps:         int = 0
        self.cells_visited: int = 0
        self.path_length:   int = 0

    def increment_comparisons(self) -> None:
        self.comparisons += 1

    def increment_swaps(self) -> None:
        self.swaps += 1

    def increment_visited(self) -> None:
        self.cells_visited += 1

    def set_path_length(self, length: int) -> None:
        self.path_length = length

    def as_dict(self) -> Dict[str, int]:
        return {
            "comparisons":   self.comparisons,
            "swaps":         self.swaps,
            "cells_visited": self.cells_visited,
            "path_length":   self.path_length,
        }

    def __repr__(self) -> str:
        return f"StatsCollector({self.as_dict()})"


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    comparisons:   int   = 0
    swaps:         int   = 0
    cells_visited: int   = 0
    path_length:   int   = 0          # cells after start, end included
    total_steps:   int   = 0          # number of observable steps taken
    wall_time_ms:  float = 0.0
    outcome:       str   = ""         # OutcomeKind value, "" while running
    path_found:    bool  = False

    @property
    def operations(self) -> int:
        return self.comparisons + self.swaps

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["operations"] = self.operations
        return data
