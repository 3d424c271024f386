"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every strategy the engine knows about.

    from algorithms import REGISTRY, get_algorithm, execute

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, family=Family.SORT, fn, …),
        …
        "astar":  AlgoInfo(key, label, family=Family.SEARCH, fn, …),
    }

The set is closed: six sorts, four searches.  `execute` is the one
place a strategy is invoked; it checks the model type against the
family so a sort can never be handed a grid.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Generator, List, Optional

from models import ArrayModel, Grid, InvalidConfiguration
from algorithms.step import StepEvent, StepKind

# ---------------------------------------------------------------------------
# Import all strategy modules
# ---------------------------------------------------------------------------
from algorithms.bubble_sort    import bubble_sort    as _bubble
from algorithms.selection_sort import selection_sort as _selection
from algorithms.insertion_sort import insertion_sort as _insertion
from algorithms.merge_sort     import merge_sort     as _merge
from algorithms.quick_sort     import quick_sort     as _quick
from algorithms.heap_sort      import heap_sort      as _heap
from algorithms.bfs            import bfs            as _bfs
from algorithms.dfs            import dfs            as _dfs
from algorithms.dijkstra       import dijkstra       as _dijkstra
from algorithms.astar          import astar          as _astar


class Family(Enum):
    SORT   = "sort"      # operates on ArrayModel
    SEARCH = "search"    # operates on Grid


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each strategy
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bfs"
    label:            str                    # human label, e.g. "Breadth-First Search"
    family:           Family
    fn:               Callable               # the generator function
    tags:             List[str] = field(default_factory=list)
    stable:           bool      = False      # sorts only
    complexity_best:  str       = ""
    complexity_avg:   str       = ""
    complexity_worst: str       = ""
    complexity_space: str       = ""
    guarantees:       str       = ""         # searches: what the path promises
    description:      str       = ""         # one-liner for the UI card

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "family":           self.family.value,
            "tags":             list(self.tags),
            "stable":           self.stable,
            "complexity_best":  self.complexity_best,
            "complexity_avg":   self.complexity_avg,
            "complexity_worst": self.complexity_worst,
            "complexity_space": self.complexity_space,
            "guarantees":       self.guarantees,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", family=Family.SORT, fn=_bubble,
        tags=["comparison", "in-place", "exchange"], stable=True,
        complexity_best="O(n²)", complexity_avg="O(n²)", complexity_worst="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs; the largest value bubbles to the end.",
    ),

    "selection": AlgoInfo(
        key="selection", label="Selection Sort", family=Family.SORT, fn=_selection,
        tags=["comparison", "in-place"],
        complexity_best="O(n²)", complexity_avg="O(n²)", complexity_worst="O(n²)", complexity_space="O(1)",
        description="Finds the minimum of the unsorted part and swaps it into place. At most n-1 swaps.",
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", family=Family.SORT, fn=_insertion,
        tags=["comparison", "in-place", "adaptive"], stable=True,
        complexity_best="O(n)", complexity_avg="O(n²)", complexity_worst="O(n²)", complexity_space="O(1)",
        description="Grows a sorted prefix, walking each new key left into place.",
    ),

    "merge": AlgoInfo(
        key="merge", label="Merge Sort", family=Family.SORT, fn=_merge,
        tags=["comparison", "divide-and-conquer"], stable=True,
        complexity_best="O(n log n)", complexity_avg="O(n log n)", complexity_worst="O(n log n)", complexity_space="O(n)",
        description="Splits at the midpoint, sorts both halves, merges them stably.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", family=Family.SORT, fn=_quick,
        tags=["comparison", "in-place", "divide-and-conquer"],
        complexity_best="O(n log n)", complexity_avg="O(n log n)", complexity_worst="O(n²)", complexity_space="O(log n)",
        description="Lomuto partition around the last element. Sorted input is its worst case.",
    ),

    "heap": AlgoInfo(
        key="heap", label="Heap Sort", family=Family.SORT, fn=_heap,
        tags=["comparison", "in-place"],
        complexity_best="O(n log n)", complexity_avg="O(n log n)", complexity_worst="O(n log n)", complexity_space="O(1)",
        description="Builds a max-heap, then repeatedly moves the root behind the heap.",
    ),

    "bfs": AlgoInfo(
        key="bfs", label="Breadth-First Search", family=Family.SEARCH, fn=_bfs,
        tags=["unweighted", "shortest-path", "traversal"],
        complexity_worst="O(V + E)", complexity_space="O(V)",
        guarantees="Shortest path (unweighted)",
        description="Explores ring by ring. Finds the shortest path by cell count.",
    ),

    "dfs": AlgoInfo(
        key="dfs", label="Depth-First Search", family=Family.SEARCH, fn=_dfs,
        tags=["unweighted", "traversal"],
        complexity_worst="O(V + E)", complexity_space="O(V)",
        guarantees="Finds a path (not necessarily shortest)",
        description="Dives deep before backtracking. Does NOT guarantee the shortest path.",
    ),

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra's Algorithm", family=Family.SEARCH, fn=_dijkstra,
        tags=["weighted", "shortest-path"],
        complexity_worst="O((V + E) log V)", complexity_space="O(V)",
        guarantees="Shortest path (weighted)",
        description="Greedily expands the closest cell. With unit costs it behaves like BFS.",
    ),

    "astar": AlgoInfo(
        key="astar", label="A* Search", family=Family.SEARCH, fn=_astar,
        tags=["weighted", "shortest-path", "heuristic"],
        complexity_worst="O((V + E) log V)", complexity_space="O(V)",
        guarantees="Shortest path (weighted, with heuristic)",
        description="Dijkstra guided by Manhattan distance. Optimal because the heuristic is admissible.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_family(family: Family) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family is family]


def resolve(key: str, family: Family) -> AlgoInfo:
    """Registry lookup that raises InvalidConfiguration instead of returning None."""
    info = REGISTRY.get(key)
    if info is None or info.family is not family:
        raise InvalidConfiguration(
            f"Unknown {family.value} algorithm: {key!r}",
            details={"algorithm": key, "choices": [a.key for a in algorithms_by_family(family)]},
        )
    return info


# ---------------------------------------------------------------------------
# Single execution entry point
# ---------------------------------------------------------------------------
def execute(info: AlgoInfo, model, stats) -> Generator[StepEvent, None, Optional[int]]:
    """Create the step generator for `info` over `model`."""
    expected = ArrayModel if info.family is Family.SORT else Grid
    if not isinstance(model, expected):
        raise InvalidConfiguration(
            f"{info.label} needs a {expected.__name__}, got {type(model).__name__}",
            details={"algorithm": info.key},
        )
    return info.fn(model, stats)


__all__ = [
    "AlgoInfo",
    "Family",
    "REGISTRY",
    "StepEvent",
    "StepKind",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_family",
    "resolve",
    "execute",
]
