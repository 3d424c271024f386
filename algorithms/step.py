"""
step.py — Algorithm Step Events
================================
Every strategy is a generator.  Each `yield` marks ONE observable step
and hands back a StepEvent describing what just happened:

    • which kind of operation (compare / swap / move / visit / path …)
    • which array indices or grid cells it touched (`focus`)
    • a plain-English explanation of *why* (Learning Mode reads this)

Design decisions:
  - The event is tiny and frozen.  It does NOT carry the model state;
    the driver (Run Controller / Recorder) takes the snapshot, because
    only the driver knows which Run the step belongs to.
  - The strategy mutates the model BEFORE yielding, so the model a
    consumer reads at the paused instant already reflects the event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Any


class StepKind(Enum):
    COMPARE = "compare"     # two elements compared
    SWAP    = "swap"        # two elements exchanged
    MOVE    = "move"        # one element moved ahead of a run (merge)
    PIVOT   = "pivot"       # partition pivot chosen
    SETTLE  = "settle"      # an element reached its final position
    VISIT   = "visit"       # a grid cell was expanded
    PATH    = "path"        # a grid cell was marked on the final path
    RESET   = "reset"       # driver-emitted: model replaced / cleared / edited
    DONE    = "done"        # driver-emitted: terminal outcome reached
    STATE   = "state"       # driver-emitted: on-demand snapshot (polling)


@dataclass(frozen=True)
class StepEvent:
    """
    Attributes:
        kind        : StepKind of the operation.
        focus       : Indices (sorting) or (row, col) cells (pathfinding).
        explanation : Human-readable "why" text.
    """

    kind:        StepKind
    focus:       Tuple[Any, ...] = ()
    explanation: str             = ""


# ---------------------------------------------------------------------------
# Convenience constructors so strategies stay readable
# ---------------------------------------------------------------------------
def compare(*focus, why: str = "") -> StepEvent:
    return StepEvent(StepKind.COMPARE, tuple(focus), why)

def swap(*focus, why: str = "") -> StepEvent:
    return StepEvent(StepKind.SWAP, tuple(focus), why)

def move(*focus, why: str = "") -> StepEvent:
    return StepEvent(StepKind.MOVE, tuple(focus), why)

def pivot(idx: int, why: str = "") -> StepEvent:
    return StepEvent(StepKind.PIVOT, (idx,), why)

def settle(idx: int, why: str = "") -> StepEvent:
    return StepEvent(StepKind.SETTLE, (idx,), why)

def visit(cell, why: str = "") -> StepEvent:
    return StepEvent(StepKind.VISIT, (cell,), why)

def path(cell, why: str = "") -> StepEvent:
    return StepEvent(StepKind.PATH, (cell,), why)
