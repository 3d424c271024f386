"""
run.py — Run, Outcome & published Step
=======================================
A Run is one execution attempt of a strategy against a model.  It
carries its own id, cancellation token and step counter; the
controller compares ids before letting a run touch the model.

State machine (per controller):
    IDLE  →  start()  →  RUNNING
    RUNNING  →  strategy exhausted  →  COMPLETED
    RUNNING  →  cancel()            →  CANCELED
    COMPLETED / CANCELED  →  reset() / clear / edit  →  IDLE
    COMPLETED / CANCELED  →  start()  →  RUNNING   (fresh Run)
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from algorithms import AlgoInfo, Family
from models import ArrayModel, ElementState
from engine.stats import RunMetrics, StatsCollector


class RunState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    COMPLETED = "completed"
    CANCELED  = "canceled"


class OutcomeKind(Enum):
    COMPLETED = "completed"     # sort finished
    FOUND     = "found"         # search reached end
    NOT_FOUND = "not_found"     # search exhausted, or grid had no endpoints
    CANCELED  = "canceled"


@dataclass(frozen=True)
class Outcome:
    kind:        OutcomeKind
    path_length: int = 0
    reason:      str = ""

    @classmethod
    def completed(cls) -> "Outcome":
        return cls(OutcomeKind.COMPLETED)

    @classmethod
    def found(cls, path_length: int) -> "Outcome":
        return cls(OutcomeKind.FOUND, path_length=path_length)

    @classmethod
    def not_found(cls, reason: str = "unreachable") -> "Outcome":
        return cls(OutcomeKind.NOT_FOUND, reason=reason)

    @classmethod
    def canceled(cls) -> "Outcome":
        return cls(OutcomeKind.CANCELED)

    @property
    def is_canceled(self) -> bool:
        return self.kind is OutcomeKind.CANCELED

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "path_length": self.path_length, "reason": self.reason}


@dataclass
class Run:
    """
    Attributes:
        run_id     : Monotonically increasing per controller.
        algo       : Registry entry of the strategy being run.
        token      : CancellationToken shared with the run's Pacer.
        step_count : Observable steps taken so far.
        outcome    : Set once the run reaches a terminal state.
    """

    run_id:      int
    algo:        AlgoInfo
    token:       Any
    step_count:  int               = 0
    started_at:  float             = field(default_factory=time.monotonic)
    finished_at: Optional[float]   = None
    outcome:     Optional[Outcome] = None

    @property
    def elapsed_ms(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return (end - self.started_at) * 1000


# ---------------------------------------------------------------------------
# Step — what observers receive after every update
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        run_id      : Run that produced the step (None for resets / edits / polls).
        step_number : 1-based, strictly increasing within a run.
        algo_key    : Strategy of that run ("" outside a run).
        kind        : StepKind value ("compare", "visit", "reset", "done", …).
        focus       : Indices or (row, col) cells the step is about.
        explanation : Learning Mode text.
        snapshot    : Full model view (list of element dicts / grid of kinds).
        metrics     : StatsCollector.as_dict() at that instant.
        state       : RunState value of the controller.
        outcome     : Outcome.to_dict() on the terminal step, else None.
        is_final    : True on the terminal step of a run.
    """

    run_id:      Optional[int]
    step_number: int
    algo_key:    str
    kind:        str
    focus:       Tuple[Any, ...]
    explanation: str
    snapshot:    Any
    metrics:     Dict[str, int]
    state:       str
    outcome:     Optional[Dict[str, Any]] = None
    is_final:    bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id":      self.run_id,
            "step_number": self.step_number,
            "algo_key":    self.algo_key,
            "kind":        self.kind,
            "focus":       [list(f) if isinstance(f, tuple) else f for f in self.focus],
            "explanation": self.explanation,
            "snapshot":    self.snapshot,
            "metrics":     self.metrics,
            "state":       self.state,
            "outcome":     self.outcome,
            "is_final":    self.is_final,
        }


# ---------------------------------------------------------------------------
# Shared by the paced controller and the instant Recorder
# ---------------------------------------------------------------------------
def prepare_model(model) -> None:
    """Wipe transient annotations before a run."""
    if isinstance(model, ArrayModel):
        model.reset_states()
    else:
        model.clear_annotations()


def natural_outcome(info: AlgoInfo, model, result: Optional[int]) -> Outcome:
    """
    Terminal side effects of a run that was NOT canceled.  Sorting marks
    every element SORTED; searches report found / not found.
    """
    if info.family is Family.SORT:
        model.mark_all(ElementState.SORTED)
        return Outcome.completed()
    if result is None:
        return Outcome.not_found()
    return Outcome.found(result)


def metrics_for(
    info: Optional[AlgoInfo],
    stats: StatsCollector,
    total_steps: int = 0,
    wall_time_ms: float = 0.0,
    outcome: Optional[Outcome] = None,
) -> RunMetrics:
    """The analytics card for one run (or the empty card when there is none)."""
    return RunMetrics(
        algo_key=info.key if info else "",
        algo_label=info.label if info else "",
        comparisons=stats.comparisons,
        swaps=stats.swaps,
        cells_visited=stats.cells_visited,
        path_length=stats.path_length,
        total_steps=total_steps,
        wall_time_ms=round(wall_time_ms, 2),
        outcome=outcome.kind.value if outcome else "",
        path_found=outcome is not None and outcome.kind is OutcomeKind.FOUND,
    )
