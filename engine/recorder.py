"""
recorder.py — Run Recorder & Analytics
========================================
Drives a strategy to completion synchronously, with no pacing, records
every step, then computes the analytics card.  Used for instant replay,
Comparison Mode and the sorting race, and as the fast path in tests.

Usage:
    rec = Recorder(capture=True)
    metrics = rec.run("quick", ArrayModel([5, 3, 1]))
    rec.steps[-1].snapshot           # model at the final step

Comparison Mode:
    Run two Recorders on copies of the SAME model, then
    compare(rec1.metrics, rec2.metrics) → ComparisonResult.

Race:
    race([5, 3, 1, 4]) runs every sort on its own copy of the input and
    returns the metrics ranked by total operations.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from algorithms import AlgoInfo, Family, REGISTRY, algorithms_by_family, execute, resolve
from algorithms.step import StepKind
from models import ArrayModel, Grid, NoEndpoints
from engine.config import check_values
from engine.run import Outcome, Step, metrics_for, natural_outcome, prepare_model
from engine.stats import RunMetrics, StatsCollector

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived: label of the better algo, or "tie"
    winner_comparisons: str = ""
    winner_swaps:       str = ""
    winner_visited:     str = ""
    winner_path:        str = ""    # shorter path; a found path beats none
    winner_steps:       str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left":               self.left.to_dict(),
            "right":              self.right.to_dict(),
            "winner_comparisons": self.winner_comparisons,
            "winner_swaps":       self.winner_swaps,
            "winner_visited":     self.winner_visited,
            "winner_path":        self.winner_path,
            "winner_steps":       self.winner_steps,
        }


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        capture : Store a model snapshot in every recorded Step.
        steps   : Steps from the last run (snapshot is None unless capture).
        metrics : RunMetrics of the last run.
        outcome : Outcome of the last run.
        model   : The model the last run mutated.
    """

    def __init__(self, capture: bool = False):
        self.capture = capture
        self.steps:   List[Step]            = []
        self.metrics: Optional[RunMetrics]  = None
        self.outcome: Optional[Outcome]     = None
        self.model                          = None
        self.stats                          = StatsCollector()

    def run(self, algorithm, model) -> RunMetrics:
        """
        Run `algorithm` (key or AlgoInfo) on `model` in place, exhausting
        the generator.  Applies the same terminal side effects as a
        controller (sorted markers, traced path).
        """
        info = self._resolve(algorithm, model)
        steps = execute(info, model, self.stats)

        prepare_model(model)
        self.stats.reset()
        self.model = model
        self.steps = []
        self.outcome = None

        started = time.monotonic()
        try:
            while True:
                try:
                    event = next(steps)
                except StopIteration as stop:
                    self.outcome = natural_outcome(info, model, stop.value)
                    break
                self._record(info, event.kind, event.focus, event.explanation)
        except NoEndpoints:
            self.outcome = Outcome.not_found("no_endpoints")
        finally:
            steps.close()
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = metrics_for(info, self.stats, len(self.steps), wall_ms, self.outcome)
        logger.debug("recorded %s: %s in %d steps", info.key, self.outcome.kind.value, len(self.steps))
        return self.metrics

    def export(self) -> Dict[str, Any]:
        """Serialisable record of the last run, for save / replay."""
        return {
            "metrics": self.metrics.to_dict() if self.metrics else {},
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "steps":   [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    @staticmethod
    def _resolve(algorithm, model) -> AlgoInfo:
        if isinstance(algorithm, AlgoInfo):
            return algorithm
        family = Family.SEARCH if isinstance(model, Grid) else Family.SORT
        return resolve(algorithm, family)

    def _record(self, info: AlgoInfo, kind: StepKind, focus, explanation: str) -> None:
        self.steps.append(Step(
            run_id=None,
            step_number=len(self.steps) + 1,
            algo_key=info.key,
            kind=kind.value,
            focus=tuple(focus),
            explanation=explanation,
            snapshot=self.model.snapshot() if self.capture else None,
            metrics=self.stats.as_dict(),
            state="running",
        ))


# ---------------------------------------------------------------------------
# Comparison helpers
# ---------------------------------------------------------------------------
def _winner(l_val, r_val, l_key: str, r_key: str) -> str:
    """Lower is better."""
    if l_val == r_val:
        return "tie"
    return l_key if l_val < r_val else r_key


def compare(left: RunMetrics, right: RunMetrics) -> ComparisonResult:
    """Given the metrics of two completed runs, produce a ComparisonResult."""
    l_path = left.path_length if left.path_found else float("inf")
    r_path = right.path_length if right.path_found else float("inf")
    lk, rk = left.algo_label, right.algo_label

    return ComparisonResult(
        left=left,
        right=right,
        winner_comparisons=_winner(left.comparisons, right.comparisons, lk, rk),
        winner_swaps      =_winner(left.swaps, right.swaps, lk, rk),
        winner_visited    =_winner(left.cells_visited, right.cells_visited, lk, rk),
        winner_path       =_winner(l_path, r_path, lk, rk),
        winner_steps      =_winner(left.total_steps, right.total_steps, lk, rk),
    )


def compare_on(model, left_key: str, right_key: str) -> ComparisonResult:
    """Run two algorithms on independent copies of `model` and compare them."""
    return compare(
        Recorder().run(left_key, _clone(model)),
        Recorder().run(right_key, _clone(model)),
    )


def race(values: Sequence[float], keys: Optional[Sequence[str]] = None) -> List[RunMetrics]:
    """
    Run each sort on its own copy of `values`.  Ranked by total
    operations (comparisons + swaps); ties keep registry order.
    """
    if keys is None:
        keys = [a.key for a in algorithms_by_family(Family.SORT)]
    base = ArrayModel(check_values(values))
    results = [Recorder().run(key, base.copy()) for key in keys]
    order = list(REGISTRY)
    results.sort(key=lambda m: (m.operations, order.index(m.algo_key)))
    return results


def _clone(model):
    if isinstance(model, ArrayModel):
        return model.copy()
    return Grid.from_rows(model.to_rows())
