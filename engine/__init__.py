"""
engine/
-------
Execution layer: pacing, cancellation, run control and analytics.

    from engine import SortingController, PathfindingController
    from engine import Recorder, compare, race, EngineHost
"""

from engine.config     import GridConfig, PacingConfig, SortConfig, SPEED_PRESETS, pacing_interval
from engine.pacer      import CancellationToken, Pacer, Signal
from engine.stats      import RunMetrics, StatsCollector
from engine.run        import Outcome, OutcomeKind, Run, RunState, Step
from engine.controller import PathfindingController, RunController, SortingController
from engine.recorder   import ComparisonResult, Recorder, compare, compare_on, race
from engine.host       import EngineHost
from models.errors     import (
    EngineError,
    IllegalStateTransition,
    InvalidConfiguration,
    InvalidEdit,
    NoEndpoints,
)

__all__ = [
    "GridConfig", "PacingConfig", "SortConfig", "SPEED_PRESETS", "pacing_interval",
    "CancellationToken", "Pacer", "Signal",
    "RunMetrics", "StatsCollector",
    "Outcome", "OutcomeKind", "Run", "RunState", "Step",
    "PathfindingController", "RunController", "SortingController",
    "ComparisonResult", "Recorder", "compare", "compare_on", "race",
    "EngineHost",
    "EngineError", "IllegalStateTransition", "InvalidConfiguration", "InvalidEdit", "NoEndpoints",
]
