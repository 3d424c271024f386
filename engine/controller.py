"""
controller.py — Run Controllers
================================
A controller owns ONE model (an ArrayModel or a Grid), the live stats,
and at most one active Run.  It is the only object a presentation layer
talks to.

    ctl = SortingController()
    ctl.subscribe(render)            # Step after every update
    run = ctl.start("merge")         # needs a running event loop
    outcome = await ctl.wait()

How a run is driven:
    The strategy is a generator.  `_drive` resumes it once, publishes the
    resulting Step, then awaits `Pacer.step()`.  That await is the only
    suspension point of a run, so every model write a consumer can see
    happens between two pacer sleeps.

Stale-run guard:
    Before each resumption and before each publish the driver checks
    that its Run is still `current_run` and not canceled.  Operations
    that replace the model (reset / regenerate / load / random_maze /
    resizing configure) cancel the active run AND await its task before
    touching the model, so a superseded run can never write into a
    fresh model.

Thread safety:
    None.  All calls must come from the event loop thread; EngineHost
    marshals calls from other threads onto it.
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Callable, Generator, List, Optional, Sequence, Tuple

from algorithms import Family, execute, resolve
from algorithms.step import StepEvent, StepKind
from models import (
    ArrayModel,
    EditOp,
    Grid,
    IllegalStateTransition,
    InvalidConfiguration,
    NoEndpoints,
)
from engine.config import GridConfig, PacingConfig, SortConfig, check_values
from engine.pacer import CancellationToken, Pacer, Signal
from engine.run import (
    Outcome,
    OutcomeKind,
    Run,
    RunState,
    Step,
    metrics_for,
    natural_outcome,
    prepare_model,
)
from engine.stats import RunMetrics, StatsCollector

logger = logging.getLogger(__name__)

Subscriber = Callable[[Step], Any]


class RunController:
    """
    Base controller.  Subclasses pick the family, build the model and
    add their own model-replacing operations.

    Attributes:
        config : Current (validated) config.
        model  : The model runs operate on.  Replaced, never rebound mid-run.
        stats  : Live StatsCollector of the current / last run.
    """

    family: Family = Family.SORT
    config_class = PacingConfig

    def __init__(self, config: Optional[PacingConfig] = None):
        self.config = config or self.config_class()
        self.config.validate()
        self.model = self._build_model(self.config)
        self.stats = StatsCollector()

        self._state:       RunState                 = RunState.IDLE
        self._run:         Optional[Run]            = None
        self._task:        Optional[asyncio.Task]   = None
        self._pacer:       Optional[Pacer]          = None
        self._run_ids                               = itertools.count(1)
        self._subscribers: List[Subscriber]         = []

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------
    def _build_model(self, config):
        raise NotImplementedError

    def _needs_rebuild(self, old, new) -> bool:
        return False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def current_run(self) -> Optional[Run]:
        return self._run

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._run.outcome if self._run else None

    def metrics(self) -> RunMetrics:
        run = self._run
        if run is None:
            return metrics_for(None, self.stats)
        return metrics_for(run.algo, self.stats, run.step_count, run.elapsed_ms, run.outcome)

    # ------------------------------------------------------------------
    # Observation channel
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback(step)`.  Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, step: Step) -> None:
        for callback in list(self._subscribers):
            try:
                callback(step)
            except Exception:
                logger.exception("subscriber %r failed on step %d", callback, step.step_number)

    def _make_step(
        self,
        run: Optional[Run],
        kind: StepKind,
        focus: Tuple[Any, ...] = (),
        explanation: str = "",
        step_number: Optional[int] = None,
        final: bool = False,
    ) -> Step:
        if step_number is None:
            step_number = run.step_count if run else 0
        outcome = run.outcome if (run is not None and final) else None
        return Step(
            run_id=run.run_id if run else None,
            step_number=step_number,
            algo_key=run.algo.key if run else "",
            kind=kind.value,
            focus=tuple(focus),
            explanation=explanation,
            snapshot=self.model.snapshot(),
            metrics=self.stats.as_dict(),
            state=self._state.value,
            outcome=outcome.to_dict() if outcome else None,
            is_final=final,
        )

    def snapshot(self) -> Step:
        """Current model + stats, for polling consumers."""
        return self._make_step(self._run, StepKind.STATE, explanation="Current state.")

    def _announce_reset(self, explanation: str) -> None:
        self._publish(self._make_step(None, StepKind.RESET, explanation=explanation))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, algorithm: str) -> Run:
        """
        Begin a fresh Run of `algorithm` on the current model.

        Raises:
            RuntimeError           – no running event loop.
            IllegalStateTransition – a run is still active.
            InvalidConfiguration   – unknown key or wrong family.
        """
        loop = asyncio.get_running_loop()
        if self._state is RunState.RUNNING:
            logger.warning("start(%r) rejected: run %d is still active", algorithm, self._run.run_id)
            raise IllegalStateTransition(
                "a run is already active; cancel it first",
                details={"run_id": self._run.run_id, "algorithm": self._run.algo.key},
            )
        info = resolve(algorithm, self.family)
        steps = execute(info, self.model, self.stats)

        prepare_model(self.model)
        self.stats.reset()
        run = Run(run_id=next(self._run_ids), algo=info, token=CancellationToken())
        self._run = run
        pacer = Pacer(run.token, self.config.interval, floor=self.config.min_interval_ms / 1000.0)
        self._pacer = pacer
        self._state = RunState.RUNNING
        self._task = loop.create_task(self._drive(run, steps, pacer))
        logger.info("run %d started: %s (interval %.3fs)", run.run_id, info.key, pacer.interval)
        return run

    def cancel(self) -> bool:
        """Request cancellation.  False when nothing is running."""
        if self._state is not RunState.RUNNING or self._run is None:
            return False
        if not self._run.token.is_canceled():
            self._run.token.cancel()
            logger.debug("run %d cancel requested", self._run.run_id)
        return True

    async def wait(self) -> Optional[Outcome]:
        """Outcome of the current / last run, once it has settled."""
        task = self._task
        if task is None:
            return self.outcome
        return await task

    async def run(self, algorithm: str) -> Outcome:
        self.start(algorithm)
        return await self.wait()

    async def restart(self, algorithm: str) -> Run:
        await self._settle()
        return self.start(algorithm)

    async def _settle(self) -> None:
        """Cancel the active run and wait until it can no longer write."""
        task = self._task
        if task is None:
            return
        self.cancel()
        if not task.done():
            await asyncio.wait([task])
        if not task.cancelled() and task.exception() is not None:
            logger.debug("settled run ended with %r", task.exception())

    def _to_idle(self) -> None:
        """Back to idle after a model mutation; the last run no longer describes the model."""
        self._state = RunState.IDLE
        self._run = None
        self._task = None
        self.stats.reset()

    async def reset(self) -> None:
        await self._settle()
        self.model = self._reset_model()
        self._to_idle()
        logger.info("%s reset", type(self).__name__)
        self._announce_reset("Model reset.")

    def _reset_model(self):
        return self._build_model(self.config)

    def clear_annotations(self) -> None:
        """Drop transient markers (states / visited / path).  Rejected while running."""
        self._require_idle("clear")
        prepare_model(self.model)
        self._to_idle()
        self._announce_reset("Annotations cleared.")

    async def configure(self, **changes) -> PacingConfig:
        """
        Validate-then-commit.  A speed change applies to the active run at
        its next step; a size / dimension change cancels it and rebuilds
        the model.
        """
        new = self.config.validated(**changes)
        old = self.config
        if self._needs_rebuild(old, new):
            model = self._build_model(new)
            await self._settle()
            self.config = new
            self.model = model
            self._to_idle()
            self._announce_reset("Model rebuilt for new configuration.")
        else:
            self.config = new
            if self._pacer is not None:
                self._pacer.set_interval(new.interval)
        logger.info("%s configured: %s", type(self).__name__, changes)
        return self.config

    def _require_idle(self, operation: str) -> None:
        if self._state is RunState.RUNNING:
            logger.warning("%s rejected while run %d is active", operation, self._run.run_id)
            raise IllegalStateTransition(
                f"cannot {operation} while a run is active",
                details={"operation": operation, "run_id": self._run.run_id},
            )

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def _owns(self, run: Run) -> bool:
        return self._run is run and not run.token.is_canceled()

    async def _drive(self, run: Run, steps: Generator[StepEvent, None, Optional[int]], pacer: Pacer) -> Outcome:
        try:
            outcome = await self._advance(run, steps, pacer)
        except NoEndpoints as exc:
            logger.info("run %d: %s", run.run_id, exc)
            outcome = Outcome.not_found("no_endpoints")
        except Exception:
            logger.exception("run %d (%s) failed", run.run_id, run.algo.key)
            run.finished_at = time.monotonic()
            if self._run is run:
                self._state = RunState.IDLE
            raise
        finally:
            steps.close()
        return self._conclude(run, outcome)

    async def _advance(self, run: Run, steps, pacer: Pacer) -> Outcome:
        while True:
            if not self._owns(run):
                return Outcome.canceled()
            try:
                event = next(steps)
            except StopIteration as stop:
                return natural_outcome(run.algo, self.model, stop.value)

            run.step_count += 1
            if self._owns(run):
                self._publish(self._make_step(run, event.kind, event.focus, event.explanation))

            if await pacer.step() is Signal.CANCELED:
                return Outcome.canceled()

    def _conclude(self, run: Run, outcome: Outcome) -> Outcome:
        run.outcome = outcome
        run.finished_at = time.monotonic()
        if self._run is not run:
            logger.debug("run %d superseded; outcome %s discarded", run.run_id, outcome.kind.value)
            return outcome

        self._state = RunState.CANCELED if outcome.is_canceled else RunState.COMPLETED
        metrics = self.metrics()
        logger.info(
            "run %d %s: %s steps=%d comparisons=%d swaps=%d visited=%d path=%d (%.1f ms)",
            run.run_id, outcome.kind.value, run.algo.key, metrics.total_steps,
            metrics.comparisons, metrics.swaps, metrics.cells_visited,
            metrics.path_length, metrics.wall_time_ms,
        )
        self._publish(self._make_step(
            run, StepKind.DONE,
            explanation=_describe(outcome),
            step_number=run.step_count + 1,
            final=True,
        ))
        return outcome


def _describe(outcome: Outcome) -> str:
    if outcome.kind is OutcomeKind.FOUND:
        return f"Path found: {outcome.path_length} moves."
    if outcome.kind is OutcomeKind.NOT_FOUND:
        return "No path: the end cell is unreachable." if outcome.reason == "unreachable" \
            else "No path: the grid is missing its start or end."
    if outcome.is_canceled:
        return "Run canceled."
    return "Sorted."


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
class SortingController(RunController):
    """
    Controller for the sorting widget.

    `reset()` restores the input the last run started from (every element
    back to DEFAULT); `regenerate()` draws a new random array.
    """

    family = Family.SORT
    config_class = SortConfig

    def __init__(self, config: Optional[SortConfig] = None, seed: Optional[int] = None):
        self._seed = seed
        super().__init__(config)
        self._baseline: List[float] = self.model.values()

    def _build_model(self, config: SortConfig) -> ArrayModel:
        return ArrayModel.random(config.size, config.value_low, config.value_high, self._seed)

    def _needs_rebuild(self, old: SortConfig, new: SortConfig) -> bool:
        return (old.size, old.value_low, old.value_high) != (new.size, new.value_low, new.value_high)

    def _reset_model(self) -> ArrayModel:
        return ArrayModel(self._baseline)

    def start(self, algorithm: str) -> Run:
        baseline = self.model.values()
        run = super().start(algorithm)
        self._baseline = baseline
        return run

    async def configure(self, **changes) -> SortConfig:
        model = self.model
        config = await super().configure(**changes)
        if self.model is not model:
            self._baseline = self.model.values()
        return config

    async def regenerate(self, seed: Optional[int] = None) -> ArrayModel:
        await self._settle()
        self.model = ArrayModel.random(self.config.size, self.config.value_low, self.config.value_high, seed)
        self._replace_input("New random array.")
        return self.model

    async def load(self, values: Sequence[float]) -> ArrayModel:
        """Replace the array with explicit values (deterministic replay)."""
        values = check_values(values)
        await self._settle()
        self.model = ArrayModel(values)
        self._replace_input("Array loaded.")
        return self.model

    def _replace_input(self, explanation: str) -> None:
        self._baseline = self.model.values()
        self._to_idle()
        logger.info("array replaced: %d elements", len(self.model))
        self._announce_reset(explanation)


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
class PathfindingController(RunController):
    """Controller for the pathfinding widget.  Edits are only legal while idle."""

    family = Family.SEARCH
    config_class = GridConfig

    def _build_model(self, config: GridConfig) -> Grid:
        return Grid.default(config.rows, config.cols)

    def _needs_rebuild(self, old: GridConfig, new: GridConfig) -> bool:
        return (old.rows, old.cols) != (new.rows, new.cols)

    def edit(self, op, row: int, col: int) -> Grid:
        """Apply one paint operation.  Clears visited / path first."""
        self._require_idle("edit")
        if not isinstance(op, EditOp):
            try:
                op = EditOp(op)
            except ValueError:
                raise InvalidConfiguration(
                    f"unknown edit operation: {op!r}",
                    details={"op": op, "choices": [o.value for o in EditOp]},
                ) from None
        self.model.apply(op, row, col)
        self._to_idle()
        self._announce_reset(f"Edit: {op.value} at ({row}, {col}).")
        return self.model

    def place_wall(self, row: int, col: int) -> Grid:
        return self.edit(EditOp.WALL, row, col)

    def place_start(self, row: int, col: int) -> Grid:
        return self.edit(EditOp.START, row, col)

    def place_end(self, row: int, col: int) -> Grid:
        return self.edit(EditOp.END, row, col)

    def erase(self, row: int, col: int) -> Grid:
        return self.edit(EditOp.ERASE, row, col)

    def toggle_wall(self, row: int, col: int) -> Grid:
        return self.edit(EditOp.TOGGLE, row, col)

    async def random_maze(self, seed: Optional[int] = None) -> Grid:
        await self._settle()
        self.model = Grid.random_maze(self.config.rows, self.config.cols, self.config.wall_density, seed)
        self._to_idle()
        logger.info("random maze generated (density %.2f, seed %s)", self.config.wall_density, seed)
        self._announce_reset("Random maze generated.")
        return self.model

    async def load(self, lines: Sequence[str]) -> Grid:
        """
        Replace the board with a text layout (see Grid.from_rows).  The
        layout must fit the rows / cols bounds and becomes the configured size.
        """
        grid = Grid.from_rows(lines)
        config = self.config.validated(rows=grid.rows, cols=grid.cols)
        await self._settle()
        self.config = config
        self.model = grid
        self._to_idle()
        self._announce_reset("Grid loaded.")
        return self.model
