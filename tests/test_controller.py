import asyncio

import pytest

from engine import (
    IllegalStateTransition,
    InvalidConfiguration,
    InvalidEdit,
    OutcomeKind,
    PathfindingController,
    RunState,
    SortingController,
)
from models import CellKind, ElementState, Grid

from tests.conftest import OPEN_5X5, WALLED_5X5


async def wait_for_steps(steps, count, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while len(steps) < count:
        assert loop.time() < deadline, "run produced no steps"
        await asyncio.sleep(0.005)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_sort_run_completes(fast_sort_config):
    ctl = SortingController(fast_sort_config, seed=5)
    before = sorted(ctl.model.values())

    outcome = await ctl.run("merge")

    assert outcome.kind is OutcomeKind.COMPLETED
    assert ctl.state is RunState.COMPLETED
    assert ctl.model.values() == before
    assert ctl.model.all_in_state(ElementState.SORTED)
    assert ctl.metrics().outcome == "completed"


@pytest.mark.asyncio
async def test_published_steps_are_ordered_and_final(fast_sort_config):
    ctl = SortingController(fast_sort_config, seed=5)
    steps = []
    ctl.subscribe(steps.append)

    run = ctl.start("bubble")
    await ctl.wait()

    numbers = [s.step_number for s in steps]
    assert numbers == list(range(1, len(steps) + 1))
    assert all(s.run_id == run.run_id for s in steps)
    assert steps[-1].is_final and steps[-1].kind == "done"
    assert steps[-1].outcome["kind"] == "completed"
    assert sum(1 for s in steps if s.is_final) == 1
    for step in steps:
        active = [e for e in step.snapshot if e["state"] in ("comparing", "swapping")]
        assert len(active) <= 2


@pytest.mark.asyncio
async def test_start_while_running_is_rejected(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    run = ctl.start("bubble")
    with pytest.raises(IllegalStateTransition):
        ctl.start("quick")
    assert ctl.current_run is run
    ctl.cancel()
    await ctl.wait()


@pytest.mark.asyncio
async def test_unknown_or_foreign_algorithm_is_rejected(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    with pytest.raises(InvalidConfiguration):
        ctl.start("bogo")
    with pytest.raises(InvalidConfiguration):
        ctl.start("bfs")
    assert ctl.state is RunState.IDLE


def test_start_needs_running_loop(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    with pytest.raises(RuntimeError):
        ctl.start("bubble")
    assert ctl.state is RunState.IDLE


@pytest.mark.asyncio
async def test_cancel_never_marks_sorted(slow_sort_config):
    ctl = SortingController(slow_sort_config.validated(speed=100, min_interval_ms=1.0), seed=2)
    steps = []
    ctl.subscribe(steps.append)
    ctl.start("bubble")
    await wait_for_steps(steps, 5)

    assert ctl.cancel() is True
    outcome = await ctl.wait()

    assert outcome.kind is OutcomeKind.CANCELED
    assert ctl.state is RunState.CANCELED
    assert not ctl.model.all_in_state(ElementState.SORTED)
    assert steps[-1].outcome["kind"] == "canceled"
    assert ctl.cancel() is False


@pytest.mark.asyncio
@pytest.mark.parametrize("steps_before_cancel", [1, 3, 17, 60])
async def test_cancel_then_reset_restores_input(steps_before_cancel):
    ctl = SortingController(seed=9)
    await ctl.configure(speed=100, min_interval_ms=1.0, size=20)
    original = ctl.model.values()
    steps = []
    ctl.subscribe(steps.append)

    ctl.start("quick")
    await wait_for_steps(steps, steps_before_cancel)
    ctl.cancel()
    await ctl.reset()

    assert ctl.state is RunState.IDLE
    assert ctl.model.values() == original
    assert ctl.model.all_in_state(ElementState.DEFAULT)
    assert ctl.stats.as_dict() == {"comparisons": 0, "swaps": 0, "cells_visited": 0, "path_length": 0}


@pytest.mark.asyncio
async def test_regenerate_discards_stale_run(slow_sort_config):
    ctl = SortingController(slow_sort_config.validated(speed=100, min_interval_ms=1.0))
    steps = []
    ctl.subscribe(steps.append)
    old = ctl.start("heap")
    await wait_for_steps(steps, 3)

    fresh = await ctl.regenerate(seed=11)
    reset_at = next(i for i, s in enumerate(steps) if s.kind == "reset")
    await asyncio.sleep(0.05)

    assert ctl.model is fresh
    assert ctl.state is RunState.IDLE
    assert old.outcome.kind is OutcomeKind.CANCELED
    assert all(s.run_id != old.run_id for s in steps[reset_at:])
    assert fresh.all_in_state(ElementState.DEFAULT)


@pytest.mark.asyncio
async def test_restart_runs_fresh(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    first = ctl.start("bubble")
    await ctl.configure(speed=100, min_interval_ms=1.0)
    second = await ctl.restart("insertion")

    assert second.run_id > first.run_id
    assert first.outcome.is_canceled
    outcome = await ctl.wait()
    assert outcome.kind is OutcomeKind.COMPLETED
    assert ctl.model.is_sorted()


@pytest.mark.asyncio
async def test_load_and_replay_is_deterministic(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    await ctl.load([5, 3, 1])
    await ctl.run("bubble")
    first = ctl.metrics()

    await ctl.reset()
    await ctl.run("bubble")
    second = ctl.metrics()

    assert (first.comparisons, first.swaps) == (3, 3)
    assert (second.comparisons, second.swaps) == (3, 3)
    assert first.total_steps == second.total_steps


@pytest.mark.asyncio
async def test_load_rejects_bad_input(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    before = ctl.model.values()
    for bad in ([], list(range(81)), [1, "2"], [True, 1], [float("nan"), 1], [2, float("inf")]):
        with pytest.raises(InvalidConfiguration):
            await ctl.load(bad)
    assert ctl.model.values() == before


@pytest.mark.asyncio
async def test_invalid_configure_keeps_previous_config(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    with pytest.raises(InvalidConfiguration):
        await ctl.configure(size=500)
    assert ctl.config == fast_sort_config
    assert len(ctl.model) == fast_sort_config.size


@pytest.mark.asyncio
async def test_non_integer_value_range_is_rejected_without_touching_the_run(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    run = ctl.start("bubble")

    with pytest.raises(InvalidConfiguration):
        await ctl.configure(value_low=10.5)

    assert ctl.config == slow_sort_config
    assert ctl.current_run is run
    assert ctl.state is RunState.RUNNING
    ctl.cancel()
    await ctl.wait()
    await ctl.regenerate(seed=1)
    assert len(ctl.model) == slow_sort_config.size


@pytest.mark.asyncio
async def test_clear_annotations_forgets_the_last_run(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    await ctl.run("merge")
    assert ctl.snapshot().run_id is not None

    ctl.clear_annotations()

    snap = ctl.snapshot()
    assert snap.run_id is None
    assert snap.algo_key == ""
    assert ctl.outcome is None
    assert ctl.metrics().total_steps == 0
    assert ctl.model.all_in_state(ElementState.DEFAULT)


@pytest.mark.asyncio
async def test_speed_change_applies_to_active_run(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    ctl.start("bubble")
    await ctl.configure(speed=90)
    assert ctl._pacer.interval == pytest.approx(0.02)
    ctl.cancel()
    await ctl.wait()


@pytest.mark.asyncio
async def test_resize_cancels_and_rebuilds(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    run = ctl.start("bubble")
    await ctl.configure(size=12)

    assert run.outcome.is_canceled
    assert len(ctl.model) == 12
    assert ctl.state is RunState.IDLE


@pytest.mark.asyncio
async def test_clear_rejected_while_running(slow_sort_config):
    ctl = SortingController(slow_sort_config)
    ctl.start("selection")
    with pytest.raises(IllegalStateTransition):
        ctl.clear_annotations()
    ctl.cancel()
    await ctl.wait()
    ctl.clear_annotations()
    assert ctl.state is RunState.IDLE


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_abort_run(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    calls = []

    def broken(step):
        calls.append(step)
        raise RuntimeError("renderer crashed")

    unsubscribe = ctl.subscribe(broken)
    outcome = await ctl.run("insertion")

    assert outcome.kind is OutcomeKind.COMPLETED
    assert calls
    unsubscribe()
    await ctl.reset()
    assert calls[-1].is_final


@pytest.mark.asyncio
async def test_snapshot_reports_current_state(fast_sort_config):
    ctl = SortingController(fast_sort_config)
    snap = ctl.snapshot()
    assert snap.kind == "state"
    assert snap.run_id is None
    assert snap.state == "idle"
    assert len(snap.snapshot) == fast_sort_config.size


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_bfs_run_on_loaded_grid(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    await ctl.load(OPEN_5X5)

    outcome = await ctl.run("bfs")

    assert outcome.kind is OutcomeKind.FOUND
    assert outcome.path_length == 4
    assert ctl.metrics().path_found
    assert ctl.model.count(CellKind.PATH) == 3


@pytest.mark.asyncio
async def test_unreachable_end_is_not_found(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    await ctl.load(WALLED_5X5)

    outcome = await ctl.run("astar")

    assert outcome.kind is OutcomeKind.NOT_FOUND
    assert ctl.state is RunState.COMPLETED
    assert ctl.metrics().path_length == 0


@pytest.mark.asyncio
async def test_missing_endpoint_reports_no_endpoints(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    await ctl.load(["S....", ".....", ".....", ".....", "....."])

    outcome = await ctl.run("dijkstra")

    assert outcome.kind is OutcomeKind.NOT_FOUND
    assert outcome.reason == "no_endpoints"


@pytest.mark.asyncio
async def test_edit_rejected_while_running():
    ctl = PathfindingController()
    await ctl.configure(speed=1)
    ctl.start("dfs")
    before = ctl.model.to_rows()
    with pytest.raises(IllegalStateTransition):
        ctl.place_wall(0, 0)
    assert ctl.model.to_rows() == before
    ctl.cancel()
    await ctl.wait()


@pytest.mark.asyncio
async def test_edit_after_run_clears_annotations(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    await ctl.load(OPEN_5X5)
    await ctl.run("dfs")
    assert ctl.model.count(CellKind.VISITED) > 0

    ctl.toggle_wall(0, 2)

    assert ctl.state is RunState.IDLE
    assert ctl.model.count(CellKind.VISITED) == 0
    assert ctl.model.count(CellKind.PATH) == 0
    assert ctl.model.kind((0, 2)) is CellKind.WALL


@pytest.mark.asyncio
async def test_bad_edits_are_rejected(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    end = ctl.model.end
    with pytest.raises(InvalidEdit):
        ctl.place_start(*end)
    with pytest.raises(InvalidEdit):
        ctl.place_wall(99, 0)
    with pytest.raises(InvalidConfiguration):
        ctl.edit("paint", 0, 0)


@pytest.mark.asyncio
async def test_random_maze_is_seeded_and_supersedes_run():
    ctl = PathfindingController()
    await ctl.configure(speed=1)
    run = ctl.start("bfs")

    maze = await ctl.random_maze(seed=42)

    assert run.outcome.is_canceled
    assert ctl.current_run is None
    assert maze.start == (10, 5) and maze.end == (10, 29)
    again = await ctl.random_maze(seed=42)
    assert again.to_rows() == maze.to_rows()


@pytest.mark.asyncio
async def test_pathfinding_reset_restores_default_grid(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    ctl.place_wall(0, 0)
    await ctl.run("bfs")
    await ctl.reset()

    assert ctl.state is RunState.IDLE
    assert ctl.model.count(CellKind.WALL) == 0
    assert ctl.model.count(CellKind.VISITED) == 0
    assert ctl.outcome is None


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["bfs", "astar"])
@pytest.mark.parametrize("steps_before_cancel", [1, 5, 40])
async def test_pathfinding_cancel_then_reset_restores_default_grid(key, steps_before_cancel):
    ctl = PathfindingController()
    await ctl.configure(speed=100, min_interval_ms=1.0)
    steps = []
    ctl.subscribe(steps.append)

    run = ctl.start(key)
    await wait_for_steps(steps, steps_before_cancel)
    ctl.cancel()
    await ctl.reset()

    assert run.outcome.is_canceled
    assert ctl.state is RunState.IDLE
    assert ctl.model.to_rows() == Grid.default(20, 35).to_rows()
    assert ctl.model.count(CellKind.VISITED) == 0
    assert ctl.model.count(CellKind.PATH) == 0
    assert ctl.stats.as_dict() == {"comparisons": 0, "swaps": 0, "cells_visited": 0, "path_length": 0}


@pytest.mark.asyncio
async def test_edit_forgets_the_last_run(fast_grid_config):
    ctl = PathfindingController(fast_grid_config)
    await ctl.run("bfs")
    assert ctl.outcome is not None

    ctl.place_wall(0, 0)

    assert ctl.current_run is None
    assert ctl.outcome is None
    assert ctl.snapshot().run_id is None
    assert ctl.metrics().path_length == 0


@pytest.mark.asyncio
async def test_load_adopts_dimensions_within_bounds():
    ctl = PathfindingController()
    await ctl.load(OPEN_5X5)
    assert (ctl.config.rows, ctl.config.cols) == (5, 5)

    await ctl.reset()
    assert (ctl.model.rows, ctl.model.cols) == (5, 5)


@pytest.mark.asyncio
@pytest.mark.parametrize("layout", [
    ["S....", "....E"],
    ["S" + "." * 81] + ["." * 82] * 3 + ["." * 81 + "E"],
])
async def test_load_rejects_out_of_bounds_dimensions(fast_grid_config, layout):
    ctl = PathfindingController(fast_grid_config)
    before = ctl.model.to_rows()
    with pytest.raises(InvalidConfiguration):
        await ctl.load(layout)
    assert ctl.config == fast_grid_config
    assert ctl.model.to_rows() == before
