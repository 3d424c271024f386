from collections import deque

import pytest

from algorithms import Family, algorithms_by_family
from algorithms.astar import manhattan
from engine import Recorder, compare, compare_on
from models import CellKind, Grid

from tests.conftest import OPEN_5X5

SEARCH_KEYS = [a.key for a in algorithms_by_family(Family.SEARCH)]


def bfs_distances(grid, source):
    dist = {source: 0}
    queue = deque([source])
    while queue:
        cell = queue.popleft()
        for nbr in grid.neighbours(cell):
            if nbr not in dist:
                dist[nbr] = dist[cell] + 1
                queue.append(nbr)
    return dist


# 1. Path length on an open board
def test_bfs_open_grid_shortest_path(open_grid):
    rec = Recorder()
    metrics = rec.run("bfs", open_grid)

    assert rec.outcome.kind.value == "found"
    assert metrics.path_length == 4
    assert metrics.path_found
    assert open_grid.count(CellKind.PATH) == 3       # endpoints excluded


@pytest.mark.parametrize("key", ["bfs", "dijkstra", "astar"])
def test_optimal_searches_agree(key, open_grid):
    metrics = Recorder().run(key, open_grid)
    assert metrics.path_length == 4


def test_bfs_visits_in_non_decreasing_distance(open_grid):
    dist = bfs_distances(open_grid, open_grid.start)
    rec = Recorder()
    rec.run("bfs", open_grid)

    visits = [s.focus[0] for s in rec.steps if s.kind == "visit"]
    order = [dist[c] for c in visits]
    assert order == sorted(order)


# 2. DFS does not promise the shortest path
def test_dfs_path_can_be_longer_than_bfs():
    bfs_metrics = Recorder().run("bfs", Grid.from_rows(OPEN_5X5))
    dfs_metrics = Recorder().run("dfs", Grid.from_rows(OPEN_5X5))

    assert dfs_metrics.path_found
    assert dfs_metrics.path_length > bfs_metrics.path_length


# 3. A* expands no more cells than Dijkstra
@pytest.mark.parametrize("seed", range(10))
def test_astar_visits_subset_of_dijkstra(seed):
    grid = Grid.random_maze(15, 25, density=0.25, seed=seed)
    result = compare_on(grid, "dijkstra", "astar")

    assert result.left.path_found == result.right.path_found
    if result.left.path_found:
        assert result.right.path_length == result.left.path_length
        assert result.right.cells_visited <= result.left.cells_visited


# 4. No path
@pytest.mark.parametrize("key", SEARCH_KEYS)
def test_walled_grid_reports_not_found(key, walled_grid):
    rec = Recorder()
    metrics = rec.run(key, walled_grid)

    assert rec.outcome.kind.value == "not_found"
    assert rec.outcome.reason == "unreachable"
    assert metrics.path_length == 0
    assert not metrics.path_found
    # every reachable cell on the left side was expanded
    assert metrics.cells_visited == 10


@pytest.mark.parametrize("key", SEARCH_KEYS)
def test_missing_endpoint_is_not_found_not_a_crash(key):
    grid = Grid.from_rows(["S....", ".....", "....."])
    rec = Recorder()
    rec.run(key, grid)

    assert rec.outcome.kind.value == "not_found"
    assert rec.outcome.reason == "no_endpoints"


# 5. Grid invariants during a run
@pytest.mark.parametrize("key", SEARCH_KEYS)
def test_search_never_enters_walls(key):
    grid = Grid.from_rows([
        "S.#...",
        "..#.#.",
        "....#E",
    ])
    walls = {c.pos for c in grid.iter_cells() if c.kind is CellKind.WALL}
    rec = Recorder(capture=True)
    rec.run(key, grid)

    for step in rec.steps:
        assert step.focus[0] not in walls
    assert {c.pos for c in grid.iter_cells() if c.kind is CellKind.WALL} == walls
    assert grid.count(CellKind.START) == 1
    assert grid.count(CellKind.END) == 1


@pytest.mark.parametrize("key", SEARCH_KEYS)
def test_each_cell_counted_once(key, open_grid):
    rec = Recorder()
    metrics = rec.run(key, open_grid)

    visits = [s.focus[0] for s in rec.steps if s.kind == "visit"]
    assert len(visits) == len(set(visits))
    # the end cell is counted but has no visit step of its own
    assert metrics.cells_visited == len(visits) + 1


def test_path_cells_are_adjacent(open_grid):
    rec = Recorder()
    rec.run("astar", open_grid)
    cells = [open_grid.start] + [s.focus[0] for s in rec.steps if s.kind == "path"] + [open_grid.end]

    for a, b in zip(cells, cells[1:]):
        assert manhattan(a, b) == 1


def test_annotations_are_cleared_before_each_run(open_grid):
    Recorder().run("dfs", open_grid)
    assert open_grid.count(CellKind.VISITED) > 0

    Recorder().run("bfs", open_grid)
    assert open_grid.count(CellKind.PATH) == 3


# 6. Comparison
def test_compare_picks_the_cheaper_search():
    left = Recorder().run("bfs", Grid.from_rows(OPEN_5X5))
    right = Recorder().run("dfs", Grid.from_rows(OPEN_5X5))
    result = compare(left, right)

    assert result.winner_path == "Breadth-First Search"
    assert result.left.algo_key == "bfs"
    assert result.to_dict()["right"]["algo_key"] == "dfs"
