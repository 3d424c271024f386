import pytest

from engine import GridConfig, SortConfig
from models import Grid


OPEN_5X5 = [
    ".....",
    ".....",
    "S...E",
    ".....",
    ".....",
]

WALLED_5X5 = [
    "..#..",
    "..#..",
    "S.#.E",
    "..#..",
    "..#..",
]


@pytest.fixture
def open_grid():
    return Grid.from_rows(OPEN_5X5)


@pytest.fixture
def walled_grid():
    return Grid.from_rows(WALLED_5X5)


@pytest.fixture
def fast_sort_config():
    # 1 ms per step
    return SortConfig(speed=100, min_interval_ms=1.0, size=10)


@pytest.fixture
def slow_sort_config():
    # 198 ms per step: a 30 element bubble sort cannot finish during a test
    return SortConfig(speed=1, size=30)


@pytest.fixture
def fast_grid_config():
    return GridConfig(speed=100, min_interval_ms=1.0, rows=5, cols=5)
