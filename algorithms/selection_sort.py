"""
selection_sort.py — Selection Sort
===================================
For each position i, scan the unsorted suffix for the minimum (shown as
PIVOT), then exchange it into place.  Exactly one swap per pass at most,
none when the minimum is already at i.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, settle


def selection_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    n = len(model)

    for i in range(n - 1):
        min_idx = i
        model.mark(i, ElementState.COMPARING)

        for j in range(i + 1, n):
            model.mark(j, ElementState.COMPARING)
            stats.increment_comparisons()
            yield compare(min_idx, j, why=f"Is {model.value(j)} smaller than the current minimum {model.value(min_idx)}?")

            if model.value(j) < model.value(min_idx):
                if min_idx != i:
                    model.mark(min_idx, ElementState.DEFAULT)
                min_idx = j
                model.mark(min_idx, ElementState.PIVOT)
            else:
                model.mark(j, ElementState.DEFAULT)

        if min_idx != i:
            model.swap(i, min_idx)
            stats.increment_swaps()
            model.mark(min_idx, ElementState.DEFAULT)
        model.mark(i, ElementState.SORTED)
        yield settle(i, why=f"Minimum {model.value(i)} placed at position {i}.")

    if n:
        model.mark(n - 1, ElementState.SORTED)
