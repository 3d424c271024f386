"""
bubble_sort.py — Bubble Sort
=============================
Generator-based bubble sort.  Yields a step at:
  1. Each adjacent comparison  →  both bars COMPARING
  2. Each exchange             →  both bars SWAPPING

No early exit: every pass compares every unsorted adjacent pair, so the
comparison count is always n(n-1)/2.  After pass i the bar at n-1-i is
final and turns SORTED.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, swap


def bubble_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    n = len(model)

    for i in range(n - 1):
        for j in range(n - i - 1):
            model.mark(j, ElementState.COMPARING)
            model.mark(j + 1, ElementState.COMPARING)
            stats.increment_comparisons()
            yield compare(j, j + 1, why=f"Compare positions {j} and {j + 1}.")

            if model.value(j) > model.value(j + 1):
                model.swap(j, j + 1)
                model.mark(j, ElementState.SWAPPING)
                model.mark(j + 1, ElementState.SWAPPING)
                stats.increment_swaps()
                yield swap(j, j + 1, why=f"{model.value(j + 1)} > {model.value(j)}: bubble the larger value right.")

            model.mark(j, ElementState.DEFAULT)
            model.mark(j + 1, ElementState.DEFAULT)

        model.mark(n - 1 - i, ElementState.SORTED)

    if n:
        model.mark(0, ElementState.SORTED)
