"""
quick_sort.py — Quick Sort
===========================
Lomuto partition with the LAST element as pivot.  The pivot lands on
its final index and turns SORTED before either side is recursed into.

Already-sorted input is the worst case for this pivot choice
(O(n²) comparisons, recursion depth n).  That is intentional: it is
what the visualizer is meant to show.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, swap, pivot, settle


def quick_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    yield from _quick(model, stats, 0, len(model) - 1)


def _quick(model: ArrayModel, stats, lo: int, hi: int) -> Generator[StepEvent, None, None]:
    if lo > hi:
        return
    if lo == hi:
        model.mark(lo, ElementState.SORTED)
        return

    p = yield from _partition(model, stats, lo, hi)
    model.mark(p, ElementState.SORTED)
    yield settle(p, why=f"Pivot {model.value(p)} is in its final position {p}.")

    yield from _quick(model, stats, lo, p - 1)
    yield from _quick(model, stats, p + 1, hi)


def _partition(model: ArrayModel, stats, lo: int, hi: int) -> Generator[StepEvent, None, int]:
    pivot_value = model.value(hi)
    model.mark(hi, ElementState.PIVOT)
    yield pivot(hi, why=f"Partition [{lo}..{hi}] around pivot {pivot_value} (last element).")

    i = lo - 1
    for j in range(lo, hi):
        model.mark(j, ElementState.COMPARING)
        stats.increment_comparisons()
        yield compare(j, hi, why=f"Is {model.value(j)} smaller than pivot {pivot_value}?")

        if model.value(j) < pivot_value:
            i += 1
            model.swap(i, j)
            model.mark(i, ElementState.SWAPPING)
            model.mark(j, ElementState.SWAPPING)
            stats.increment_swaps()
            yield swap(i, j, why=f"Move {model.value(i)} into the smaller-than-pivot region.")
            model.mark(i, ElementState.DEFAULT)
        model.mark(j, ElementState.DEFAULT)

    model.swap(i + 1, hi)
    model.mark(i + 1, ElementState.SWAPPING)
    model.mark(hi, ElementState.SWAPPING)
    stats.increment_swaps()
    yield swap(i + 1, hi, why=f"Place pivot {pivot_value} at position {i + 1}.")
    model.mark(hi, ElementState.DEFAULT)
    return i + 1
