"""
merge_sort.py — Merge Sort
===========================
Top-down merge sort: split at ⌊(lo+hi)/2⌋, sort both halves, merge.

The merge is done in place by rotation: whenever the head of the right
run is strictly smaller than the head of the left run it is moved in
front of it; otherwise the left head simply stays put.  Taking from the
left on ties (`<=`) is what makes the sort stable.  A move is a single
atomic pop-and-insert, so the array never holds a duplicate or loses an
element between steps.

Counting: one comparison per head-to-head comparison, one swap per
element moved out of the right run.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, move


def merge_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    yield from _sort(model, stats, 0, len(model) - 1)


def _sort(model: ArrayModel, stats, lo: int, hi: int) -> Generator[StepEvent, None, None]:
    if lo >= hi:
        return
    mid = (lo + hi) // 2
    yield from _sort(model, stats, lo, mid)
    yield from _sort(model, stats, mid + 1, hi)
    yield from _merge(model, stats, lo, mid, hi)


def _merge(model: ArrayModel, stats, lo: int, mid: int, hi: int) -> Generator[StepEvent, None, None]:
    # the last merge spans the whole array: everything it places is final
    final = lo == 0 and hi == len(model) - 1
    placed = ElementState.SORTED if final else ElementState.DEFAULT

    k = lo            # head of the left run
    j = mid + 1       # head of the right run
    while k < j <= hi:
        model.mark(k, ElementState.COMPARING)
        model.mark(j, ElementState.COMPARING)
        stats.increment_comparisons()
        yield compare(k, j, why=f"Merge [{lo}..{hi}]: compare left head {model.value(k)} with right head {model.value(j)}.")

        if model.value(k) <= model.value(j):
            model.mark(j, ElementState.DEFAULT)
            model.mark(k, placed)
        else:
            model.mark(k, ElementState.DEFAULT)
            model.move(j, k)
            model.mark(k, ElementState.SWAPPING)
            stats.increment_swaps()
            yield move(j, k, why=f"Right head {model.value(k)} is smaller: move it to position {k}.")
            model.mark(k, placed)
            j += 1
        k += 1

    if final:
        model.mark_range(k, hi, ElementState.SORTED)
