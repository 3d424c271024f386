"""
heap_sort.py — Heap Sort
=========================
Phase 1: build a max-heap bottom-up (sift-down from ⌊n/2⌋-1 to 0).
Phase 2: swap the root with the last unsorted element, mark it SORTED,
         and sift the new root down over the shrunken heap.

Counting: every child examined during sift-down is one comparison,
two when both children exist.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, swap


def heap_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    n = len(model)

    for root in range(n // 2 - 1, -1, -1):
        yield from _sift_down(model, stats, n, root)

    for last in range(n - 1, 0, -1):
        model.swap(0, last)
        model.mark(0, ElementState.SWAPPING)
        model.mark(last, ElementState.SWAPPING)
        stats.increment_swaps()
        yield swap(0, last, why=f"Move the maximum {model.value(last)} to position {last}.")
        model.mark(last, ElementState.SORTED)
        model.mark(0, ElementState.DEFAULT)
        yield from _sift_down(model, stats, last, 0)

    if n:
        model.mark(0, ElementState.SORTED)


def _sift_down(model: ArrayModel, stats, size: int, root: int) -> Generator[StepEvent, None, None]:
    while True:
        largest = root
        left, right = 2 * root + 1, 2 * root + 2

        if left < size:
            stats.increment_comparisons()
            if model.value(left) > model.value(largest):
                largest = left
        if right < size:
            stats.increment_comparisons()
            if model.value(right) > model.value(largest):
                largest = right

        if largest == root:
            return

        model.mark(root, ElementState.COMPARING)
        model.mark(largest, ElementState.COMPARING)
        yield compare(root, largest, why=f"Child {model.value(largest)} beats parent {model.value(root)}.")

        model.swap(root, largest)
        model.mark(root, ElementState.SWAPPING)
        model.mark(largest, ElementState.SWAPPING)
        stats.increment_swaps()
        yield swap(root, largest, why="Sift the parent down one level.")

        model.mark(root, ElementState.DEFAULT)
        model.mark(largest, ElementState.DEFAULT)
        root = largest
