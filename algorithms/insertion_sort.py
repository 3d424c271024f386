"""
insertion_sort.py — Insertion Sort
===================================
Grows a SORTED prefix one element at a time.  The key walks left by
adjacent exchanges until its left neighbour is not greater. Strict
comparison, so equal values keep their input order (stable).

Counting: one comparison per "left neighbour > key?" test, including
the final one that stops the walk; one swap per exchange.
"""

from typing import Generator

from models import ArrayModel, ElementState
from algorithms.step import StepEvent, compare, swap, settle


def insertion_sort(model: ArrayModel, stats) -> Generator[StepEvent, None, None]:
    n = len(model)
    if n == 0:
        return

    model.mark(0, ElementState.SORTED)
    yield settle(0, why="A single element is trivially sorted.")

    for i in range(1, n):
        j = i
        model.mark(j, ElementState.COMPARING)

        while j > 0:
            model.mark(j - 1, ElementState.COMPARING)
            stats.increment_comparisons()
            yield compare(j - 1, j, why=f"Is {model.value(j - 1)} greater than key {model.value(j)}?")

            if model.value(j - 1) <= model.value(j):
                model.mark(j - 1, ElementState.SORTED)
                break

            model.swap(j - 1, j)
            model.mark(j - 1, ElementState.SWAPPING)
            model.mark(j, ElementState.SWAPPING)
            stats.increment_swaps()
            yield swap(j - 1, j, why=f"Shift {model.value(j)} right to make room for the key.")

            model.mark(j, ElementState.SORTED)
            model.mark(j - 1, ElementState.COMPARING)
            j -= 1

        model.mark(j, ElementState.SORTED)
        yield settle(j, why=f"Key {model.value(j)} inserted at position {j}; prefix 0..{i} is sorted.")
