"""
array_model.py — Array Model (subject of the sort strategies)
=============================================================
Ordered sequence of Elements, mutated in place by exactly one strategy
at a time.

Every mutator here is atomic with respect to the value multiset:
`swap` exchanges two elements, `move` pops one element and re-inserts it
elsewhere.  There is no raw "write", so a strategy can never drop or
duplicate an element, even at a paused instant.
"""

import random
from typing import Iterable, List, Optional, Dict, Any

from models.element import Element, ElementState, ACTIVE_STATES


class ArrayModel:
    """
    Attributes:
        elements : List[Element] in current order.
    """

    def __init__(self, values: Iterable[float] = ()):
        self.elements: List[Element] = [Element(v, element_id=i) for i, v in enumerate(values)]

    # ==================================================================
    # FACTORIES
    # ==================================================================
    @classmethod
    def random(cls, size: int, low: int = 10, high: int = 99, seed: Optional[int] = None) -> "ArrayModel":
        """Uniformly random integers in [low, high]."""
        rng = random.Random(seed)
        return cls(rng.randint(low, high) for _ in range(size))

    def copy(self) -> "ArrayModel":
        """Fresh model with the same values in the same order, all DEFAULT."""
        clone = ArrayModel()
        clone.elements = [Element(e.value, element_id=e.id) for e in self.elements]
        return clone

    # ==================================================================
    # READ
    # ==================================================================
    def __len__(self) -> int:
        return len(self.elements)

    def __getitem__(self, idx: int) -> Element:
        return self.elements[idx]

    def value(self, idx: int) -> float:
        return self.elements[idx].value

    def values(self) -> List[float]:
        return [e.value for e in self.elements]

    def ids(self) -> List[int]:
        return [e.id for e in self.elements]

    def states(self) -> List[ElementState]:
        return [e.state for e in self.elements]

    def active_count(self) -> int:
        """How many elements are currently COMPARING or SWAPPING."""
        return sum(1 for e in self.elements if e.state in ACTIVE_STATES)

    def is_sorted(self) -> bool:
        vals = self.values()
        return all(vals[i] <= vals[i + 1] for i in range(len(vals) - 1))

    def all_in_state(self, state: ElementState) -> bool:
        return all(e.state == state for e in self.elements)

    # ==================================================================
    # WRITE
    # ==================================================================
    def mark(self, idx: int, state: ElementState) -> None:
        self.elements[idx].state = state

    def mark_range(self, lo: int, hi: int, state: ElementState) -> None:
        """Mark the inclusive range [lo, hi]."""
        for i in range(lo, hi + 1):
            self.elements[i].state = state

    def mark_all(self, state: ElementState) -> None:
        for e in self.elements:
            e.state = state

    def reset_states(self) -> None:
        self.mark_all(ElementState.DEFAULT)

    def swap(self, i: int, j: int) -> None:
        self.elements[i], self.elements[j] = self.elements[j], self.elements[i]

    def move(self, src: int, dst: int) -> None:
        """Take the element at `src` out and re-insert it at `dst`."""
        self.elements.insert(dst, self.elements.pop(src))

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def snapshot(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.elements]

    def __repr__(self) -> str:
        return f"ArrayModel({self.values()})"

