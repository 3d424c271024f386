from enum import Enum
from typing import Dict, Any


# ---------------------------------------------------------------------------
# Element State Enum — maps 1-to-1 with the bar colour palette
# ---------------------------------------------------------------------------
class ElementState(Enum):
    DEFAULT   = "default"     # blue, untouched
    COMPARING = "comparing"   # amber, taking part in the current comparison
    SWAPPING  = "swapping"    # red, being exchanged / moved right now
    SORTED    = "sorted"      # green, position finalised
    PIVOT     = "pivot"       # purple, partition pivot / running minimum


# States that count towards the "at most two highlighted" rule.
ACTIVE_STATES = (ElementState.COMPARING, ElementState.SWAPPING)


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------
class Element:
    """
    One bar of the array.

    Attributes:
        id     : Position in the original input.  Never changes, so equal
                 values can be told apart (stability checks, replay).
        value  : The number being sorted.
        state  : Current ElementState.  Purely observational; no strategy
                 reads it to make a decision.
    """

    __slots__ = ("id", "value", "state")

    def __init__(self, value: float, element_id: int = 0, state: ElementState = ElementState.DEFAULT):
        self.id: int             = element_id
        self.value: float        = value
        self.state: ElementState = state

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "value": self.value, "state": self.state.value}

    def __repr__(self) -> str:
        return f"Element(id={self.id}, value={self.value}, state={self.state.value})"
