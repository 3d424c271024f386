"""
models/
-------
Core data layer.  Public API:

    from models import ArrayModel, Element, ElementState
    from models import Grid, Cell, CellKind, EditOp
    from models import InvalidConfiguration, IllegalStateTransition, NoEndpoints
"""

from models.element     import Element, ElementState
from models.array_model import ArrayModel
from models.cell        import Cell, CellKind, Pos
from models.grid        import Grid, EditOp
from models.errors      import (
    EngineError,
    InvalidConfiguration,
    InvalidEdit,
    IllegalStateTransition,
    NoEndpoints,
)

__all__ = [
    "Element",    "ElementState",
    "ArrayModel",
    "Cell",       "CellKind",     "Pos",
    "Grid",       "EditOp",
    "EngineError",
    "InvalidConfiguration",
    "InvalidEdit",
    "IllegalStateTransition",
    "NoEndpoints",
]
