"""
errors.py — Engine Error Taxonomy
==================================
Small, mostly defensive set of errors.  Every error carries a stable
`code` (searchable, used by the HTTP layer) and a free-form `details`
dict.

    from models.errors import InvalidConfiguration

    raise InvalidConfiguration(
        "size out of range",
        details={"size": 5, "allowed": [10, 80]},
    )

Cancellation is NOT an error: it is a normal terminal outcome.
"""

from typing import Any, Dict, Optional


class EngineError(Exception):
    code = "ENGINE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, "details": self.details}


class InvalidConfiguration(EngineError):
    """Out-of-range size / speed / dimensions / unknown algorithm."""

    code = "CONFIG_INVALID"


class InvalidEdit(InvalidConfiguration):
    """Grid edit that would break a grid invariant or leave the bounds."""

    code = "EDIT_INVALID"


class IllegalStateTransition(EngineError):
    """`start` while running, or an edit while running."""

    code = "STATE_ILLEGAL"


class NoEndpoints(EngineError):
    """Search invoked on a grid missing its start or end cell."""

    code = "GRID_NO_ENDPOINTS"
