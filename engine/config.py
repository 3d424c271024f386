"""Configuration models for the run controllers."""

import math
from dataclasses import dataclass, fields, replace
from typing import Tuple

from models.errors import InvalidConfiguration


SIZE_RANGE:  Tuple[int, int] = (10, 80)     # array length
VALUE_RANGE: Tuple[int, int] = (1, 1000)    # random bar heights
SPEED_RANGE: Tuple[int, int] = (1, 100)     # user-facing speed slider
ROWS_RANGE:  Tuple[int, int] = (5, 50)
COLS_RANGE:  Tuple[int, int] = (5, 80)

# Named speeds for the playback selector
SPEED_PRESETS = {
    "slow":   10,     # teaching mode
    "medium": 50,
    "fast":   80,     # demo mode
    "turbo":  100,
}


def pacing_interval(speed: float, floor_ms: float) -> float:
    """Seconds between two steps.  Higher speed → shorter, never below the floor."""
    return max(floor_ms, 200 - 2 * speed) / 1000.0


def _check_range(name: str, value, bounds) -> None:
    lo, hi = bounds
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not lo <= value <= hi:
        raise InvalidConfiguration(
            f"{name} must be between {lo} and {hi}",
            details={name: value, "allowed": [lo, hi]},
        )


@dataclass(frozen=True)
class PacingConfig:
    """Speed slider plus the lower bound that keeps the event loop breathing."""

    speed: float = 50
    min_interval_ms: float = 5.0

    @property
    def interval(self) -> float:
        return pacing_interval(self.speed, self.min_interval_ms)

    def validate(self) -> None:
        _check_range("speed", self.speed, SPEED_RANGE)
        if isinstance(self.min_interval_ms, bool) or not isinstance(self.min_interval_ms, (int, float)) \
                or self.min_interval_ms <= 0:
            raise InvalidConfiguration(
                "min_interval_ms must be a positive number",
                details={"min_interval_ms": self.min_interval_ms},
            )

    def validated(self, **changes) -> "PacingConfig":
        """Copy with `changes` applied, or InvalidConfiguration (self untouched)."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise InvalidConfiguration(
                f"unknown setting(s): {', '.join(unknown)}",
                details={"unknown": unknown, "allowed": sorted(known)},
            )
        candidate = replace(self, **changes)
        candidate.validate()
        return candidate


@dataclass(frozen=True)
class SortConfig(PacingConfig):
    """Array size and value range for the sorting widget."""

    size: int = 30
    value_low: int = 10
    value_high: int = 99

    def validate(self) -> None:
        super().validate()
        _check_range("size", self.size, SIZE_RANGE)
        if not isinstance(self.size, int):
            raise InvalidConfiguration("size must be an integer", details={"size": self.size})
        for name in ("value_low", "value_high"):
            value = getattr(self, name)
            _check_range(name, value, VALUE_RANGE)
            if not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an integer", details={name: value})
        if self.value_low > self.value_high:
            raise InvalidConfiguration(
                "value_low must not exceed value_high",
                details={"value_low": self.value_low, "value_high": self.value_high},
            )


@dataclass(frozen=True)
class GridConfig(PacingConfig):
    """Board dimensions for the pathfinding widget."""

    speed: float = 92            # ≈ 16 ms per step
    rows: int = 20
    cols: int = 35
    wall_density: float = 0.3

    def validate(self) -> None:
        super().validate()
        _check_range("rows", self.rows, ROWS_RANGE)
        _check_range("cols", self.cols, COLS_RANGE)
        if not isinstance(self.rows, int) or not isinstance(self.cols, int):
            raise InvalidConfiguration(
                "rows and cols must be integers",
                details={"rows": self.rows, "cols": self.cols},
            )
        _check_range("wall_density", self.wall_density, (0.0, 1.0))


def check_values(values) -> list:
    """Explicit sort input: 1..SIZE_RANGE[1] plain, finite numbers."""
    values = list(values)
    if not 1 <= len(values) <= SIZE_RANGE[1]:
        raise InvalidConfiguration(
            f"expected 1 to {SIZE_RANGE[1]} values, got {len(values)}",
            details={"length": len(values)},
        )
    bad = [v for v in values if isinstance(v, bool) or not isinstance(v, (int, float))]
    if bad:
        raise InvalidConfiguration("values must be numbers", details={"invalid": bad[:5]})
    # NaN and inf have no place in a total order
    bad = [v for v in values if not math.isfinite(v)]
    if bad:
        raise InvalidConfiguration("values must be finite", details={"invalid": [str(v) for v in bad[:5]]})
    return values
