from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np

from ..model import FitModel, check_fit_model


@dataclass(frozen=True)
class Range:
    """Interval of x values; a missing bound means unbounded on that side.

    Defaults are half-open, ``start <= x < end``.
    """

    start: Optional[float] = None
    end: Optional[float] = None
    include_start: bool = True
    include_end: bool = False

    @staticmethod
    def to(end: float, *, inclusive: bool = False) -> "Range":
        """``x < end`` (or ``x <= end``)."""
        return Range(end=end, include_end=inclusive)

    @staticmethod
    def from_(start: float) -> "Range":
        """``x >= start``."""
        return Range(start=start)

    @staticmethod
    def closed(start: float, end: float) -> "Range":
        """``start <= x <= end``."""
        return Range(start=start, end=end, include_end=True)

    def __contains__(self, x: float) -> bool:
        return self.contains(x)

    def contains(self, x: float) -> bool:
        # NaN falls outside any bounded range
        if self.start is not None:
            inside = self.start <= x if self.include_start else self.start < x
            if not inside:
                return False
        if self.end is not None:
            inside = x <= self.end if self.include_end else x < self.end
            if not inside:
                return False
        return True


class Ranged(FitModel):
    """Restricts `inner` to `range`: identical inside, exactly zero outside.

    The parameter layout is the inner model's.
    """

    def __init__(self, inner: Any, range: Range):
        self.inner = check_fit_model(inner, "Ranged inner")
        if not callable(getattr(range, "contains", None)):
            raise TypeError("Ranged range must provide contains(x).")
        self.range = range

    def __repr__(self) -> str:
        return f"Ranged(inner={self.inner!r}, range={self.range!r})"

    def fit_children(self) -> Tuple[Any, ...]:
        return (self.inner,)

    @property
    def param_count(self) -> int:
        return self.inner.param_count

    def evaluate(self, x: float) -> float:
        if self.range.contains(x):
            return self.inner.evaluate(x)
        return 0.0

    def jacobian(self, x: float) -> np.ndarray:
        if self.range.contains(x):
            return self.inner.jacobian(x)
        return np.zeros(self.param_count, dtype=float)

    def deriv_x(self, x: float) -> float:
        if self.range.contains(x):
            return self.inner.deriv_x(x)
        return 0.0

    def get_params(self) -> np.ndarray:
        return self.inner.get_params()

    def set_params(self, params: Any) -> None:
        self.inner.set_params(params)

    def with_errors(self, errors: Any) -> Any:
        return self.inner.with_errors(errors)
