from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from ..model import FitModel, check_fit_model, empty_params, param_vector


class Fixed(FitModel):
    """Freezes a model: zero parameters, evaluation passes straight through.

    Use it to keep part of a composite model out of the fit.
    """

    def __init__(self, inner: Any):
        self.inner = check_fit_model(inner, "Fixed inner")

    def __repr__(self) -> str:
        return f"Fixed({self.inner!r})"

    def fit_children(self) -> Tuple[Any, ...]:
        return (self.inner,)

    @property
    def param_count(self) -> int:
        return 0

    def evaluate(self, x: float) -> float:
        return self.inner.evaluate(x)

    def jacobian(self, x: float) -> np.ndarray:
        return empty_params()

    def deriv_x(self, x: float) -> float:
        # the parameters are frozen, the input dependence is not
        return self.inner.deriv_x(x)

    def get_params(self) -> np.ndarray:
        return empty_params()

    def set_params(self, params: Any) -> None:
        param_vector(params, 0)

    def with_errors(self, errors: Any) -> None:
        param_vector(errors, 0)
        return None
