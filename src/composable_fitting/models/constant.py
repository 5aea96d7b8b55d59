from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..model import FitModel, param_vector


@dataclass
class Constant(FitModel):
    """Constant model y = c, independent of x."""

    c: float = 0.0

    @property
    def param_count(self) -> int:
        return 1

    def evaluate(self, x: float) -> float:
        return self.c

    def jacobian(self, x: float) -> np.ndarray:
        return np.array([1.0])

    def deriv_x(self, x: float) -> float:
        return 0.0

    def get_params(self) -> np.ndarray:
        return param_vector([self.c], 1)

    def set_params(self, params: Any) -> None:
        (self.c,) = param_vector(params, 1).tolist()

    def with_errors(self, errors: Any) -> "Constant":
        (c,) = param_vector(errors, 1).tolist()
        return Constant(c=c)
