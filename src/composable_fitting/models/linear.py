from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..model import FitModel, param_vector


@dataclass
class Linear(FitModel):
    """Straight line y = a*x + b."""

    a: float = 0.0
    b: float = 0.0

    @property
    def param_count(self) -> int:
        return 2

    def evaluate(self, x: float) -> float:
        return self.a * x + self.b

    def jacobian(self, x: float) -> np.ndarray:
        # d/da = x, d/db = 1
        return np.array([x, 1.0], dtype=float)

    def deriv_x(self, x: float) -> float:
        return self.a

    def get_params(self) -> np.ndarray:
        return param_vector([self.a, self.b], 2)

    def set_params(self, params: Any) -> None:
        self.a, self.b = param_vector(params, 2).tolist()

    def with_errors(self, errors: Any) -> "Linear":
        a, b = param_vector(errors, 2).tolist()
        return Linear(a=a, b=b)
