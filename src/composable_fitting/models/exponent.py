from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..model import FitModel, param_vector


@dataclass
class Exponent(FitModel):
    """Exponent y = a * exp(b*x)."""

    a: float = 0.0
    b: float = 0.0

    @property
    def param_count(self) -> int:
        return 2

    def evaluate(self, x: float) -> float:
        return self.a * np.exp(self.b * x)

    def jacobian(self, x: float) -> np.ndarray:
        # d/da = exp(bx), d/db = a*x*exp(bx)
        e_x = np.exp(self.b * x)
        return np.array([e_x, self.a * x * e_x], dtype=float)

    def deriv_x(self, x: float) -> float:
        return self.a * self.b * np.exp(self.b * x)

    def get_params(self) -> np.ndarray:
        return param_vector([self.a, self.b], 2)

    def set_params(self, params: Any) -> None:
        self.a, self.b = param_vector(params, 2).tolist()

    def with_errors(self, errors: Any) -> "Exponent":
        a, b = param_vector(errors, 2).tolist()
        return Exponent(a=a, b=b)
