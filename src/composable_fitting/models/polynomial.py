from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ..model import FitModel, param_vector


class Polynomial(FitModel):
    """Polynomial y = sum_i c_i * x**i with a fixed number of coefficients.

    The order (number of coefficients) is set at construction and is the
    parameter count; coefficients are stored lowest power first.
    """

    def __init__(
        self,
        coefficients: Optional[Sequence[float]] = None,
        *,
        order: Optional[int] = None,
    ):
        if coefficients is None:
            if order is None:
                raise TypeError("Polynomial needs coefficients or order.")
            coefficients = np.zeros(int(order))
        coeffs = np.array(coefficients, dtype=float).reshape(-1)
        if order is not None and coeffs.shape[0] != int(order):
            raise ValueError(
                f"Polynomial of order {order} got {coeffs.shape[0]} coefficients."
            )
        self.coefficients = coeffs

    def __repr__(self) -> str:
        return f"Polynomial(coefficients={self.coefficients.tolist()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return np.array_equal(self.coefficients, other.coefficients)

    @property
    def order(self) -> int:
        return int(self.coefficients.shape[0])

    @property
    def param_count(self) -> int:
        return self.order

    def evaluate(self, x: float) -> float:
        res = 0.0
        for c in self.coefficients[::-1]:
            res = res * x + c
        return float(res)

    def jacobian(self, x: float) -> np.ndarray:
        return np.power(float(x), np.arange(self.order), dtype=float)

    def deriv_x(self, x: float) -> float:
        res = 0.0
        for i in range(self.order - 1, 0, -1):
            res = res * x + i * self.coefficients[i]
        return float(res)

    def get_params(self) -> np.ndarray:
        return param_vector(self.coefficients.copy(), self.order)

    def set_params(self, params: Any) -> None:
        self.coefficients = param_vector(params, self.order).copy()

    def with_errors(self, errors: Any) -> "Polynomial":
        return Polynomial(param_vector(errors, self.order))
