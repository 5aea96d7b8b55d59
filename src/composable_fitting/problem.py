from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np

from .data import Points, as_points
from .model import check_fit_model, param_vector

logger = logging.getLogger(__name__)

WeightFunction = Callable[[float, float], float]


class LeastSquaresProblem:
    """Adapter between a model, its data and a least-squares solver.

    For each point ``(x_i, y_i)`` with weight ``w_i = weights(x_i, y_i)``::

        residual_i     = w_i * (model(x_i) - y_i)
        jacobian[i, :] = w_i * model.jacobian(x_i)   # weight_jacobian=True
        jacobian[i, :] = model.jacobian(x_i)         # weight_jacobian=False

    The model is borrowed and mutated in place by :meth:`set_params`.
    Subclasses decide how rows are stored.
    """

    def __init__(
        self,
        points: Points,
        model: Any,
        weights: WeightFunction,
        weight_jacobian: bool = True,
    ):
        self.points = points
        self.model = check_fit_model(model)
        self.weight_jacobian = bool(weight_jacobian)
        # weights depend only on the data
        self.weights = np.array(
            [float(weights(xi, yi)) for xi, yi in points], dtype=float
        )

    @property
    def n_points(self) -> int:
        return len(self.points)

    @property
    def n_params(self) -> int:
        return int(self.model.param_count)

    def params(self) -> np.ndarray:
        return self.model.get_params()

    def set_params(self, params: Any) -> None:
        self.model.set_params(param_vector(params, self.n_params))

    def residuals(self) -> np.ndarray:
        raise NotImplementedError

    def jacobian(self) -> np.ndarray:
        raise NotImplementedError

    def _row(self, i: int, x: float) -> np.ndarray:
        row = param_vector(self.model.jacobian(x), self.n_params)
        if self.weight_jacobian:
            return self.weights[i] * row
        return row


class FixedSizeProblem(LeastSquaresProblem):
    """Point count known up front: buffers are allocated once and refilled."""

    def __init__(self, points: Points, model: Any, weights: WeightFunction, weight_jacobian: bool = True):
        super().__init__(points, model, weights, weight_jacobian)
        self._x = np.asarray(points.x, dtype=float)
        self._y = np.asarray(points.y, dtype=float)
        self._res = np.empty(self.n_points, dtype=float)
        self._jac = np.empty((self.n_points, self.n_params), dtype=float)

    def residuals(self) -> np.ndarray:
        model = self.model
        for i, xi in enumerate(self._x):
            self._res[i] = model.evaluate(float(xi))
        np.subtract(self._res, self._y, out=self._res)
        np.multiply(self._res, self.weights, out=self._res)
        return self._res.copy()

    def jacobian(self) -> np.ndarray:
        for i, xi in enumerate(self._x):
            self._jac[i, :] = self._row(i, float(xi))
        return self._jac.copy()


class DynamicProblem(LeastSquaresProblem):
    """Point count only known at runtime: rows are collected per call."""

    def residuals(self) -> np.ndarray:
        model = self.model
        res = [
            w * (model.evaluate(xi) - yi)
            for w, (xi, yi) in zip(self.weights, self.points)
        ]
        return np.asarray(res, dtype=float).reshape(self.n_points)

    def jacobian(self) -> np.ndarray:
        rows = [self._row(i, xi) for i, (xi, _) in enumerate(self.points)]
        if not rows:
            return np.empty((0, self.n_params), dtype=float)
        return np.vstack(rows)


def create_problem(
    x: Any,
    y: Any,
    model: Any,
    weights: WeightFunction,
    weight_jacobian: bool = True,
) -> LeastSquaresProblem:
    """Build the adapter, choosing the storage strategy from the input types."""
    points = as_points(x, y)
    cls = FixedSizeProblem if points.fixed_size else DynamicProblem
    problem = cls(points, model, weights, weight_jacobian)
    logger.debug(
        "%s: %d points, %d params, weight_jacobian=%s",
        cls.__name__,
        problem.n_points,
        problem.n_params,
        problem.weight_jacobian,
    )
    return problem
