from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from ..model import FitModel, check_fit_model


class DifferentiableFunction:
    """A function applied to a model's output, together with its derivative.

    ``into_params`` is called once, when the ModelMap is built, and returns
    the precomputed coefficients for ``value`` and ``derivative``. Those two
    only ever see the precomputed tuples, never the function object, so any
    derived constant (e.g. ``p - 1`` for a power) is computed a single time.
    None of the coefficients are fit parameters.
    """

    def into_params(self) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
        raise NotImplementedError

    @staticmethod
    def value(params: Tuple[float, ...], x: float) -> float:
        raise NotImplementedError

    @staticmethod
    def derivative(params: Tuple[float, ...], x: float) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class Addition(DifferentiableFunction):
    """x + c"""

    c: float

    def into_params(self):
        return (float(self.c),), ()

    @staticmethod
    def value(params, x):
        (c,) = params
        return x + c

    @staticmethod
    def derivative(params, x):
        return 1.0


@dataclass(frozen=True)
class Multiplier(DifferentiableFunction):
    """c * x"""

    c: float

    def into_params(self):
        return (float(self.c),), (float(self.c),)

    @staticmethod
    def value(params, x):
        (c,) = params
        return c * x

    @staticmethod
    def derivative(params, x):
        (c,) = params
        return c


@dataclass(frozen=True)
class Power(DifferentiableFunction):
    """x ** p"""

    p: float

    def into_params(self):
        p = float(self.p)
        return (p,), (p, p - 1.0)

    @staticmethod
    def value(params, x):
        (p,) = params
        return np.power(x, p)

    @staticmethod
    def derivative(params, x):
        p, p1 = params
        return p * np.power(x, p1)


@dataclass(frozen=True)
class LnMap(DifferentiableFunction):
    """Natural logarithm of the output."""

    def into_params(self):
        return (), ()

    @staticmethod
    def value(params, x):
        return np.log(x)

    @staticmethod
    def derivative(params, x):
        return np.divide(1.0, x)


@dataclass(frozen=True)
class ExpMap(DifferentiableFunction):
    """Exponential of the output."""

    def into_params(self):
        return (), ()

    @staticmethod
    def value(params, x):
        return np.exp(x)

    @staticmethod
    def derivative(params, x):
        return np.exp(x)


class ModelMap(FitModel):
    """Model with a differentiable function applied on top: z = f(inner(x)).

    The parameter layout is exactly the inner model's; the function's own
    coefficients are fixed when the map is built.
    """

    def __init__(self, inner: Any, function: DifferentiableFunction):
        self.inner = check_fit_model(inner, "ModelMap inner")
        value_params, derivative_params = function.into_params()
        self.function = function
        self._value_params = tuple(float(v) for v in value_params)
        self._derivative_params = tuple(float(v) for v in derivative_params)

    def __repr__(self) -> str:
        return f"ModelMap(inner={self.inner!r}, function={self.function!r})"

    def fit_children(self) -> Tuple[Any, ...]:
        return (self.inner,)

    @property
    def param_count(self) -> int:
        return self.inner.param_count

    def evaluate(self, x: float) -> float:
        return self.function.value(self._value_params, self.inner.evaluate(x))

    def jacobian(self, x: float) -> np.ndarray:
        y = self.inner.evaluate(x)
        scale = self.function.derivative(self._derivative_params, y)
        return np.asarray(self.inner.jacobian(x), dtype=float) * scale

    def deriv_x(self, x: float) -> float:
        y = self.inner.evaluate(x)
        return self.function.derivative(self._derivative_params, y) * self.inner.deriv_x(x)

    def get_params(self) -> np.ndarray:
        return self.inner.get_params()

    def set_params(self, params: Any) -> None:
        self.inner.set_params(params)

    def with_errors(self, errors: Any) -> Any:
        return self.inner.with_errors(errors)


def model_map(inner: Any, function: DifferentiableFunction) -> ModelMap:
    """Apply `function` on top of `inner`."""
    return ModelMap(inner, function)
