from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from ..model import FitModel, ParameterLayout, check_distinct, check_fit_model


@dataclass(frozen=True)
class CompositionErrors:
    """Error view of a Composition: the inner and outer models' error views."""

    inner: Any
    outer: Any


class Composition(FitModel):
    """Applies `outer` to the output of `inner`: z = outer(inner(x)).

    `outer` must provide ``deriv_x`` (derivative over its input), which is
    needed to chain the inner model's jacobian. The inner parameter block
    comes first, followed by the outer one.
    """

    def __init__(self, inner: Any, outer: Any):
        self.inner = check_fit_model(inner, "Composition inner")
        self.outer = check_fit_model(outer, "Composition outer")
        if not callable(getattr(outer, "deriv_x", None)):
            raise TypeError(
                f"Composition outer model {type(outer).__name__} must define deriv_x(x)."
            )
        check_distinct([inner, outer])
        self._layout = ParameterLayout([inner.param_count, outer.param_count])

    def __repr__(self) -> str:
        return f"Composition(inner={self.inner!r}, outer={self.outer!r})"

    def fit_children(self) -> Tuple[Any, ...]:
        return (self.inner, self.outer)

    @property
    def param_count(self) -> int:
        return self._layout.total

    def evaluate(self, x: float) -> float:
        return self.outer.evaluate(self.inner.evaluate(x))

    def jacobian(self, x: float) -> np.ndarray:
        # y = inner(x, p_in), z = outer(y, p_out)
        # dz/dp_in = dz/dy * dy/dp_in, dz/dp_out = outer jacobian at y
        y = self.inner.evaluate(x)
        z_y = self.outer.deriv_x(y)
        z_p_in = np.asarray(self.inner.jacobian(x), dtype=float) * z_y
        z_p_out = self.outer.jacobian(y)
        return self._layout.join([z_p_in, z_p_out])

    def deriv_x(self, x: float) -> float:
        y = self.inner.evaluate(x)
        return self.inner.deriv_x(x) * self.outer.deriv_x(y)

    def get_params(self) -> np.ndarray:
        return self._layout.join([self.inner.get_params(), self.outer.get_params()])

    def set_params(self, params: Any) -> None:
        p_in, p_out = self._layout.split(params)
        self.inner.set_params(p_in)
        self.outer.set_params(p_out)

    def with_errors(self, errors: Any) -> CompositionErrors:
        e_in, e_out = self._layout.split(errors)
        return CompositionErrors(
            inner=self.inner.with_errors(e_in),
            outer=self.outer.with_errors(e_out),
        )
