"""Finite-difference checks for analytic model derivatives."""

from __future__ import annotations

from typing import Any, Iterable

import numpy as np


def numeric_jacobian(model: Any, x: float, step: float = 1e-6) -> np.ndarray:
    """Central-difference d(model(x))/d(param_i).

    Each parameter is perturbed by ``step * max(1, |p_i|)``. The model's
    parameters are restored before returning.
    """
    p0 = np.array(model.get_params(), dtype=float)
    out = np.empty_like(p0)
    try:
        for i in range(p0.size):
            h = step * max(1.0, abs(p0[i]))
            p = p0.copy()
            p[i] = p0[i] + h
            model.set_params(p)
            up = model.evaluate(x)
            p[i] = p0[i] - h
            model.set_params(p)
            down = model.evaluate(x)
            out[i] = (up - down) / (2.0 * h)
    finally:
        model.set_params(p0)
    return out


def numeric_deriv_x(model: Any, x: float, step: float = 1e-6) -> float:
    """Central-difference d(model(x))/dx."""
    h = step * max(1.0, abs(x))
    return (model.evaluate(x + h) - model.evaluate(x - h)) / (2.0 * h)


def assert_jacobian_matches(
    model: Any,
    xs: Iterable[float],
    rtol: float = 1e-6,
    atol: float = 1e-6,
    step: float = 1e-6,
    check_deriv_x: bool = True,
) -> None:
    """Assert the analytic jacobian (and deriv_x) agree with central differences at each x."""
    for x in xs:
        x = float(x)
        np.testing.assert_allclose(
            model.jacobian(x),
            numeric_jacobian(model, x, step),
            rtol=rtol,
            atol=atol,
            err_msg=f"jacobian mismatch at x={x}",
        )
        if check_deriv_x and callable(getattr(model, "deriv_x", None)):
            np.testing.assert_allclose(
                model.deriv_x(x),
                numeric_deriv_x(model, x, step),
                rtol=rtol,
                atol=atol,
                err_msg=f"deriv_x mismatch at x={x}",
            )
