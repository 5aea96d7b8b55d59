from __future__ import annotations

import math
from typing import Any, List, Sequence

import numpy as np


def safe_float(x: Any) -> float:
    """Convert numpy scalar / 0-d array to python float."""
    if isinstance(x, np.ndarray) and x.shape == ():
        return float(x.item())
    return float(x)


def _exponent(v: float) -> int:
    """Decimal exponent of a positive number."""
    return int(math.floor(math.log10(v)))


def _significant_digits(err: float, precision: int | str | None) -> int:
    """Digits of the uncertainty to show; "auto" gives 2 for a leading 1, else 1."""
    if precision is None or (isinstance(precision, str) and precision.lower() == "auto"):
        if err == 0.0:
            return 1
        leading = int(err / 10 ** _exponent(err) + 1e-12)
        return 2 if leading == 1 else 1
    return max(1, int(precision))


def uncertainty_to_string(
    x: float, err: float, precision: int | str | None = 1
) -> str:
    """Compact ``value(err)`` string, e.g. ``12.346(1)`` or ``-1.23(1)e-5``.

    Both plain and scientific notation are built and the shorter one wins
    (plain on a tie). The error is rounded to `precision` significant
    digits and the value to the same last decimal place.
    """
    x = safe_float(x)
    err = abs(safe_float(err))
    if math.isnan(x) or math.isnan(err):
        return "NaN"
    if math.isinf(x) or math.isinf(err):
        return "inf"

    digits = _significant_digits(err, precision)
    if err == 0.0:
        return f"{x:.{digits}g}(0)"

    err_exp = _exponent(err)
    last = err_exp - digits + 1  # exponent of the last digit shown
    x_units = round(x * 10 ** (-last))
    err_units = round(err * 10 ** (-last))

    plain_value = x_units * 10 ** last
    plain_err = err_units * 10 ** max(0, last)
    plain = f"{plain_value:.{max(0, -last)}f}({plain_err:.0f})"

    x_exp = err_exp if x == 0.0 or abs(x) < err else _exponent(abs(x))
    decimals = x_exp - last
    scientific = f"{x_units * 10 ** (-decimals):.{decimals}f}({err_units:.0f})e{x_exp}"

    return plain if len(plain) <= len(scientific) else scientific


def format_parameters(
    values: Any, errors: Any, names: Sequence[str], precision: int | str | None = 1
) -> List[str]:
    """``name = value(err)`` lines, one per parameter."""
    values = np.atleast_1d(np.asarray(values, dtype=float))
    errors = np.atleast_1d(np.asarray(errors, dtype=float))
    if not (len(values) == len(errors) == len(names)):
        raise ValueError(
            f"Got {len(values)} values, {len(errors)} errors and {len(names)} names."
        )
    width = max((len(n) for n in names), default=0)
    return [
        f"{n:<{width}} = {uncertainty_to_string(v, e, precision)}"
        for n, v, e in zip(names, values, errors)
    ]
