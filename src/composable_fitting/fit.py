from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
from warnings import warn

import numpy as np
import uncertainties

from .backends import MinimizationReport, Minimizer, get_backend
from .model import check_fit_model
from .problem import WeightFunction, create_problem
from .stats import COVARIANCE_SCALES, compute_statistics, nan_statistics
from .util import format_parameters

logger = logging.getLogger(__name__)


def default_weights(x: float, y: float) -> float:
    """Unit weight for every point."""
    return 1.0


@dataclass(frozen=True)
class FitStat:
    """Fit report plus the statistics of the converged parameters."""

    report: MinimizationReport
    params: np.ndarray  # fitted values, in parameter order
    reduced_chi2: float
    covariance_matrix: np.ndarray  # (P, P)
    param_errors: np.ndarray  # (P,)
    errors: Any  # model.with_errors(param_errors)

    def summary(self, names: Optional[Sequence[str]] = None, precision: Any = 1) -> str:
        """Human-readable ``name = value(err)`` lines."""
        if names is None:
            names = [f"p{i}" for i in range(len(self.params))]
        lines = format_parameters(self.params, self.param_errors, names, precision)
        lines.append(f"reduced chi2 = {self.reduced_chi2:.6g}")
        lines.append(f"termination = {self.report.termination.value}")
        return "\n".join(lines)

    def correlated(self) -> List[Any]:
        """Fitted parameters as correlated ``uncertainties`` values."""
        return list(
            uncertainties.correlated_values(
                np.asarray(self.params, dtype=float),
                np.asarray(self.covariance_matrix, dtype=float),
            )
        )


def _prepare(model: Any, x: Any, y: Any, weights: WeightFunction, weight_jacobian: bool):
    check_fit_model(model)
    if int(model.param_count) == 0:
        raise ValueError("Model has no free parameters; nothing to fit.")
    return create_problem(x, y, model, weights, weight_jacobian)


def _minimize(problem: Any, minimizer: Optional[Minimizer]) -> MinimizationReport:
    minimizer = Minimizer() if minimizer is None else minimizer
    backend = get_backend(minimizer.backend)
    logger.debug(
        "fit start: %d points, %d params, backend=%s",
        problem.n_points,
        problem.n_params,
        backend.name,
    )
    report = backend.minimize(problem, minimizer)
    logger.debug(
        "fit done: %s after %d evaluations (objective=%g)",
        report.termination.value,
        report.number_of_evaluations,
        report.objective_function,
    )
    return report


def fit(
    model: Any,
    x: Any,
    y: Any,
    *,
    minimizer: Optional[Minimizer] = None,
    weights: WeightFunction = default_weights,
    weight_jacobian: bool = True,
) -> MinimizationReport:
    """Fit `model` to the points ``(x, y)`` in place.

    Minimizes ``sum((weights(x, y) * (model(x) - y))**2)``. The model is left
    at the solver's last parameters whether or not it converged; check
    ``report.success`` / ``report.termination``.
    """
    problem = _prepare(model, x, y, weights, weight_jacobian)
    return _minimize(problem, minimizer)


def fit_stat(
    model: Any,
    x: Any,
    y: Any,
    *,
    minimizer: Optional[Minimizer] = None,
    weights: WeightFunction = default_weights,
    weight_jacobian: bool = True,
    covariance_scale: str = "sqrt",
) -> FitStat:
    """Like :func:`fit`, then compute reduced chi-square, covariance and errors.

    With no more points than parameters the fit still runs but the
    statistics are NaN, with a warning.

    The covariance is built from the problem's Jacobian rows. With
    ``weight_jacobian=True`` (the default) and non-unit weights those rows
    are weighted, so the result differs from ``inv(J Jᵀ)`` computed on the
    plain model Jacobian; pass ``weight_jacobian=False`` to get that form.
    """
    if covariance_scale not in COVARIANCE_SCALES:
        raise ValueError(
            f"covariance_scale must be one of {COVARIANCE_SCALES}; got {covariance_scale!r}."
        )
    problem = _prepare(model, x, y, weights, weight_jacobian)
    report = _minimize(problem, minimizer)

    n_params = problem.n_params
    if problem.n_points <= n_params:
        warn(
            f"{problem.n_points} points for {n_params} parameters; "
            "reduced chi2, covariance and errors are NaN.",
            UserWarning,
        )
        stats = nan_statistics(n_params)
    else:
        stats = compute_statistics(model, problem, covariance_scale)

    return FitStat(
        report=report,
        params=model.get_params(),
        reduced_chi2=stats.reduced_chi2,
        covariance_matrix=stats.covariance_matrix,
        param_errors=stats.param_errors,
        errors=model.with_errors(stats.param_errors),
    )

