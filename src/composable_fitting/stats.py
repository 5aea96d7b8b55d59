"""Post-fit statistics: reduced chi-square, covariance and standard errors.

All quantities are computed from the fit problem's own residuals and
jacobian rows, so the weighting matches what the solver saw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from warnings import warn

import numpy as np

logger = logging.getLogger(__name__)

COVARIANCE_SCALES = ("sqrt", "chi2")


@dataclass(frozen=True)
class Statistics:
    reduced_chi2: float
    covariance_matrix: np.ndarray  # (P, P)
    param_errors: np.ndarray  # (P,)


def nan_statistics(n_params: int) -> Statistics:
    return Statistics(
        reduced_chi2=float("nan"),
        covariance_matrix=np.full((n_params, n_params), np.nan),
        param_errors=np.full(n_params, np.nan),
    )


def reduced_chi2(problem: Any, n_params: int) -> float:
    """Σ residual² / (N_points - N_params), or NaN without degrees of freedom."""
    dof = int(problem.n_points) - int(n_params)
    if dof <= 0:
        return float("nan")
    r = np.asarray(problem.residuals(), dtype=float)
    return float(np.dot(r, r)) / dof


def jacobian_matrix(problem: Any) -> np.ndarray:
    """Jacobian as a (N_params, N_points) matrix, one column per point."""
    return np.asarray(problem.jacobian(), dtype=float).T


def covariance_matrix(jacobian: np.ndarray, scale: float) -> np.ndarray:
    """``inv(J @ J.T) * scale``; all-NaN (with a warning) when J @ J.T is singular."""
    jac = np.asarray(jacobian, dtype=float)
    n = jac.shape[0]
    try:
        inv = np.linalg.inv(jac @ jac.T)
    except np.linalg.LinAlgError:
        warn(
            "J @ J.T is singular; covariance matrix and errors are NaN.",
            UserWarning,
        )
        return np.full((n, n), np.nan)
    return inv * float(scale)


def parameter_errors(cov: np.ndarray) -> np.ndarray:
    """Square roots of the covariance diagonal."""
    return np.sqrt(np.diag(np.asarray(cov, dtype=float)))


def compute_statistics(
    model: Any, problem: Any, covariance_scale: str = "sqrt"
) -> Statistics:
    """Statistics for a converged model.

    ``covariance_scale="sqrt"`` multiplies ``inv(J @ J.T)`` by the square
    root of the reduced chi-square; ``"chi2"`` multiplies by the reduced
    chi-square itself (the textbook estimator).
    """
    if covariance_scale not in COVARIANCE_SCALES:
        raise ValueError(
            f"covariance_scale must be one of {COVARIANCE_SCALES}; got {covariance_scale!r}."
        )
    n_params = int(model.param_count)
    chi2 = reduced_chi2(problem, n_params)
    if not np.isfinite(chi2):
        return nan_statistics(n_params)

    scale = np.sqrt(chi2) if covariance_scale == "sqrt" else chi2
    cov = covariance_matrix(jacobian_matrix(problem), scale)
    errors = parameter_errors(cov)
    logger.debug("reduced chi2=%g, errors=%s", chi2, errors)
    return Statistics(reduced_chi2=chi2, covariance_matrix=cov, param_errors=errors)
