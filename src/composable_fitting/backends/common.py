from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import numpy as np

from ..model import ParameterCountError

# a few machine epsilons: fixed residuals (e.g. outside a Ranged model) must
# not end the fit early through the relative-reduction test
_TOL = 1e-14


class TerminationReason(enum.Enum):
    """Why the solver stopped."""

    CONVERGED = "converged"  # ftol and/or xtol satisfied
    ORTHOGONAL = "orthogonal"  # residuals orthogonal to the jacobian (gtol)
    RESIDUALS_ZERO = "residuals_zero"
    MAX_ITERATIONS = "max_iterations"  # explicit max_nfev reached
    LOST_PATIENCE = "lost_patience"  # patience-derived budget reached
    NO_IMPROVEMENT_POSSIBLE = "no_improvement_possible"  # tolerances too small
    NUMERICAL = "numerical"  # non-finite residuals / jacobian
    WRONG_DIMENSIONS = "wrong_dimensions"

    def was_successful(self) -> bool:
        return self in _SUCCESSFUL


_SUCCESSFUL = frozenset(
    {
        TerminationReason.CONVERGED,
        TerminationReason.ORTHOGONAL,
        TerminationReason.RESIDUALS_ZERO,
    }
)


@dataclass(frozen=True)
class MinimizationReport:
    """Normalized outcome returned by any backend."""

    termination: TerminationReason
    number_of_evaluations: int
    objective_function: float  # 0.5 * sum(residual**2) at the final parameters
    message: str = ""
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.termination.was_successful()


@dataclass(frozen=True)
class Minimizer:
    """Solver configuration.

    ``patience`` sets the evaluation budget to ``patience * (n_params + 1)``;
    an explicit ``max_nfev`` overrides it. ``method`` is passed to backends
    that have several (None lets the backend choose). ``options`` go to the
    SciPy call unchanged.
    """

    backend: str = "scipy.least_squares"
    ftol: float = _TOL
    xtol: float = _TOL
    gtol: float = 1e-8
    patience: int = 100
    max_nfev: Optional[int] = None
    method: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("ftol", "xtol", "gtol"):
            if not float(getattr(self, name)) >= 0.0:
                raise ValueError(f"{name} must be >= 0; got {getattr(self, name)!r}.")
        if int(self.patience) < 1:
            raise ValueError(f"patience must be >= 1; got {self.patience!r}.")
        if self.max_nfev is not None and int(self.max_nfev) < 1:
            raise ValueError(f"max_nfev must be >= 1; got {self.max_nfev!r}.")

    def evaluation_budget(self, n_params: int) -> int:
        if self.max_nfev is not None:
            return int(self.max_nfev)
        return int(self.patience) * (int(n_params) + 1)

    def budget_reason(self) -> TerminationReason:
        """Reason to report when the evaluation budget runs out."""
        if self.max_nfev is not None:
            return TerminationReason.MAX_ITERATIONS
        return TerminationReason.LOST_PATIENCE


class Backend(Protocol):
    """Backend protocol: drive one least-squares problem to convergence."""

    name: str

    def minimize(self, problem: Any, minimizer: Minimizer) -> MinimizationReport: ...


class EvaluationCounter:
    """Wraps a problem as the ``fun`` / ``jac`` callables SciPy expects.

    Keeps the evaluation count and the last residual vector, so that a
    report can still be built when the solver raises.
    """

    def __init__(self, problem: Any):
        self.problem = problem
        self.nfev = 0
        self.last_residuals: Optional[np.ndarray] = None

    def fun(self, p: np.ndarray) -> np.ndarray:
        self.problem.set_params(p)
        self.nfev += 1
        r = self.problem.residuals()
        self.last_residuals = r
        return r

    def jac(self, p: np.ndarray) -> np.ndarray:
        self.problem.set_params(p)
        return self.problem.jacobian()

    def objective(self) -> float:
        if self.last_residuals is None:
            return float("nan")
        return 0.5 * float(np.dot(self.last_residuals, self.last_residuals))


def objective_of(residuals: Any) -> float:
    r = np.asarray(residuals, dtype=float)
    return 0.5 * float(np.dot(r, r))


def failure_report(
    exc: Exception, counter: EvaluationCounter, backend: str
) -> MinimizationReport:
    """Soft fail: turn a solver exception into a report.

    Structural errors in the model (wrong vector lengths) are bugs, not
    solver outcomes, and are re-raised.
    """
    if isinstance(exc, ParameterCountError):
        raise exc
    msg = str(exc)
    if isinstance(exc, np.linalg.LinAlgError) or "finite" in msg.lower():
        reason = TerminationReason.NUMERICAL
    else:
        reason = TerminationReason.WRONG_DIMENSIONS
    return MinimizationReport(
        termination=reason,
        number_of_evaluations=counter.nfev,
        objective_function=counter.objective(),
        message=msg,
        stats={"backend": backend, "error": msg},
    )
