from __future__ import annotations

import logging
from typing import Any, Dict

import numpy as np
from scipy.optimize import least_squares

from .common import (
    EvaluationCounter,
    MinimizationReport,
    Minimizer,
    TerminationReason,
    failure_report,
    objective_of,
)

logger = logging.getLogger(__name__)

# scipy.optimize.least_squares `status` codes
_STATUS = {
    1: TerminationReason.ORTHOGONAL,  # gtol
    2: TerminationReason.CONVERGED,  # ftol
    3: TerminationReason.CONVERGED,  # xtol
    4: TerminationReason.CONVERGED,  # ftol and xtol
    -1: TerminationReason.NUMERICAL,
}


class ScipyLeastSquaresBackend:
    name = "scipy.least_squares"

    def minimize(self, problem: Any, minimizer: Minimizer) -> MinimizationReport:
        n_points, n_params = problem.n_points, problem.n_params
        method = minimizer.method
        if method is None:
            # MINPACK's LM needs at least as many residuals as parameters
            method = "lm" if n_points >= n_params else "trf"

        kwargs: Dict[str, Any] = dict(minimizer.options)
        kwargs.setdefault("max_nfev", minimizer.evaluation_budget(n_params))

        counter = EvaluationCounter(problem)
        try:
            res = least_squares(
                counter.fun,
                np.asarray(problem.params(), dtype=float),
                jac=counter.jac,
                method=method,
                ftol=minimizer.ftol,
                xtol=minimizer.xtol,
                gtol=minimizer.gtol,
                **kwargs,
            )
        except Exception as e:
            # Soft fail: leave the model at its last attempted parameters.
            logger.debug("least_squares raised: %s", e)
            return failure_report(e, counter, self.name)

        problem.set_params(res.x)
        status = int(res.status)
        if status == 0:
            reason = minimizer.budget_reason()
        else:
            reason = _STATUS.get(status, TerminationReason.NUMERICAL)

        residuals = np.asarray(res.fun, dtype=float)
        if not np.all(np.isfinite(residuals)):
            reason = TerminationReason.NUMERICAL
        elif reason.was_successful() and not np.any(residuals):
            reason = TerminationReason.RESIDUALS_ZERO

        return MinimizationReport(
            termination=reason,
            number_of_evaluations=int(res.nfev),
            objective_function=objective_of(residuals),
            message=str(res.message),
            stats={
                "backend": self.name,
                "method": method,
                "status": status,
                "njev": None if res.njev is None else int(res.njev),
            },
        )
