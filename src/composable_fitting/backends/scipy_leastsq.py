from __future__ import annotations

import logging
from typing import Any, Dict

import numpy as np
from scipy.optimize import leastsq

from .common import (
    EvaluationCounter,
    MinimizationReport,
    Minimizer,
    TerminationReason,
    failure_report,
    objective_of,
)

logger = logging.getLogger(__name__)


def _reason(ier: int, minimizer: Minimizer) -> TerminationReason:
    """Map MINPACK's ``info`` code."""
    if ier == 4:
        return TerminationReason.ORTHOGONAL
    if ier in (1, 2, 3):
        return TerminationReason.CONVERGED
    if ier == 5:
        return minimizer.budget_reason()
    if ier in (6, 7, 8):
        return TerminationReason.NO_IMPROVEMENT_POSSIBLE
    return TerminationReason.WRONG_DIMENSIONS


class ScipyLeastsqBackend:
    """MINPACK ``lmder`` through :func:`scipy.optimize.leastsq`."""

    name = "scipy.leastsq"

    def minimize(self, problem: Any, minimizer: Minimizer) -> MinimizationReport:
        kwargs: Dict[str, Any] = dict(minimizer.options)
        kwargs.setdefault("maxfev", minimizer.evaluation_budget(problem.n_params))

        counter = EvaluationCounter(problem)
        try:
            p, _cov, info, mesg, ier = leastsq(
                counter.fun,
                np.asarray(problem.params(), dtype=float),
                Dfun=counter.jac,
                full_output=True,
                ftol=minimizer.ftol,
                xtol=minimizer.xtol,
                gtol=minimizer.gtol,
                **kwargs,
            )
        except Exception as e:
            logger.debug("leastsq raised: %s", e)
            return failure_report(e, counter, self.name)

        problem.set_params(np.atleast_1d(p))
        residuals = np.asarray(info["fvec"], dtype=float)
        reason = _reason(int(ier), minimizer)
        if not np.all(np.isfinite(residuals)):
            reason = TerminationReason.NUMERICAL
        elif reason.was_successful() and not np.any(residuals):
            reason = TerminationReason.RESIDUALS_ZERO

        return MinimizationReport(
            termination=reason,
            number_of_evaluations=int(info["nfev"]),
            objective_function=objective_of(residuals),
            message=str(mesg),
            stats={"backend": self.name, "ier": int(ier), "njev": int(info.get("njev", 0))},
        )
