"""
Example: restricting a model to part of the x axis, and fitting in log space.
"""

import numpy as np

from composable_fitting import TerminationReason, fit
from composable_fitting.combinators import LnMap, Range
from composable_fitting.models import Exponent


def main() -> None:
    # exponential for x < 0, garbage afterwards
    x = np.array([-3.0, -2.5, -2.0, -1.5, -1.0, -0.5, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0])
    y = -5.0 * np.exp(2.5 * x)
    y[6:] = [-23.0, 43.0, 0.0, -5.0, 2.0, -7.0]

    chirp = Exponent(a=0.0, b=0.0).ranged(end=0.0)
    report = fit(chirp, x, y)
    print("ranged:", report.termination.value, chirp.inner)
    assert report.termination.was_successful()

    # same shape fitted through its logarithm
    x = np.arange(0.0, 4.5, 0.5)
    log_y = np.log(3.0 * np.exp(0.5 * x))
    expo = Exponent(a=1.0, b=0.0)
    report = fit(expo.map(LnMap()), x, log_y)
    print("log-mapped:", report.termination.value, expo)
    assert report.termination is not TerminationReason.NUMERICAL

    print("range check:", 0.0 in Range.to(0.0), -1e-9 in Range.to(0.0))


if __name__ == "__main__":
    main()
