"""
Example: a Gaussian peak on a sloped background, as a dataclass of models.

@fit_model_sum generates the parameter layout from the field order, and the
error view comes back as the same class with per-field errors.
"""

import math
from dataclasses import dataclass

import numpy as np

from composable_fitting import Minimizer, fit_model_sum, fit_stat
from composable_fitting.models import Gaussian, Linear


@fit_model_sum
@dataclass
class PeakOnBackground:
    peak: Gaussian
    background: Linear


def main() -> None:
    rng = np.random.default_rng(1)
    x = np.linspace(-5.0, 5.0, 200)
    truth = PeakOnBackground(Gaussian(a=4.0, x_c=0.7, sigma=0.6), Linear(a=0.1, b=0.5))
    y = truth.evaluate_many(x) + rng.normal(0.0, 0.05, size=x.size)

    model = PeakOnBackground(Gaussian(a=1.0, x_c=0.0, sigma=1.0), Linear())
    for backend in ("scipy.least_squares", "scipy.leastsq"):
        stat = fit_stat(model, x, y, minimizer=Minimizer(backend=backend), covariance_scale="chi2")
        print(f"--- {backend}: {stat.report.termination.value}, {stat.report.number_of_evaluations} evaluations")
        print(stat.summary(names=["a", "x_c", "sigma", "slope", "offset"]))

    print("fwhm:", model.peak.fwhm())
    print("peak errors:", stat.errors.peak)

    a, x_c, sigma, slope, offset = stat.correlated()
    print("peak height:", a / (math.sqrt(2.0 * math.pi) * sigma))


if __name__ == "__main__":
    main()
