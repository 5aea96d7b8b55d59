import numpy as np

from composable_fitting import fit_stat
from composable_fitting.models import Linear


rng = np.random.default_rng(0)
x = np.linspace(0, 10, 20)
sigma = 1.2
y = 2.0 * x - 1.0 + rng.normal(0, sigma, size=x.size)

line = Linear(a=0.0, b=0.0)
stat = fit_stat(line, x, y, covariance_scale="chi2")

print(stat.summary(names=["a", "b"]))
print("error view:", stat.errors)
