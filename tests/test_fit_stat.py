import numpy as np
import pytest

from composable_fitting import fit_stat
from composable_fitting.combinators import Fixed, ModelSum
from composable_fitting.models import Constant, Gaussian, GaussianErrors, Linear
from composable_fitting.problem import create_problem
from composable_fitting.fit import default_weights
from composable_fitting.stats import (
    compute_statistics,
    covariance_matrix,
    jacobian_matrix,
    parameter_errors,
    reduced_chi2,
)


def _uniform_samples(n: int = 10_000, seed: int = 0):
    rng = np.random.default_rng(seed)
    y = rng.uniform(0.0, 5.0, size=n)
    return np.zeros(n), y


def test_constant_stats_match_sample_mean() -> None:
    x, y = _uniform_samples()
    model = Constant(c=0.0)

    stat = fit_stat(model, x, y)

    assert stat.report.success, stat.report
    assert model.c == pytest.approx(np.mean(y), abs=1e-10)
    assert stat.reduced_chi2 == pytest.approx(np.var(y, ddof=1), rel=1e-9)

    stderr_of_mean = np.std(y, ddof=1) / np.sqrt(y.size)
    assert stat.param_errors[0] == pytest.approx(stderr_of_mean, abs=0.1)
    assert stat.errors == Constant(c=stat.param_errors[0])


def test_chi2_scale_gives_textbook_standard_error() -> None:
    x, y = _uniform_samples()
    stat = fit_stat(Constant(c=0.0), x, y, covariance_scale="chi2")

    stderr_of_mean = np.std(y, ddof=1) / np.sqrt(y.size)
    assert stat.param_errors[0] == pytest.approx(stderr_of_mean, rel=1e-6)


def test_default_scale_uses_square_root_of_reduced_chi2() -> None:
    x, y = _uniform_samples(n=500, seed=3)
    sqrt_scaled = fit_stat(Constant(), x, y)
    chi2_scaled = fit_stat(Constant(), x, y, covariance_scale="chi2")

    ratio = chi2_scaled.covariance_matrix[0, 0] / sqrt_scaled.covariance_matrix[0, 0]
    assert ratio == pytest.approx(np.sqrt(sqrt_scaled.reduced_chi2), rel=1e-9)


def test_statistics_on_a_noisy_line() -> None:
    rng = np.random.default_rng(1)
    x = np.linspace(0.0, 10.0, 50)
    y = 1.5 * x - 2.0 + rng.normal(0.0, 0.3, size=x.size)
    line = Linear()

    stat = fit_stat(line, x, y, covariance_scale="chi2")

    assert stat.covariance_matrix.shape == (2, 2)
    np.testing.assert_allclose(stat.covariance_matrix, stat.covariance_matrix.T)
    assert np.all(stat.param_errors > 0)
    assert line.a == pytest.approx(1.5, abs=5 * stat.param_errors[0])
    assert line.b == pytest.approx(-2.0, abs=5 * stat.param_errors[1])
    np.testing.assert_allclose(stat.params, line.get_params())


def test_too_few_points_gives_nan_statistics() -> None:
    line = Linear()
    with pytest.warns(UserWarning, match="NaN"):
        stat = fit_stat(line, np.array([0.0, 1.0]), np.array([1.0, 3.0]))

    assert np.isnan(stat.reduced_chi2)
    assert stat.covariance_matrix.shape == (2, 2)
    assert np.all(np.isnan(stat.covariance_matrix))
    assert np.all(np.isnan(stat.param_errors))
    # the fit itself still ran
    assert line.a == pytest.approx(2.0, abs=1e-6)


def test_singular_covariance_is_nan_with_warning() -> None:
    jac = np.array([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
    with pytest.warns(UserWarning, match="singular"):
        cov = covariance_matrix(jac, 1.0)
    assert cov.shape == (2, 2)
    assert np.all(np.isnan(cov))
    assert np.all(np.isnan(parameter_errors(cov)))


def test_singular_fit_never_raises() -> None:
    # every x is the same, so slope and intercept are not separable
    x = np.full(5, 2.0)
    y = np.array([1.0, 1.1, 0.9, 1.0, 1.05])
    with pytest.warns(UserWarning, match="singular"):
        stat = fit_stat(Linear(), x, y)
    assert np.all(np.isnan(stat.param_errors))


def test_statistics_use_problem_rows() -> None:
    x = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
    y = np.array([0.1, 0.9, 2.1, 2.9, 4.2])
    line = Linear(a=1.0, b=0.0)
    problem = create_problem(x, y, line, default_weights)

    assert jacobian_matrix(problem).shape == (2, 5)
    r = y - x
    assert reduced_chi2(problem, 2) == pytest.approx(np.sum(r**2) / 3)
    assert np.isnan(reduced_chi2(problem, 5))

    stats = compute_statistics(line, problem, "chi2")
    jac = np.column_stack([x, np.ones_like(x)])
    expected = np.linalg.inv(jac.T @ jac) * (np.sum(r**2) / 3)
    np.testing.assert_allclose(stats.covariance_matrix, expected)

    with pytest.raises(ValueError, match="covariance_scale"):
        compute_statistics(line, problem, "bogus")


def test_error_view_follows_layout() -> None:
    rng = np.random.default_rng(7)
    x = np.linspace(-3.0, 3.0, 60)
    truth = Gaussian(a=2.0, x_c=0.3, sigma=0.7)
    y = truth.evaluate_many(x) + 0.2 + rng.normal(0.0, 0.01, size=x.size)

    model = ModelSum(peak=Gaussian(a=1.5, x_c=0.0, sigma=0.7, fit_sigma=False), fixed=Fixed(Constant(0.2)))
    stat = fit_stat(model, x, y)

    assert set(stat.errors) == {"peak", "fixed"}
    assert stat.errors["fixed"] is None
    assert isinstance(stat.errors["peak"], GaussianErrors)
    assert stat.errors["peak"].sigma is None
    assert stat.errors["peak"].a == pytest.approx(stat.param_errors[0])


def test_summary_and_correlated_values() -> None:
    rng = np.random.default_rng(2)
    x = np.linspace(0.0, 5.0, 30)
    y = 0.8 * x + 0.3 + rng.normal(0.0, 0.05, size=x.size)

    stat = fit_stat(Linear(), x, y, covariance_scale="chi2")

    text = stat.summary(names=["a", "b"])
    assert text.splitlines()[0].startswith("a = 0.")
    assert "reduced chi2" in text
    assert "termination = " in text
    with pytest.raises(ValueError):
        stat.summary(names=["a"])

    a, b = stat.correlated()
    assert a.nominal_value == pytest.approx(stat.params[0])
    assert a.std_dev == pytest.approx(stat.param_errors[0])
    assert b.std_dev == pytest.approx(stat.param_errors[1])


def test_unknown_covariance_scale() -> None:
    with pytest.raises(ValueError, match="covariance_scale"):
        fit_stat(Constant(), [0.0, 1.0, 2.0], [1.0, 2.0, 3.0], covariance_scale="bogus")


def test_weighted_rows_change_the_covariance() -> None:
    rng = np.random.default_rng(5)
    x = np.linspace(0.0, 4.0, 25)
    y = 0.7 * x + 1.2 + rng.normal(0.0, 0.1, size=x.size)
    weights = lambda xi, yi: 1.0 + xi  # noqa: E731

    plain_rows = fit_stat(
        Linear(), x, y, weights=weights, weight_jacobian=False, covariance_scale="chi2"
    )
    weighted_rows = fit_stat(Linear(), x, y, weights=weights, covariance_scale="chi2")

    # unweighted rows: inv(J Jt) of the bare model jacobian
    jac = np.column_stack([x, np.ones_like(x)])
    expected = np.linalg.inv(jac.T @ jac) * plain_rows.reduced_chi2
    np.testing.assert_allclose(plain_rows.covariance_matrix, expected, rtol=1e-9)

    w = 1.0 + x
    weighted_jac = jac * w[:, None]
    expected = np.linalg.inv(weighted_jac.T @ weighted_jac) * weighted_rows.reduced_chi2
    np.testing.assert_allclose(weighted_rows.covariance_matrix, expected, rtol=1e-9)
    assert not np.allclose(plain_rows.covariance_matrix, weighted_rows.covariance_matrix)
