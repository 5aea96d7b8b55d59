import numpy as np
import pytest

from composable_fitting.model import (
    ParameterCountError,
    ParameterLayout,
    check_distinct,
    check_fit_model,
    is_fit_model,
    param_vector,
)
from composable_fitting.models import Constant, Linear
from composable_fitting.testing import assert_jacobian_matches, numeric_jacobian


def test_param_vector_rejects_wrong_length() -> None:
    assert param_vector([1.0, 2.0], 2).tolist() == [1.0, 2.0]
    assert param_vector(3.0, 1).tolist() == [3.0]

    with pytest.raises(ParameterCountError):
        param_vector([1.0, 2.0, 3.0], 2)
    with pytest.raises(ParameterCountError):
        param_vector(np.zeros((2, 2)), 4)

    # still a ValueError for callers that don't know the subclass
    with pytest.raises(ValueError):
        param_vector([], 1)


def test_layout_offsets_split_and_join() -> None:
    layout = ParameterLayout([2, 0, 3])

    assert layout.total == 5
    assert layout.offsets == (0, 2, 2, 5)

    parts = layout.split(np.arange(5.0))
    assert [p.tolist() for p in parts] == [[0.0, 1.0], [], [2.0, 3.0, 4.0]]
    np.testing.assert_array_equal(layout.join(parts), np.arange(5.0))


def test_layout_join_checks_block_sizes() -> None:
    layout = ParameterLayout([1, 2])
    with pytest.raises(ParameterCountError):
        layout.join([[1.0], [2.0]])
    with pytest.raises(ParameterCountError):
        layout.join([[1.0]])
    with pytest.raises(ParameterCountError):
        layout.split([1.0, 2.0])


def test_empty_layout() -> None:
    layout = ParameterLayout([])
    assert layout.total == 0
    assert layout.join([]).shape == (0,)


def test_interface_checks() -> None:
    assert is_fit_model(Linear())
    assert not is_fit_model(object())

    with pytest.raises(TypeError, match="model interface"):
        check_fit_model(lambda x: x, "outer")


def test_check_distinct_rejects_shared_children() -> None:
    c = Constant(1.0)
    check_distinct([c, Constant(1.0)])  # equal but distinct objects are fine
    with pytest.raises(ValueError, match="appears twice"):
        check_distinct([c, c])


def test_builders_wrap_without_copying() -> None:
    line = Linear(a=1.0, b=2.0)

    fixed = line.fixed()
    assert fixed.inner is line
    assert fixed.param_count == 0

    ranged = line.ranged(end=0.0)
    assert ranged.inner is line
    assert ranged(1.0) == 0.0
    assert ranged(-1.0) == pytest.approx(1.0)

    composed = line.compose(Linear(a=2.0, b=0.0))
    assert composed.param_count == 4
    assert composed(1.0) == pytest.approx(6.0)

    np.testing.assert_allclose(line.evaluate_many([0.0, 1.0, 2.0]), [2.0, 3.0, 4.0])


def test_jacobian_checker_catches_wrong_derivative() -> None:
    class WrongSlope(Linear):
        def jacobian(self, x):
            return np.array([2.0 * x, 1.0])

    assert_jacobian_matches(Linear(a=1.0, b=0.0), [0.5, 1.0])
    with pytest.raises(AssertionError, match="jacobian mismatch"):
        assert_jacobian_matches(WrongSlope(a=1.0, b=0.0), [0.5, 1.0])

    model = Linear(a=1.0, b=2.0)
    np.testing.assert_allclose(numeric_jacobian(model, 3.0), [3.0, 1.0])
    # parameters are restored
    assert (model.a, model.b) == (1.0, 2.0)
