from __future__ import annotations

import dataclasses
import functools
from typing import Any, Dict, Iterator, List, Sequence, Tuple, Type, Union

import numpy as np

from ..model import (
    FitModel,
    ParameterLayout,
    check_distinct,
    check_fit_model,
)

Key = Union[int, str]


# ---- shared sum arithmetic -------------------------------------------------
#
# ModelSum and classes generated by @fit_model_sum both go through these
# helpers, so the child order (= declaration order) and the layout are
# applied identically in every operation.


def _sum_evaluate(children: Sequence[Any], x: float) -> float:
    return sum((c.evaluate(x) for c in children), 0.0)


def _sum_deriv_x(children: Sequence[Any], x: float) -> float:
    return sum((c.deriv_x(x) for c in children), 0.0)


def _sum_jacobian(layout: ParameterLayout, children: Sequence[Any], x: float) -> np.ndarray:
    return layout.join([c.jacobian(x) for c in children])


def _sum_get_params(layout: ParameterLayout, children: Sequence[Any]) -> np.ndarray:
    return layout.join([c.get_params() for c in children])


def _sum_set_params(layout: ParameterLayout, children: Sequence[Any], params: Any) -> None:
    for c, block in zip(children, layout.split(params)):
        c.set_params(block)


def _sum_errors(layout: ParameterLayout, children: Sequence[Any], errors: Any) -> List[Any]:
    return [c.with_errors(block) for c, block in zip(children, layout.split(errors))]


def _sum_layout(children: Sequence[Any], owner: str) -> ParameterLayout:
    for i, c in enumerate(children):
        check_fit_model(c, f"{owner} child {i}")
    check_distinct(children)
    return ParameterLayout(c.param_count for c in children)


class ModelSum(FitModel):
    """Heterogeneous models whose outputs are summed.

    Children may be given positionally, by keyword, or both; positional ones
    come first, then keyword ones in the order they were passed. That order
    is the parameter order::

        bg_and_peak = ModelSum(Linear(), peak=Gaussian(a=1.0, x_c=3.0))
        bg_and_peak[0]          # the Linear
        bg_and_peak["peak"]     # the Gaussian
        bg_and_peak.peak        # same
    """

    def __init__(self, *models: Any, **named: Any):
        keys: List[Key] = list(range(len(models)))
        children: List[Any] = list(models)
        for name, model in named.items():
            keys.append(name)
            children.append(model)
        self._keys: Tuple[Key, ...] = tuple(keys)
        self._children: List[Any] = children
        self._layout = _sum_layout(children, "ModelSum")

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[str, Any]]) -> "ModelSum":
        """Build from an ordered sequence of (name, model) pairs."""
        out = cls()
        keys = tuple(str(name) for name, _ in pairs)
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate child names in {keys}.")
        children = [model for _, model in pairs]
        out._keys = keys
        out._children = children
        out._layout = _sum_layout(children, "ModelSum")
        return out

    def __repr__(self) -> str:
        inner = ", ".join(
            repr(c) if isinstance(k, int) else f"{k}={c!r}"
            for k, c in zip(self._keys, self._children)
        )
        return f"ModelSum({inner})"

    # ---- child access ----
    @property
    def keys(self) -> Tuple[Key, ...]:
        return self._keys

    @property
    def layout(self) -> ParameterLayout:
        return self._layout

    def items(self) -> Iterator[Tuple[Key, Any]]:
        return iter(zip(self._keys, self._children))

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._children)

    def fit_children(self) -> Tuple[Any, ...]:
        return tuple(self._children)

    def __getitem__(self, key: Key) -> Any:
        if isinstance(key, int):
            return self._children[key]
        try:
            return self._children[self._keys.index(key)]
        except ValueError as e:
            raise KeyError(key) from e

    def __getattr__(self, name: str) -> Any:
        # only called when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        keys = self.__dict__.get("_keys", ())
        if name in keys:
            return self.__dict__["_children"][keys.index(name)]
        raise AttributeError(name)

    # ---- model interface ----
    @property
    def param_count(self) -> int:
        return self._layout.total

    def evaluate(self, x: float) -> float:
        return _sum_evaluate(self._children, x)

    def jacobian(self, x: float) -> np.ndarray:
        return _sum_jacobian(self._layout, self._children, x)

    def deriv_x(self, x: float) -> float:
        return _sum_deriv_x(self._children, x)

    def get_params(self) -> np.ndarray:
        return _sum_get_params(self._layout, self._children)

    def set_params(self, params: Any) -> None:
        _sum_set_params(self._layout, self._children, params)

    def with_errors(self, errors: Any) -> Dict[Key, Any]:
        views = _sum_errors(self._layout, self._children, errors)
        return dict(zip(self._keys, views))


# ---- generated sums --------------------------------------------------------


_LAYOUT_ATTR = "_fit_layout"


def fit_model_sum(cls: Type[Any]) -> Type[Any]:
    """Class decorator turning a dataclass of models into a summed model.

    Every dataclass field must hold a model. The generated ``param_count``,
    ``evaluate``, ``jacobian``, ``get_params``, ``set_params``, ``deriv_x``
    and ``with_errors`` visit the fields in declaration order::

        @fit_model_sum
        @dataclass
        class WithBackground:
            signal: Gaussian
            background: Linear

    A plain class is turned into a dataclass first. ``with_errors`` returns
    an instance of the same class whose fields hold the children's error
    views; that instance is a plain record, not a fittable model.
    """
    if not dataclasses.is_dataclass(cls):
        cls = dataclasses.dataclass(cls)

    names: Tuple[str, ...] = tuple(f.name for f in dataclasses.fields(cls))
    owner = cls.__name__

    def _children(self) -> List[Any]:
        return [getattr(self, n) for n in names]

    def _layout(self) -> ParameterLayout:
        return self.__dict__[_LAYOUT_ATTR]

    original_init = cls.__init__

    @functools.wraps(original_init)
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        original_init(self, *args, **kwargs)
        layout = _sum_layout(_children(self), owner)
        # works for frozen dataclasses too
        object.__setattr__(self, _LAYOUT_ATTR, layout)

    def param_count(self) -> int:
        return _layout(self).total

    def evaluate(self, x: float) -> float:
        return _sum_evaluate(_children(self), x)

    def jacobian(self, x: float) -> np.ndarray:
        return _sum_jacobian(_layout(self), _children(self), x)

    def deriv_x(self, x: float) -> float:
        return _sum_deriv_x(_children(self), x)

    def fit_children(self) -> Tuple[Any, ...]:
        return tuple(_children(self))

    def get_params(self) -> np.ndarray:
        return _sum_get_params(_layout(self), _children(self))

    def set_params(self, params: Any) -> None:
        _sum_set_params(_layout(self), _children(self), params)

    def with_errors(self, errors: Any) -> Any:
        views = _sum_errors(_layout(self), _children(self), errors)
        # error views are not models, so skip the layout-building __init__
        view = object.__new__(type(self))
        for n, v in zip(names, views):
            object.__setattr__(view, n, v)
        return view

    cls.__init__ = __init__
    cls.param_count = property(param_count)
    cls.evaluate = evaluate
    cls.jacobian = jacobian
    cls.deriv_x = deriv_x
    cls.get_params = get_params
    cls.set_params = set_params
    cls.with_errors = with_errors
    cls.fit_children = fit_children
    cls.__fit_fields__ = names
    # builders/conveniences shared with FitModel
    for attr in ("__call__", "evaluate_many", "compose", "map", "ranged", "fixed"):
        if attr not in cls.__dict__:
            setattr(cls, attr, FitModel.__dict__[attr])
    return cls
