from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


__all__ = [
    "FitModel",
    "ParameterCountError",
    "ParameterLayout",
    "param_vector",
    "empty_params",
    "is_fit_model",
    "check_fit_model",
    "check_distinct",
    "iter_model_tree",
]


class ParameterCountError(ValueError):
    """A parameter vector does not have the length a model expects."""


def param_vector(values: Any, count: int) -> np.ndarray:
    """Build a parameter (or jacobian/error) vector of exactly `count` floats.

    All vectors that cross a model boundary go through here, so a length
    mismatch fails immediately instead of being truncated or padded.
    """
    arr = np.asarray(values, dtype=float)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise ParameterCountError(
            f"Expected a 1-D vector of {count} values, got shape {arr.shape}."
        )
    if arr.shape[0] != int(count):
        raise ParameterCountError(
            f"Expected {count} values, got {arr.shape[0]}."
        )
    return arr


def empty_params() -> np.ndarray:
    return np.empty((0,), dtype=float)


_INTERFACE = ("evaluate", "jacobian", "get_params", "set_params", "param_count")


def is_fit_model(obj: Any) -> bool:
    """Duck-typed check for the model interface."""
    return all(hasattr(obj, attr) for attr in _INTERFACE)


def check_fit_model(obj: Any, role: str = "model") -> Any:
    if not is_fit_model(obj):
        raise TypeError(
            f"{role} must implement the model interface "
            f"({', '.join(_INTERFACE)}); got {type(obj).__name__}."
        )
    return obj


def iter_model_tree(model: Any) -> Iterator[Any]:
    """Yield `model` and every model nested under it, depth first."""
    yield model
    children = getattr(model, "fit_children", None)
    if callable(children):
        for child in children():
            yield from iter_model_tree(child)


def check_distinct(models: Sequence[Any]) -> None:
    """Combinators own their children: no object may appear twice in the tree.

    Whole subtrees are compared by identity, so ``ModelSum(a, Ranged(a, r))``
    is rejected as well as ``ModelSum(a, a)``.
    """
    seen = set()
    for m in models:
        for node in iter_model_tree(m):
            if id(node) in seen:
                raise ValueError(
                    f"The same {type(node).__name__} instance appears twice in "
                    "the model tree; combinators need distinct child models."
                )
            seen.add(id(node))


class ParameterLayout:
    """Offset table for a flat parameter vector made of consecutive child blocks.

    A combinator builds one layout from its children's parameter counts and
    uses it for jacobian, get_params, set_params and with_errors alike, so the
    block order is defined in exactly one place.
    """

    def __init__(self, counts: Iterable[int]):
        self.counts: Tuple[int, ...] = tuple(int(c) for c in counts)
        if any(c < 0 for c in self.counts):
            raise ValueError(f"Negative parameter count in layout: {self.counts}")
        offsets = np.concatenate([[0], np.cumsum(self.counts, dtype=int)])
        self.offsets: Tuple[int, ...] = tuple(int(o) for o in offsets)
        self.slices: Tuple[slice, ...] = tuple(
            slice(self.offsets[i], self.offsets[i + 1])
            for i in range(len(self.counts))
        )
        self.total: int = self.offsets[-1]

    def __len__(self) -> int:
        return len(self.counts)

    def __repr__(self) -> str:
        return f"ParameterLayout(counts={self.counts})"

    def split(self, values: Any) -> List[np.ndarray]:
        """Split a flat vector into per-child blocks, in layout order."""
        flat = param_vector(values, self.total)
        return [flat[s] for s in self.slices]

    def join(self, parts: Sequence[Any]) -> np.ndarray:
        """Concatenate per-child blocks into one flat vector, in layout order."""
        if len(parts) != len(self.counts):
            raise ParameterCountError(
                f"Expected {len(self.counts)} blocks, got {len(parts)}."
            )
        blocks = [param_vector(p, c) for p, c in zip(parts, self.counts)]
        if not blocks:
            return empty_params()
        return np.concatenate(blocks)


class FitModel:
    """Base class for everything that can be fitted.

    Subclasses implement:

    - ``param_count``: number of free parameters (fixed once constructed)
    - ``evaluate(x)``: model output for a scalar input
    - ``jacobian(x)``: d(output)/d(param_i), in parameter order
    - ``get_params()`` / ``set_params(params)``: flat parameter vector
    - ``with_errors(errors)``: a view of the model holding parameter errors

    Optionally ``deriv_x(x)`` (derivative over the input), which is required
    of the outer model of a :class:`~composable_fitting.combinators.Composition`.
    """

    @property
    def param_count(self) -> int:
        raise NotImplementedError

    def evaluate(self, x: float) -> float:
        raise NotImplementedError

    def jacobian(self, x: float) -> np.ndarray:
        raise NotImplementedError

    def get_params(self) -> np.ndarray:
        raise NotImplementedError

    def set_params(self, params: Any) -> None:
        raise NotImplementedError

    def with_errors(self, errors: Any) -> Any:
        raise NotImplementedError(
            f"{type(self).__name__} does not define an error view."
        )

    def fit_children(self) -> Tuple[Any, ...]:
        """Models nested directly under this one (none for primitives)."""
        return ()

    # ---- conveniences ----
    def __call__(self, x: float) -> float:
        return self.evaluate(x)

    def evaluate_many(self, xs: Iterable[float]) -> np.ndarray:
        """Evaluate at each point of `xs`."""
        return np.array([self.evaluate(float(x)) for x in xs], dtype=float)

    # ---- builders (wrap self; the wrapper borrows, it does not copy) ----
    def compose(self, outer: Any) -> Any:
        """Return ``outer(self(x))`` as a Composition."""
        from .combinators.composition import Composition

        return Composition(self, outer)

    def map(self, function: Any) -> Any:
        """Return the model with a differentiable function applied to its output."""
        from .combinators.model_map import ModelMap

        return ModelMap(self, function)

    def ranged(
        self,
        start: Optional[float] = None,
        end: Optional[float] = None,
        *,
        include_start: bool = True,
        include_end: bool = False,
    ) -> Any:
        """Return the model restricted to ``start <= x < end`` (zero elsewhere)."""
        from .combinators.ranged import Range, Ranged

        return Ranged(
            self,
            Range(
                start=start,
                end=end,
                include_start=include_start,
                include_end=include_end,
            ),
        )

    def fixed(self) -> Any:
        """Return the model with all of its parameters frozen."""
        from .combinators.fixed import Fixed

        return Fixed(self)
