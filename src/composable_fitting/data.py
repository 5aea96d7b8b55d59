from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Points:
    """Read-only view over paired x / y observations.

    ``fixed_size`` is true when both inputs arrived as NumPy arrays, i.e. the
    point count is part of the data's type and buffers can be sized once.
    """

    x: Sequence[float]
    y: Sequence[float]
    fixed_size: bool

    def __len__(self) -> int:
        return len(self.x)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for xi, yi in zip(self.x, self.y):
            yield float(xi), float(yi)


def _as_1d_array(values: np.ndarray, name: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D; got shape {arr.shape}.")
    return arr


def _as_sequence(values: Any, name: str) -> Sequence[float]:
    if isinstance(values, np.ndarray):
        return _as_1d_array(values, name)
    if isinstance(values, (str, bytes)):
        raise TypeError(f"{name} must be a sequence of numbers, not {type(values).__name__}.")
    if not hasattr(values, "__len__") or not hasattr(values, "__getitem__"):
        # one-shot iterables are read once here; the problem iterates many times
        values = list(values)
    return values


def as_points(x: Any, y: Any) -> Points:
    """Normalize user inputs into a :class:`Points` view.

    Accepts NumPy arrays (fixed-size path) or any other sequence or iterable
    of numbers (dynamic path). x and y must have the same length.
    """
    fixed = isinstance(x, np.ndarray) and isinstance(y, np.ndarray)
    if fixed:
        xs: Sequence[float] = _as_1d_array(x, "x")
        ys: Sequence[float] = _as_1d_array(y, "y")
    else:
        xs = _as_sequence(x, "x")
        ys = _as_sequence(y, "y")

    if len(xs) != len(ys):
        raise ValueError(
            f"x and y must have the same length; got {len(xs)} and {len(ys)}."
        )
    return Points(x=xs, y=ys, fixed_size=fixed)
