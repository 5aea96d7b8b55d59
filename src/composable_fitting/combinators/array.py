from __future__ import annotations

from typing import Any, Callable, Iterator, List, Sequence, Tuple

import numpy as np

from ..model import (
    FitModel,
    ParameterLayout,
    check_distinct,
    check_fit_model,
    param_vector,
)


class ModelArray(FitModel):
    """N structurally identical models whose outputs are summed.

    Parameters are laid out element by element: the first ``inner`` block
    belongs to ``models[0]``, the next to ``models[1]`` and so on.
    """

    def __init__(self, models: Sequence[Any]):
        models = [check_fit_model(m, "ModelArray element") for m in models]
        check_distinct(models)
        counts = {int(m.param_count) for m in models}
        if len(counts) > 1:
            raise ValueError(
                "ModelArray elements must share a parameter count; "
                f"got {sorted(counts)}."
            )
        self.models: List[Any] = models
        self._layout = ParameterLayout(m.param_count for m in models)

    @classmethod
    def repeat(cls, factory: Callable[[], Any], n: int) -> "ModelArray":
        """Build an array of `n` models, each produced by calling `factory()`."""
        return cls([factory() for _ in range(int(n))])

    def __repr__(self) -> str:
        return f"ModelArray({self.models!r})"

    def fit_children(self) -> Tuple[Any, ...]:
        return tuple(self.models)

    def __len__(self) -> int:
        return len(self.models)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.models)

    def __getitem__(self, index: int) -> Any:
        return self.models[index]

    @property
    def param_count(self) -> int:
        return self._layout.total

    def evaluate(self, x: float) -> float:
        return sum((m.evaluate(x) for m in self.models), 0.0)

    def jacobian(self, x: float) -> np.ndarray:
        return self._layout.join([m.jacobian(x) for m in self.models])

    def deriv_x(self, x: float) -> float:
        return sum((m.deriv_x(x) for m in self.models), 0.0)

    def get_params(self) -> np.ndarray:
        return self._layout.join([m.get_params() for m in self.models])

    def set_params(self, params: Any) -> None:
        for m, block in zip(self.models, self._layout.split(params)):
            m.set_params(block)

    def with_errors(self, errors: Any) -> List[Any]:
        return [
            m.with_errors(block)
            for m, block in zip(self.models, self._layout.split(errors))
        ]
