"""Backend implementations + registry."""

from __future__ import annotations

from typing import Dict

from .common import (
    Backend,
    MinimizationReport,
    Minimizer,
    TerminationReason,
)
from .scipy_least_squares import ScipyLeastSquaresBackend
from .scipy_leastsq import ScipyLeastsqBackend

_BACKENDS: Dict[str, Backend] = {
    "scipy.least_squares": ScipyLeastSquaresBackend(),
    "scipy.leastsq": ScipyLeastsqBackend(),
}


def get_backend(name: str) -> Backend:
    """Return a backend implementation by name."""
    try:
        return _BACKENDS[name]
    except KeyError as e:
        raise ValueError(
            f"Unknown backend {name!r}. Available: {tuple(_BACKENDS.keys())}"
        ) from e


AVAILABLE_BACKENDS = tuple(_BACKENDS.keys())

__all__ = [
    "AVAILABLE_BACKENDS",
    "Backend",
    "MinimizationReport",
    "Minimizer",
    "TerminationReason",
    "get_backend",
]
