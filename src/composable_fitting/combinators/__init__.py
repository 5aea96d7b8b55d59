"""Combinators: build composite models out of smaller ones."""

from .aggregate import ModelSum, fit_model_sum
from .array import ModelArray
from .composition import Composition, CompositionErrors
from .fixed import Fixed
from .model_map import (
    Addition,
    DifferentiableFunction,
    ExpMap,
    LnMap,
    ModelMap,
    Multiplier,
    Power,
    model_map,
)
from .ranged import Range, Ranged

__all__ = [
    "ModelArray",
    "ModelSum",
    "fit_model_sum",
    "Composition",
    "CompositionErrors",
    "ModelMap",
    "model_map",
    "DifferentiableFunction",
    "Addition",
    "Multiplier",
    "Power",
    "LnMap",
    "ExpMap",
    "Range",
    "Ranged",
    "Fixed",
]
