"""composable_fitting public API."""
from .backends import AVAILABLE_BACKENDS, MinimizationReport, Minimizer, TerminationReason
from .combinators import (
    Composition,
    Fixed,
    ModelArray,
    ModelMap,
    ModelSum,
    Range,
    Ranged,
    fit_model_sum,
)
from .fit import FitStat, default_weights, fit, fit_stat
from .model import FitModel, ParameterCountError, ParameterLayout, param_vector
from . import combinators, models

__all__ = [
    "FitModel",
    "ParameterCountError",
    "ParameterLayout",
    "param_vector",
    "ModelArray",
    "ModelSum",
    "fit_model_sum",
    "Composition",
    "ModelMap",
    "Range",
    "Ranged",
    "Fixed",
    "fit",
    "fit_stat",
    "default_weights",
    "FitStat",
    "Minimizer",
    "MinimizationReport",
    "TerminationReason",
    "AVAILABLE_BACKENDS",
    "combinators",
    "models",
]
