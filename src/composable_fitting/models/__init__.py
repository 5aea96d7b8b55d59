"""Primitive models."""

from .constant import Constant
from .exponent import Exponent
from .gaussian import AsymmetricGaussian, Gaussian, GaussianErrors
from .linear import Linear
from .polynomial import Polynomial

__all__ = [
    "Constant",
    "Linear",
    "Exponent",
    "Gaussian",
    "AsymmetricGaussian",
    "GaussianErrors",
    "Polynomial",
]
