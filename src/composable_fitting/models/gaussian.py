from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from ..model import FitModel, param_vector


# 2*sqrt(2 ln 2)
FWHM_FACTOR = 2.0 * np.sqrt(2.0 * np.log(2.0))


# --- area-normalised Gaussian and its partial derivatives -------------------


def _norm(s: float) -> float:
    return 1.0 / (np.sqrt(2.0 * np.pi) * s)


def _bell(x: float, x_c: float, s: float) -> float:
    return np.exp(-((x - x_c) ** 2) / (2.0 * s * s))


def gaussian_func(x: float, x_c: float, s: float, a: float) -> float:
    """a / (sqrt(2 pi) s) * exp(-(x - x_c)^2 / (2 s^2))."""
    return a * _norm(s) * _bell(x, x_c, s)


def gaussian_deriv_a(x: float, x_c: float, s: float, a: float) -> float:
    return _norm(s) * _bell(x, x_c, s)


def gaussian_deriv_x_c(x: float, x_c: float, s: float, a: float) -> float:
    return a * _norm(s) * _bell(x, x_c, s) * (x - x_c) / (s * s)


def gaussian_deriv_s(x: float, x_c: float, s: float, a: float) -> float:
    # normalisation term contributes -1/s, the exponent (x - x_c)^2 / s^3
    return a * _norm(s) * _bell(x, x_c, s) * (-1.0 / s + (x - x_c) ** 2 / s**3)


@dataclass(frozen=True)
class GaussianErrors:
    """Parameter errors of a (possibly asymmetric) Gaussian.

    Entries for parameters that were not fitted are None.
    """

    a: float
    x_c: float
    sigma: Optional[float] = None
    s_p: Optional[float] = None


class _LayoutFlags:
    """Rejects changes to the ``fit_*`` flags once they are set.

    The flags decide ``param_count``, which parent combinators cache in
    their layout when they are built.
    """

    _layout_flags: Tuple[str, ...] = ()

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._layout_flags and name in self.__dict__:
            raise AttributeError(
                f"{type(self).__name__}.{name} is fixed at construction; "
                "build a new model to change which parameters are fitted."
            )
        object.__setattr__(self, name, value)


@dataclass
class Gaussian(_LayoutFlags, FitModel):
    """Symmetric Gaussian with area `a`, centre `x_c` and width `sigma`.

    Parameter order is ``[a, x_c]``, followed by ``sigma`` when `fit_sigma`
    is set (the default).
    """

    a: float = 1.0
    x_c: float = 0.0
    sigma: float = 1.0
    fit_sigma: bool = True

    _layout_flags = ("fit_sigma",)

    def fwhm(self) -> float:
        """Full width at half maximum, 2*sqrt(2 ln 2)*sigma."""
        return FWHM_FACTOR * self.sigma

    @property
    def param_count(self) -> int:
        return 3 if self.fit_sigma else 2

    def evaluate(self, x: float) -> float:
        return gaussian_func(x, self.x_c, self.sigma, self.a)

    def jacobian(self, x: float) -> np.ndarray:
        row = [
            gaussian_deriv_a(x, self.x_c, self.sigma, self.a),
            gaussian_deriv_x_c(x, self.x_c, self.sigma, self.a),
        ]
        if self.fit_sigma:
            row.append(gaussian_deriv_s(x, self.x_c, self.sigma, self.a))
        return param_vector(row, self.param_count)

    def deriv_x(self, x: float) -> float:
        return -gaussian_deriv_x_c(x, self.x_c, self.sigma, self.a)

    def get_params(self) -> np.ndarray:
        values = [self.a, self.x_c]
        if self.fit_sigma:
            values.append(self.sigma)
        return param_vector(values, self.param_count)

    def set_params(self, params: Any) -> None:
        values = param_vector(params, self.param_count).tolist()
        self.a, self.x_c = values[0], values[1]
        if self.fit_sigma:
            self.sigma = values[2]

    def with_errors(self, errors: Any) -> GaussianErrors:
        values = param_vector(errors, self.param_count).tolist()
        return GaussianErrors(
            a=values[0],
            x_c=values[1],
            sigma=values[2] if self.fit_sigma else None,
        )


@dataclass
class AsymmetricGaussian(_LayoutFlags, FitModel):
    """Gaussian whose width differs on either side of the centre.

    sigma(x) = sigma * (1 + s_p) for x < x_c and sigma otherwise, so s_p = 0
    gives a regular symmetric Gaussian. The branch makes the model
    non-smooth at x_c; prefer :class:`Gaussian` when s_p is known to be 0.

    Parameter order is ``[a, x_c]``, then ``sigma`` if `fit_sigma`, then
    ``s_p`` if `fit_s_p`. By default sigma is fitted and s_p is not.
    """

    a: float = 1.0
    x_c: float = 0.0
    sigma: float = 1.0
    s_p: float = 0.0
    fit_sigma: bool = True
    fit_s_p: bool = False

    _layout_flags = ("fit_sigma", "fit_s_p")

    def fwhm(self) -> float:
        """FWHM of the right-hand (x >= x_c) side."""
        return FWHM_FACTOR * self.sigma

    @property
    def param_count(self) -> int:
        return 2 + int(self.fit_sigma) + int(self.fit_s_p)

    def _side(self, x: float) -> Tuple[float, float, float]:
        """Return (effective sigma, d sigma_eff/d sigma, d sigma_eff/d s_p)."""
        if x >= self.x_c:
            return self.sigma, 1.0, 0.0
        one_sp = 1.0 + self.s_p
        return self.sigma * one_sp, one_sp, self.sigma

    def evaluate(self, x: float) -> float:
        s, _, _ = self._side(x)
        return gaussian_func(x, self.x_c, s, self.a)

    def jacobian(self, x: float) -> np.ndarray:
        s, ds_dsigma, ds_dsp = self._side(x)
        row = [
            gaussian_deriv_a(x, self.x_c, s, self.a),
            gaussian_deriv_x_c(x, self.x_c, s, self.a),
        ]
        d_s = gaussian_deriv_s(x, self.x_c, s, self.a)
        if self.fit_sigma:
            row.append(d_s * ds_dsigma)
        if self.fit_s_p:
            row.append(d_s * ds_dsp)
        return param_vector(row, self.param_count)

    def deriv_x(self, x: float) -> float:
        s, _, _ = self._side(x)
        return -gaussian_deriv_x_c(x, self.x_c, s, self.a)

    def _names(self) -> List[str]:
        names = ["a", "x_c"]
        if self.fit_sigma:
            names.append("sigma")
        if self.fit_s_p:
            names.append("s_p")
        return names

    def get_params(self) -> np.ndarray:
        return param_vector(
            [getattr(self, n) for n in self._names()], self.param_count
        )

    def set_params(self, params: Any) -> None:
        values = param_vector(params, self.param_count).tolist()
        for name, value in zip(self._names(), values):
            setattr(self, name, value)

    def with_errors(self, errors: Any) -> GaussianErrors:
        values = dict(zip(self._names(), param_vector(errors, self.param_count).tolist()))
        return GaussianErrors(
            a=values["a"],
            x_c=values["x_c"],
            sigma=values.get("sigma"),
            s_p=values.get("s_p"),
        )
