"""
Generalized extreme value (GEV) distribution in Hosking's parametrization.

With shape ``κ`` the distribution function is
``F(x) = exp(-(1 - κ(x - ξ)/α)^(1/κ))``, so ``κ > 0`` gives an upper bound
(Weibull type), ``κ < 0`` a lower bound (Fréchet type) and ``κ = 0`` the
Gumbel distribution. This is the sign convention of ``scipy.stats.genextreme``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import ceil, copysign, inf, isfinite, log, log10, nan, pi, sqrt
from typing import TYPE_CHECKING

import numpy as np
from scipy import special as _sp_special

from pysatl_numerics.distributions.parameters import Parameters, constraint, parameters
from pysatl_numerics.distributions.univariate.base import UnivariateDistribution, as_sample
from pysatl_numerics.distributions.univariate.estimation import fit_maximum_likelihood
from pysatl_numerics.errors import EstimationError
from pysatl_numerics.mathematics.root_finding import brent_solve
from pysatl_numerics.statistics import linear_moments
from pysatl_numerics.types import MACHINE_EPSILON, UnivariateDistributionType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.estimation import ParameterBounds

NEAR_ZERO = 1e-4
"""Shapes with ``|κ|`` at most this are treated as Gumbel."""

EULER_GAMMA = float(np.euler_gamma)


@parameters
class GeneralizedExtremeValueParameters(Parameters):
    xi: float
    alpha: float
    kappa: float

    @constraint(description="The location parameter ξ (xi) must be a number.", parameter="xi")
    def check_xi(self) -> bool:
        return isfinite(self.xi)

    @constraint(description="The scale parameter α (alpha) must be positive.", parameter="alpha")
    def check_alpha(self) -> bool:
        return isfinite(self.alpha) and self.alpha > 0.0

    @constraint(description="The shape parameter κ (kappa) must be a number.", parameter="kappa")
    def check_kappa(self) -> bool:
        return isfinite(self.kappa)


def _gamma(x: float) -> float:
    return float(_sp_special.gamma(x))


def _skewness_of_shape(kappa: float) -> float:
    u1, u2, u3 = _gamma(1.0 + kappa), _gamma(1.0 + 2.0 * kappa), _gamma(1.0 + 3.0 * kappa)
    return copysign(1.0, kappa) * (-u3 + 3.0 * u1 * u2 - 2.0 * u1**3) / (u2 - u1**2) ** 1.5


def _shape_from_skewness(skew: float) -> float:
    """Shape matching a product-moment skewness (regressions plus a Brent solve)."""
    if 1.14 < skew < 10.0:
        return (
            0.2858221
            - 0.357983 * skew
            + 0.116659 * skew**2
            - 0.022725 * skew**3
            + 0.002604 * skew**4
            - 0.000161 * skew**5
            + 0.000004 * skew**6
        )
    if skew == 1.14:
        return 0.0
    if 0.0 <= skew < 1.14:
        return (
            0.277648
            - 0.322016 * skew
            + 0.060278 * skew**2
            + 0.016759 * skew**3
            - 0.005873 * skew**4
            - 0.00244 * skew**5
            - 0.00005 * skew**6
        )
    if -2.0 <= skew < 0.0:
        # two shapes share a negative skewness; take the root on [-1/3, 1]
        return brent_solve(lambda k: _skewness_of_shape(k) - skew, -1.0 / 3.0, 1.0)
    if skew < -2.0:
        return (
            -0.50405
            - 0.00861 * skew
            + 0.015497 * skew**2
            + 0.005613 * skew**3
            + 0.00087 * skew**4
            + 0.000065 * skew**5
        )
    return nan


class GeneralizedExtremeValue(UnivariateDistribution):
    """
    GEV distribution with location ``xi``, scale ``alpha`` and shape ``kappa``.

    Parameters
    ----------
    xi : float, default 100.0
    alpha : float, default 10.0
    kappa : float, default 0.0

    Notes
    -----
    Hosking, J.R.M., Wallis, J.R. and Wood, E.F. (1985). Estimation of the
    generalized extreme-value distribution by the method of probability
    weighted moments. *Technometrics* 27(3).
    """

    distribution_type = UnivariateDistributionType.GENERALIZED_EXTREME_VALUE
    parameters_type = GeneralizedExtremeValueParameters

    def __init__(self, xi: float = 100.0, alpha: float = 10.0, kappa: float = 0.0) -> None:
        super().__init__(xi, alpha, kappa)

    @property
    def xi(self) -> float:
        return self.parameters[0]

    @property
    def alpha(self) -> float:
        return self.parameters[1]

    @property
    def kappa(self) -> float:
        return self.parameters[2]

    @property
    def _gumbel(self) -> bool:
        return abs(self.kappa) <= NEAR_ZERO

    @property
    def minimum(self) -> float:
        return -inf if self.kappa >= -NEAR_ZERO else self.xi + self.alpha / self.kappa

    @property
    def maximum(self) -> float:
        return inf if self.kappa <= NEAR_ZERO else self.xi + self.alpha / self.kappa

    @property
    def mean(self) -> float:
        xi, alpha, kappa = self.parameters
        if self._gumbel:
            return xi + alpha * EULER_GAMMA
        if abs(kappa) < 1.0:
            return xi + alpha / kappa * (1.0 - _gamma(1.0 + kappa))
        return nan

    @property
    def median(self) -> float:
        xi, alpha, kappa = self.parameters
        if self._gumbel:
            return xi - alpha * log(log(2.0))
        return xi + alpha * (log(2.0) ** -kappa - 1.0) / kappa

    @property
    def mode(self) -> float:
        xi, alpha, kappa = self.parameters
        if self._gumbel:
            return xi
        return xi + alpha * ((1.0 + kappa) ** -kappa - 1.0) / kappa

    @property
    def standard_deviation(self) -> float:
        _, alpha, kappa = self.parameters
        if self._gumbel:
            return alpha * pi / sqrt(6.0)
        if abs(kappa) < 0.5:
            g1, g2 = _gamma(1.0 + kappa), _gamma(1.0 + 2.0 * kappa)
            return sqrt(alpha**2 * (g2 - g1**2) / kappa**2)
        return nan

    @property
    def skewness(self) -> float:
        if self._gumbel:
            return 1.1396
        if abs(self.kappa) < 1.0 / 3.0:
            return _skewness_of_shape(self.kappa)
        return nan

    @property
    def kurtosis(self) -> float:
        kappa = self.kappa
        if self._gumbel:
            return 5.4
        if abs(kappa) < 0.25:
            u1, u2 = _gamma(1.0 + kappa), _gamma(1.0 + 2.0 * kappa)
            u3, u4 = _gamma(1.0 + 3.0 * kappa), _gamma(1.0 + 4.0 * kappa)
            numerator = u4 - 4.0 * u3 * u1 - 3.0 * u2**2 + 12.0 * u2 * u1**2 - 6.0 * u1**4
            return numerator / (u2 - u1**2) ** 2 + 3.0
        return nan

    def _reduced(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Gumbel-reduced variate ``y``; ``nan`` beyond the support."""
        y = (x - self.xi) / self.alpha
        if self._gumbel:
            return y
        with np.errstate(divide="ignore", invalid="ignore"):
            return -np.log(1.0 - self.kappa * y) / self.kappa

    def _log_pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        y = self._reduced(x)
        with np.errstate(over="ignore", invalid="ignore"):
            return -(1.0 - self.kappa) * y - np.exp(-y) - log(self.alpha)

    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        values = np.exp(self._log_pdf(x))
        return np.where(np.isnan(values), 0.0, values)

    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        y = self._reduced(x)
        with np.errstate(over="ignore"):
            values = np.exp(-np.exp(-y))
        return np.where(np.isnan(values), 0.0 if self.kappa < 0.0 else 1.0, values)

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        xi, alpha, kappa = self.parameters
        if self._gumbel:
            return xi - alpha * np.log(-np.log(p))
        return xi + alpha / kappa * (1.0 - (-np.log(p)) ** kappa)

    def parameters_from_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """Parameters from ``(mean, standard deviation, skewness, ...)``."""
        mean, sd, skew = moments[0], moments[1], moments[2]
        kappa = _shape_from_skewness(skew)
        if abs(kappa) <= NEAR_ZERO:
            alpha = sqrt(6.0) / pi * sd
            return mean - alpha * EULER_GAMMA, alpha, kappa
        u1, u2 = _gamma(1.0 + kappa), _gamma(1.0 + 2.0 * kappa)
        alpha = sqrt(sd * sd * kappa * kappa / (u2 - u1**2))
        return mean - alpha / kappa * (1.0 - u1), alpha, kappa

    def parameters_from_linear_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """
        Parameters from ``(λ1, λ2, τ3, τ4)``.

        Uses Hosking's rational approximation of the shape for ``|τ3| <= 0.5``
        (error below 9e-4) and a Brent solve otherwise.
        """
        l1, l2, t3 = moments[0], moments[1], moments[2]
        if abs(t3) <= 0.5:
            c = 2.0 / (3.0 + t3) - log(2.0) / log(3.0)
            kappa = 7.859 * c + 2.9554 * c * c
        else:
            kappa = brent_solve(
                lambda k: t3 - (2.0 * (1.0 - 3.0**-k) / (1.0 - 2.0**-k) - 3.0), -1.0, 10.0
            )
        if abs(kappa) <= NEAR_ZERO:
            alpha = l2 / log(2.0)
            return l1 - alpha * EULER_GAMMA, alpha, kappa
        g = _gamma(1.0 + kappa)
        alpha = l2 * kappa / ((1.0 - 2.0**-kappa) * g)
        return l1 - alpha * (1.0 - g) / kappa, alpha, kappa

    def get_parameter_constraints(self, sample: NDArray[np.float64]) -> ParameterBounds:
        xi, alpha, kappa = self.parameters_from_linear_moments(linear_moments(sample))
        if not (isfinite(xi) and isfinite(alpha) and alpha > 0.0):
            raise EstimationError("Initial GEV parameters could not be computed from the sample.")
        if xi == 0.0:
            xi = MACHINE_EPSILON
        location_bound = 10.0 ** ceil(log10(abs(xi)) + 1.0)
        lower = [-location_bound, MACHINE_EPSILON, -10.0]
        upper = [location_bound, 10.0 ** ceil(log10(alpha) + 1.0), 10.0]
        if not lower[2] < kappa < upper[2]:
            kappa = 0.0
        return [xi, alpha, kappa], lower, upper

    def mle(self, sample: ArrayLike) -> tuple[float, ...]:
        return fit_maximum_likelihood(self, as_sample(sample, 4))


__all__ = ["GeneralizedExtremeValue", "GeneralizedExtremeValueParameters"]
