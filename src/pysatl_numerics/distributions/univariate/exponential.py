"""
Shifted exponential distribution.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import ceil, inf, isfinite, log, log10
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.parameters import Parameters, constraint, parameters
from pysatl_numerics.distributions.univariate.base import UnivariateDistribution, as_sample
from pysatl_numerics.distributions.univariate.estimation import fit_maximum_likelihood
from pysatl_numerics.errors import EstimationError
from pysatl_numerics.types import MACHINE_EPSILON, UnivariateDistributionType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.estimation import ParameterBounds


@parameters
class ExponentialParameters(Parameters):
    xi: float
    alpha: float

    @constraint(description="The location parameter ξ (xi) must be a number.", parameter="xi")
    def check_xi(self) -> bool:
        return isfinite(self.xi)

    @constraint(description="The scale parameter α (alpha) must be positive.", parameter="alpha")
    def check_alpha(self) -> bool:
        return isfinite(self.alpha) and self.alpha > 0.0


class Exponential(UnivariateDistribution):
    """
    Exponential distribution with location ``xi`` and scale ``alpha``.

    ``f(x) = exp(-(x - ξ)/α) / α`` for ``x >= ξ``.
    """

    distribution_type = UnivariateDistributionType.EXPONENTIAL
    parameters_type = ExponentialParameters

    def __init__(self, xi: float = 100.0, alpha: float = 10.0) -> None:
        super().__init__(xi, alpha)

    @property
    def xi(self) -> float:
        return self.parameters[0]

    @property
    def alpha(self) -> float:
        return self.parameters[1]

    @property
    def minimum(self) -> float:
        return self.xi

    @property
    def maximum(self) -> float:
        return inf

    @property
    def mean(self) -> float:
        return self.xi + self.alpha

    @property
    def median(self) -> float:
        return self.xi + self.alpha * log(2.0)

    @property
    def mode(self) -> float:
        return self.xi

    @property
    def standard_deviation(self) -> float:
        return self.alpha

    @property
    def skewness(self) -> float:
        return 2.0

    @property
    def kurtosis(self) -> float:
        return 9.0

    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.exp(-(x - self.xi) / self.alpha) / self.alpha

    def _log_pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return -(x - self.xi) / self.alpha - log(self.alpha)

    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return -np.expm1(-(x - self.xi) / self.alpha)

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.xi - self.alpha * np.log1p(-p)

    def parameters_from_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        return moments[0] - moments[1], moments[1]

    def parameters_from_linear_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        alpha = 2.0 * moments[1]
        return moments[0] - alpha, alpha

    def get_parameter_constraints(self, sample: NDArray[np.float64]) -> ParameterBounds:
        n = sample.size
        mean, lowest = float(np.mean(sample)), float(np.min(sample))
        xi = (n * lowest - mean) / (n - 1)
        alpha = n * (mean - lowest) / (n - 1)
        if not alpha > 0.0:
            raise EstimationError("The sample has no spread.")
        if xi == 0.0:
            xi = MACHINE_EPSILON
        lower = [xi - 10.0 ** ceil(log10(abs(xi))), MACHINE_EPSILON]
        upper = [lowest, 10.0 ** ceil(log10(alpha) + 1.0)]
        initial = [xi, alpha]
        for i in range(2):
            if not lower[i] < initial[i] < upper[i]:
                initial[i] = 0.5 * (lower[i] + upper[i])
        return initial, lower, upper

    def mle(self, sample: ArrayLike) -> tuple[float, ...]:
        return fit_maximum_likelihood(self, as_sample(sample, 3))


__all__ = ["Exponential", "ExponentialParameters"]
