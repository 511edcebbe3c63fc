"""
Continuous uniform distribution.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import isfinite, nan, sqrt
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.parameters import Parameters, constraint, parameters
from pysatl_numerics.distributions.univariate.base import UnivariateDistribution
from pysatl_numerics.types import UnivariateDistributionType

if TYPE_CHECKING:
    from numpy.typing import NDArray


@parameters
class UniformParameters(Parameters):
    min: float
    max: float

    @constraint(description="The bounds must be finite numbers.", parameter="min")
    def check_finite(self) -> bool:
        return isfinite(self.min) and isfinite(self.max)

    @constraint(description="The min cannot be greater than the max.", parameter="min")
    def check_order(self) -> bool:
        return self.min <= self.max


class Uniform(UnivariateDistribution):
    """
    Uniform distribution on ``[min, max]``.

    ``min == max`` describes a point mass: the density is 0 and the
    distribution function jumps to 1 at that point. The family has no
    estimation capabilities.
    """

    distribution_type = UnivariateDistributionType.UNIFORM
    parameters_type = UniformParameters

    def __init__(self, min: float = 0.0, max: float = 1.0) -> None:  # noqa: A002
        super().__init__(min, max)

    @property
    def minimum(self) -> float:
        return self.parameters[0]

    @property
    def maximum(self) -> float:
        return self.parameters[1]

    @property
    def _width(self) -> float:
        return self.maximum - self.minimum

    @property
    def mean(self) -> float:
        return 0.5 * (self.minimum + self.maximum)

    @property
    def median(self) -> float:
        return self.mean

    @property
    def mode(self) -> float:
        return nan

    @property
    def standard_deviation(self) -> float:
        return self._width / sqrt(12.0)

    @property
    def skewness(self) -> float:
        return 0.0

    @property
    def kurtosis(self) -> float:
        return 9.0 / 5.0

    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        if self._width == 0.0:
            return np.zeros_like(x)
        return np.full_like(x, 1.0 / self._width)

    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        if self._width == 0.0:
            return np.ones_like(x)
        return (x - self.minimum) / self._width

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.minimum + p * self._width


__all__ = ["Uniform", "UniformParameters"]
