"""
Triangular distribution.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import isfinite, sqrt
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.parameters import Parameters, constraint, parameters
from pysatl_numerics.distributions.univariate.base import UnivariateDistribution, as_sample
from pysatl_numerics.types import ParameterEstimationMethod, UnivariateDistributionType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


@parameters
class TriangularParameters(Parameters):
    min: float
    mode: float
    max: float

    @constraint(description="The parameters must be finite numbers.", parameter="min")
    def check_finite(self) -> bool:
        return isfinite(self.min) and isfinite(self.mode) and isfinite(self.max)

    @constraint(description="The min cannot be greater than the mode.", parameter="min")
    def check_min(self) -> bool:
        return self.min <= self.mode

    @constraint(description="The mode cannot be greater than the max.", parameter="mode")
    def check_max(self) -> bool:
        return self.mode <= self.max


class Triangular(UnivariateDistribution):
    """
    Triangular distribution on ``[min, max]`` peaking at ``mode``.

    Only the method of moments is supported: the bounds are the sample
    extremes and ``mode = 3·mean - max - min``, clamped into the bounds.
    """

    distribution_type = UnivariateDistributionType.TRIANGULAR
    parameters_type = TriangularParameters

    def __init__(self, min: float = 0.0, mode: float = 0.5, max: float = 1.0) -> None:  # noqa: A002
        super().__init__(min, mode, max)

    @property
    def minimum(self) -> float:
        return self.parameters[0]

    @property
    def most_likely(self) -> float:
        return self.parameters[1]

    @property
    def maximum(self) -> float:
        return self.parameters[2]

    @property
    def _degenerate(self) -> bool:
        return self.minimum == self.maximum

    @property
    def mean(self) -> float:
        return (self.minimum + self.most_likely + self.maximum) / 3.0

    @property
    def median(self) -> float:
        a, c, b = self.parameters
        if c >= 0.5 * (a + b):
            return a + sqrt((b - a) * (c - a) / 2.0)
        return b - sqrt((b - a) * (b - c) / 2.0)

    @property
    def mode(self) -> float:
        return self.most_likely

    @property
    def _spread(self) -> float:
        a, c, b = self.parameters
        return a * a + b * b + c * c - a * b - a * c - b * c

    @property
    def standard_deviation(self) -> float:
        return sqrt(self._spread / 18.0)

    @property
    def skewness(self) -> float:
        a, c, b = self.parameters
        q = sqrt(2.0) * (a + b - 2.0 * c) * (2.0 * a - b - c) * (a - 2.0 * b + c)
        return q / (5.0 * self._spread**1.5)

    @property
    def kurtosis(self) -> float:
        return 12.0 / 5.0

    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        a, c, b = self.parameters
        if self._degenerate:
            return np.zeros_like(x)
        with np.errstate(divide="ignore", invalid="ignore"):
            rising = 2.0 * (x - a) / ((b - a) * (c - a))
            falling = 2.0 * (b - x) / ((b - a) * (b - c))
        return np.where(x < c, rising, np.where(x > c, falling, 2.0 / (b - a)))

    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        a, c, b = self.parameters
        if self._degenerate:
            return np.ones_like(x)
        with np.errstate(divide="ignore", invalid="ignore"):
            rising = (x - a) ** 2 / ((b - a) * (c - a))
            falling = 1.0 - (b - x) ** 2 / ((b - a) * (b - c))
        return np.where(x <= a, 0.0, np.where(x <= c, rising, np.where(x >= b, 1.0, falling)))

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        a, c, b = self.parameters
        if self._degenerate:
            return np.full_like(p, a)
        split = (c - a) / (b - a)
        return np.where(
            p < split,
            a + np.sqrt(p * (b - a) * (c - a)),
            b - np.sqrt((1.0 - p) * (b - a) * (b - c)),
        )

    def parameters_from_sample(self, sample: ArrayLike) -> tuple[float, ...]:
        """Method of moments estimate ``(min, mode, max)``."""
        data = as_sample(sample, 2)
        lowest, highest = float(np.min(data)), float(np.max(data))
        mode = 3.0 * float(np.mean(data)) - highest - lowest
        return lowest, min(max(mode, lowest), highest), highest

    def estimate(self, sample: ArrayLike, method: ParameterEstimationMethod) -> None:
        if ParameterEstimationMethod(method) is ParameterEstimationMethod.METHOD_OF_MOMENTS:
            self.set_parameters(self.parameters_from_sample(sample))
            return
        super().estimate(sample, method)


__all__ = ["Triangular", "TriangularParameters"]
