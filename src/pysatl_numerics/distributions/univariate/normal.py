"""
Normal (Gaussian) distribution.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import ceil, isfinite, log10, pi, sqrt
from typing import TYPE_CHECKING

import numpy as np
from scipy import special as _sp_special

from pysatl_numerics.distributions.parameters import Parameters, constraint, parameters
from pysatl_numerics.distributions.univariate.base import UnivariateDistribution, as_sample
from pysatl_numerics.distributions.univariate.estimation import fit_maximum_likelihood
from pysatl_numerics.errors import EstimationError
from pysatl_numerics.statistics import product_moments
from pysatl_numerics.types import MACHINE_EPSILON, UnivariateDistributionType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.estimation import ParameterBounds

MINIMUM_SIGMA = 1e-16
_LOG_SQRT_2PI = 0.5 * np.log(2.0 * pi)


@parameters
class NormalParameters(Parameters):
    mu: float
    sigma: float

    @constraint(description="Mean must be a number.", parameter="mu")
    def check_mu(self) -> bool:
        return isfinite(self.mu)

    @constraint(description="Standard deviation must be positive.", parameter="sigma")
    def check_sigma(self) -> bool:
        return isfinite(self.sigma) and self.sigma > 0.0


class Normal(UnivariateDistribution):
    """
    Normal distribution with mean ``mu`` and standard deviation ``sigma``.

    Parameters
    ----------
    mu : float, default 0.0
        Location.
    sigma : float, default 1.0
        Scale; non-negative values below ``1e-16`` are lifted to ``1e-16``.
    """

    distribution_type = UnivariateDistributionType.NORMAL
    parameters_type = NormalParameters

    def __init__(self, mu: float = 0.0, sigma: float = 1.0) -> None:
        super().__init__(mu, sigma)

    @classmethod
    def _coerce(cls, values: tuple[float, ...]) -> tuple[float, ...]:
        mu, sigma = values
        if 0.0 <= sigma < MINIMUM_SIGMA:
            sigma = MINIMUM_SIGMA
        return mu, sigma

    @property
    def mu(self) -> float:
        return self.parameters[0]

    @property
    def sigma(self) -> float:
        return self.parameters[1]

    @property
    def minimum(self) -> float:
        return -np.inf

    @property
    def maximum(self) -> float:
        return np.inf

    @property
    def mean(self) -> float:
        return self.mu

    @property
    def median(self) -> float:
        return self.mu

    @property
    def mode(self) -> float:
        return self.mu

    @property
    def standard_deviation(self) -> float:
        return self.sigma

    @property
    def skewness(self) -> float:
        return 0.0

    @property
    def kurtosis(self) -> float:
        return 3.0

    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        z = (x - self.mu) / self.sigma
        return np.exp(-0.5 * z * z) / (sqrt(2.0 * pi) * self.sigma)

    def _log_pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        z = (x - self.mu) / self.sigma
        return -0.5 * z * z - _LOG_SQRT_2PI - np.log(self.sigma)

    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        return _sp_special.ndtr((x - self.mu) / self.sigma)

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.mu + self.sigma * _sp_special.ndtri(p)

    def parameters_from_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """``(mean, standard deviation)`` taken directly from the moments."""
        return moments[0], moments[1]

    def parameters_from_linear_moments(self, moments: tuple[float, ...]) -> tuple[float, ...]:
        """``mu = λ1`` and ``sigma = λ2·√π``."""
        return moments[0], moments[1] * sqrt(pi)

    def get_parameter_constraints(self, sample: NDArray[np.float64]) -> ParameterBounds:
        mean, sd, _, _ = product_moments(sample)
        if not sd > 0.0:
            raise EstimationError("The sample has no spread.")
        if mean == 0.0:
            mean = MACHINE_EPSILON
        location_bound = 10.0 ** ceil(log10(abs(mean)) + 1.0)
        return (
            [mean, sd],
            [-location_bound, MACHINE_EPSILON],
            [location_bound, 10.0 ** ceil(log10(sd) + 1.0)],
        )

    def mle(self, sample: ArrayLike) -> tuple[float, ...]:
        """Maximum likelihood ``(mu, sigma)``; ``sigma`` is the biased estimate."""
        return fit_maximum_likelihood(self, as_sample(sample, 3))


__all__ = ["Normal", "NormalParameters"]
