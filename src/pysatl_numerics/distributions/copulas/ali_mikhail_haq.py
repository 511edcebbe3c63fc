"""
Ali-Mikhail-Haq (AMH) copula.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import log
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.copulas.archimedean import ArchimedeanCopula
from pysatl_numerics.errors import EstimationError
from pysatl_numerics.mathematics.root_finding import brent_solve
from pysatl_numerics.types import MACHINE_EPSILON, CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

TAU_MINIMUM = (5.0 - 8.0 * log(2.0)) / 3.0
TAU_MAXIMUM = 1.0 / 3.0


def amh_tau(theta: float) -> float:
    """Kendall's tau of the AMH copula."""
    if theta == 0.0:
        return 0.0
    return 1.0 - 2.0 * ((1.0 - theta) ** 2 * np.log1p(-theta) + theta) / (3.0 * theta * theta)


class AliMikhailHaqCopula(ArchimedeanCopula):
    """
    Ali-Mikhail-Haq copula with ``-1 <= θ <= 1``; ``θ = 0`` is independence.

    Generator ``φ(t) = ln((1 - θ(1 - t)) / t)``. Only weak dependence can be
    represented: Kendall's tau is confined to ``[(5 - 8 ln 2)/3, 1/3]``.
    """

    copula_type = CopulaType.ALI_MIKHAIL_HAQ
    theta_minimum = -1.0
    theta_maximum = 1.0
    default_theta = 0.5

    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        t = np.asarray(t)
        return np.log((1.0 - self.theta * (1.0 - t)) / t)

    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        return (1.0 - self.theta) / (np.exp(np.asarray(s)) - self.theta)

    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        t = np.asarray(t)
        return (self.theta - 1.0) / (t * (self.theta * (t - 1.0) + 1.0))

    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        t = np.asarray(t)
        theta = self.theta
        return -(theta - 1.0) * (theta * (2.0 * t - 1.0) + 1.0) / (theta * (t - 1.0) * t + t) ** 2

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        # Johnson (1987), p. 362
        theta = self.theta
        if theta == 0.0:
            return p.copy()
        b = 1.0 - u
        a = p * (theta * b) ** 2 - theta
        bb = theta + 1.0 - 2.0 * theta * b * p
        c = p - 1.0
        return 1.0 - (-bb + np.sqrt(bb * bb - 4.0 * a * c)) / (2.0 * a)

    def theta_from_tau(self, tau: float) -> float:
        """
        Solve the AMH tau expression for ``θ`` with Brent's method.

        Raises
        ------
        EstimationError
            If ``tau`` lies outside the range the family can represent.
        """
        if not TAU_MINIMUM <= tau <= TAU_MAXIMUM:
            raise EstimationError(
                "For the AMH copula, tau must be in [(5 - 8 log 2) / 3, 1 / 3] ~= [-0.1817, 0.3333]. "
                "The dependency in the data is too strong to use the AMH copula."
            )
        if tau == 0.0:
            return 0.0
        if tau > 0.0:
            lower, upper = 0.001, 1.0 - MACHINE_EPSILON
        else:
            lower, upper = -1.0 + MACHINE_EPSILON, -0.001
        return brent_solve(lambda t: amh_tau(t) - tau, lower, upper)

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        return -1.0 + MACHINE_EPSILON, 1.0 - MACHINE_EPSILON


__all__ = ["AliMikhailHaqCopula", "amh_tau"]
