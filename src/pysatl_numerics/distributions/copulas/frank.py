"""
Frank copula.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import copysign, expm1, inf
from typing import TYPE_CHECKING

import numpy as np
from scipy import integrate as _sp_integrate

from pysatl_numerics.distributions.copulas.archimedean import ArchimedeanCopula
from pysatl_numerics.mathematics.root_finding import brent_solve
from pysatl_numerics.statistics import kendalls_tau
from pysatl_numerics.types import CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def debye1(theta: float) -> float:
    """First Debye function ``D₁(θ) = (1/θ) ∫₀^θ t / (eᵗ - 1) dt``."""
    if theta == 0.0:
        return 1.0
    value, _ = _sp_integrate.quad(lambda t: t / expm1(t) if t != 0.0 else 1.0, 0.0, theta)
    return value / theta


def frank_tau(theta: float) -> float:
    """Kendall's tau of the Frank copula, ``1 - 4(1 - D₁(θ))/θ``."""
    if theta == 0.0:
        return 0.0
    return 1.0 - 4.0 * (1.0 - debye1(theta)) / theta


class FrankCopula(ArchimedeanCopula):
    """
    Frank copula with ``θ`` on the whole real line; ``θ = 0`` is independence.

    Density, distribution function and conditional inverse are in closed form.
    """

    copula_type = CopulaType.FRANK
    theta_minimum = -inf
    theta_maximum = inf
    default_theta = 2.0

    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        return -np.log(np.expm1(-theta * np.asarray(t)) / expm1(-theta))

    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        return -np.log1p(np.exp(-np.asarray(s)) * expm1(-theta)) / theta

    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.theta / -np.expm1(self.theta * np.asarray(t))

    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        e = np.exp(self.theta * np.asarray(t))
        return self.theta**2 * e / np.expm1(self.theta * np.asarray(t)) ** 2

    def generator_prime_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        s = np.asarray(s)
        return np.log((self.theta - s) / -s) / self.theta

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        if theta == 0.0:
            return np.ones_like(u)
        a = -expm1(-theta)
        denominator = a - np.expm1(-theta * u) * np.expm1(-theta * v)
        return theta * a * np.exp(-theta * (u + v)) / denominator**2

    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        if theta == 0.0:
            return u * v
        return -np.log1p(np.expm1(-theta * u) * np.expm1(-theta * v) / expm1(-theta)) / theta

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        if theta == 0.0:
            return p.copy()
        return -np.log1p(p * expm1(-theta) / (p + (1.0 - p) * np.exp(-theta * u))) / theta

    def theta_from_tau(self, tau: float) -> float:
        """Invert the Debye-function expression of Kendall's tau."""
        if tau == 0.0:
            return 0.0
        if abs(tau) < 1e-5:
            return 9.0 * tau
        lower, upper = sorted((copysign(1e-4, tau), copysign(200.0, tau)))
        return brent_solve(lambda t: frank_tau(t) - tau, lower, upper)

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        if kendalls_tau(sample_x, sample_y) > 0.0:
            return 0.001, 100.0
        return -100.0, -0.001


__all__ = ["FrankCopula", "debye1", "frank_tau"]
