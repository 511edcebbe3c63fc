"""
Normal (Gaussian) copula.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import exp, pi, sin, sqrt
from typing import TYPE_CHECKING

import numpy as np
from scipy import integrate
from scipy.special import ndtr, ndtri

from pysatl_numerics.distributions.copulas.base import BivariateCopula
from pysatl_numerics.types import MACHINE_EPSILON, CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


def _bivariate_density(s: float, t: float, r: float) -> float:
    q = 1.0 - r * r
    return exp(-(s * s - 2.0 * r * s * t + t * t) / (2.0 * q)) / (2.0 * pi * sqrt(q))


def bivariate_normal_cdf(s: float, t: float, rho: float) -> float:
    """
    Standard bivariate normal CDF ``Φ₂(s, t; ρ)``.

    Uses Plackett's identity ``∂Φ₂/∂ρ = φ₂``, integrating the density from
    independence to ``ρ``. Deterministic, unlike Monte Carlo integration.
    """
    base = float(ndtr(s) * ndtr(t))
    if rho == 0.0:
        return base
    value, _ = integrate.quad(lambda r: _bivariate_density(s, t, r), 0.0, rho, epsabs=1e-12, limit=200)
    return min(max(base + value, 0.0), 1.0)


class NormalCopula(BivariateCopula):
    """
    Gaussian copula with correlation ``-1 <= ρ <= 1``.

    ``θ`` is the correlation of the underlying standard bivariate normal.
    At ``|ρ| = 1`` the copula is singular: the density is reported as 0 and
    the CDF equals the Fréchet bound.
    """

    copula_type = CopulaType.NORMAL
    theta_minimum = -1.0
    theta_maximum = 1.0
    default_theta = 0.0
    parameter_name = "correlation parameter ρ (rho)"

    @property
    def rho(self) -> float:
        """Alias of :attr:`theta`."""
        return self.theta

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        r = self.theta
        if abs(r) >= 1.0:
            return np.zeros_like(u)
        s, t = ndtri(u), ndtri(v)
        q = 1.0 - r * r
        return np.exp(-(r * r * (s * s + t * t) - 2.0 * r * s * t) / (2.0 * q)) / np.sqrt(q)

    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        r = self.theta
        if r >= 1.0:
            return np.minimum(u, v)
        if r <= -1.0:
            return np.maximum(u + v - 1.0, 0.0)
        s, t = ndtri(u), ndtri(v)
        return np.array([bivariate_normal_cdf(float(a), float(b), r) for a, b in zip(s, t, strict=True)])

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        r = self.theta
        return ndtr(r * ndtri(u) + np.sqrt(1.0 - r * r) * ndtri(p))

    def theta_from_tau(self, tau: float) -> float:
        """``ρ = sin(πτ / 2)``."""
        return sin(pi * tau / 2.0)

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        return -1.0 + MACHINE_EPSILON, 1.0 - MACHINE_EPSILON


__all__ = ["NormalCopula", "bivariate_normal_cdf"]
