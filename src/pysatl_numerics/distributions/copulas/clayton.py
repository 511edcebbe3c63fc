"""
Clayton copula.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.copulas.archimedean import ArchimedeanCopula, signed_power
from pysatl_numerics.statistics import kendalls_tau
from pysatl_numerics.types import MACHINE_EPSILON, CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class ClaytonCopula(ArchimedeanCopula):
    """
    Clayton copula with ``θ >= -1``.

    Generator ``φ(t) = t^(-θ) - 1``. For ``θ > 0`` it is decreasing and convex
    with ``φ(0) = ∞``. ``θ = 0`` is handled as independence.

    For ``-1 <= θ < 0`` the same expression is increasing on ``[0, 1]``, takes
    values in ``[-1, 0]`` and has ``φ(0) = -1``. It differs from the textbook
    form ``(t^(-θ) - 1) / θ`` only by the factor ``θ``, which leaves the copula
    unchanged. The generator is not strict there: ``C(u, v) = 0`` and the
    density vanishes wherever ``u^(-θ) + v^(-θ) <= 1``.
    """

    copula_type = CopulaType.CLAYTON
    theta_minimum = -1.0
    theta_maximum = inf
    default_theta = 2.0

    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return signed_power(t, -self.theta) - 1.0

    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        return signed_power(1.0 + np.asarray(s), -1.0 / self.theta)

    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return -self.theta * signed_power(t, -self.theta - 1.0)

    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.theta * (self.theta + 1.0) * signed_power(t, -self.theta - 2.0)

    def generator_prime_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        return signed_power(np.asarray(s) / -self.theta, -1.0 / (self.theta + 1.0))

    def _base(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.maximum(u ** -self.theta + v ** -self.theta - 1.0, 0.0)

    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        if self.theta == 0.0:
            return u * v
        return self._base(u, v) ** (-1.0 / self.theta)

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        if theta == 0.0:
            return np.ones_like(u)
        base = self._base(u, v)
        density = (1.0 + theta) * (u * v) ** (-1.0 - theta) * base ** (-2.0 - 1.0 / theta)
        return np.where(base > 0.0, density, 0.0)

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        if self.theta == 0.0:
            return p.copy()
        return super()._inverse_cdf(u, p)

    def theta_from_tau(self, tau: float) -> float:
        """``θ = 2τ / (1 - τ)``."""
        return 2.0 * tau / (1.0 - tau)

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        if kendalls_tau(sample_x, sample_y) > 0.0:
            return 0.001, 100.0
        return -1.0 + MACHINE_EPSILON, -0.001


__all__ = ["ClaytonCopula"]
