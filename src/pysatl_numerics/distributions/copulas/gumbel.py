"""
Gumbel copula.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.copulas.archimedean import ArchimedeanCopula, signed_power
from pysatl_numerics.mathematics.root_finding import brent_solve
from pysatl_numerics.types import MACHINE_EPSILON, CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

# smallest v' at which the conditional distribution is evaluated
_LOWEST = 1e-300


class GumbelCopula(ArchimedeanCopula):
    """
    Gumbel (Gumbel-Hougaard) copula with ``θ >= 1``.

    Generator ``φ(t) = (-ln t)^θ``; ``θ = 1`` is independence and upper tail
    dependence grows with ``θ``.
    """

    copula_type = CopulaType.GUMBEL
    theta_minimum = 1.0
    theta_maximum = inf
    default_theta = 2.0

    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return signed_power(-np.log(t), self.theta)

    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.exp(-signed_power(s, 1.0 / self.theta))

    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return -self.theta * signed_power(-np.log(t), self.theta - 1.0) / t

    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        a = -np.log(t)
        return self.theta * signed_power(a, self.theta - 2.0) * (self.theta - 1.0 + a) / (t * t)

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        x, y = -np.log(u), -np.log(v)
        a = x**theta + y**theta
        c = np.exp(-(a ** (1.0 / theta)))
        return (
            c
            / (u * v)
            * a ** (-2.0 + 2.0 / theta)
            * (x * y) ** (theta - 1.0)
            * (1.0 + (theta - 1.0) * a ** (-1.0 / theta))
        )

    def conditional_cdf(self, u: float, v: float) -> float:
        """``∂C/∂u`` at ``(u, v)``."""
        x, y = -np.log(u), -np.log(v)
        a = x**self.theta + y**self.theta
        c = np.exp(-(a ** (1.0 / self.theta)))
        return float(c * x ** (self.theta - 1.0) * a ** (1.0 / self.theta - 1.0) / u)

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        out = np.empty_like(p)
        upper = 1.0 - MACHINE_EPSILON
        for i, (ui, pi) in enumerate(zip(u, p, strict=True)):

            def f(x: float, ui: float = float(ui), pi: float = float(pi)) -> float:
                return self.conditional_cdf(ui, x) - pi

            if f(_LOWEST) >= 0.0:
                out[i] = 0.0
            elif f(upper) <= 0.0:
                out[i] = 1.0
            else:
                out[i] = brent_solve(f, _LOWEST, upper, tolerance=1e-12, report_failure=self.report_failure)
        return out

    def theta_from_tau(self, tau: float) -> float:
        """``θ = 1 / (1 - τ)``."""
        return 1.0 / (1.0 - tau)

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        return 1.0, 100.0


__all__ = ["GumbelCopula"]
