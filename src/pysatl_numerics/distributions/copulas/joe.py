"""
Joe copula.
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
from pysatl_numerics.types import CopulaType

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray


class JoeCopula(ArchimedeanCopula):
    """
    Joe copula with ``θ >= 1``.

    Generator ``φ(t) = -ln(1 - (1 - t)^θ)``. There is no closed-form tau
    inversion, so :meth:`set_theta_from_tau` is unsupported.
    """

    copula_type = CopulaType.JOE
    theta_minimum = 1.0
    theta_maximum = inf
    default_theta = 2.0

    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        return -np.log(1.0 - signed_power(1.0 - np.asarray(t), self.theta))

    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        return 1.0 - signed_power(-np.expm1(-np.asarray(s)), 1.0 / self.theta)

    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        a = 1.0 - np.asarray(t)
        return -self.theta * signed_power(a, self.theta - 1.0) / (1.0 - signed_power(a, self.theta))

    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        a = 1.0 - np.asarray(t)
        at = signed_power(a, self.theta)
        return self.theta * signed_power(a, self.theta - 2.0) * (self.theta - 1.0 + at) / (1.0 - at) ** 2

    def _sum(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        a, b = (1.0 - u) ** self.theta, (1.0 - v) ** self.theta
        return a + b - a * b

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        theta = self.theta
        s = self._sum(u, v)
        return (
            s ** (1.0 / theta - 2.0)
            * (1.0 - u) ** (theta - 1.0)
            * (1.0 - v) ** (theta - 1.0)
            * (theta - 1.0 + s)
        )

    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        return 1.0 - self._sum(u, v) ** (1.0 / self.theta)

    def conditional_cdf(self, u: float, v: float) -> float:
        """``∂C/∂u`` at ``(u, v)``."""
        theta = self.theta
        s = float(self._sum(np.asarray(u), np.asarray(v)))
        return s ** ((1.0 - theta) / theta) * (1.0 - u) ** (theta - 1.0) * (1.0 - (1.0 - v) ** theta)

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        out = np.empty_like(p)
        for i, (ui, pi) in enumerate(zip(u, p, strict=True)):
            out[i] = brent_solve(
                lambda x, ui=float(ui), pi=float(pi): self.conditional_cdf(ui, x) - pi,
                0.0,
                1.0,
                tolerance=1e-12,
                report_failure=self.report_failure,
            )
        return out

    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        return 1.0, 100.0


__all__ = ["JoeCopula"]
