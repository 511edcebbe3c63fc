"""
Archimedean copulas.

An Archimedean copula is generated by a monotone function ``φ``
with ``φ(1) = 0``. The copula is unchanged when ``φ`` is multiplied by a
non-zero constant, so a family may use an increasing generator on part of its
parameter range; the usual form is decreasing and convex:

- ``C(u, v) = φ⁻¹(φ(u) + φ(v))``;
- ``c(u, v) = -φ''(C) φ'(u) φ'(v) / φ'(C)³``;
- the conditional inverse takes ``s = φ'(u) / p``, ``w = (φ')⁻¹(s)`` and
  returns ``v' = φ⁻¹(φ(w) - φ(u))``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from abc import abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.copulas.base import BivariateCopula
from pysatl_numerics.mathematics.root_finding import brent_solve
from pysatl_numerics.types import MACHINE_EPSILON

if TYPE_CHECKING:
    from numpy.typing import NDArray


def signed_power(a: NDArray[np.float64] | float, exponent: float) -> NDArray[np.float64]:
    """``sign(a)·|a|^exponent``, defined for slightly negative round-off values."""
    a = np.asarray(a, dtype=float)
    return np.sign(a) * np.abs(a) ** exponent


class ArchimedeanCopula(BivariateCopula):
    """
    Base class of the Archimedean families.

    Subclasses provide the generator ``φ``, its inverse and its first two
    derivatives. The inverse of ``φ'`` defaults to a Brent solve on
    ``(0, 1]`` and may be overridden with a closed form.
    """

    @abstractmethod
    def generator(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """``φ(t)``."""

    @abstractmethod
    def generator_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        """``φ⁻¹(s)``."""

    @abstractmethod
    def generator_prime(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """``φ'(t)``."""

    @abstractmethod
    def generator_prime2(self, t: NDArray[np.float64]) -> NDArray[np.float64]:
        """``φ''(t)``."""

    def generator_prime_inverse(self, s: NDArray[np.float64]) -> NDArray[np.float64]:
        """``(φ')⁻¹(s)`` by Brent's method on ``[ε, 1]``."""
        s = np.atleast_1d(np.asarray(s, dtype=float))
        out = np.empty_like(s)
        for i, target in enumerate(s):
            out[i] = brent_solve(
                lambda x, target=float(target): float(self.generator_prime(np.array(x))) - target,
                MACHINE_EPSILON,
                1.0,
                report_failure=self.report_failure,
            )
        return out

    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        return self.generator_inverse(self.generator(u) + self.generator(v))

    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        c = self._cdf(u, v)
        numerator = -self.generator_prime2(c) * self.generator_prime(u) * self.generator_prime(v)
        return numerator / self.generator_prime(c) ** 3

    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        s = self.generator_prime(u) / p
        w = self.generator_prime_inverse(s)
        return self.generator_inverse(self.generator(w) - self.generator(u))


__all__ = ["ArchimedeanCopula", "signed_power"]
