"""
Bivariate Copula Base
=====================

A bivariate copula joins two marginal distributions through a scalar
dependency parameter ``θ``. Marginals are optional, caller-owned references;
without them the copula works directly on uniform margins.

Families implement ``_pdf``, ``_cdf`` and ``_inverse_cdf`` on float arrays of
points strictly inside the unit square. The public methods handle the
boundaries, broadcasting, scalar results and lazy parameter validation.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import copy
import logging
from abc import ABC, abstractmethod
from math import isfinite, isnan, nan
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.stats import qmc

from pysatl_numerics.errors import ParameterOutOfRangeError, UnsupportedOperationError
from pysatl_numerics.statistics import kendalls_tau, paired_sample, ranks
from pysatl_numerics.types import WORST_LOG_PROBABILITY

if TYPE_CHECKING:
    from typing import ClassVar

    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.base import UnivariateDistribution
    from pysatl_numerics.types import CopulaType

logger = logging.getLogger(__name__)


def _broadcast(
    u: ArrayLike, v: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64], tuple[int, ...]]:
    a, b = np.broadcast_arrays(np.asarray(u, dtype=float), np.asarray(v, dtype=float))
    return a.ravel().copy(), b.ravel().copy(), a.shape


def _wrap(out: NDArray[np.float64], shape: tuple[int, ...]) -> Any:
    if shape == ():
        return float(out[0])
    return out.reshape(shape)


def pseudo_observations(
    sample_x: ArrayLike, sample_y: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Rank-based pseudo-observations ``rank / (n + 1)`` of a paired sample.

    Ties receive their average rank.
    """
    x, y = paired_sample(sample_x, sample_y)
    n = x.size
    return ranks(x) / (n + 1.0), ranks(y) / (n + 1.0)


class BivariateCopula(ABC):
    """
    Base class of the bivariate copula families.

    Parameters
    ----------
    theta : float, optional
        Dependency parameter, the family default when omitted.
    marginal_x, marginal_y : UnivariateDistribution, optional
        Marginal distributions of ``X`` and ``Y``.

    Attributes
    ----------
    report_failure : bool
        When True, evaluating with an invalid ``θ`` raises
        :class:`ParameterOutOfRangeError`; otherwise ``nan`` (or
        ``WORST_LOG_PROBABILITY`` for :meth:`log_pdf`) is returned.
    """

    copula_type: ClassVar[CopulaType]
    theta_minimum: ClassVar[float]
    theta_maximum: ClassVar[float]
    default_theta: ClassVar[float]
    parameter_name: ClassVar[str] = "dependency parameter θ (theta)"

    def __init__(
        self,
        theta: float | None = None,
        marginal_x: UnivariateDistribution | None = None,
        marginal_y: UnivariateDistribution | None = None,
    ) -> None:
        self.report_failure: bool = True
        self.theta = self.default_theta if theta is None else theta
        self.marginal_x = marginal_x
        self.marginal_y = marginal_y

    @property
    def theta(self) -> float:
        """Dependency parameter; validated lazily at the next evaluation."""
        return self._theta

    @theta.setter
    def theta(self, value: float) -> None:
        self._theta = float(value)

    @property
    def parameters_valid(self) -> bool:
        return self.validate_parameter(self._theta) is None

    def validate_parameter(
        self, theta: float, raise_error: bool = False
    ) -> ParameterOutOfRangeError | None:
        """
        Check ``theta`` against the family's domain.

        Returns
        -------
        ParameterOutOfRangeError or None
            The violation, or None if ``theta`` is valid.

        Raises
        ------
        ParameterOutOfRangeError
            If ``theta`` is invalid and ``raise_error`` is set.
        """
        error = None
        if isnan(theta):
            error = ParameterOutOfRangeError("theta", f"The {self.parameter_name} must be a number.")
        elif theta < self.theta_minimum:
            error = ParameterOutOfRangeError(
                "theta",
                f"The {self.parameter_name} must be greater than or equal to {self.theta_minimum}.",
            )
        elif theta > self.theta_maximum:
            error = ParameterOutOfRangeError(
                "theta",
                f"The {self.parameter_name} must be less than or equal to {self.theta_maximum}.",
            )
        if error is not None and raise_error:
            raise error
        return error

    def _check(self) -> bool:
        error = self.validate_parameter(self._theta)
        if error is None:
            return True
        if self.report_failure:
            raise error
        return False

    @abstractmethod
    def parameter_constraints(self, sample_x: ArrayLike, sample_y: ArrayLike) -> tuple[float, float]:
        """Bounds ``(lower, upper)`` of ``θ`` used when fitting to the sample."""

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Copula density at interior points."""

    @abstractmethod
    def _cdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        """Copula value at interior points."""

    @abstractmethod
    def _inverse_cdf(self, u: NDArray[np.float64], p: NDArray[np.float64]) -> NDArray[np.float64]:
        """``v'`` with ``∂C/∂u(u, v') = p`` for interior ``u`` and ``p``."""

    def _log_pdf(self, u: NDArray[np.float64], v: NDArray[np.float64]) -> NDArray[np.float64]:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(self._pdf(u, v))

    # ------------------------------------------------------------------
    # Public evaluation API
    # ------------------------------------------------------------------

    def pdf(self, u: ArrayLike, v: ArrayLike) -> Any:
        """
        Copula density ``c(u, v)``; 0 outside the open unit square.

        Raises
        ------
        ParameterOutOfRangeError
            If ``θ`` is invalid and :attr:`report_failure` is set.
        """
        a, b, shape = _broadcast(u, v)
        out = np.full(a.shape, nan)
        if self._check():
            inside = (a > 0.0) & (a < 1.0) & (b > 0.0) & (b < 1.0)
            out[~inside & ~np.isnan(a) & ~np.isnan(b)] = 0.0
            if np.any(inside):
                with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
                    out[inside] = self._pdf(a[inside], b[inside])
        return _wrap(out, shape)

    def log_pdf(self, u: ArrayLike, v: ArrayLike) -> Any:
        """Natural log of the density, non-finite values clamped to ``WORST_LOG_PROBABILITY``."""
        a, b, shape = _broadcast(u, v)
        out = np.full(a.shape, WORST_LOG_PROBABILITY)
        if self._check():
            inside = (a > 0.0) & (a < 1.0) & (b > 0.0) & (b < 1.0)
            if np.any(inside):
                with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
                    values = self._log_pdf(a[inside], b[inside])
                out[inside] = np.where(np.isfinite(values), values, WORST_LOG_PROBABILITY)
        return _wrap(out, shape)

    def cdf(self, u: ArrayLike, v: ArrayLike) -> Any:
        """
        Copula ``C(u, v)``.

        Arguments are clipped to ``[0, 1]``; the boundary conditions
        ``C(u, 0) = C(0, v) = 0``, ``C(u, 1) = u`` and ``C(1, v) = v`` hold exactly.
        """
        a, b, shape = _broadcast(u, v)
        out = np.full(a.shape, nan)
        if self._check():
            a, b = np.clip(a, 0.0, 1.0), np.clip(b, 0.0, 1.0)
            out = np.where(b >= 1.0, a, np.where(a >= 1.0, b, out))
            out[(a <= 0.0) | (b <= 0.0)] = 0.0
            inside = (a > 0.0) & (a < 1.0) & (b > 0.0) & (b < 1.0)
            if np.any(inside):
                with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
                    out[inside] = self._cdf(a[inside], b[inside])
        return _wrap(out, shape)

    def inverse_cdf(self, u: ArrayLike, v: ArrayLike) -> tuple[Any, Any]:
        """
        Conditional inverse used for sampling.

        Parameters
        ----------
        u : array_like
            Conditioning value(s) of the first coordinate.
        v : array_like
            Target conditional probability ``∂C/∂u``.

        Returns
        -------
        tuple
            ``(u, v')`` with ``∂C/∂u(u, v') = v``.

        Raises
        ------
        ValueError
            If ``u`` or ``v`` lies outside ``[0, 1]``.
        """
        a, p, shape = _broadcast(u, v)
        if np.any((a < 0.0) | (a > 1.0) | (p < 0.0) | (p > 1.0)):
            raise ValueError("Probability must be between 0 and 1.")
        out = np.full(a.shape, nan)
        if self._check():
            out[p == 0.0] = 0.0
            out[p == 1.0] = 1.0
            interior = (p > 0.0) & (p < 1.0)
            if np.any(interior):
                eps = np.finfo(float).eps
                conditioning = np.clip(a[interior], eps, 1.0 - eps)
                with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
                    out[interior] = np.clip(self._inverse_cdf(conditioning, p[interior]), 0.0, 1.0)
        return _wrap(a, shape), _wrap(out, shape)

    # ------------------------------------------------------------------
    # Likelihoods
    # ------------------------------------------------------------------

    def _require_marginals(self) -> tuple[UnivariateDistribution, UnivariateDistribution]:
        if self.marginal_x is None or self.marginal_y is None:
            raise ValueError("Both marginal distributions must be set.")
        return self.marginal_x, self.marginal_y

    @staticmethod
    def _total(values: Any) -> float:
        total = float(np.sum(values))
        return total if isfinite(total) else WORST_LOG_PROBABILITY

    def pseudo_log_likelihood(self, sample_x: ArrayLike, sample_y: ArrayLike) -> float:
        """Copula log-likelihood of the rank pseudo-observations."""
        u, v = pseudo_observations(sample_x, sample_y)
        return self._total(self.log_pdf(u, v))

    def ifm_log_likelihood(self, sample_x: ArrayLike, sample_y: ArrayLike) -> float:
        """Copula log-likelihood of the sample mapped through the marginal CDFs."""
        x, y = paired_sample(sample_x, sample_y)
        mx, my = self._require_marginals()
        return self._total(self.log_pdf(mx.cdf(x), my.cdf(y)))

    def log_likelihood(self, sample_x: ArrayLike, sample_y: ArrayLike) -> float:
        """Joint log-likelihood: copula term plus both marginal log densities."""
        x, y = paired_sample(sample_x, sample_y)
        mx, my = self._require_marginals()
        copula_term = np.sum(self.log_pdf(mx.cdf(x), my.cdf(y)))
        return self._total(copula_term + np.sum(mx.log_pdf(x)) + np.sum(my.log_pdf(y)))

    # ------------------------------------------------------------------
    # Joint exceedance and sampling
    # ------------------------------------------------------------------

    def _to_uniform(self, x: ArrayLike, y: ArrayLike) -> tuple[Any, Any]:
        u = x if self.marginal_x is None else self.marginal_x.cdf(x)
        v = y if self.marginal_y is None else self.marginal_y.cdf(y)
        return u, v

    def or_joint_exceedance(self, x: ArrayLike, y: ArrayLike) -> Any:
        """Probability that ``X > x`` or ``Y > y``: ``1 - C(u, v)``."""
        u, v = self._to_uniform(x, y)
        return 1.0 - self.cdf(u, v)

    def and_joint_exceedance(self, x: ArrayLike, y: ArrayLike) -> Any:
        """Probability that ``X > x`` and ``Y > y``: ``1 - u - v + C(u, v)``."""
        u, v = self._to_uniform(x, y)
        return 1.0 - np.asarray(u) - np.asarray(v) + self.cdf(u, v)

    def generate_random_values(self, size: int, seed: int | None = None) -> NDArray[np.float64]:
        """
        Draw ``size`` pairs by Latin hypercube conditional sampling.

        Uniform pairs are pushed through :meth:`inverse_cdf` and, when set,
        through the marginal quantile functions.

        Returns
        -------
        ndarray
            Array of shape ``(size, 2)``.
        """
        if size < 1:
            raise ValueError("The sample size must be at least 1.")
        design = qmc.LatinHypercube(d=2, rng=np.random.default_rng(seed)).random(size)
        u, v = self.inverse_cdf(design[:, 0], design[:, 1])
        x = u if self.marginal_x is None else self.marginal_x.inverse_cdf(u)
        y = v if self.marginal_y is None else self.marginal_y.inverse_cdf(v)
        return np.column_stack([x, y])

    # ------------------------------------------------------------------
    # Rank correlation
    # ------------------------------------------------------------------

    def theta_from_tau(self, tau: float) -> float:
        """
        Dependency parameter matching Kendall's ``tau``.

        Raises
        ------
        UnsupportedOperationError
            If the family has no tau inversion.
        """
        raise UnsupportedOperationError(
            f"{type(self).__name__} cannot set θ from Kendall's tau."
        )

    def set_theta_from_tau(self, sample_x: ArrayLike, sample_y: ArrayLike) -> None:
        """Set ``θ`` from the sample's Kendall's tau."""
        x, y = paired_sample(sample_x, sample_y)
        tau = kendalls_tau(x, y)
        self.theta = self.theta_from_tau(tau)
        logger.debug("%s: tau=%.6g gives theta=%.6g", type(self).__name__, tau, self.theta)

    # ------------------------------------------------------------------
    # Copying and serialization
    # ------------------------------------------------------------------

    def clone(self) -> BivariateCopula:
        """Independent copy; the marginals are deep-copied too."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{"type", "parameters", "marginal_x", "marginal_y"}``."""
        return {
            "type": self.copula_type.value,
            "parameters": [self._theta],
            "marginal_x": None if self.marginal_x is None else self.marginal_x.to_dict(),
            "marginal_y": None if self.marginal_y is None else self.marginal_y.to_dict(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(theta={self._theta!r})"


__all__ = ["BivariateCopula", "paired_sample", "pseudo_observations"]
