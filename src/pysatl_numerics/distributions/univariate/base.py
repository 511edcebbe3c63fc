"""
Univariate Distribution Base
============================

Common contract of the univariate families: densities, distribution and
quantile functions, log variants, parameter handling and estimation dispatch.

Families implement the ``_pdf``, ``_cdf`` and (optionally) ``_inverse_cdf``
hooks on float arrays that lie inside the support. The public methods take
care of scalar/array handling, the support boundaries and the lazy parameter
validation controlled by :attr:`UnivariateDistribution.report_failure`.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import copy
import logging
from abc import ABC, abstractmethod
from math import isfinite, nan
from typing import TYPE_CHECKING, Any, TypeAlias, overload

import numpy as np

from pysatl_numerics.distributions.univariate.estimation import (
    LinearMomentEstimation,
    MaximumLikelihoodEstimation,
    MomentEstimation,
)
from pysatl_numerics.errors import EstimationError, UnsupportedOperationError
from pysatl_numerics.mathematics.root_finding import brent_bracket, brent_solve
from pysatl_numerics.statistics import linear_moments, product_moments
from pysatl_numerics.types import (
    WORST_LOG_PROBABILITY,
    Interval1D,
    ParameterEstimationMethod,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from typing import ClassVar

    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.parameters import Parameters
    from pysatl_numerics.errors import ParameterOutOfRangeError
    from pysatl_numerics.types import UnivariateDistributionType

logger = logging.getLogger(__name__)

_Hook: TypeAlias = "Callable[[NDArray[np.float64]], NDArray[np.float64]]"


def _wrap(out: NDArray[np.float64], like: NDArray[np.float64]) -> Any:
    if like.ndim == 0:
        return float(out[0])
    return out.reshape(like.shape)


def as_sample(sample: ArrayLike, minimum_size: int = 1) -> NDArray[np.float64]:
    """
    Convert ``sample`` to a finite one-dimensional float array.

    Raises
    ------
    EstimationError
        If the sample is not one-dimensional, holds non-finite values or has
        fewer than ``minimum_size`` elements.
    """
    data = np.asarray(sample, dtype=float)
    if data.ndim != 1:
        raise EstimationError("The sample must be one-dimensional.")
    if data.size < minimum_size:
        raise EstimationError(f"The sample must contain at least {minimum_size} values.")
    if not np.all(np.isfinite(data)):
        raise EstimationError("The sample contains non-finite values.")
    return data


class UnivariateDistribution(ABC):
    """
    Base class of the univariate families.

    Parameters
    ----------
    *values : float
        Parameter values in the order of the family's parameter dataclass.

    Attributes
    ----------
    report_failure : bool
        When True, evaluating a distribution with invalid parameters raises
        :class:`ParameterOutOfRangeError`; otherwise ``nan`` (or
        ``WORST_LOG_PROBABILITY`` for log densities) is returned.
    """

    distribution_type: ClassVar[UnivariateDistributionType]
    parameters_type: ClassVar[type[Parameters]]

    def __init__(self, *values: float) -> None:
        self.report_failure: bool = True
        self._parameters = self._build(values)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    @classmethod
    def _coerce(cls, values: tuple[float, ...]) -> tuple[float, ...]:
        return values

    @classmethod
    def _build(cls, values: Sequence[float]) -> Parameters:
        names = cls.parameters_type.names()
        if len(values) != len(names):
            raise ValueError(
                f"{cls.__name__} expects {len(names)} parameters ({', '.join(names)}), "
                f"got {len(values)}."
            )
        return cls.parameters_type(*cls._coerce(tuple(float(v) for v in values)))

    @property
    def parameter_names(self) -> tuple[str, ...]:
        """Names of the parameters in order."""
        return self.parameters_type.names()

    @property
    def parameters(self) -> tuple[float, ...]:
        """Current parameter values."""
        return self._parameters.values

    @property
    def number_of_parameters(self) -> int:
        """Number of distribution parameters."""
        return len(self.parameter_names)

    def set_parameters(self, values: Sequence[float]) -> None:
        """
        Replace the parameters.

        Values are stored as given and validated lazily at the next evaluation.
        """
        self._parameters = self._build(values)

    def validate_parameters(
        self, values: Sequence[float], raise_error: bool = False
    ) -> ParameterOutOfRangeError | None:
        """
        Check a candidate parameter vector against the family's constraints.

        Parameters
        ----------
        values : Sequence[float]
            Candidate parameters.
        raise_error : bool, default False
            Raise the violation instead of returning it.

        Returns
        -------
        ParameterOutOfRangeError or None
            The first violated constraint, or None if the values are valid.
        """
        return self._build(values).validate(raise_error)

    @property
    def parameters_valid(self) -> bool:
        """Whether the current parameters satisfy every constraint."""
        return self._parameters.validate(raise_error=False) is None

    def _check(self) -> bool:
        error = self._parameters.validate(raise_error=False)
        if error is None:
            return True
        if self.report_failure:
            raise error
        return False

    # ------------------------------------------------------------------
    # Support and summary statistics
    # ------------------------------------------------------------------

    @property
    def support(self) -> Interval1D:
        """Closed support interval."""
        return Interval1D(self.minimum, self.maximum)

    @property
    @abstractmethod
    def minimum(self) -> float:
        """Left end of the support."""

    @property
    @abstractmethod
    def maximum(self) -> float:
        """Right end of the support."""

    @property
    @abstractmethod
    def mean(self) -> float: ...

    @property
    def median(self) -> float:
        return float(self.inverse_cdf(0.5))

    @property
    @abstractmethod
    def mode(self) -> float: ...

    @property
    @abstractmethod
    def standard_deviation(self) -> float: ...

    @property
    @abstractmethod
    def skewness(self) -> float: ...

    @property
    @abstractmethod
    def kurtosis(self) -> float:
        """Kurtosis (not excess kurtosis)."""

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Density at points inside the support."""

    @abstractmethod
    def _cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        """Distribution function at points inside the support."""

    def _log_pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]:
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(self._pdf(x))

    def _inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        return self._numerical_inverse_cdf(p)

    def _numerical_inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Invert the distribution function with Brent's method.

        The starting bracket is ``mean ± standard deviation`` clipped to the
        support, expanded geometrically until it holds the quantile.
        """
        lo, hi = self.minimum, self.maximum
        center, spread = self.mean, self.standard_deviation
        if not isfinite(center):
            center = 0.5 * (lo + hi) if isfinite(lo) and isfinite(hi) else 0.0
        if not isfinite(spread) or spread <= 0.0:
            spread = 1.0
        a = lo if isfinite(lo) else center - spread
        b = hi if isfinite(hi) else center + spread

        out = np.empty_like(p)
        for i, target in enumerate(p):

            def f(x: float, target: float = float(target)) -> float:
                return float(self._cdf(np.array([min(max(x, lo), hi)]))[0]) - target

            _, left, right = brent_bracket(f, a, b, max_iterations=100)
            out[i] = brent_solve(
                f, max(left, lo), min(right, hi), report_failure=self.report_failure
            )
        return out

    def _evaluate(self, x: ArrayLike, hook: _Hook, below: float, above: float) -> Any:
        arr = np.asarray(x, dtype=float)
        flat = np.atleast_1d(arr).ravel()
        out = np.full(flat.shape, nan)
        if self._check():
            lo, hi = self.minimum, self.maximum
            out[flat < lo] = below
            out[flat > hi] = above
            inside = (flat >= lo) & (flat <= hi)
            if np.any(inside):
                out[inside] = hook(flat[inside])
        return _wrap(out, arr)

    @staticmethod
    def _clamp_log(values: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.where(np.isfinite(values), values, WORST_LOG_PROBABILITY)

    # ------------------------------------------------------------------
    # Public evaluation API
    # ------------------------------------------------------------------

    @overload
    def pdf(self, x: float) -> float: ...
    @overload
    def pdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]: ...

    def pdf(self, x: ArrayLike) -> Any:
        """
        Probability density function; 0 outside the support.

        Raises
        ------
        ParameterOutOfRangeError
            If the parameters are invalid and :attr:`report_failure` is set.
        """
        return self._evaluate(x, self._pdf, 0.0, 0.0)

    @overload
    def cdf(self, x: float) -> float: ...
    @overload
    def cdf(self, x: NDArray[np.float64]) -> NDArray[np.float64]: ...

    def cdf(self, x: ArrayLike) -> Any:
        """Cumulative distribution function; 0 left and 1 right of the support."""
        return self._evaluate(x, self._cdf, 0.0, 1.0)

    def ccdf(self, x: ArrayLike) -> Any:
        """Complementary distribution function ``1 - F(x)``."""
        return 1.0 - self.cdf(x)

    def hazard(self, x: ArrayLike) -> Any:
        """Hazard function ``f(x) / (1 - F(x))``."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return self.pdf(x) / self.ccdf(x)

    @overload
    def inverse_cdf(self, p: float) -> float: ...
    @overload
    def inverse_cdf(self, p: NDArray[np.float64]) -> NDArray[np.float64]: ...

    def inverse_cdf(self, p: ArrayLike) -> Any:
        """
        Quantile function.

        ``p = 0`` and ``p = 1`` map to the ends of the support.

        Raises
        ------
        ValueError
            If a probability lies outside ``[0, 1]``.
        ParameterOutOfRangeError
            If the parameters are invalid and :attr:`report_failure` is set.
        """
        arr = np.asarray(p, dtype=float)
        flat = np.atleast_1d(arr).ravel()
        if np.any((flat < 0.0) | (flat > 1.0)):
            raise ValueError("Probability must be between 0 and 1.")
        out = np.full(flat.shape, nan)
        if self._check():
            out[flat == 0.0] = self.minimum
            out[flat == 1.0] = self.maximum
            interior = (flat > 0.0) & (flat < 1.0)
            if np.any(interior):
                out[interior] = self._inverse_cdf(flat[interior])
        return _wrap(out, arr)

    def log_pdf(self, x: ArrayLike) -> Any:
        """
        Natural log of the density.

        Non-finite results, points outside the support and invalid
        parameters (with :attr:`report_failure` unset) give
        ``WORST_LOG_PROBABILITY``.
        """
        arr = np.asarray(x, dtype=float)
        flat = np.atleast_1d(arr).ravel()
        out = np.full(flat.shape, WORST_LOG_PROBABILITY)
        if self._check():
            inside = (flat >= self.minimum) & (flat <= self.maximum)
            if np.any(inside):
                out[inside] = self._clamp_log(self._log_pdf(flat[inside]))
        return _wrap(out, arr)

    def _log_of(self, fn: Callable[[ArrayLike], Any], x: ArrayLike) -> Any:
        arr = np.asarray(x, dtype=float)
        if not self._check():
            return _wrap(np.full(np.atleast_1d(arr).size, WORST_LOG_PROBABILITY), arr)
        with np.errstate(divide="ignore", invalid="ignore"):
            values = np.log(np.atleast_1d(np.asarray(fn(arr), dtype=float)).ravel())
        return _wrap(self._clamp_log(values), arr)

    def log_cdf(self, x: ArrayLike) -> Any:
        """Natural log of the distribution function, clamped like :meth:`log_pdf`."""
        return self._log_of(self.cdf, x)

    def log_ccdf(self, x: ArrayLike) -> Any:
        """Natural log of the complementary distribution function."""
        return self._log_of(self.ccdf, x)

    def log_likelihood(self, sample: ArrayLike) -> float:
        """Sum of :meth:`log_pdf` over the sample; non-finite totals are clamped."""
        total = float(np.sum(self.log_pdf(np.atleast_1d(np.asarray(sample, dtype=float)))))
        return total if isfinite(total) else WORST_LOG_PROBABILITY

    def generate_random_values(self, size: int, seed: int | None = None) -> NDArray[np.float64]:
        """
        Draw a sample by inverse transform sampling.

        Parameters
        ----------
        size : int
            Number of values.
        seed : int, optional
            Seed for :func:`numpy.random.default_rng`.
        """
        if size < 1:
            raise ValueError("The sample size must be at least 1.")
        rng = np.random.default_rng(seed)
        return np.asarray(self.inverse_cdf(rng.random(size)), dtype=float)

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------

    def estimate(self, sample: ArrayLike, method: ParameterEstimationMethod) -> None:
        """
        Fit the parameters to ``sample`` in place.

        Raises
        ------
        UnsupportedOperationError
            If the family does not support ``method``.
        EstimationError
            If the sample is unusable or the fit fails.
        """
        method = ParameterEstimationMethod(method)
        data = as_sample(sample, self.number_of_parameters + 1)
        if method is ParameterEstimationMethod.MAXIMUM_LIKELIHOOD and isinstance(
            self, MaximumLikelihoodEstimation
        ):
            values = self.mle(data)
        elif method is ParameterEstimationMethod.METHOD_OF_MOMENTS and isinstance(
            self, MomentEstimation
        ):
            values = self.parameters_from_moments(product_moments(data))
        elif method is ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS and isinstance(
            self, LinearMomentEstimation
        ):
            values = self.parameters_from_linear_moments(linear_moments(data))
        else:
            raise UnsupportedOperationError(
                f"{type(self).__name__} does not support estimation by {method.value}."
            )
        self.set_parameters(values)
        logger.debug("%s fitted by %s: %s", type(self).__name__, method.value, self.parameters)

    # ------------------------------------------------------------------
    # Copying and serialization
    # ------------------------------------------------------------------

    def clone(self) -> UnivariateDistribution:
        """Return an independent copy."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{"type": ..., "parameters": [...]}``."""
        return {"type": self.distribution_type.value, "parameters": list(self.parameters)}

    def __repr__(self) -> str:
        args = ", ".join(f"{n}={v!r}" for n, v in zip(self.parameter_names, self.parameters, strict=True))
        return f"{type(self).__name__}({args})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnivariateDistribution):
            return NotImplemented
        return type(self) is type(other) and self.parameters == other.parameters

    __hash__ = None  # type: ignore[assignment]


__all__ = ["UnivariateDistribution", "as_sample"]
