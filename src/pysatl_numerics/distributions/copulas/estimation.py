"""
Copula Estimation
=================

Fitting of bivariate copulas to paired samples.

Three strategies are available (:class:`CopulaEstimationMethod`):

- ``PSEUDO_LIKELIHOOD``: θ maximizes the copula likelihood of the rank
  pseudo-observations ``rank / (n + 1)``; marginals are not needed.
- ``INFERENCE_FROM_MARGINS``: MLE-capable marginals are refitted first, then
  θ maximizes the copula likelihood of the sample mapped through the marginal
  CDFs.
- ``FULL_LIKELIHOOD``: θ and every marginal parameter jointly maximize the
  full log-likelihood with differential evolution.

Every strategy works on a clone and commits the result to the given copula
only after the whole fit succeeded.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import copy
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import numpy as np

from pysatl_numerics.distributions.copulas.base import BivariateCopula, paired_sample
from pysatl_numerics.distributions.univariate.estimation import MaximumLikelihoodEstimation
from pysatl_numerics.errors import EstimationError, NumericalError, ParameterOutOfRangeError
from pysatl_numerics.mathematics.optimization import BrentSearch, DifferentialEvolution

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray

    from pysatl_numerics.distributions.univariate.base import UnivariateDistribution
    from pysatl_numerics.types import CopulaType

logger = logging.getLogger(__name__)


class CopulaEstimationMethod(StrEnum):
    """Strategy used to fit a bivariate copula."""

    FULL_LIKELIHOOD = "full_likelihood"
    PSEUDO_LIKELIHOOD = "pseudo_likelihood"
    INFERENCE_FROM_MARGINS = "inference_from_margins"


@dataclass(frozen=True, slots=True)
class EstimationResult:
    """
    Outcome of :func:`fit`: either the fitted copula or the error.

    Attributes
    ----------
    copula : BivariateCopula or None
        The fitted copula when the estimation succeeded.
    error : EstimationError or None
        The reason of failure otherwise.
    """

    copula: BivariateCopula | None = None
    error: EstimationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> BivariateCopula:
        """
        Return the fitted copula.

        Raises
        ------
        EstimationError
            The stored error, if the estimation failed.
        """
        if self.error is not None:
            raise self.error
        if self.copula is None:
            raise RuntimeError("The estimation result holds neither a copula nor an error.")
        return self.copula


def _mle_capable(marginal: UnivariateDistribution | None) -> bool:
    return marginal is not None and isinstance(marginal, MaximumLikelihoodEstimation)


def _require_marginals(
    copula: BivariateCopula, method: CopulaEstimationMethod
) -> tuple[UnivariateDistribution, UnivariateDistribution]:
    if copula.marginal_x is None or copula.marginal_y is None:
        raise EstimationError(f"Both marginal distributions must be set to estimate by {method.value}.")
    return copula.marginal_x, copula.marginal_y


def _number_of_estimated_parameters(copula: BivariateCopula, method: CopulaEstimationMethod) -> int:
    if method is CopulaEstimationMethod.FULL_LIKELIHOOD:
        mx, my = _require_marginals(copula, method)
        return 1 + mx.number_of_parameters + my.number_of_parameters
    return 1


def _paired_or_raise(
    copula: BivariateCopula, sample_x: ArrayLike, sample_y: ArrayLike, method: CopulaEstimationMethod
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    try:
        x, y = paired_sample(sample_x, sample_y)
    except ValueError as e:
        raise EstimationError(str(e)) from e
    minimum = max(_number_of_estimated_parameters(copula, method) + 1, 2)
    if x.size < minimum:
        raise EstimationError(
            f"Estimation by {method.value} requires at least {minimum} pairs, got {x.size}."
        )
    return x, y


def _search_theta(
    trial: BivariateCopula, objective: Callable[[], float], lower: float, upper: float
) -> float:
    def log_likelihood(theta: float) -> float:
        trial.theta = theta
        return objective()

    solver = BrentSearch(log_likelihood, lower, upper)
    return float(solver.maximize().values[0])


def _trial(copula: BivariateCopula) -> BivariateCopula:
    trial = copula.clone()
    trial.report_failure = False
    if trial.marginal_x is not None and trial.marginal_y is trial.marginal_x:
        trial.marginal_y = copy.deepcopy(trial.marginal_x)
    return trial


def _commit_marginals(copula: BivariateCopula, trial: BivariateCopula) -> None:
    if copula.marginal_x is not None and copula.marginal_y is copula.marginal_x:
        # a shared instance cannot hold both fits
        copula.marginal_y = copy.deepcopy(copula.marginal_x)
    for name in ("marginal_x", "marginal_y"):
        fitted = getattr(trial, name)
        if _mle_capable(fitted):
            getattr(copula, name).set_parameters(fitted.parameters)


def _pseudo_likelihood(
    copula: BivariateCopula, x: NDArray[np.float64], y: NDArray[np.float64]
) -> BivariateCopula:
    lower, upper = copula.parameter_constraints(x, y)
    trial = _trial(copula)
    theta = _search_theta(trial, lambda: trial.pseudo_log_likelihood(x, y), lower, upper)
    copula.theta = theta
    return copula


def _inference_from_margins(
    copula: BivariateCopula, x: NDArray[np.float64], y: NDArray[np.float64]
) -> BivariateCopula:
    _require_marginals(copula, CopulaEstimationMethod.INFERENCE_FROM_MARGINS)
    trial = _trial(copula)
    for name, sample in (("marginal_x", x), ("marginal_y", y)):
        marginal = getattr(trial, name)
        if _mle_capable(marginal):
            marginal.set_parameters(marginal.mle(sample))

    lower, upper = copula.parameter_constraints(x, y)
    theta = _search_theta(trial, lambda: trial.ifm_log_likelihood(x, y), lower, upper)

    copula.theta = theta
    _commit_marginals(copula, trial)
    return copula


def _full_likelihood(
    copula: BivariateCopula, x: NDArray[np.float64], y: NDArray[np.float64]
) -> BivariateCopula:
    mx, my = _require_marginals(copula, CopulaEstimationMethod.FULL_LIKELIHOOD)
    if not (_mle_capable(mx) and _mle_capable(my)):
        raise EstimationError(
            "Both marginal distributions must support maximum likelihood estimation "
            "to estimate by full_likelihood."
        )
    np1 = mx.number_of_parameters

    theta_lower, theta_upper = copula.parameter_constraints(x, y)
    _, lower_x, upper_x = mx.get_parameter_constraints(x)
    _, lower_y, upper_y = my.get_parameter_constraints(y)
    lowers = [theta_lower, *lower_x, *lower_y]
    uppers = [theta_upper, *upper_x, *upper_y]

    trial = _trial(copula)
    trial.marginal_x.report_failure = False
    trial.marginal_y.report_failure = False

    def set_values(values: NDArray[np.float64]) -> None:
        trial.theta = float(values[0])
        trial.marginal_x.set_parameters([float(v) for v in values[1 : 1 + np1]])
        trial.marginal_y.set_parameters([float(v) for v in values[1 + np1 :]])

    def log_likelihood(values: NDArray[np.float64]) -> float:
        set_values(values)
        return trial.log_likelihood(x, y)

    solver = DifferentialEvolution(log_likelihood, len(lowers), lowers, uppers)
    set_values(solver.maximize().values)

    copula.theta = trial.theta
    _commit_marginals(copula, trial)
    return copula


_STRATEGIES = {
    CopulaEstimationMethod.PSEUDO_LIKELIHOOD: _pseudo_likelihood,
    CopulaEstimationMethod.INFERENCE_FROM_MARGINS: _inference_from_margins,
    CopulaEstimationMethod.FULL_LIKELIHOOD: _full_likelihood,
}


def fit(
    copula: BivariateCopula,
    sample_x: ArrayLike,
    sample_y: ArrayLike,
    method: CopulaEstimationMethod | str = CopulaEstimationMethod.PSEUDO_LIKELIHOOD,
) -> EstimationResult:
    """
    Fit ``copula`` to a paired sample without raising.

    On success θ (and, depending on the method, the marginal parameters) are
    updated in place. On failure nothing is modified and the error is
    returned in the result.

    When one marginal instance serves both coordinates and the method fits
    marginals, the instance stays ``marginal_x`` and ``marginal_y`` becomes
    a copy holding the fit to ``sample_y``.

    Parameters
    ----------
    copula : BivariateCopula
        Copula to fit; marginals are required by the IFM and full likelihood
        methods.
    sample_x, sample_y : array_like
        Paired sample of equal length.
    method : CopulaEstimationMethod, default PSEUDO_LIKELIHOOD
        Estimation strategy.

    Returns
    -------
    EstimationResult
    """
    method = CopulaEstimationMethod(method)
    try:
        x, y = _paired_or_raise(copula, sample_x, sample_y, method)
        fitted = _STRATEGIES[method](copula, x, y)
    except EstimationError as e:
        return EstimationResult(error=e)
    except (NumericalError, ParameterOutOfRangeError, ValueError) as e:
        error = EstimationError(f"Estimation of {type(copula).__name__} by {method.value} failed: {e}")
        error.__cause__ = e
        return EstimationResult(error=error)

    logger.debug("%s fitted by %s: theta=%.6g", type(copula).__name__, method.value, fitted.theta)
    return EstimationResult(copula=fitted)


def estimate(
    copula: BivariateCopula,
    sample_x: ArrayLike,
    sample_y: ArrayLike,
    method: CopulaEstimationMethod | str = CopulaEstimationMethod.PSEUDO_LIKELIHOOD,
) -> BivariateCopula:
    """
    Fit ``copula`` in place and return it.

    Raises
    ------
    EstimationError
        If the sample is unusable or any optimizer or marginal fit fails; the
        copula is left unchanged.
    """
    return fit(copula, sample_x, sample_y, method).unwrap()


def estimate_copula(
    sample_x: ArrayLike,
    sample_y: ArrayLike,
    copula_type: CopulaType | str,
    method: CopulaEstimationMethod | str = CopulaEstimationMethod.PSEUDO_LIKELIHOOD,
    marginal_x: UnivariateDistribution | None = None,
    marginal_y: UnivariateDistribution | None = None,
) -> BivariateCopula:
    """Build a copula of ``copula_type`` from the register and fit it."""
    from pysatl_numerics.distributions.configuration import configure_register

    copula = configure_register().create_copula(copula_type, None, marginal_x, marginal_y)
    return estimate(copula, sample_x, sample_y, method)


__all__ = [
    "CopulaEstimationMethod",
    "EstimationResult",
    "estimate",
    "estimate_copula",
    "fit",
]
