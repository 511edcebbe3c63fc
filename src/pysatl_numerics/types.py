"""
Core Type Definitions
=====================

Fundamental types, enumerations and numeric constants shared by the
distribution, copula and optimization layers.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from math import inf, isfinite
from typing import Any, TypeAlias

import numpy as np
from numpy.typing import ArrayLike, NDArray

ScalarFunc: TypeAlias = Callable[[float], float]
"""Type alias for scalar functions (float -> float)."""

ObjectiveFunc: TypeAlias = Callable[[NDArray[np.float64]], float]
"""Type alias for objective functions of a parameter vector."""

MACHINE_EPSILON: float = float(np.finfo(float).eps)
"""Double precision machine epsilon."""

WORST_LOG_PROBABILITY: float = -sys.float_info.max
"""Most negative finite double, used in place of ``-inf``/``NaN`` log-probabilities."""


class UnivariateDistributionType(StrEnum):
    """
    Enumeration of the implemented univariate distribution families.

    The values are used as stable identifiers for registry lookup and
    ``to_dict`` serialization.
    """

    NORMAL = "normal"
    UNIFORM = "uniform"
    EXPONENTIAL = "exponential"
    TRIANGULAR = "triangular"
    GENERALIZED_EXTREME_VALUE = "generalized_extreme_value"


class CopulaType(StrEnum):
    """Enumeration of the implemented bivariate copula families."""

    GUMBEL = "gumbel"
    CLAYTON = "clayton"
    FRANK = "frank"
    JOE = "joe"
    ALI_MIKHAIL_HAQ = "ali_mikhail_haq"
    NORMAL = "normal"


class ParameterEstimationMethod(StrEnum):
    """Estimation methods a univariate family may support."""

    MAXIMUM_LIKELIHOOD = "maximum_likelihood"
    METHOD_OF_MOMENTS = "method_of_moments"
    METHOD_OF_LINEAR_MOMENTS = "method_of_linear_moments"


@dataclass(frozen=True, slots=True)
class Interval1D:
    """
    Closed interval ``[left, right]`` describing the support of a univariate
    distribution; either end may be infinite.
    """

    left: float = -inf
    right: float = inf

    def __post_init__(self) -> None:
        if self.left > self.right:
            raise ValueError(f"Interval left end {self.left} exceeds right end {self.right}")

    @property
    def is_bounded(self) -> bool:
        return isfinite(self.left) and isfinite(self.right)

    def contains(self, x: ArrayLike) -> Any:
        """Membership test; a scalar gives ``bool``, an array a boolean array."""
        arr = np.asarray(x, dtype=float)
        result = (arr >= self.left) & (arr <= self.right)
        return bool(result) if result.ndim == 0 else result

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(x))  # type: ignore[arg-type]


__all__ = [
    "CopulaType",
    "Interval1D",
    "MACHINE_EPSILON",
    "ObjectiveFunc",
    "ParameterEstimationMethod",
    "ScalarFunc",
    "UnivariateDistributionType",
    "WORST_LOG_PROBABILITY",
]
