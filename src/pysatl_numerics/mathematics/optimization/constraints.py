"""
Constraints consumed by the constrained optimizers.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from pysatl_numerics.types import ObjectiveFunc


class ConstraintType(Enum):
    """Comparison applied between the constraint function and its target value."""

    EQUAL_TO = auto()
    GREATER_THAN_OR_EQUAL_TO = auto()
    LESSER_THAN_OR_EQUAL_TO = auto()


@dataclass(frozen=True, slots=True)
class Constraint:
    """
    Constraint ``function(x) <type> value``.

    Parameters
    ----------
    function : Callable[[ndarray], float]
        Constraint function of the parameter vector.
    number_of_parameters : int
        Length of the parameter vector the function expects.
    value : float
        Target value.
    type : ConstraintType
        Comparison.
    tolerance : float, default 1e-8
        Allowed violation for the point to count as feasible.
    """

    function: ObjectiveFunc
    number_of_parameters: int
    value: float
    type: ConstraintType
    tolerance: float = 1e-8

    def violation(self, values: NDArray[np.float64]) -> float:
        """
        Signed violation at ``values``; positive means infeasible.

        Equality constraints return ``function(x) - value``.
        """
        actual = float(self.function(values))
        if self.type is ConstraintType.GREATER_THAN_OR_EQUAL_TO:
            return self.value - actual
        return actual - self.value

    def is_satisfied(self, values: NDArray[np.float64]) -> bool:
        """Check the constraint within :attr:`tolerance`."""
        c = self.violation(values)
        if self.type is ConstraintType.EQUAL_TO:
            return abs(c) <= self.tolerance
        return c <= self.tolerance


__all__ = ["Constraint", "ConstraintType"]
