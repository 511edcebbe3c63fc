"""
Exception hierarchy of the library.

Each error derives from the built-in exception that matches its meaning, so
callers may catch either the specific class or the familiar built-in one.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pysatl_numerics.mathematics.optimization.optimizer import OptimizationStatus


class ParameterOutOfRangeError(ValueError):
    """
    A distribution or copula parameter lies outside its domain.

    Parameters
    ----------
    parameter : str
        Name of the offending parameter.
    message : str
        Human-readable description of the violated constraint.
    """

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


class EstimationError(RuntimeError):
    """Parameter estimation could not produce a valid fit."""


class NumericalError(ArithmeticError):
    """A numerical routine failed to bracket, converge or stay finite."""


class OptimizationError(NumericalError):
    """
    An optimizer terminated without success.

    Parameters
    ----------
    status : OptimizationStatus
        Terminal status of the optimizer.
    message : str
        Description of the failure.
    """

    def __init__(self, status: OptimizationStatus, message: str) -> None:
        super().__init__(message)
        self.status = status


class UnsupportedOperationError(NotImplementedError):
    """The requested operation is not available for this family."""


__all__ = [
    "EstimationError",
    "NumericalError",
    "OptimizationError",
    "ParameterOutOfRangeError",
    "UnsupportedOperationError",
]
