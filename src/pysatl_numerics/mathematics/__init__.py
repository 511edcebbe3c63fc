"""
Numerical building blocks: root finding, differentiation and optimization.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .differentiation import derivative, gradient
from .optimization import *
from .optimization import __all__ as _optimization_all
from .root_finding import (
    bisection,
    brent_bracket,
    brent_solve,
    newton_raphson,
    robust_newton_raphson,
)

__all__ = [
    "bisection",
    "brent_bracket",
    "brent_solve",
    "derivative",
    "gradient",
    "newton_raphson",
    "robust_newton_raphson",
    *_optimization_all,
]

del _optimization_all
