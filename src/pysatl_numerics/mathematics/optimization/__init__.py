"""
Optimization subpackage

Local and global optimizers sharing the :class:`.Optimizer` state machine:

- Brent's one-dimensional search (:mod:`.brent_search`);
- Nelder-Mead downhill simplex (:mod:`.nelder_mead`);
- quasi-Newton BFGS (:mod:`.bfgs`);
- differential evolution (:mod:`.differential_evolution`);
- augmented Lagrangian wrapper for general constraints (:mod:`.augmented_lagrange`).
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .augmented_lagrange import AugmentedLagrange
from .bfgs import BFGS
from .brent_search import BrentSearch
from .constraints import Constraint, ConstraintType
from .differential_evolution import DifferentialEvolution
from .nelder_mead import NelderMead
from .optimizer import OptimizationStatus, Optimizer, ParameterSet, check_bounds

__all__ = [
    # framework
    "OptimizationStatus",
    "Optimizer",
    "ParameterSet",
    "check_bounds",
    # algorithms
    "AugmentedLagrange",
    "BFGS",
    "BrentSearch",
    "DifferentialEvolution",
    "NelderMead",
    # constraints
    "Constraint",
    "ConstraintType",
]
