"""
Distributions subpackage

Probability models of PySATL Numerics:

- parameter declarations and constraints (:mod:`.parameters`);
- univariate distributions (:mod:`.univariate`);
- bivariate copulas and their estimation (:mod:`.copulas`);
- family register and factories (:mod:`.registry`, :mod:`.configuration`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .configuration import (
    configure_register,
    copula_from_dict,
    create_copula,
    create_distribution,
    distribution_from_dict,
    reset_register,
)
from .copulas import *
from .copulas import __all__ as _copulas_all
from .parameters import Parameters, ParameterConstraint, constraint, parameters
from .registry import FamilyRegister
from .univariate import *
from .univariate import __all__ as _univariate_all

__all__ = [
    # parameters
    "ParameterConstraint",
    "Parameters",
    "constraint",
    "parameters",
    # register
    "FamilyRegister",
    "configure_register",
    "copula_from_dict",
    "create_copula",
    "create_distribution",
    "distribution_from_dict",
    "reset_register",
    *_univariate_all,
    *_copulas_all,
]

del _copulas_all
del _univariate_all
