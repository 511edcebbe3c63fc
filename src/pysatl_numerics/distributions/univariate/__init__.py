"""
Univariate distributions

- common contract (:mod:`.base`);
- estimation capabilities (:mod:`.estimation`);
- families: Normal, Uniform, Exponential, Triangular and GEV.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .base import UnivariateDistribution
from .estimation import (
    LinearMomentEstimation,
    MaximumLikelihoodEstimation,
    MomentEstimation,
    fit_maximum_likelihood,
)
from .exponential import Exponential
from .generalized_extreme_value import GeneralizedExtremeValue
from .normal import Normal
from .triangular import Triangular
from .uniform import Uniform

__all__ = [
    # contract
    "UnivariateDistribution",
    # capabilities
    "LinearMomentEstimation",
    "MaximumLikelihoodEstimation",
    "MomentEstimation",
    "fit_maximum_likelihood",
    # families
    "Exponential",
    "GeneralizedExtremeValue",
    "Normal",
    "Triangular",
    "Uniform",
]
