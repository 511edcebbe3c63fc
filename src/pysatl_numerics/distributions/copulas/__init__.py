"""
Bivariate copulas

- common contract and Archimedean defaults (:mod:`.base`, :mod:`.archimedean`);
- families: Gumbel, Clayton, Frank, Joe, Ali-Mikhail-Haq and Normal;
- fitting to paired samples (:mod:`.estimation`).
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .ali_mikhail_haq import AliMikhailHaqCopula
from .archimedean import ArchimedeanCopula
from .base import BivariateCopula, pseudo_observations
from .clayton import ClaytonCopula
from .estimation import (
    CopulaEstimationMethod,
    EstimationResult,
    estimate,
    estimate_copula,
    fit,
)
from .frank import FrankCopula
from .gumbel import GumbelCopula
from .joe import JoeCopula
from .normal import NormalCopula

__all__ = [
    # contract
    "ArchimedeanCopula",
    "BivariateCopula",
    "pseudo_observations",
    # families
    "AliMikhailHaqCopula",
    "ClaytonCopula",
    "FrankCopula",
    "GumbelCopula",
    "JoeCopula",
    "NormalCopula",
    # estimation
    "CopulaEstimationMethod",
    "EstimationResult",
    "estimate",
    "estimate_copula",
    "fit",
]
