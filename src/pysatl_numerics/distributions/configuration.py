"""
Family Register Configuration
=============================

Fills the global :class:`FamilyRegister` with the built-in families:

- univariate: Normal, Uniform, Exponential, Triangular and GEV;
- copulas: Gumbel, Clayton, Frank, Joe, Ali-Mikhail-Haq and Normal.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pysatl_numerics.distributions.copulas import (
    AliMikhailHaqCopula,
    ClaytonCopula,
    FrankCopula,
    GumbelCopula,
    JoeCopula,
    NormalCopula,
)
from pysatl_numerics.distributions.registry import FamilyRegister
from pysatl_numerics.distributions.univariate import (
    Exponential,
    GeneralizedExtremeValue,
    Normal,
    Triangular,
    Uniform,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pysatl_numerics.distributions.copulas.base import BivariateCopula
    from pysatl_numerics.distributions.univariate.base import UnivariateDistribution
    from pysatl_numerics.types import CopulaType, UnivariateDistributionType


@lru_cache(maxsize=1)
def configure_register() -> FamilyRegister:
    """
    Register every built-in family in the global register.

    Returns
    -------
    FamilyRegister
        The global register.
    """
    for distribution in (Normal, Uniform, Exponential, Triangular, GeneralizedExtremeValue):
        FamilyRegister.register_distribution(distribution)
    for copula in (
        GumbelCopula,
        ClaytonCopula,
        FrankCopula,
        JoeCopula,
        AliMikhailHaqCopula,
        NormalCopula,
    ):
        FamilyRegister.register_copula(copula)
    return FamilyRegister()


def reset_register() -> None:
    """Reset the cached register."""
    configure_register.cache_clear()
    FamilyRegister._reset()


def create_distribution(
    distribution_type: UnivariateDistributionType | str, *parameters: float
) -> UnivariateDistribution:
    """Shortcut for ``configure_register().create_distribution``."""
    return configure_register().create_distribution(distribution_type, *parameters)


def create_copula(
    copula_type: CopulaType | str,
    theta: float | None = None,
    marginal_x: UnivariateDistribution | None = None,
    marginal_y: UnivariateDistribution | None = None,
) -> BivariateCopula:
    """Shortcut for ``configure_register().create_copula``."""
    return configure_register().create_copula(copula_type, theta, marginal_x, marginal_y)


def distribution_from_dict(data: Mapping[str, Any]) -> UnivariateDistribution:
    return configure_register().distribution_from_dict(data)


def copula_from_dict(data: Mapping[str, Any]) -> BivariateCopula:
    return configure_register().copula_from_dict(data)


__all__ = [
    "configure_register",
    "copula_from_dict",
    "create_copula",
    "create_distribution",
    "distribution_from_dict",
    "reset_register",
]
