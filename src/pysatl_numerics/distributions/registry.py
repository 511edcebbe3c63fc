"""
Global register of distribution and copula families using the singleton pattern.

Families are looked up by their :class:`UnivariateDistributionType` or
:class:`CopulaType`, which also serves as the ``"type"`` key of the
dictionary serialization produced by ``to_dict``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Any

from pysatl_numerics.types import CopulaType, UnivariateDistributionType

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import ClassVar

    from pysatl_numerics.distributions.copulas.base import BivariateCopula
    from pysatl_numerics.distributions.univariate.base import UnivariateDistribution


class FamilyRegister:
    """
    Singleton register of univariate distribution and copula classes.

    Maintains the class of every family, allowing instances to be created
    from a type tag.
    """

    _instance: ClassVar[FamilyRegister | None] = None
    _distributions: dict[UnivariateDistributionType, type[UnivariateDistribution]]
    _copulas: dict[CopulaType, type[BivariateCopula]]

    def __new__(cls) -> FamilyRegister:
        """Create or return the singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._distributions = {}
            cls._instance._copulas = {}
        return cls._instance

    @classmethod
    def register_distribution(cls, family: type[UnivariateDistribution]) -> None:
        """
        Register a univariate distribution class.

        Raises
        ------
        ValueError
            If a class with the same type is already registered.
        """
        self = cls()
        if family.distribution_type in self._distributions:
            raise ValueError(f"Distribution {family.distribution_type} already found in register")
        self._distributions[family.distribution_type] = family

    @classmethod
    def register_copula(cls, family: type[BivariateCopula]) -> None:
        """
        Register a copula class.

        Raises
        ------
        ValueError
            If a class with the same type is already registered.
        """
        self = cls()
        if family.copula_type in self._copulas:
            raise ValueError(f"Copula {family.copula_type} already found in register")
        self._copulas[family.copula_type] = family

    @classmethod
    def get_distribution(
        cls, distribution_type: UnivariateDistributionType | str
    ) -> type[UnivariateDistribution]:
        """
        Retrieve a univariate distribution class by type.

        Raises
        ------
        ValueError
            If the type is unknown or not registered.
        """
        self = cls()
        key = UnivariateDistributionType(distribution_type)
        if key not in self._distributions:
            raise ValueError(f"No distribution {key} found in register")
        return self._distributions[key]

    @classmethod
    def get_copula(cls, copula_type: CopulaType | str) -> type[BivariateCopula]:
        """
        Retrieve a copula class by type.

        Raises
        ------
        ValueError
            If the type is unknown or not registered.
        """
        self = cls()
        key = CopulaType(copula_type)
        if key not in self._copulas:
            raise ValueError(f"No copula {key} found in register")
        return self._copulas[key]

    @property
    def distribution_types(self) -> tuple[UnivariateDistributionType, ...]:
        return tuple(self._distributions)

    @property
    def copula_types(self) -> tuple[CopulaType, ...]:
        return tuple(self._copulas)

    def create_distribution(
        self, distribution_type: UnivariateDistributionType | str, *parameters: float
    ) -> UnivariateDistribution:
        """Instantiate a distribution; omitted parameters take the family defaults."""
        return self.get_distribution(distribution_type)(*parameters)

    def create_copula(
        self,
        copula_type: CopulaType | str,
        theta: float | None = None,
        marginal_x: UnivariateDistribution | None = None,
        marginal_y: UnivariateDistribution | None = None,
    ) -> BivariateCopula:
        """Instantiate a copula; ``theta=None`` gives the family default."""
        return self.get_copula(copula_type)(theta, marginal_x, marginal_y)

    def distribution_from_dict(self, data: Mapping[str, Any]) -> UnivariateDistribution:
        """
        Rebuild a distribution serialized by ``to_dict``.

        Raises
        ------
        ValueError
            If the mapping has no ``"type"`` or an unknown one.
        """
        if "type" not in data:
            raise ValueError("A serialized distribution requires a 'type' entry.")
        return self.create_distribution(data["type"], *data.get("parameters", ()))

    def copula_from_dict(self, data: Mapping[str, Any]) -> BivariateCopula:
        """Rebuild a copula, and its marginals, serialized by ``to_dict``."""
        if "type" not in data:
            raise ValueError("A serialized copula requires a 'type' entry.")
        parameters = data.get("parameters") or [None]
        marginals = [
            None if data.get(key) is None else self.distribution_from_dict(data[key])
            for key in ("marginal_x", "marginal_y")
        ]
        return self.create_copula(data["type"], parameters[0], *marginals)

    @classmethod
    def _reset(cls) -> None:
        cls._instance = None
