__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import pytest

from pysatl_numerics.distributions import (
    FamilyRegister,
    GumbelCopula,
    Normal,
    configure_register,
    copula_from_dict,
    create_copula,
    create_distribution,
    distribution_from_dict,
    reset_register,
)
from pysatl_numerics.distributions.univariate import GeneralizedExtremeValue
from pysatl_numerics.types import CopulaType, UnivariateDistributionType


class TestFamilyRegister:
    """Test the FamilyRegister singleton."""

    def test_singleton(self):
        assert FamilyRegister() is FamilyRegister()
        assert configure_register() is FamilyRegister()

    def test_configured_families(self):
        register = configure_register()
        assert set(register.distribution_types) == set(UnivariateDistributionType)
        assert set(register.copula_types) == set(CopulaType)

    def test_duplicate_registration(self):
        configure_register()
        with pytest.raises(ValueError, match="already found"):
            FamilyRegister.register_distribution(Normal)
        with pytest.raises(ValueError, match="already found"):
            FamilyRegister.register_copula(GumbelCopula)

    def test_unregistered_type(self):
        with pytest.raises(ValueError, match="No distribution"):
            FamilyRegister.get_distribution(UnivariateDistributionType.NORMAL)

    def test_unknown_type(self):
        configure_register()
        with pytest.raises(ValueError):
            FamilyRegister.get_copula("student")

    def test_lookup_by_string(self):
        configure_register()
        assert FamilyRegister.get_distribution("normal") is Normal
        assert FamilyRegister.get_copula(CopulaType.GUMBEL) is GumbelCopula

    def test_reset(self):
        first = configure_register()
        reset_register()
        second = configure_register()
        assert first is not second
        assert set(second.copula_types) == set(CopulaType)


class TestCreation:
    """Test building families through the register."""

    def test_create_distribution_defaults(self):
        normal = create_distribution("normal")
        assert isinstance(normal, Normal)
        assert normal.parameters == (0.0, 1.0)

    def test_create_distribution_with_parameters(self):
        gev = create_distribution(UnivariateDistributionType.GENERALIZED_EXTREME_VALUE, 10.0, 2.0, 0.1)
        assert isinstance(gev, GeneralizedExtremeValue)
        assert gev.parameters == (10.0, 2.0, 0.1)

    def test_create_copula(self):
        marginal = Normal()
        copula = create_copula("gumbel", 3.0, marginal, marginal)
        assert isinstance(copula, GumbelCopula)
        assert copula.theta == 3.0
        assert copula.marginal_x is marginal

    def test_create_copula_default_theta(self):
        assert create_copula(CopulaType.JOE).theta == 2.0


class TestSerialization:
    """Test rebuilding families from their dictionaries."""

    def test_distribution_round_trip(self):
        gev = GeneralizedExtremeValue(50.0, 5.0, -0.2)
        rebuilt = distribution_from_dict(gev.to_dict())
        assert rebuilt == gev
        assert rebuilt is not gev

    def test_copula_round_trip(self):
        copula = create_copula("frank", 4.5, Normal(1.0, 2.0), GeneralizedExtremeValue())
        rebuilt = copula_from_dict(copula.to_dict())
        assert type(rebuilt) is type(copula)
        assert rebuilt.theta == 4.5
        assert rebuilt.marginal_x == Normal(1.0, 2.0)
        assert rebuilt.marginal_y == GeneralizedExtremeValue()

    def test_copula_without_marginals(self):
        rebuilt = copula_from_dict({"type": "clayton", "parameters": [2.0]})
        assert rebuilt.theta == 2.0
        assert rebuilt.marginal_x is None
        assert rebuilt.marginal_y is None

    def test_missing_type(self):
        with pytest.raises(ValueError, match="'type'"):
            distribution_from_dict({"parameters": [0.0, 1.0]})
        with pytest.raises(ValueError, match="'type'"):
            copula_from_dict({"parameters": [2.0]})
