"""
Tests for the bivariate copula families

Reference densities and distribution values are taken at ``(0.2, 0.8)``.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_numerics.distributions.copulas import (
    AliMikhailHaqCopula,
    ArchimedeanCopula,
    ClaytonCopula,
    FrankCopula,
    GumbelCopula,
    JoeCopula,
    NormalCopula,
)
from pysatl_numerics.distributions.univariate import Normal
from pysatl_numerics.errors import EstimationError, ParameterOutOfRangeError, UnsupportedOperationError
from pysatl_numerics.statistics import kendalls_tau
from pysatl_numerics.types import WORST_LOG_PROBABILITY

U, V = 0.2, 0.8

REFERENCE = [
    (GumbelCopula, 10.0, 1.559981e-07, 0.2),
    (GumbelCopula, 20.0, 7.954156e-16, 0.2),
    (GumbelCopula, 1.1, 0.9004251, 0.1694668),
    (GumbelCopula, 5.0, 0.001609717, 0.1999967),
    (JoeCopula, 10.0, 4.342727e-05, 0.1999999),
    (JoeCopula, 20.0, 8.645443e-11, 0.2),
    (JoeCopula, 1.1, 0.9512265, 0.1656223),
    (JoeCopula, 5.0, 0.02110735, 0.199895),
    (AliMikhailHaqCopula, 0.8, 0.6491167, 0.1834862),
    (AliMikhailHaqCopula, 0.1, 0.9630927, 0.1626016),
    (AliMikhailHaqCopula, -0.5, 1.158995, 0.1481481),
    (AliMikhailHaqCopula, -0.9, 1.259423, 0.1398601),
    (FrankCopula, 10.0, 0.02469702, 0.1998148),
    (FrankCopula, 20.0, 0.0001228828, 0.1999997),
    (FrankCopula, -0.5, 1.089996, 0.1534309),
    (FrankCopula, 5.0, 0.2408784, 0.1960338),
]

NORMAL_REFERENCE = [
    (0.8, 0.09803021, 0.1996831),
    (0.1, 0.928971, 0.1675602),
    (-0.5, 1.462211, 0.1128494),
    (-0.9, 3.208773, 0.05006756),
]

COPULAS = [
    GumbelCopula(2.0),
    ClaytonCopula(2.0),
    FrankCopula(5.0),
    FrankCopula(-3.0),
    JoeCopula(2.0),
    AliMikhailHaqCopula(0.5),
    AliMikhailHaqCopula(-0.5),
    NormalCopula(0.6),
    NormalCopula(-0.4),
]


@pytest.mark.parametrize("family, theta, pdf, cdf", REFERENCE)
def test_reference_values(family, theta, pdf, cdf):
    copula = family(theta)
    assert copula.pdf(U, V) == pytest.approx(pdf, abs=1e-6)
    assert copula.cdf(U, V) == pytest.approx(cdf, abs=1e-6)


@pytest.mark.parametrize("rho, pdf, cdf", NORMAL_REFERENCE)
def test_normal_reference_values(rho, pdf, cdf):
    copula = NormalCopula(rho)
    assert copula.pdf(U, V) == pytest.approx(pdf, abs=1e-4)
    assert copula.cdf(U, V) == pytest.approx(cdf, abs=1e-4)


@pytest.mark.parametrize("copula", COPULAS, ids=repr)
class TestCopulaContract:
    """Properties every family must satisfy."""

    def test_boundaries(self, copula):
        assert copula.cdf(0.0, 0.7) == 0.0
        assert copula.cdf(0.4, 0.0) == 0.0
        assert copula.cdf(0.4, 1.0) == 0.4
        assert copula.cdf(1.0, 0.7) == 0.7
        assert copula.pdf(0.0, 0.5) == 0.0
        assert copula.pdf(0.5, 1.0) == 0.0

    def test_frechet_bounds(self, copula):
        u, v = np.meshgrid(np.linspace(0.05, 0.95, 7), np.linspace(0.05, 0.95, 7))
        c = copula.cdf(u, v)
        assert c.shape == u.shape
        assert np.all(c >= np.maximum(u + v - 1.0, 0.0) - 1e-9)
        assert np.all(c <= np.minimum(u, v) + 1e-9)

    def test_density_is_derivative_of_cdf(self, copula):
        h = 1e-3
        u, v = 0.35, 0.6
        mixed = (
            copula.cdf(u + h, v + h) - copula.cdf(u + h, v - h) - copula.cdf(u - h, v + h) + copula.cdf(u - h, v - h)
        ) / (4.0 * h * h)
        assert copula.pdf(u, v) == pytest.approx(mixed, rel=1e-3)

    def test_log_pdf(self, copula):
        assert copula.log_pdf(0.3, 0.4) == pytest.approx(np.log(copula.pdf(0.3, 0.4)))

    @pytest.mark.parametrize("u", [0.3, 0.7])
    @pytest.mark.parametrize("p", [0.2, 0.5, 0.9])
    def test_inverse_cdf_solves_conditional(self, copula, u, p):
        _, v = copula.inverse_cdf(u, p)
        h = 1e-4
        conditional = (copula.cdf(u + h, v) - copula.cdf(u - h, v)) / (2.0 * h)
        assert 0.0 <= v <= 1.0
        assert conditional == pytest.approx(p, abs=1e-4)

    def test_inverse_cdf_ends(self, copula):
        _, v = copula.inverse_cdf(np.array([0.3, 0.3]), np.array([0.0, 1.0]))
        np.testing.assert_array_equal(v, [0.0, 1.0])

    def test_inverse_cdf_rejects_probability(self, copula):
        with pytest.raises(ValueError, match="between 0 and 1"):
            copula.inverse_cdf(0.5, 1.5)

    def test_sampling(self, copula):
        sample = copula.generate_random_values(300, seed=7)
        assert sample.shape == (300, 2)
        assert np.all((sample >= 0.0) & (sample <= 1.0))
        np.testing.assert_array_equal(sample, copula.generate_random_values(300, seed=7))

    def test_clone(self, copula):
        twin = copula.clone()
        twin.theta = copula.theta / 2.0
        assert twin.theta != copula.theta
        assert type(twin) is type(copula)

    def test_to_dict(self, copula):
        data = copula.to_dict()
        assert data["type"] == copula.copula_type.value
        assert data["parameters"] == [copula.theta]
        assert data["marginal_x"] is None


@pytest.mark.parametrize(
    "copula",
    [GumbelCopula(3.0), ClaytonCopula(1.5), FrankCopula(4.0), JoeCopula(2.5), AliMikhailHaqCopula(0.7)],
    ids=repr,
)
class TestGenerators:
    """Archimedean generator identities."""

    def test_is_archimedean(self, copula):
        assert isinstance(copula, ArchimedeanCopula)

    def test_generator_inverse(self, copula):
        t = np.linspace(0.05, 0.95, 10)
        np.testing.assert_allclose(copula.generator_inverse(copula.generator(t)), t, rtol=1e-9)

    def test_generator_of_inverse(self, copula):
        s = np.array([0.01, 0.1, 0.5, 1.0, 3.0])
        np.testing.assert_allclose(copula.generator(copula.generator_inverse(s)), s, rtol=1e-8)

    def test_generator_vanishes_at_one(self, copula):
        assert float(copula.generator(np.array(1.0))) == pytest.approx(0.0, abs=1e-12)

    def test_generator_boundaries(self, copula):
        near_one = float(copula.generator(np.array(1.0 - 1e-10)))
        near_zero = float(copula.generator(np.array(1e-10)))
        assert 0.0 <= near_one < 1e-6
        assert near_zero > float(copula.generator(np.array(0.5)))

    def test_generator_is_decreasing_and_convex(self, copula):
        t = np.linspace(0.05, 0.95, 10)
        assert np.all(copula.generator_prime(t) < 0.0)
        assert np.all(copula.generator_prime2(t) > 0.0)

    def test_generator_derivatives(self, copula):
        t, h = np.array([0.25, 0.5, 0.75]), 1e-6
        first = (copula.generator(t + h) - copula.generator(t - h)) / (2.0 * h)
        second = (copula.generator_prime(t + h) - copula.generator_prime(t - h)) / (2.0 * h)
        np.testing.assert_allclose(copula.generator_prime(t), first, rtol=1e-5)
        np.testing.assert_allclose(copula.generator_prime2(t), second, rtol=1e-5)

    def test_generator_prime_inverse(self, copula):
        t = np.array([0.2, 0.5, 0.8])
        np.testing.assert_allclose(copula.generator_prime_inverse(copula.generator_prime(t)), t, rtol=1e-6)


class TestDependence:
    @pytest.mark.parametrize(
        "copula, tau",
        [(GumbelCopula(2.0), 0.5), (ClaytonCopula(2.0), 0.5), (NormalCopula(np.sin(np.pi / 4.0)), 0.5)],
        ids=repr,
    )
    def test_sample_tau(self, copula, tau):
        sample = copula.generate_random_values(1000, seed=2024)
        assert kendalls_tau(sample[:, 0], sample[:, 1]) == pytest.approx(tau, abs=0.05)

    @pytest.mark.parametrize("family", [ClaytonCopula, FrankCopula, AliMikhailHaqCopula])
    def test_zero_theta_is_independence(self, family):
        copula = family(0.0)
        assert copula.cdf(0.3, 0.6) == pytest.approx(0.18)
        assert copula.pdf(0.3, 0.6) == pytest.approx(1.0)
        assert copula.inverse_cdf(0.3, 0.6)[1] == pytest.approx(0.6)

    def test_normal_independence(self):
        copula = NormalCopula(0.0)
        assert copula.cdf(0.3, 0.6) == pytest.approx(0.18, abs=1e-8)
        assert copula.pdf(0.3, 0.6) == pytest.approx(1.0)

    def test_normal_comonotonic(self):
        assert NormalCopula(1.0).cdf(0.3, 0.6) == pytest.approx(0.3)
        assert NormalCopula(-1.0).cdf(0.7, 0.6) == pytest.approx(0.3)
        assert NormalCopula(1.0).pdf(0.3, 0.6) == 0.0

    def test_gumbel_independence(self):
        copula = GumbelCopula(1.0)
        assert copula.cdf(0.3, 0.6) == pytest.approx(0.18)

    def test_clayton_negative_zero_density_region(self):
        copula = ClaytonCopula(-0.5)
        assert copula.pdf(0.1, 0.1) == 0.0
        assert copula.cdf(0.1, 0.1) == 0.0

    def test_clayton_negative_generator(self):
        copula = ClaytonCopula(-0.5)
        t = np.linspace(0.05, 0.95, 10)
        phi = copula.generator(t)
        assert np.all(np.diff(phi) > 0.0)
        assert np.all((phi > -1.0) & (phi < 0.0))
        assert np.all(copula.generator_prime(t) > 0.0)
        assert float(copula.generator(np.array(0.0))) == pytest.approx(-1.0)
        expected = (np.sqrt(0.6) + np.sqrt(0.7) - 1.0) ** 2
        assert copula.cdf(0.6, 0.7) == pytest.approx(expected, rel=1e-12)


class TestThetaFromTau:
    @pytest.mark.parametrize("tau", [0.1, 0.5, 0.8])
    def test_gumbel(self, tau):
        assert GumbelCopula().theta_from_tau(tau) == pytest.approx(1.0 / (1.0 - tau))

    def test_clayton(self):
        assert ClaytonCopula().theta_from_tau(0.5) == pytest.approx(2.0)

    def test_normal(self):
        assert NormalCopula().theta_from_tau(0.5) == pytest.approx(np.sin(np.pi / 4.0))

    @pytest.mark.parametrize("tau", [-0.3, 0.2, 0.6])
    def test_frank_round_trip(self, tau):
        from pysatl_numerics.distributions.copulas.frank import frank_tau

        assert frank_tau(FrankCopula().theta_from_tau(tau)) == pytest.approx(tau, abs=1e-8)

    @pytest.mark.parametrize("tau", [-0.15, 0.1, 0.3])
    def test_amh_round_trip(self, tau):
        from pysatl_numerics.distributions.copulas.ali_mikhail_haq import amh_tau

        assert amh_tau(AliMikhailHaqCopula().theta_from_tau(tau)) == pytest.approx(tau, abs=1e-8)

    def test_amh_zero(self):
        assert AliMikhailHaqCopula().theta_from_tau(0.0) == 0.0

    @pytest.mark.parametrize("tau", [0.5, -0.3])
    def test_amh_out_of_range(self, tau):
        with pytest.raises(EstimationError, match="too strong"):
            AliMikhailHaqCopula().theta_from_tau(tau)

    def test_joe_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            JoeCopula().theta_from_tau(0.5)

    def test_set_theta_from_tau(self, spy, ixc):
        copula = GumbelCopula()
        copula.set_theta_from_tau(spy, ixc)
        assert copula.theta == pytest.approx(2.509434, abs=1e-4)

    def test_set_theta_from_constant_sample(self):
        copula = GumbelCopula(3.0)
        with pytest.raises(ValueError, match="constant"):
            copula.set_theta_from_tau([2.0, 2.0, 2.0], [1.0, 2.0, 3.0])
        assert copula.theta == 3.0


class TestInvalidParameter:
    def test_raises_by_default(self):
        copula = GumbelCopula(0.5)
        assert not copula.parameters_valid
        with pytest.raises(ParameterOutOfRangeError, match="greater than or equal to 1.0") as exc_info:
            copula.pdf(0.3, 0.4)
        assert exc_info.value.parameter == "theta"
        with pytest.raises(ParameterOutOfRangeError):
            copula.cdf(0.3, 0.4)

    def test_sentinels_without_report_failure(self):
        copula = GumbelCopula(0.5)
        copula.report_failure = False
        assert np.isnan(copula.pdf(0.3, 0.4))
        assert np.isnan(copula.cdf(0.3, 0.4))
        assert copula.log_pdf(0.3, 0.4) == WORST_LOG_PROBABILITY
        assert np.isnan(copula.inverse_cdf(0.3, 0.4)[1])

    def test_setting_is_lazy(self):
        copula = AliMikhailHaqCopula()
        copula.theta = 2.0
        assert copula.theta == 2.0
        assert isinstance(copula.validate_parameter(2.0), ParameterOutOfRangeError)
        with pytest.raises(ParameterOutOfRangeError, match="less than or equal"):
            copula.validate_parameter(2.0, raise_error=True)

    def test_nan_theta(self):
        with pytest.raises(ParameterOutOfRangeError, match="must be a number"):
            FrankCopula(float("nan")).cdf(0.5, 0.5)

    def test_normal_parameter_name(self):
        with pytest.raises(ParameterOutOfRangeError, match="correlation"):
            NormalCopula(1.5).pdf(0.5, 0.5)


class TestExceedance:
    def test_uniform_margins(self):
        copula = GumbelCopula(2.0)
        c = copula.cdf(0.9, 0.8)
        assert copula.or_joint_exceedance(0.9, 0.8) == pytest.approx(1.0 - c)
        assert copula.and_joint_exceedance(0.9, 0.8) == pytest.approx(1.0 - 0.9 - 0.8 + c)

    def test_through_marginals(self):
        copula = NormalCopula(0.0, Normal(), Normal(10.0, 2.0))
        assert copula.or_joint_exceedance(0.0, 10.0) == pytest.approx(0.75, abs=1e-8)
        assert copula.and_joint_exceedance(0.0, 10.0) == pytest.approx(0.25, abs=1e-8)

    def test_sampling_through_marginals(self):
        copula = ClaytonCopula(3.0, Normal(100.0, 5.0), Normal(-50.0, 1.0))
        sample = copula.generate_random_values(200, seed=3)
        assert abs(np.mean(sample[:, 0]) - 100.0) < 2.0
        assert abs(np.mean(sample[:, 1]) + 50.0) < 0.5

    def test_sample_size(self):
        with pytest.raises(ValueError):
            GumbelCopula().generate_random_values(0)

    def test_clone_copies_marginals(self):
        marginal = Normal(1.0, 2.0)
        twin = GumbelCopula(2.0, marginal, marginal).clone()
        twin.marginal_x.set_parameters([5.0, 5.0])
        assert marginal.parameters == (1.0, 2.0)
