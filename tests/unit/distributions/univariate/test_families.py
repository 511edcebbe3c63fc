"""
Tests for the built-in univariate families

Densities and quantiles are compared with the ``scipy.stats`` reference
implementations; estimators are checked on known samples.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math

import numpy as np
import pytest
from scipy import stats

from pysatl_numerics.distributions.univariate import (
    Exponential,
    GeneralizedExtremeValue,
    Normal,
    Triangular,
    Uniform,
)
from pysatl_numerics.errors import EstimationError, ParameterOutOfRangeError
from pysatl_numerics.statistics import linear_moments
from pysatl_numerics.types import ParameterEstimationMethod

ANNUAL_PEAKS = [
    1953, 1939, 1677, 1692, 2051, 2371, 2022, 1521, 1448, 1825, 1363, 1760, 1672, 1603, 1244,
    1521, 1783, 1560, 1357, 1673, 1625, 1425, 1688, 1577, 1736, 1640, 1584, 1293, 1277, 1742,
    1491,
]


@pytest.mark.parametrize(
    "distribution, reference",
    [
        (Normal(2.0, 1.5), stats.norm(loc=2.0, scale=1.5)),
        (Uniform(-1.0, 3.0), stats.uniform(loc=-1.0, scale=4.0)),
        (Exponential(5.0, 2.0), stats.expon(loc=5.0, scale=2.0)),
        (Triangular(0.0, 2.0, 5.0), stats.triang(c=0.4, loc=0.0, scale=5.0)),
        (GeneralizedExtremeValue(100.0, 10.0, 0.2), stats.genextreme(c=0.2, loc=100.0, scale=10.0)),
        (GeneralizedExtremeValue(100.0, 10.0, -0.2), stats.genextreme(c=-0.2, loc=100.0, scale=10.0)),
        (GeneralizedExtremeValue(100.0, 10.0, 0.0), stats.gumbel_r(loc=100.0, scale=10.0)),
    ],
)
class TestAgainstScipy:
    def test_pdf_and_cdf(self, distribution, reference) -> None:
        x = reference.ppf(np.linspace(0.02, 0.98, 15))
        np.testing.assert_allclose(distribution.pdf(x), reference.pdf(x), rtol=1e-9, atol=1e-12)
        np.testing.assert_allclose(distribution.cdf(x), reference.cdf(x), rtol=1e-9, atol=1e-12)

    def test_inverse_cdf(self, distribution, reference) -> None:
        p = np.linspace(0.01, 0.99, 15)
        np.testing.assert_allclose(distribution.inverse_cdf(p), reference.ppf(p), rtol=1e-9)

    def test_moments(self, distribution, reference) -> None:
        mean, var, skew, kurt = reference.stats(moments="mvsk")
        assert distribution.mean == pytest.approx(float(mean), rel=1e-9)
        assert distribution.standard_deviation == pytest.approx(math.sqrt(float(var)), rel=1e-9)
        assert distribution.skewness == pytest.approx(float(skew), rel=1e-4, abs=1e-9)
        assert distribution.kurtosis == pytest.approx(float(kurt) + 3.0, rel=1e-6)

    def test_median(self, distribution, reference) -> None:
        assert distribution.median == pytest.approx(float(reference.median()), rel=1e-9)


class TestNormal:
    def test_defaults(self) -> None:
        assert Normal().parameters == (0.0, 1.0)

    def test_tiny_sigma_is_lifted(self) -> None:
        assert Normal(0.0, 0.0).sigma == 1e-16
        assert Normal(0.0, 0.0).parameters_valid

    def test_negative_sigma_is_kept(self) -> None:
        assert Normal(0.0, -1.0).sigma == -1.0

    def test_method_of_moments(self) -> None:
        normal = Normal()
        normal.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_MOMENTS)
        assert normal.mu == pytest.approx(np.mean(ANNUAL_PEAKS))
        assert normal.sigma == pytest.approx(np.std(ANNUAL_PEAKS, ddof=1))

    def test_method_of_linear_moments(self) -> None:
        normal = Normal()
        normal.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        l1, l2, _, _ = linear_moments(ANNUAL_PEAKS)
        assert normal.parameters == pytest.approx((l1, l2 * math.sqrt(math.pi)))

    def test_maximum_likelihood(self) -> None:
        normal = Normal()
        normal.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        assert normal.mu == pytest.approx(np.mean(ANNUAL_PEAKS), rel=1e-4)
        assert normal.sigma == pytest.approx(np.std(ANNUAL_PEAKS), rel=1e-3)

    def test_mle_does_not_modify_distribution(self) -> None:
        normal = Normal()
        normal.mle(ANNUAL_PEAKS)
        assert normal.parameters == (0.0, 1.0)

    def test_sample_too_small(self) -> None:
        with pytest.raises(EstimationError):
            Normal().estimate([1.0, 2.0], ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)

    def test_constant_sample(self) -> None:
        with pytest.raises(EstimationError):
            Normal().mle([3.0, 3.0, 3.0, 3.0])

    def test_non_finite_sample(self) -> None:
        with pytest.raises(EstimationError):
            Normal().estimate([1.0, math.nan, 2.0, 3.0], ParameterEstimationMethod.METHOD_OF_MOMENTS)


class TestUniform:
    def test_degenerate(self) -> None:
        point = Uniform(2.0, 2.0)
        assert point.parameters_valid
        assert point.pdf(2.0) == 0.0
        assert point.cdf(2.0) == 1.0
        assert point.cdf(1.0) == 0.0
        assert point.inverse_cdf(0.3) == 2.0

    def test_inverted_bounds(self) -> None:
        with pytest.raises(ParameterOutOfRangeError, match="greater than the max"):
            Uniform(3.0, 1.0).pdf(2.0)

    def test_infinite_bounds(self) -> None:
        assert not Uniform(0.0, math.inf).parameters_valid

    def test_mode_is_undefined(self) -> None:
        assert math.isnan(Uniform().mode)


class TestExponential:
    def test_defaults(self) -> None:
        assert Exponential().parameters == (100.0, 10.0)

    def test_method_of_moments(self) -> None:
        exponential = Exponential()
        exponential.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_MOMENTS)
        mean, sd = np.mean(ANNUAL_PEAKS), np.std(ANNUAL_PEAKS, ddof=1)
        assert exponential.parameters == pytest.approx((mean - sd, sd))

    def test_method_of_linear_moments(self) -> None:
        exponential = Exponential()
        exponential.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        l1, l2, _, _ = linear_moments(ANNUAL_PEAKS)
        assert exponential.parameters == pytest.approx((l1 - 2.0 * l2, 2.0 * l2))

    def test_maximum_likelihood(self) -> None:
        sample = Exponential(5.0, 2.0).generate_random_values(500, seed=11)
        xi, alpha = Exponential().mle(sample)
        assert xi == pytest.approx(sample.min(), rel=1e-2)
        assert alpha == pytest.approx(sample.mean() - sample.min(), rel=1e-2)

    def test_non_positive_scale(self) -> None:
        with pytest.raises(ParameterOutOfRangeError, match="alpha"):
            Exponential(0.0, 0.0).cdf(1.0)


class TestTriangular:
    def test_most_likely_value(self) -> None:
        triangular = Triangular(1.0, 2.0, 4.0)
        assert triangular.mode == triangular.most_likely == 2.0

    def test_pdf_peak(self) -> None:
        assert Triangular(0.0, 2.0, 5.0).pdf(2.0) == pytest.approx(0.4)

    @pytest.mark.parametrize(
        "values, message",
        [((2.0, 1.0, 3.0), "min cannot be greater than the mode"), ((0.0, 4.0, 3.0), "mode cannot")],
    )
    def test_constraints(self, values: tuple[float, ...], message: str) -> None:
        with pytest.raises(ParameterOutOfRangeError, match=message):
            Triangular(*values).pdf(1.0)

    def test_method_of_moments(self) -> None:
        sample = [1.0, 2.0, 2.0, 3.0, 7.0]
        triangular = Triangular()
        triangular.estimate(sample, ParameterEstimationMethod.METHOD_OF_MOMENTS)
        assert triangular.parameters == pytest.approx((1.0, 3.0 * 3.0 - 7.0 - 1.0, 7.0))

    def test_mode_estimate_is_clamped(self) -> None:
        triangular = Triangular()
        triangular.estimate([0.0, 10.0, 10.0, 10.0, 10.0], ParameterEstimationMethod.METHOD_OF_MOMENTS)
        assert triangular.most_likely == 10.0


class TestGeneralizedExtremeValue:
    def test_support(self) -> None:
        assert GeneralizedExtremeValue(100.0, 10.0, 0.5).maximum == pytest.approx(120.0)
        assert GeneralizedExtremeValue(100.0, 10.0, -0.5).minimum == pytest.approx(80.0)
        assert GeneralizedExtremeValue(100.0, 10.0, 0.0).support.left == -math.inf

    def test_support_interval(self) -> None:
        support = GeneralizedExtremeValue(100.0, 10.0, 0.5).support
        assert not support.is_bounded
        assert 119.0 in support
        assert 121.0 not in support
        np.testing.assert_array_equal(support.contains([0.0, 130.0]), [True, False])
        assert Uniform(0.0, 2.0).support.is_bounded

    def test_outside_support(self) -> None:
        bounded = GeneralizedExtremeValue(100.0, 10.0, 0.5)
        assert bounded.pdf(130.0) == 0.0
        assert bounded.cdf(130.0) == 1.0

    def test_gumbel_kurtosis(self) -> None:
        assert GeneralizedExtremeValue().kurtosis == pytest.approx(5.4)

    def test_linear_moments_reproduce_sample(self) -> None:
        gev = GeneralizedExtremeValue()
        gev.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        l1, l2, t3, _ = linear_moments(ANNUAL_PEAKS)
        xi, alpha, kappa = gev.parameters
        # L-moments of the fitted distribution
        g = math.gamma(1.0 + kappa)
        assert xi + alpha * (1.0 - g) / kappa == pytest.approx(l1, rel=1e-9)
        assert alpha * (1.0 - 2.0**-kappa) * g / kappa == pytest.approx(l2, rel=1e-9)
        assert 2.0 * (1.0 - 3.0**-kappa) / (1.0 - 2.0**-kappa) - 3.0 == pytest.approx(t3, abs=1e-3)

    def test_large_skew_uses_root_finding(self) -> None:
        xi, alpha, kappa = GeneralizedExtremeValue().parameters_from_linear_moments((10.0, 2.0, 0.7, 0.5))
        assert 2.0 * (1.0 - 3.0**-kappa) / (1.0 - 2.0**-kappa) - 3.0 == pytest.approx(0.7, abs=1e-6)
        assert alpha > 0.0

    def test_maximum_likelihood_improves_likelihood(self) -> None:
        gev = GeneralizedExtremeValue()
        gev.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_LINEAR_MOMENTS)
        start = gev.log_likelihood(ANNUAL_PEAKS)
        gev.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.MAXIMUM_LIKELIHOOD)
        assert gev.log_likelihood(ANNUAL_PEAKS) >= start - 1e-6

    def test_method_of_moments_matches_skewness(self) -> None:
        gev = GeneralizedExtremeValue()
        gev.estimate(ANNUAL_PEAKS, ParameterEstimationMethod.METHOD_OF_MOMENTS)
        mean = np.mean(ANNUAL_PEAKS)
        assert gev.mean == pytest.approx(mean, rel=1e-6)
