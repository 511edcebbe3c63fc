from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import math

import numpy as np
import pytest

from pysatl_numerics.statistics import (
    PlottingPosition,
    kendalls_tau,
    linear_moments,
    paired_sample,
    pearson,
    plotting_positions,
    product_moments,
    ranks,
    spearman,
)

SAMPLE = [
    122, 244, 214, 173, 229, 156, 212, 263, 146, 183, 161, 205, 135, 331, 225, 174, 98.8, 149,
    238, 262, 132, 235, 216, 240, 230, 192, 195, 172, 173, 172, 153, 142, 317, 161, 201, 204,
    194, 164, 183, 161, 167, 179, 185, 117, 192, 337, 125, 166, 99.1, 202, 230, 158, 262, 154,
    164, 182, 164, 183, 171, 250, 184, 205, 237, 177, 239, 187, 180, 173, 174,
]

ANNUAL_PEAKS = [
    1953, 1939, 1677, 1692, 2051, 2371, 2022, 1521, 1448, 1825, 1363, 1760, 1672, 1603, 1244,
    1521, 1783, 1560, 1357, 1673, 1625, 1425, 1688, 1577, 1736, 1640, 1584, 1293, 1277, 1742,
    1491,
]


class TestRanks:
    def test_ties_get_average_rank(self) -> None:
        np.testing.assert_array_equal(ranks([10, 30, 20, 20]), [1.0, 4.0, 2.5, 2.5])

    def test_rejects_matrices(self) -> None:
        with pytest.raises(ValueError):
            ranks([[1, 2], [3, 4]])


class TestPlottingPositions:
    def test_weibull(self) -> None:
        np.testing.assert_allclose(plotting_positions(4), [0.2, 0.4, 0.6, 0.8])

    def test_hazen(self) -> None:
        np.testing.assert_allclose(
            plotting_positions(4, PlottingPosition.HAZEN), [0.125, 0.375, 0.625, 0.875]
        )

    def test_raw_alpha(self) -> None:
        np.testing.assert_allclose(
            plotting_positions(3, 0.44), plotting_positions(3, PlottingPosition.GRINGORTEN)
        )

    @pytest.mark.parametrize("n, alpha", [(0, 0.0), (5, 1.0), (5, -0.1)])
    def test_invalid_arguments(self, n: int, alpha: float) -> None:
        with pytest.raises(ValueError):
            plotting_positions(n, alpha)


class TestMoments:
    def test_product_moments(self) -> None:
        mean, sd, skew, kurt = product_moments(SAMPLE)
        assert mean == pytest.approx(191.317391304348, abs=1e-10)
        assert sd == pytest.approx(47.9616113541118, abs=1e-10)
        assert skew == pytest.approx(0.8605451107461, abs=1e-10)
        assert kurt == pytest.approx(1.3434868130194, abs=1e-10)

    def test_product_moments_small_samples(self) -> None:
        assert all(math.isnan(m) for m in product_moments([]))
        mean, sd, skew, kurt = product_moments([2.0, 4.0])
        assert mean == 3.0
        assert sd == pytest.approx(math.sqrt(2.0))
        assert math.isnan(skew)
        assert math.isnan(kurt)

    def test_linear_moments(self) -> None:
        l1, l2, t3, t4 = linear_moments(ANNUAL_PEAKS)
        assert l1 == pytest.approx(1648.8064516, abs=1e-7)
        assert l2 == pytest.approx(138.2365591, abs=1e-7)
        assert t3 == pytest.approx(0.1033903, abs=1e-7)
        assert t4 == pytest.approx(0.1940943, abs=1e-7)

    def test_linear_moments_ignore_order(self) -> None:
        assert linear_moments(ANNUAL_PEAKS) == pytest.approx(linear_moments(sorted(ANNUAL_PEAKS)))

    def test_linear_moments_empty(self) -> None:
        assert all(math.isnan(m) for m in linear_moments([]))


class TestCorrelation:
    def setup_method(self) -> None:
        self.x = [1.0, 2.0, 3.0, 4.0, 5.0]
        self.y = [2.0, 1.0, 4.0, 3.0, 5.0]

    def test_kendalls_tau(self) -> None:
        # 8 concordant and 2 discordant pairs
        assert kendalls_tau(self.x, self.y) == pytest.approx(0.6)

    def test_spearman(self) -> None:
        assert spearman(self.x, self.y) == pytest.approx(0.8)

    def test_pearson(self) -> None:
        assert pearson(self.x, self.y) == pytest.approx(0.8)

    def test_perfect_dependence(self) -> None:
        assert kendalls_tau(self.x, self.x) == pytest.approx(1.0)
        assert spearman(self.x, [-v for v in self.x]) == pytest.approx(-1.0)

    @pytest.mark.parametrize("x, y", [([1.0, 2.0], [1.0]), ([1.0], [1.0])])
    def test_invalid_pairs(self, x: list[float], y: list[float]) -> None:
        with pytest.raises(ValueError):
            kendalls_tau(x, y)

    @pytest.mark.parametrize("correlation", [kendalls_tau, spearman, pearson])
    def test_constant_sample(self, correlation) -> None:
        with pytest.raises(ValueError, match="constant"):
            correlation([3.0, 3.0, 3.0, 3.0], self.y[:4])

    @pytest.mark.parametrize("bad", [math.nan, math.inf])
    def test_non_finite_sample(self, bad: float) -> None:
        with pytest.raises(ValueError, match="finite"):
            kendalls_tau([1.0, bad, 3.0], [1.0, 2.0, 3.0])

    def test_paired_sample(self) -> None:
        a, b = paired_sample(self.x, self.y)
        assert a.dtype == np.float64
        np.testing.assert_array_equal(b, self.y)
