"""
Sample Statistics
=================

Descriptive statistics used by the estimation routines: ranks and plotting
positions, product moments, L-moments and rank/linear correlation.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from enum import Enum
from math import nan

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats as _sp_stats


class PlottingPosition(float, Enum):
    """
    Plotting position formulas ``(i - α) / (n + 1 - 2α)`` keyed by ``α``.

    Attributes
    ----------
    WEIBULL
        ``α = 0``, unbiased exceedance probabilities for any distribution.
    MEDIAN
        ``α = 0.3175``, median exceedance probabilities.
    BLOM
        ``α = 0.375``, Normal and Gamma samples.
    CUNNANE
        ``α = 0.4``, GEV samples.
    GRINGORTEN
        ``α = 0.44``, Exponential, Gumbel and Weibull samples.
    HAZEN
        ``α = 0.5``.
    """

    WEIBULL = 0.0
    MEDIAN = 0.3175
    BLOM = 0.375
    CUNNANE = 0.4
    GRINGORTEN = 0.44
    HAZEN = 0.5


def _as_sample(data: ArrayLike) -> NDArray[np.float64]:
    sample = np.asarray(data, dtype=float)
    if sample.ndim != 1:
        raise ValueError("The sample must be one-dimensional.")
    return sample


def ranks(data: ArrayLike) -> NDArray[np.float64]:
    """
    Ranks ``1..n`` of a sample, ties receiving their average rank.

    Parameters
    ----------
    data : array_like
        One-dimensional sample.

    Returns
    -------
    ndarray
        Rank of every element, in the order of ``data``.
    """
    return np.asarray(_sp_stats.rankdata(_as_sample(data), method="average"), dtype=float)


def plotting_positions(
    n: int, method: PlottingPosition | float = PlottingPosition.WEIBULL
) -> NDArray[np.float64]:
    """
    Non-exceedance probabilities of the ordered positions ``1..n``.

    Parameters
    ----------
    n : int
        Sample size, at least 1.
    method : PlottingPosition or float, default WEIBULL
        Formula or a raw ``α`` in ``[0, 1)``.

    Returns
    -------
    ndarray
        Array of ``n`` increasing probabilities in ``(0, 1)``.
    """
    if n < 1:
        raise ValueError("The sample size must be at least 1.")
    alpha = float(method)
    if not 0.0 <= alpha < 1.0:
        raise ValueError("The plotting position parameter must be in [0, 1).")
    i = np.arange(1, n + 1, dtype=float)
    return (i - alpha) / (n + 1 - 2.0 * alpha)


def product_moments(data: ArrayLike) -> tuple[float, float, float, float]:
    """
    Mean, standard deviation, skewness and excess kurtosis of a sample.

    The standard deviation, skewness and kurtosis are the bias-corrected
    sample estimators. An empty sample gives ``nan`` for every moment.
    """
    sample = _as_sample(data)
    if sample.size == 0:
        return nan, nan, nan, nan
    mean = float(np.mean(sample))
    sd = float(np.std(sample, ddof=1)) if sample.size > 1 else nan
    skew = float(_sp_stats.skew(sample, bias=False)) if sample.size > 2 else nan
    kurt = float(_sp_stats.kurtosis(sample, fisher=True, bias=False)) if sample.size > 3 else nan
    return mean, sd, skew, kurt


def linear_moments(data: ArrayLike) -> tuple[float, float, float, float]:
    """
    Sample L-moments from unbiased probability weighted moments.

    Parameters
    ----------
    data : array_like
        Sample, in any order.

    Returns
    -------
    tuple[float, float, float, float]
        L-mean ``λ1``, L-scale ``λ2``, L-skewness ``τ3`` and L-kurtosis ``τ4``.
        An empty sample gives ``nan`` for every moment.

    Notes
    -----
    Hosking, J.R.M. (1990). L-moments: analysis and estimation of
    distributions using linear combinations of order statistics.
    """
    x = np.sort(_as_sample(data))
    n = x.size
    if n == 0:
        return nan, nan, nan, nan

    i = np.arange(1, n + 1, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        b0 = x.sum() / n
        b1 = np.sum((i - 1) / (n - 1) * x) / n if n > 1 else nan
        b2 = np.sum((i - 1) * (i - 2) / ((n - 1) * (n - 2)) * x) / n if n > 2 else nan
        b3 = (
            np.sum((i - 1) * (i - 2) * (i - 3) / ((n - 1) * (n - 2) * (n - 3)) * x) / n
            if n > 3
            else nan
        )
        l2 = 2.0 * b1 - b0
        t3 = 2.0 * (3.0 * b2 - b0) / l2 - 3.0
        t4 = 5.0 * (2.0 * (2.0 * b3 - 3.0 * b2) + b0) / l2 + 6.0
    return float(b0), float(l2), float(t3), float(t4)


def paired_sample(x: ArrayLike, y: ArrayLike) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Convert a paired sample to float arrays.

    Raises
    ------
    ValueError
        If the samples are not one-dimensional, differ in length, hold fewer
        than two pairs, contain ``nan`` or infinite values, or if either of
        them is constant.
    """
    a, b = _as_sample(x), _as_sample(y)
    if a.size != b.size:
        raise ValueError("The samples must have the same length.")
    if a.size < 2:
        raise ValueError("At least two pairs are required.")
    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
        raise ValueError("The samples must contain only finite values.")
    if np.ptp(a) == 0.0 or np.ptp(b) == 0.0:
        raise ValueError("The samples must not be constant.")
    return a, b


def kendalls_tau(x: ArrayLike, y: ArrayLike) -> float:
    """Kendall's rank correlation (tau-b, adjusted for ties)."""
    a, b = paired_sample(x, y)
    return float(_sp_stats.kendalltau(a, b).statistic)


def pearson(x: ArrayLike, y: ArrayLike) -> float:
    """Pearson's product-moment correlation coefficient."""
    a, b = paired_sample(x, y)
    return float(_sp_stats.pearsonr(a, b).statistic)


def spearman(x: ArrayLike, y: ArrayLike) -> float:
    """Spearman's rank correlation coefficient."""
    a, b = paired_sample(x, y)
    return float(_sp_stats.spearmanr(a, b).statistic)


__all__ = [
    "PlottingPosition",
    "kendalls_tau",
    "linear_moments",
    "paired_sample",
    "pearson",
    "plotting_positions",
    "product_moments",
    "ranks",
    "spearman",
]
