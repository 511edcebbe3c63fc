"""
Root Finding
============

Scalar root finders used across the library: geometric bracket expansion,
Brent's method, Newton-Raphson (plain and safeguarded) and bisection.

Every solver accepts ``report_failure``. When it is ``True`` a failure raises
:class:`~pysatl_numerics.errors.NumericalError`; otherwise ``nan`` is returned
and the failure is only logged.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import isfinite, nan
from typing import TYPE_CHECKING

from scipy import optimize as _sp_optimize

from pysatl_numerics.errors import NumericalError
from pysatl_numerics.types import MACHINE_EPSILON

if TYPE_CHECKING:
    from pysatl_numerics.types import ScalarFunc

logger = logging.getLogger(__name__)

BRACKET_EXPANSION_FACTOR = 1.6


def _fail(message: str, report_failure: bool) -> float:
    if report_failure:
        raise NumericalError(message)
    logger.debug("Root finder failed: %s", message)
    return nan


def brent_bracket(
    f: ScalarFunc,
    lower: float,
    upper: float,
    max_iterations: int = 10,
) -> tuple[bool, float, float]:
    """
    Expand ``[lower, upper]`` geometrically until ``f`` changes sign.

    At each step the end with the smaller ``|f|`` is pushed outwards by
    ``1.6`` times the current width.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function.
    lower, upper : float
        Initial interval.
    max_iterations : int, default 10
        Maximum number of expansions.

    Returns
    -------
    tuple[bool, float, float]
        ``(found, lower, upper)`` where ``found`` tells whether the returned
        interval brackets a sign change.

    Raises
    ------
    ValueError
        If ``lower == upper``.
    """
    if lower == upper:
        raise ValueError("The lower and upper bounds of the bracket must differ.")
    a, b = float(lower), float(upper)
    fa, fb = float(f(a)), float(f(b))
    for _ in range(max_iterations):
        if fa * fb <= 0.0:
            return True, a, b
        if abs(fa) < abs(fb):
            a += BRACKET_EXPANSION_FACTOR * (a - b)
            fa = float(f(a))
        else:
            b += BRACKET_EXPANSION_FACTOR * (b - a)
            fb = float(f(b))
    return fa * fb <= 0.0, a, b


def brent_solve(
    f: ScalarFunc,
    lower: float,
    upper: float,
    tolerance: float = 1e-8,
    max_iterations: int = 1000,
    report_failure: bool = True,
) -> float:
    """
    Find a root of ``f`` inside ``[lower, upper]`` with Brent's method.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function with ``f(lower)`` and ``f(upper)`` of opposite signs.
    lower, upper : float
        Bracketing interval.
    tolerance : float, default 1e-8
        Absolute tolerance on the root.
    max_iterations : int, default 1000
        Iteration budget.
    report_failure : bool, default True
        Raise on failure instead of returning ``nan``.

    Returns
    -------
    float
        Root of ``f``.

    Raises
    ------
    ValueError
        If ``upper < lower``.
    NumericalError
        If the interval does not bracket a root or the method does not converge.
    """
    if upper < lower:
        raise ValueError("The upper bound cannot be less than the lower bound.")

    try:
        root, result = _sp_optimize.brentq(
            f,
            lower,
            upper,
            xtol=tolerance,
            maxiter=max_iterations,
            full_output=True,
            disp=False,
        )
    except ValueError as e:
        return _fail(f"Brent's method failed on [{lower}, {upper}]: {e}", report_failure)

    if not result.converged or not isfinite(root):
        return _fail(
            f"Brent's method did not converge in {max_iterations} iterations: {result.flag}",
            report_failure,
        )
    return float(root)


def newton_raphson(
    f: ScalarFunc,
    df: ScalarFunc,
    initial: float,
    tolerance: float = 1e-6,
    max_iterations: int = 100,
    report_failure: bool = True,
) -> float:
    """
    Newton-Raphson iteration ``x <- x - f(x) / f'(x)``.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function.
    df : Callable[[float], float]
        Derivative of ``f``.
    initial : float
        Starting point.
    tolerance : float, default 1e-6
        Stop once the step size falls below this value.
    max_iterations : int, default 100
        Iteration budget.
    report_failure : bool, default True
        Raise on failure instead of returning ``nan``.

    Returns
    -------
    float
        Root of ``f``.
    """
    x = float(initial)
    for _ in range(max_iterations):
        fx = float(f(x))
        dfx = float(df(x))
        if not isfinite(fx) or not isfinite(dfx):
            return _fail(f"Newton-Raphson hit a non-finite value at x={x}.", report_failure)
        if abs(dfx) < MACHINE_EPSILON:
            return _fail(f"Newton-Raphson derivative vanished at x={x}.", report_failure)
        dx = fx / dfx
        x -= dx
        if abs(dx) <= tolerance:
            return x
    return _fail(
        f"Newton-Raphson did not converge in {max_iterations} iterations.", report_failure
    )


def robust_newton_raphson(
    f: ScalarFunc,
    df: ScalarFunc,
    initial: float,
    lower: float,
    upper: float,
    tolerance: float = 1e-8,
    max_iterations: int = 1000,
    report_failure: bool = True,
) -> float:
    """
    Newton-Raphson safeguarded by bisection inside ``[lower, upper]``.

    A bisection step replaces the Newton step whenever the latter would leave
    the current bracket or would not halve the previous step.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function with a sign change on ``[lower, upper]``.
    df : Callable[[float], float]
        Derivative of ``f``.
    initial : float
        Starting point; the bracket midpoint is used when it lies outside.
    lower, upper : float
        Bracketing interval.
    tolerance : float, default 1e-8
        Stop once the step size falls below this value.
    max_iterations : int, default 1000
        Iteration budget.
    report_failure : bool, default True
        Raise on failure instead of returning ``nan``.

    Returns
    -------
    float
        Root of ``f``.

    Raises
    ------
    ValueError
        If ``upper < lower``.
    NumericalError
        If the interval does not bracket a root or the iteration does not converge.
    """
    if upper < lower:
        raise ValueError("The upper bound cannot be less than the lower bound.")

    fl, fh = float(f(lower)), float(f(upper))
    if fl == 0.0:
        return float(lower)
    if fh == 0.0:
        return float(upper)
    if fl * fh > 0.0:
        return _fail(f"The interval [{lower}, {upper}] does not bracket a root.", report_failure)

    # orient the search so that f(xl) < 0
    xl, xh = (float(lower), float(upper)) if fl < 0.0 else (float(upper), float(lower))
    rts = float(initial) if lower <= initial <= upper else 0.5 * (lower + upper)
    dx_old = abs(upper - lower)
    dx = dx_old
    fx, dfx = float(f(rts)), float(df(rts))

    for _ in range(max_iterations):
        out_of_range = ((rts - xh) * dfx - fx) * ((rts - xl) * dfx - fx) > 0.0
        if out_of_range or abs(2.0 * fx) > abs(dx_old * dfx):
            dx_old = dx
            dx = 0.5 * (xh - xl)
            rts = xl + dx
            if xl == rts:
                return rts
        else:
            dx_old = dx
            dx = fx / dfx
            previous = rts
            rts -= dx
            if previous == rts:
                return rts
        if abs(dx) < tolerance:
            return rts
        fx, dfx = float(f(rts)), float(df(rts))
        if fx < 0.0:
            xl = rts
        else:
            xh = rts

    return _fail(
        f"Safeguarded Newton-Raphson did not converge in {max_iterations} iterations.",
        report_failure,
    )


def bisection(
    f: ScalarFunc,
    lower: float,
    upper: float,
    tolerance: float = 1e-8,
    max_iterations: int = 1000,
    report_failure: bool = True,
) -> float:
    """
    Bisection on ``[lower, upper]``.

    Parameters
    ----------
    f : Callable[[float], float]
        Scalar function with a sign change on ``[lower, upper]``.
    lower, upper : float
        Bracketing interval.
    tolerance : float, default 1e-8
        Absolute tolerance on the root.
    max_iterations : int, default 1000
        Iteration budget.
    report_failure : bool, default True
        Raise on failure instead of returning ``nan``.

    Returns
    -------
    float
        Root of ``f``.
    """
    if upper < lower:
        raise ValueError("The upper bound cannot be less than the lower bound.")

    a, b = float(lower), float(upper)
    fa = float(f(a))
    if fa == 0.0:
        return a
    if fa * float(f(b)) > 0.0:
        return _fail(f"The interval [{lower}, {upper}] does not bracket a root.", report_failure)

    for _ in range(max_iterations):
        mid = 0.5 * (a + b)
        fm = float(f(mid))
        if fm == 0.0 or 0.5 * (b - a) < tolerance:
            return mid
        if fa * fm < 0.0:
            b = mid
        else:
            a, fa = mid, fm

    return _fail(f"Bisection did not converge in {max_iterations} iterations.", report_failure)


__all__ = [
    "bisection",
    "brent_bracket",
    "brent_solve",
    "newton_raphson",
    "robust_newton_raphson",
]
