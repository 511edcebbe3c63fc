"""
PySATL Numerics unit tests
==========================

Numerical core, sample statistics, univariate distributions and bivariate
copulas with their estimation.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"
