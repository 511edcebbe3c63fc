"""
PySATL Numerics
===============

Numerical and statistical library: univariate distributions and bivariate
copulas with dependency estimation, built on general-purpose optimizers,
root finders and sample statistics.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from importlib.metadata import version

from .distributions import *
from .distributions import __all__ as _distr_all
from .errors import *
from .errors import __all__ as _errors_all
from .mathematics import *
from .mathematics import __all__ as _mathematics_all
from .statistics import *
from .statistics import __all__ as _statistics_all
from .types import *
from .types import __all__ as _types_all

__version__ = version("pysatl-numerics")
__all__ = [
    "__version__",
    *_distr_all,
    *_errors_all,
    *_mathematics_all,
    *_statistics_all,
    *_types_all,
]

del _distr_all
del _errors_all
del _mathematics_all
del _statistics_all
del _types_all
