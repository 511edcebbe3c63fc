"""
Parameter containers and constraints for distributions and copulas.

Every family declares its parameters as a frozen, slotted dataclass whose
predicate methods are marked with :func:`constraint`. The :func:`parameters`
decorator turns a plain class into such a dataclass and collects its
constraints in declaration order.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from abc import ABC
from dataclasses import astuple, dataclass, fields, is_dataclass
from functools import wraps
from inspect import isfunction
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from pysatl_numerics.errors import ParameterOutOfRangeError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any, ClassVar


@dataclass(slots=True, frozen=True)
class ParameterConstraint:
    """
    Constraint on parameter values.

    Parameters
    ----------
    description : str
        Human-readable description, used as the error message.
    parameter : str
        Name of the parameter blamed when the constraint fails.
    check : Callable[[Any], bool]
        Predicate returning True if the constraint is satisfied.
    """

    description: str
    parameter: str
    check: Callable[[Any], bool]


class Parameters(ABC):
    """
    Base class for the parameter vectors of distribution families.

    Subclasses are produced by the :func:`parameters` decorator.
    """

    _constraints: ClassVar[list[ParameterConstraint]] = []

    @classmethod
    def names(cls) -> tuple[str, ...]:
        """Names of the parameters in declaration order."""
        return tuple(f.name for f in fields(cls))  # type: ignore[arg-type]

    @property
    def values(self) -> tuple[float, ...]:
        """Parameter values in declaration order."""
        return tuple(float(v) for v in astuple(self))  # type: ignore[call-overload]

    @property
    def constraints(self) -> list[ParameterConstraint]:
        """Constraints declared by this family."""
        return self._constraints

    def validate(self, raise_error: bool = True) -> ParameterOutOfRangeError | None:
        """
        Check every constraint in declaration order.

        Parameters
        ----------
        raise_error : bool, default True
            Raise the first violation instead of returning it.

        Returns
        -------
        ParameterOutOfRangeError or None
            The first violated constraint, or None if all hold.

        Raises
        ------
        ParameterOutOfRangeError
            If a constraint does not hold and ``raise_error`` is set.
        """
        for c in self._constraints:
            if not c.check(self):
                error = ParameterOutOfRangeError(c.parameter, c.description)
                if raise_error:
                    raise error
                return error
        return None


P = ParamSpec("P")


def constraint(description: str, parameter: str) -> Callable[[Callable[P, bool]], Callable[P, bool]]:
    """
    Decorator to mark an instance method as a parameter constraint.

    Parameters
    ----------
    description : str
        Human-readable description of the constraint.
    parameter : str
        Name of the parameter the constraint guards.

    Returns
    -------
    Callable[[Callable[P, bool]], Callable[P, bool]]
        Decorator that marks the function as a constraint.
    """

    def decorator(func: Callable[P, bool]) -> Callable[P, bool]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> bool:
            return bool(func(*args, **kwargs))

        setattr(wrapper, "__is_constraint", True)
        setattr(wrapper, "__constraint_description", description)
        setattr(wrapper, "__constraint_parameter", parameter)
        return wrapper

    return decorator


def _collect_constraints(cls: type[Parameters]) -> list[ParameterConstraint]:
    collected: list[ParameterConstraint] = []
    for name, attr in cls.__dict__.items():
        if isinstance(attr, (staticmethod, classmethod)) and getattr(
            attr.__func__, "__is_constraint", False
        ):
            raise TypeError(f"@constraint '{name}' must be an instance method")
        if not (callable(attr) and isfunction(attr)):
            continue
        if getattr(attr, "__is_constraint", False):
            collected.append(
                ParameterConstraint(
                    description=getattr(attr, "__constraint_description", name),
                    parameter=getattr(attr, "__constraint_parameter", name),
                    check=attr,
                )
            )
    return collected


T = TypeVar("T", bound="Parameters")


def parameters(cls: type[T]) -> type[T]:
    """
    Class decorator turning ``cls`` into a frozen parameter dataclass.

    Constraints inherited from parent parameter classes are checked first.
    """
    if not is_dataclass(cls):
        cls = dataclass(slots=True, frozen=True)(cls)
    inherited = [c for base in cls.__bases__ for c in getattr(base, "_constraints", [])]
    cls._constraints = inherited + _collect_constraints(cls)
    return cls


__all__ = [
    "ParameterConstraint",
    "Parameters",
    "constraint",
    "parameters",
]
