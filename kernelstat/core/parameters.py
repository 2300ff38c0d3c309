# kernelstat/core/parameters.py

"""
Parameter containers and validation helpers for the KernelStat package.

Kernel functions, bandwidth methods and HAC variance methods are all immutable
dataclasses that validate their fields on construction. This module provides the
shared base class and the small validators they use, so a bad parameter fails
immediately with a :class:`~kernelstat.core.exceptions.ParameterError` instead of
surfacing later inside an estimation call.
"""

import math
import numbers
from dataclasses import asdict, is_dataclass, replace
from typing import Any, ClassVar, Dict, Optional, TypeVar

from .exceptions import ParameterError

P = TypeVar('P', bound='ParameterBase')


class ParameterBase:
    """Base class for all parameter containers.

    Subclasses are frozen dataclasses that call :meth:`validate` from
    ``__post_init__``.
    """

    #: Short string name of the container (e.g. ``"bartlett"``)
    name: ClassVar[str] = ""
    #: Label used on the first line of :meth:`summary`
    _summary_label: ClassVar[str] = "parameters"

    def validate(self) -> None:
        """Validate parameter constraints.

        Raises:
            ParameterError: If parameter constraints are violated
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of parameters
        """
        if is_dataclass(self):
            return asdict(self)
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def copy(self: P) -> P:
        """Create a copy of the parameter object.

        The copy is re-validated on construction.

        Returns:
            P: Copy of the parameter object
        """
        if is_dataclass(self):
            return replace(self)
        return type(self)(**self.to_dict())

    def summary(self) -> str:
        """Generate a text summary of the parameter container.

        Returns:
            str: Name on the first line and one indented line per parameter
        """
        lines = [f"{self._summary_label} = {self.name}"]
        for key, value in self.to_dict().items():
            if isinstance(value, dict):
                continue
            lines.append(f"    {key} = {value}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a parameter is strictly positive.

    Args:
        value: Parameter value to validate
        param_name: Name of the parameter for error messages

    Returns:
        float: The validated parameter value

    Raises:
        ParameterError: If the parameter is not a positive number
    """
    if not isinstance(value, numbers.Real) or math.isnan(value) or value <= 0:
        raise ParameterError(
            f"Parameter {param_name} must be strictly positive, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f"{param_name} > 0"
        )
    return value


def validate_range(value: float, param_name: str,
                   min_value: Optional[float] = None,
                   max_value: Optional[float] = None,
                   min_inclusive: bool = True,
                   max_inclusive: bool = True) -> float:
    """Validate that a parameter is within a specified range.

    Args:
        value: Parameter value to validate
        param_name: Name of the parameter for error messages
        min_value: Lower bound of the range
        max_value: Upper bound of the range
        min_inclusive: Whether the lower bound is attainable
        max_inclusive: Whether the upper bound is attainable

    Returns:
        float: The validated parameter value

    Raises:
        ParameterError: If the parameter is outside the specified range
    """
    if not isinstance(value, numbers.Real) or math.isnan(value):
        raise ParameterError(
            f"Parameter {param_name} must be a real number, got {value!r}",
            param_name=param_name,
            param_value=value
        )

    lower_ok = (min_value is None or
                (value >= min_value if min_inclusive else value > min_value))
    upper_ok = (max_value is None or
                (value <= max_value if max_inclusive else value < max_value))
    if not (lower_ok and upper_ok):
        left = "[" if min_inclusive else "("
        right = "]" if max_inclusive else ")"
        low = "-inf" if min_value is None else min_value
        high = "inf" if max_value is None else max_value
        raise ParameterError(
            f"Parameter {param_name} must lie in {left}{low}, {high}{right}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f"{param_name} in {left}{low}, {high}{right}"
        )
    return value


def validate_integer(value: int, param_name: str, min_value: int = 1) -> int:
    """Validate that a parameter is an integer no smaller than ``min_value``.

    Raises:
        ParameterError: If the parameter is not an integer or is too small
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ParameterError(
            f"Parameter {param_name} must be an integer, got {value!r}",
            param_name=param_name,
            param_value=value
        )
    if value < min_value:
        raise ParameterError(
            f"Parameter {param_name} must be at least {min_value}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f"{param_name} >= {min_value}"
        )
    return int(value)
