# kernelstat/core/types.py

"""
Core type annotations for the KernelStat package.

This module collects the type aliases shared across the package so that the
signatures of kernel evaluation, autocorrelation and bandwidth estimation
functions read consistently.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Literal, Sequence, TypeVar, Union

import numpy as np
import pandas as pd

# Type variables for generic programming
T = TypeVar('T')  # Generic type
P = TypeVar('P', bound='ParameterBase')  # Parameter container type

# NumPy array type aliases
Vector = np.ndarray  # 1D array
LagArray = np.ndarray  # 1D integer array of lags

# Input accepted wherever a univariate sample is expected
TimeSeriesData = Union[np.ndarray, pd.Series, Sequence[float]]

# Lags may be given as a range, a sequence of integers or an integer array
LagSpec = Union[range, Sequence[int], np.ndarray]

# Anything a kernel function can be evaluated at
KernelInput = Union[float, int, np.ndarray, Sequence[float]]

# Autocorrelation provider contract: (sample, lags) -> one value per lag
AutocorrelationProvider = Callable[[np.ndarray, np.ndarray], np.ndarray]

# Autocorrelation computation method
AutocorrelationMethod = Literal["direct", "fft"]

# Configuration types
ConfigDict = Dict[str, Any]
ConfigPath = Union[str, Path]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
