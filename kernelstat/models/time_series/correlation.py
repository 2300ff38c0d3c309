# kernelstat/models/time_series/correlation.py
"""
Sample autocovariances and autocorrelations over arbitrary lag sets.

Bandwidth estimators consume autocorrelations a block of lags at a time, so the
functions here compute values only for the lags requested rather than for every
lag from zero up to a maximum. Both follow the population-scaling convention

    gamma(k) = (1/n) * sum_{t=k}^{n-1} (x_t - xbar)(x_{t-k} - xbar)
    rho(k)   = gamma(k) / gamma(0)

so that ``gamma(0) = ((n-1)/n) * sample_variance`` and ``gamma(k) = gamma(0) * rho(k)``.

Two backends are available:

- ``"direct"``: an O(n) loop per requested lag, compiled with Numba (or a
  vectorised NumPy loop when Numba is disabled in the configuration).
- ``"fft"``: delegates to :func:`statsmodels.tsa.stattools.acovf`, which computes
  every lag up to the largest requested one in O(n log n).
"""

import logging
from typing import Optional

import numpy as np
from numba import jit
from statsmodels.tsa.stattools import acovf

from kernelstat.core.config import get_config
from kernelstat.core.exceptions import ParameterError, warn_numeric
from kernelstat.core.types import AutocorrelationMethod, LagSpec, TimeSeriesData
from kernelstat.core.validation import validate_lags, validate_sample

logger = logging.getLogger("kernelstat.models.time_series.correlation")

_METHODS = ("direct", "fft")


@jit(nopython=True, cache=True)
def _autocovariance_numba(x_centered: np.ndarray, lags: np.ndarray) -> np.ndarray:
    """
    Numba-accelerated autocovariances of a demeaned series at the given lags.

    Args:
        x_centered: Demeaned input series (1D array)
        lags: Lags to compute (1D integer array, each in [0, n-1])

    Returns:
        Array of autocovariances, one per lag
    """
    n = len(x_centered)
    result = np.zeros(len(lags))

    for i in range(len(lags)):
        lag = lags[i]
        cov = 0.0
        for t in range(lag, n):
            cov += x_centered[t] * x_centered[t - lag]
        result[i] = cov / n

    return result


def _autocovariance_numpy(x_centered: np.ndarray, lags: np.ndarray) -> np.ndarray:
    n = len(x_centered)
    return np.array(
        [np.dot(x_centered[lag:], x_centered[:n - lag]) / n for lag in lags],
        dtype=np.float64
    )


def _autocovariance_fft(x: np.ndarray, lags: np.ndarray) -> np.ndarray:
    full = acovf(x, adjusted=False, demean=True, fft=True, nlag=int(lags.max()))
    return np.asarray(full, dtype=np.float64)[lags]


def _resolve_method(method: Optional[str]) -> str:
    if method is None:
        method = get_config("core", "autocorrelation_method", "direct")
    if method not in _METHODS:
        raise ParameterError(
            f"Unknown autocorrelation method: {method}",
            param_name="method",
            param_value=method,
            constraint=f"one of {list(_METHODS)}"
        )
    return method


def _is_constant(x: np.ndarray, variance: float) -> bool:
    """Whether ``x`` is constant up to rounding, relative to its own scale."""
    scale = float(np.max(np.abs(x)))
    tolerance = get_config("numerical", "zero_variance_tolerance", 1e-15)
    return bool(np.ptp(x) == 0 or np.sqrt(variance) <= tolerance * scale)


def _autocovariance_values(x: np.ndarray, lags: np.ndarray, method: str) -> np.ndarray:
    """Autocovariances of an already validated sample at already validated lags."""
    if lags.size == 0:
        return np.empty(0, dtype=np.float64)

    if method == "fft":
        return _autocovariance_fft(x, lags)

    x_centered = x - np.mean(x)
    if get_config("core", "enable_numba", True):
        return _autocovariance_numba(x_centered, lags)
    return _autocovariance_numpy(x_centered, lags)


def autocovariance(data: TimeSeriesData,
                   lags: LagSpec,
                   method: Optional[AutocorrelationMethod] = None) -> np.ndarray:
    """
    Compute sample autocovariances at the requested lags.

    Args:
        data: Univariate sample (list, NumPy array or pandas Series)
        lags: Lags to compute, each in ``[0, n-1]``
        method: ``"direct"`` or ``"fft"``; defaults to the configured method

    Returns:
        Array of autocovariances, one per requested lag, in the order given

    Raises:
        InsufficientDataError: If the sample has fewer than 2 observations
        ParameterError: If a lag is out of range or the method is unknown

    Examples:
        >>> from kernelstat.models.time_series.correlation import autocovariance
        >>> autocovariance([1.0, 2.0, 1.0, 2.0], range(0, 3))
        array([ 0.25  , -0.1875,  0.125 ])
    """
    x = validate_sample(data)
    lag_array = validate_lags(lags, len(x))
    return _autocovariance_values(x, lag_array, _resolve_method(method))


def autocorrelation(data: TimeSeriesData,
                    lags: LagSpec,
                    method: Optional[AutocorrelationMethod] = None) -> np.ndarray:
    """
    Compute sample autocorrelations at the requested lags.

    The autocorrelation at lag ``k`` is ``gamma(k) / gamma(0)`` and does not
    depend on the units of the data. If the sample is constant up to rounding
    (relative to its magnitude), a :class:`~kernelstat.core.exceptions.NumericWarning`
    is issued and zeros are returned.

    Args:
        data: Univariate sample (list, NumPy array or pandas Series)
        lags: Lags to compute, each in ``[0, n-1]``
        method: ``"direct"`` or ``"fft"``; defaults to the configured method

    Returns:
        Array of autocorrelations, one per requested lag, in the order given

    Raises:
        InsufficientDataError: If the sample has fewer than 2 observations
        ParameterError: If a lag is out of range or the method is unknown

    Examples:
        >>> from kernelstat.models.time_series.correlation import autocorrelation
        >>> autocorrelation([1.0, 2.0, 1.0, 2.0], [1, 2])
        array([-0.75,  0.5 ])
    """
    x = validate_sample(data)
    lag_array = validate_lags(lags, len(x))
    resolved = _resolve_method(method)

    variance = float(np.mean((x - np.mean(x)) ** 2))
    if _is_constant(x, variance):
        warn_numeric(
            "Sample has zero variance; autocorrelations are reported as zero",
            operation="autocorrelation",
            issue="zero variance",
            value=variance
        )
        return np.zeros(lag_array.size, dtype=np.float64)

    return _autocovariance_values(x, lag_array, resolved) / variance
