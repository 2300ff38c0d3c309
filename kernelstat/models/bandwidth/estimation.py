# kernelstat/models/bandwidth/estimation.py
"""
Data-driven bandwidth (lag truncation) estimation.

All scanning methods share one procedure:

1. The population variance ``((n-1)/n) * sample_variance`` is computed once.
2. Autocorrelations are fetched lazily, a block of lags at a time, starting with
   lags ``1..min(block_size, n-1)`` and never beyond lag ``n - 1``.
3. Lags are scanned in order and offered to a method-specific policy, which
   either keeps scanning or returns the decision lag ``m_hat``. If the lags run
   out first, the policy's fallback decision lag is used.
4. The bandwidth is ``M = ceil(2 * adjustment_term * m_hat)``, clamped first to
   at most ``n - 1`` and then to at least 2.

The variance and the autocovariances implied by the autocorrelations fetched
along the way are returned with the bandwidth, so consumers such as HAC variance
estimation do not need to recompute them.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Type

import numpy as np
import pandas as pd

from kernelstat.core.config import get_config
from kernelstat.core.exceptions import raise_dimension_error
from kernelstat.core.types import AutocorrelationProvider, TimeSeriesData
from kernelstat.core.validation import validate_sample
from kernelstat.models.bandwidth.methods import (
    BandwidthBartlett, BandwidthMax, BandwidthMethod, BandwidthP2003, BandwidthWhiteNoise
)
from kernelstat.models.time_series.correlation import autocorrelation

# Set up module-level logger
logger = logging.getLogger("kernelstat.models.bandwidth.estimation")

# Two-sided 95% quantile of the standard normal
_Z_95 = 1.96


@dataclass(frozen=True, eq=False)
class BandwidthResult:
    """
    Result of a bandwidth estimation.

    Iterating over the result yields ``(bandwidth, variance, covariances)``, so it
    can be unpacked like a tuple.

    Attributes:
        bandwidth: Estimated truncation lag ``M``, in ``[2, max(2, n - 1)]``
        variance: Population variance of the sample, i.e. the lag-0 autocovariance
        covariances: Autocovariances at lags ``1, 2, ...`` for every autocorrelation
            fetched during the scan (index 0 holds lag 1); empty for ``BandwidthMax``
        m_hat: Decision lag before scaling and clamping (None for ``BandwidthMax``)
        method: Name of the bandwidth method
        n_obs: Number of observations in the sample
    """
    bandwidth: int
    variance: float
    covariances: np.ndarray
    m_hat: Optional[int]
    method: str
    n_obs: int

    def __iter__(self) -> Iterator:
        return iter((self.bandwidth, self.variance, self.covariances))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BandwidthResult):
            return NotImplemented
        return (self.bandwidth == other.bandwidth
                and self.variance == other.variance
                and np.array_equal(self.covariances, other.covariances)
                and self.m_hat == other.m_hat
                and self.method == other.method
                and self.n_obs == other.n_obs)

    def to_series(self) -> pd.Series:
        """Autocovariances as a pandas Series indexed by lag (starting at 1)."""
        index = pd.RangeIndex(1, len(self.covariances) + 1, name="lag")
        return pd.Series(self.covariances, index=index, name="autocovariance")

    def summary(self) -> str:
        lines = [
            f"Bandwidth estimate ({self.method})",
            f"    observations = {self.n_obs}",
            f"    decision lag = {self.m_hat}",
            f"    bandwidth = {self.bandwidth}",
            f"    variance = {self.variance:.6g}",
            f"    autocovariances computed = {len(self.covariances)}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()


class _AutocorrelationBuffer:
    """Autocorrelations at lags ``1..len(self)``, grown in blocks on demand."""

    def __init__(self, x: np.ndarray, provider: AutocorrelationProvider, block_size: int):
        self._x = x
        self._provider = provider
        self._block_size = block_size
        self._max_lag = len(x) - 1
        self._values = np.empty(0, dtype=np.float64)
        self.extend()

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, lag: int) -> float:
        while lag > len(self._values):
            if not self.extend():
                raise IndexError(f"Lag {lag} exceeds the largest available lag {self._max_lag}")
        return float(self._values[lag - 1])

    @property
    def values(self) -> np.ndarray:
        return self._values

    def extend(self) -> bool:
        """Fetch the next block of lags. Returns False when no lags remain."""
        start = len(self._values) + 1
        stop = min(len(self._values) + self._block_size, self._max_lag)
        if start > stop:
            return False

        lags = np.arange(start, stop + 1, dtype=np.int64)
        block = np.asarray(self._provider(self._x, lags), dtype=np.float64).ravel()
        if block.shape != lags.shape:
            raise_dimension_error(
                "Autocorrelation provider returned the wrong number of values",
                array_name="autocorrelations",
                expected_shape=lags.shape,
                actual_shape=block.shape
            )
        self._values = np.concatenate((self._values, block))
        logger.debug(f"Fetched autocorrelations for lags {start}..{stop}")
        return True


class _ScanPolicy:
    """Decision rule applied to autocorrelations in increasing lag order."""

    def __init__(self, n_obs: int, method: BandwidthMethod):
        self.n_obs = n_obs
        self.method = method

    @property
    def last_lag(self) -> int:
        return self.n_obs - 1

    @property
    def fallback(self) -> int:
        return self.n_obs

    def threshold(self, lag: int) -> float:
        raise NotImplementedError

    def observe(self, lag: int, rho: float) -> Optional[int]:
        """Return the decision lag, or None to keep scanning."""
        raise NotImplementedError


class _WhiteNoisePolicy(_ScanPolicy):
    def threshold(self, lag: int) -> float:
        return _Z_95 * math.sqrt(1.0 / self.n_obs)

    def observe(self, lag: int, rho: float) -> Optional[int]:
        # Lag 1 inside the bound means no autocorrelation was detected at all
        if lag == 1:
            return 1 if abs(rho) <= self.threshold(lag) else None
        return lag if abs(rho) < self.threshold(lag) else None


class _BartlettPolicy(_WhiteNoisePolicy):
    def __init__(self, n_obs: int, method: BandwidthMethod):
        super().__init__(n_obs, method)
        self._sum_squares = 0.0

    def threshold(self, lag: int) -> float:
        return _Z_95 * math.sqrt((1.0 + self._sum_squares) / self.n_obs)

    def observe(self, lag: int, rho: float) -> Optional[int]:
        decision = super().observe(lag, rho)
        if decision is None:
            self._sum_squares += 2.0 * rho ** 2
        return decision


class _P2003Policy(_ScanPolicy):
    def __init__(self, n_obs: int, method: BandwidthP2003):
        super().__init__(n_obs, method)
        self._bound = method.c * math.sqrt(math.log10(n_obs) / n_obs)
        self._run = 0

    @property
    def last_lag(self) -> int:
        return self.n_obs - 2

    @property
    def fallback(self) -> int:
        return self.n_obs - 1

    def threshold(self, lag: int) -> float:
        return self._bound

    def observe(self, lag: int, rho: float) -> Optional[int]:
        if abs(rho) < self._bound:
            self._run += 1
        else:
            self._run = 0
        if self._run >= self.method.K:
            return lag - self.method.K + 1
        return None


_SCAN_POLICIES = {
    BandwidthWhiteNoise: _WhiteNoisePolicy,
    BandwidthBartlett: _BartlettPolicy,
    BandwidthP2003: _P2003Policy,
}


def _scan(buffer: _AutocorrelationBuffer, policy: _ScanPolicy) -> int:
    for lag in range(1, policy.last_lag + 1):
        m_hat = policy.observe(lag, buffer[lag])
        if m_hat is not None:
            return m_hat
    return policy.fallback


def _clamp_bandwidth(m_hat: int, adjustment_term: float, n_obs: int) -> int:
    bandwidth = math.ceil(adjustment_term * 2 * m_hat)
    if bandwidth > n_obs - 1:
        bandwidth = n_obs - 1
    if bandwidth < 2:
        bandwidth = 2
    return bandwidth


def _policy_for(method: BandwidthMethod) -> Type[_ScanPolicy]:
    policy = _SCAN_POLICIES.get(type(method))
    if policy is None:
        raise TypeError(
            f"Unsupported bandwidth method type: {type(method).__name__}. "
            f"Supported types are {[m.__name__ for m in (BandwidthMax, *_SCAN_POLICIES)]}."
        )
    return policy


def estimate_bandwidth(data: TimeSeriesData,
                       method: Optional[BandwidthMethod] = None,
                       provider: Optional[AutocorrelationProvider] = None) -> BandwidthResult:
    """
    Estimate the bandwidth (lag truncation) of a univariate sample.

    Args:
        data: Univariate sample with at least 2 observations
        method: Bandwidth method; defaults to ``BandwidthWhiteNoise()``
        provider: Callable ``provider(x, lags)`` returning autocorrelations of the
            float array ``x`` at the integer array ``lags``; defaults to
            :func:`kernelstat.models.time_series.correlation.autocorrelation`

    Returns:
        BandwidthResult: Bandwidth, variance and the autocovariances computed

    Raises:
        InsufficientDataError: If the sample has fewer than 2 observations
        DataError: If the sample contains NaN or infinite values
        DimensionError: If the sample is not univariate
        TypeError: If ``method`` is not a bandwidth method

    Examples:
        >>> from kernelstat.models.bandwidth import estimate_bandwidth, BandwidthBartlett
        >>> result = estimate_bandwidth([1.0, 2.0] * 5, BandwidthBartlett())
        >>> result.bandwidth, result.m_hat
        (4, 2)
        >>> bandwidth, variance, covariances = result
    """
    x = validate_sample(data)
    n_obs = len(x)
    if method is None:
        method = BandwidthWhiteNoise()
    if provider is None:
        provider = autocorrelation

    variance = float(np.var(x))

    if isinstance(method, BandwidthMax):
        bandwidth = max(2, n_obs - 1)
        logger.debug(f"Bandwidth ({method.name}, n={n_obs}): M={bandwidth}")
        return BandwidthResult(bandwidth, variance, np.empty(0, dtype=np.float64),
                               None, method.name, n_obs)

    policy = _policy_for(method)(n_obs, method)
    block_size = get_config("numerical", "autocorrelation_block_size", 20)
    buffer = _AutocorrelationBuffer(x, provider, block_size)

    m_hat = _scan(buffer, policy)
    logger.debug(f"Decision lag ({method.name}, n={n_obs}): m_hat={m_hat}")

    bandwidth = _clamp_bandwidth(m_hat, method.adjustment_term, n_obs)
    logger.debug(f"Bandwidth ({method.name}, n={n_obs}): M={bandwidth}")

    return BandwidthResult(bandwidth, variance, variance * buffer.values,
                           m_hat, method.name, n_obs)


# Alias matching the short name used throughout the documentation
bandwidth = estimate_bandwidth
