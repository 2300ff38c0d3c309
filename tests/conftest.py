'''
Pytest configuration and fixtures for the KernelStat test suite.

This module provides seeded data generators, synthetic autocorrelation
providers for driving the bandwidth scans deterministically, and a fixture that
restores the default configuration after each test.
'''

from typing import Callable, Dict, List

import numpy as np
import pytest

import matplotlib
matplotlib.use("Agg")

from kernelstat.core.config import reset_config


# ---- Configuration ----

@pytest.fixture

def clean_config():
    """Restore default configuration after a test that changes it."""
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture

def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture

def sample_size() -> int:
    """Default sample size for test data."""
    return 500


@pytest.fixture

def white_noise(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Generate i.i.d. standard normal data."""
    return rng.standard_normal(sample_size)


@pytest.fixture

def ar1_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Generate AR(1) process for testing."""
    phi = 0.7  # AR parameter
    sigma = 1.0  # Innovation standard deviation

    y = np.zeros(sample_size)
    y[0] = rng.standard_normal()
    for t in range(1, sample_size):
        y[t] = phi * y[t-1] + sigma * rng.standard_normal()

    return y


@pytest.fixture

def alternating_sample() -> np.ndarray:
    """Perfectly alternating series of length 10 with rho(k) = (-1)^k (10 - k) / 10."""
    return np.array([1.0, 2.0] * 5)


# ---- Synthetic Autocorrelation Providers ----

class RecordingProvider:
    """Autocorrelation provider that returns preset values and records requests.

    ``values[k - 1]`` is returned as the autocorrelation at lag ``k``.
    """

    def __init__(self, values: np.ndarray):
        self.values = np.asarray(values, dtype=np.float64)
        self.requests: List[np.ndarray] = []

    def __call__(self, x: np.ndarray, lags: np.ndarray) -> np.ndarray:
        self.requests.append(np.array(lags))
        return self.values[np.asarray(lags) - 1]


@pytest.fixture

def synthetic_provider() -> Callable[..., RecordingProvider]:
    """Factory for providers with a constant autocorrelation plus overrides.

    Usage: ``synthetic_provider(n, fill=0.9, overrides={30: 0.0})`` gives an
    autocorrelation of 0.9 at every lag in ``1..n-1`` except lag 30.
    """
    def factory(n_obs: int, fill: float = 0.9,
                overrides: Dict[int, float] = None) -> RecordingProvider:
        values = np.full(n_obs - 1, fill)
        for lag, value in (overrides or {}).items():
            values[lag - 1] = value
        return RecordingProvider(values)

    return factory
