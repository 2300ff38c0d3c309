# tests/test_bandwidth.py
"""
Tests for bandwidth estimation.

Synthetic autocorrelation providers drive the scans through exact decision
points; real samples check the interaction with the autocorrelation provider,
the lazy block growth and the variance/covariance artifacts.
"""

import math
import warnings

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose
from hypothesis import given, settings, strategies as st

from kernelstat.core.config import set_config
from kernelstat.core.exceptions import (
    DataError, DimensionError, InsufficientDataError, NumericWarning, ParameterError
)
from kernelstat.models.bandwidth import (
    BandwidthBartlett, BandwidthMax, BandwidthP2003, BandwidthResult,
    BandwidthWhiteNoise, bandwidth, estimate_bandwidth, get_bandwidth_method
)
from kernelstat.models.time_series import autocorrelation


N_SYNTHETIC = 200
# 1.96 * sqrt(1 / 200)
WHITE_NOISE_BOUND = 0.1386
# 2 * sqrt(log10(200) / 200)
P2003_BOUND = 0.2145


@pytest.fixture

def synthetic_sample(rng):
    """Sample whose values are irrelevant when a synthetic provider is injected."""
    return rng.standard_normal(N_SYNTHETIC)


# ---- Bandwidth Methods ----

class TestBandwidthMethods:
    """Tests for construction and validation of the bandwidth methods."""

    def test_defaults_and_names(self):
        assert BandwidthMax().name == "max"
        assert BandwidthWhiteNoise().adjustment_term == 1.0
        assert BandwidthWhiteNoise().name == "whiteNoise"
        assert BandwidthBartlett().name == "bartlett"
        method = BandwidthP2003()
        assert (method.adjustment_term, method.c, method.K) == (1.0, 2.0, 5)
        assert method.name == "P2003"

    @pytest.mark.parametrize("method_type", [BandwidthWhiteNoise, BandwidthBartlett, BandwidthP2003])
    @pytest.mark.parametrize("adjustment_term", [0.0, -1.0, float("nan")])
    def test_invalid_adjustment_term(self, method_type, adjustment_term):
        with pytest.raises(ParameterError):
            method_type(adjustment_term=adjustment_term)

    @pytest.mark.parametrize("params", [{"c": 0.0}, {"c": -2.0}, {"K": 0}, {"K": 1.5}, {"K": True}])
    def test_invalid_p2003_parameters(self, params):
        with pytest.raises(ParameterError):
            BandwidthP2003(**params)

    @pytest.mark.parametrize("num_obs, expected_k", [
        (10, 5),
        (100000, 5),
        (10 ** 50, 8),
    ])
    def test_p2003_from_num_obs(self, num_obs, expected_k):
        method = BandwidthP2003.from_num_obs(num_obs)
        assert method.K == expected_k
        assert method.c == 2.0

    def test_p2003_from_num_obs_invalid(self):
        with pytest.raises(ParameterError):
            BandwidthP2003.from_num_obs(0)

    def test_get_bandwidth_method(self):
        assert get_bandwidth_method("whitenoise") == BandwidthWhiteNoise()
        assert get_bandwidth_method("P2003", c=3.0) == BandwidthP2003(c=3.0)
        assert isinstance(get_bandwidth_method("MAX"), BandwidthMax)
        with pytest.raises(ValueError):
            get_bandwidth_method("andrews")

    def test_summary_and_copy(self):
        method = BandwidthP2003(adjustment_term=2.0, c=1.5, K=3)
        lines = method.summary().splitlines()
        assert lines[0] == "bandwidth method = P2003"
        assert "    c = 1.5" in lines
        assert str(method) == method.summary()
        clone = method.copy()
        assert clone == method
        assert clone is not method

    def test_methods_are_immutable(self):
        method = BandwidthWhiteNoise()
        with pytest.raises(AttributeError):
            method.adjustment_term = 2.0


# ---- P2003 Scan ----

class TestP2003:
    """Tests for the Politis (2003) run rule."""

    def test_run_sets_decision_lag_to_start(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={lag: 0.0 for lag in range(30, 35)})
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert result.m_hat == 30
        assert result.bandwidth == 60

    def test_short_run_does_not_trigger(self, synthetic_sample, synthetic_provider):
        overrides = {lag: 0.0 for lag in range(10, 14)}
        overrides.update({lag: 0.0 for lag in range(30, 35)})
        provider = synthetic_provider(N_SYNTHETIC, overrides=overrides)
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert result.m_hat == 30

    def test_run_uses_strict_threshold(self, synthetic_sample, synthetic_provider):
        # 0.3 is above the bound, 0.2 is below it
        overrides = {lag: 0.3 for lag in range(5, 10)}
        overrides.update({lag: 0.2 for lag in range(12, 17)})
        assert 0.2 < P2003_BOUND < 0.3
        provider = synthetic_provider(N_SYNTHETIC, overrides=overrides)
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert result.m_hat == 12

    def test_run_of_length_one(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={17: -0.1})
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(K=1), provider)
        assert result.m_hat == 17
        assert result.bandwidth == 34

    def test_no_run_falls_back_to_n_minus_one(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC)
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert result.m_hat == N_SYNTHETIC - 1
        assert result.bandwidth == N_SYNTHETIC - 1

    def test_run_ending_at_last_scanned_lag(self, synthetic_sample, synthetic_provider):
        # Lags up to n - 2 are scanned
        overrides = {lag: 0.0 for lag in range(N_SYNTHETIC - 6, N_SYNTHETIC - 1)}
        provider = synthetic_provider(N_SYNTHETIC, overrides=overrides)
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert result.m_hat == N_SYNTHETIC - 6

    def test_alternating_sample(self, alternating_sample):
        result = estimate_bandwidth(alternating_sample, BandwidthP2003())
        assert result.m_hat == 4
        assert result.bandwidth == 8


# ---- WhiteNoise and Bartlett Scans ----

class TestWhiteNoiseAndBartlett:
    """Tests for the single-crossing rules."""

    @pytest.mark.parametrize("method", [BandwidthWhiteNoise(), BandwidthBartlett()])
    def test_no_autocorrelation_short_circuits(self, synthetic_sample, synthetic_provider, method):
        provider = synthetic_provider(N_SYNTHETIC, overrides={1: 0.05})
        result = estimate_bandwidth(synthetic_sample, method, provider)
        assert result.m_hat == 1
        assert result.bandwidth == 2
        # Only the initial block is fetched
        assert len(provider.requests) == 1

    def test_white_noise_first_crossing(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={7: 0.1, 9: 0.0})
        result = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(), provider)
        assert 0.1 < WHITE_NOISE_BOUND
        assert result.m_hat == 7
        assert result.bandwidth == 14

    def test_bartlett_bound_widens(self, synthetic_sample, synthetic_provider):
        overrides = {1: 0.5, 2: 0.15, 3: 0.0}
        provider = synthetic_provider(N_SYNTHETIC, overrides=overrides)

        # 1.96 * sqrt((1 + 2 * 0.5^2) / 200) = 0.1697 > 0.15
        bartlett = estimate_bandwidth(synthetic_sample, BandwidthBartlett(), provider)
        assert bartlett.m_hat == 2
        assert bartlett.bandwidth == 4

        white_noise = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(), provider)
        assert white_noise.m_hat == 3
        assert white_noise.bandwidth == 6

    @pytest.mark.parametrize("method", [BandwidthWhiteNoise(), BandwidthBartlett()])
    def test_no_crossing_falls_back_to_n(self, synthetic_sample, synthetic_provider, method):
        provider = synthetic_provider(N_SYNTHETIC)
        result = estimate_bandwidth(synthetic_sample, method, provider)
        assert result.m_hat == N_SYNTHETIC
        assert result.bandwidth == N_SYNTHETIC - 1
        assert len(result.covariances) == N_SYNTHETIC - 1

    def test_negative_autocorrelations_use_absolute_value(self, synthetic_sample,
                                                          synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, fill=-0.9, overrides={4: -0.05})
        result = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(), provider)
        assert result.m_hat == 4

    def test_alternating_sample(self, alternating_sample):
        white_noise = estimate_bandwidth(alternating_sample, BandwidthWhiteNoise())
        assert white_noise.m_hat == 4
        assert white_noise.bandwidth == 8
        assert white_noise.bandwidth % 2 == 0
        assert 2 <= white_noise.bandwidth <= 9

        bartlett = estimate_bandwidth(alternating_sample, BandwidthBartlett())
        assert bartlett.m_hat == 2
        assert bartlett.bandwidth == 4

    def test_default_method_is_white_noise(self, alternating_sample):
        result = estimate_bandwidth(alternating_sample)
        assert result.method == "whiteNoise"
        assert result == estimate_bandwidth(alternating_sample, BandwidthWhiteNoise())


# ---- Scaling and Clamping ----

class TestBandwidthClamp:
    """Tests for the adjustment term and the [2, n-1] clamp."""

    def test_adjustment_term_scales_and_rounds_up(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={7: 0.0})
        result = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(adjustment_term=1.3),
                                    provider)
        assert result.m_hat == 7
        assert result.bandwidth == math.ceil(1.3 * 2 * 7)

    def test_small_adjustment_term_clamped_to_two(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={1: 0.0})
        result = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(adjustment_term=0.1),
                                    provider)
        assert result.bandwidth == 2

    @pytest.mark.parametrize("method", [
        BandwidthMax(), BandwidthWhiteNoise(), BandwidthBartlett(), BandwidthP2003()
    ])
    def test_two_observations(self, method):
        result = estimate_bandwidth([1.0, 3.0], method)
        assert result.bandwidth == 2
        assert result.n_obs == 2
        assert result.variance == pytest.approx(1.0)

    @settings(max_examples=50, deadline=None)
    @given(
        data=st.lists(st.floats(min_value=-1e3, max_value=1e3, allow_nan=False),
                      min_size=2, max_size=80),
        method=st.sampled_from([BandwidthMax(), BandwidthWhiteNoise(), BandwidthBartlett(),
                                BandwidthP2003(), BandwidthP2003(K=1),
                                BandwidthWhiteNoise(adjustment_term=3.0)])
    )
    def test_bandwidth_within_bounds(self, data, method):
        n = len(data)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", NumericWarning)
            result = estimate_bandwidth(data, method)
        assert 2 <= result.bandwidth <= max(2, n - 1)


# ---- Max Method ----

class TestBandwidthMax:
    """Tests for the degenerate Max method."""

    def test_max_uses_all_lags(self, ar1_process):
        result = estimate_bandwidth(ar1_process, BandwidthMax())
        assert result.bandwidth == len(ar1_process) - 1
        assert result.m_hat is None
        assert result.covariances.size == 0
        assert result.variance == pytest.approx(np.var(ar1_process))

    def test_max_does_not_call_provider(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC)
        estimate_bandwidth(synthetic_sample, BandwidthMax(), provider)
        assert provider.requests == []


# ---- Variance, Covariances and Block Growth ----

@pytest.mark.usefixtures("clean_config")
class TestBandwidthArtifacts:
    """Tests for the variance and autocovariances returned with the bandwidth."""

    @pytest.mark.parametrize("method", [BandwidthWhiteNoise(), BandwidthBartlett(), BandwidthP2003()])
    def test_covariances_match_autocorrelations(self, ar1_process, method):
        result = estimate_bandwidth(ar1_process, method)
        n = len(ar1_process)
        assert result.variance == pytest.approx((n - 1) / n * np.var(ar1_process, ddof=1))
        lags = np.arange(1, len(result.covariances) + 1)
        assert_allclose(result.covariances / result.variance, autocorrelation(ar1_process, lags),
                        rtol=1e-10, atol=1e-12)

    def test_blocks_grow_lazily(self, synthetic_sample, synthetic_provider):
        provider = synthetic_provider(N_SYNTHETIC, overrides={lag: 0.0 for lag in range(30, 35)})
        result = estimate_bandwidth(synthetic_sample, BandwidthP2003(), provider)
        assert [req.tolist() for req in provider.requests] == [
            list(range(1, 21)), list(range(21, 41))
        ]
        assert len(result.covariances) == 40
        assert_allclose(result.covariances, result.variance * provider.values[:40])

    def test_block_capped_at_n_minus_one(self, synthetic_provider, rng):
        x = rng.standard_normal(25)
        provider = synthetic_provider(25)
        result = estimate_bandwidth(x, BandwidthWhiteNoise(), provider)
        assert [len(req) for req in provider.requests] == [20, 4]
        assert len(result.covariances) == 24

    def test_block_size_from_config(self, synthetic_sample, synthetic_provider):
        set_config("numerical", "autocorrelation_block_size", 5)
        provider = synthetic_provider(N_SYNTHETIC, overrides={12: 0.0})
        result = estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(), provider)
        assert [len(req) for req in provider.requests] == [5, 5, 5]
        assert result.m_hat == 12
        assert len(result.covariances) == 15

    def test_short_sample_initial_block(self, synthetic_provider, rng):
        x = rng.standard_normal(8)
        provider = synthetic_provider(8, overrides={1: 0.0})
        estimate_bandwidth(x, BandwidthWhiteNoise(), provider)
        assert provider.requests[0].tolist() == list(range(1, 8))

    def test_idempotent(self, ar1_process):
        method = BandwidthBartlett()
        first = estimate_bandwidth(ar1_process, method)
        second = estimate_bandwidth(ar1_process, method)
        assert first == second
        assert first is not second

    @pytest.mark.parametrize("scale", [1e-9, 1e9])
    @pytest.mark.parametrize("method", [BandwidthWhiteNoise(), BandwidthBartlett(), BandwidthP2003()])
    def test_bandwidth_invariant_to_rescaling(self, ar1_process, method, scale):
        original = estimate_bandwidth(ar1_process, method)
        rescaled = estimate_bandwidth(scale * ar1_process, method)
        assert rescaled.bandwidth == original.bandwidth
        assert rescaled.variance == pytest.approx(scale ** 2 * original.variance)

    def test_pandas_series_input(self, ar1_process):
        series = pd.Series(ar1_process, index=pd.date_range("2000-01-01", periods=len(ar1_process)))
        assert estimate_bandwidth(series) == estimate_bandwidth(ar1_process)

    def test_alias(self, alternating_sample):
        assert bandwidth(alternating_sample) == estimate_bandwidth(alternating_sample)

    def test_result_unpacks_like_tuple(self, alternating_sample):
        result = estimate_bandwidth(alternating_sample, BandwidthBartlett())
        m, variance, covariances = result
        assert m == result.bandwidth == 4
        assert variance == pytest.approx(0.25)
        assert covariances is result.covariances

    def test_result_to_series_and_summary(self, alternating_sample):
        result = estimate_bandwidth(alternating_sample, BandwidthWhiteNoise())
        series = result.to_series()
        assert isinstance(result, BandwidthResult)
        assert series.index[0] == 1
        assert series.index.name == "lag"
        assert len(series) == len(result.covariances) == 9
        assert series[1] == pytest.approx(-0.225)
        summary = result.summary()
        assert "whiteNoise" in summary
        assert "bandwidth = 8" in summary


# ---- Errors ----

class TestBandwidthErrors:
    """Tests for invalid input."""

    @pytest.mark.parametrize("data", [[], [1.0]])
    def test_insufficient_data(self, data):
        with pytest.raises(InsufficientDataError):
            estimate_bandwidth(data, BandwidthWhiteNoise())

    def test_insufficient_data_is_data_error(self):
        with pytest.raises(DataError):
            estimate_bandwidth([1.0], BandwidthMax())

    def test_nan_input(self):
        with pytest.raises(DataError):
            estimate_bandwidth([1.0, np.nan, 2.0], BandwidthWhiteNoise())

    def test_multivariate_input(self, rng):
        with pytest.raises(DimensionError):
            estimate_bandwidth(rng.standard_normal((10, 2)), BandwidthWhiteNoise())

    def test_unknown_method_type(self, alternating_sample):
        with pytest.raises(TypeError):
            estimate_bandwidth(alternating_sample, "whiteNoise")

    def test_provider_with_wrong_length(self, synthetic_sample):
        with pytest.raises(DimensionError):
            estimate_bandwidth(synthetic_sample, BandwidthWhiteNoise(),
                               lambda x, lags: np.zeros(3))
