# tests/test_hac.py
"""
Tests for HAC variance estimation.
"""

import numpy as np
import pytest

from kernelstat.core.exceptions import (
    InsufficientDataError, ParameterError, UnsupportedKernelError
)
from kernelstat.models.bandwidth import (
    BandwidthBartlett, BandwidthMax, BandwidthP2003, BandwidthWhiteNoise, estimate_bandwidth
)
from kernelstat.models.hac import HAC_KERNELS, HACVarianceBasic, hac_variance
from kernelstat.models.kernels import (
    KernelEpanechnikov, KernelGaussian, KernelPP2002Trap, KernelPR1994SB, KernelTriangular,
    KernelUniform, evaluate
)


class TestHACVarianceBasic:
    """Tests for construction of the basic HAC variance method."""

    @pytest.mark.parametrize("kernel", [
        KernelUniform(), KernelGaussian(), KernelPR1994SB(upper=100, p=0.1)
    ])
    def test_supported_kernels(self, kernel):
        method = HACVarianceBasic(kernel, BandwidthP2003())
        assert method.kernel_function == kernel
        assert method.name == "hacVarianceBasic"

    @pytest.mark.parametrize("kernel", [KernelTriangular(), KernelEpanechnikov(), KernelPP2002Trap()])
    def test_unsupported_kernels(self, kernel):
        with pytest.raises(UnsupportedKernelError) as excinfo:
            HACVarianceBasic(kernel, BandwidthWhiteNoise())
        assert excinfo.value.kernel_name == kernel.name
        assert "PR1994SB" in excinfo.value.valid_options

    def test_whitelist(self):
        assert HAC_KERNELS == (KernelUniform, KernelGaussian, KernelPR1994SB)

    def test_invalid_bandwidth_method(self):
        with pytest.raises(ParameterError):
            HACVarianceBasic(KernelGaussian(), "bartlett")

    def test_default_bandwidth_method(self):
        assert HACVarianceBasic(KernelGaussian()).bandwidth_method == BandwidthWhiteNoise()

    def test_summary_copy_and_equality(self):
        method = HACVarianceBasic(KernelPR1994SB(upper=100, p=0.1), BandwidthP2003())
        assert method.summary().splitlines() == [
            "HAC variance method = hacVarianceBasic",
            "    kernel function = PR1994SB",
            "    bandwidth method = P2003",
        ]
        clone = method.copy()
        assert clone == method
        assert clone is not method
        assert method != HACVarianceBasic(KernelPR1994SB(upper=100, p=0.1), BandwidthBartlett())


class TestHACEstimate:
    """Tests for the HAC variance estimate."""

    def test_alternating_sample_uniform(self, alternating_sample):
        # M = 4 with Bartlett; uniform weights are 1/2 at every lag
        hac = HACVarianceBasic(KernelUniform(), BandwidthBartlett()).estimate(alternating_sample)
        assert hac == pytest.approx(0.25 + 0.25 * (-0.9 + 0.8 - 0.7 + 0.6))

    def test_matches_weighted_sum(self, ar1_process):
        kernel = KernelGaussian()
        m, variance, covariances = estimate_bandwidth(ar1_process, BandwidthWhiteNoise())
        weights = kernel.scale * np.exp(-0.5 * np.arange(1, m + 1) ** 2)
        expected = variance + 2.0 * np.sum(weights * covariances[:m])
        assert hac_variance(ar1_process, kernel, BandwidthWhiteNoise()) == pytest.approx(expected)

    def test_fetches_remaining_covariances(self, rng, synthetic_provider):
        x = rng.standard_normal(200)
        provider = synthetic_provider(200, overrides={15: 0.0})
        kernel = KernelPR1994SB(upper=200, p=0.1)

        hac = hac_variance(x, kernel, BandwidthWhiteNoise(), provider=provider)

        # m_hat = 15 gives M = 30, beyond the first block of 20 lags
        assert [req.tolist() for req in provider.requests] == [
            list(range(1, 21)), list(range(21, 31))
        ]
        variance = np.var(x)
        weights = evaluate(np.arange(1, 31), kernel, check_domain=False)
        expected = variance + 2.0 * np.sum(weights * variance * provider.values[:30])
        assert hac == pytest.approx(expected)

    def test_max_method_fetches_all_lags(self, rng, synthetic_provider):
        x = rng.standard_normal(30)
        provider = synthetic_provider(30, fill=0.1)
        hac_variance(x, KernelUniform(), BandwidthMax(), provider=provider)
        assert [req.tolist() for req in provider.requests] == [list(range(1, 30))]

    def test_two_observations(self):
        # M = 2 but only lag 1 exists; lag 2 contributes nothing
        hac = hac_variance([1.0, 3.0], KernelUniform(), BandwidthMax())
        assert hac == pytest.approx(1.0 + 2.0 * 0.5 * -0.5)

    def test_positive_autocorrelation_increases_variance(self, ar1_process):
        kernel = KernelPR1994SB(upper=len(ar1_process), p=0.1)
        hac = hac_variance(ar1_process, kernel, BandwidthP2003())
        assert hac > np.var(ar1_process)

    def test_accepts_method_object(self, ar1_process):
        method = HACVarianceBasic(KernelGaussian(), BandwidthBartlett())
        assert hac_variance(ar1_process, method) == method.estimate(ar1_process)

    def test_default_bandwidth_method(self, ar1_process):
        assert hac_variance(ar1_process, KernelGaussian()) == \
            hac_variance(ar1_process, KernelGaussian(), BandwidthWhiteNoise())

    @pytest.mark.parametrize("scale", [1e-9, 1e9])
    def test_scales_with_square_of_units(self, ar1_process, scale):
        kernel = KernelPR1994SB(upper=len(ar1_process), p=0.1)
        expected = scale ** 2 * hac_variance(ar1_process, kernel, BandwidthP2003())
        assert hac_variance(scale * ar1_process, kernel, BandwidthP2003()) == pytest.approx(expected)

    def test_unsupported_kernel(self, ar1_process):
        with pytest.raises(UnsupportedKernelError):
            hac_variance(ar1_process, KernelTriangular(), BandwidthWhiteNoise())

    def test_insufficient_data(self):
        with pytest.raises(InsufficientDataError):
            hac_variance([1.0], KernelGaussian())
