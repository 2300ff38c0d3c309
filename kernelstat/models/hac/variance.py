# kernelstat/models/hac/variance.py
"""
Heteroskedasticity and autocorrelation consistent (HAC) variance estimation.

The basic estimator combines a lag-weighting kernel with a bandwidth method:

    v = gamma(0) + 2 * sum_{m=1}^{M} w(m) * gamma(m)

where ``M`` and the autocovariances ``gamma`` come from
:func:`kernelstat.models.bandwidth.estimate_bandwidth` and ``w`` is the kernel
evaluated at integer lags. Autocovariances the bandwidth scan did not need are
fetched afterwards, so no lag is computed twice.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple, Type, Union

import numpy as np

from kernelstat.core.exceptions import ParameterError, UnsupportedKernelError
from kernelstat.core.parameters import ParameterBase
from kernelstat.core.types import AutocorrelationProvider, TimeSeriesData
from kernelstat.core.validation import validate_sample
from kernelstat.models.bandwidth.estimation import estimate_bandwidth
from kernelstat.models.bandwidth.methods import BandwidthMethod, BandwidthWhiteNoise
from kernelstat.models.kernels.functions import (
    KernelFunction, KernelGaussian, KernelPR1994SB, KernelUniform, evaluate
)
from kernelstat.models.time_series.correlation import autocorrelation

# Set up module-level logger
logger = logging.getLogger("kernelstat.models.hac.variance")

# Kernel types that can weight autocovariances in a HAC variance estimate
HAC_KERNELS: Tuple[Type[KernelFunction], ...] = (
    KernelUniform,
    KernelGaussian,
    KernelPR1994SB,
)


@dataclass(frozen=True)
class HACVarianceBasic(ParameterBase):
    """
    Kernel-weighted HAC variance estimator.

    Attributes:
        kernel_function: Lag-weighting kernel, one of :data:`HAC_KERNELS`
        bandwidth_method: Method used to choose the truncation lag

    Raises:
        UnsupportedKernelError: If the kernel is not suitable for lag weighting
        ParameterError: If ``bandwidth_method`` is not a bandwidth method

    Examples:
        >>> from kernelstat import HACVarianceBasic, KernelPR1994SB, BandwidthP2003
        >>> hac = HACVarianceBasic(KernelPR1994SB(upper=100, p=0.1), BandwidthP2003())
        >>> print(hac)
        HAC variance method = hacVarianceBasic
            kernel function = PR1994SB
            bandwidth method = P2003
    """
    kernel_function: KernelFunction
    bandwidth_method: BandwidthMethod = field(default_factory=BandwidthWhiteNoise)

    name = "hacVarianceBasic"
    _summary_label = "HAC variance method"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if type(self.kernel_function) not in HAC_KERNELS:
            raise UnsupportedKernelError(
                "Kernel function is not supported for HAC variance estimation",
                kernel_name=getattr(self.kernel_function, "name",
                                    type(self.kernel_function).__name__),
                valid_options=[k.name for k in HAC_KERNELS]
            )
        if not isinstance(self.bandwidth_method, BandwidthMethod):
            raise ParameterError(
                "bandwidth_method must be a bandwidth method",
                param_name="bandwidth_method",
                param_value=self.bandwidth_method
            )

    def summary(self) -> str:
        return "\n".join([
            f"{self._summary_label} = {self.name}",
            f"    kernel function = {self.kernel_function.name}",
            f"    bandwidth method = {self.bandwidth_method.name}",
        ])

    def estimate(self, data: TimeSeriesData,
                 provider: Optional[AutocorrelationProvider] = None) -> float:
        """
        Estimate the HAC variance of a univariate sample.

        Args:
            data: Univariate sample with at least 2 observations
            provider: Autocorrelation provider passed to the bandwidth estimator
                and used for any remaining lags

        Returns:
            float: The HAC variance estimate

        Raises:
            InsufficientDataError: If the sample has fewer than 2 observations
        """
        x = validate_sample(data)
        if provider is None:
            provider = autocorrelation

        bandwidth, variance, covariances = estimate_bandwidth(x, self.bandwidth_method, provider)
        covariances = _complete_covariances(x, covariances, bandwidth, variance, provider)

        lags = np.arange(1, bandwidth + 1, dtype=np.float64)
        weights = evaluate(lags, self.kernel_function, check_domain=False)
        hac = variance + 2.0 * float(np.dot(weights, covariances[:bandwidth]))

        logger.debug(
            f"HAC variance ({self.kernel_function.name}, {self.bandwidth_method.name}): "
            f"M={bandwidth}, variance={variance:.6g}, hac={hac:.6g}"
        )
        return hac


def _complete_covariances(x: np.ndarray, covariances: np.ndarray, bandwidth: int,
                          variance: float, provider: AutocorrelationProvider) -> np.ndarray:
    """Extend ``covariances`` so that it covers lags ``1..bandwidth``."""
    computed = len(covariances)
    if computed >= bandwidth:
        return covariances

    # Lags beyond n - 1 have no overlapping observations and contribute zero
    last = min(bandwidth, len(x) - 1)
    extra = np.zeros(bandwidth - computed, dtype=np.float64)
    if last > computed:
        lags = np.arange(computed + 1, last + 1, dtype=np.int64)
        extra[:last - computed] = variance * np.asarray(provider(x, lags), dtype=np.float64)
        logger.debug(f"Fetched remaining autocovariances for lags {computed + 1}..{last}")
    return np.concatenate((covariances, extra))


def hac_variance(data: TimeSeriesData,
                 method_or_kernel: Union[HACVarianceBasic, KernelFunction],
                 bandwidth_method: Optional[BandwidthMethod] = None,
                 provider: Optional[AutocorrelationProvider] = None) -> float:
    """
    Estimate the HAC variance of a univariate sample.

    Args:
        data: Univariate sample with at least 2 observations
        method_or_kernel: A :class:`HACVarianceBasic`, or a kernel function to
            combine with ``bandwidth_method``
        bandwidth_method: Bandwidth method used with a bare kernel function;
            defaults to ``BandwidthWhiteNoise()``. Ignored when a
            :class:`HACVarianceBasic` is given.
        provider: Optional autocorrelation provider

    Returns:
        float: The HAC variance estimate

    Raises:
        UnsupportedKernelError: If the kernel is not suitable for lag weighting

    Examples:
        >>> from kernelstat import hac_variance, KernelGaussian
        >>> v = hac_variance([0.3, -1.2, 0.8, 0.1, -0.4, 1.5], KernelGaussian())
    """
    if isinstance(method_or_kernel, HACVarianceBasic):
        method = method_or_kernel
    elif bandwidth_method is None:
        method = HACVarianceBasic(method_or_kernel)
    else:
        method = HACVarianceBasic(method_or_kernel, bandwidth_method)
    return method.estimate(data, provider)
