"""
Bandwidth (lag truncation) estimation for kernel-weighted covariance sums.
"""

import logging

logger = logging.getLogger("kernelstat.models.bandwidth")

from .methods import (
    BandwidthMethod,
    BandwidthMax,
    BandwidthWhiteNoise,
    BandwidthBartlett,
    BandwidthP2003,
    BANDWIDTH_METHODS,
    get_bandwidth_method,
)
from .estimation import BandwidthResult, estimate_bandwidth, bandwidth

__all__ = [
    'BandwidthMethod',
    'BandwidthMax',
    'BandwidthWhiteNoise',
    'BandwidthBartlett',
    'BandwidthP2003',
    'BANDWIDTH_METHODS',
    'get_bandwidth_method',
    'BandwidthResult',
    'estimate_bandwidth',
    'bandwidth',
]
