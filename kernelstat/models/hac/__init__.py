"""
HAC variance estimation from kernel-weighted autocovariances.
"""

import logging

logger = logging.getLogger("kernelstat.models.hac")

from .variance import HAC_KERNELS, HACVarianceBasic, hac_variance

__all__ = [
    'HAC_KERNELS',
    'HACVarianceBasic',
    'hac_variance',
]
