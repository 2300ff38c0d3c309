"""
KernelStat models: autocorrelations, kernel functions, bandwidth selection and
HAC variance estimation.
"""

import logging

logger = logging.getLogger("kernelstat.models")

from . import time_series
from . import kernels
from . import bandwidth
from . import hac

__all__ = [
    'time_series',
    'kernels',
    'bandwidth',
    'hac',
]
