"""
Time series primitives used by the kernel and bandwidth estimators.

This package exposes the autocovariance/autocorrelation provider consumed by
bandwidth estimation and HAC variance estimation.
"""

import logging

logger = logging.getLogger("kernelstat.models.time_series")

from .correlation import autocorrelation, autocovariance

__all__ = [
    'autocorrelation',
    'autocovariance',
]
