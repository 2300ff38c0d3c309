"""
KernelStat Test Suite

Tests for the kernel function catalog, the autocorrelation provider, the
bandwidth estimators and the HAC variance estimator, plus the shared
configuration, validation and exception infrastructure.
"""
