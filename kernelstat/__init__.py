# kernelstat/__init__.py
"""
KernelStat - Kernel functions and bandwidth selection for time series

KernelStat provides:
- A catalog of kernel functions used to weight lagged autocovariances and to
  taper bootstrap blocks
- Data-driven bandwidth (lag truncation) estimation: WhiteNoise, Bartlett,
  Politis (2003) and a Max baseline
- A kernel-weighted HAC variance estimator built on the bandwidth estimates

This module serves as the main entry point for the package.
"""

import importlib
import logging
import warnings
from typing import Union

from .version import __version__, __title__, __description__, __license__

# Set up package-wide logger
logger = logging.getLogger("kernelstat")


def _check_dependencies() -> None:
    """
    Check for required dependencies and their versions.

    Raises ImportError if a dependency is missing and warns if one is older than
    the tested version.
    """
    required_packages = {
        "numpy": "1.26.0",
        "pandas": "2.1.1",
        "numba": "0.58.0",
        "statsmodels": "0.14.0",
        "matplotlib": "3.8.0"
    }

    missing_required = []
    outdated_packages = []

    for package, min_version in required_packages.items():
        try:
            imported = importlib.import_module(package)
        except ImportError:
            missing_required.append(package)
            continue

        if not hasattr(imported, "__version__"):
            logger.warning(f"Cannot determine version for {package}")
            continue

        pkg_version = imported.__version__
        if _version_tuple(pkg_version) < _version_tuple(min_version):
            outdated_packages.append((package, pkg_version, min_version))

    if missing_required:
        logger.error(f"Required packages missing: {', '.join(missing_required)}")
        raise ImportError(
            f"KernelStat requires the following packages: "
            f"{', '.join(missing_required)}. Please install them with pip."
        )

    for package, current, required in outdated_packages:
        warnings.warn(
            f"{package} version {current} is older than the recommended "
            f"version {required}. This may cause compatibility issues.",
            UserWarning
        )


def _version_tuple(version: str) -> tuple:
    parts = []
    for part in version.split(".")[:3]:
        digits = "".join(ch for ch in part if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


_check_dependencies()

from .core.config import initialize_config, set_config

# Applies KERNELSTAT_LOG_LEVEL and the other environment overrides
initialize_config()

from . import core
from . import models

from .core.exceptions import (
    KernelStatError,
    ParameterError,
    DimensionError,
    DataError,
    InsufficientDataError,
    UnsupportedKernelError,
    ConfigurationError,
    KernelStatWarning,
    NumericWarning,
)
from .core.config import get_config, reset_config
from .models.time_series import autocorrelation, autocovariance
from .models.kernels import (
    Domain,
    KernelFunction,
    KernelUniform,
    KernelTriangular,
    KernelEpanechnikov,
    KernelQuartic,
    KernelGaussian,
    KernelPR1993FlatTop,
    KernelP2003FlatTop,
    KernelPP2002Trap,
    KernelPP2002Smooth,
    KernelPR1994SB,
    evaluate,
    active_domain,
    param_domain,
    get_kernel,
    plot_kernel,
)
from .models.bandwidth import (
    BandwidthMethod,
    BandwidthMax,
    BandwidthWhiteNoise,
    BandwidthBartlett,
    BandwidthP2003,
    BandwidthResult,
    get_bandwidth_method,
    estimate_bandwidth,
    bandwidth,
)
from .models.hac import HACVarianceBasic, hac_variance


# Public API functions

def get_version() -> str:
    """
    Return the version of KernelStat.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    return __version__


def set_log_level(level: Union[str, int]) -> None:
    """
    Set the logging level for KernelStat.

    Args:
        level: Logging level, either as string ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
              or as an integer constant from the logging module
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())
    logger.setLevel(level)
    logger.info(f"Log level set to {logging.getLevelName(level)}")


def enable_numba(enabled: bool = True) -> None:
    """
    Enable or disable Numba JIT acceleration of autocovariance computations.

    Args:
        enabled: Whether to enable Numba acceleration
    """
    set_config("core", "enable_numba", enabled)
    logger.info(f"Numba acceleration {'enabled' if enabled else 'disabled'}")


# Define what's available when using "from kernelstat import *"
__all__ = [
    # Subpackages
    'core',
    'models',

    # Public functions
    'get_version',
    'set_log_level',
    'enable_numba',
    'get_config',
    'set_config',
    'reset_config',

    # Exceptions and warnings
    'KernelStatError',
    'ParameterError',
    'DimensionError',
    'DataError',
    'InsufficientDataError',
    'UnsupportedKernelError',
    'ConfigurationError',
    'KernelStatWarning',
    'NumericWarning',

    # Autocorrelations
    'autocorrelation',
    'autocovariance',

    # Kernel functions
    'Domain',
    'KernelFunction',
    'KernelUniform',
    'KernelTriangular',
    'KernelEpanechnikov',
    'KernelQuartic',
    'KernelGaussian',
    'KernelPR1993FlatTop',
    'KernelP2003FlatTop',
    'KernelPP2002Trap',
    'KernelPP2002Smooth',
    'KernelPR1994SB',
    'evaluate',
    'active_domain',
    'param_domain',
    'get_kernel',
    'plot_kernel',

    # Bandwidth estimation
    'BandwidthMethod',
    'BandwidthMax',
    'BandwidthWhiteNoise',
    'BandwidthBartlett',
    'BandwidthP2003',
    'BandwidthResult',
    'get_bandwidth_method',
    'estimate_bandwidth',
    'bandwidth',

    # HAC variance
    'HACVarianceBasic',
    'hac_variance',

    # Version info
    '__version__',
]

logger.debug(f"KernelStat v{__version__} initialized successfully")
