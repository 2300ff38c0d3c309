"""
KernelStat Core Module

This module provides the infrastructure shared by every estimator in KernelStat:
the exception hierarchy, configuration management, parameter containers, type
definitions and input validation.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("kernelstat.core")

from .exceptions import (
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

from .config import (
    ConfigManager,
    get_config,
    set_config,
    reset_config,
    get_config_manager,
    initialize_config,
)

from .parameters import (
    ParameterBase,
    validate_positive,
    validate_range,
    validate_integer,
)

from .validation import (
    validate_sample,
    validate_lags,
)

__all__ = [
    # Exceptions
    'KernelStatError',
    'ParameterError',
    'DimensionError',
    'DataError',
    'InsufficientDataError',
    'UnsupportedKernelError',
    'ConfigurationError',
    'KernelStatWarning',
    'NumericWarning',

    # Configuration
    'ConfigManager',
    'get_config',
    'set_config',
    'reset_config',
    'get_config_manager',
    'initialize_config',

    # Parameters
    'ParameterBase',
    'validate_positive',
    'validate_range',
    'validate_integer',

    # Validation
    'validate_sample',
    'validate_lags',
]
