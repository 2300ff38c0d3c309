'''
Configuration management system for the KernelStat package.

This module lets users tune the numerical and logging behaviour of KernelStat
without modifying source code. Configuration values are resolved in layers:

1. Defaults built into the package
2. An optional user configuration file (JSON)
3. Environment variables
4. Runtime modifications via :func:`set_config`

The user configuration file is read from the path in ``KERNELSTAT_CONFIG_FILE``
or, failing that, from ``~/.kernelstat/config.json``. It is only read when it
exists; KernelStat never creates it implicitly.

Environment variables follow the pattern ``KERNELSTAT_<SECTION>_<OPTION>``, for
example ``KERNELSTAT_NUMERICAL_AUTOCORRELATION_BLOCK_SIZE=50``.
'''

import os
import json
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .exceptions import ConfigurationError
from .types import ConfigDict, LogLevel

# Set up module-level logger
logger = logging.getLogger("kernelstat.core.config")

# Constants for configuration paths and environment variables
CONFIG_ENV_PREFIX = "KERNELSTAT_"
CONFIG_FILE_ENV = "KERNELSTAT_CONFIG_FILE"
LOG_LEVEL_ENV = "KERNELSTAT_LOG_LEVEL"
DEFAULT_CONFIG_DIR = Path.home() / ".kernelstat"
DEFAULT_CONFIG_FILENAME = "config.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_AUTOCORRELATION_METHODS = ("direct", "fft")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    CORE = "core"
    NUMERICAL = "numerical"
    LOGGING = "logging"


@dataclass
class CoreConfig:
    """
    Core configuration settings.

    Attributes:
        enable_numba: Whether to use Numba-compiled autocovariance loops
        autocorrelation_method: Default autocorrelation backend ("direct" or "fft")
    """
    enable_numba: bool = True
    autocorrelation_method: str = "direct"


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings.

    Attributes:
        autocorrelation_block_size: Number of lags fetched per block while a
            bandwidth estimator scans the autocorrelation sequence
        zero_variance_tolerance: Relative tolerance for treating a sample as
            constant: a standard deviation at or below this fraction of
            ``max(|x|)`` (its autocorrelations are then reported as zero)
    """
    autocorrelation_block_size: int = 20
    zero_variance_tolerance: float = 1e-15


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Level of the ``kernelstat`` package logger
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to attach a console handler
    """
    log_level: LogLevel = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True


@dataclass
class KernelStatConfig:
    """
    Complete configuration combining all sections.

    Attributes:
        core: Core configuration settings
        numerical: Numerical configuration settings
        logging: Logging configuration settings
    """
    core: CoreConfig = field(default_factory=CoreConfig)
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Constraint checks keyed by "section.option"; each returns an error message or None
_CONSTRAINTS: Dict[str, Callable[[Any], Optional[str]]] = {
    "core.autocorrelation_method": lambda v: (
        None if v in _AUTOCORRELATION_METHODS
        else f"must be one of {list(_AUTOCORRELATION_METHODS)}"),
    "numerical.autocorrelation_block_size": lambda v: (
        None if v >= 1 else "must be a positive integer"),
    "numerical.zero_variance_tolerance": lambda v: (
        None if v >= 0 else "must be non-negative"),
    "logging.log_level": lambda v: (
        None if v in _LOG_LEVELS else f"must be one of {list(_LOG_LEVELS)}"),
}


def _coerce(value: Any, value_type: type) -> Any:
    """Convert ``value`` to ``value_type``, parsing strings for bool/int/float."""
    if value_type is bool:
        if isinstance(value, str):
            return value.strip().lower() in ('true', 'yes', '1', 'y', 'on')
        return bool(value)
    if value_type is int:
        if isinstance(value, bool):
            raise TypeError("boolean is not a valid integer setting")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{value} is not an integer")
        return int(value)
    if value_type is float:
        return float(value)
    return value_type(value)


class ConfigManager:
    """
    Configuration manager for the KernelStat package.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the user configuration file
    """

    def __init__(self):
        """Initialize the configuration manager with default settings."""
        self._config = KernelStatConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None
        self._modified_keys = set()

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        This method:
        1. Loads user configuration from file if available
        2. Applies environment variable overrides
        3. Sets up logging based on configuration
        """
        if self._initialized:
            return

        self._load_user_config()
        self._apply_env_overrides()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _resolve_config_file(self) -> Path:
        env_file = os.environ.get(CONFIG_FILE_ENV)
        if env_file:
            return Path(env_file)
        return DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILENAME

    def _load_user_config(self) -> None:
        """Load user configuration from file if it exists."""
        self._config_file = self._resolve_config_file()
        if not self._config_file.exists():
            logger.debug("No user configuration file found")
            return

        try:
            with open(self._config_file, 'r') as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load user configuration: {e}")
            return

        self._update_from_dict(user_config)
        logger.debug(f"Loaded user configuration from {self._config_file}")

    def _apply_env_overrides(self) -> None:
        """Apply ``KERNELSTAT_<SECTION>_<OPTION>`` environment variable overrides.

        ``KERNELSTAT_LOG_LEVEL`` is accepted as a shorthand for
        ``KERNELSTAT_LOGGING_LOG_LEVEL``. Invalid values are logged and skipped.
        """
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == CONFIG_FILE_ENV:
                continue

            if env_var == LOG_LEVEL_ENV:
                section, option = ConfigSection.LOGGING.value, "log_level"
                value = value.strip().upper()
            else:
                key = env_var[len(CONFIG_ENV_PREFIX):]
                parts = key.lower().split('_', 1)
                if len(parts) != 2:
                    continue

                section, option = parts
                try:
                    ConfigSection(section)
                except ValueError:
                    continue

                if not hasattr(getattr(self._config, section), option):
                    continue

            try:
                self._assign(section, option, value)
                logger.debug(f"Applied environment override: {env_var}={value}")
            except ConfigurationError as e:
                logger.warning(f"Ignoring environment override {env_var}: {e.message}")

    def _setup_logging(self) -> None:
        """Configure the ``kernelstat`` package logger from the logging section."""
        root_logger = logging.getLogger("kernelstat")

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(getattr(logging, self._config.logging.log_level))

        if self._config.logging.console_logging:
            formatter = logging.Formatter(
                fmt=self._config.logging.log_format,
                datefmt=self._config.logging.log_date_format
            )
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update the configuration from a dictionary.

        Unknown sections/options and invalid values are logged and skipped.

        Args:
            config_dict: Dictionary containing configuration values
        """
        for section_name, section_dict in config_dict.items():
            if not hasattr(self._config, section_name) or not isinstance(section_dict, dict):
                logger.warning(f"Unknown configuration section: {section_name}")
                continue

            section = getattr(self._config, section_name)
            for option_name, option_value in section_dict.items():
                if not hasattr(section, option_name):
                    logger.warning(f"Unknown configuration option: {section_name}.{option_name}")
                    continue
                try:
                    self._assign(section_name, option_name, option_value)
                except ConfigurationError as e:
                    logger.warning(f"Failed to set {section_name}.{option_name}: {e.message}")

    def _assign(self, section: str, option: str, value: Any) -> None:
        """Coerce, validate and store a single option value."""
        section_obj = getattr(self._config, section)
        value_type = type(getattr(getattr(KernelStatConfig(), section), option))

        try:
            typed_value = _coerce(value, value_type)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for configuration option {section}.{option}",
                section=section,
                option=option,
                value=value,
                details=str(e)
            ) from e

        check = _CONSTRAINTS.get(f"{section}.{option}")
        problem = check(typed_value) if check else None
        if problem:
            raise ConfigurationError(
                f"Invalid value for configuration option {section}.{option}: {problem}",
                section=section,
                option=option,
                value=value
            )

        setattr(section_obj, option, typed_value)

    def _check_known(self, section: str, option: Optional[str] = None) -> None:
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                section=section,
                details=f"Valid sections are {self.get_sections()}"
            )
        if option is not None and not hasattr(getattr(self._config, section), option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                section=section,
                option=option,
                details=f"Valid options are {self.get_options(section)}"
            )

    def to_dict(self) -> ConfigDict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        return {
            section.value: {
                f.name: getattr(getattr(self._config, section.value), f.name)
                for f in fields(getattr(self._config, section.value))
            }
            for section in ConfigSection
        }

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Default value if the option is not found

        Returns:
            The configuration value, or the default if not found
        """
        section_obj = getattr(self._config, section, None)
        if section_obj is None or not hasattr(section_obj, option):
            return default
        return getattr(section_obj, option)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is not found, or the
                value fails validation
        """
        self._check_known(section, option)
        self._assign(section, option, value)
        self._modified_keys.add(f"{section}.{option}")

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()

        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        if section is None:
            self._config = KernelStatConfig()
            self._modified_keys.clear()
            self._setup_logging()
            logger.debug("Reset all configuration to defaults")
            return

        self._check_known(section, option)
        defaults = getattr(KernelStatConfig(), section)

        if option is None:
            setattr(self._config, section, defaults)
            self._modified_keys = {k for k in self._modified_keys
                                   if not k.startswith(f"{section}.")}
        else:
            setattr(getattr(self._config, section), option, getattr(defaults, option))
            self._modified_keys.discard(f"{section}.{option}")

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()

    def get_modified_options(self) -> Dict[str, Any]:
        """Return the options changed at runtime with their current values."""
        result = {}
        for key in sorted(self._modified_keys):
            section, option = key.split(".", 1)
            result[key] = self.get(section, option)
        return result

    def get_sections(self) -> List[str]:
        """List the configuration section names."""
        return [section.value for section in ConfigSection]

    def get_options(self, section: str) -> List[str]:
        """List the option names within a section."""
        self._check_known(section)
        return [f.name for f in fields(getattr(self._config, section))]

    def get_config_file(self) -> Optional[Path]:
        """Path of the user configuration file that was consulted."""
        return self._config_file


# Create a singleton instance of the configuration manager
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the configuration system (idempotent)."""
    _config_manager.initialize()


def get_config_manager() -> ConfigManager:
    """
    Get the configuration manager instance.

    Returns:
        The configuration manager instance
    """
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    return get_config_manager().get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        ConfigurationError: If the section or option is not found, or the
            value fails validation
    """
    get_config_manager().set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """
    Reset configuration to default values.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    get_config_manager().reset(section, option)


def to_dict() -> ConfigDict:
    """Return the full configuration as a nested dictionary."""
    return get_config_manager().to_dict()
