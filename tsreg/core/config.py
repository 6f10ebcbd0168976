'''
Configuration management for tsreg.

The numerical constants used by the solvers (pseudo-inverse tolerance, LASSO
tolerance and iteration limit, the sigmoid saturation bound, ...) live here as
dataclass sections so that they can be inspected and overridden without
touching the solver code.

The configuration follows a layered approach:
1. Defaults built into the package
2. Environment variables named TSREG_<SECTION>_<OPTION>
3. Runtime modifications through set_config

Solvers read a snapshot of their section once per call, so changing the
configuration while a fit is running does not affect that fit.
'''

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from .exceptions import InvalidValueError

# Set up module-level logger
logger = logging.getLogger("tsreg.core.config")

# Constants for environment variables
CONFIG_ENV_PREFIX = "TSREG_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    NUMERICAL = "numerical"
    PERFORMANCE = "performance"
    LOGGING = "logging"


@dataclass
class NumericalConfig:
    """
    Numerical tolerances and iteration limits.

    Attributes:
        pinv_tolerance: Singular values at or below this are dropped by the pseudo-inverse
        lasso_tol: Convergence tolerance on the largest coefficient change
        lasso_max_iter: Maximum number of LASSO sweeps or ISTA iterations
        gram_floor: Lower bound for the scaled column norm in coordinate descent
        logistic_saturation: Linear predictor magnitude beyond which the sigmoid saturates
        backtracking_steps: Maximum step halvings per ISTA iteration
        probability_clip: Clamp applied to probabilities in the Bernoulli log-likelihood
        degenerate_range: Relative range added to the histogram when all values are equal
    """
    pinv_tolerance: float = 1e-12
    lasso_tol: float = 1e-5
    lasso_max_iter: int = 10000
    gram_floor: float = 1e-8
    logistic_saturation: float = 20.0
    backtracking_steps: int = 10
    probability_clip: float = 1e-12
    degenerate_range: float = 1e-9


@dataclass
class PerformanceConfig:
    """
    Performance configuration settings.

    Attributes:
        max_workers: Worker threads for the parallel ACF (None uses os.cpu_count())
    """
    max_workers: Optional[int] = None


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Level of the package logger
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to attach a console handler
    """
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True


@dataclass
class TsregConfig:
    """Complete configuration, one attribute per section."""
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _coerce(hint: Any, value: Any) -> Any:
    """Convert ``value`` to the type described by the annotation ``hint``."""
    if get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
            return None
        hint = args[0]

    if hint is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("true", "yes", "1", "y"):
                return True
            if lowered in ("false", "no", "0", "n"):
                return False
        raise TypeError(f"cannot interpret {value!r} as a boolean")

    if hint is int:
        if isinstance(value, bool):
            raise TypeError("booleans are not accepted for integer options")
        if isinstance(value, float):
            if not value.is_integer():
                raise TypeError(f"{value!r} is not an integer")
            return int(value)
        return int(value)

    if hint is float:
        if isinstance(value, bool):
            raise TypeError("booleans are not accepted for float options")
        return float(value)

    return str(value)


class ConfigManager:
    """
    Configuration manager for tsreg.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the manager has applied environment overrides
        _modified_keys: Options changed at runtime
    """

    def __init__(self) -> None:
        self._config = TsregConfig()
        self._initialized = False
        self._modified_keys: set = set()

    def initialize(self) -> None:
        """
        Apply environment variable overrides and configure logging.

        Calling this more than once has no effect.
        """
        if self._initialized:
            return

        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _apply_env_overrides(self) -> None:
        """Apply TSREG_<SECTION>_<OPTION> environment variables."""
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX):
                continue

            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split('_', 1)
            if len(parts) != 2:
                continue

            section, option = parts
            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            hint = get_type_hints(type(section_obj))[option]
            try:
                setattr(section_obj, option, _coerce(hint, value))
                logger.debug(f"Applied environment override: {env_var}={value}")
            except (TypeError, ValueError) as e:
                logger.warning(f"Failed to apply environment override {env_var}: {e}")

        # Short form kept for compatibility with TSREG_LOG_LEVEL
        level = os.environ.get("TSREG_LOG_LEVEL")
        if level:
            self._config.logging.log_level = level
        self._config.logging.log_level = self._config.logging.log_level.upper()

    def _setup_logging(self) -> None:
        """Configure the package logger from the logging section."""
        cfg = self._config.logging
        root_logger = logging.getLogger("tsreg")

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(getattr(logging, cfg.log_level))

        if cfg.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(
                logging.Formatter(fmt=cfg.log_format, datefmt=cfg.log_date_format)
            )
            root_logger.addHandler(console_handler)

    def _validate_config(self) -> None:
        """Check every section against its constraints, falling back to defaults."""
        defaults = TsregConfig()
        for section in ConfigSection:
            section_obj = getattr(self._config, section.value)
            for f in dataclasses.fields(section_obj):
                value = getattr(section_obj, f.name)
                try:
                    self._validate_constraint(section.value, f.name, value)
                except InvalidValueError as e:
                    logger.warning(f"{e.message}; using default")
                    setattr(section_obj, f.name,
                            getattr(getattr(defaults, section.value), f.name))

    def _validate_constraint(self, section: str, option: str, value: Any) -> None:
        setting = f"{section}.{option}"
        if section == "numerical":
            if option in ("lasso_max_iter",) and value < 1:
                raise InvalidValueError(f"{setting} must be at least 1",
                                        param_name=setting, param_value=value)
            if option == "backtracking_steps" and value < 0:
                raise InvalidValueError(f"{setting} must be non-negative",
                                        param_name=setting, param_value=value)
            if option not in ("lasso_max_iter", "backtracking_steps") and not value > 0:
                raise InvalidValueError(f"{setting} must be positive",
                                        param_name=setting, param_value=value)
        elif section == "performance":
            if option == "max_workers" and value is not None and value < 1:
                raise InvalidValueError(f"{setting} must be at least 1",
                                        param_name=setting, param_value=value)
        elif section == "logging":
            if option == "log_level" and value not in _LOG_LEVELS:
                raise InvalidValueError(f"{setting} must be one of {', '.join(_LOG_LEVELS)}",
                                        param_name=setting, param_value=value)

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
            InvalidValueError: If the section or option is unknown, or the value
                cannot be converted or violates the option's constraint
        """
        try:
            ConfigSection(section)
        except ValueError:
            raise InvalidValueError(
                f"Unknown configuration section: {section}",
                param_name="section",
                param_value=section
            ) from None

        section_obj = getattr(self._config, section)
        if not hasattr(section_obj, option):
            raise InvalidValueError(
                f"Unknown configuration option: {section}.{option}",
                param_name=f"{section}.{option}",
                param_value=value
            )

        hint = get_type_hints(type(section_obj))[option]
        try:
            typed_value = _coerce(hint, value)
        except (TypeError, ValueError) as e:
            raise InvalidValueError(
                f"Failed to set configuration option: {section}.{option}",
                param_name=f"{section}.{option}",
                param_value=value,
                details=str(e)
            ) from e

        if section == "logging" and option == "log_level":
            typed_value = typed_value.upper()
        self._validate_constraint(section, option, typed_value)

        setattr(section_obj, option, typed_value)
        self._modified_keys.add(f"{section}.{option}")
        logger.debug(f"Set configuration option: {section}.{option}={typed_value}")

        if section == "logging":
            self._setup_logging()

    def _startup_config(self) -> TsregConfig:
        """Defaults with the TSREG_ environment overrides applied."""
        current = self._config
        self._config = TsregConfig()
        try:
            self._apply_env_overrides()
            self._validate_config()
            return self._config
        finally:
            self._config = current

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to its startup values.

        Startup values are the defaults with the TSREG_ environment overrides
        applied. The package logger is reconfigured afterwards.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The option to reset, or None to reset the entire section

        Raises:
            InvalidValueError: If the section or option is unknown
        """
        if section is not None and not hasattr(self._config, section):
            raise InvalidValueError(f"Unknown configuration section: {section}",
                                    param_name="section", param_value=section)
        if (section is not None and option is not None
                and not hasattr(getattr(self._config, section), option)):
            raise InvalidValueError(f"Unknown configuration option: {section}.{option}",
                                    param_name=f"{section}.{option}")

        defaults = self._startup_config()
        if section is None:
            self._config = defaults
            self._modified_keys.clear()
            logger.debug("Reset all configuration to defaults")
        elif option is None:
            setattr(self._config, section, getattr(defaults, section))
            self._modified_keys = {k for k in self._modified_keys
                                   if not k.startswith(f"{section}.")}
        else:
            section_obj = getattr(self._config, section)
            setattr(section_obj, option, getattr(getattr(defaults, section), option))
            self._modified_keys.discard(f"{section}.{option}")

        self._setup_logging()

    def get_modified_options(self) -> List[str]:
        """Options changed at runtime, as ``section.option`` strings."""
        return sorted(self._modified_keys)

    def get_section(self, section: str) -> Any:
        """
        Return a copy of a configuration section.

        Raises:
            InvalidValueError: If the section is unknown
        """
        if not hasattr(self._config, section):
            raise InvalidValueError(f"Unknown configuration section: {section}",
                                    param_name="section", param_value=section)
        return dataclasses.replace(getattr(self._config, section))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a nested dictionary."""
        return dataclasses.asdict(self._config)


# Global configuration manager instance
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Apply environment overrides and configure logging."""
    _config_manager.initialize()


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
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager.get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        InvalidValueError: If the section or option is unknown or the value is invalid
    """
    if not _config_manager._initialized:
        initialize_config()
    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """Reset configuration to default values."""
    if not _config_manager._initialized:
        initialize_config()
    _config_manager.reset(section, option)


def get_config_manager() -> ConfigManager:
    """Get the configuration manager instance."""
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager


def get_numerical_config() -> NumericalConfig:
    """
    Get a snapshot of the numerical configuration.

    Returns:
        A copy of the numerical section; later changes do not affect it
    """
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager.get_section("numerical")


def get_performance_config() -> PerformanceConfig:
    """Get a snapshot of the performance configuration."""
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager.get_section("performance")


def get_logging_config() -> LoggingConfig:
    """Get a snapshot of the logging configuration."""
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager.get_section("logging")
