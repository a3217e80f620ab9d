"""
Configuration management for runstate.
"""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

_config_lock = threading.Lock()

VALID_REPORT_FORMATS = ["console", "json"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass
class StateConfig:
    """Main configuration for runstate."""

    report_format: str = "console"
    show_running: bool = True
    fuzzy: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.log_level = str(self.log_level).upper()


def _parse_env_bool(var_name: str) -> Optional[bool]:
    """
    Safely parse a boolean from an environment variable.

    Args:
        var_name: Name of the environment variable

    Returns:
        Parsed boolean value, or None if the variable is not set

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    value = os.environ.get(var_name)
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Environment variable {var_name} must be a boolean (true/false), got: '{value}'"
    )


def _read_config_file(config_file: str) -> Dict[str, Any]:
    """Read a YAML config file, which must hold a mapping (or nothing)."""
    logger.info("Loading configuration from %s", config_file)
    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file '{config_file}': {e}")
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    except PermissionError:
        raise ConfigurationError(f"Permission denied reading config file '{config_file}'")
    except OSError as e:
        raise ConfigurationError(f"Unable to read config file '{config_file}': {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file '{config_file}' must contain a mapping at the top level"
        )
    return data


def load_config(config_file: Optional[str] = None) -> StateConfig:
    """
    Build a StateConfig from defaults, an optional YAML file and
    ``RUNSTATE_*`` environment variables, later sources winning.

    Raises:
        FileNotFoundError: If config_file is given but missing
        ConfigurationError: On unreadable or malformed files, unknown keys
            or bad environment values
    """
    with _config_lock:
        merged: Dict[str, Any] = _read_config_file(config_file) if config_file else {}

        env_overrides = _load_from_env()
        if env_overrides:
            logger.debug("Environment overrides: %s", sorted(env_overrides))
        merged.update(env_overrides)

        try:
            return StateConfig(**merged)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")


def _load_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Supported environment variables:
    - RUNSTATE_REPORT_FORMAT: Report format (console, json)
    - RUNSTATE_LOG_LEVEL: Logging level
    - RUNSTATE_FUZZY: Use fuzzy matching for queries (true/false)
    - RUNSTATE_SHOW_RUNNING: Include running positions in reports (true/false)

    Returns:
        Dictionary of configuration values from environment

    Raises:
        ConfigurationError: If environment variable values are invalid
    """
    env_config: Dict[str, Any] = {}

    if "RUNSTATE_REPORT_FORMAT" in os.environ:
        env_config["report_format"] = os.environ["RUNSTATE_REPORT_FORMAT"]

    if "RUNSTATE_LOG_LEVEL" in os.environ:
        env_config["log_level"] = os.environ["RUNSTATE_LOG_LEVEL"]

    fuzzy = _parse_env_bool("RUNSTATE_FUZZY")
    if fuzzy is not None:
        env_config["fuzzy"] = fuzzy

    show_running = _parse_env_bool("RUNSTATE_SHOW_RUNNING")
    if show_running is not None:
        env_config["show_running"] = show_running

    return env_config


def validate_config(config: StateConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: StateConfig to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: List[str] = []

    if config.report_format not in VALID_REPORT_FORMATS:
        errors.append(
            f"report_format must be one of {VALID_REPORT_FORMATS}: {config.report_format}"
        )

    if config.log_level not in VALID_LOG_LEVELS:
        errors.append(f"log_level must be one of {VALID_LOG_LEVELS}: {config.log_level}")

    if not isinstance(config.fuzzy, bool):
        errors.append(f"fuzzy must be true or false: {config.fuzzy}")

    if not isinstance(config.show_running, bool):
        errors.append(f"show_running must be true or false: {config.show_running}")

    return errors
