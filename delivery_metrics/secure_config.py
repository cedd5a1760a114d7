"""
Secure Configuration Management

Provides centralized, validated configuration for the application.
Reads environment variables (and a local .env file) once, validates them and
fails fast on anything malformed.

Usage:
    from delivery_metrics.secure_config import get_config

    config = get_config()
    print(config.build_store_path)
    print(config.log_level)

Environment variables:
    BUILD_STORE_PATH: JSON build store location (default: .tmp/delivery_metrics/builds.json)
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
    LOG_JSON: "true" for JSON console logs (default: false)
    LOG_FILE: Optional path for a JSON log file

Raises:
    ConfigurationError: If configuration is invalid
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from delivery_metrics.core.logging_config import LOG_LEVELS

DEFAULT_BUILD_STORE_PATH = ".tmp/delivery_metrics/builds.json"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass(frozen=True)
class MetricsConfig:
    """
    Validated application configuration.
    """

    build_store_path: str = DEFAULT_BUILD_STORE_PATH
    log_level: str = "INFO"
    log_json: bool = False
    log_file: Path | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.build_store_path or not self.build_store_path.strip():
            raise ConfigurationError("BUILD_STORE_PATH must not be empty")

        if not self.build_store_path.endswith(".json"):
            raise ConfigurationError(f"BUILD_STORE_PATH must point to a .json file: {self.build_store_path}")

        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}: {self.log_level}")


def _parse_bool(name: str, raw: str | None) -> bool:
    value = (raw or "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false: {raw}")


def load_config() -> MetricsConfig:
    """
    Build a validated configuration from the environment.

    Returns:
        MetricsConfig: Validated configuration

    Raises:
        ConfigurationError: If any value is invalid
    """
    load_dotenv()

    log_file = os.getenv("LOG_FILE")

    return MetricsConfig(
        build_store_path=os.getenv("BUILD_STORE_PATH", DEFAULT_BUILD_STORE_PATH),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_json=_parse_bool("LOG_JSON", os.getenv("LOG_JSON")),
        log_file=Path(log_file) if log_file else None,
    )


# Convenience function for getting configuration
_config_instance: MetricsConfig | None = None


def get_config() -> MetricsConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        MetricsConfig: The validated configuration
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def validate_config_on_startup() -> MetricsConfig:
    """
    Validate configuration at application startup.

    Call this in your main() function to fail fast if configuration is invalid.

    Raises:
        ConfigurationError: If any configuration value is invalid
    """
    reset_config()
    return get_config()
