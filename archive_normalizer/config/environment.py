"""Environment variable loading and validation."""

import codecs
import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        legacy_encoding: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration."""
        self.log_level = log_level
        self.legacy_encoding = legacy_encoding
        self.environment = environment or "local"


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LEGACY_ENCODING: Override the fallback code page (e.g. cp1252, latin-1)
    - ENVIRONMENT: Environment label attached to every log record

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    legacy_encoding = os.getenv("LEGACY_ENCODING")
    environment = os.getenv("ENVIRONMENT")

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if legacy_encoding:
        legacy_encoding = legacy_encoding.strip()
        try:
            codecs.lookup(legacy_encoding)
        except LookupError:
            errors.append(f"Invalid LEGACY_ENCODING: '{legacy_encoding}' is not a known codec")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        legacy_encoding=legacy_encoding or None,
        environment=environment,
    )
