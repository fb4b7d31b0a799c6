"""Additional validation utilities for configuration."""

import codecs
import warnings
from typing import Any, Dict, List

MAX_REASONABLE_SNIPPET_LENGTH = 10000


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    normalization = config_dict.get("normalization", {})
    if isinstance(normalization, dict):
        encoding = normalization.get("legacy_encoding")
        if isinstance(encoding, str):
            try:
                canonical = codecs.lookup(encoding.strip()).name
            except LookupError:
                # Reported as a validation error instead
                canonical = None
            if canonical and canonical.startswith("utf-8"):
                warning_messages.append(
                    f"legacy_encoding '{encoding}' is UTF-8; invalid UTF-8 content "
                    "will not be recovered"
                )

        snippet_length = normalization.get("snippet_length")
        if isinstance(snippet_length, int) and snippet_length > MAX_REASONABLE_SNIPPET_LENGTH:
            warning_messages.append(
                f"Large snippet_length ({snippet_length}) makes extracts close to full articles"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
