"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """
    Exception raised when configuration validation fails.

    Carries the individual validation errors plus suggestions for fixing
    them, rendered into one readable message.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    @classmethod
    def from_validation_error(
        cls, error: ValidationError, suggestions: Optional[List[str]] = None
    ) -> "ConfigurationError":
        """Build a ConfigurationError from a pydantic ValidationError."""
        messages = []
        for item in error.errors():
            field_path = " -> ".join(str(loc) for loc in item["loc"]) or "(root)"
            if item["type"] == "extra_forbidden":
                messages.append(f"Unknown setting: {field_path}")
            elif item["type"].endswith("_type"):
                expected = item["type"].replace("_type", "")
                messages.append(
                    f"Invalid type for '{field_path}': expected {expected}, got {item.get('input')!r}"
                )
            else:
                messages.append(f"{field_path}: {item['msg']}")

        return cls(
            "Configuration validation failed",
            errors=messages,
            suggestions=suggestions
            or [
                "Review config.example.yaml for the expected settings",
                "Verify field types match the expected schema",
            ],
        )

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            parts.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            parts.append("\nSuggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)
