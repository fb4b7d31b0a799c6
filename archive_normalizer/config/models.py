"""Configuration schema models using Pydantic."""

import codecs
import re
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class NormalizationSettings(BaseModel):
    """Settings for the document normalization pipeline."""

    legacy_encoding: str = Field(
        "cp1252",
        min_length=1,
        description="Single-byte code page used when content is not valid UTF-8",
    )
    unavailable_placeholder: str = Field(
        "Contenido no disponible",
        description="HTML output for documents with no content",
    )
    invalid_content_placeholder: str = Field(
        "Error: contenido no válido",
        description="HTML output for content of an unsupported type",
    )
    snippet_length: int = Field(
        500, ge=0, description="Default maximum length of plain-text extracts"
    )
    preserve_paragraphs: bool = Field(
        True, description="Keep blank-line paragraph breaks in plain-text output"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("legacy_encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the code page is known to Python's codec registry."""
        stripped = v.strip()
        try:
            codecs.lookup(stripped)
        except LookupError:
            raise ValueError(f"Unknown encoding: {stripped}")
        return stripped


class HighlightSettings(BaseModel):
    """Settings for search-term highlighting."""

    tag: str = Field("mark", description="HTML element wrapped around matches")
    snippet_context_chars: int = Field(
        100, ge=0, le=2000, description="Characters of context around snippet matches"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Tag must be a bare element name."""
        stripped = v.strip().lower()
        if not re.fullmatch(r"[a-z][a-z0-9-]*", stripped):
            raise ValueError(f"Invalid HTML tag name: '{v}'")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration model."""

    normalization: NormalizationSettings = Field(default_factory=NormalizationSettings)
    highlighting: HighlightSettings = Field(default_factory=HighlightSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"extra": "forbid"}
