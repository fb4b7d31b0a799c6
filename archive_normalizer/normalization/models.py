"""Data models for the document normalization layer.

This module defines the values flowing through the pipeline: how content
is classified, the options for plain-text output, and the result type the
facade branches on instead of catching exceptions inline.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

RawDocument = Union[bytes, bytearray, memoryview, str, None]
DocumentId = Union[int, str, None]

BYTES_TYPES = (bytes, bytearray, memoryview)


class ContentKind(str, Enum):
    """How decoded content is processed."""

    RTF = "rtf"
    PLAIN = "plain"


@dataclass(frozen=True)
class PlainTextOptions:
    """Options for plain-text output.

    Attributes:
        max_length: Maximum output length in characters (None = unlimited)
        preserve_paragraphs: Join paragraphs with a blank line (True) or a single space (False)
    """

    max_length: Optional[int] = None
    preserve_paragraphs: bool = True


@dataclass(frozen=True)
class DecodeFailure:
    """Why a conversion attempt failed.

    Attributes:
        stage: Pipeline stage that was running (decode, rtf, ...)
        error: The exception raised by that stage
    """

    stage: str
    error: Exception

    @property
    def error_type(self) -> str:
        """Name of the exception class."""
        return type(self.error).__name__

    def describe(self) -> str:
        """Short human-readable description for logs."""
        return f"{self.stage}: {self.error_type}: {self.error}"


@dataclass(frozen=True)
class ConversionOutcome:
    """Either a converted value or the failure that prevented it."""

    value: Optional[str] = None
    failure: Optional[DecodeFailure] = None
    kind: Optional[ContentKind] = None

    @property
    def ok(self) -> bool:
        """Whether the conversion produced a value."""
        return self.failure is None

    @classmethod
    def success(cls, value: str, kind: ContentKind) -> "ConversionOutcome":
        return cls(value=value, kind=kind)

    @classmethod
    def failed(cls, stage: str, error: Exception) -> "ConversionOutcome":
        return cls(failure=DecodeFailure(stage=stage, error=error))


@dataclass
class NormalizedDocument:
    """Result of normalizing one document in a batch.

    Attributes:
        document_id: Identifier supplied by the caller
        plain_text: Normalized plain text
        page_reference: Page reference found in the content, if any
        content_kind: Branch the content went through (None when empty or on fallback)
        used_fallback: True when conversion failed and the raw-text fallback was used
    """

    document_id: DocumentId
    plain_text: str
    page_reference: Optional[str] = None
    content_kind: Optional[ContentKind] = None
    used_fallback: bool = False
