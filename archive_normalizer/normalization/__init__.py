"""Document normalization pipeline for legacy archive content.

This package provides:
- decode_bytes / repair_mojibake: encoding resolution
- unescape_rtf_hex / RtfConverter: RTF handling
- strip_html / strip_font_styles / normalize_paragraphs: markup and text cleanup
- DocumentNormalizer: facade producing plain text or sanitized HTML
"""

from .encoding import decode_bytes, repair_mojibake
from .exceptions import RtfConversionError
from .models import ContentKind, ConversionOutcome, DecodeFailure, NormalizedDocument, PlainTextOptions
from .rtf import RtfConverter, RtfTemplate, is_rtf, rtf_to_structured_output, unescape_rtf_hex
from .service import DocumentNormalizer, to_plain_text, to_sanitized_html
from .text import normalize_paragraphs, paragraphs_to_html, strip_font_styles, strip_html

__all__ = [
    "DocumentNormalizer",
    "to_plain_text",
    "to_sanitized_html",
    "decode_bytes",
    "repair_mojibake",
    "unescape_rtf_hex",
    "is_rtf",
    "RtfConverter",
    "RtfTemplate",
    "rtf_to_structured_output",
    "RtfConversionError",
    "normalize_paragraphs",
    "paragraphs_to_html",
    "strip_html",
    "strip_font_styles",
    "ContentKind",
    "ConversionOutcome",
    "DecodeFailure",
    "NormalizedDocument",
    "PlainTextOptions",
]
