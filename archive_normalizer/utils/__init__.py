"""Utility functions for accent handling, highlighting, pages and titles."""

from .accents import ACCENT_VARIANTS, base_letter, letter_variants
from .highlighting import build_search_pattern, extract_snippets, highlight_matches
from .pages import PageExtractionResult, extract_page_reference, normalize_page_reference
from .titles import format_article_title

__all__ = [
    # Accents
    "ACCENT_VARIANTS",
    "base_letter",
    "letter_variants",
    # Highlighting
    "build_search_pattern",
    "highlight_matches",
    "extract_snippets",
    # Pages
    "PageExtractionResult",
    "extract_page_reference",
    "normalize_page_reference",
    # Titles
    "format_article_title",
]
