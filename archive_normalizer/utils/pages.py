"""Page reference extraction from article content.

Archive clippings note the newspaper pages they came from inline, e.g.
"(p.4)", "(P. 3 y 4)", "(P. 3 & 4)" or "(P. 3, 4 y 5)".
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

PAGE_NOT_SPECIFIED = "No especificada"

_RANGE_WITH_Y = re.compile(r"\(p\.?\s*(\d+)\s+y\s+(\d+)\)", re.IGNORECASE)
_RANGE_WITH_AMPERSAND = re.compile(r"\(p\.?\s*(\d+)\s+&\s+(\d+)\)", re.IGNORECASE)
_MULTIPLE_PAGES = re.compile(r"\(p\.?\s*(\d+(?:\s*,\s*\d+)*)\s+y\s+(\d+)\)", re.IGNORECASE)
_SINGLE_PAGE = re.compile(r"\(p\.?\s*(\d+)\)", re.IGNORECASE)


@dataclass(frozen=True)
class PageExtractionResult:
    """Outcome of a page reference search.

    Attributes:
        pages: Normalized page reference ("4", "3-4", "3, 4, 5"), or None
        matched: Whether any pattern matched
        pattern: Name of the pattern that matched
    """

    pages: Optional[str] = None
    matched: bool = False
    pattern: Optional[str] = None


def extract_page_reference(content: Union[bytes, bytearray, memoryview, str, None]) -> PageExtractionResult:
    """Find the page reference in raw article content.

    Bytes are read as Latin-1; the reference is plain ASCII, so the exact
    code page does not matter. Patterns are tried from most to least
    specific.

    Args:
        content: Raw RTF/text content

    Returns:
        PageExtractionResult (pages=None when nothing matched)
    """
    if not content:
        return PageExtractionResult()

    if isinstance(content, (bytes, bytearray, memoryview)):
        text = bytes(content).decode("latin-1")
    elif isinstance(content, str):
        text = content
    else:
        return PageExtractionResult()

    match = _RANGE_WITH_Y.search(text)
    if match:
        start, end = match.groups()
        return PageExtractionResult(pages=f"{start}-{end}", matched=True, pattern="range_y")

    match = _RANGE_WITH_AMPERSAND.search(text)
    if match:
        start, end = match.groups()
        return PageExtractionResult(pages=f"{start}-{end}", matched=True, pattern="range_ampersand")

    match = _MULTIPLE_PAGES.search(text)
    if match:
        page_list, last_page = match.groups()
        pages = [page.strip() for page in page_list.split(",")]
        pages.append(last_page)
        return PageExtractionResult(pages=", ".join(pages), matched=True, pattern="multiple_y")

    match = _SINGLE_PAGE.search(text)
    if match:
        return PageExtractionResult(pages=match.group(1), matched=True, pattern="single")

    return PageExtractionResult()


def normalize_page_reference(pages: Optional[str]) -> str:
    """Display form of a page reference."""
    return pages or PAGE_NOT_SPECIFIED
