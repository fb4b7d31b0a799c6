"""Plain-text paragraph handling and regex-based markup cleanup.

None of these use an HTML parser. Legacy content carries plenty of broken
markup, and a strict parser would reject documents these patterns handle.
"""

import re
from typing import List, Optional

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_LINE_BREAK = re.compile(r"\r?\n")
_TAG_LIKE = re.compile(r"<[^>]*>?")
_INLINE_TAG = re.compile(r"</?(?:b|i|u|span)\b[^>]*>", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s+")

_FONT_SIZE_DECLARATION = re.compile(r"\s*font-size:\s*[^;\"]+;?", re.IGNORECASE)
_FONT_FAMILY_DECLARATION = re.compile(r"\s*font-family:\s*[^;\"]+;?", re.IGNORECASE)
_EMPTY_STYLE_ATTRIBUTE = re.compile(r"\s*(?<![\w-])style=\"\s*\"", re.IGNORECASE)

PARAGRAPH_SEPARATOR = "\n\n"
FLAT_SEPARATOR = " "


def split_paragraphs(text: str) -> List[str]:
    """Split text on blank lines, returning trimmed, non-empty paragraphs."""
    paragraphs = (paragraph.strip() for paragraph in _PARAGRAPH_BREAK.split(text))
    return [paragraph for paragraph in paragraphs if paragraph]


def normalize_paragraphs(text: str, separator: str = PARAGRAPH_SEPARATOR) -> str:
    """Reflow plain text into paragraphs joined by separator.

    Example:
        >>> normalize_paragraphs("One\\n\\n\\n  Two  ", separator=" ")
        'One Two'
    """
    return separator.join(split_paragraphs(text))


def paragraphs_to_html(text: str) -> str:
    """Render plain text as <p> blocks, keeping single newlines as <br>."""
    blocks = []
    for paragraph in split_paragraphs(text):
        blocks.append(f"<p>{_LINE_BREAK.sub('<br>', paragraph)}</p>")
    return "\n".join(blocks)


def strip_html(html: str) -> str:
    """Remove every tag-like fragment and collapse whitespace.

    Unclosed fragments such as "<b" are removed too, which also eats a
    literal "<" in running text.

    Example:
        >>> strip_html("<p>Hola <b>mundo</b></p>")
        'Hola mundo'
    """
    without_tags = _TAG_LIKE.sub(" ", html)
    return _WHITESPACE_RUN.sub(" ", without_tags).strip()


def unwrap_inline_tags(html: str) -> str:
    """Remove <b>, <i>, <u> and <span> tags, keeping their text joined.

    Example:
        >>> unwrap_inline_tags("<p>ne<b>gri</b>ta</p>")
        '<p>negrita</p>'
    """
    return _INLINE_TAG.sub("", html)


def strip_font_styles(html: str) -> str:
    """Drop inline font-size and font-family declarations from HTML.

    Style attributes left empty are removed. Any other inline styling is
    kept.
    """
    cleaned = _FONT_SIZE_DECLARATION.sub("", html)
    cleaned = _FONT_FAMILY_DECLARATION.sub("", cleaned)
    return _EMPTY_STYLE_ATTRIBUTE.sub("", cleaned)


def truncate(text: str, max_length: Optional[int]) -> str:
    """Cut text to at most max_length characters (None means no limit)."""
    if max_length is None:
        return text
    return text[: max(0, max_length)]
