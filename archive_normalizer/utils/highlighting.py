"""Accent-insensitive search-term highlighting for archive HTML.

Search terms typed without accents ("cafe") must still find the accented
text of the articles ("café"), and the other way round. Highlighting only
touches text between tags, so attribute values and tag names are never
modified.
"""

import re
from typing import List, Optional, Pattern

from .accents import letter_variants

_TAG_SPLIT = re.compile(r"(<[^>]+>)")


def _char_pattern(char: str) -> str:
    if char == " ":
        return r"\s+"
    variants = letter_variants(char)
    if variants:
        return "[" + variants + "]"
    return re.escape(char)


def build_search_pattern(search_term: Optional[str]) -> Optional[Pattern[str]]:
    """Build a case- and accent-insensitive pattern for a search term.

    Args:
        search_term: Raw user-entered term or phrase

    Returns:
        Compiled pattern, or None when the term is empty or whitespace-only

    Example:
        >>> build_search_pattern("cafe").pattern
        'c[aAáàäâÁÀÄÂ]f[eEéèëêÉÈËÊ]'
    """
    if not search_term:
        return None

    term = search_term.strip()
    if not term:
        return None

    return re.compile("".join(_char_pattern(char) for char in term), re.IGNORECASE)


def highlight_matches(html: str, search_term: Optional[str], tag: str = "mark") -> str:
    """Wrap every match of search_term in html with a highlight element.

    Matches keep their original case and accents; only markup is added.
    Text inside <...> spans is never searched.

    Args:
        html: Sanitized HTML (or plain text)
        search_term: Term or phrase (e.g. "hija del Guaire")
        tag: Element name used as the highlight marker

    Returns:
        Highlighted HTML, or html unchanged when there is nothing to highlight

    Example:
        >>> highlight_matches("<p>El café está cerrado</p>", "cafe")
        '<p>El <mark>café</mark> está cerrado</p>'
    """
    if not html:
        return html

    pattern = build_search_pattern(search_term)
    if pattern is None:
        return html

    replacement = f"<{tag}>\\g<0></{tag}>"
    parts = _TAG_SPLIT.split(html)

    # re.split with a capturing group alternates text and tag segments
    for index in range(0, len(parts), 2):
        if parts[index]:
            parts[index] = pattern.sub(replacement, parts[index])

    return "".join(parts)


def extract_snippets(
    text: str,
    search_term: Optional[str],
    context_chars: int = 100,
    max_snippets: int = 3,
) -> List[str]:
    """Extract excerpts of plain text around accent-insensitive matches.

    Used for search result listings, where the full article is too long to
    show.

    Args:
        text: Plain text to extract from
        search_term: Term or phrase to find
        context_chars: Characters of context before and after each match
        max_snippets: Maximum number of excerpts returned

    Returns:
        Excerpts in document order, with "..." where text was cut

    Example:
        >>> extract_snippets("La hija del Guaire volvió a Caracas.", "guaire", context_chars=8)
        ['...ija del Guaire volvió...']
    """
    pattern = build_search_pattern(search_term)
    if not text or pattern is None or max_snippets <= 0:
        return []

    snippets: List[str] = []
    covered_until = 0

    for match in pattern.finditer(text):
        # Skip matches already shown inside the previous excerpt
        if match.start() < covered_until:
            continue

        start = max(0, match.start() - context_chars)
        end = min(len(text), match.end() + context_chars)

        snippet = text[start:end].strip()
        if start > 0:
            snippet = "..." + snippet
        if end < len(text):
            snippet = snippet + "..."

        snippets.append(snippet)
        covered_until = end

        if len(snippets) >= max_snippets:
            break

    return snippets
