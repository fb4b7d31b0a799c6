"""Display formatting for article titles."""

import re
from typing import Optional

UNTITLED = "Sin Título"

# "(Sin Título) DIARIO DE AVISOS 1878.rtf, Articulo #2548"
_UNTITLED_EXPORT = re.compile(r"\(Sin T[ií]tulo\).*Art[ií]culo #(\d+)", re.IGNORECASE)


def format_article_title(title: Optional[str]) -> str:
    """Clean up titles generated for untitled word-processor exports.

    Example:
        >>> format_article_title("(Sin Título) DIARIO DE AVISOS 1878.rtf, Articulo #2548")
        'Artículo #2548'
    """
    if not title or not title.strip():
        return UNTITLED

    match = _UNTITLED_EXPORT.search(title)
    if match:
        return f"Artículo #{match.group(1)}"

    return title
