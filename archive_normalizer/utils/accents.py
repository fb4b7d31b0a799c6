"""Shared accent table for Spanish-language archive text.

A single mapping from base letter to its accented forms. The highlighter
uses it to build accent-insensitive patterns, and the mojibake detector
derives its corruption signature from the UTF-8 encoding of the same
letters.
"""

from typing import Dict, FrozenSet

# Lowercase base letter -> lowercase accented variants.
ACCENT_VARIANTS: Dict[str, str] = {
    "a": "áàäâ",
    "e": "éèëê",
    "i": "íìïî",
    "o": "óòöô",
    "u": "úùüû",
    "n": "ñ",
}


def _build_base_lookup() -> Dict[str, str]:
    lookup = {}
    for base, variants in ACCENT_VARIANTS.items():
        for variant in variants:
            lookup[variant] = base
            lookup[variant.upper()] = base
    return lookup


# Any accented letter (either case) -> lowercase base letter.
BASE_LETTER: Dict[str, str] = _build_base_lookup()

ACCENTED_LETTERS: FrozenSet[str] = frozenset(BASE_LETTER)


def base_letter(char: str) -> str:
    """Return the lowercase base letter for char, or char lowercased if unaccented."""
    return BASE_LETTER.get(char, char.lower())


def letter_variants(char: str) -> str:
    """Return every form of char's base letter, upper and lower case.

    Returns an empty string when char has no accented variants, so callers
    can fall back to a literal match.

    Example:
        >>> letter_variants("é")
        'eEéèëêÉÈËÊ'
    """
    base = base_letter(char)
    variants = ACCENT_VARIANTS.get(base)
    if variants is None:
        return ""
    return base + base.upper() + variants + variants.upper()


def utf8_lead_chars() -> FrozenSet[str]:
    """Characters a UTF-8 lead byte of any accented letter shows up as when read as Latin-1."""
    return frozenset(chr(letter.encode("utf-8")[0]) for letter in ACCENTED_LETTERS)
