"""Encoding resolution and mojibake repair for legacy archive content."""

import codecs
import re

from archive_normalizer.utils.accents import utf8_lead_chars

LEGACY_ENCODING = "cp1252"
PRIMARY_ENCODING = "utf-8-sig"
REPLACEMENT_CHAR = "\ufffd"
BYTE_ORDER_MARK = "\ufeff"

_PASSTHROUGH_ERRORS = "archive-latin1-passthrough"


def _latin1_passthrough(error: UnicodeError):
    """Codec error handler mapping undecodable bytes to the same Latin-1 code point."""
    if isinstance(error, UnicodeDecodeError):
        chunk = error.object[error.start:error.end]
        return "".join(chr(byte) for byte in chunk), error.end
    raise error


codecs.register_error(_PASSTHROUGH_ERRORS, _latin1_passthrough)

# A UTF-8 lead byte of an accented letter, read as Latin-1, followed by a
# continuation byte (0x80-0xBF) read the same way.
MOJIBAKE_SIGNATURE = re.compile(
    "[" + "".join(sorted(utf8_lead_chars())) + "][\u0080-\u00bf]"
)


def decode_legacy(buffer: bytes, legacy_encoding: str = LEGACY_ENCODING) -> str:
    """Decode buffer with the legacy single-byte code page.

    Never raises: bytes the code page leaves undefined come through as the
    Latin-1 character with the same value.
    """
    return bytes(buffer).decode(legacy_encoding, errors=_PASSTHROUGH_ERRORS)


def decode_bytes(buffer: bytes, legacy_encoding: str = LEGACY_ENCODING) -> str:
    """Decode a raw buffer, trying UTF-8 first and falling back to the legacy code page.

    Args:
        buffer: Raw bytes from a BLOB column or file
        legacy_encoding: Single-byte code page used when UTF-8 is invalid

    Returns:
        Decoded text. The UTF-8 decoding is preferred whenever it is clean.
    """
    raw = bytes(buffer)
    try:
        text = raw.decode(PRIMARY_ENCODING)
    except UnicodeDecodeError:
        return decode_legacy(raw, legacy_encoding)

    if REPLACEMENT_CHAR in text:
        return decode_legacy(raw, legacy_encoding)

    return text


def _as_raw_bytes(text: str, legacy_encoding: str) -> bytes:
    """Reinterpret every character of text as a single byte.

    Raises:
        UnicodeEncodeError: If a character has no byte in legacy_encoding
    """
    buffer = bytearray()
    for char in text:
        code = ord(char)
        if code < 0x100:
            buffer.append(code)
        else:
            buffer.extend(char.encode(legacy_encoding))
    return bytes(buffer)


def repair_mojibake(text: str, legacy_encoding: str = LEGACY_ENCODING) -> str:
    """Repair UTF-8 text that was decoded one byte at a time and re-encoded.

    Turns "cafÃ©" back into "café". The repair is only kept when the
    reinterpreted bytes are valid UTF-8; otherwise the text is returned as-is.
    Layered corruption is unwound until the signature disappears or a repair
    attempt fails, so calling this twice gives the same result as calling it
    once.

    Args:
        text: Decoded text that may contain double-encoded accented letters
        legacy_encoding: Code page used to map non-Latin-1 characters back to bytes

    Returns:
        Repaired text, or the original text when no valid repair exists. Text
    holding characters the code page cannot represent (other scripts, emoji)
    is never reinterpreted.
    """
    while MOJIBAKE_SIGNATURE.search(text):
        try:
            repaired = _as_raw_bytes(text, legacy_encoding).decode("utf-8")
        except UnicodeError:
            break
        if REPLACEMENT_CHAR in repaired:
            break
        text = repaired
    return text
