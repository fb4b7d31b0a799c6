"""RTF unescaping and structural conversion to HTML.

Legacy word-processor exports escape every accented byte as \\'hh. Those are
rewritten to literal characters before the document is tokenized with
striprtf's lexer. The converter walks the tokens keeping the character
formatting of each group, and renders paragraphs with inline markup for
bold, italic, underline and font changes.
"""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from striprtf.striprtf import PATTERN, destinations, specialchars

from archive_normalizer.logging import get_logger

from .encoding import BYTE_ORDER_MARK, LEGACY_ENCODING, decode_legacy
from .exceptions import RtfConversionError

logger = get_logger(__name__, component="rtf")

RTF_MARKER = "{\\rtf"

_HEX_ESCAPE_PATTERN = re.compile(r"\\'([0-9a-fA-F]{2})")
_DEFAULT_FONT_PATTERN = re.compile(r"\\deff(\d+)")
_FONT_ENTRY_PATTERN = re.compile(r"\{\\f(\d+)(?:\\[a-zA-Z]+-?\d*)*\s*([^;{}\\]+);")
_FONT_SIZE_PATTERN = re.compile(r"\\fs(\d+)")

_PARAGRAPH_BREAKS = frozenset({"par", "sect", "page", "row"})
_TOGGLES = {"b": "bold", "i": "italic", "ul": "underline"}
_UNDERLINE_STYLES = frozenset({
    "uld", "uldb", "uldash", "uldashd", "uldashdd", "ulhwave", "ulldash",
    "ulth", "ulthd", "ulthdash", "ulthdashd", "ulthdashdd", "ulthldash",
    "ululdbwave", "ulw", "ulwave",
})

DOCUMENT_SHELL = """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<style>
body {{
  margin-left: 1in;
  margin-right: 1in;
  margin-top: 1in;
}}
</style>
</head>
<body>
{content}
</body>
</html>
"""


def is_rtf(text: str) -> bool:
    """Whether text is RTF source (starts with the {\\rtf marker once trimmed).

    A leading byte order mark counts as whitespace.
    """
    return text.lstrip(BYTE_ORDER_MARK).strip().startswith(RTF_MARKER)


def unescape_rtf_hex(rtf_source: str) -> str:
    """Rewrite \\'hh escapes in the 0x80-0xFF range into literal characters.

    The byte value is used as a Latin-1 code point. Escapes below 0x80 are
    left untouched so low-range control escapes survive for the parser.

    Example:
        >>> unescape_rtf_hex(r"Caf\\'e9")
        'Café'
    """

    def _replace(match: "re.Match[str]") -> str:
        code = int(match.group(1), 16)
        if 0x80 <= code <= 0xFF:
            return chr(code)
        return match.group(0)

    return _HEX_ESCAPE_PATTERN.sub(_replace, rtf_source)


class RtfTemplate(str, Enum):
    """How converted content is wrapped."""

    FULL_DOCUMENT = "full-document"
    CONTENT_ONLY = "content-only"

    def render(self, content: str) -> str:
        """Wrap content according to this template."""
        if self is RtfTemplate.FULL_DOCUMENT:
            return DOCUMENT_SHELL.format(content=content)
        return content


@dataclass(frozen=True)
class CharacterFormat:
    """Character formatting in effect for a run of text.

    Attributes:
        bold: \\b is on
        italic: \\i is on
        underline: \\ul (or one of its variants) is on
        font: Font table number selected with \\fN (None = document default)
        size: Font size in half-points from \\fsN (None = document default)
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    font: Optional[str] = None
    size: Optional[int] = None


TextRun = Tuple[CharacterFormat, str]


@dataclass
class DocumentHeader:
    """Font information read from the RTF header."""

    fonts: Dict[str, str] = field(default_factory=dict)
    default_font: Optional[str] = None
    base_size: Optional[int] = None


def read_header(rtf_source: str) -> DocumentHeader:
    """Read the font table, default font and base size from RTF source."""
    header = DocumentHeader()
    header.fonts = {
        number: name.strip() for number, name in _FONT_ENTRY_PATTERN.findall(rtf_source)
    }

    default_match = _DEFAULT_FONT_PATTERN.search(rtf_source)
    if default_match and header.fonts.get(default_match.group(1)):
        header.default_font = default_match.group(1)
    elif header.fonts:
        header.default_font = next(iter(header.fonts))

    size_match = _FONT_SIZE_PATTERN.search(rtf_source)
    if size_match:
        header.base_size = int(size_match.group(1))

    return header


def _points(half_points: int) -> str:
    # \fsN is expressed in half-points
    return f"{half_points / 2:g}pt"


def detect_base_style(rtf_source: str) -> Dict[str, str]:
    """Read the document's default font family and size from the RTF header.

    Args:
        rtf_source: RTF source text

    Returns:
        CSS declarations keyed by property name; empty when nothing is declared
    """
    return _base_style(read_header(rtf_source))


def _base_style(header: DocumentHeader) -> Dict[str, str]:
    style: Dict[str, str] = {}
    if header.default_font is not None:
        style["font-family"] = header.fonts[header.default_font]
    if header.base_size is not None:
        style["font-size"] = _points(header.base_size)
    return style


def _apply_control_word(fmt: CharacterFormat, word: str, arg: Optional[str]) -> CharacterFormat:
    if word in _TOGGLES:
        return replace(fmt, **{_TOGGLES[word]: arg != "0"})
    if word in _UNDERLINE_STYLES:
        return replace(fmt, underline=True)
    if word == "ulnone":
        return replace(fmt, underline=False)
    if word == "plain":
        return CharacterFormat()
    if word == "f" and arg is not None:
        return replace(fmt, font=arg)
    if word == "fs" and arg is not None:
        return replace(fmt, size=int(arg))
    return fmt


class _ParagraphCollector:
    """Accumulates formatted runs, one list per paragraph."""

    def __init__(self):
        self.paragraphs: List[List[TextRun]] = []
        self.runs: List[TextRun] = []

    def add(self, fmt: CharacterFormat, text: str) -> None:
        if self.runs and self.runs[-1][0] == fmt:
            self.runs[-1] = (fmt, self.runs[-1][1] + text)
        else:
            self.runs.append((fmt, text))

    def end_paragraph(self) -> None:
        self.paragraphs.append(self.runs)
        self.runs = []

    def finish(self) -> List[List[TextRun]]:
        self.end_paragraph()
        return self.paragraphs


def parse_paragraphs(rtf_source: str, encoding: str = LEGACY_ENCODING) -> List[List[TextRun]]:
    """Split RTF source into paragraphs of formatted text runs.

    Groups restore the formatting of their parent on close. Destination
    groups (font table, stylesheet, pictures, \\* groups) produce no text, and
    anything outside the outermost group is ignored.

    Args:
        rtf_source: RTF source, usually already passed through unescape_rtf_hex
        encoding: Code page for \\'hh escapes still present in the source

    Returns:
        One list of (CharacterFormat, text) runs per paragraph, empty ones included
    """
    collector = _ParagraphCollector()
    stack: List[Tuple[CharacterFormat, bool, int]] = []
    fmt = CharacterFormat()
    ignorable = False
    ucskip = 1
    curskip = 0

    for match in PATTERN.finditer(rtf_source):
        word, arg, hex_code, char, brace, tchar = match.groups()

        if brace:
            curskip = 0
            if brace == "{":
                stack.append((fmt, ignorable, ucskip))
                continue
            if not stack:
                break
            fmt, ignorable, ucskip = stack.pop()
            if not stack:
                # The document group is closed
                break
        elif char:
            curskip = 0
            if char == "*":
                ignorable = True
            elif ignorable or not stack:
                continue
            elif char in "\r\n":
                collector.end_paragraph()
            elif char in specialchars:
                collector.add(fmt, specialchars[char])
        elif word:
            curskip = 0
            if word in destinations:
                ignorable = True
            elif ignorable:
                continue
            elif word in _PARAGRAPH_BREAKS:
                collector.end_paragraph()
            elif word in specialchars:
                collector.add(fmt, specialchars[word])
            elif word == "uc":
                ucskip = int(arg) if arg is not None else 1
            elif word == "u":
                if arg is not None:
                    code = int(arg)
                    if code < 0:
                        code += 0x10000
                    collector.add(fmt, chr(code))
                curskip = ucskip
            else:
                fmt = _apply_control_word(fmt, word, arg)
        elif hex_code:
            if curskip > 0:
                curskip -= 1
            elif not ignorable and stack:
                collector.add(fmt, decode_legacy(bytes([int(hex_code, 16)]), encoding))
        elif tchar:
            if curskip > 0:
                curskip -= 1
            elif not ignorable and stack:
                collector.add(fmt, tchar)

    return collector.finish()


def _trim_runs(runs: List[TextRun]) -> List[TextRun]:
    """Drop empty runs and leading/trailing whitespace of the paragraph."""
    runs = [run for run in runs if run[1]]
    while runs and not runs[0][1].strip():
        runs.pop(0)
    while runs and not runs[-1][1].strip():
        runs.pop()
    if runs:
        runs[0] = (runs[0][0], runs[0][1].lstrip())
        runs[-1] = (runs[-1][0], runs[-1][1].rstrip())
    return runs


def _render_run(fmt: CharacterFormat, text: str, header: DocumentHeader) -> str:
    html = text.replace("\n", "<br>")

    declarations = []
    if fmt.font is not None and fmt.font != header.default_font and fmt.font in header.fonts:
        declarations.append(f"font-family: {header.fonts[fmt.font]};")
    if fmt.size is not None and fmt.size != header.base_size:
        declarations.append(f"font-size: {_points(fmt.size)};")
    if declarations:
        html = f'<span style="{" ".join(declarations)}">{html}</span>'

    if fmt.underline:
        html = f"<u>{html}</u>"
    if fmt.italic:
        html = f"<i>{html}</i>"
    if fmt.bold:
        html = f"<b>{html}</b>"
    return html


class RtfConverter:
    """Converts RTF source into paragraph HTML.

    Each non-blank paragraph becomes a <p> element carrying the document's
    base font as inline style, much as word-processor HTML exports do.
    Runs in another font or size get a <span> with their own style.
    """

    def __init__(
        self,
        template: RtfTemplate = RtfTemplate.FULL_DOCUMENT,
        encoding: str = LEGACY_ENCODING,
    ):
        """Initialize RtfConverter.

        Args:
            template: Output wrapping (full HTML document or inner content only)
            encoding: Code page for \\'hh escapes the parser still sees
        """
        self.template = template
        self.encoding = encoding

    def convert(self, rtf_source: str, template: Optional[RtfTemplate] = None) -> str:
        """Convert RTF source to HTML.

        Args:
            rtf_source: RTF source, usually already passed through unescape_rtf_hex
            template: Overrides the converter's template for this call

        Returns:
            HTML string

        Raises:
            RtfConversionError: If the parser rejects the document
        """
        try:
            paragraphs = parse_paragraphs(rtf_source, self.encoding)
        except Exception as e:
            raise RtfConversionError(
                f"RTF parser failed: {type(e).__name__}: {e}",
                source_length=len(rtf_source),
            ) from e

        header = read_header(rtf_source)
        blocks = self._render_paragraphs(paragraphs, header)
        content = "\n".join(blocks)

        logger.debug(
            "Converted RTF document",
            extra={
                "event": "rtf.converted",
                "source_length": len(rtf_source),
                "paragraph_count": len(blocks),
                "output_length": len(content),
            },
        )

        return (template or self.template).render(content)

    @staticmethod
    def _render_paragraphs(
        paragraphs: List[List[TextRun]], header: DocumentHeader
    ) -> List[str]:
        base_style = " ".join(f"{name}: {value};" for name, value in _base_style(header).items())
        opening = f'<p style="{base_style}">' if base_style else "<p>"

        blocks = []
        for runs in paragraphs:
            runs = _trim_runs(runs)
            if runs:
                body = "".join(_render_run(fmt, text, header) for fmt, text in runs)
                blocks.append(f"{opening}{body}</p>")
        return blocks


def rtf_to_structured_output(
    rtf_source: str, template: RtfTemplate = RtfTemplate.FULL_DOCUMENT
) -> str:
    """Convert RTF source to HTML with a default converter.

    Raises:
        RtfConversionError: If the parser rejects the document
    """
    return RtfConverter(template=template).convert(rtf_source)
