"""Unit tests for RTF unescaping and structural conversion."""

import pytest

from archive_normalizer.normalization.encoding import BYTE_ORDER_MARK
from archive_normalizer.normalization.exceptions import RtfConversionError
from archive_normalizer.normalization.rtf import (
    RtfConverter,
    RtfTemplate,
    detect_base_style,
    is_rtf,
    rtf_to_structured_output,
    unescape_rtf_hex,
)


class TestIsRtf:
    """Tests for RTF detection."""

    def test_detects_marker(self):
        """Content starting with {\\rtf is RTF."""
        assert is_rtf(r"{\rtf1\ansi hello}")

    def test_ignores_surrounding_whitespace(self):
        """Leading whitespace and newlines are trimmed before the check."""
        assert is_rtf("\r\n  {\\rtf1 hello}")

    def test_leading_byte_order_mark(self):
        """A byte order mark before the marker does not hide it."""
        assert is_rtf(BYTE_ORDER_MARK + "{\\rtf1 hello}")
        assert is_rtf(BYTE_ORDER_MARK + "\n {\\rtf1 hello}")

    def test_plain_text_is_not_rtf(self):
        """Text that merely mentions RTF is plain."""
        assert not is_rtf("Documento {\\rtf1} citado")
        assert not is_rtf("")


class TestUnescapeRtfHex:
    """Tests for unescape_rtf_hex."""

    @pytest.mark.parametrize("value", range(0x80, 0x100))
    def test_extended_range_becomes_character(self, value):
        """Every escape in 0x80-0xFF becomes the Latin-1 character."""
        assert unescape_rtf_hex("\\'" + format(value, "02x")) == chr(value)

    @pytest.mark.parametrize("value", range(0x00, 0x80))
    def test_ascii_range_untouched(self, value):
        """Escapes below 0x80 are left for the parser."""
        escape = "\\'" + format(value, "02x")
        assert unescape_rtf_hex(escape) == escape

    def test_uppercase_hex_digits(self):
        """Hex digits are case-insensitive."""
        assert unescape_rtf_hex(r"Caf\'E9") == "Café"

    def test_other_syntax_untouched(self):
        """Control words, braces and text are not modified."""
        source = r"{\rtf1\ansi\b Negrita\b0  y caf\'e9\par}"
        assert unescape_rtf_hex(source) == r"{\rtf1\ansi\b Negrita\b0  y café\par}"

    def test_only_two_hex_digits_consumed(self):
        """A third hex-looking character stays in the text."""
        assert unescape_rtf_hex(r"\'e1a") == "áa"


class TestDetectBaseStyle:
    """Tests for reading the default font from the RTF header."""

    def test_default_font_and_size(self, sample_rtf):
        """\\deff selects the font table entry and \\fs gives half-points."""
        assert detect_base_style(sample_rtf) == {
            "font-family": "Times New Roman",
            "font-size": "12pt",
        }

    def test_deff_selects_non_first_font(self):
        """The default font is looked up by number."""
        source = r"{\rtf1\deff1{\fonttbl{\f0 Courier;}{\f1\fswiss Arial;}}\fs21 x}"
        assert detect_base_style(source) == {"font-family": "Arial", "font-size": "10.5pt"}

    def test_no_header_information(self):
        """Documents without a font table or size produce no style."""
        assert detect_base_style(r"{\rtf1 hola\par}") == {}


class TestRtfConverter:
    """Tests for RtfConverter."""

    def test_content_only_paragraphs(self, sample_rtf):
        """Each RTF paragraph becomes a styled <p> element."""
        converter = RtfConverter(template=RtfTemplate.CONTENT_ONLY)
        html = converter.convert(unescape_rtf_hex(sample_rtf))

        style = 'style="font-family: Times New Roman; font-size: 12pt;"'
        assert html == (
            f"<p {style}>El café de la plaza abrió sus puertas.</p>\n"
            f"<p {style}>La hija del Guaire llegó a Caracas (P. 3 y 4).</p>"
        )

    def test_full_document_template(self):
        """The default template wraps content in a document shell."""
        html = rtf_to_structured_output(r"{\rtf1 Hola\par}")

        assert html.startswith("<!DOCTYPE html>")
        assert "margin-left: 1in;" in html
        assert "<body>\n<p>Hola</p>\n</body>" in html

    def test_template_override_per_call(self):
        """A per-call template replaces the converter default."""
        converter = RtfConverter(template=RtfTemplate.FULL_DOCUMENT)
        html = converter.convert(r"{\rtf1 Hola\par}", template=RtfTemplate.CONTENT_ONLY)
        assert html == "<p>Hola</p>"

    def test_font_table_text_not_emitted(self, sample_rtf):
        """Font names in the header do not leak into the body."""
        html = RtfConverter(template=RtfTemplate.CONTENT_ONLY).convert(sample_rtf)
        assert "Arial" not in html

    def test_blank_paragraphs_dropped(self):
        """Consecutive \\par produce no empty paragraphs."""
        html = rtf_to_structured_output(r"{\rtf1 Uno\par\par\par Dos\par}", RtfTemplate.CONTENT_ONLY)
        assert html == "<p>Uno</p>\n<p>Dos</p>"

    def test_parser_failure_wrapped(self):
        """Parser exceptions surface as RtfConversionError with the cause chained."""
        source = r"{\rtf1 roto \u99999999? fin}"
        with pytest.raises(RtfConversionError) as exc_info:
            RtfConverter().convert(source)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.source_length == len(source)

    def test_unbalanced_closing_brace_tolerated(self):
        """Text after the document group is closed is ignored."""
        html = rtf_to_structured_output(r"{\rtf1 roto}} basura", RtfTemplate.CONTENT_ONLY)
        assert html == "<p>roto</p>"


class TestRtfInlineFormatting:
    """Tests for character formatting carried into the HTML."""

    @pytest.fixture
    def converter(self):
        return RtfConverter(template=RtfTemplate.CONTENT_ONLY)

    def test_bold_and_italic(self, converter):
        html = converter.convert(r"{\rtf1\ansi \b Titular\b0  normal \i cursiva\i0\par}")
        assert html == "<p><b>Titular</b> normal <i>cursiva</i></p>"

    def test_underline_and_ulnone(self, converter):
        html = converter.convert(r"{\rtf1 \ul subrayado\ulnone  y \uldb doble\ul0\par}")
        assert html == "<p><u>subrayado</u> y <u>doble</u></p>"

    def test_group_restores_formatting(self, converter):
        """Formatting set inside a group ends with the group."""
        html = converter.convert(r"{\rtf1 antes {\b\i fuerte} despues\par}")
        assert html == "<p>antes <b><i>fuerte</i></b> despues</p>"

    def test_plain_resets_formatting(self, converter):
        html = converter.convert(r"{\rtf1 \b\i\ul todo\plain  nada\par}")
        assert html == "<p><b><i><u>todo</u></i></b> nada</p>"

    def test_formatting_spans_paragraphs(self, converter):
        html = converter.convert(r"{\rtf1 \b Uno\par Dos\b0\par}")
        assert html == "<p><b>Uno</b></p>\n<p><b>Dos</b></p>"

    def test_font_and_size_changes(self, converter):
        """Runs in another font or size get their own style; the base font does not."""
        source = (
            r"{\rtf1\deff0{\fonttbl{\f0 Times New Roman;}{\f1 Arial;}}\f0\fs24 "
            r"Texto {\f1 Arial} y {\fs32 grande}\par}"
        )
        html = converter.convert(source)

        assert html == (
            '<p style="font-family: Times New Roman; font-size: 12pt;">Texto '
            '<span style="font-family: Arial;">Arial</span> y '
            '<span style="font-size: 16pt;">grande</span></p>'
        )

    def test_line_break(self, converter):
        assert converter.convert(r"{\rtf1 Uno\line Dos\par}") == "<p>Uno<br>Dos</p>"

    def test_unicode_escape_skips_fallback(self, converter):
        """\\u emits the code point and the following fallback character is skipped."""
        html = converter.convert(r"{\rtf1 Caf\u233? y \u8364? \u-255?\par}")
        assert html == "<p>Café y € " + chr(0xFF01) + "</p>"

    def test_ignorable_destination_dropped(self, converter):
        html = converter.convert(r"{\rtf1 {\*\generator Riched20;}Hola{\pict 0a0b}\par}")
        assert html == "<p>Hola</p>"

    def test_remaining_hex_escape_decoded(self, converter):
        """Escapes left in the source use the converter's code page."""
        assert converter.convert(r"{\rtf1 precio \'80 5\par}") == "<p>precio € 5</p>"
