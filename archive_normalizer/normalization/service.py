"""Document normalization facade.

Turns raw archive content (bytes from a BLOB column, or text that was
already decoded) into:
1. Plain text for search snippets, embeddings and full-article extracts
2. Sanitized HTML for rendering article bodies

Both entry points are total. Historical data is too uneven for every record
to parse, so a failed conversion falls back to the raw content instead of
raising.
"""

import logging
from typing import Callable, Iterable, Iterator, Optional, Tuple

from archive_normalizer.config.models import NormalizationSettings
from archive_normalizer.logging import get_logger
from archive_normalizer.logging.context import log_context
from archive_normalizer.utils.pages import extract_page_reference

from .encoding import BYTE_ORDER_MARK, decode_bytes, repair_mojibake
from .models import (
    BYTES_TYPES,
    ContentKind,
    ConversionOutcome,
    DocumentId,
    NormalizedDocument,
    PlainTextOptions,
    RawDocument,
)
from .rtf import RtfConverter, RtfTemplate, is_rtf, unescape_rtf_hex
from .text import (
    FLAT_SEPARATOR,
    PARAGRAPH_SEPARATOR,
    normalize_paragraphs,
    paragraphs_to_html,
    strip_font_styles,
    strip_html,
    truncate,
    unwrap_inline_tags,
)

logger = get_logger(__name__, component="normalization")


def _is_empty(content: object) -> bool:
    if content is None:
        return True
    if isinstance(content, (str,) + BYTES_TYPES):
        return len(content) == 0
    return False


class DocumentNormalizer:
    """Converts raw archive documents to plain text or sanitized HTML.

    Pipeline: decode bytes -> repair mojibake -> RTF or plain branch ->
    strip markup (plain text) or font styles (HTML). Instances hold only
    immutable settings and a converter, so one instance can be shared.
    """

    def __init__(
        self,
        settings: Optional[NormalizationSettings] = None,
        converter: Optional[RtfConverter] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize DocumentNormalizer.

        Args:
            settings: Normalization settings (defaults to NormalizationSettings())
            converter: RTF converter (defaults to a content-only RtfConverter)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.settings = settings or NormalizationSettings()
        self.converter = converter or RtfConverter(
            template=RtfTemplate.CONTENT_ONLY,
            encoding=self.settings.legacy_encoding,
        )
        self.logger = logger_instance or logger

    def decode(self, content: RawDocument) -> str:
        """Decode content to text and repair double-encoded accents.

        A byte order mark left at the start of already decoded text is dropped.
        """
        if isinstance(content, BYTES_TYPES):
            text = decode_bytes(content, self.settings.legacy_encoding)
        else:
            text = str(content).lstrip(BYTE_ORDER_MARK)
        return repair_mojibake(text, self.settings.legacy_encoding)

    def to_plain_text(
        self, content: RawDocument, options: Optional[PlainTextOptions] = None
    ) -> str:
        """Convert content to plain text.

        Args:
            content: Raw bytes or text (None/empty gives "")
            options: Truncation and paragraph options

        Returns:
            Plain text; never raises
        """
        text, _, _ = self._plain_text(content, options)
        return text

    def to_sanitized_html(self, content: RawDocument, document_id: DocumentId = None) -> str:
        """Convert content to HTML for rendering.

        Args:
            content: Raw bytes or text
            document_id: Identifier used only in log messages

        Returns:
            HTML, a placeholder for empty or unsupported content, or a <pre>
            block with the raw content when conversion fails. Never raises.
        """
        with log_context(document_id=document_id):
            if _is_empty(content):
                return self.settings.unavailable_placeholder

            if not isinstance(content, (str,) + BYTES_TYPES):
                self.logger.error(
                    f"Received {type(content).__name__} instead of bytes or text",
                    extra={
                        "event": "normalization.html.invalid_input",
                        "content_type": type(content).__name__,
                    },
                )
                return self.settings.invalid_content_placeholder

            outcome = self._convert(content, self._html_body)
            if outcome.ok:
                return outcome.value

            failure = outcome.failure
            self.logger.error(
                f"Error processing content for document {document_id}",
                extra={
                    "event": "normalization.html.fallback",
                    "stage": failure.stage,
                    "error_type": failure.error_type,
                },
                exc_info=failure.error,
            )
            return f"<pre>{self._best_effort_text(content)}</pre>"

    def process_batch(
        self,
        documents: Iterable[Tuple[DocumentId, RawDocument]],
        options: Optional[PlainTextOptions] = None,
    ) -> Iterator[NormalizedDocument]:
        """Normalize many documents to plain text.

        Args:
            documents: Iterable of (document_id, content) pairs

        Yields:
            NormalizedDocument for each document

        Note:
            Unexpected errors are logged and the document is skipped;
            processing continues with the next one.
        """
        for document_id, content in documents:
            with log_context(document_id=document_id):
                try:
                    text, kind, used_fallback = self._plain_text(content, options)
                    page_reference = extract_page_reference(content).pages
                except Exception as e:
                    self.logger.error(
                        f"Error normalizing document {document_id}: {e}",
                        extra={"event": "normalization.batch.document_failed"},
                        exc_info=True,
                    )
                    continue

                self.logger.info(
                    "Normalized document",
                    extra={
                        "event": "normalization.document.normalized",
                        "output_length": len(text),
                        "content_kind": kind.value if kind else None,
                        "used_fallback": used_fallback,
                        "page_reference": page_reference,
                    },
                )

                yield NormalizedDocument(
                    document_id=document_id,
                    plain_text=text,
                    page_reference=page_reference,
                    content_kind=kind,
                    used_fallback=used_fallback,
                )

    def _plain_text(
        self, content: RawDocument, options: Optional[PlainTextOptions]
    ) -> Tuple[str, Optional[ContentKind], bool]:
        """Plain text, the detected content kind, and whether the fallback branch produced it.

        The kind is None for empty content and for failed conversions.
        """
        if options is None:
            options = PlainTextOptions(preserve_paragraphs=self.settings.preserve_paragraphs)

        if _is_empty(content):
            return "", None, False

        outcome = self._convert(
            content, lambda text, kind: self._plain_text_body(text, kind, options)
        )
        if outcome.ok:
            return truncate(outcome.value, options.max_length), outcome.kind, False

        failure = outcome.failure
        self.logger.debug(
            f"Content processing failed, using fallback: {failure.describe()}",
            extra={
                "event": "normalization.plain_text.fallback",
                "stage": failure.stage,
                "error_type": failure.error_type,
            },
        )
        fallback = strip_html(self._best_effort_text(content))
        return truncate(fallback, options.max_length), None, True

    def _convert(
        self, content: RawDocument, render: Callable[[str, ContentKind], str]
    ) -> ConversionOutcome:
        """Run decode, classification and render, capturing any failure."""
        stage = "decode"
        try:
            text = self.decode(content)
            kind = ContentKind.RTF if is_rtf(text) else ContentKind.PLAIN
            stage = kind.value
            return ConversionOutcome.success(render(text, kind), kind)
        except Exception as e:
            return ConversionOutcome.failed(stage, e)

    def _plain_text_body(self, text: str, kind: ContentKind, options: PlainTextOptions) -> str:
        if kind is ContentKind.PLAIN:
            separator = PARAGRAPH_SEPARATOR if options.preserve_paragraphs else FLAT_SEPARATOR
            return normalize_paragraphs(text, separator)
        return strip_html(unwrap_inline_tags(self._rtf_to_html(text)))

    def _html_body(self, text: str, kind: ContentKind) -> str:
        if kind is ContentKind.PLAIN:
            return paragraphs_to_html(text)
        return strip_font_styles(self._rtf_to_html(text))

    def _rtf_to_html(self, text: str) -> str:
        return self.converter.convert(unescape_rtf_hex(text), template=RtfTemplate.CONTENT_ONLY)

    def _best_effort_text(self, content: RawDocument) -> str:
        """Decode the original input without any structural processing."""
        if isinstance(content, BYTES_TYPES):
            return decode_bytes(content, self.settings.legacy_encoding)
        try:
            return str(content)
        except Exception as e:
            self.logger.warning(
                f"Could not render {type(content).__name__} as text: {e}",
                extra={"event": "normalization.fallback.unrenderable"},
            )
            return ""


_default_normalizer: Optional[DocumentNormalizer] = None


def get_default_normalizer() -> DocumentNormalizer:
    """Return the shared normalizer built from default settings."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = DocumentNormalizer()
    return _default_normalizer


def to_plain_text(content: RawDocument, options: Optional[PlainTextOptions] = None) -> str:
    """Convert content to plain text with default settings. Never raises."""
    return get_default_normalizer().to_plain_text(content, options)


def to_sanitized_html(content: RawDocument, document_id: DocumentId = None) -> str:
    """Convert content to sanitized HTML with default settings. Never raises."""
    return get_default_normalizer().to_sanitized_html(content, document_id)
