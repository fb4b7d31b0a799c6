"""Command-line entry point for converting archive documents."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from archive_normalizer.config.environment import EnvironmentConfig
from archive_normalizer.config.exceptions import ConfigurationError
from archive_normalizer.config.loader import load_config
from archive_normalizer.config.models import AppConfig, HighlightSettings
from archive_normalizer.logging import get_logger
from archive_normalizer.logging.config import configure_logging
from archive_normalizer.logging.context import log_context
from archive_normalizer.normalization import DocumentNormalizer, PlainTextOptions
from archive_normalizer.utils.highlighting import extract_snippets, highlight_matches

logger = get_logger(__name__, component="cli")

OUTPUT_SUFFIXES = {"text": ".txt", "html": ".html"}


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert legacy archive documents (RTF or text) to plain text or HTML"
    )
    parser.add_argument("files", nargs="+", type=Path, help="Documents to convert")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(OUTPUT_SUFFIXES),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        default=None,
        help="Truncate plain-text output to this many characters",
    )
    parser.add_argument(
        "--flatten",
        action="store_true",
        help="Join paragraphs with a single space instead of a blank line",
    )
    parser.add_argument(
        "--snippet",
        action="store_true",
        help="Emit a one-line extract of normalization.snippet_length characters",
    )
    parser.add_argument(
        "--highlight",
        default=None,
        metavar="TERM",
        help="Mark TERM in HTML output, or print excerpts around it in text output",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write one output file per input instead of printing to stdout",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def convert_file(
    path: Path,
    normalizer: DocumentNormalizer,
    output_format: str,
    options: PlainTextOptions,
    highlight_term: Optional[str] = None,
    highlight_settings: Optional[HighlightSettings] = None,
) -> str:
    """Read one file and convert it.

    With a highlight term, HTML output gets the matches marked and text
    output is reduced to the excerpts around them.

    Raises:
        OSError: If the file cannot be read
    """
    highlight_settings = highlight_settings or HighlightSettings()
    content = path.read_bytes()

    if output_format == "html":
        result = normalizer.to_sanitized_html(content, document_id=path.name)
        if highlight_term:
            result = highlight_matches(result, highlight_term, tag=highlight_settings.tag)
        return result

    text = normalizer.to_plain_text(content, options)
    if highlight_term:
        snippets = extract_snippets(
            text, highlight_term, context_chars=highlight_settings.snippet_context_chars
        )
        return "\n".join(snippets)
    return text


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for configuration or I/O errors)
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=env_config.log_level,
        format_type=app_config.logging.format,
        environment=env_config.environment,
    )

    settings = app_config.normalization
    normalizer = DocumentNormalizer(settings=settings)
    max_length = args.max_length
    if max_length is None and args.snippet:
        max_length = settings.snippet_length
    options = PlainTextOptions(
        max_length=max_length,
        preserve_paragraphs=settings.preserve_paragraphs and not (args.flatten or args.snippet),
    )

    logger.info(
        "Conversion starting",
        extra={
            "event": "cli.run.started",
            "file_count": len(args.files),
            "output_format": args.format,
            "legacy_encoding": settings.legacy_encoding,
        },
    )

    if args.output_dir:
        args.output_dir.mkdir(parents=True, exist_ok=True)

    failed = 0
    for path in args.files:
        with log_context(document_id=path.name):
            try:
                result = convert_file(
                    path,
                    normalizer,
                    args.format,
                    options,
                    highlight_term=args.highlight,
                    highlight_settings=app_config.highlighting,
                )
                if args.output_dir:
                    target = args.output_dir / (path.stem + OUTPUT_SUFFIXES[args.format])
                    target.write_text(result, encoding="utf-8")
                else:
                    print(result)
            except OSError as e:
                failed += 1
                print(f"Error: {path}: {e}", file=sys.stderr)
                logger.error(
                    f"Could not process {path}: {e}",
                    extra={"event": "cli.file.failed", "error_type": type(e).__name__},
                )
                continue

            logger.info(
                "Converted file",
                extra={"event": "cli.file.converted", "output_length": len(result)},
            )

    logger.info(
        "Conversion finished",
        extra={
            "event": "cli.run.completed",
            "converted": len(args.files) - failed,
            "failed": failed,
            "duration_seconds": round(time.time() - start_time, 3),
        },
    )

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
