"""Shared fixtures for archive normalizer tests."""

import logging

import pytest

from archive_normalizer.logging.context import clear_log_context

# A 1880s clipping as exported by the archive's word processor: Windows-1252
# bytes, accented letters escaped as \'hh, font table and size in the header.
SAMPLE_RTF = (
    r"{\rtf1\ansi\ansicpg1252\deff0"
    r"{\fonttbl{\f0\froman\fcharset0 Times New Roman;}{\f1\fswiss Arial;}}"
    r"\f0\fs24 El caf\'e9 de la plaza abri\'f3 sus puertas.\par "
    r"La hija del Guaire lleg\'f3 a Caracas (P. 3 y 4).\par}"
)


@pytest.fixture
def sample_rtf():
    """RTF source with hex-escaped accents."""
    return SAMPLE_RTF


@pytest.fixture
def sample_rtf_bytes():
    """RTF bytes that are not valid UTF-8 (raw 0xF1 byte in the body)."""
    return (
        b"{\\rtf1\\ansi\\deff0{\\fonttbl{\\f0 Times New Roman;}}\\f0\\fs24 "
        b"Espa\xf1a: m\\'e1s noticias\\par}"
    )


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables read by the configuration loader."""
    for name in ("LOG_LEVEL", "LEGACY_ENCODING", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_root_logger():
    """Drop handlers installed by configure_logging and restore the root level."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
