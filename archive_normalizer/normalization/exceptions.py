"""Exceptions raised inside the document normalization pipeline.

These never escape the public facade; they are turned into fallback output
there.
"""


class RtfConversionError(Exception):
    """Raised when the structural RTF parser cannot process a document."""

    def __init__(self, message: str, source_length: int = 0):
        """
        Initialize RtfConversionError.

        Args:
            message: Description of the parser failure
            source_length: Length of the RTF source that failed, for diagnostics
        """
        self.source_length = source_length
        super().__init__(message)
