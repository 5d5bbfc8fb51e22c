"""Error types raised at the parsing boundary.

The analyzers never raise: a missing demangled name or a file absent from
the base report is ordinary control flow. Only reading and decoding input
files can fail, and those failures abort the command before any output.
"""

from __future__ import annotations


class GcovrUtilError(Exception):
    """Base exception for gcovr-util input failures."""

    def __init__(self, source: str, message: str) -> None:
        """Initialize the error.

        Args:
            source: Identifier of the offending input (usually a file path).
            message: Human-readable description of the failure.
        """
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class SourceUnreadableError(GcovrUtilError):
    """Raised when an input file cannot be opened or read."""


class MalformedInputError(GcovrUtilError):
    """Raised when JSON or YAML cannot be decoded into the expected shape."""
