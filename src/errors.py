"""Error taxonomy for gocallmap.

Only ``ManifestNotFound`` (and an unreadable root) stop a run. The parse and
coverage-line errors are raised internally and caught at the file, function
or line they concern, so a partially broken tree still yields a graph.
"""

from __future__ import annotations


class GoCallMapError(Exception):
    """Base class for analysis errors."""


class ManifestNotFound(GoCallMapError):
    """Raised when no usable go.mod exists at or above the analysed root."""


class FileParseError(GoCallMapError):
    """Raised when a source file cannot be read or contains syntax errors."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class FunctionReparseError(GoCallMapError):
    """Raised when a declaration cannot be located again during resolution."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason


class CoverageProfileOpenError(GoCallMapError):
    """Raised when a coverage profile cannot be opened or read."""


class MalformedCoverageLine(GoCallMapError):
    """Raised for a profile data line that does not match the expected shape."""

    def __init__(self, line_no: int, line: str) -> None:
        super().__init__(f"line {line_no}: {line!r}")
        self.line_no = line_no
        self.line = line


__all__ = [
    "CoverageProfileOpenError",
    "FileParseError",
    "FunctionReparseError",
    "GoCallMapError",
    "MalformedCoverageLine",
    "ManifestNotFound",
]
