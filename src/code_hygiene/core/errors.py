"""Error taxonomy for code_hygiene.

Fatal errors (``ConfigError``, ``ScanRootError``) abort a run or an
analyzer.  ``ArtifactWriteError`` is recoverable: callers log it and carry on.
"""

from __future__ import annotations

from typing import Dict, Optional


class HygieneError(Exception):
    """Base exception for all code_hygiene errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(HygieneError):
    """Configuration unreadable, unparseable, invalid, or enabling nothing."""


class ScanRootError(HygieneError):
    """Walk-level failure: the scan root cannot be traversed."""

    def __init__(self, root: str, reason: str):
        super().__init__("Cannot scan directory", {"root": root, "reason": reason})
        self.root = root


class ArtifactWriteError(HygieneError):
    """A JSON artifact could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__("Failed to write artifact", {"path": path, "reason": reason})
        self.path = path
