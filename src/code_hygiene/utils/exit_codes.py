"""Centralized exit-code contract for the CLI.

Code  Meaning
----  -------
  0   Success — every enabled analyzer completed (and the severity gate held)
  1   Violation — an issue at or above the configured ``fail_on`` severity
  2   Error — bad config, nothing enabled, or an analyzer failed fatally
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
