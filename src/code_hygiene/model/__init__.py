"""Enums shared across detectors, analyzers and reports."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Issue severity — values match the Code Quality feed vocabulary."""

    MINOR = "minor"
    MEDIUM = "medium"
    MAJOR = "major"
    CRITICAL = "critical"


class AnalyzerType(str, Enum):
    """Canonical analyzer identifiers (configuration keys)."""

    CONFLICTS = "conflicts"
    HTML = "html"
    JS = "js"
    PHP = "php"
