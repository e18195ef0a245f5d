"""Unified Code Quality feed (GitLab ``codequality`` artifact layout).

Every issue from every analyzer that completed becomes one
``CodeQualityIssue``.  The fingerprint is a pure function of description,
line and path, so re-running on unchanged content yields the same feed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from code_hygiene.contracts.load import validate_instance
from code_hygiene.model.code_quality import CodeQualityIssue
from code_hygiene.model.issue import Issue
from code_hygiene.utils.json_norm import write_json_artifact

_logger = logging.getLogger(__name__)

CODE_QUALITY_SCHEMA = "code_quality.schema.json"


def build_code_quality_issues(pairs: Iterable[tuple[str, Issue]]) -> list[CodeQualityIssue]:
    """Convert ``(analyzer key, issue)`` pairs, preserving order."""
    return [CodeQualityIssue.from_issue(analyzer, issue) for analyzer, issue in pairs]


def write_code_quality_report(path: str | Path, issues: Sequence[CodeQualityIssue]) -> Path:
    """Validate and write the feed.  An empty run writes ``[]``.

    Raises ``ArtifactWriteError`` when the file cannot be written.
    """
    data = [issue.to_dict() for issue in issues]
    validate_instance(data, CODE_QUALITY_SCHEMA)
    out = write_json_artifact(path, data, ndigits=None)
    _logger.info("Wrote %d code quality issue(s) to %s", len(data), out.as_posix())
    return out
