"""CodeQualityIssue — the cross-analyzer record of the unified defect feed."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from .issue import Issue


@dataclass(frozen=True, slots=True)
class Location:
    """Source-code location for a feed record."""

    path: str
    begin: int


@dataclass(frozen=True, slots=True)
class CodeQualityIssue:
    """Immutable feed record, GitLab Code Quality layout."""

    description: str
    check_name: str
    fingerprint: str
    severity: str
    location: Location

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "check_name": self.check_name,
            "fingerprint": self.fingerprint,
            "severity": self.severity,
            "location": {
                "path": self.location.path,
                "lines": {"begin": self.location.begin},
            },
        }

    @classmethod
    def from_issue(cls, analyzer: str, issue: Issue) -> CodeQualityIssue:
        return cls(
            description=issue.description,
            check_name=f"{analyzer}-check",
            fingerprint=make_fingerprint(issue.description, issue.line, issue.path),
            severity=issue.severity.value,
            location=Location(path=issue.path, begin=issue.line),
        )


def make_fingerprint(description: str, line: int, path: str) -> str:
    """Deterministic 128-bit fingerprint: md5("description:line:path").

    Undecodable path bytes hash as the original bytes.
    """
    payload = f"{description}:{line}:{path}"
    return hashlib.md5(payload.encode("utf-8", errors="surrogateescape"), usedforsecurity=False).hexdigest()
