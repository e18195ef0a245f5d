"""Issue — one located, severity-tagged defect instance."""

from __future__ import annotations

from dataclasses import dataclass, replace

from . import Severity


@dataclass(frozen=True, slots=True)
class Issue:
    """Immutable defect record.

    Detectors never see file paths, so they emit issues with an empty
    ``path``; the owning analyzer stamps it with :meth:`with_path`.
    """

    description: str
    line: int
    severity: Severity
    path: str = ""

    def with_path(self, path: str) -> Issue:
        return replace(self, path=path)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "description": self.description,
            "line": self.line,
            "severity": self.severity.value,
        }


def stamp_path(issues: tuple[Issue, ...] | list[Issue], path: str) -> list[Issue]:
    """Return copies of *issues* attributed to *path*."""
    return [issue.with_path(path) for issue in issues]
