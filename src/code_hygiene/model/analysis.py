"""Per-file analysis summaries and run-level report envelopes.

One ``FileAnalysis`` variant exists per analyzer family.  They are only
materialized for files with at least one reportable finding and are never
mutated afterwards.  The matching ``AnalysisReport`` variant is the
write-once envelope serialized to ``<output>/<analyzer>-analysis.json``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Sequence

from .issue import Issue


def _issues(issues: Sequence[Issue]) -> list[dict]:
    return [i.to_dict() for i in issues]


# ── file analyses ───────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ConflictFileAnalysis:
    path: str
    total_lines: int
    total_bytes: int
    conflict_lines: tuple[int, ...]
    conflict_blocks: int
    conflict_snippets: tuple[str, ...]
    issues: tuple[Issue, ...]

    @property
    def marker_count(self) -> int:
        return len(self.conflict_lines)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_lines": self.total_lines,
            "total_bytes": self.total_bytes,
            "conflict_lines": list(self.conflict_lines),
            "conflict_blocks": self.conflict_blocks,
            "conflict_snippets": list(self.conflict_snippets),
            "issues": _issues(self.issues),
        }


@dataclass(frozen=True, slots=True)
class CommentedCodeFileAnalysis:
    """Shared shape for the HTML and JS/TS commented-code analyzers."""

    path: str
    total_lines: int
    total_bytes: int
    commented_lines: int
    commented_bytes: int
    comment_ratio: float   # percent of total bytes
    largest_block: int
    issues: tuple[Issue, ...]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "total_lines": self.total_lines,
            "total_bytes": self.total_bytes,
            "commented_lines": self.commented_lines,
            "commented_bytes": self.commented_bytes,
            "comment_ratio": self.comment_ratio,
            "largest_block": self.largest_block,
            "issues": _issues(self.issues),
        }


@dataclass(frozen=True, slots=True)
class PHPFileAnalysis:
    path: str
    total_bytes: int
    total_functions: int = 0
    commented_functions: int = 0
    function_list: tuple[str, ...] = ()
    commented_list: tuple[str, ...] = ()
    comment_ratio: float = 0.0   # percent of declared functions
    commented_bytes: int = 0
    catch_blocks_missing_report: int = 0
    catch_blocks_misplaced_report: int = 0
    issues: tuple[Issue, ...] = ()

    @property
    def has_catch_findings(self) -> bool:
        return (self.catch_blocks_missing_report + self.catch_blocks_misplaced_report) > 0

    def to_dict(self) -> dict:
        d: dict = {
            "path": self.path,
            "total_bytes": self.total_bytes,
            "total_functions": self.total_functions,
            "commented_functions": self.commented_functions,
            "function_list": list(self.function_list),
            "commented_list": list(self.commented_list),
            "comment_ratio": self.comment_ratio,
            "commented_bytes": self.commented_bytes,
            "issues": _issues(self.issues),
        }
        if self.catch_blocks_missing_report:
            d["catch_blocks_missing_report"] = self.catch_blocks_missing_report
        if self.catch_blocks_misplaced_report:
            d["catch_blocks_misplaced_report"] = self.catch_blocks_misplaced_report
        return d


# ── report envelopes ────────────────────────────────────────────────


@dataclass(frozen=True)
class AnalysisReport:
    """Run-level envelope shared by every analyzer variant."""

    analyzer: str
    timestamp: str
    scan_directory: str
    sort_mode: str
    min_value: int
    min_ratio: float
    results: tuple = field(default_factory=tuple)
    # Every file that passed the thresholds; ``results`` is its top-N.
    retained: tuple = field(default_factory=tuple, repr=False)

    schema_name: ClassVar[str] = "analysis_report.schema.json"

    def totals(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        d = {
            "analyzer": self.analyzer,
            "timestamp": self.timestamp,
            "scan_directory": self.scan_directory,
            "total_files": len(self.results),
            "sort_mode": self.sort_mode,
            "min_value": self.min_value,
            "min_ratio": self.min_ratio,
            "results": [r.to_dict() for r in self.results],
        }
        d.update(self.totals())
        return d


@dataclass(frozen=True)
class ConflictAnalysisReport(AnalysisReport):
    def totals(self) -> dict:
        return {"total_conflicts": sum(r.conflict_blocks for r in self.results)}


@dataclass(frozen=True)
class CommentedCodeAnalysisReport(AnalysisReport):
    def totals(self) -> dict:
        return {"total_commented_bytes": sum(r.commented_bytes for r in self.results)}


@dataclass(frozen=True)
class PHPAnalysisReport(AnalysisReport):
    def totals(self) -> dict:
        """Function counts over every retained file, not only the top-N."""
        pool = self.retained or self.results
        return {
            "total_functions": sum(r.total_functions for r in pool),
            "commented_functions": sum(r.commented_functions for r in pool),
        }
