"""Merge-conflict analyzer — finds unresolved Git conflict markers.

Markers follow a strict character grammar rather than a substring match,
so decorative banners such as ``/* ======= */`` or ``========`` are not
reported:

* start      ``<<<<<<< label`` — exactly seven ``<``, one space, a label
* separator  ``=======``       — exactly seven ``=``, nothing else
* end        ``>>>>>>> label`` — mirror of the start marker

Start/end lines are also rejected when the raw line contains ``/*`` or
``*/``; line comments are not checked, so ``<<<<<<< HEAD // note`` is reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from code_hygiene import rules
from code_hygiene.analyzers.base import AnalyzerConfig, BaseAnalyzer
from code_hygiene.model import AnalyzerType, Severity
from code_hygiene.model.analysis import ConflictAnalysisReport, ConflictFileAnalysis
from code_hygiene.model.issue import Issue, stamp_path
from code_hygiene.reports.console import render_conflicts

START_MARKER = "<" * 7
SEPARATOR = "=" * 7
END_MARKER = ">" * 7

# Files above this size are skipped to bound memory/time.
MAX_FILE_BYTES = 10 * 1024 * 1024
MAX_SNIPPETS = 5
# Three marker lines nominally bound one conflict block.
MARKERS_PER_BLOCK = 3


def _is_edge_marker(raw_line: str, trimmed: str, prefix: str) -> bool:
    if len(trimmed) < 8 or trimmed[:7] != prefix or trimmed[7] != " ":
        return False
    return "/*" not in raw_line and "*/" not in raw_line


def is_conflict_marker(raw_line: str) -> bool:
    """Apply the marker grammar to one line of text."""
    trimmed = raw_line.strip()
    if not trimmed:
        return False
    if trimmed == SEPARATOR:
        return True
    return _is_edge_marker(raw_line, trimmed, START_MARKER) or _is_edge_marker(
        raw_line, trimmed, END_MARKER
    )


@dataclass(frozen=True, slots=True)
class ConflictFinding:
    conflict_lines: tuple[int, ...]
    conflict_blocks: int
    conflict_snippets: tuple[str, ...]
    issues: tuple[Issue, ...]


class ConflictMarkersRule:
    """Detect conflict marker lines in raw content."""

    id = rules.CNF_MARKER_001
    name = "Conflict Markers Detector"

    def apply(self, content: str) -> ConflictFinding | None:
        lines: list[int] = []
        snippets: list[str] = []
        for lineno, raw_line in enumerate(content.split("\n"), start=1):
            raw_line = raw_line.rstrip("\r")
            if not is_conflict_marker(raw_line):
                continue
            lines.append(lineno)
            if len(snippets) < MAX_SNIPPETS:
                snippets.append(raw_line.strip())

        if not lines:
            return None

        issues = []
        for i, lineno in enumerate(lines):
            desc = f"Merge conflict marker: {snippets[i]}" if i < len(snippets) else "Merge conflict marker"
            issues.append(Issue(description=desc, line=lineno, severity=Severity.CRITICAL))

        return ConflictFinding(
            conflict_lines=tuple(lines),
            conflict_blocks=max(1, len(lines) // MARKERS_PER_BLOCK),
            conflict_snippets=tuple(snippets),
            issues=tuple(issues),
        )


class ConflictsAnalyzer(BaseAnalyzer[ConflictFileAnalysis]):
    """Detects unresolved Git merge conflict markers in any file type."""

    key = AnalyzerType.CONFLICTS.value
    name = "Conflicts Analyzer"
    description = "Detects unresolved Git merge conflict markers in files"
    report_cls = ConflictAnalysisReport
    max_file_bytes = MAX_FILE_BYTES

    def __init__(self) -> None:
        self.rule = ConflictMarkersRule()

    def analyze_file(
        self, path: str, raw: bytes, content: str, config: AnalyzerConfig
    ) -> ConflictFileAnalysis | None:
        finding = self.rule.apply(content)
        if finding is None:
            return None
        return ConflictFileAnalysis(
            path=path,
            total_lines=content.count("\n") + 1,
            total_bytes=len(raw),
            conflict_lines=finding.conflict_lines,
            conflict_blocks=finding.conflict_blocks,
            conflict_snippets=finding.conflict_snippets,
            issues=tuple(stamp_path(finding.issues, path)),
        )

    def metric_of(self, analysis: ConflictFileAnalysis) -> float:
        return analysis.marker_count

    # Conflicts have no meaningful ratio; every sort mode ranks by marker count.
    ratio_of = metric_of

    def passes_threshold(self, analysis: ConflictFileAnalysis, config: AnalyzerConfig) -> bool:
        return analysis.marker_count >= config.min_value

    def render(self, results: Sequence[ConflictFileAnalysis], *, retained=()) -> list[str]:
        return render_conflicts(results)
