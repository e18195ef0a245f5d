"""Commented-out code heuristics shared by the HTML and JS/TS analyzers.

Comment candidates come from two passes over the same content:

1. block comments — minimal, non-overlapping delimiter spans;
2. runs of consecutive ``//`` lines merged into one candidate.

A candidate is code when ``code_score`` is at least 1: +1 for each
code-like indicator present, -1 for each prose-like indicator present.
Recall is favoured over precision.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from code_hygiene.analyzers.base import BaseAnalyzer, Rule
from code_hygiene.model import Severity
from code_hygiene.model.analysis import CommentedCodeAnalysisReport, CommentedCodeFileAnalysis
from code_hygiene.model.issue import Issue, stamp_path
from code_hygiene.reports.console import render_commented_code

CODE_INDICATORS: tuple[str, ...] = (
    ";", "{", "}", "function", "const ", "var ", "let ", "=>", "return",
    "import ", "export ", "class ", "if (", "for (", "while (", "console.log",
)

TEXT_INDICATORS: tuple[str, ...] = (
    "TODO:", "FIXME:", "NOTE:", "http://", "https://", " This ", " The ", " To ",
)

LINE_COMMENT_TOKEN = "//"
# Per-line allowance for the stripped token and newline in run byte sizes.
LINE_RUN_OVERHEAD_BYTES = 2


def code_score(text: str) -> int:
    """Net keyword score; each indicator counts at most once."""
    score = sum(1 for ind in CODE_INDICATORS if ind in text)
    score -= sum(1 for ind in TEXT_INDICATORS if ind in text)
    return score


def is_code(text: str) -> bool:
    return code_score(text) >= 1


def byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def line_at(content: str, offset: int) -> int:
    """1-based line number of *offset*."""
    return content.count("\n", 0, offset) + 1


@dataclass(frozen=True, slots=True)
class CommentCandidate:
    """One comment block eligible for classification."""

    text: str          # the text classified by the heuristic
    start_line: int
    byte_size: int
    line_count: int


def iter_block_comments(
    content: str, pattern: re.Pattern[str], *, inner_group: int | None = 1
) -> Iterator[tuple[re.Match[str], CommentCandidate]]:
    """Yield every minimal block-comment span matched by *pattern*."""
    for m in pattern.finditer(content):
        full = m.group(0)
        text = m.group(inner_group) if inner_group is not None else full
        yield m, CommentCandidate(
            text=text,
            start_line=line_at(content, m.start()),
            byte_size=byte_len(full),
            line_count=full.count("\n") + 1,
        )


def _covered(offset: int, starts: Sequence[int], spans: Sequence[tuple[int, int]]) -> bool:
    # spans are sorted and disjoint; only the last one starting at or
    # before offset can contain it.
    i = bisect_right(starts, offset) - 1
    return i >= 0 and offset < spans[i][1]


def iter_line_comment_runs(
    content: str,
    *,
    token: str = LINE_COMMENT_TOKEN,
    skip_spans: Sequence[tuple[int, int]] = (),
) -> Iterator[CommentCandidate]:
    """Yield runs of consecutive single-line comments as one candidate each.

    Lines that start inside a ``skip_spans`` region (already extracted as a
    block comment) close the current run and are never part of one.
    ``skip_spans`` must be sorted and non-overlapping, as ``finditer`` yields them.
    """
    starts = [start for start, _ in skip_spans]
    run: list[str] = []
    run_start = 0
    offset = 0

    def _flush() -> CommentCandidate:
        text = "\n".join(run)
        return CommentCandidate(
            text=text,
            start_line=run_start,
            byte_size=byte_len(text) + len(run) * LINE_RUN_OVERHEAD_BYTES,
            line_count=len(run),
        )

    for lineno, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()
        first = offset + (len(line) - len(line.lstrip()))
        offset += len(line) + 1
        if stripped.startswith(token) and not _covered(first, starts, skip_spans):
            if not run:
                run_start = lineno
            run.append(stripped[len(token):])
            continue
        if run:
            yield _flush()
            run = []
    if run:
        yield _flush()


@dataclass(frozen=True, slots=True)
class CommentedCodeFinding:
    commented_bytes: int
    commented_lines: int
    largest_block: int
    issues: tuple[Issue, ...]


@dataclass
class CommentTally:
    """Running totals while a rule walks its candidates."""

    label: str
    commented_bytes: int = 0
    commented_lines: int = 0
    largest_block: int = 0
    issues: list[Issue] = field(default_factory=list)

    def add(self, candidate: CommentCandidate) -> None:
        self.commented_bytes += candidate.byte_size
        self.commented_lines += candidate.line_count
        self.largest_block = max(self.largest_block, candidate.byte_size)
        self.issues.append(
            Issue(
                description=f"Commented out {self.label} code block ({candidate.byte_size} bytes)",
                line=candidate.start_line,
                severity=Severity.MINOR,
            )
        )

    def finding(self) -> CommentedCodeFinding | None:
        if not self.issues:
            return None
        return CommentedCodeFinding(
            commented_bytes=self.commented_bytes,
            commented_lines=self.commented_lines,
            largest_block=self.largest_block,
            issues=tuple(self.issues),
        )


class CommentedCodeAnalyzer(BaseAnalyzer[CommentedCodeFileAnalysis]):
    """Shared analyzer body for commented-code languages.

    Threshold and default sort key are commented bytes; ``ratio`` sorts by
    commented bytes as a percentage of file size.
    """

    report_cls = CommentedCodeAnalysisReport
    label: str = ""

    def __init__(self, rule: Rule[CommentedCodeFinding]) -> None:
        self.rule = rule

    def analyze_file(self, path, raw, content, config) -> CommentedCodeFileAnalysis | None:
        finding = self.rule.apply(content)
        if finding is None:
            return None
        total_bytes = len(raw)
        return CommentedCodeFileAnalysis(
            path=path,
            total_lines=content.count("\n") + 1,
            total_bytes=total_bytes,
            commented_lines=finding.commented_lines,
            commented_bytes=finding.commented_bytes,
            comment_ratio=finding.commented_bytes / total_bytes * 100 if total_bytes else 0.0,
            largest_block=finding.largest_block,
            issues=tuple(stamp_path(finding.issues, path)),
        )

    def metric_of(self, analysis: CommentedCodeFileAnalysis) -> float:
        return analysis.commented_bytes

    def ratio_of(self, analysis: CommentedCodeFileAnalysis) -> float:
        return analysis.comment_ratio

    def render(self, results: Sequence[CommentedCodeFileAnalysis], *, retained=()) -> list[str]:
        return render_commented_code(results, self.label)
