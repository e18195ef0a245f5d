"""PHP analyzer — commented-out functions plus the Laravel catch-block rule.

Commented functions are found by set difference: function names declared
in the raw source minus those still declared once comments are stripped.
The catch-block rule (``php_catch``) needs a syntax tree and only runs on
files whose path contains one of ``app_paths``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from code_hygiene import rules
from code_hygiene.analyzers.base import AnalyzerConfig, BaseAnalyzer
from code_hygiene.analyzers.commented_code import line_at
from code_hygiene.model import AnalyzerType, Severity
from code_hygiene.model.analysis import PHPAnalysisReport, PHPFileAnalysis
from code_hygiene.model.issue import Issue, stamp_path
from code_hygiene.reports.console import render_php

_logger = logging.getLogger(__name__)

# Possessive quantifiers: the prefix and padding runs must not trade
# whitespace with each other.
_FUNCTION_RE = re.compile(
    r"(?:^|[\s/]++|[*]++)\s*+(?:public|private|protected|static)?\s*+(?P<kw>function)\s+(?P<name>\w+)\s*\(",
    re.MULTILINE,
)
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)

MAGIC_METHODS = frozenset({"__construct", "__destruct"})
# Rough size charged per commented function; report totals only.
BYTES_PER_COMMENTED_FUNCTION = 20


def remove_php_comments(content: str) -> str:
    """Drop ``/* */`` blocks, then cut every line at its first ``//``."""
    without_blocks = _BLOCK_COMMENT_RE.sub("", content)
    return "\n".join(line.split("//", 1)[0] for line in without_blocks.split("\n"))


def find_php_functions(content: str) -> list[tuple[str, int]]:
    """``(name, keyword offset)`` for every declaration-shaped match, in order."""
    return [
        (m.group("name"), m.start("kw"))
        for m in _FUNCTION_RE.finditer(content)
        if m.group("name") not in MAGIC_METHODS
    ]


@dataclass(frozen=True, slots=True)
class CommentedFunctionsFinding:
    function_list: tuple[str, ...]
    commented_list: tuple[str, ...]
    issues: tuple[Issue, ...]


class CommentedFunctionsRule:
    """Functions whose only declarations sit inside comments."""

    id = rules.PHP_COMMENTED_FUNCTION_001
    name = "Commented PHP Functions Detector"

    def apply(self, content: str) -> CommentedFunctionsFinding | None:
        declared = find_php_functions(content)
        live = {name for name, _ in find_php_functions(remove_php_comments(content))}

        first_seen: dict[str, int] = {}
        for name, offset in declared:
            first_seen.setdefault(name, offset)

        commented = [name for name in first_seen if name not in live]
        if not commented:
            return None

        issues = tuple(
            Issue(
                description=f"Commented out PHP function: {name}",
                line=line_at(content, first_seen[name]) if name in first_seen else 0,
                severity=Severity.MAJOR,
            )
            for name in commented
        )
        return CommentedFunctionsFinding(
            function_list=tuple(name for name, _ in declared),
            commented_list=tuple(commented),
            issues=issues,
        )


def applies_to_app(path: str, app_paths: Sequence[str]) -> bool:
    return any(prefix in path for prefix in app_paths)


class PHPAnalyzer(BaseAnalyzer[PHPFileAnalysis]):
    """Commented functions are ranked; catch-block findings ride along."""

    key = AnalyzerType.PHP.value
    name = "PHP Analyzer"
    description = "Analyzes PHP files for commented functions and catch blocks missing report()"
    report_cls = PHPAnalysisReport
    extensions = (".php",)

    def __init__(self) -> None:
        self.functions_rule = CommentedFunctionsRule()
        self._catch_rule = None

    @property
    def catch_rule(self):
        # tree-sitter is only loaded once a file under app_paths shows up.
        if self._catch_rule is None:
            from code_hygiene.analyzers.php_catch import CatchBlockRule

            self._catch_rule = CatchBlockRule()
        return self._catch_rule

    def analyze_file(
        self, path: str, raw: bytes, content: str, config: AnalyzerConfig
    ) -> PHPFileAnalysis | None:
        functions = self.functions_rule.apply(content)
        catches = self.catch_rule.apply(content) if applies_to_app(path, config.app_paths) else None
        if functions is None and catches is None:
            return None

        issues: list[Issue] = []
        fields: dict = {"path": path, "total_bytes": len(raw)}
        if functions is not None:
            total = len(functions.function_list)
            count = len(functions.commented_list)
            issues.extend(functions.issues)
            fields.update(
                total_functions=total,
                commented_functions=count,
                function_list=functions.function_list,
                commented_list=functions.commented_list,
                comment_ratio=count / total * 100 if total else 0.0,
                commented_bytes=count * BYTES_PER_COMMENTED_FUNCTION,
            )
        if catches is not None:
            issues.extend(catches.issues)
            fields.update(
                catch_blocks_missing_report=catches.missing_report,
                catch_blocks_misplaced_report=catches.misplaced_report,
            )
            _logger.debug(
                "%s: %d catch block(s) missing report(), %d misplaced",
                path, catches.missing_report, catches.misplaced_report,
            )

        return PHPFileAnalysis(issues=tuple(stamp_path(issues, path)), **fields)

    def metric_of(self, analysis: PHPFileAnalysis) -> float:
        return analysis.commented_functions

    def ratio_of(self, analysis: PHPFileAnalysis) -> float:
        return analysis.comment_ratio

    def passes_threshold(self, analysis: PHPFileAnalysis, config: AnalyzerConfig) -> bool:
        if analysis.has_catch_findings:
            return True
        return super().passes_threshold(analysis, config)

    def render(self, results: Sequence[PHPFileAnalysis], *, retained=()) -> list[str]:
        return render_php(results, retained or results)
