"""JS/TS analyzer — finds commented-out code in ``/* */`` and ``//`` comments."""

from __future__ import annotations

import re

from code_hygiene import rules
from code_hygiene.analyzers.commented_code import (
    CommentedCodeAnalyzer,
    CommentedCodeFinding,
    CommentTally,
    is_code,
    iter_block_comments,
    iter_line_comment_runs,
)
from code_hygiene.model import AnalyzerType

_BLOCK_RE = re.compile(r"/\*(.*?)\*/", re.DOTALL)


class JSCommentedCodeRule:
    id = rules.JS_COMMENTED_CODE_001
    name = "Commented Code Detector"

    def apply(self, content: str) -> CommentedCodeFinding | None:
        tally = CommentTally(label="JS")
        spans: list[tuple[int, int]] = []

        for m, candidate in iter_block_comments(content, _BLOCK_RE):
            spans.append(m.span())
            if is_code(candidate.text):
                tally.add(candidate)

        for candidate in iter_line_comment_runs(content, skip_spans=spans):
            if is_code(candidate.text):
                tally.add(candidate)

        return tally.finding()


class JSAnalyzer(CommentedCodeAnalyzer):
    key = AnalyzerType.JS.value
    name = "JS Analyzer"
    description = "Analyzes JS/TS files for commented code blocks"
    extensions = (".js", ".jsx", ".ts", ".tsx")
    label = "JS"

    def __init__(self) -> None:
        super().__init__(JSCommentedCodeRule())
