"""HTML analyzer — finds ``<!-- ... -->`` comments that wrap markup."""

from __future__ import annotations

import re

from code_hygiene import rules
from code_hygiene.analyzers.commented_code import (
    CommentedCodeAnalyzer,
    CommentedCodeFinding,
    CommentTally,
    iter_block_comments,
)
from code_hygiene.model import AnalyzerType

_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.DOTALL)
# "<" then a letter or "/", up to ">": an opening or closing tag.
_TAG_RE = re.compile(r"<[/a-zA-Z][^>]*>")


def has_markup(text: str) -> bool:
    return _TAG_RE.search(text) is not None


class HTMLCommentedCodeRule:
    """A comment is commented-out code only when its body contains a tag.

    Plain-prose comments never qualify, whatever their keyword score.
    """

    id = rules.HTML_COMMENTED_CODE_001
    name = "Commented Code Detector"

    def apply(self, content: str) -> CommentedCodeFinding | None:
        tally = CommentTally(label="HTML")
        for _, candidate in iter_block_comments(content, _COMMENT_RE):
            if has_markup(candidate.text):
                tally.add(candidate)
        return tally.finding()


class HTMLAnalyzer(CommentedCodeAnalyzer):
    key = AnalyzerType.HTML.value
    name = "HTML Analyzer"
    description = "Analyzes HTML files for commented code blocks"
    extensions = (".html",)
    label = "HTML"

    def __init__(self) -> None:
        super().__init__(HTMLCommentedCodeRule())
