"""Catch-block rule — every ``catch`` must hand the exception to ``report()``.

Laravel apps route swallowed exceptions through the global ``report()``
helper.  For each ``catch_clause`` in the syntax tree:

* no bare ``report(...)`` statement          → critical
* ``report(...)`` present but not first      → medium
* ``report(...)`` is the first statement     → fine

Only a single-segment function call counts: ``$this->report($e)``,
``Log::report($e)`` and ``\\report($e)`` do not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import tree_sitter_php
from tree_sitter import Language, Node, Parser

from code_hygiene import rules
from code_hygiene.model import Severity
from code_hygiene.model.issue import Issue

PHP_LANGUAGE = Language(tree_sitter_php.language_php())

REPORT_FUNCTION = b"report"

MISSING_REPORT = "Critical: Catch block missing report() call in Laravel app file"
MISPLACED_REPORT = "Medium Risk: report() call is not the first statement in catch block"


@dataclass(frozen=True, slots=True)
class CatchBlockFinding:
    issues: tuple[Issue, ...]
    missing_report: int
    misplaced_report: int


def iter_catch_clauses(root: Node) -> Iterator[Node]:
    """Pre-order walk yielding every ``catch_clause`` (nested ones included)."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "catch_clause":
            yield node
        stack.extend(reversed(node.children))


def _statements(catch: Node) -> list[Node]:
    body = catch.child_by_field_name("body")
    if body is None:
        return []
    return [c for c in body.named_children if c.type != "comment"]


def is_report_call(stmt: Node) -> bool:
    """``report(...);`` as a plain expression statement."""
    if stmt.type != "expression_statement":
        return False
    exprs = [c for c in stmt.named_children if c.type != "comment"]
    if not exprs or exprs[0].type != "function_call_expression":
        return False
    func = exprs[0].child_by_field_name("function")
    return func is not None and func.type == "name" and func.text == REPORT_FUNCTION


class CatchBlockRule:
    """Syntax-tree rule; malformed PHP yields no finding."""

    id = rules.PHP_CATCH_REPORT_001
    name = "Laravel Catch Block Rule"

    def __init__(self) -> None:
        self._parser = Parser(PHP_LANGUAGE)

    def apply(self, content: str) -> CatchBlockFinding | None:
        tree = self._parser.parse(content.encode("utf-8"))
        root = tree.root_node
        if root is None or root.has_error:
            return None

        issues: list[Issue] = []
        missing = misplaced = 0
        for catch in iter_catch_clauses(root):
            line = catch.start_point[0] + 1
            position = next(
                (i for i, stmt in enumerate(_statements(catch)) if is_report_call(stmt)),
                None,
            )
            if position is None:
                missing += 1
                issues.append(Issue(description=MISSING_REPORT, line=line, severity=Severity.CRITICAL))
            elif position > 0:
                misplaced += 1
                issues.append(Issue(description=MISPLACED_REPORT, line=line, severity=Severity.MEDIUM))

        if not issues:
            return None
        return CatchBlockFinding(
            issues=tuple(issues),
            missing_report=missing,
            misplaced_report=misplaced,
        )
