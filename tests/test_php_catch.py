"""Tests for the syntax-tree catch-block rule (requires tree-sitter-php)."""

from __future__ import annotations

import textwrap

import pytest

from code_hygiene.analyzers.php_catch import (
    MISPLACED_REPORT,
    MISSING_REPORT,
    CatchBlockRule,
)
from code_hygiene.model import Severity


def _php(body: str) -> str:
    return "<?php\n" + textwrap.dedent(body)


@pytest.fixture(scope="module")
def rule() -> CatchBlockRule:
    return CatchBlockRule()


class TestCatchBlockRule:
    """report() must be the first statement of every catch block."""

    def test_report_first_is_valid(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                foo();
            } catch (Exception $e) {
                report($e);
                return null;
            }
        """)
        assert rule.apply(content) is None

    def test_report_later_is_medium(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            function a() {
                try {
                    foo();
                } catch (Exception $e) {
                    Log::error($e->getMessage());
                    report($e);
                }
            }
        """)
        finding = rule.apply(content)
        assert finding is not None
        assert finding.misplaced_report == 1
        assert finding.missing_report == 0
        [issue] = finding.issues
        assert issue.severity == Severity.MEDIUM
        assert issue.description == MISPLACED_REPORT
        assert issue.line == 5

    def test_missing_report_is_critical(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                foo();
            } catch (Exception $e) {
                return false;
            }
        """)
        finding = rule.apply(content)
        [issue] = finding.issues
        assert issue.severity == Severity.CRITICAL
        assert issue.description == MISSING_REPORT
        assert issue.line == 4
        assert finding.missing_report == 1

    def test_empty_catch_is_critical(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try { foo(); } catch (Exception $e) {}
        """)
        finding = rule.apply(content)
        assert finding.missing_report == 1
        assert finding.issues[0].line == 2

    @pytest.mark.parametrize("call", [
        "$this->report($e);",
        "Log::report($e);",
        "reportError($e);",
    ])
    def test_only_bare_report_counts(self, rule: CatchBlockRule, call: str) -> None:
        content = _php(f"""\
            try {{
                foo();
            }} catch (Exception $e) {{
                {call}
            }}
        """)
        finding = rule.apply(content)
        assert finding is not None
        assert finding.missing_report == 1

    def test_report_nested_in_if_is_not_a_statement_of_the_block(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                foo();
            } catch (Exception $e) {
                if ($e) {
                    report($e);
                }
            }
        """)
        assert rule.apply(content).missing_report == 1

    def test_leading_comment_is_ignored(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                foo();
            } catch (Exception $e) {
                // always report first
                report($e);
            }
        """)
        assert rule.apply(content) is None

    def test_multiple_blocks(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                a();
            } catch (InvalidArgumentException $e) {
                report($e);
            } catch (RuntimeException $e) {
                cleanup();
            } catch (Exception $e) {
                cleanup();
                report($e);
            }
        """)
        finding = rule.apply(content)
        assert finding.missing_report == 1
        assert finding.misplaced_report == 1
        assert [(i.severity, i.line) for i in finding.issues] == [
            (Severity.CRITICAL, 6),
            (Severity.MEDIUM, 8),
        ]

    def test_nested_try_in_catch(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                a();
            } catch (Exception $e) {
                report($e);
                try {
                    b();
                } catch (Exception $inner) {
                }
            }
        """)
        finding = rule.apply(content)
        assert len(finding.issues) == 1
        assert finding.issues[0].line == 8

    def test_malformed_php_is_absent(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try {
                foo(
            } catch (Exception $e) {
            }
        """)
        assert rule.apply(content) is None

    def test_no_catch_blocks(self, rule: CatchBlockRule) -> None:
        assert rule.apply("<?php\necho 'hello';\n") is None

    def test_issues_have_no_path(self, rule: CatchBlockRule) -> None:
        content = _php("""\
            try { a(); } catch (Exception $e) { b(); }
        """)
        assert all(i.path == "" for i in rule.apply(content).issues)
