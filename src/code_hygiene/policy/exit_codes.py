"""Exit-code policy — optional severity gate for CI.

Philosophy:
  - Deterministic in CI
  - No gate configured → findings never change the exit code
  - Unknown severities are fail-safe (critical)

Run-level failures (bad config, a failed analyzer) are ``ExitCode.ERROR``
and are decided by the runner, not here.
"""

from __future__ import annotations

from typing import Iterable

from code_hygiene.model import Severity
from code_hygiene.model.issue import Issue
from code_hygiene.utils.exit_codes import ExitCode

_SEV_RANK: dict[str, int] = {
    Severity.MINOR.value: 1,
    Severity.MEDIUM.value: 2,
    Severity.MAJOR.value: 3,
    Severity.CRITICAL.value: 4,
}


def normalize_severity(value: str | Severity | None) -> str:
    """Canonical lower-case severity; unknown or empty values become ``critical``."""
    if isinstance(value, Severity):
        return value.value
    v = (value or "").strip().lower()
    if v in _SEV_RANK:
        return v
    return Severity.CRITICAL.value


def severity_rank(value: str | Severity | None) -> int:
    return _SEV_RANK[normalize_severity(value)]


def worst_severity(issues: Iterable[Issue]) -> str | None:
    """Highest severity among *issues*, or ``None`` when there are none."""
    worst: str | None = None
    for issue in issues:
        sev = normalize_severity(issue.severity)
        if worst is None or _SEV_RANK[sev] > _SEV_RANK[worst]:
            worst = sev
    return worst


def exit_code_for_issues(issues: Iterable[Issue], fail_on: str | None) -> int:
    """``VIOLATION`` when any issue is at or above *fail_on*, else ``SUCCESS``.

    Contract:
      - ``fail_on=None`` never fails
      - monotonic (a stricter gate never yields a lower exit code)
    """
    if not fail_on:
        return int(ExitCode.SUCCESS)
    worst = worst_severity(issues)
    if worst is None:
        return int(ExitCode.SUCCESS)
    if _SEV_RANK[worst] >= severity_rank(fail_on):
        return int(ExitCode.VIOLATION)
    return int(ExitCode.SUCCESS)
