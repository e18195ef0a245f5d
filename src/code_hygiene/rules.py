"""Canonical rule ID registry.

Single source of truth for every rule ID a detector in code_hygiene carries.

Structure:
  PUBLIC_RULE_IDS       - stable, supported, safe for downstream consumption
  EXPERIMENTAL_RULE_IDS - unstable, may change or be removed
  DEPRECATED_RULE_IDS   - scheduled for removal, do not add new usage
  ALL_RULE_IDS          - union of all buckets (internal use only)
"""

from __future__ import annotations

# ── Merge conflicts (public) ────────────────────────────────────────
CNF_MARKER_001 = "CNF_MARKER_001"

# ── Commented-out code (public) ─────────────────────────────────────
HTML_COMMENTED_CODE_001 = "HTML_COMMENTED_CODE_001"
JS_COMMENTED_CODE_001 = "JS_COMMENTED_CODE_001"
PHP_COMMENTED_FUNCTION_001 = "PHP_COMMENTED_FUNCTION_001"

# ── Error handling (public) ─────────────────────────────────────────
PHP_CATCH_REPORT_001 = "PHP_CATCH_REPORT_001"

# ── Buckets ─────────────────────────────────────────────────────────

PUBLIC_RULE_IDS: list[str] = sorted([
    CNF_MARKER_001,
    HTML_COMMENTED_CODE_001,
    JS_COMMENTED_CODE_001,
    PHP_COMMENTED_FUNCTION_001,
    PHP_CATCH_REPORT_001,
])

EXPERIMENTAL_RULE_IDS: list[str] = sorted([
])

DEPRECATED_RULE_IDS: list[str] = sorted([
])

ALL_RULE_IDS: list[str] = sorted(set(
    PUBLIC_RULE_IDS
    + EXPERIMENTAL_RULE_IDS
    + DEPRECATED_RULE_IDS
))


def _assert_rule_registry_invariants() -> None:
    """Fail fast on invariant violations.

    Called at import time so CI and local runs catch issues immediately.
    """
    import re

    rule_re = re.compile(r"^[A-Z]{2,4}_[A-Z][A-Z0-9_]*_[0-9]{3}$")

    def _check_bucket(name: str, ids: list[str]) -> None:
        if ids != sorted(ids):
            raise AssertionError(f"{name} must be sorted")
        if len(ids) != len(set(ids)):
            raise AssertionError(f"{name} must contain unique IDs")
        bad = [x for x in ids if not rule_re.match(x)]
        if bad:
            raise AssertionError(f"{name} contains invalid rule IDs: {bad}")

    _check_bucket("PUBLIC_RULE_IDS", PUBLIC_RULE_IDS)
    _check_bucket("EXPERIMENTAL_RULE_IDS", EXPERIMENTAL_RULE_IDS)
    _check_bucket("DEPRECATED_RULE_IDS", DEPRECATED_RULE_IDS)
    _check_bucket("ALL_RULE_IDS", ALL_RULE_IDS)

    pub = set(PUBLIC_RULE_IDS)
    exp = set(EXPERIMENTAL_RULE_IDS)
    dep = set(DEPRECATED_RULE_IDS)
    overlap = (pub & exp) | (pub & dep) | (exp & dep)
    if overlap:
        raise AssertionError(
            f"Rule ID buckets must be disjoint; overlaps: {sorted(overlap)}"
        )


_assert_rule_registry_invariants()
