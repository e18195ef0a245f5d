"""Rule ID registry invariants and detector wiring."""

from __future__ import annotations

import re

from code_hygiene import rules
from code_hygiene.analyzers.conflicts import ConflictMarkersRule
from code_hygiene.analyzers.html import HTMLCommentedCodeRule
from code_hygiene.analyzers.js import JSCommentedCodeRule
from code_hygiene.analyzers.php import CommentedFunctionsRule

RULE_RE = re.compile(r"^[A-Z]{2,4}_[A-Z][A-Z0-9_]*_[0-9]{3}$")


def test_buckets_sorted_unique_and_well_formed():
    for ids in (rules.PUBLIC_RULE_IDS, rules.EXPERIMENTAL_RULE_IDS, rules.DEPRECATED_RULE_IDS):
        assert ids == sorted(set(ids))
        assert all(RULE_RE.match(i) for i in ids)


def test_all_is_union_of_buckets():
    union = set(rules.PUBLIC_RULE_IDS) | set(rules.EXPERIMENTAL_RULE_IDS) | set(rules.DEPRECATED_RULE_IDS)
    assert rules.ALL_RULE_IDS == sorted(union)


def test_every_text_rule_carries_a_public_id():
    for rule in (ConflictMarkersRule(), HTMLCommentedCodeRule(), JSCommentedCodeRule(), CommentedFunctionsRule()):
        assert rule.id in rules.PUBLIC_RULE_IDS
        assert rule.name


def test_catch_rule_id_is_public():
    assert rules.PHP_CATCH_REPORT_001 in rules.PUBLIC_RULE_IDS
