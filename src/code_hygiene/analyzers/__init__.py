"""Analyzers walk a tree, apply their rules and report ranked findings.

Every analyzer satisfies the ``Analyzer`` protocol and is registered in
``ANALYZER_CLASSES`` under its configuration key.  Classes are imported
lazily so the PHP parser dependency is only loaded when ``php`` runs.

Available analyzers:
    - conflicts: unresolved Git merge conflict markers (any file)
    - html: commented-out markup in ``.html`` files
    - js: commented-out code in ``.js/.jsx/.ts/.tsx`` files
    - php: commented-out functions and catch blocks missing ``report()``
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from code_hygiene.analyzers.base import AnalyzerConfig
    from code_hygiene.model.issue import Issue


class Analyzer(Protocol):
    """Every analyzer exposes ``key``, ``name``, ``description`` and ``run()``."""

    key: str
    name: str
    description: str

    def run(self, config: AnalyzerConfig) -> list[Issue]:
        """Analyze ``config.root_dir``; return the issues of every retained file."""
        ...


# Configuration key → "module:Class", in registry display order.
ANALYZER_CLASSES: dict[str, str] = {
    "conflicts": "code_hygiene.analyzers.conflicts:ConflictsAnalyzer",
    "html": "code_hygiene.analyzers.html:HTMLAnalyzer",
    "js": "code_hygiene.analyzers.js:JSAnalyzer",
    "php": "code_hygiene.analyzers.php:PHPAnalyzer",
}


def available_analyzers() -> list[str]:
    return list(ANALYZER_CLASSES)


def get_analyzer_class(key: str) -> type:
    try:
        target = ANALYZER_CLASSES[key]
    except KeyError:
        raise KeyError(f"Unknown analyzer: {key!r}") from None
    module_name, _, attr = target.partition(":")
    return getattr(import_module(module_name), attr)


def get_analyzer(key: str) -> Analyzer:
    """Instantiate the analyzer registered under *key*."""
    return get_analyzer_class(key)()


# Lazy imports to avoid loading every analyzer module up front
def __getattr__(name: str):
    for target in ANALYZER_CLASSES.values():
        module_name, _, attr = target.partition(":")
        if attr == name:
            return getattr(import_module(module_name), attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
