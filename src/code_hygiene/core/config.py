"""Analysis configuration — YAML file → immutable dataclasses.

Example ``analysis-config.yaml``::

    dir: .
    output: artifacts
    code_quality_report: gl-code-quality-report.json
    fail_on: critical
    analyzers:
      conflicts: {enabled: true, top: 50}
      js:        {enabled: true, sort: size, min: 100, exclude: [node_modules, dist]}
      php:       {enabled: true, app_paths: [app/]}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import jsonschema
import yaml

from code_hygiene.contracts.load import validate_instance
from code_hygiene.core.errors import ConfigError

_logger = logging.getLogger(__name__)

CONFIG_SCHEMA = "analysis_config.schema.json"
# Older name of ``code_quality_report``; still read, the new key wins.
LEGACY_REPORT_KEY = "gitlab_report"
DEFAULT_CONFIG_FILE = "analysis-config.yaml"

# Applied when a setting is absent or zero.
DEFAULT_SORT = "ratio"
DEFAULT_MIN = 1
DEFAULT_TOP = 100
DEFAULT_APP_PATHS: tuple[str, ...] = ("app/",)


@dataclass(frozen=True)
class AnalyzerSettings:
    """One ``analyzers.<name>`` entry with defaults applied."""

    enabled: bool = False
    top: int = DEFAULT_TOP
    min: int = DEFAULT_MIN
    min_ratio: float = 0.0
    sort: str = DEFAULT_SORT
    exclude: tuple[str, ...] = ()
    app_paths: tuple[str, ...] = DEFAULT_APP_PATHS

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> AnalyzerSettings:
        data = data or {}
        return cls(
            enabled=bool(data.get("enabled", False)),
            top=int(data.get("top") or DEFAULT_TOP),
            min=int(data.get("min") or DEFAULT_MIN),
            min_ratio=float(data.get("min_ratio") or 0.0),
            sort=str(data.get("sort") or DEFAULT_SORT),
            exclude=tuple(data.get("exclude") or ()),
            app_paths=tuple(data.get("app_paths") or DEFAULT_APP_PATHS),
        )


@dataclass(frozen=True)
class AppConfig:
    """Whole-run configuration.  ``analyzers`` keeps file order."""

    dir: Path = Path(".")
    output: Path | None = None
    code_quality_report: Path | None = None
    fail_on: str | None = None
    analyzers: dict[str, AnalyzerSettings] = field(default_factory=dict)

    def enabled(self) -> list[tuple[str, AnalyzerSettings]]:
        return [(name, s) for name, s in self.analyzers.items() if s.enabled]

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        for key in ("dir", "output", "code_quality_report"):
            if key in changes:
                changes[key] = Path(changes[key])
        return replace(self, **changes) if changes else self


def config_from_mapping(data: Mapping[str, Any]) -> AppConfig:
    """Validate a parsed config mapping and build an ``AppConfig``."""
    try:
        validate_instance(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigError(
            "Invalid configuration", {"at": location, "error": exc.message}
        ) from exc

    output = data.get("output")
    report = data.get("code_quality_report")
    if data.get(LEGACY_REPORT_KEY):
        _logger.warning("Config key %r is deprecated; use 'code_quality_report'", LEGACY_REPORT_KEY)
        report = report or data[LEGACY_REPORT_KEY]
    return AppConfig(
        dir=Path(data.get("dir") or "."),
        output=Path(output) if output else None,
        code_quality_report=Path(report) if report else None,
        fail_on=data.get("fail_on"),
        analyzers={
            str(name): AnalyzerSettings.from_mapping(entry)
            for name, entry in (data.get("analyzers") or {}).items()
        },
    )


def load_config(path: str | Path = DEFAULT_CONFIG_FILE) -> AppConfig:
    """Load and validate a YAML configuration file.

    Raises ``ConfigError`` when the file is unreadable, is not valid YAML,
    or does not satisfy ``analysis_config.schema.json``.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError("Failed to read config file", {"path": str(p), "error": str(exc)}) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError("Failed to parse config file", {"path": str(p), "error": str(exc)}) from exc

    if not isinstance(data, Mapping):
        raise ConfigError("Config file must contain a mapping", {"path": str(p)})

    _logger.debug("Loaded config from %s", p)
    return config_from_mapping(data)
