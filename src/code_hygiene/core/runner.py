"""Runner — runs the enabled analyzers in order and aggregates their issues."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from code_hygiene.analyzers import ANALYZER_CLASSES, get_analyzer
from code_hygiene.analyzers.base import AnalyzerConfig
from code_hygiene.core.clock import ClockSource, default_clock
from code_hygiene.core.config import DEFAULT_CONFIG_FILE, AppConfig
from code_hygiene.core.errors import ArtifactWriteError, ConfigError, HygieneError
from code_hygiene.model.issue import Issue
from code_hygiene.policy.exit_codes import exit_code_for_issues
from code_hygiene.reports.code_quality import build_code_quality_issues, write_code_quality_report
from code_hygiene.reports.console import (
    render_analyzer_header,
    render_run_footer,
    render_run_header,
)
from code_hygiene.utils.exit_codes import ExitCode

_logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """What a run produced: exit code plus the aggregated ``(analyzer, issue)`` pairs."""

    exit_code: int
    issues: list[tuple[str, Issue]] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def _print(lines: list[str]) -> None:
    print("\n".join(lines))


def run_analysis(
    config: AppConfig,
    *,
    config_file: str = DEFAULT_CONFIG_FILE,
    clock: ClockSource | None = None,
) -> RunOutcome:
    """Run every enabled analyzer against ``config.dir``.

    Raises ``ConfigError`` when no known analyzer is enabled.  An analyzer
    that fails is logged and skipped; the run then exits with ``ERROR``.
    """
    clock = clock or default_clock()

    selected = []
    for name, settings in config.enabled():
        if name not in ANALYZER_CLASSES:
            _logger.warning("Unknown analyzer %r in configuration — skipped", name)
            continue
        selected.append((name, settings))
    if not selected:
        raise ConfigError("No analyzers enabled in configuration", {"config": config_file})

    _print(render_run_header(config_file, config.dir.as_posix(), len(selected)))

    outcome = RunOutcome(exit_code=int(ExitCode.SUCCESS))
    for index, (name, settings) in enumerate(selected, start=1):
        analyzer = get_analyzer(name)
        _print(render_analyzer_header(index, len(selected), analyzer.name))

        output_file = config.output / f"{name}-analysis.json" if config.output else None
        analyzer_config = AnalyzerConfig.from_settings(
            settings, root_dir=config.dir, output_file=output_file, clock=clock
        )
        try:
            issues = analyzer.run(analyzer_config)
        except HygieneError as exc:
            _logger.error("Analyzer '%s' failed: %s", name, exc)
            outcome.failed.append(name)
            continue
        outcome.succeeded.append(name)
        outcome.issues.extend((name, issue) for issue in issues)

    if config.code_quality_report is not None:
        feed = build_code_quality_issues(outcome.issues)
        try:
            out = write_code_quality_report(config.code_quality_report, feed)
        except ArtifactWriteError as exc:
            _logger.error("Failed to write code quality report: %s", exc)
        else:
            print(f"Code quality report generated: {out.as_posix()} ({len(feed)} issues)")

    _print(render_run_footer(len(outcome.succeeded), len(selected)))

    if outcome.failed:
        outcome.exit_code = int(ExitCode.ERROR)
    else:
        outcome.exit_code = exit_code_for_issues(
            (issue for _, issue in outcome.issues), config.fail_on
        )
    return outcome
