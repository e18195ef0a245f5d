"""Shared analyzer pipeline: walk → detect → threshold → rank → emit.

Every language analyzer subclasses :class:`BaseAnalyzer` and supplies the
per-file step (``analyze_file``) plus its two ranking metrics.  The walk,
threshold filter, stable sort, top-N truncation, artifact writing and
console summary are identical across analyzers and live here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Generic, Protocol, Sequence, TypeVar

from code_hygiene.contracts.load import validate_instance
from code_hygiene.core.clock import ClockSource, default_clock
from code_hygiene.core.config import (
    DEFAULT_APP_PATHS,
    DEFAULT_MIN,
    DEFAULT_SORT,
    DEFAULT_TOP,
    AnalyzerSettings,
)
from code_hygiene.core.discover import DiscoverConfig, display_path, iter_source_files, read_source
from code_hygiene.core.errors import ArtifactWriteError
from code_hygiene.model.analysis import AnalysisReport
from code_hygiene.model.issue import Issue
from code_hygiene.utils.json_norm import write_json_artifact

_logger = logging.getLogger(__name__)

F = TypeVar("F", covariant=True)
A = TypeVar("A")

SORT_BY_RATIO = "ratio"


class Rule(Protocol[F]):
    """A pure detector: raw content in, structured finding (or ``None``) out.

    Rules never touch the filesystem and never see a path, so the same
    content always produces the same result.
    """

    id: str
    name: str

    def apply(self, content: str) -> F | None:
        ...


@dataclass(frozen=True)
class AnalyzerConfig:
    """Run parameters handed to ``Analyzer.run``."""

    root_dir: Path
    top_n: int = DEFAULT_TOP
    min_value: int = DEFAULT_MIN
    min_ratio: float = 0.0
    sort_by: str = DEFAULT_SORT
    output_file: Path | None = None
    exclude_paths: tuple[str, ...] = ()
    app_paths: tuple[str, ...] = DEFAULT_APP_PATHS
    clock: ClockSource = field(default_factory=default_clock)

    @classmethod
    def from_settings(
        cls,
        settings: AnalyzerSettings,
        *,
        root_dir: Path,
        output_file: Path | None = None,
        clock: ClockSource | None = None,
    ) -> AnalyzerConfig:
        return cls(
            root_dir=root_dir,
            top_n=settings.top,
            min_value=settings.min,
            min_ratio=settings.min_ratio,
            sort_by=settings.sort,
            output_file=output_file,
            exclude_paths=settings.exclude,
            app_paths=settings.app_paths,
            clock=clock or default_clock(),
        )


class BaseAnalyzer(Generic[A]):
    """Template for the per-language analyzers.

    Subclasses set the class attributes and implement ``analyze_file``,
    ``metric_of``, ``ratio_of`` and ``render``.
    """

    key: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    report_cls: ClassVar[type[AnalysisReport]]
    extensions: ClassVar[tuple[str, ...] | None] = None
    max_file_bytes: ClassVar[int | None] = None

    # ── hooks ───────────────────────────────────────────────────────

    def analyze_file(self, path: str, raw: bytes, content: str, config: AnalyzerConfig) -> A | None:
        raise NotImplementedError

    def metric_of(self, analysis: A) -> float:
        """Primary count/byte metric — threshold floor and default sort key."""
        raise NotImplementedError

    def ratio_of(self, analysis: A) -> float:
        raise NotImplementedError

    def render(self, results: Sequence[A], *, retained: Sequence[A] = ()) -> list[str]:
        """Console summary of the ranked *results*; *retained* is the full thresholded set."""
        raise NotImplementedError

    def passes_threshold(self, analysis: A, config: AnalyzerConfig) -> bool:
        if self.metric_of(analysis) < config.min_value:
            return False
        if config.min_ratio > 0 and self.ratio_of(analysis) < config.min_ratio:
            return False
        return True

    # ── pipeline ────────────────────────────────────────────────────

    def run(self, config: AnalyzerConfig) -> list[Issue]:
        """Analyze the tree under ``config.root_dir``.

        Returns every issue of every retained file (the full thresholded
        set, not only the top-N shown in the report).  Raises
        ``ScanRootError`` when the root cannot be walked.
        """
        retained = self.collect(config)
        ranked = self.rank(retained, config)

        if config.output_file is not None:
            self.write_artifact(ranked, config, retained=retained)

        print("\n".join(self.render(ranked, retained=retained)))
        return [issue for analysis in retained for issue in self.issues_of(analysis)]

    def collect(self, config: AnalyzerConfig) -> list[A]:
        """Walk the tree and keep files that have findings and pass the floors."""
        discover = DiscoverConfig(
            root=Path(config.root_dir),
            include_exts=self.extensions,
            exclude=tuple(config.exclude_paths),
            max_file_bytes=self.max_file_bytes,
        )
        retained: list[A] = []
        for path in iter_source_files(discover):
            source = read_source(path)
            if source is None:
                continue
            raw, content = source
            analysis = self.analyze_file(display_path(path), raw, content, config)
            if analysis is None:
                continue
            if not self.passes_threshold(analysis, config):
                continue
            retained.append(analysis)
        _logger.debug("%s retained %d file(s)", self.key, len(retained))
        return retained

    def rank(self, results: Sequence[A], config: AnalyzerConfig) -> list[A]:
        """Stable descending sort on the configured key, then top-N."""
        key = self.ratio_of if config.sort_by == SORT_BY_RATIO else self.metric_of
        ranked = sorted(results, key=key, reverse=True)
        return ranked[: config.top_n]

    def issues_of(self, analysis: A) -> tuple[Issue, ...]:
        return analysis.issues  # type: ignore[attr-defined]

    # ── artifact ────────────────────────────────────────────────────

    def build_report(
        self, results: Sequence[A], config: AnalyzerConfig, *, retained: Sequence[A] = ()
    ) -> AnalysisReport:
        return self.report_cls(
            analyzer=self.key,
            timestamp=config.clock.timestamp(),
            scan_directory=Path(config.root_dir).as_posix(),
            sort_mode=config.sort_by,
            min_value=config.min_value,
            min_ratio=config.min_ratio,
            results=tuple(results),
            retained=tuple(retained),
        )

    def write_artifact(
        self, results: Sequence[A], config: AnalyzerConfig, *, retained: Sequence[A] = ()
    ) -> Path | None:
        """Write the JSON report; a write failure is logged, never raised."""
        report = self.build_report(results, config, retained=retained)
        data = report.to_dict()
        validate_instance(data, report.schema_name)
        try:
            out = write_json_artifact(config.output_file, data)
        except ArtifactWriteError as exc:
            _logger.warning("Failed to generate artifact for %s: %s", self.key, exc)
            return None
        print(f"Artifact generated: {out.as_posix()}\n")
        return out
