"""Tests for the shared walk → threshold → rank → emit pipeline."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from code_hygiene.analyzers.base import AnalyzerConfig
from code_hygiene.analyzers.html import HTMLAnalyzer
from code_hygiene.analyzers.js import JSAnalyzer
from code_hygiene.contracts.load import validate_file
from code_hygiene.core.clock import FixedClock
from code_hygiene.core.errors import ScanRootError

# 32 commented bytes out of 33: ratio ~97%
SMALL = "// var x = 1;\n// console.log(x);\n"
# 555 commented bytes out of 6056: ratio ~9%
LARGE = "/* " + "var x = 1; " * 50 + "*/\n" + "let y = 2;\n" * 500


def _config(root: Path, **kw) -> AnalyzerConfig:
    return AnalyzerConfig(root_dir=root, clock=FixedClock("2024-05-01T12:00:00+02:00"), **kw)


def _artifact(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture()
def js_tree(tmp_path: Path) -> Path:
    (tmp_path / "small.js").write_text(SMALL)
    (tmp_path / "large.ts").write_text(LARGE)
    (tmp_path / "clean.js").write_text("const a = 1;\n")
    return tmp_path


class TestRanking:
    """Stable descending sort on the configured key, then top-N."""

    def test_sort_by_ratio(self, js_tree: Path) -> None:
        out = js_tree / "out.json"
        JSAnalyzer().run(_config(js_tree, sort_by="ratio", output_file=out))
        names = [Path(r["path"]).name for r in _artifact(out)["results"]]
        assert names == ["small.js", "large.ts"]

    def test_sort_by_size(self, js_tree: Path) -> None:
        out = js_tree / "out.json"
        JSAnalyzer().run(_config(js_tree, sort_by="size", output_file=out))
        names = [Path(r["path"]).name for r in _artifact(out)["results"]]
        assert names == ["large.ts", "small.js"]

    def test_ratio_order_is_monotonic(self, js_tree: Path) -> None:
        out = js_tree / "out.json"
        JSAnalyzer().run(_config(js_tree, output_file=out))
        ratios = [r["comment_ratio"] for r in _artifact(out)["results"]]
        assert ratios == sorted(ratios, reverse=True)

    def test_ties_keep_walk_order(self, tmp_path: Path) -> None:
        for name in ("b_copy.js", "a_copy.js", "c_copy.js"):
            (tmp_path / name).write_text(SMALL)
        out = tmp_path / "out.json"
        JSAnalyzer().run(_config(tmp_path, output_file=out))
        names = [Path(r["path"]).name for r in _artifact(out)["results"]]
        assert names == ["a_copy.js", "b_copy.js", "c_copy.js"]

    def test_top_n_truncates_artifact_but_not_issues(self, js_tree: Path) -> None:
        out = js_tree / "out.json"
        issues = JSAnalyzer().run(_config(js_tree, top_n=1, output_file=out))
        data = _artifact(out)
        assert data["total_files"] == 1
        assert [Path(r["path"]).name for r in data["results"]] == ["small.js"]
        assert {Path(i.path).name for i in issues} == {"small.js", "large.ts"}


class TestThresholds:
    def test_min_value_floor(self, js_tree: Path) -> None:
        issues = JSAnalyzer().run(_config(js_tree, min_value=100))
        assert {Path(i.path).name for i in issues} == {"large.ts"}

    def test_min_ratio_floor(self, js_tree: Path) -> None:
        issues = JSAnalyzer().run(_config(js_tree, min_ratio=50.0))
        assert {Path(i.path).name for i in issues} == {"small.js"}

    def test_clean_files_never_enter_results(self, js_tree: Path) -> None:
        out = js_tree / "out.json"
        JSAnalyzer().run(_config(js_tree, output_file=out))
        assert "clean.js" not in {Path(r["path"]).name for r in _artifact(out)["results"]}


class TestWalk:
    def test_exclude_substrings(self, js_tree: Path) -> None:
        vendored = js_tree / "node_modules" / "lib"
        vendored.mkdir(parents=True)
        (vendored / "dep.js").write_text(SMALL)

        issues = JSAnalyzer().run(_config(js_tree, exclude_paths=("node_modules",)))

        assert all("node_modules" not in i.path for i in issues)

    def test_extension_filter_is_case_insensitive(self, tmp_path: Path) -> None:
        (tmp_path / "UPPER.JS").write_text(SMALL)
        (tmp_path / "notes.txt").write_text(SMALL)
        issues = JSAnalyzer().run(_config(tmp_path))
        assert [Path(i.path).name for i in issues] == ["UPPER.JS"]

    def test_issue_paths_are_root_joined(self, tmp_path: Path) -> None:
        sub = tmp_path / "src"
        sub.mkdir()
        (sub / "a.js").write_text(SMALL)
        [issue] = JSAnalyzer().run(_config(tmp_path))
        assert issue.path == (tmp_path / "src" / "a.js").as_posix()

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ScanRootError):
            JSAnalyzer().run(_config(tmp_path / "nope"))

    def test_file_root_raises(self, tmp_path: Path) -> None:
        f = tmp_path / "a.js"
        f.write_text(SMALL)
        with pytest.raises(ScanRootError):
            JSAnalyzer().run(_config(f))


class TestArtifact:
    def test_envelope(self, js_tree: Path) -> None:
        out = js_tree / "artifacts" / "js-analysis.json"
        JSAnalyzer().run(_config(js_tree, output_file=out, min_ratio=1.5))

        data = _artifact(out)
        assert data["analyzer"] == "js"
        assert data["timestamp"] == "2024-05-01T12:00:00+02:00"
        assert data["scan_directory"] == js_tree.as_posix()
        assert data["sort_mode"] == "ratio"
        assert data["min_value"] == 1
        assert data["min_ratio"] == 1.5
        assert data["total_files"] == 2
        assert data["total_commented_bytes"] == 32 + 555
        validate_file(out, "analysis_report.schema.json")

    def test_canonical_formatting(self, js_tree: Path) -> None:
        out = js_tree / "js-analysis.json"
        JSAnalyzer().run(_config(js_tree, output_file=out))
        text = out.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert text.startswith('{\n  "analyzer": "js"')

    def test_no_artifact_without_output_file(self, js_tree: Path, capsys) -> None:
        JSAnalyzer().run(_config(js_tree))
        assert "Artifact generated" not in capsys.readouterr().out

    def test_write_failure_only_warns(self, js_tree: Path, caplog) -> None:
        blocker = js_tree / "blocker"
        blocker.write_text("not a directory")
        out = blocker / "js-analysis.json"

        with caplog.at_level(logging.WARNING):
            issues = JSAnalyzer().run(_config(js_tree, output_file=out))

        assert len(issues) == 2
        assert "Failed to generate artifact for js" in caplog.text

    def test_html_artifact(self, tmp_path: Path) -> None:
        (tmp_path / "index.html").write_text("<body>\n<!-- <div>old</div> -->\n</body>\n")
        out = tmp_path / "html-analysis.json"
        issues = HTMLAnalyzer().run(_config(tmp_path, output_file=out))
        data = _artifact(out)
        assert len(issues) == 1
        assert data["results"][0]["commented_bytes"] == 23
        assert data["results"][0]["issues"][0]["line"] == 2


class TestConsole:
    def test_summary_lists_ranked_files(self, js_tree: Path, capsys) -> None:
        JSAnalyzer().run(_config(js_tree))
        out = capsys.readouterr().out
        assert "Found 2 files with commented code" in out
        assert "Top 10 High-Impact Files:" in out
        assert out.index("small.js") < out.index("large.ts")

    def test_none_found(self, tmp_path: Path, capsys) -> None:
        assert JSAnalyzer().run(_config(tmp_path)) == []
        assert "No JS files with significant commented code found!" in capsys.readouterr().out
