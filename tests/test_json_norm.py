"""Tests for the canonical JSON normalization layer."""

import json
from enum import Enum
from pathlib import Path

import pytest

from code_hygiene.core.errors import ArtifactWriteError
from code_hygiene.model import Severity
from code_hygiene.model.issue import Issue
from code_hygiene.utils.json_norm import stable_json_dump, stable_json_dumps, write_json_artifact


def test_stable_json_dumps_sorts_keys_and_adds_newline():
    s = stable_json_dumps({"b": 1, "a": 2})
    assert s.endswith("\n")
    # Keys should be sorted in the serialized output
    assert s.index('"a"') < s.index('"b"')


def test_stable_json_dumps_uses_two_space_indent():
    assert stable_json_dumps({"a": 1}) == '{\n  "a": 1\n}\n'


def test_stable_json_dumps_rounds_floats_when_asked():
    obj = json.loads(stable_json_dumps({"x": 1.234567}, ndigits=4))
    assert obj["x"] == 1.2346
    obj = json.loads(stable_json_dumps({"x": 1.234567}))
    assert obj["x"] == 1.234567


def test_stable_json_dumps_normalizes_paths_and_enums():
    class Color(Enum):
        RED = "red"

    obj = json.loads(stable_json_dumps({"p": Path("a") / "b", "c": Color.RED}))
    assert obj == {"p": "a/b", "c": "red"}


def test_stable_json_dumps_uses_to_dict():
    issue = Issue("d", 3, Severity.MAJOR, "x.php")
    obj = json.loads(stable_json_dumps([issue]))
    assert obj == [{"path": "x.php", "description": "d", "line": 3, "severity": "major"}]


def test_stable_json_dump_writes_to_file_like(tmp_path):
    out = tmp_path / "x.json"
    with out.open("w", encoding="utf-8") as f:
        stable_json_dump({"b": 1, "a": 2}, f)
    txt = out.read_text(encoding="utf-8")
    assert txt.endswith("\n")
    assert '"a"' in txt and '"b"' in txt


def test_write_json_artifact_creates_parents(tmp_path):
    out = write_json_artifact(tmp_path / "deep" / "er" / "a.json", {"ratio": 1 / 3})
    assert json.loads(out.read_text(encoding="utf-8")) == {"ratio": 0.3333}


def test_write_json_artifact_raises_on_os_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(ArtifactWriteError) as exc:
        write_json_artifact(blocker / "a.json", {})
    assert exc.value.path.endswith("file/a.json")
