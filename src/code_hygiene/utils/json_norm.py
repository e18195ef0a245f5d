"""Canonical JSON serialization — single dump path for all artifacts.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Two-space indentation and a trailing newline at EOF
  - ``Path`` objects → POSIX strings, enums → their values
  - Objects exposing ``to_dict()`` and dataclasses → dicts
  - Optional float rounding for cross-platform stable diffs
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Mapping

from code_hygiene.core.errors import ArtifactWriteError


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (str, int, bool, float)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if hasattr(obj, "to_dict"):
        return _to_builtin(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_builtin(asdict(obj))
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    return str(obj)


def _round_floats(obj: Any, *, ndigits: int) -> Any:
    """Recursively round floats."""
    if isinstance(obj, float):
        # JSON has no NaN/inf
        if obj != obj or obj in (float("inf"), float("-inf")):
            return str(obj)
        return round(obj, ndigits)
    if isinstance(obj, Mapping):
        return {k: _round_floats(v, ndigits=ndigits) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_round_floats(v, ndigits=ndigits) for v in obj]
    return obj


def stable_json_dumps(
    obj: Any,
    *,
    indent: int | None = 2,
    ndigits: int | None = None,
) -> str:
    """Canonical JSON serialization used for every artifact."""
    built = _to_builtin(obj)
    if ndigits is not None:
        built = _round_floats(built, ndigits=ndigits)
    s = json.dumps(
        built,
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )
    return s + "\n"


def stable_json_dump(
    obj: Any,
    fp: IO[str],
    *,
    indent: int | None = 2,
    ndigits: int | None = None,
) -> None:
    fp.write(stable_json_dumps(obj, indent=indent, ndigits=ndigits))


def write_json_artifact(path: str | Path, obj: Any, *, ndigits: int | None = 4) -> Path:
    """Write *obj* to *path*, creating parent directories.

    Raises ``ArtifactWriteError`` on any filesystem or encoding failure;
    an unencodable payload never truncates an existing file.
    """
    out = Path(path)
    try:
        payload = stable_json_dumps(obj, ndigits=ndigits).encode("utf-8")
        if out.parent != Path("."):
            out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(payload)
    except (OSError, UnicodeError) as exc:
        raise ArtifactWriteError(out.as_posix(), str(exc)) from exc
    return out
