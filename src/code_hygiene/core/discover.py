"""File discovery — walk the scan root respecting exclusion substrings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from code_hygiene.core.errors import ScanRootError

_logger = logging.getLogger(__name__)

# Substrings that exclude a path for every analyzer.  Matching is a plain
# substring test on the walked path, so ".git" also covers ".github/".
DEFAULT_EXCLUDES: tuple[str, ...] = (".git",)


@dataclass(frozen=True)
class DiscoverConfig:
    """Configuration for file discovery.

    ``include_exts`` of ``None`` means every regular file is eligible.
    ``max_file_bytes`` of ``None`` disables the size ceiling.
    """

    root: Path
    include_exts: tuple[str, ...] | None = None
    exclude: tuple[str, ...] = ()
    max_file_bytes: int | None = None


def should_skip(path: str, custom_excludes: Iterable[str] = ()) -> bool:
    """True when *path* contains a default or configured excluded substring."""
    for pattern in DEFAULT_EXCLUDES:
        if pattern in path:
            return True
    for pattern in custom_excludes:
        if pattern and pattern in path:
            return True
    return False


def _has_ext(name: str, exts: tuple[str, ...]) -> bool:
    return name.lower().endswith(exts)


def iter_source_files(cfg: DiscoverConfig) -> Iterator[str]:
    """Yield eligible file paths (POSIX strings, root-joined) in lexical walk order.

    Raises ``ScanRootError`` when the root itself cannot be walked.  Errors
    listing a sub-directory or stat-ing a single file are skipped.
    """
    root = os.fspath(cfg.root)
    if not os.path.exists(root):
        raise ScanRootError(root, "does not exist")
    if not os.path.isdir(root):
        raise ScanRootError(root, "not a directory")

    exts = tuple(e.lower() for e in cfg.include_exts) if cfg.include_exts else None

    def _onerror(exc: OSError) -> None:
        _logger.debug("Skipping unreadable directory %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror):
        # Prune in place; every descendant of an excluded dir would match too.
        dirnames[:] = sorted(
            d for d in dirnames
            if not should_skip(Path(dirpath, d).as_posix(), cfg.exclude)
        )
        for name in sorted(filenames):
            path = Path(dirpath, name).as_posix()
            if should_skip(path, cfg.exclude):
                continue
            if exts is not None and not _has_ext(name, exts):
                continue
            if cfg.max_file_bytes is not None:
                try:
                    if os.path.getsize(path) > cfg.max_file_bytes:
                        continue
                except OSError:
                    continue
            yield path


def display_path(path: str) -> str:
    """*path* with undecodable file-name bytes shown as U+FFFD.

    ``os.walk`` maps such bytes to lone surrogates, which no UTF-8 report
    can carry.  Open files with the walked path; report this one.
    """
    return os.fsencode(path).decode("utf-8", errors="replace")


def read_source(path: str) -> tuple[bytes, str] | None:
    """Read *path* as raw bytes plus decoded text; ``None`` if unreadable."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        _logger.debug("Skipping unreadable file %s: %s", path, exc)
        return None
    return raw, raw.decode("utf-8", errors="replace")
