"""Plain-text console summaries for each analyzer and for the whole run.

Every ``render_*`` function returns a list of lines; callers print them.
"""

from __future__ import annotations

from typing import Sequence

from code_hygiene.model.analysis import (
    CommentedCodeFileAnalysis,
    ConflictFileAnalysis,
    PHPFileAnalysis,
)

TOP_DETAIL = 10
RULE = "-" * 80
BANNER = "=" * 60


def format_bytes(n: int) -> str:
    """``512B``, ``1.5KB``, ``2.00MB``."""
    if n < 1024:
        return f"{n}B"
    kb = n / 1024
    if kb < 1024:
        return f"{kb:.1f}KB"
    return f"{kb / 1024:.2f}MB"


def truncate_left(s: str, max_len: int) -> str:
    """Keep the tail of long paths: ``...app/Http/Controller.php``."""
    if len(s) > max_len:
        return "..." + s[len(s) - max_len + 3:]
    return s


def format_line_numbers(lines: Sequence[int]) -> str:
    if not lines:
        return "[]"
    text = ", ".join(str(n) for n in lines)
    if len(lines) > 5:
        text += "..."
    return text


# ── commented code (HTML, JS/TS) ────────────────────────────────────


def render_commented_code(results: Sequence[CommentedCodeFileAnalysis], label: str) -> list[str]:
    if not results:
        return [f"No {label} files with significant commented code found!"]

    total = sum(r.commented_bytes for r in results)
    lines = [
        f"Found {len(results)} files with commented code",
        f"Total Commented Code: {format_bytes(total)} ({total / 1024:.2f} KB)",
        "",
        f"{'Rank':<5} {'File':<60} {'Commented':>12} {'Total':>10} {'Ratio':>8} {'Largest':>10}",
        "-" * 115,
    ]
    for i, r in enumerate(results, start=1):
        lines.append(
            f"{i:<5d} {truncate_left(r.path, 60):<60} {format_bytes(r.commented_bytes):>12} "
            f"{format_bytes(r.total_bytes):>10} {r.comment_ratio:>7.1f}% {format_bytes(r.largest_block):>10}"
        )
    lines += ["", "Top 10 High-Impact Files:", RULE]
    for i, r in enumerate(results[:TOP_DETAIL], start=1):
        lines.append(f"{i:2d}. {r.path}")
        lines.append(
            f"    Size: {format_bytes(r.total_bytes)} | Comments: {format_bytes(r.commented_bytes)} "
            f"({r.comment_ratio:.1f}%) | Largest: {format_bytes(r.largest_block)}"
        )
    lines += ["", "Analysis complete!"]
    return lines


# ── merge conflicts ─────────────────────────────────────────────────


def render_conflicts(results: Sequence[ConflictFileAnalysis]) -> list[str]:
    if not results:
        return ["No files with unresolved merge conflicts found!"]

    total_blocks = sum(r.conflict_blocks for r in results)
    lines = [
        f"Found {len(results)} files with unresolved merge conflicts!",
        f"Total Conflict Blocks: {total_blocks}",
        "",
        f"{'Rank':<5} {'File':<70} {'Blocks':>10} {'Lines':>15}",
        "-" * 105,
    ]
    for i, r in enumerate(results, start=1):
        lines.append(
            f"{i:<5d} {truncate_left(r.path, 70):<70} {r.conflict_blocks:>10d} {r.marker_count:>15d}"
        )
    lines += ["", "Top 10 Files with Conflicts:", RULE]
    for i, r in enumerate(results[:TOP_DETAIL], start=1):
        lines.append(f"{i:2d}. {r.path}")
        lines.append(
            f"    {r.conflict_blocks} conflict blocks | Lines: {format_line_numbers(r.conflict_lines[:6])}"
        )
        if r.conflict_snippets:
            lines.append(f"    Preview: {r.conflict_snippets[0]}")
    lines += ["", "Analysis complete!"]
    return lines


# ── PHP ─────────────────────────────────────────────────────────────


def render_php(
    results: Sequence[PHPFileAnalysis], retained: Sequence[PHPFileAnalysis] = ()
) -> list[str]:
    if not results:
        return ["No PHP files with commented functions or catch-block issues found!"]

    pool = retained or results
    total_functions = sum(r.total_functions for r in pool)
    total_commented = sum(r.commented_functions for r in pool)
    pct = (total_commented / total_functions * 100) if total_functions else 0.0
    lines = [
        f"Found {len(results)} PHP files with issues",
        f"Total Functions: {total_functions} | Commented: {total_commented} ({pct:.1f}%)",
        "",
        f"{'Rank':<5} {'File':<60} {'Total':>10} {'Commented':>10} {'Ratio':>10}",
        "-" * 100,
    ]
    for i, r in enumerate(results, start=1):
        lines.append(
            f"{i:<5d} {truncate_left(r.path, 60):<60} {r.total_functions:>10d} "
            f"{r.commented_functions:>10d} {r.comment_ratio:>9.1f}%"
        )
        if r.has_catch_findings:
            lines.append(
                f"      Catch Blocks: {r.catch_blocks_missing_report} missing report(), "
                f"{r.catch_blocks_misplaced_report} misplaced"
            )
    lines += ["", "Top 10 Files with Commented Functions:", RULE]
    for i, r in enumerate(results[:TOP_DETAIL], start=1):
        lines.append(f"{i:2d}. {r.path}")
        lines.append(
            f"    {r.commented_functions}/{r.total_functions} functions commented ({r.comment_ratio:.1f}%)"
        )
        if r.commented_list:
            lines.append(f"    Commented: {', '.join(r.commented_list[:5])}")
    lines += ["", "Analysis complete!"]
    return lines


# ── run banner ──────────────────────────────────────────────────────


def render_run_header(config_file: str, scan_dir: str, analyzer_count: int) -> list[str]:
    return [
        "Code Hygiene Analysis",
        "=" * 61,
        f"Config File: {config_file}",
        f"Scanning: {scan_dir}",
        f"Running: {analyzer_count} analyzers",
        "",
    ]


def render_analyzer_header(index: int, count: int, name: str) -> list[str]:
    return ["", BANNER, f"Running Analyzer {index}/{count}: {name}", BANNER, ""]


def render_run_footer(succeeded: int, total: int) -> list[str]:
    return ["", BANNER, f"Analysis Complete: {succeeded}/{total} analyzers succeeded", BANNER]
