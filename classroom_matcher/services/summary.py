from __future__ import annotations

from collections.abc import Sequence

from ..models.match_result import OUTPUT_COLUMNS, MatchResult
from ..models.processing_result import ProcessingResult

"""Summary line and preview rendering.

Summary line format:
SUMMARY students={total} matched={matched} no_classroom={k} not_found={j} elapsed_sec={elapsed}
"""

PREVIEW_LIMIT = 5


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a processing run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from classroom_matcher.models.processing_result import MatchStats
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = ProcessingResult(
        ...     primary_file="exam.csv", reference_file="roster.xlsx", results=[],
        ...     stats=MatchStats(total=3, matched=1, no_classroom=1, not_found=1),
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(r)
        'SUMMARY students=3 matched=1 no_classroom=1 not_found=1 elapsed_sec=2'
    """
    s = result.stats
    return (
        f"SUMMARY students={s.total} "
        f"matched={s.matched} "
        f"no_classroom={s.no_classroom} "
        f"not_found={s.not_found} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )


def render_preview(results: Sequence[MatchResult], limit: int = PREVIEW_LIMIT) -> list[str]:
    """Render the first ``limit`` results as aligned text lines (header first)."""
    shown = [r.as_row() for r in results[:limit]]
    widths = {
        col: max([len(col)] + [len(row[col]) for row in shown]) for col in OUTPUT_COLUMNS
    }
    lines = ["  ".join(col.ljust(widths[col]) for col in OUTPUT_COLUMNS).rstrip()]
    for row in shown:
        lines.append("  ".join(row[col].ljust(widths[col]) for col in OUTPUT_COLUMNS).rstrip())
    remaining = len(results) - len(shown)
    if remaining > 0:
        lines.append(f"... and {remaining} more records")
    return lines
