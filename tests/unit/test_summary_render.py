from __future__ import annotations

import re
from datetime import datetime, timezone

from classroom_matcher.models.match_result import NOT_FOUND_LABEL, MatchResult
from classroom_matcher.models.processing_result import MatchStats, ProcessingResult
from classroom_matcher.models.student import StudentRecord
from classroom_matcher.services.summary import render_preview, render_summary_line

"""Unit tests for summary / preview rendering."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+students=([0-9]+)\s+matched=([0-9]+)\s+no_classroom=([0-9]+)\s+"
    r"not_found=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)

T0 = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _processing_result(stats: MatchStats, elapsed: float) -> ProcessingResult:
    return ProcessingResult(
        primary_file="exam.csv",
        reference_file="roster.xlsx",
        results=[],
        stats=stats,
        start_time=T0,
        end_time=T0,
        elapsed_seconds=elapsed,
    )


def test_render_summary_line_counts():
    line = render_summary_line(
        _processing_result(MatchStats(total=10, matched=7, no_classroom=2, not_found=1), 2.0)
    )
    match = SUMMARY_PATTERN.match(line)
    assert match, f"SUMMARY line should match regex: {line}"
    assert match.groups() == ("10", "7", "2", "1", "2")


def test_render_summary_line_small_elapsed_not_scientific():
    line = render_summary_line(_processing_result(MatchStats(), 0.000123))
    assert line.endswith("elapsed_sec=0.000123")
    assert SUMMARY_PATTERN.match(line)


def test_render_summary_line_zero():
    line = render_summary_line(_processing_result(MatchStats(), 0.0))
    assert line == "SUMMARY students=0 matched=0 no_classroom=0 not_found=0 elapsed_sec=0"


def test_render_summary_line_rounds_fraction():
    line = render_summary_line(_processing_result(MatchStats(), 1.23456))
    assert line.endswith("elapsed_sec=1.235")


def _result(i: int, classroom: str = "101") -> MatchResult:
    return MatchResult(
        student=StudentRecord(course="Math", full_name=f"Student {i}", exam_marks="1", total="2"),
        classroom=classroom,
    )


def test_render_preview_truncates():
    results = [_result(i) for i in range(8)]
    lines = render_preview(results)
    assert lines[0].split() == ["Course", "Full", "Name", "Exam", "Marks", "Total", "Classroom"]
    assert len(lines) == 1 + 5 + 1
    assert lines[-1] == "... and 3 more records"


def test_render_preview_alignment_and_no_footer():
    results = [_result(1), _result(2, NOT_FOUND_LABEL)]
    lines = render_preview(results)
    assert len(lines) == 3
    # Classroom 列の開始位置が全行で揃う
    col = lines[0].index("Classroom")
    assert lines[1][col:] == "101"
    assert lines[2][col:] == NOT_FOUND_LABEL


def test_render_preview_empty():
    assert render_preview([]) == ["Course  Full Name  Exam Marks  Total  Classroom"]
