from __future__ import annotations

from unittest.mock import Mock, patch

import pytest

from classroom_matcher.models.match_result import NO_CLASSROOM_LABEL, NOT_FOUND_LABEL
from classroom_matcher.models.student import ReferenceEntry, StudentRecord
from classroom_matcher.services.matcher import (
    find_reference,
    match_students,
    normalize_name,
    resolve_classroom,
)


def _student(name: str, row: int = 1) -> StudentRecord:
    return StudentRecord(course="Math", full_name=name, exam_marks="40", total="80", row_number=row)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Jane Doe", "jane doe"),
        ("  jane doe ", "jane doe"),
        ("JANE DOE", "jane doe"),
        ("\tStraße\n", "strasse"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


def test_match_found_with_classroom():
    """Ali Hassan matches a lower-case roster entry and takes its classroom."""
    refs = [ReferenceEntry(corrected_name="ali hassan", classroom="101", row_number=1)]
    results = match_students([_student("Ali Hassan")], refs)
    assert len(results) == 1
    assert results[0].classroom == "101"


def test_match_not_found():
    refs = [ReferenceEntry(corrected_name="someone else", classroom="7", row_number=1)]
    results = match_students([_student("Sara Lee")], refs)
    assert results[0].classroom == NOT_FOUND_LABEL


def test_match_found_but_no_classroom():
    refs = [ReferenceEntry(corrected_name="sara lee", classroom="", row_number=1)]
    results = match_students([_student("Sara Lee")], refs)
    assert results[0].classroom == NO_CLASSROOM_LABEL


@pytest.mark.parametrize("name", ["Jane Doe", " jane doe ", "JANE DOE"])
def test_match_is_case_and_whitespace_insensitive(name):
    refs = [ReferenceEntry(corrected_name="Jane Doe", classroom="B-12", row_number=1)]
    assert match_students([_student(name)], refs)[0].classroom == "B-12"


def test_first_reference_match_wins():
    refs = [
        ReferenceEntry(corrected_name="Jane Doe", classroom="first", row_number=1),
        ReferenceEntry(corrected_name="JANE DOE", classroom="second", row_number=2),
    ]
    match = find_reference(_student("jane doe"), refs)
    assert match is not None
    assert match.row_number == 1


def test_first_match_without_classroom_is_not_skipped():
    """A duplicate later entry with a classroom does not override the first match."""
    refs = [
        ReferenceEntry(corrected_name="Jane Doe", classroom="", row_number=1),
        ReferenceEntry(corrected_name="Jane Doe", classroom="9", row_number=2),
    ]
    assert match_students([_student("Jane Doe")], refs)[0].classroom == NO_CLASSROOM_LABEL


def test_empty_name_never_matches_blank_roster_entry():
    refs = [ReferenceEntry(corrected_name="  ", classroom="101", row_number=1)]
    assert match_students([_student("")], refs)[0].classroom == NOT_FOUND_LABEL


def test_resolve_classroom():
    assert resolve_classroom(None) == NOT_FOUND_LABEL
    assert resolve_classroom(ReferenceEntry(corrected_name="x", classroom="")) == NO_CLASSROOM_LABEL
    assert resolve_classroom(ReferenceEntry(corrected_name="x", classroom="5")) == "5"


def test_match_preserves_input_order_and_student_fields():
    students = [_student("B", 1), _student("A", 2), _student("C", 3)]
    refs = [ReferenceEntry(corrected_name="a", classroom="1")]
    results = match_students(students, refs)
    assert [r.student.row_number for r in results] == [1, 2, 3]
    assert results[1].student is students[1]


def test_every_classroom_is_valid_value():
    students = [_student(n, i) for i, n in enumerate(["a", "b", "c", ""], start=1)]
    refs = [
        ReferenceEntry(corrected_name="a", classroom="R1"),
        ReferenceEntry(corrected_name="b", classroom=""),
    ]
    for r in match_students(students, refs):
        assert r.classroom in {NOT_FOUND_LABEL, NO_CLASSROOM_LABEL} or r.classroom.strip() != ""


def test_match_with_progress_advances_tracker():
    """show_progress=True drives a ProgressTracker (disabled outside a TTY)."""
    with patch("classroom_matcher.services.progress.is_tty_enabled", return_value=False), \
         patch("classroom_matcher.services.matcher.ProgressTracker.advance") as mock_advance:
        match_students([_student("a"), _student("b")], [], show_progress=True)
    assert mock_advance.call_count == 2


def test_match_empty_inputs():
    assert match_students([], []) == []
    assert match_students([_student("x")], [])[0].classroom == NOT_FOUND_LABEL


def test_match_progress_bar_closed_on_failure():
    mock_pbar = Mock()
    with patch("classroom_matcher.services.progress.is_tty_enabled", return_value=True), \
         patch("classroom_matcher.services.progress.tqdm", return_value=mock_pbar), \
         patch("classroom_matcher.services.matcher.find_reference", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            match_students([_student("a")], [], show_progress=True)
    mock_pbar.close.assert_called_once()


def test_match_without_progress_creates_no_bar():
    with patch("classroom_matcher.services.progress.is_tty_enabled", return_value=True), \
         patch("classroom_matcher.services.progress.tqdm") as mock_tqdm:
        match_students([_student("a")], [], show_progress=False)
    mock_tqdm.assert_not_called()
