from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.match_result import NO_CLASSROOM_LABEL, NOT_FOUND_LABEL, MatchResult
from ..models.student import ReferenceEntry, StudentRecord
from .progress import ProgressTracker

"""Name normalization and roster lookup.

名簿は線形走査 (O(students x roster))。名簿上で同名が複数ある場合は先頭一致を採用し、
曖昧さの警告は出さない。
"""

__all__ = [
    "normalize_name",
    "find_reference",
    "resolve_classroom",
    "match_students",
]

logger = logging.getLogger(__name__)


def normalize_name(value: str | None) -> str:
    """Trim surrounding whitespace and case-fold."""
    if value is None:
        return ""
    return value.strip().casefold()


def find_reference(
    student: StudentRecord, references: Sequence[ReferenceEntry]
) -> ReferenceEntry | None:
    """Return the first roster entry whose corrected name matches the student's full name."""
    key = normalize_name(student.full_name)
    if not key:
        # 空名同士は一致扱いしない
        return None
    for ref in references:
        if normalize_name(ref.corrected_name) == key:
            return ref
    return None


def resolve_classroom(match: ReferenceEntry | None) -> str:
    if match is None:
        return NOT_FOUND_LABEL
    return match.classroom if match.classroom else NO_CLASSROOM_LABEL


def match_students(
    students: Sequence[StudentRecord],
    references: Sequence[ReferenceEntry],
    *,
    show_progress: bool = False,
) -> list[MatchResult]:
    """Attach a classroom (or sentinel) to every student, preserving input order."""
    results: list[MatchResult] = []
    with ProgressTracker(
        len(students), description="Matching students", enabled=show_progress
    ) as tracker:
        for student in students:
            match = find_reference(student, references)
            classroom = resolve_classroom(match)
            if match is not None:
                logger.debug(
                    f"row {student.row_number}: '{student.full_name}' -> roster row "
                    f"{match.row_number} ({classroom})"
                )
            results.append(MatchResult(student=student, classroom=classroom))
            tracker.advance()
    return results
