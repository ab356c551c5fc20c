from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .student import StudentRecord

"""MatchResult model and MatchOutcome enum.

A MatchResult is a StudentRecord with the resolved Classroom value attached. The classroom is
always one of: the matched classroom string, NO_CLASSROOM_LABEL or NOT_FOUND_LABEL.
"""

__all__ = [
    "NOT_FOUND_LABEL",
    "NO_CLASSROOM_LABEL",
    "SENTINEL_LABELS",
    "OUTPUT_COLUMNS",
    "MatchOutcome",
    "MatchResult",
]

NOT_FOUND_LABEL = "Not Found"
NO_CLASSROOM_LABEL = "Found but no classroom"
SENTINEL_LABELS = frozenset({NOT_FOUND_LABEL, NO_CLASSROOM_LABEL})

# 出力列順 (CSV / XLSX 共通)
OUTPUT_COLUMNS = ["Course", "Full Name", "Exam Marks", "Total", "Classroom"]


class MatchOutcome(Enum):
    """Outcome of looking up a student in the reference roster.

    - MATCHED: name found and classroom present
    - NO_CLASSROOM: name found but the roster classroom cell is empty
    - NOT_FOUND: no roster entry with the same normalized name
    """
    MATCHED = "matched"
    NO_CLASSROOM = "no_classroom"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MatchResult:
    student: StudentRecord
    classroom: str

    @property
    def outcome(self) -> MatchOutcome:
        if self.classroom == NOT_FOUND_LABEL:
            return MatchOutcome.NOT_FOUND
        if self.classroom == NO_CLASSROOM_LABEL:
            return MatchOutcome.NO_CLASSROOM
        return MatchOutcome.MATCHED

    @property
    def is_sentinel(self) -> bool:
        return self.classroom in SENTINEL_LABELS

    def as_row(self) -> dict[str, str]:
        """Return the output mapping in OUTPUT_COLUMNS order."""
        return {
            "Course": self.student.course,
            "Full Name": self.student.full_name,
            "Exam Marks": self.student.exam_marks,
            "Total": self.student.total,
            "Classroom": self.classroom,
        }
