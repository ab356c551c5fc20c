from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the classroom matcher.

These are populated by classroom_matcher.config.loader from config/matcher.yml, or used
directly with their defaults when no config file exists.
"""

# 既定のヘッダ別名 (先頭から順に試行し、最初の非空値を採用)
DEFAULT_PRIMARY_ALIASES: dict[str, tuple[str, ...]] = {
    "course": ("Course", "course"),
    "full_name": ("Full Name", "full name", "Full name"),
    "exam_marks": ("Exam Marks", "exam marks", "Exam marks"),
    "total": ("Total", "total"),
}

DEFAULT_REFERENCE_ALIASES: dict[str, tuple[str, ...]] = {
    "corrected_name": ("Corrected Name", "corrected name", "Corrected name"),
    "classroom": ("Classroom", "classroom"),
}

DEFAULT_COLUMN_WIDTHS: dict[str, int] = {
    "Course": 15,
    "Full Name": 25,
    "Exam Marks": 12,
    "Total": 10,
    "Classroom": 15,
}


@dataclass(frozen=True)
class ColumnAliases:
    """Accepted header names per record field.

    Keys are StudentRecord / ReferenceEntry field names; values are header names tried in order.
    """
    primary: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_PRIMARY_ALIASES)
    )
    reference: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_REFERENCE_ALIASES)
    )


@dataclass(frozen=True)
class MatcherConfig:
    """Root configuration object for a matching run."""
    output_directory: str = "."
    csv_filename: str = "students_sorted_by_classroom.csv"
    xlsx_filename: str = "students_sorted_by_classroom.xlsx"
    sheet_name: str = "Students"
    column_widths: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_COLUMN_WIDTHS))
    aliases: ColumnAliases = field(default_factory=ColumnAliases)
