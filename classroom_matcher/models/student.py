from __future__ import annotations

from dataclasses import dataclass

"""Student / roster record models for the classroom matcher.

StudentRecord は試験 CSV (primary) の1行、ReferenceEntry は名簿 Excel (reference) の1行。
ヘッダの揺れ (大文字小文字) は読み込み時に解決済みで、ここでは固定フィールドのみ扱う。
"""

__all__ = [
    "StudentRecord",
    "ReferenceEntry",
]


@dataclass(frozen=True)
class StudentRecord:
    """A single exam record read from the primary CSV.

    row_number is the 1-based data row number (header excluded) in the source file.
    """
    course: str = ""
    full_name: str = ""
    exam_marks: str = ""
    total: str = ""
    row_number: int = 0


@dataclass(frozen=True)
class ReferenceEntry:
    """A roster entry providing the corrected name and classroom assignment."""
    corrected_name: str = ""
    classroom: str = ""
    row_number: int = 0
