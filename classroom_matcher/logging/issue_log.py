from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.issue_record import IssueRecord
from ..models.match_result import MatchResult

"""Unresolved-row log buffering.

- 起動ごとに `logs/issues-YYYYMMDD-HHMMSS.log` (UTC) を生成 (必要時のみ)
- JSON Lines 固定スキーマ (IssueRecord のフィールドのみ)
"""

__all__ = [
    "IssueRecord",
    "IssueLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class IssueLogBuffer:
    """In-memory buffer of IssueRecord. flush() appends JSON Lines to the log file."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[IssueRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"issues-{stamp}.log"
        return self._file_path

    def append(self, record: IssueRecord) -> None:
        self._records.append(record)

    def extend_from_results(self, file: str, results: Iterable[MatchResult]) -> int:
        """Buffer one record per sentinel result. Returns the number of records added."""
        added = 0
        for r in results:
            if not r.is_sentinel:
                continue
            self.append(
                IssueRecord.create(
                    file=file,
                    row=r.student.row_number,
                    full_name=r.student.full_name,
                    outcome=r.outcome.value,
                )
            )
            added += 1
        return added

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records. Returns None (and creates no file) when empty."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
