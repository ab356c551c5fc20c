from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""IssueRecord model for the unresolved-row log.

One record per student whose classroom could not be resolved (Not Found or
Found but no classroom). Serialized as JSON Lines by classroom_matcher.logging.issue_log.
"""

__all__ = [
    "IssueRecord",
]


@dataclass(frozen=True)
class IssueRecord:
    """Structured record of an unresolved student row.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: primary CSV filename
        row: 1-based data row number in the primary file
        full_name: the name as written in the primary file
        outcome: MatchOutcome value (``not_found`` / ``no_classroom``)
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    full_name: str
    outcome: str

    @staticmethod
    def create(file: str, row: int, full_name: str, outcome: str) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            file=file,
            row=row,
            full_name=full_name,
            outcome=outcome,
        )

    def to_json_line(self) -> str:
        # 非ASCII 氏名をそのまま出力
        return json.dumps(asdict(self), ensure_ascii=False)
