from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .match_result import MatchOutcome, MatchResult

"""Processing result models for the classroom matcher.

ProcessingResult aggregates one run (load -> match -> sort) and the counts used for the
SUMMARY output line.
"""


@dataclass(frozen=True)
class MatchStats:
    """Per-outcome counters for a list of MatchResult."""
    total: int = 0
    matched: int = 0
    no_classroom: int = 0
    not_found: int = 0

    @property
    def unresolved(self) -> int:
        return self.no_classroom + self.not_found

    @classmethod
    def from_results(cls, results: Iterable[MatchResult]) -> MatchStats:
        counts = {outcome: 0 for outcome in MatchOutcome}
        total = 0
        for r in results:
            counts[r.outcome] += 1
            total += 1
        return cls(
            total=total,
            matched=counts[MatchOutcome.MATCHED],
            no_classroom=counts[MatchOutcome.NO_CLASSROOM],
            not_found=counts[MatchOutcome.NOT_FOUND],
        )


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated output of a single processing run."""
    primary_file: str  # 試験 CSV ファイル名
    reference_file: str  # 名簿 Excel ファイル名
    results: list[MatchResult]  # ソート済
    stats: MatchStats
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    reference_rows: int = 0
