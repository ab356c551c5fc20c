"""Domain models for the classroom matcher.

This package contains the typed records flowing through load -> match -> sort -> export.
"""

from .config_models import ColumnAliases, MatcherConfig
from .issue_record import IssueRecord
from .match_result import (
    NO_CLASSROOM_LABEL,
    NOT_FOUND_LABEL,
    OUTPUT_COLUMNS,
    SENTINEL_LABELS,
    MatchOutcome,
    MatchResult,
)
from .processing_result import MatchStats, ProcessingResult
from .student import ReferenceEntry, StudentRecord

__all__ = [
    # Configuration models
    "ColumnAliases",
    "MatcherConfig",
    # Records
    "StudentRecord",
    "ReferenceEntry",
    "MatchResult",
    "MatchOutcome",
    "IssueRecord",
    # Results
    "MatchStats",
    "ProcessingResult",
    # Constants
    "NOT_FOUND_LABEL",
    "NO_CLASSROOM_LABEL",
    "SENTINEL_LABELS",
    "OUTPUT_COLUMNS",
]
