from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import InputFileError, read_primary_csv, read_reference_excel
from ..models.config_models import MatcherConfig
from ..models.match_result import MatchResult
from ..models.processing_result import MatchStats, ProcessingResult
from ..models.student import ReferenceEntry, StudentRecord
from .matcher import match_students
from .progress import is_tty_enabled
from .sorter import sort_results

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Base exception for processing errors."""


def build_match_results(
    students: Sequence[StudentRecord],
    references: Sequence[ReferenceEntry],
    *,
    show_progress: bool = False,
) -> list[MatchResult]:
    """Pipeline core: match every student against the roster, then sort.

    Pure function of its inputs; no file access.
    """
    matched = match_students(students, references, show_progress=show_progress)
    return sort_results(matched)


def process_files(
    primary_path: Path | str | None,
    reference_path: Path | str | None,
    config: MatcherConfig | None = None,
    *,
    show_progress: bool | None = None,
) -> ProcessingResult:
    """Load both inputs, match, sort and time one run.

    Steps:
    1. Read the reference workbook (first sheet) and the primary CSV
    2. Match each student against the roster (first match wins)
    3. Sort by classroom with sentinels last

    Raises:
        ProcessingError: missing input, parse failure, or an unexpected failure while matching.
            No partial result is returned.
    """
    config = config or MatcherConfig()
    if show_progress is None:
        show_progress = is_tty_enabled()
    start_time = datetime.now(UTC)

    try:
        references = read_reference_excel(reference_path, config.aliases.reference)
        students = read_primary_csv(primary_path, config.aliases.primary)
    except InputFileError as e:
        raise ProcessingError(str(e)) from e

    logger.info(f"loaded students={len(students)} roster_entries={len(references)}")

    try:
        results = build_match_results(students, references, show_progress=show_progress)
    except Exception as e:
        raise ProcessingError(f"matching failed: {e}") from e

    end_time = datetime.now(UTC)
    return ProcessingResult(
        primary_file=Path(str(primary_path)).name,
        reference_file=Path(str(reference_path)).name,
        results=results,
        stats=MatchStats.from_results(results),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        reference_rows=len(references),
    )
