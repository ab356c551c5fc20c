from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.config_models import DEFAULT_PRIMARY_ALIASES, DEFAULT_REFERENCE_ALIASES
from ..models.match_result import MatchResult
from ..models.student import ReferenceEntry, StudentRecord
from .writer import unwrap_text_literal

"""Input readers for the primary CSV and the reference workbook.

- 1行目をヘッダ行、2行目以降をデータ行として扱う
- 全セルを文字列として扱う (NaN/None -> "")
- ヘッダ別名は読み込み時に1回だけ解決し、以後は型付きレコードのみを扱う
"""

logger = logging.getLogger(__name__)


class InputFileError(Exception):
    """Base class for input loading failures."""


class MissingInputError(InputFileError):
    """Raised when an input path is not given or does not exist."""


class CsvParseError(InputFileError):
    """Raised when the primary file cannot be parsed as delimited text."""


class SheetReadError(InputFileError):
    """Raised when the reference workbook or its first sheet cannot be read."""


def _require_file(path: Path | str | None, label: str) -> Path:
    if path is None or str(path).strip() == "":
        raise MissingInputError(f"{label} file not selected")
    p = Path(path)
    if not p.is_file():
        raise MissingInputError(f"{label} file not found: {p}")
    return p


def cell_to_str(value: Any) -> str:
    """Convert a raw cell to its string form.

    Excel stores ``101`` as a float in some writers; integral floats are rendered without
    the trailing ``.0`` so classroom codes survive the round trip.
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))
    elif value is pd.NaT:
        return ""
    return str(value)


def resolve_columns(headers: Sequence[str], aliases: Iterable[str]) -> list[str]:
    """Return the header names that can supply a field, in lookup order.

    Aliases are tried in the configured order first; after them any header whose trimmed,
    case-folded text equals the first alias (case-folded) is appended.
    """
    alias_list = list(aliases)
    present = set(headers)
    candidates = [a for a in alias_list if a in present]
    if alias_list:
        canonical = alias_list[0].strip().casefold()
        for h in headers:
            if h not in candidates and h.strip().casefold() == canonical:
                candidates.append(h)
    return candidates


def resolve_field(row: Mapping[str, str], candidates: Iterable[str]) -> str:
    """First non-empty value among ``candidates``; ``""`` when none."""
    for name in candidates:
        value = row.get(name)
        if value:
            return value
    return ""


def _frame_rows(df: pd.DataFrame) -> list[dict[str, str]]:
    headers = [str(c) for c in df.columns]
    rows: list[dict[str, str]] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append({h: cell_to_str(v) for h, v in zip(headers, raw, strict=False)})
    return rows


def _build_candidates(
    headers: Sequence[str], aliases: Mapping[str, Sequence[str]], source: str
) -> dict[str, list[str]]:
    candidates: dict[str, list[str]] = {}
    for field_name, names in aliases.items():
        candidates[field_name] = resolve_columns(headers, names)
        if not candidates[field_name]:
            logger.warning(f"{source}: no column for '{field_name}' (accepted: {list(names)})")
        else:
            logger.debug(f"{source}: {field_name} <- {candidates[field_name]}")
    return candidates


def read_csv_frame(path: Path) -> pd.DataFrame:
    """Read a CSV into a string-only DataFrame. A leading BOM is tolerated."""
    try:
        return pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise CsvParseError(f"{path.name}: no header row") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CsvParseError(f"{path.name}: cannot parse as CSV: {e}") from e


def read_primary_csv(
    path: Path | str | None, aliases: Mapping[str, Sequence[str]] | None = None
) -> list[StudentRecord]:
    """Read the exam CSV into StudentRecord objects (file order preserved)."""
    p = _require_file(path, "primary CSV")
    df = read_csv_frame(p)
    headers = [str(c) for c in df.columns]
    cand = _build_candidates(headers, aliases or DEFAULT_PRIMARY_ALIASES, p.name)

    records: list[StudentRecord] = []
    for idx, row in enumerate(_frame_rows(df), start=1):
        if not any(v.strip() for v in row.values()):
            continue
        records.append(
            StudentRecord(
                course=resolve_field(row, cand.get("course", [])),
                full_name=resolve_field(row, cand.get("full_name", [])),
                exam_marks=resolve_field(row, cand.get("exam_marks", [])),
                total=resolve_field(row, cand.get("total", [])),
                row_number=idx,
            )
        )
    logger.debug(f"{p.name}: {len(records)} student rows")
    return records


def read_first_sheet(path: Path) -> tuple[str, pd.DataFrame]:
    """Open a workbook and parse its first worksheet (header = first row)."""
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:  # openpyxl/zipfile 由来の例外型が多岐にわたるため一括変換
        raise SheetReadError(f"{path.name}: cannot open workbook: {e}") from e
    with xls:
        if not xls.sheet_names:
            raise SheetReadError(f"{path.name}: workbook has no sheets")
        first = str(xls.sheet_names[0])
        try:
            df = xls.parse(xls.sheet_names[0], header=0, dtype=object)
        except Exception as e:
            raise SheetReadError(f"{path.name}: cannot read sheet '{first}': {e}") from e
    return first, df


def read_reference_excel(
    path: Path | str | None, aliases: Mapping[str, Sequence[str]] | None = None
) -> list[ReferenceEntry]:
    """Read the roster workbook (first sheet only) into ReferenceEntry objects."""
    p = _require_file(path, "reference spreadsheet")
    sheet_name, df = read_first_sheet(p)
    headers = [str(c) for c in df.columns]
    cand = _build_candidates(
        headers, aliases or DEFAULT_REFERENCE_ALIASES, f"{p.name}[{sheet_name}]"
    )

    entries: list[ReferenceEntry] = []
    for idx, row in enumerate(_frame_rows(df), start=1):
        if not any(v.strip() for v in row.values()):
            continue
        entries.append(
            ReferenceEntry(
                corrected_name=resolve_field(row, cand.get("corrected_name", [])),
                classroom=resolve_field(row, cand.get("classroom", [])),
                row_number=idx,
            )
        )
    logger.debug(f"{p.name}: {len(entries)} roster rows from sheet '{sheet_name}'")
    return entries


def read_results_csv(path: Path | str | None) -> list[MatchResult]:
    """Re-import a results CSV produced by encode_csv.

    The ``="..."`` wrapper is removed from Classroom values.
    """
    p = _require_file(path, "results CSV")
    df = read_csv_frame(p)
    headers = [str(c) for c in df.columns]
    cand = _build_candidates(headers, DEFAULT_PRIMARY_ALIASES, p.name)
    classroom_cols = resolve_columns(headers, ("Classroom", "classroom"))

    results: list[MatchResult] = []
    for idx, row in enumerate(_frame_rows(df), start=1):
        student = StudentRecord(
            course=resolve_field(row, cand.get("course", [])),
            full_name=resolve_field(row, cand.get("full_name", [])),
            exam_marks=resolve_field(row, cand.get("exam_marks", [])),
            total=resolve_field(row, cand.get("total", [])),
            row_number=idx,
        )
        classroom = unwrap_text_literal(resolve_field(row, classroom_cols))
        results.append(MatchResult(student=student, classroom=classroom))
    return results
