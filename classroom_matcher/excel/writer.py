from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

import pandas as pd

from ..models.config_models import DEFAULT_COLUMN_WIDTHS, MatcherConfig
from ..models.match_result import OUTPUT_COLUMNS, SENTINEL_LABELS, MatchResult

"""Result exporters (CSV / XLSX).

CSV:
- 全フィールドをクォート、改行は CRLF
- 非センチネルの Classroom は ="..." で包み、表計算ソフトでの数値化を防ぐ
- 先頭に BOM を付けて UTF-8 でエンコード (非ラテン文字の文字化け防止)

XLSX:
- 単一シート "Students"、列幅固定
- 値は文字列セルとして保存し、共有文字列テーブル (xl/sharedStrings.xml) に格納する
- XlsxWriter の数式・URL 自動変換は無効化 ("=" 始まりの名前も文字列のまま)
"""

logger = logging.getLogger(__name__)

BOM = "\ufeff"
CSV_FORMAT = "csv"
XLSX_FORMAT = "xlsx"
SUPPORTED_FORMATS = (CSV_FORMAT, XLSX_FORMAT)

_LITERAL_PREFIX = '="'
_LITERAL_SUFFIX = '"'

_XLSX_OPTIONS = {
    "strings_to_formulas": False,
    "strings_to_urls": False,
    "strings_to_numbers": False,
}


class ExportError(Exception):
    """Raised when an output file cannot be produced."""


def wrap_text_literal(classroom: str) -> str:
    """Wrap a classroom value as a formula-style text literal; sentinels pass through."""
    if classroom in SENTINEL_LABELS:
        return classroom
    return f"{_LITERAL_PREFIX}{classroom}{_LITERAL_SUFFIX}"


def unwrap_text_literal(value: str) -> str:
    """Inverse of wrap_text_literal. Values without the wrapper are returned unchanged."""
    if (
        len(value) >= len(_LITERAL_PREFIX) + len(_LITERAL_SUFFIX)
        and value.startswith(_LITERAL_PREFIX)
        and value.endswith(_LITERAL_SUFFIX)
    ):
        return value[len(_LITERAL_PREFIX):-len(_LITERAL_SUFFIX)]
    return value


def results_frame(results: Iterable[MatchResult]) -> pd.DataFrame:
    return pd.DataFrame([r.as_row() for r in results], columns=OUTPUT_COLUMNS, dtype=object)


def encode_csv(results: Sequence[MatchResult]) -> bytes:
    """Serialize results to BOM-prefixed UTF-8 CSV bytes."""
    df = results_frame(results)
    df["Classroom"] = df["Classroom"].map(wrap_text_literal)
    text = df.to_csv(
        index=False,
        quoting=csv.QUOTE_ALL,
        doublequote=True,
        lineterminator="\r\n",
    )
    return (BOM + text).encode("utf-8")


def encode_xlsx(
    results: Sequence[MatchResult],
    column_widths: Mapping[str, int] | None = None,
    sheet_name: str = "Students",
) -> bytes:
    """Serialize results to a single-sheet XLSX workbook."""
    widths = dict(DEFAULT_COLUMN_WIDTHS)
    widths.update(column_widths or {})
    df = results_frame(results)
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter", engine_kwargs={"options": _XLSX_OPTIONS}) as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        ws = writer.sheets[sheet_name]
        for idx, col in enumerate(OUTPUT_COLUMNS):
            ws.set_column(idx, idx, widths[col])
    return buf.getvalue()


def output_paths(output_dir: Path, formats: Iterable[str], cfg: MatcherConfig) -> dict[str, Path]:
    paths: dict[str, Path] = {}
    for fmt in formats:
        if fmt == CSV_FORMAT:
            paths[fmt] = output_dir / cfg.csv_filename
        elif fmt == XLSX_FORMAT:
            paths[fmt] = output_dir / cfg.xlsx_filename
        else:
            raise ExportError(f"unsupported export format: {fmt}")
    return paths


def export_results(
    results: Sequence[MatchResult],
    output_dir: Path,
    formats: Iterable[str],
    cfg: MatcherConfig | None = None,
) -> list[Path]:
    """Write the requested formats under ``output_dir``. Returns written paths in order."""
    cfg = cfg or MatcherConfig()
    paths = output_paths(output_dir, formats, cfg)
    # 全形式をメモリ上で生成してから書き出す (途中失敗で片方だけ残さない)
    payloads: dict[str, bytes] = {}
    for fmt in paths:
        try:
            if fmt == CSV_FORMAT:
                payloads[fmt] = encode_csv(results)
            else:
                payloads[fmt] = encode_xlsx(results, cfg.column_widths, cfg.sheet_name)
        except Exception as e:  # pandas/XlsxWriter 由来の例外型が多岐にわたるため一括変換
            raise ExportError(f"cannot encode {fmt}: {e}") from e

    written: list[Path] = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for fmt, path in paths.items():
            path.write_bytes(payloads[fmt])
            logger.debug(f"wrote {path} ({len(payloads[fmt])} bytes)")
            written.append(path)
    except OSError as e:
        raise ExportError(f"cannot write output: {e}") from e
    return written
