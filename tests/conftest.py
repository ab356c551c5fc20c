# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from classroom_matcher.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CLASSROOM_MATCHER_CONFIG", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


def write_primary_csv(path: Path, rows: list[dict[str, str]], columns: list[str] | None = None) -> Path:
    cols = columns or ["Course", "Full Name", "Exam Marks", "Total"]
    pd.DataFrame(rows, columns=cols).to_csv(path, index=False, encoding="utf-8")
    return path


def write_roster_xlsx(
    path: Path,
    rows: list[list[object]],
    header: list[str] | None = None,
    extra_sheets: dict[str, list[list[object]]] | None = None,
) -> Path:
    cols = header or ["Corrected Name", "Classroom"]
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame(rows, columns=cols).to_excel(writer, sheet_name="Roster", index=False)
        for name, extra in (extra_sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, index=False, header=False)
    return path


@pytest.fixture()
def sample_inputs(temp_workdir: Path) -> tuple[Path, Path]:
    primary = write_primary_csv(
        temp_workdir / "data" / "exam.csv",
        [
            {"Course": "Math", "Full Name": "Sara Lee", "Exam Marks": "40", "Total": "80"},
            {"Course": "Math", "Full Name": " ali hassan ", "Exam Marks": "45", "Total": "90"},
            {"Course": "Physics", "Full Name": "Omar Khalid", "Exam Marks": "30", "Total": "60"},
            {"Course": "Physics", "Full Name": "Mona Adel", "Exam Marks": "35", "Total": "70"},
        ],
    )
    reference = write_roster_xlsx(
        temp_workdir / "data" / "roster.xlsx",
        [
            ["Ali Hassan", "101"],
            ["Mona Adel", "A-2"],
            ["Omar Khalid", None],
        ],
    )
    return primary, reference


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
csv_filename: results.csv
xlsx_filename: results.xlsx
column_widths:
  Full Name: 40
reference_aliases:
  classroom: [Room, Classroom]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "matcher.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_primary_csv():
    return write_primary_csv


@pytest.fixture()
def make_roster_xlsx():
    return write_roster_xlsx
