from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv

from classroom_matcher.config.loader import ConfigError, load_config, resolve_config_path
from classroom_matcher.excel.writer import (
    CSV_FORMAT,
    SUPPORTED_FORMATS,
    XLSX_FORMAT,
    ExportError,
    export_results,
)
from classroom_matcher.logging.init import log_summary, set_debug, setup_logging
from classroom_matcher.logging.issue_log import IssueLogBuffer
from classroom_matcher.services.orchestrator import ProcessingError, process_files
from classroom_matcher.services.summary import render_preview, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (override) and resolve the config file
- Read the reference workbook + primary CSV, match and sort
- Export CSV and/or XLSX, optionally write the unresolved-row log
- Print the SUMMARY line and return an exit code
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_UNRESOLVED = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (values override existing environment variables)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit with EXIT_FATAL so that code 2 stays reserved for unresolved rows."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FATAL, f"{self.prog}: error: {message}\n")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="classroom-matcher",
        description="Annotate exam records with classroom assignments from a roster workbook",
    )
    p.add_argument("primary", help="Exam CSV (Course, Full Name, Exam Marks, Total)")
    p.add_argument(
        "reference",
        help="Roster workbook, .xlsx or .xls (Corrected Name, Classroom); first sheet is used",
    )
    p.add_argument(
        "--format",
        choices=[*SUPPORTED_FORMATS, "both"],
        default="both",
        help="Output format (default: both)",
    )
    p.add_argument("--output-dir", help="Directory for output files (default: config output_directory)")
    p.add_argument("--config", help="YAML config path (default: $CLASSROOM_MATCHER_CONFIG or config/matcher.yml)")
    p.add_argument("--issues-log", action="store_true", help="Write unresolved rows to logs/issues-*.log")
    p.add_argument(
        "--fail-on-unresolved",
        action="store_true",
        help="Exit with code 2 if any student has no classroom",
    )
    p.add_argument("--preview", action="store_true", help="Print the first sorted rows")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _formats(value: str) -> list[str]:
    if value == "both":
        return [CSV_FORMAT, XLSX_FORMAT]
    return [value]


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] はそのまま使う (None のときのみ sys.argv を読む)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    config_path, explicit = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path, required=explicit)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    logger.debug(f"config: {config_path if config_path.exists() else 'built-in defaults'}")

    try:
        result = process_files(args.primary, args.reference, cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    output_dir = Path(args.output_dir or cfg.output_directory)
    try:
        written = export_results(result.results, output_dir, _formats(args.format), cfg)
    except ExportError as e:
        logger.error(f"export: {e}")
        return EXIT_FATAL
    for path in written:
        logger.info(f"wrote {path}")

    if args.preview:
        for line in render_preview(result.results):
            logger.info(line)

    if args.issues_log:
        issues = IssueLogBuffer()
        count = issues.extend_from_results(result.primary_file, result.results)
        log_path = issues.flush()
        if log_path is not None:
            logger.info(f"issues={count} log={log_path}")

    if result.stats.unresolved:
        logger.warning(
            f"{result.stats.unresolved} of {result.stats.total} students without classroom"
        )

    # log_summary が "SUMMARY " を付与するため除去
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if args.fail_on_unresolved and result.stats.unresolved > 0:
        return EXIT_UNRESOLVED
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
