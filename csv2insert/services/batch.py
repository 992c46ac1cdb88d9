from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ConvertConfig
from ..logging.error_log import ErrorLogBuffer
from ..models.convert_result import ConvertFailure, ConvertRequest, ConvertResult
from ..models.error_record import ValidationError
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..reader.format_d import parse_format_d
from .pipeline import convert
from .progress import ProgressTracker

"""Batch conversion of CSV files.

Scans the configured source directory (or takes an explicit file list), runs
the conversion pipeline per file, writes successful SQL scripts to the output
directory and buffers validation errors of failed files into the JSON Lines
error log. One file failing never stops the batch.
"""

__all__ = [
    "BatchError",
    "scan_csv_files",
    "convert_file",
    "convert_all",
]

logger = logging.getLogger(__name__)

# validation errors echoed to the console per failed file; the error log has all of them
CONSOLE_ERROR_LIMIT = 10


class BatchError(Exception):
    """Fatal batch problem (source directory missing or unreadable)."""


def scan_csv_files(directory: Path, pattern: str = "*.csv") -> list[Path]:
    """List files in `directory` matching `pattern` (non-recursive, sorted by name).

    Raises:
        BatchError: directory does not exist, is not a directory or cannot be read
    """
    if not directory.exists():
        raise BatchError(f"directory not found: {directory}")
    if not directory.is_dir():
        raise BatchError(f"path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.glob(pattern) if p.is_file())
    except OSError as e:
        raise BatchError(f"error reading directory {directory}: {e}") from e


def _unique_path(path: Path) -> Path:
    """Append _2, _3, ... before the suffix until the name is free."""
    if not path.exists():
        return path
    n = 2
    while True:
        candidate = path.with_name(f"{path.stem}_{n}{path.suffix}")
        if not candidate.exists():
            return candidate
        n += 1


def _write_sql(output_dir: Path, file_name: str, sql_text: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = _unique_path(output_dir / file_name)
    target.write_text(sql_text, encoding="utf-8", newline="\n")
    return target


def convert_file(
    file_path: Path,
    config: ConvertConfig,
    clock: Callable[[], datetime] | None = None,
) -> ConvertResult:
    """Read one CSV file and run the pipeline on it.

    Unreadable or undecodable files become a ConvertFailure with a '#file' error.
    """
    try:
        text = file_path.read_text(encoding=config.encoding)
    except (OSError, UnicodeDecodeError) as e:
        err = ValidationError(0, "#file", "format", "", f"cannot read file ({config.encoding}): {e}")
        return ConvertFailure(errors=(err,), truncated=False)

    if not text.strip():
        # a blank payload is not a valid request; report it the way the parser does
        empty = parse_format_d(text)
        return ConvertFailure(errors=empty.errors, truncated=False)

    request = ConvertRequest(csv_text=text, input_file_name=file_path.name)
    return convert(
        request,
        max_errors=config.max_errors,
        clock=clock or (lambda: datetime.now(config.tzinfo)),
    )


def _log_failure(file_name: str, result: ConvertFailure) -> None:
    more = " (truncated)" if result.truncated else ""
    logger.warning(f"validation failed: file={file_name} errors={len(result.errors)}{more}")
    for err in result.errors[:CONSOLE_ERROR_LIMIT]:
        logger.warning(
            f"  line={err.file_line} column={err.column_name} type={err.type_id} "
            f"input={err.input_text!r} reason={err.reason}"
        )
    hidden = len(result.errors) - CONSOLE_ERROR_LIMIT
    if hidden > 0:
        logger.warning(f"  ... {hidden} more (see error log)")


def convert_all(
    config: ConvertConfig,
    files: Sequence[Path] | None = None,
    clock: Callable[[], datetime] | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Convert every CSV file and write the SQL scripts.

    Args:
        config: Conversion configuration
        files: Explicit files to convert (default: scan config.source_directory)
        clock: Generation timestamp source shared by all files (default: now in config timezone)
        error_log: Error log buffer (default: a new buffer under ./logs)

    Returns:
        ProcessingResult with per-file stats

    Raises:
        BatchError: source directory problems (only when `files` is not given)
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()

    if files is None:
        file_paths = scan_csv_files(Path(config.source_directory), config.file_pattern)
    else:
        file_paths = list(files)

    output_dir = Path(config.output_directory)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_errors = 0

    with ProgressTracker(len(file_paths), description="Converting files") as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)

            result = convert_file(file_path, config, clock)

            output_file: str | None = None
            if result.ok:
                try:
                    output_file = str(_write_sql(output_dir, result.output_file_name, result.sql_text))
                except OSError as e:
                    err = ValidationError(0, "#file", "format", "", f"cannot write SQL file: {e}")
                    result = ConvertFailure(errors=(err,), truncated=False)

            if result.ok:
                success_count += 1
                total_rows += result.row_count
                logger.info(f"converted: file={file_path.name} rows={result.row_count} output={output_file}")
            else:
                failed_count += 1
                total_errors += len(result.errors)
                error_log.extend(file_path.name, result.errors, result.truncated)
                _log_failure(file_path.name, result)

            file_elapsed = (datetime.now(UTC) - file_start).total_seconds()
            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()

            file_stats.append(FileStat(
                file_name=file_path.name,
                status=FileStatus.SUCCESS if result.ok else FileStatus.FAILED,
                rows=result.row_count if result.ok else 0,
                errors=0 if result.ok else len(result.errors),
                elapsed_seconds=file_elapsed,
                truncated=False if result.ok else result.truncated,
                output_file=output_file,
            ))

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        total_errors=total_errors,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
    )
