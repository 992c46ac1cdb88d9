from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from ..models.convert_result import ConvertFailure, ConvertRequest, ConvertResult, ConvertSuccess
from ..models.error_record import SYSTEM_MARKER, ValidationError
from ..models.stage_result import StageFailure
from ..reader.format_d import parse_format_d
from ..sql.insert_generator import generate_insert_sql
from ..tokenize.tokenizer import tokenize_table
from ..validation.collector import DEFAULT_MAX_ERRORS, ErrorCollector
from ..validator.type_validator import validate_table

"""Conversion pipeline: parse -> tokenize -> validate -> generate.

Each stage either hands a fully-formed object to the next one or fails with a
capped error list; the first failing stage ends the run. No SQL is produced
unless every stage succeeded.

The pipeline keeps no state between calls. Each call owns its ErrorCollector,
so concurrent calls from a multi-threaded transport need no locking.
"""

__all__ = [
    "convert",
    "build_output_file_name",
]

logger = logging.getLogger(__name__)

FILE_TS_FMT = "%Y%m%d_%H%M%S"
_UNSAFE_FILE_CHARS = re.compile(r"[^0-9A-Za-z_-]")


def build_output_file_name(table_name: str | None, generated_at: datetime) -> str:
    """insert_<sanitized table>_<yyyyMMdd_HHmmss>.sql ('table' when the name is blank)."""
    base = "table" if table_name is None or not table_name.strip() else table_name.strip()
    safe = _UNSAFE_FILE_CHARS.sub("_", base)
    return f"insert_{safe}_{generated_at.strftime(FILE_TS_FMT)}.sql"


def convert(
    request: ConvertRequest,
    *,
    max_errors: int = DEFAULT_MAX_ERRORS,
    clock: Callable[[], datetime] | None = None,
) -> ConvertResult:
    """Convert one Format D CSV payload into an INSERT script.

    Args:
        request: CSV text and display file name
        max_errors: Error collector capacity for this run
        clock: Generation timestamp source (defaults to local wall-clock time)

    Returns:
        ConvertSuccess or ConvertFailure. Unexpected faults are folded into a
        single system-level ValidationError instead of propagating.
    """
    if request is None:
        raise ValueError("request is required")
    collector = ErrorCollector(max_errors)
    now = clock or datetime.now

    try:
        parsed = parse_format_d(request.csv_text, collector)
        if isinstance(parsed, StageFailure):
            return _failed("parse", request, parsed)

        tokenized = tokenize_table(parsed.value, collector)
        if isinstance(tokenized, StageFailure):
            return _failed("tokenize", request, tokenized)

        validated = validate_table(tokenized.value, collector)
        if isinstance(validated, StageFailure):
            return _failed("validate", request, validated)

        table = validated.value
        generated_at = now()
        output_file_name = build_output_file_name(table.table_name, generated_at)
        sql_text = generate_insert_sql(table, request.input_file_name, generated_at)
    except Exception as e:
        logger.error(f"convert: unexpected error file={request.input_file_name}: {type(e).__name__} - {e}")
        err = ValidationError(
            0, SYSTEM_MARKER, SYSTEM_MARKER, "", f"unexpected error: {type(e).__name__} - {e}"
        )
        return ConvertFailure(errors=(err,), truncated=False)

    logger.debug(
        f"convert: ok file={request.input_file_name} table={table.table_name} "
        f"rows={len(table.rows)} output={output_file_name}"
    )
    return ConvertSuccess(
        sql_text=sql_text,
        output_file_name=output_file_name,
        generated_at=generated_at,
        row_count=len(table.rows),
    )


def _failed(stage: str, request: ConvertRequest, result: StageFailure) -> ConvertFailure:
    logger.debug(
        f"convert: {stage} failed file={request.input_file_name} "
        f"errors={len(result.errors)} truncated={result.truncated}"
    )
    return ConvertFailure(errors=result.errors, truncated=result.truncated)
