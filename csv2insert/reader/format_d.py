from __future__ import annotations

import csv
import io
import logging
import re

from ..models.column_type import ColumnType
from ..models.error_record import ValidationError
from ..models.stage_result import StageFailure, StageResult, StageSuccess
from ..models.table import DataRow, ParsedTable
from ..validation.collector import ErrorCollector

"""Format D reader.

Format D:
1. `#table=<table>`
2. `#types=<type1>,<type2>,...`
3. `<col1>,<col2>,...`
4+. `<val1>,<val2>,...`

This stage checks the meta lines, resolves column types, validates header names
and row cell counts. It does not interpret NULL/DEFAULT/empty-string keywords
and does not check cell values against their types.

Every check appends to one ErrorCollector and keeps going with a best-effort
partial result; the ParsedTable is only returned when nothing was collected.
"""

__all__ = [
    "parse_format_d",
    "strip_bom",
    "TABLE_PREFIX",
    "TYPES_PREFIX",
]

logger = logging.getLogger(__name__)

TABLE_PREFIX = "#table="
TYPES_PREFIX = "#types="
UTF8_BOM = "\ufeff"

FORMAT = "format"

# the csv module caps a field at 128 KiB by default; Format D cells have no size cap.
# Must fit a C long on every platform.
FIELD_SIZE_LIMIT = 2**31 - 1

# table and column names go into SQL unquoted: ASCII letters/digits/_, no leading digit
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def strip_bom(text: str | None) -> str | None:
    """Remove a single leading U+FEFF (Excel/Windows UTF-8 BOM)."""
    if text and text[0] == UTF8_BOM:
        return text[1:]
    return text


def _is_identifier(name: str) -> bool:
    return IDENTIFIER_PATTERN.fullmatch(name) is not None


def _read_records(text: str, records: list[list[str]]) -> None:
    """Append every CSV record of `text` to `records`.

    Records read before a csv.Error stay in `records`, so the caller can tell
    which record broke.
    """
    csv.field_size_limit(FIELD_SIZE_LIMIT)
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    for record in reader:
        # blank physical lines come back as [] from the csv module; keep them as one empty cell
        records.append(record if record else [""])


def parse_format_d(csv_text: str, collector: ErrorCollector | None = None) -> StageResult[ParsedTable]:
    """Parse Format D text into a ParsedTable.

    Args:
        csv_text: Whole CSV content (a leading BOM is tolerated)
        collector: Error collector for this run (a fresh one if omitted)

    Returns:
        StageSuccess[ParsedTable], or StageFailure with every collected error
    """
    if collector is None:
        collector = ErrorCollector()

    text = strip_bom(csv_text)

    if text is None or not text.strip():
        collector.add(ValidationError(
            1, "#file", FORMAT, "", "CSV is empty (#table line, #types line and header line are required)"
        ))
        return _failure(collector)

    records: list[list[str]] = []
    try:
        _read_records(text, records)
    except csv.Error as e:
        # the record being read when the reader gave up
        collector.add(ValidationError(len(records) + 1, "#file", FORMAT, "", f"failed to read CSV: {e}"))
        return _failure(collector)

    if len(records) < 3:
        collector.add(ValidationError(
            1, "#file", FORMAT, "",
            "CSV has too few lines (#table line, #types line and header line are required)",
        ))
        return _failure(collector)

    table_name = _parse_table_line(records[0], 1, collector)
    if collector.is_truncated():
        return _failure(collector)

    types = _parse_types_line(records[1], 2, collector)
    if collector.is_truncated():
        return _failure(collector)

    headers = _parse_header_line(records[2], 3, collector)
    if collector.is_truncated():
        return _failure(collector)

    # types and headers must line up 1:1 for tokenizing / validation / SQL generation
    if types and headers and len(types) != len(headers):
        collector.add(ValidationError(
            3, "#header", FORMAT, f"types={len(types)}, headers={len(headers)}",
            "#types column count does not match header column count",
        ))
    if collector.is_truncated():
        return _failure(collector)

    rows: list[DataRow] = []
    expected = len(headers)
    for line, record in enumerate(records[3:], start=4):
        if len(record) != expected:
            collector.add(ValidationError(
                line, "#data", FORMAT, ",".join(record),
                f"data row column count does not match header (expected={expected}, actual={len(record)})",
            ))
            if collector.is_truncated():
                break
            # cannot be positioned against the headers
            continue
        rows.append(DataRow(file_line=line, values=tuple(record)))

    if collector.has_errors():
        return _failure(collector)

    logger.debug(f"parse: table={table_name} columns={expected} rows={len(rows)}")
    return StageSuccess(ParsedTable(table_name=table_name, types=types, headers=headers, rows=rows))


def _failure(collector: ErrorCollector) -> StageFailure:
    logger.debug(f"parse: failed errors={collector.size()} truncated={collector.is_truncated()}")
    return StageFailure.of(collector.errors(), collector.is_truncated())


def _parse_table_line(record: list[str], line: int, collector: ErrorCollector) -> str:
    """Return the table name, or "" after collecting an error."""
    if len(record) != 1:
        collector.add(ValidationError(
            line, "#table", FORMAT, ",".join(record), "#table line must consist of a single cell"
        ))
        return ""

    cell = record[0]
    if not cell.startswith(TABLE_PREFIX):
        collector.add(ValidationError(
            line, "#table", FORMAT, cell, "#table line must be of the form '#table=<tableName>'"
        ))
        return ""

    table_name = cell[len(TABLE_PREFIX):]
    if not table_name:
        collector.add(ValidationError(line, "#table", FORMAT, cell, "table name is empty"))
        return ""

    if not _is_identifier(table_name):
        collector.add(ValidationError(
            line, "#table", FORMAT, table_name,
            "invalid table name (letters, digits and _ only; must start with a letter or _)",
        ))
        return ""

    return table_name


def _parse_types_line(record: list[str], line: int, collector: ErrorCollector) -> list[ColumnType]:
    """Resolve `#types=` tokens. Unresolvable tokens are collected and left out."""
    first = record[0]
    if not first.startswith(TYPES_PREFIX):
        collector.add(ValidationError(
            line, "#types", FORMAT, first, "#types line must be of the form '#types=<type1>,<type2>,...'"
        ))
        return []

    # "#types=int,text" reads as ["#types=int", "text"]: the prefix shares the first cell
    raw_types = [first[len(TYPES_PREFIX):], *record[1:]]

    types: list[ColumnType] = []
    for raw in raw_types:
        token = raw.strip()
        if not token:
            collector.add(ValidationError(line, "#types", FORMAT, raw, "column type is empty"))
        else:
            resolved = ColumnType.from_id(token)
            if resolved is None:
                collector.add(ValidationError(
                    line, "#types", FORMAT, token,
                    f"unknown column type (allowed: {ColumnType.allowed_ids()})",
                ))
            else:
                types.append(resolved)
        if collector.is_truncated():
            break
    return types


def _parse_header_line(record: list[str], line: int, collector: ErrorCollector) -> list[str]:
    """Return column names; invalid names are kept as "" to preserve positions."""
    headers: list[str] = []
    seen: set[str] = set()

    for index, col in enumerate(record, start=1):
        if not col:
            collector.add(ValidationError(line, "#header", FORMAT, "", f"column name is empty (column {index})"))
            if collector.is_truncated():
                break
            headers.append("")
            continue

        valid = _is_identifier(col)
        if not valid:
            collector.add(ValidationError(
                line, col, FORMAT, col,
                "invalid column name (letters, digits and _ only; must start with a letter or _)",
            ))
            if collector.is_truncated():
                break

        if col in seen:
            collector.add(ValidationError(line, col, FORMAT, col, "duplicate column name"))
            if collector.is_truncated():
                break
        seen.add(col)

        headers.append(col if valid else "")

    return headers
