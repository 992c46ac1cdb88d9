from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from ..models.column_type import ColumnType
from ..models.error_record import ValidationError
from ..models.stage_result import StageFailure, StageResult, StageSuccess
from ..models.table import TokenizedTable, require_aligned
from ..models.value_token import TokenKind, ValueToken
from ..validation.collector import ErrorCollector

"""Type validation of tokenized cells.

NULL / DEFAULT are valid for every type. EMPTY_STRING is valid for text only
(re-checked here even though the tokenizer already rejects it). RAW values are
checked, after trimming, against their declared type's grammar:

- text: anything
- int: signed decimal integer within 32-bit range
- decimal: [+-]digits[.digits], no exponent
- bool: true / false, case-insensitive
- date: yyyy-MM-dd (real calendar date)
- timestamp: yyyy-MM-dd HH:mm:ss or yyyy-MM-ddTHH:mm:ss
- uuid: 8-4-4-4-12 hex digits

Every cell is checked (up to the collector cap) so one run reports as many
problems as possible.
"""

__all__ = [
    "validate_table",
    "check_value",
    "INT_MIN",
    "INT_MAX",
]

logger = logging.getLogger(__name__)

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

INT_PATTERN = re.compile(r"[+-]?[0-9]+")
DECIMAL_PATTERN = re.compile(r"[+-]?([0-9]+)(\.[0-9]+)?")
DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
TIMESTAMP_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})[ T]([0-9]{2}):([0-9]{2}):([0-9]{2})")
UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def _is_int(s: str) -> bool:
    if INT_PATTERN.fullmatch(s) is None:
        return False
    # int() refuses very long digit strings; anything over 10 significant digits is out of range anyway
    if len(s.lstrip("+-").lstrip("0")) > 10:
        return False
    return INT_MIN <= int(s) <= INT_MAX


def _is_decimal(s: str) -> bool:
    if DECIMAL_PATTERN.fullmatch(s) is None:
        return False
    try:
        Decimal(s)
    except InvalidOperation:
        return False
    return True


def _is_bool(s: str) -> bool:
    return s.lower() in ("true", "false")


def _is_date(s: str) -> bool:
    m = DATE_PATTERN.fullmatch(s)
    if m is None:
        return False
    try:
        date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return False
    return True


def _is_timestamp(s: str) -> bool:
    m = TIMESTAMP_PATTERN.fullmatch(s)
    if m is None:
        return False
    try:
        datetime(*(int(g) for g in m.groups()))
    except ValueError:
        return False
    return True


def _is_uuid(s: str) -> bool:
    if UUID_PATTERN.fullmatch(s) is None:
        return False
    try:
        uuid.UUID(s)
    except ValueError:
        return False
    return True


# (grammar check, reason) per declared type; text is unconstrained
_CHECKS: dict[ColumnType, tuple[Callable[[str], bool], str]] = {
    ColumnType.TEXT: (lambda s: True, ""),
    ColumnType.INT: (_is_int, "cannot be read as int (e.g. 0, 123, -10; 32-bit range)"),
    ColumnType.DECIMAL: (_is_decimal, "cannot be read as decimal (e.g. 0, 12.34, -0.5; no exponent)"),
    ColumnType.BOOL: (_is_bool, "cannot be read as bool (true/false only)"),
    ColumnType.DATE: (_is_date, "cannot be read as date (yyyy-MM-dd)"),
    ColumnType.TIMESTAMP: (
        _is_timestamp,
        "cannot be read as timestamp (yyyy-MM-dd HH:mm:ss or yyyy-MM-dd'T'HH:mm:ss; "
        "out-of-range days are rejected, not clamped)",
    ),
    ColumnType.UUID: (_is_uuid, "cannot be read as uuid (e.g. 550e8400-e29b-41d4-a716-446655440000)"),
}


def check_value(column_type: ColumnType, value: str) -> str | None:
    """Check a raw value against its type grammar. Returns the failure reason or None."""
    check, reason = _CHECKS[column_type]
    return None if check(value.strip()) else reason


def validate_table(tokenized: TokenizedTable, collector: ErrorCollector | None = None) -> StageResult[TokenizedTable]:
    """Validate every cell; on success the same table is returned unchanged.

    Raises:
        TableShapeError: types and headers differ in length (broken caller)
    """
    column_count = require_aligned(tokenized)
    if collector is None:
        collector = ErrorCollector()

    for row in tokenized.rows:
        for i in range(column_count):
            _validate_cell(row.file_line, tokenized.headers[i], tokenized.types[i], row.token_at(i), collector)
            if collector.is_truncated():
                break
        if collector.is_truncated():
            break

    if collector.has_errors():
        logger.debug(f"validate: failed errors={collector.size()} truncated={collector.is_truncated()}")
        return StageFailure.of(collector.errors(), collector.is_truncated())

    return StageSuccess(tokenized)


def _validate_cell(
    file_line: int,
    column_name: str,
    column_type: ColumnType,
    token: ValueToken,
    collector: ErrorCollector,
) -> None:
    match token.kind:
        case TokenKind.NULL | TokenKind.DEFAULT:
            return
        case TokenKind.EMPTY_STRING:
            if column_type is not ColumnType.TEXT:
                collector.add(ValidationError(
                    file_line, column_name, column_type.id, token.original,
                    f"empty string is not allowed for non-text type {column_type.id}",
                ))
            return
        case TokenKind.RAW:
            reason = check_value(column_type, token.value or "")
            if reason is not None:
                collector.add(ValidationError(file_line, column_name, column_type.id, token.original, reason))
        case _:
            collector.add(ValidationError(
                file_line, column_name, column_type.id, token.original, f"unknown value token: {token.kind}"
            ))
