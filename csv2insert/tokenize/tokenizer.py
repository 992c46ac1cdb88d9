from __future__ import annotations

import logging

from ..models.column_type import ColumnType
from ..models.error_record import ValidationError
from ..models.stage_result import StageFailure, StageResult, StageSuccess
from ..models.table import ParsedTable, TokenizedRow, TokenizedTable, require_aligned
from ..models.value_token import ValueToken
from ..validation.collector import ErrorCollector

"""Cell keyword interpretation (NULL / DEFAULT / empty string / raw value).

Precedence, first match wins:
1. ""            -> NULL   (empty cell)
2. NULL          -> NULL
3. DEFAULT       -> DEFAULT
4. ""  (2 chars) -> EMPTY_STRING for text columns, error for any other type
5. anything else -> RAW (original text, no type parsing here)

Keyword matching is exact: case-sensitive and untrimmed, so `null`, `Default`
or ` NULL` are RAW values, not keywords.
"""

__all__ = [
    "tokenize_table",
    "interpret_cell",
    "NULL_KEYWORD",
    "DEFAULT_KEYWORD",
    "EMPTY_STRING_TOKEN",
]

logger = logging.getLogger(__name__)

NULL_KEYWORD = "NULL"
DEFAULT_KEYWORD = "DEFAULT"
EMPTY_STRING_TOKEN = '""'


def tokenize_table(parsed: ParsedTable, collector: ErrorCollector | None = None) -> StageResult[TokenizedTable]:
    """Turn every cell of `parsed` into a ValueToken.

    Raises:
        TableShapeError: types and headers differ in length (broken caller)
    """
    column_count = require_aligned(parsed)
    if collector is None:
        collector = ErrorCollector()

    rows: list[TokenizedRow] = []
    for row in parsed.rows:
        tokens: list[ValueToken] = []
        for i in range(column_count):
            token = interpret_cell(
                row.value_at(i), parsed.types[i], row.file_line, parsed.headers[i], collector
            )
            tokens.append(token)
            if collector.is_truncated():
                break
        if collector.is_truncated():
            break
        rows.append(TokenizedRow(file_line=row.file_line, tokens=tokens))

    if collector.has_errors():
        logger.debug(f"tokenize: failed errors={collector.size()} truncated={collector.is_truncated()}")
        return StageFailure.of(collector.errors(), collector.is_truncated())

    return StageSuccess(TokenizedTable(
        table_name=parsed.table_name,
        types=parsed.types,
        headers=parsed.headers,
        rows=rows,
    ))


def interpret_cell(
    raw: str | None,
    column_type: ColumnType,
    file_line: int,
    column_name: str,
    collector: ErrorCollector,
) -> ValueToken:
    original = "" if raw is None else raw

    if original == "":
        return ValueToken.of_null(original)
    if original == NULL_KEYWORD:
        return ValueToken.of_null(original)
    if original == DEFAULT_KEYWORD:
        return ValueToken.of_default(original)

    if original == EMPTY_STRING_TOKEN:
        if column_type is ColumnType.TEXT:
            return ValueToken.of_empty_string(original)
        collector.add(ValidationError(
            file_line, column_name, column_type.id, original,
            f'empty-string token ("") is not allowed for non-text type {column_type.id}',
        ))
        # keep the row shape so the rest of the table can still be scanned
        return ValueToken.of_raw(original)

    return ValueToken.of_raw(original)
