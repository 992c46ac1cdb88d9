from __future__ import annotations

from ..models.column_type import ColumnType
from ..models.value_token import TokenKind, ValueToken

"""Per-cell SQL literal rendering.

Pure function of (ColumnType, ValueToken). Values are assumed to have passed
type validation; nothing is re-checked here beyond quote escaping.
"""

__all__ = [
    "to_sql_literal",
    "quote_text",
]


def quote_text(s: str) -> str:
    """Single-quote `s`, doubling embedded single quotes."""
    return "'" + s.replace("'", "''") + "'"


def _raw_to_sql(column_type: ColumnType, raw: str) -> str:
    match column_type:
        case ColumnType.TEXT:
            return quote_text(raw)
        case ColumnType.INT | ColumnType.DECIMAL:
            # emitted verbatim (validated), no normalization
            return raw.strip()
        case ColumnType.BOOL:
            return "TRUE" if raw.strip().lower() == "true" else "FALSE"
        case ColumnType.DATE | ColumnType.TIMESTAMP | ColumnType.UUID:
            return quote_text(raw.strip())
    raise ValueError(f"unsupported column type: {column_type}")


def to_sql_literal(column_type: ColumnType, token: ValueToken) -> str:
    match token.kind:
        case TokenKind.NULL:
            return "NULL"
        case TokenKind.DEFAULT:
            return "DEFAULT"
        case TokenKind.EMPTY_STRING:
            return "''"
        case TokenKind.RAW:
            return _raw_to_sql(column_type, token.value or "")
    raise ValueError(f"unsupported value token: {token.kind}")
