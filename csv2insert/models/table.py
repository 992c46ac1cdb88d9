from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .column_type import ColumnType
from .value_token import ValueToken

"""Table models passed between pipeline stages.

ParsedTable (raw strings) is produced by the Format D parser; TokenizedTable
(ValueTokens, same shape) is produced by the tokenizer and consumed unchanged in
shape by the validator and the SQL generator.

All sequences are stored as tuples so no stage can mutate another stage's output.
"""

__all__ = [
    "DataRow",
    "ParsedTable",
    "TokenizedRow",
    "TokenizedTable",
    "TableShapeError",
    "require_aligned",
]


class TableShapeError(ValueError):
    """Raised when types and headers of a table passed between stages disagree in length.

    This is a broken caller, not a user input problem; it is never collected.
    """


@dataclass(frozen=True)
class DataRow:
    """One data record (4th record onwards) as raw cell strings."""
    file_line: int  # 1-based record number within the whole file
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.file_line <= 0:
            raise ValueError(f"file_line must be >= 1: {self.file_line}")
        object.__setattr__(self, "values", tuple(self.values))

    def value_at(self, index: int) -> str:
        return self.values[index]


@dataclass(frozen=True)
class ParsedTable:
    table_name: str
    types: tuple[ColumnType, ...]
    headers: tuple[str, ...]
    rows: tuple[DataRow, ...]

    def __post_init__(self) -> None:
        if self.table_name is None:
            raise ValueError("table_name is required")
        object.__setattr__(self, "types", tuple(self.types))
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(self.rows))


@dataclass(frozen=True)
class TokenizedRow:
    file_line: int
    tokens: tuple[ValueToken, ...]

    def __post_init__(self) -> None:
        if self.file_line <= 0:
            raise ValueError(f"file_line must be >= 1: {self.file_line}")
        object.__setattr__(self, "tokens", tuple(self.tokens))

    def token_at(self, index: int) -> ValueToken:
        return self.tokens[index]


@dataclass(frozen=True)
class TokenizedTable:
    table_name: str
    types: tuple[ColumnType, ...]
    headers: tuple[str, ...]
    rows: tuple[TokenizedRow, ...]

    def __post_init__(self) -> None:
        if self.table_name is None:
            raise ValueError("table_name is required")
        object.__setattr__(self, "types", tuple(self.types))
        object.__setattr__(self, "headers", tuple(self.headers))
        object.__setattr__(self, "rows", tuple(self.rows))


class _Shaped(Protocol):
    @property
    def types(self) -> Sequence[ColumnType]: ...

    @property
    def headers(self) -> Sequence[str]: ...


def require_aligned(table: _Shaped) -> int:
    """Return the column count, raising TableShapeError if types/headers disagree."""
    if table is None:
        raise TableShapeError("table is required")
    if len(table.types) != len(table.headers):
        raise TableShapeError(
            f"#types column count does not match header column count: "
            f"types={len(table.types)}, headers={len(table.headers)}"
        )
    return len(table.headers)
