from __future__ import annotations

from datetime import datetime

from ..models.convert_result import GENERATED_AT_FMT
from ..models.table import TokenizedTable, require_aligned
from .literal import to_sql_literal

"""INSERT script generation.

Output layout (fixed):

    -- csv-to-insert-generator
    -- table: <table>
    -- input: <input file name>
    -- rows: <data row count>
    -- generated_at: <yyyy-MM-dd HH:mm:ss>

    BEGIN;

    INSERT INTO <table> (<col1>, <col2>, ...) VALUES (<lit1>, <lit2>, ...);
    ...

    COMMIT;

Only call this with a table that passed validate_table(): numeric and date
values are emitted verbatim.
"""

__all__ = [
    "generate_insert_sql",
    "TOOL_NAME",
]

TOOL_NAME = "csv-to-insert-generator"


def generate_insert_sql(tokenized: TokenizedTable, input_file_name: str, generated_at: datetime) -> str:
    """Render the whole transactional INSERT script for a validated table.

    Output is deterministic for the same table, file name and timestamp.

    Raises:
        TableShapeError: types and headers differ in length (broken caller)
        ValueError: a required argument is None
    """
    require_aligned(tokenized)
    if input_file_name is None:
        raise ValueError("input_file_name is required")
    if generated_at is None:
        raise ValueError("generated_at is required")

    lines = [
        f"-- {TOOL_NAME}",
        f"-- table: {tokenized.table_name}",
        f"-- input: {input_file_name}",
        f"-- rows: {len(tokenized.rows)}",
        f"-- generated_at: {generated_at.strftime(GENERATED_AT_FMT)}",
        "",
        "BEGIN;",
        "",
    ]

    # column list is the same for every row
    prefix = f"INSERT INTO {tokenized.table_name} ({', '.join(tokenized.headers)}) VALUES "
    for row in tokenized.rows:
        values = ", ".join(
            to_sql_literal(column_type, token) for column_type, token in zip(tokenized.types, row.tokens, strict=True)
        )
        lines.append(f"{prefix}({values});")

    lines.extend(["", "COMMIT;"])
    return "\n".join(lines) + "\n"
