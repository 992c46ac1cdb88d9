from .insert_generator import generate_insert_sql
from .literal import quote_text, to_sql_literal

__all__ = [
    "generate_insert_sql",
    "quote_text",
    "to_sql_literal",
]
