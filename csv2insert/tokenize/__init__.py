from .tokenizer import interpret_cell, tokenize_table

__all__ = [
    "interpret_cell",
    "tokenize_table",
]
