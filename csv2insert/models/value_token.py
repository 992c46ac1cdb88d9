from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""ValueToken: classification of one CSV cell before type checking.

NULL and DEFAULT carry no value. RAW carries the original cell text unchanged;
EMPTY_STRING carries "". Type-specific parsing is left to the validator.
"""

__all__ = [
    "TokenKind",
    "ValueToken",
]


class TokenKind(Enum):
    NULL = "null"  # empty cell or NULL
    DEFAULT = "default"  # DEFAULT
    EMPTY_STRING = "empty_string"  # "" (text columns only)
    RAW = "raw"


@dataclass(frozen=True)
class ValueToken:
    kind: TokenKind
    original: str  # cell text as read, used for error display
    value: str | None = None

    def __post_init__(self) -> None:
        if self.original is None:
            raise ValueError("original is required")
        if self.kind in (TokenKind.NULL, TokenKind.DEFAULT) and self.value is not None:
            raise ValueError(f"{self.kind.name} token cannot carry a value")

    @classmethod
    def of_null(cls, original: str) -> ValueToken:
        return cls(TokenKind.NULL, original)

    @classmethod
    def of_default(cls, original: str) -> ValueToken:
        return cls(TokenKind.DEFAULT, original)

    @classmethod
    def of_empty_string(cls, original: str) -> ValueToken:
        return cls(TokenKind.EMPTY_STRING, original, "")

    @classmethod
    def of_raw(cls, original: str) -> ValueToken:
        return cls(TokenKind.RAW, original, original)
