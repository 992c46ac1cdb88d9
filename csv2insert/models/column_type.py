from __future__ import annotations

from enum import Enum

"""ColumnType enum for the CSV -> INSERT converter.

The `#types=` line of a Format D file declares one ColumnType per column.
The set of types is closed: unknown identifiers are rejected, never coerced.
"""

__all__ = [
    "ColumnType",
]


class ColumnType(Enum):
    """Declared column type (canonical lowercase identifier as value).

    - TEXT: any string, single-quoted in SQL
    - INT: signed 32-bit integer
    - DECIMAL: plain decimal (no exponent)
    - BOOL: true / false (case-insensitive)
    - DATE: yyyy-MM-dd
    - TIMESTAMP: yyyy-MM-dd HH:mm:ss or yyyy-MM-ddTHH:mm:ss
    - UUID: canonical 36-character hyphenated form
    """
    TEXT = "text"
    INT = "int"
    DECIMAL = "decimal"
    BOOL = "bool"
    DATE = "date"
    TIMESTAMP = "timestamp"
    UUID = "uuid"

    @property
    def id(self) -> str:
        return self.value

    @classmethod
    def from_id(cls, raw: str | None) -> ColumnType | None:
        """Resolve a type identifier (trimmed, case-insensitive). None if unknown."""
        if raw is None:
            return None
        normalized = raw.strip().lower()
        for t in cls:
            if t.value == normalized:
                return t
        return None

    @classmethod
    def require_from_id(cls, raw: str) -> ColumnType:
        if raw is None:
            raise ValueError("type is required")
        resolved = cls.from_id(raw)
        if resolved is None:
            raise ValueError(f"unknown column type: {raw}")
        return resolved

    @classmethod
    def allowed_ids(cls) -> str:
        return "/".join(t.value for t in cls)
