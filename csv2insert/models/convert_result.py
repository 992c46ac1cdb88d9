from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .error_record import ValidationError

"""Pipeline request/response models.

ConvertRequest is what an outer transport hands to the pipeline (raw CSV text +
display filename). ConvertResult is a discriminated union: ConvertSuccess or
ConvertFailure, never both populated.
"""

__all__ = [
    "ConvertRequest",
    "ConvertSuccess",
    "ConvertFailure",
    "ConvertResult",
    "GENERATED_AT_FMT",
]

GENERATED_AT_FMT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class ConvertRequest:
    csv_text: str
    input_file_name: str

    def __post_init__(self) -> None:
        if self.csv_text is None:
            raise ValueError("csv_text is required")
        if self.input_file_name is None:
            raise ValueError("input_file_name is required")
        if not self.csv_text.strip():
            raise ValueError("csv_text is blank")


@dataclass(frozen=True)
class ConvertSuccess:
    sql_text: str
    output_file_name: str
    generated_at: datetime
    row_count: int = 0  # INSERT statements in sql_text

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, object]:
        return {
            "ok": True,
            "sql": self.sql_text,
            "output_file_name": self.output_file_name,
            "generated_at": self.generated_at.strftime(GENERATED_AT_FMT),
            "rows": self.row_count,
        }


@dataclass(frozen=True)
class ConvertFailure:
    errors: tuple[ValidationError, ...]
    truncated: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, object]:
        return {
            "ok": False,
            "errors": [e.to_dict() for e in self.errors],
            "truncated": self.truncated,
        }


ConvertResult = ConvertSuccess | ConvertFailure
