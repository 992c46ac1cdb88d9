from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ValidationError and ErrorRecord models.

ValidationError is the unit every pipeline stage collects: one per offending
cell or structural defect. ErrorRecord is the JSON Lines view written to the
error log, adding the input file and a UTC timestamp.

file_line is the 1-based CSV record number. 0 is reserved for system-level
errors where no line can be determined.
"""

__all__ = [
    "ValidationError",
    "ErrorRecord",
    "SYSTEM_MARKER",
]

SYSTEM_MARKER = "(system)"


@dataclass(frozen=True)
class ValidationError:
    """One user-facing validation error.

    Attributes:
        file_line: 1-based record number (0 for system-level errors)
        column_name: Column name, or a marker such as '#table' / '#data'
        type_id: Declared column type id, or 'format' for structural errors
        input_text: Offending cell text (untrimmed) or record content
        reason: Human-readable reason including the expected format
    """
    file_line: int
    column_name: str
    type_id: str
    input_text: str
    reason: str

    def __post_init__(self) -> None:
        if self.file_line < 0:
            raise ValueError(f"file_line must be >= 0: {self.file_line}")
        for name in ("column_name", "type_id", "input_text", "reason"):
            if getattr(self, name) is None:
                raise ValueError(f"{name} is required")

    def to_dict(self) -> dict[str, object]:
        return {
            "line": self.file_line,
            "column": self.column_name,
            "type": self.type_id,
            "input": self.input_text,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being converted
        line: Record number (0 for file/system-level errors)
        column: Column name or marker
        type: Column type id or 'format'
        input: Offending input text
        reason: Error reason
    """
    timestamp: str  # ISO8601 UTC
    file: str
    line: int
    column: str
    type: str
    input: str
    reason: str

    @staticmethod
    def create(file: str, error: ValidationError) -> ErrorRecord:
        """Create a new ErrorRecord for `error` with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            line=error.file_line,
            column=error.column_name,
            type=error.type_id,
            input=error.input_text,
            reason=error.reason,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
