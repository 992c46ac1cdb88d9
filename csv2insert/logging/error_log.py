from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord, ValidationError

"""Error log buffering (JSON Lines).

Validation errors of failed files are buffered as ErrorRecords and appended to
`logs/errors-YYYYMMDD-HHMMSS.log` (UTC stamp fixed at first access) on flush.
Fixed schema: timestamp, file, line, column, type, input, reason.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. flush() appends JSON lines.

    Single-threaded: one buffer per batch run.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, file: str, errors: Iterable[ValidationError], truncated: bool = False) -> None:
        """Buffer every error of one file; a truncation marker record follows if errors were capped."""
        count = 0
        for err in errors:
            self.append(ErrorRecord.create(file, err))
            count += 1
        if truncated:
            marker = ValidationError(
                0, "#file", "truncated", "", f"more errors exist beyond the first {count}"
            )
            self.append(ErrorRecord.create(file, marker))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
