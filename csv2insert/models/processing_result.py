from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Batch conversion result models.

ProcessingResult aggregates one batch run (several CSV files) for the SUMMARY
line; FileStat carries the per-file outcome.
"""

__all__ = [
    "FileStatus",
    "FileStat",
    "ProcessingResult",
]


class FileStatus(Enum):
    """Outcome of one CSV file.

    - SUCCESS: SQL written to the output directory
    - FAILED: validation errors (or unreadable file); no SQL written
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    file_name: str
    status: FileStatus
    rows: int  # INSERT statements written (0 on failure)
    errors: int  # collected validation errors (0 on success)
    elapsed_seconds: float
    truncated: bool = False
    output_file: str | None = None  # written SQL path


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a batch run, rendered into the SUMMARY line."""
    success_files: int
    failed_files: int
    total_rows: int
    total_errors: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
