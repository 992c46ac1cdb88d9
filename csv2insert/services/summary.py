from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for batch conversion.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} rows={rows}
errors={errors} elapsed_sec={elapsed} throughput_rps={throughput}
"""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a batch result.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2026, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2026, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=1, total_rows=1000, total_errors=3,
        ...     start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=500.0
        ... )
        >>> render_summary_line(2, result)
        'SUMMARY files=2/2 success=1 failed=1 rows=1000 errors=3 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"errors={result.total_errors} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
