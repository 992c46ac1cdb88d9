from __future__ import annotations

from ..models.error_record import ValidationError

"""Bounded validation error accumulator.

One ErrorCollector lives for exactly one pipeline run and is passed explicitly
to every stage. It keeps at most `max_errors` errors; once full, further adds
are dropped and `truncated` stays True for the rest of its life.
"""

__all__ = [
    "ErrorCollector",
    "DEFAULT_MAX_ERRORS",
]

DEFAULT_MAX_ERRORS = 100


class ErrorCollector:
    """Collects ValidationErrors up to a fixed capacity.

    Not thread safe: a collector is owned by a single conversion.
    """

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS) -> None:
        if max_errors <= 0:
            raise ValueError(f"max_errors must be >= 1: {max_errors}")
        self._max_errors = max_errors
        self._errors: list[ValidationError] = []
        self._truncated = False

    def add(self, error: ValidationError) -> None:
        if len(self._errors) < self._max_errors:
            self._errors.append(error)
        else:
            self._truncated = True

    def errors(self) -> tuple[ValidationError, ...]:
        """Snapshot of the held errors in insertion order."""
        return tuple(self._errors)

    def has_errors(self) -> bool:
        return bool(self._errors)

    def size(self) -> int:
        return len(self._errors)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._errors)

    def is_truncated(self) -> bool:
        return self._truncated

    @property
    def max_errors(self) -> int:
        return self._max_errors
