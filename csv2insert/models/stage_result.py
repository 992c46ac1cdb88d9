from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .error_record import ValidationError

"""Stage outcome union shared by parser, tokenizer and validator.

A stage returns either StageSuccess (carrying the fully-formed successor object)
or StageFailure (a non-empty, capped error list plus the truncation flag).
Callers dispatch with isinstance / match; a failure has no value attribute.
"""

__all__ = [
    "StageSuccess",
    "StageFailure",
    "StageResult",
]

T = TypeVar("T")


@dataclass(frozen=True)
class StageSuccess(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class StageFailure:
    errors: tuple[ValidationError, ...]
    truncated: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", tuple(self.errors))
        if not self.errors:
            raise ValueError("StageFailure requires at least one error")

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def of(cls, errors: Sequence[ValidationError], truncated: bool) -> StageFailure:
        return cls(errors=tuple(errors), truncated=truncated)


StageResult = StageSuccess[T] | StageFailure
