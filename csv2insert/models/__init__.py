"""Domain models for the CSV (Format D) -> SQL INSERT converter."""

from .column_type import ColumnType
from .convert_result import ConvertFailure, ConvertRequest, ConvertResult, ConvertSuccess
from .error_record import ErrorRecord, ValidationError
from .stage_result import StageFailure, StageResult, StageSuccess
from .table import DataRow, ParsedTable, TableShapeError, TokenizedRow, TokenizedTable
from .value_token import TokenKind, ValueToken

__all__ = [
    "ColumnType",
    # Pipeline stage data
    "DataRow",
    "ParsedTable",
    "TokenizedRow",
    "TokenizedTable",
    "TableShapeError",
    "TokenKind",
    "ValueToken",
    # Errors
    "ValidationError",
    "ErrorRecord",
    # Outcomes
    "StageSuccess",
    "StageFailure",
    "StageResult",
    "ConvertRequest",
    "ConvertSuccess",
    "ConvertFailure",
    "ConvertResult",
]
