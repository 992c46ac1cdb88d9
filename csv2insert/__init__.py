"""Format D CSV -> transactional SQL INSERT script converter."""

from .models.convert_result import ConvertFailure, ConvertRequest, ConvertResult, ConvertSuccess
from .services.pipeline import convert

__version__ = "0.1.0"

__all__ = [
    "convert",
    "ConvertRequest",
    "ConvertResult",
    "ConvertSuccess",
    "ConvertFailure",
]
