from .collector import DEFAULT_MAX_ERRORS, ErrorCollector

__all__ = [
    "DEFAULT_MAX_ERRORS",
    "ErrorCollector",
]
