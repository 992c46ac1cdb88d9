from .type_validator import check_value, validate_table

__all__ = [
    "check_value",
    "validate_table",
]
