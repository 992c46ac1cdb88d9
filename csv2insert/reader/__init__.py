from .format_d import parse_format_d, strip_bom

__all__ = [
    "parse_format_d",
    "strip_bom",
]
