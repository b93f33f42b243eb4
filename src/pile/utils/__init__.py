"""Utility modules for Pile."""

from pile.utils.name_validator import (
    normalize_name,
    validate_name,
    clean_name,
    is_valid_name,
)

__all__ = [
    "normalize_name",
    "validate_name",
    "clean_name",
    "is_valid_name",
]
