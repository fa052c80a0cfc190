"""
Core data models for be-valid.

All models use Pydantic for runtime validation and type safety.
"""

from .data_record import DataRecord
from .error_entry import ErrorEntry, Errors, humanize
from .validation_result import ValidationResult

__all__ = [
    "DataRecord",
    "ErrorEntry",
    "Errors",
    "ValidationResult",
    "humanize",
]
