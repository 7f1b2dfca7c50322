"""유틸리티 모듈."""

from .validation import (
    validate_filename,
    validate_file_size,
    validate_file_extension,
)

__all__ = [
    "validate_filename",
    "validate_file_size",
    "validate_file_extension",
]
