"""Layer 2: Schema - namespace-agnostic document tree and field lookups."""

from .schema_extractor import (
    DocumentTree,
    SchemaExtractor,
    text_of,
    lenient_int,
    strict_int,
    date_part,
)

__all__ = [
    "DocumentTree",
    "SchemaExtractor",
    "text_of",
    "lenient_int",
    "strict_int",
    "date_part",
]
