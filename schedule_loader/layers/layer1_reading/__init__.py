"""Layer 1: Reading - plain/gzip document detection."""

from .document_reader import DocumentReader

__all__ = ["DocumentReader"]
