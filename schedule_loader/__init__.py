"""MS Project XML schedule import/export engine."""

__version__ = "1.0.0"
