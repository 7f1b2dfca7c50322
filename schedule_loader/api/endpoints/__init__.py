"""API endpoints package."""

from . import health
from . import loader
from . import jobs

__all__ = ["health", "loader", "jobs"]
