"""Data models for the schedule loader."""

from .schedule import (
    PredecessorLink,
    ParsedTask,
    ResourceBinding,
    ConversionResult,
)
from .tracker import (
    User,
    ProjectMember,
    Tracker,
    Version,
    WorkItem,
    Project,
    ProjectSnapshot,
)
from .export import ExportNode, ExportResult
from .processing import (
    ImportStatus,
    ImportTaskRequest,
    ImportBatchResult,
    ImportJob,
)
from .error import ErrorResponse

__all__ = [
    # Import-side models
    "PredecessorLink",
    "ParsedTask",
    "ResourceBinding",
    "ConversionResult",
    # Tracker models
    "User",
    "ProjectMember",
    "Tracker",
    "Version",
    "WorkItem",
    "Project",
    "ProjectSnapshot",
    # Export models
    "ExportNode",
    "ExportResult",
    # Import job models
    "ImportStatus",
    "ImportTaskRequest",
    "ImportBatchResult",
    "ImportJob",
    # Errors
    "ErrorResponse",
]
