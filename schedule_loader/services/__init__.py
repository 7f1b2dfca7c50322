"""Services for the schedule loader."""

from .converter import ScheduleConverter, get_converter
from .file_storage import TrackerStore, get_tracker_store
from .importer import TaskImporter, priority_name

__all__ = [
    "ScheduleConverter",
    "get_converter",
    "TrackerStore",
    "get_tracker_store",
    "TaskImporter",
    "priority_name",
]
