"""Layer 5: Export - outline numbering and MS Project XML serialization."""

from .tree_builder import ExportTreeBuilder
from .serializer import (
    ScheduleSerializer,
    PRIORITY_VALUES,
    priority_value,
    ms_xml_time,
    export_filename,
)

__all__ = [
    "ExportTreeBuilder",
    "ScheduleSerializer",
    "PRIORITY_VALUES",
    "priority_value",
    "ms_xml_time",
    "export_filename",
]
