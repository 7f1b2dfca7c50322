"""Conversion layers for the schedule loader."""

# Note: Import layers individually
# Use: from schedule_loader.layers.layer1_reading import DocumentReader
# Use: from schedule_loader.layers.layer2_schema import SchemaExtractor
# Use: from schedule_loader.layers.layer3_hierarchy import TaskExtractor, HierarchyReconstructor
# Use: from schedule_loader.layers.layer4_assignment import ResourceResolver
# Use: from schedule_loader.layers.layer5_export import ExportTreeBuilder, ScheduleSerializer

__all__ = [
    "layer1_reading",
    "layer2_schema",
    "layer3_hierarchy",
    "layer4_assignment",
    "layer5_export",
]
