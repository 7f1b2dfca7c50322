"""Layer 3: Hierarchy - flat task extraction and category inference."""

from .task_extractor import TaskExtractor
from .hierarchy import HierarchyReconstructor, category_label

__all__ = [
    "TaskExtractor",
    "HierarchyReconstructor",
    "category_label",
]
