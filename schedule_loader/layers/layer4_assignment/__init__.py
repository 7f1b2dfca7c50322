"""Layer 4: Assignment - resource to user binding."""

from .resource_resolver import ResourceResolver, NOT_USER_ASSIGNED

__all__ = ["ResourceResolver", "NOT_USER_ASSIGNED"]
