"""Context feature: per-call PermissionContext assembly."""

from .entities import PermissionContext, RequestData, TimeRestriction
from .services import METHOD_OPERATIONS, ContextExtractor

__all__ = [
    "PermissionContext",
    "RequestData",
    "TimeRestriction",
    "METHOD_OPERATIONS",
    "ContextExtractor",
]
