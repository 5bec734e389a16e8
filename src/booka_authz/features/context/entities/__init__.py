"""Context entities."""

from .permission_context import PermissionContext, TimeRestriction
from .request_data import RequestData

__all__ = ["PermissionContext", "TimeRestriction", "RequestData"]
