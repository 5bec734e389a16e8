"""Infrastructure exceptions for booka-authz."""

from .base import BookaAuthzError


class CacheError(BookaAuthzError):
    """Raised when the shared permission cache tier fails."""
    pass


class AuditDeliveryError(BookaAuthzError):
    """Raised by an audit sink that could not deliver an event."""
    pass
