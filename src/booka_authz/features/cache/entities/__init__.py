"""Cache entities and protocols."""

from .protocols import PermissionSetStore

__all__ = ["PermissionSetStore"]
