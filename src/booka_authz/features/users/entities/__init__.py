"""User entities and protocols."""

from .protocols import UserProfileLoader
from .unified_user import AuthenticatedIdentity, UnifiedUser

__all__ = ["AuthenticatedIdentity", "UnifiedUser", "UserProfileLoader"]
