"""Users feature: identity resolution into UnifiedUser."""

from .entities import AuthenticatedIdentity, UnifiedUser, UserProfileLoader
from .repositories import AsyncPGUserProfileLoader, InMemoryUserDirectory

__all__ = [
    "AuthenticatedIdentity",
    "UnifiedUser",
    "UserProfileLoader",
    "AsyncPGUserProfileLoader",
    "InMemoryUserDirectory",
]
