"""UserProfileLoader implementations."""

from .asyncpg_user_loader import AsyncPGUserProfileLoader
from .memory_user_loader import InMemoryUserDirectory

__all__ = ["AsyncPGUserProfileLoader", "InMemoryUserDirectory"]
