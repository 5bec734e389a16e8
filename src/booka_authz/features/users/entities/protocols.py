"""Protocol interfaces for the users feature."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .unified_user import UnifiedUser


@runtime_checkable
class UserProfileLoader(Protocol):
    """Resolves an authenticated identity into a UnifiedUser."""

    @abstractmethod
    async def load_user(self, user_id: str, tenant_hint: Optional[str] = None) -> Optional[UnifiedUser]:
        """Load the user as seen from ``tenant_hint``.

        Returns None when the user is inactive, absent, or not a member of the
        hinted tenant (superadmins excepted). Raises UserLoaderError when the
        backing store cannot answer.
        """
        ...
