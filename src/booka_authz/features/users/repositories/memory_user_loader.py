"""In-memory user directory."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Union

from ...roles.entities.role import Role, coerce_role
from ..entities.protocols import UserProfileLoader
from ..entities.unified_user import UnifiedUser

logger = logging.getLogger(__name__)


@dataclass
class _DirectoryRecord:
    memberships: Dict[str, Role] = field(default_factory=dict)
    super_admin: bool = False
    active: bool = True


class InMemoryUserDirectory(UserProfileLoader):
    """Dictionary-backed UserProfileLoader.

    Memberships keep insertion order; the first one is the user's primary
    tenant when no hint is given.
    """

    def __init__(self):
        self._records: Dict[str, _DirectoryRecord] = {}
        self.load_count = 0

    def add_member(self, user_id: str, tenant_id: str, role: Union[Role, str]) -> None:
        resolved = coerce_role(role)
        if resolved is None or resolved == Role.SUPERADMIN:
            raise ValueError(f"Invalid tenant role: {role!r}")
        self._records.setdefault(user_id, _DirectoryRecord()).memberships[tenant_id] = resolved

    def remove_member(self, user_id: str, tenant_id: str) -> None:
        record = self._records.get(user_id)
        if record:
            record.memberships.pop(tenant_id, None)

    def add_superadmin(self, user_id: str) -> None:
        self._records.setdefault(user_id, _DirectoryRecord()).super_admin = True

    def set_active(self, user_id: str, active: bool) -> None:
        if user_id in self._records:
            self._records[user_id].active = active

    def tenants_of(self, user_id: str) -> Set[str]:
        record = self._records.get(user_id)
        return set(record.memberships) if record else set()

    async def load_user(self, user_id: str, tenant_hint: Optional[str] = None) -> Optional[UnifiedUser]:
        self.load_count += 1
        record = self._records.get(user_id)
        if record is None or not record.active:
            return None

        if tenant_hint:
            role = record.memberships.get(tenant_hint)
            tenant_id = tenant_hint
        elif record.memberships:
            tenant_id, role = next(iter(record.memberships.items()))
        else:
            tenant_id, role = None, None

        if record.super_admin:
            return UnifiedUser(
                id=user_id,
                tenant_id=tenant_id,
                role=role or Role.SUPERADMIN,
                is_super_admin=True,
            )

        if role is None:
            logger.debug(f"User {user_id} is not a member of tenant {tenant_hint}")
            return None

        return UnifiedUser(id=user_id, tenant_id=tenant_id, role=role)
