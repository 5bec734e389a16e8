"""UserProfileLoader implementation using AsyncPG."""

import asyncio
import logging
import re
from typing import Optional

import asyncpg

from ....core.exceptions import UserLoaderError
from ...roles.entities.role import Role, normalize_role
from ..entities.protocols import UserProfileLoader
from ..entities.unified_user import UnifiedUser

logger = logging.getLogger(__name__)

SCHEMA_PATTERN = re.compile(r"[a-z_][a-z0-9_]{0,62}")


class AsyncPGUserProfileLoader(UserProfileLoader):
    """Loads users from the ``admins`` and ``tenant_users`` tables.

    Superadmin status comes only from ``admins``; tenant roles only from
    active ``tenant_users`` rows.
    """

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        self.pool = pool
        self.schema = self._validate_schema_name(schema)

    @staticmethod
    def _validate_schema_name(schema_name: str) -> str:
        """Validate schema name to prevent SQL injection."""
        if SCHEMA_PATTERN.fullmatch(schema_name or ""):
            return schema_name
        raise ValueError(f"Invalid schema name: {schema_name}")

    async def load_user(self, user_id: str, tenant_hint: Optional[str] = None) -> Optional[UnifiedUser]:
        try:
            async with self.pool.acquire() as conn:
                is_admin = await conn.fetchval(
                    f"SELECT is_active FROM {self.schema}.admins WHERE user_id = $1",
                    user_id,
                )
                if tenant_hint:
                    membership = await conn.fetchrow(
                        f"""
                        SELECT tenant_id, role
                        FROM {self.schema}.tenant_users
                        WHERE user_id = $1 AND tenant_id = $2 AND status = 'active'
                        LIMIT 1
                        """,
                        user_id,
                        tenant_hint,
                    )
                else:
                    membership = await conn.fetchrow(
                        f"""
                        SELECT tenant_id, role
                        FROM {self.schema}.tenant_users
                        WHERE user_id = $1 AND status = 'active'
                        ORDER BY created_at ASC
                        LIMIT 1
                        """,
                        user_id,
                    )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to load user profile for {user_id}: {e}")
            raise UserLoaderError(
                "User profile store unavailable",
                details={"user_id": user_id, "tenant_hint": tenant_hint},
            ) from e

        return self._build_user(user_id, tenant_hint, bool(is_admin), membership)

    def _build_user(self, user_id: str, tenant_hint: Optional[str], is_admin: bool, membership) -> Optional[UnifiedUser]:
        if is_admin:
            if membership is not None:
                role = normalize_role(membership["role"]) or Role.SUPERADMIN
                tenant_id = str(membership["tenant_id"])
            else:
                role = Role.SUPERADMIN
                tenant_id = tenant_hint
            return UnifiedUser(id=user_id, tenant_id=tenant_id, role=role, is_super_admin=True)

        if membership is None:
            return None

        role = normalize_role(membership["role"])
        if role is None or role == Role.SUPERADMIN:
            # Platform rights are never granted through a tenant membership row
            logger.warning(f"Ignoring membership of {user_id} with unusable role {membership['role']!r}")
            return None

        return UnifiedUser(id=user_id, tenant_id=str(membership["tenant_id"]), role=role)
