"""Access decision engine.

Runs the ordered rule pipeline for one operation and classifies the outcome:

1. identity         the user resolves in the context tenant
2. tenant_isolation target tenant equals the user's tenant (superadmin exempt)
3. base_permission  the permission is in the resolved set
4. ownership        ``own`` scope requires the caller to own the target
5. time_window      the injected clock falls inside the window
6. ip_restriction   the client address is allow-listed

The first failing rule ends evaluation with a denial; later rules cannot
undo it.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from ....config.constants import SecurityLevel
from ....core.exceptions import IndeterminateAccessError
from ....core.value_objects import PermissionCode, is_valid_identifier, is_valid_permission
from ....utils.datetime import Clock, utc_now
from ...audit.services.audit_emitter import AuditEmitter
from ...context.entities.permission_context import PermissionContext
from ...roles.entities.role import Role
from ...roles.services.role_hierarchy import role_satisfies
from ..entities.access_result import AccessResult, AccessRule, DenialReason
from ..entities.permission_set import RolePermissionSet, TenantAccess
from ..entities.protocols import AccessDecider
from .audit_events import build_audit_event
from .classification import classify, derive_operation
from .permission_resolver import PermissionResolver
from .restrictions import ip_allowed

logger = logging.getLogger(__name__)


class AccessDecisionEngine(AccessDecider):
    """Contextual, fail-closed access decisions on top of a PermissionResolver."""

    def __init__(
        self,
        resolver: PermissionResolver,
        audit_emitter: Optional[AuditEmitter] = None,
        clock: Clock = utc_now,
        require_owner_for_own_scope: bool = False,
    ):
        self.resolver = resolver
        self.audit_emitter = audit_emitter
        self.clock = clock
        self.require_owner_for_own_scope = require_owner_for_own_scope

    # Boolean checks delegate to the resolver

    async def has_permission(self, user_id: str, tenant_id: Optional[str], permission: str) -> bool:
        return await self.resolver.has_permission(user_id, tenant_id, permission)

    async def has_all_permissions(self, user_id: str, tenant_id: Optional[str], permissions: Iterable[str]) -> bool:
        return await self.resolver.has_all_permissions(user_id, tenant_id, permissions)

    async def has_any_permissions(self, user_id: str, tenant_id: Optional[str], permissions: Iterable[str]) -> bool:
        return await self.resolver.has_any_permissions(user_id, tenant_id, permissions)

    async def check_access(self, user_id: str, permission: str, context: PermissionContext) -> AccessResult:
        """Decide whether ``user_id`` may perform ``permission`` in ``context``.

        Never raises for infrastructure failures; those become critical denials.

        Args:
            user_id: Authenticated user identifier
            permission: ``resource:action:scope`` string
            context: Per-call permission context

        Returns:
            AccessResult with decision, reason and classification
        """
        code = PermissionCode(permission) if is_valid_permission(permission) else None
        if code is None:
            logger.error(f"Malformed permission string {permission!r} checked for user {user_id}")

        applied: List[str] = []
        permission_set: Optional[RolePermissionSet] = None
        failed_rule: Optional[str] = None
        reason: Optional[str] = None

        applied.append(AccessRule.IDENTITY)
        if context.user_id != user_id:
            logger.warning(f"Context user {context.user_id} does not match caller {user_id}")
            failed_rule, reason = AccessRule.IDENTITY, DenialReason.USER_NOT_FOUND
        else:
            try:
                permission_set = await self.resolver.get_permission_set(user_id, context.tenant_id)
            except IndeterminateAccessError as e:
                logger.error(f"Denying {permission} for {user_id}: {e.message}")
                failed_rule, reason = AccessRule.IDENTITY, DenialReason.INDETERMINATE
            else:
                if permission_set is None:
                    logger.warning(f"User {user_id} not found in tenant {context.tenant_id}")
                    failed_rule, reason = AccessRule.IDENTITY, DenialReason.USER_NOT_FOUND

        if failed_rule is None:
            failed_rule, reason = self._evaluate(user_id, code, context, permission_set, applied)

        result = self._finish(
            granted=failed_rule is None,
            reason=reason,
            failed_rule=failed_rule,
            applied=applied,
            code=code,
            context=context,
            permission_set=permission_set,
        )
        self._log_decision(user_id, permission, context, result)

        if self.audit_emitter is not None and result.audit_required:
            tenant_id = permission_set.tenant_id if permission_set else context.tenant_id
            self.audit_emitter.emit(
                build_audit_event(user_id, tenant_id, permission, result, self.clock(), context)
            )
        return result

    def _evaluate(
        self,
        user_id: str,
        code: Optional[PermissionCode],
        context: PermissionContext,
        permission_set: RolePermissionSet,
        applied: List[str],
    ):
        """Rules 2-6. Returns ``(failed_rule, reason)``; ``(None, None)`` grants."""
        applied.append(AccessRule.TENANT_ISOLATION)
        if (
            context.target_tenant_id
            and context.target_tenant_id != permission_set.tenant_id
            and not permission_set.is_super_admin
        ):
            logger.warning(
                f"Cross-tenant access attempt: user {user_id} of tenant {permission_set.tenant_id} "
                f"targeted tenant {context.target_tenant_id}"
            )
            return AccessRule.TENANT_ISOLATION, DenialReason.TENANT_ISOLATION

        applied.append(AccessRule.BASE_PERMISSION)
        if code is None or not permission_set.allows(code.value):
            return AccessRule.BASE_PERMISSION, DenialReason.PERMISSION_NOT_GRANTED

        if code.is_own_scoped:
            applied.append(AccessRule.OWNERSHIP)
            owner = context.resource_owner_id or context.target_user_id
            if owner is None:
                if self.require_owner_for_own_scope:
                    return AccessRule.OWNERSHIP, DenialReason.SELF_ACCESS
            elif owner != user_id:
                return AccessRule.OWNERSHIP, DenialReason.SELF_ACCESS

        if context.time_restriction is not None:
            applied.append(AccessRule.TIME_WINDOW)
            if not context.time_restriction.contains(self.clock()):
                return AccessRule.TIME_WINDOW, DenialReason.OUTSIDE_TIME_WINDOW

        if context.allowed_ips is not None:
            applied.append(AccessRule.IP_RESTRICTION)
            if not ip_allowed(context.ip_address, context.allowed_ips):
                return AccessRule.IP_RESTRICTION, DenialReason.IP_RESTRICTION

        return None, None

    def _finish(
        self,
        granted: bool,
        reason: Optional[str],
        failed_rule: Optional[str],
        applied: List[str],
        code: Optional[PermissionCode],
        context: PermissionContext,
        permission_set: Optional[RolePermissionSet],
    ) -> AccessResult:
        operation, resource = derive_operation(code, context)
        tenant_context_valid = is_valid_identifier(context.tenant_id) and (
            context.target_tenant_id is None or is_valid_identifier(context.target_tenant_id)
        )
        classification = classify(
            granted=granted,
            failed_rule=failed_rule,
            operation=operation,
            resource=resource,
            permission=code.value if code else None,
            role=permission_set.role if permission_set else None,
            is_super_admin=permission_set.is_super_admin if permission_set else False,
            tenant_context_valid=tenant_context_valid,
        )
        return AccessResult(
            granted=granted,
            reason=reason,
            audit_required=classification.audit_required,
            security_level=classification.security_level,
            applied_rules=tuple(applied),
        )

    @staticmethod
    def _log_decision(user_id: str, permission: str, context: PermissionContext, result: AccessResult) -> None:
        if result.granted:
            logger.debug(f"Granted {permission} to {user_id} in tenant {context.tenant_id}")
        elif result.security_level == SecurityLevel.CRITICAL:
            logger.warning(
                f"Denied {permission} to {user_id} in tenant {context.tenant_id}: "
                f"{result.reason} (critical)"
            )
        else:
            logger.info(f"Denied {permission} to {user_id} in tenant {context.tenant_id}: {result.reason}")

    async def check_access_many(
        self,
        user_id: str,
        permissions: Sequence[str],
        context: PermissionContext,
        require_all: bool = True,
    ) -> AccessResult:
        """Evaluate several permissions against one context.

        With ``require_all`` the first denial is returned; otherwise the first
        grant is. An empty list is a denial.
        """
        if not permissions:
            return AccessResult(granted=False, reason=DenialReason.PERMISSION_NOT_GRANTED)

        result: Optional[AccessResult] = None
        for permission in permissions:
            result = await self.check_access(user_id, permission, context)
            if require_all and not result.granted:
                return result
            if not require_all and result.granted:
                return result
        return result

    async def validate_tenant_access(
        self,
        user_id: str,
        tenant_id: str,
        required_roles: Optional[Iterable[Union[Role, str]]] = None,
    ) -> Optional[TenantAccess]:
        """Membership check with an optional role requirement.

        Returns None when the user is not an active member of ``tenant_id`` or
        holds none of ``required_roles`` (inheritance counts). Superadmins
        always pass.

        Raises:
            IndeterminateAccessError: If the user profile could not be loaded
        """
        permission_set = await self.resolver.get_permission_set(user_id, tenant_id)
        if permission_set is None:
            return None

        if not permission_set.is_super_admin:
            if permission_set.tenant_id != tenant_id:
                return None
            roles = list(required_roles or ())
            if roles and not any(role_satisfies(permission_set.role, role) for role in roles):
                logger.info(f"User {user_id} lacks required roles {roles} in tenant {tenant_id}")
                return None

        return TenantAccess(
            user_id=user_id,
            tenant_id=tenant_id,
            role=permission_set.role,
            is_super_admin=permission_set.is_super_admin,
        )

    async def ensure_owner(self, user_id: str, tenant_id: str) -> bool:
        return await self.validate_tenant_access(user_id, tenant_id, [Role.OWNER]) is not None

    async def ensure_manager(self, user_id: str, tenant_id: str) -> bool:
        return await self.validate_tenant_access(user_id, tenant_id, [Role.MANAGER]) is not None

    def require_role(self, roles: Iterable[Union[Role, str]]) -> "RoleGuard":
        """Build a transport-neutral role guard bound to this engine."""
        from ...guards.role_guard import RoleGuard
        return RoleGuard(self.resolver, roles)

    async def invalidate_user(self, user_id: str, tenant_id: Optional[str] = None) -> int:
        return await self.resolver.invalidate_user(user_id, tenant_id)

    async def invalidate_tenant(self, tenant_id: str) -> int:
        return await self.resolver.invalidate_tenant(tenant_id)
