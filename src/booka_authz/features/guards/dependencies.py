"""FastAPI authorization dependencies.

Identity is expected on ``request.state.user_id`` and
``request.state.tenant_id``, set by the authentication layer in front of
the application.
"""

import logging
from typing import Any, Optional, Union

from fastapi import HTTPException, Request, status

from ...core.value_objects import PermissionCode
from ..context.entities.request_data import RequestData
from ..context.services.context_extractor import ContextExtractor
from ..permissions.entities.access_result import AccessResult, DenialReason
from ..permissions.services.access_engine import AccessDecisionEngine
from ..roles.entities.role import Role
from ..users.entities.unified_user import AuthenticatedIdentity
from .role_guard import GuardResult

logger = logging.getLogger(__name__)

DENIAL_STATUS = {
    DenialReason.USER_NOT_FOUND: status.HTTP_401_UNAUTHORIZED,
    DenialReason.INDETERMINATE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class AccessDependencyError(HTTPException):
    """HTTP error raised by authorization dependencies."""

    def __init__(self, error: str, status_code: int = status.HTTP_403_FORBIDDEN, reason: Optional[str] = None):
        super().__init__(status_code=status_code, detail={"error": error, "reason": reason or error})


def identity_from_request(request: Request) -> Optional[AuthenticatedIdentity]:
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        return None
    return AuthenticatedIdentity(user_id=str(user_id), tenant_id=getattr(request.state, "tenant_id", None))


class AccessDependencies:
    """FastAPI dependency factory around an AccessDecisionEngine."""

    def __init__(self, engine: AccessDecisionEngine, extractor: Optional[ContextExtractor] = None):
        self.engine = engine
        self.extractor = extractor or ContextExtractor()

    def require_permission(self, permission: Union[str, PermissionCode], **overrides: Any):
        """Require ``permission`` for the request, with optional server-side context."""
        # Fail at route definition time for malformed permissions
        code = permission if isinstance(permission, PermissionCode) else PermissionCode(permission)

        async def dependency(request: Request) -> AccessResult:
            identity = identity_from_request(request)
            if identity is None:
                raise AccessDependencyError("Authentication required", status.HTTP_401_UNAUTHORIZED)

            data = await RequestData.from_request(request)
            context = self.extractor.extract(identity, data, overrides)
            result = await self.engine.check_access(identity.user_id, code.value, context)
            if not result.granted:
                raise AccessDependencyError(
                    "Access denied",
                    DENIAL_STATUS.get(result.reason, status.HTTP_403_FORBIDDEN),
                    reason=result.reason,
                )
            return result

        return dependency

    def require_role(self, *roles: Union[Role, str]):
        """Require one of ``roles`` in the request's tenant."""
        guard = self.engine.require_role(roles)

        async def dependency(request: Request) -> GuardResult:
            identity = identity_from_request(request)
            if identity is None:
                raise AccessDependencyError("Authentication required", status.HTTP_401_UNAUTHORIZED)

            data = await RequestData.from_request(request, read_body=False)
            target_tenant_id = self.extractor.extract(identity, data).target_tenant_id
            result = await guard.check(identity.user_id, identity.tenant_id, target_tenant_id)
            if not result.allowed:
                raise AccessDependencyError(result.error, result.status_code)
            return result

        return dependency
