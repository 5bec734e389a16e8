"""Value objects for booka-authz."""

from .identifiers import (
    IDENTIFIER_PATTERN,
    PERMISSION_PATTERN,
    PermissionCode,
    TenantId,
    UserId,
    is_valid_identifier,
    is_valid_permission,
)

__all__ = [
    "IDENTIFIER_PATTERN",
    "PERMISSION_PATTERN",
    "PermissionCode",
    "TenantId",
    "UserId",
    "is_valid_identifier",
    "is_valid_permission",
]
