"""Value objects for identifiers in booka-authz.

Immutable, validated wrappers for user ids, tenant ids and permission
strings. Permission strings are the binding contract between the engine and
every caller, so ``PermissionCode`` is strict.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from ..exceptions.auth import InvalidPermissionError
from ...config.constants import PermissionScope

PERMISSION_PATTERN: Pattern[str] = re.compile(r"[a-z_]+:[a-z_]+:(own|all)")
IDENTIFIER_PATTERN: Pattern[str] = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.:@-]{0,127}")


def is_valid_identifier(value: Optional[str]) -> bool:
    """Check that a user or tenant identifier is well formed."""
    return isinstance(value, str) and bool(IDENTIFIER_PATTERN.fullmatch(value))


def is_valid_permission(value: Optional[str]) -> bool:
    """Check a permission string against the resource:action:scope grammar."""
    return isinstance(value, str) and bool(PERMISSION_PATTERN.fullmatch(value))


@dataclass(frozen=True)
class UserId:
    """User identifier value object."""
    value: str

    def __post_init__(self):
        if not is_valid_identifier(self.value):
            raise ValueError(f"UserId must be a non-empty identifier, got: {self.value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TenantId:
    """Tenant identifier value object."""
    value: str

    def __post_init__(self):
        if not is_valid_identifier(self.value):
            raise ValueError(f"TenantId must be a non-empty identifier, got: {self.value!r}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PermissionCode:
    """Immutable value object for a ``resource:action:scope`` permission."""

    value: str

    def __post_init__(self):
        """Validate permission code format: resource:action:(own|all)"""
        if not is_valid_permission(self.value):
            raise InvalidPermissionError(str(self.value))

    @classmethod
    def parse(cls, value: str) -> "PermissionCode":
        return cls(value)

    @property
    def resource(self) -> str:
        """Extract resource part from permission code."""
        return self.value.split(":")[0]

    @property
    def action(self) -> str:
        """Extract action part from permission code."""
        return self.value.split(":")[1]

    @property
    def scope(self) -> PermissionScope:
        """Extract scope part from permission code."""
        return PermissionScope(self.value.split(":")[2])

    @property
    def is_own_scoped(self) -> bool:
        return self.scope == PermissionScope.OWN

    def __str__(self) -> str:
        return self.value
