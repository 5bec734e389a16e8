"""Static permission catalog and role inheritance graph.

Each role lists only the permissions it adds; inherited permissions come from
``ROLE_SUBORDINATES`` at resolution time.
"""

from typing import Dict, FrozenSet, Tuple

from .role import Role

ROLE_SUBORDINATES: Dict[Role, Tuple[Role, ...]] = {
    Role.SUPERADMIN: (Role.OWNER,),
    Role.OWNER: (Role.MANAGER,),
    Role.MANAGER: (Role.STAFF,),
    Role.STAFF: (),
}

ROLE_PERMISSIONS: Dict[Role, FrozenSet[str]] = {
    Role.STAFF: frozenset({
        "booking:read:own",
        "booking:create:own",
        "booking:update:own",
        "schedule:read:own",
        "schedule:update:own",
        "profile:read:own",
        "profile:update:own",
        "task:read:own",
        "task:update:own",
        "analytics:read:own",
        "service:read:all",
    }),
    Role.MANAGER: frozenset({
        "booking:read:all",
        "booking:create:all",
        "booking:update:all",
        "schedule:read:all",
        "schedule:update:all",
        "team:read:all",
        "team:manage:all",
        "user:read:all",
        "analytics:read:all",
        "report:read:all",
        "report:export:all",
        "messaging:read:all",
        "messaging:send:all",
        "service:update:all",
    }),
    Role.OWNER: frozenset({
        "booking:delete:all",
        "tenant:read:all",
        "tenant:update:all",
        "tenant:manage:all",
        "tenant:configure:all",
        "user:create:all",
        "user:update:all",
        "user:delete:all",
        "user:manage:all",
        "billing:read:all",
        "billing:manage:all",
        "billing:refund:all",
        "service:create:all",
        "service:delete:all",
        "integration:manage:all",
        "api_key:manage:all",
        "audit:read:all",
    }),
    Role.SUPERADMIN: frozenset({
        "system:read:all",
        "system:manage:all",
        "system:configure:all",
        "tenant:create:all",
        "tenant:delete:all",
        "audit:export:all",
    }),
}
