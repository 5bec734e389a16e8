"""Role hierarchy resolution.

Pure functions over the static catalog: no I/O, deterministic, safe to call
from any number of concurrent decisions.
"""

import logging
from functools import lru_cache
from typing import Dict, FrozenSet, Iterable, Mapping, Set, Tuple, Union

from ....core.exceptions import ConfigurationError
from ....core.value_objects import is_valid_permission
from ..entities.catalog import ROLE_PERMISSIONS, ROLE_SUBORDINATES
from ..entities.role import Role, coerce_role, get_role_level

logger = logging.getLogger(__name__)


def validate_catalog(
    permissions: Mapping[Role, Iterable[str]] = ROLE_PERMISSIONS,
    subordinates: Mapping[Role, Tuple[Role, ...]] = ROLE_SUBORDINATES,
) -> None:
    """Check catalog entries against the permission grammar and the graph for cycles.

    Raises:
        ConfigurationError: If any entry is malformed or the graph is cyclic
    """
    for role, perms in permissions.items():
        bad = sorted(p for p in perms if not is_valid_permission(p))
        if bad:
            raise ConfigurationError(
                f"Role {role.value} has malformed permissions: {bad}",
                details={"role": role.value, "permissions": bad},
            )

    visiting: Set[Role] = set()
    done: Set[Role] = set()

    def visit(role: Role) -> None:
        if role in done:
            return
        if role in visiting:
            raise ConfigurationError(f"Role hierarchy contains a cycle at {role.value}")
        visiting.add(role)
        for child in subordinates.get(role, ()):
            visit(child)
        visiting.discard(role)
        done.add(role)

    for role in subordinates:
        visit(role)


def _walk(role: Role) -> Tuple[Role, ...]:
    """Role plus all transitive subordinates, breadth first."""
    ordered = [role]
    seen = {role}
    index = 0
    while index < len(ordered):
        for child in ROLE_SUBORDINATES.get(ordered[index], ()):
            if child not in seen:
                seen.add(child)
                ordered.append(child)
        index += 1
    return tuple(ordered)


@lru_cache(maxsize=None)
def _resolve(role: Role) -> FrozenSet[str]:
    resolved: Set[str] = set()
    for member in _walk(role):
        resolved |= ROLE_PERMISSIONS.get(member, frozenset())
    return frozenset(resolved)


def resolve_role_permissions(role: Union[Role, str, None]) -> FrozenSet[str]:
    """Effective permission set of a role, including everything it inherits.

    Args:
        role: Role or exact role name

    Returns:
        Frozen set of permission strings; empty for an unknown role
    """
    resolved = coerce_role(role)
    if resolved is None:
        logger.debug(f"Unknown role {role!r} resolves to no permissions")
        return frozenset()
    return _resolve(resolved)


def subordinates_of(role: Union[Role, str, None]) -> FrozenSet[Role]:
    """All roles a role inherits from, excluding itself."""
    resolved = coerce_role(role)
    if resolved is None:
        return frozenset()
    return frozenset(_walk(resolved)[1:])


def role_satisfies(actual: Union[Role, str, None], required: Union[Role, str, None]) -> bool:
    """True when ``actual`` is ``required`` or inherits from it."""
    actual_role = coerce_role(actual)
    required_role = coerce_role(required)
    if actual_role is None or required_role is None:
        return False
    return required_role in _walk(actual_role)


def can_act_on_role(acting: Union[Role, str, None], target: Union[Role, str, None]) -> bool:
    """Whether a user with ``acting`` role may manage a user holding ``target``.

    Managers act on staff, owners on managers and staff; nobody acts on a peer
    or a superior. Superadmins act on every role.
    """
    acting_role = coerce_role(acting)
    target_role = coerce_role(target)
    if acting_role is None or target_role is None:
        return False
    if acting_role == Role.SUPERADMIN:
        return True
    return get_role_level(acting_role) > get_role_level(target_role)


def catalog_permissions() -> FrozenSet[str]:
    """Every permission string defined anywhere in the catalog."""
    return _resolve(Role.SUPERADMIN)


def describe_catalog() -> Dict[str, Dict[str, object]]:
    """Catalog summary keyed by role name, for diagnostics endpoints."""
    return {
        role.value: {
            "inherits": sorted(r.value for r in subordinates_of(role)),
            "explicit": sorted(ROLE_PERMISSIONS.get(role, frozenset())),
            "effective_count": len(_resolve(role)),
        }
        for role in Role
    }


validate_catalog()
