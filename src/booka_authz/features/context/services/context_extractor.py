"""Build PermissionContext objects from authenticated identity and request data.

Request data is untrusted. Only the configured allow-list of headers is ever
read, and server-side facts (resource ownership, time windows, IP allow-lists)
can only arrive through explicit overrides supplied by the route handler.
"""

import ipaddress
import logging
from dataclasses import fields
from typing import Any, FrozenSet, List, Mapping, Optional, Union

from ....config.constants import SUSPICIOUS_HEADER_PREFIXES, OperationType
from ....config.settings import AuthzSettings, get_settings
from ...users.entities.unified_user import AuthenticatedIdentity
from ..entities.permission_context import PermissionContext
from ..entities.request_data import RequestData

logger = logging.getLogger(__name__)

METHOD_OPERATIONS = {
    "GET": OperationType.READ,
    "HEAD": OperationType.READ,
    "POST": OperationType.CREATE,
    "PUT": OperationType.UPDATE,
    "PATCH": OperationType.UPDATE,
    "DELETE": OperationType.DELETE,
}

TENANT_PATH_SEGMENTS = ("tenants", "tenant")

IDENTITY_FIELDS = frozenset({"user_id", "tenant_id"})
OVERRIDABLE_FIELDS: FrozenSet[str] = frozenset(
    f.name for f in fields(PermissionContext)
) - IDENTITY_FIELDS

IpNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first(*candidates: Any) -> Optional[str]:
    for candidate in candidates:
        cleaned = _clean(candidate)
        if cleaned is not None:
            return cleaned
    return None


class ContextExtractor:
    """Assembles a PermissionContext with a fixed source precedence.

    Target tenant: explicit override > path segment > tenant header > query
    parameter. Identity fields come only from the AuthenticatedIdentity.
    """

    def __init__(self, settings: Optional[AuthzSettings] = None):
        settings = settings or get_settings()
        self.tenant_header = settings.tenant_header
        self.request_id_header = settings.request_id_header
        self.forwarded_for_header = settings.forwarded_for_header
        self.allowed_headers = settings.allowed_headers
        self.trusted_proxies = self._parse_networks(settings.trusted_proxies)

    @staticmethod
    def _parse_networks(entries: List[str]) -> List[IpNetwork]:
        networks = []
        for entry in entries:
            try:
                networks.append(ipaddress.ip_network(entry, strict=False))
            except ValueError:
                logger.warning(f"Ignoring invalid trusted proxy entry: {entry!r}")
        return networks

    def extract(
        self,
        identity: AuthenticatedIdentity,
        request: Optional[RequestData] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> PermissionContext:
        """Build the context for one decision.

        Args:
            identity: Server-validated identity of the caller
            request: Raw request facts, if the call originates from a request
            overrides: Explicit context values supplied by the route handler

        Returns:
            PermissionContext for a single check_access call

        Raises:
            ValueError: If overrides name unknown fields or try to replace identity
        """
        overrides = dict(overrides or {})
        forbidden = IDENTITY_FIELDS & overrides.keys()
        if forbidden:
            raise ValueError(f"Identity fields cannot be overridden: {sorted(forbidden)}")
        unknown = overrides.keys() - OVERRIDABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown context fields: {sorted(unknown)}")

        request = request or RequestData()
        self._warn_on_ignored_headers(identity, request)

        path_params = request.path_params or {}
        body = request.body or {}

        values = {
            "target_tenant_id": _first(
                overrides.get("target_tenant_id"),
                self._tenant_from_path(request),
                request.header(self.tenant_header),
                request.query_params.get("tenant_id"),
            ),
            "target_user_id": _first(
                overrides.get("target_user_id"),
                path_params.get("user_id"),
                path_params.get("target_user_id"),
                body.get("target_user_id"),
            ),
            "resource_id": _first(
                overrides.get("resource_id"),
                path_params.get("resource_id"),
                path_params.get("id"),
                body.get("resource_id"),
            ),
            "ip_address": _first(overrides.get("ip_address"), self._client_ip(request)),
            "request_id": _first(overrides.get("request_id"), request.header(self.request_id_header)),
            "operation_type": overrides.get("operation_type") or METHOD_OPERATIONS.get(request.method),
        }

        # Server-side facts; never read from the request
        for name in ("resource_owner_id", "allowed_ips", "time_restriction", "resource_type"):
            values[name] = overrides.get(name)

        return PermissionContext(
            user_id=identity.user_id,
            tenant_id=identity.tenant_id,
            **values,
        )

    def _tenant_from_path(self, request: RequestData) -> Optional[str]:
        from_params = _clean((request.path_params or {}).get("tenant_id"))
        if from_params:
            return from_params
        segments = [segment for segment in request.path.split("/") if segment]
        for index, segment in enumerate(segments[:-1]):
            if segment.lower() in TENANT_PATH_SEGMENTS:
                return _clean(segments[index + 1])
        return None

    def _client_ip(self, request: RequestData) -> Optional[str]:
        host = _clean(request.client_host)
        if host is None:
            return None
        forwarded = request.header(self.forwarded_for_header)
        if forwarded and self._is_trusted_proxy(host):
            return _clean(forwarded.split(",")[0]) or host
        return host

    def _is_trusted_proxy(self, host: str) -> bool:
        try:
            address = ipaddress.ip_address(host)
        except ValueError:
            return False
        return any(address in network for network in self.trusted_proxies)

    def _warn_on_ignored_headers(self, identity: AuthenticatedIdentity, request: RequestData) -> None:
        suspicious = sorted(
            name for name in request.headers
            if name not in self.allowed_headers and name.startswith(SUSPICIOUS_HEADER_PREFIXES)
        )
        if suspicious:
            logger.warning(f"Ignoring untrusted headers from user {identity.user_id}: {suspicious}")
