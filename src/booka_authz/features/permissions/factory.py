"""
Factory functions for wiring an AccessDecisionEngine from settings.
"""
from typing import Optional

from ...config.settings import AuthzSettings, get_settings
from ...utils.datetime import Clock, utc_now
from ..audit.adapters.http_sink import HttpAuditSink
from ..audit.adapters.logging_sink import LoggingAuditSink
from ..audit.entities.protocols import AuditSink
from ..audit.services.audit_emitter import AuditEmitter
from ..cache.adapters.memory_adapter import PermissionSetCache
from ..cache.entities.protocols import PermissionSetStore
from ..users.entities.protocols import UserProfileLoader
from .services.access_engine import AccessDecisionEngine
from .services.permission_resolver import PermissionResolver


def create_audit_sink(settings: AuthzSettings) -> AuditSink:
    """HTTP sink when a collector URL is configured, the audit logger otherwise."""
    if settings.audit_sink_url:
        return HttpAuditSink(settings.audit_sink_url, timeout=settings.audit_http_timeout)
    return LoggingAuditSink()


def create_access_engine(
    loader: UserProfileLoader,
    settings: Optional[AuthzSettings] = None,
    clock: Optional[Clock] = None,
    audit_sink: Optional[AuditSink] = None,
    shared_store: Optional[PermissionSetStore] = None,
) -> AccessDecisionEngine:
    """
    Create an access decision engine with its cache, resolver and audit emitter.

    Args:
        loader: Source of UnifiedUser records
        settings: Engine settings; defaults to environment settings
        clock: Time source for time-window rules
        audit_sink: Destination for audit events; derived from settings when omitted
        shared_store: Optional cross-process permission set store

    Returns:
        Configured AccessDecisionEngine instance
    """
    settings = settings or get_settings()
    clock = clock or utc_now

    cache = PermissionSetCache(
        default_ttl=settings.cache_ttl_permissions,
        max_entries=settings.cache_max_entries,
    )
    resolver = PermissionResolver(
        loader=loader,
        cache=cache,
        store=shared_store,
        ttl=settings.cache_ttl_permissions,
    )
    emitter = AuditEmitter(
        sink=audit_sink or create_audit_sink(settings),
        enabled=settings.audit_enabled,
        max_pending=settings.audit_max_pending,
    )
    return AccessDecisionEngine(
        resolver=resolver,
        audit_emitter=emitter,
        clock=clock,
        require_owner_for_own_scope=settings.require_owner_for_own_scope,
    )
