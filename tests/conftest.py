"""Pytest configuration and fixtures for booka-authz tests."""

from datetime import datetime, timezone
from typing import List

import pytest

from booka_authz.config.settings import AuthzSettings
from booka_authz.features.audit.entities.audit_event import AuditEvent
from booka_authz.features.audit.entities.protocols import AuditSink
from booka_authz.features.audit.services.audit_emitter import AuditEmitter
from booka_authz.features.cache.adapters.memory_adapter import PermissionSetCache
from booka_authz.features.context.entities.permission_context import PermissionContext
from booka_authz.features.permissions.services.access_engine import AccessDecisionEngine
from booka_authz.features.permissions.services.permission_resolver import PermissionResolver
from booka_authz.features.users.repositories.memory_user_loader import InMemoryUserDirectory

# Wednesday, 10:00 UTC
FIXED_NOW = datetime(2026, 3, 4, 10, 0, tzinfo=timezone.utc)


class RecordingAuditSink(AuditSink):
    """Audit sink keeping events in memory."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    async def write(self, event: AuditEvent) -> None:
        self.events.append(event)


class FakeTimer:
    """Monotonic timer that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return AuthzSettings(_env_file=None, trusted_proxies=["10.0.0.0/8"])


@pytest.fixture
def directory():
    """Two tenants with one user per role, plus a platform superadmin."""
    users = InMemoryUserDirectory()
    users.add_member("U1", "T1", "staff")
    users.add_member("M1", "T1", "manager")
    users.add_member("O1", "T1", "owner")
    users.add_member("U2", "T2", "staff")
    users.add_member("O2", "T2", "owner")
    users.add_superadmin("SA")
    return users


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def cache(timer):
    return PermissionSetCache(default_ttl=600, timer=timer)


@pytest.fixture
def resolver(directory, cache):
    return PermissionResolver(loader=directory, cache=cache, ttl=600)


@pytest.fixture
def audit_sink():
    return RecordingAuditSink()


@pytest.fixture
def audit_emitter(audit_sink):
    return AuditEmitter(sink=audit_sink)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def engine(resolver, audit_emitter, clock):
    return AccessDecisionEngine(resolver=resolver, audit_emitter=audit_emitter, clock=clock)


@pytest.fixture
def make_context():
    """Factory for PermissionContext objects defaulting to tenant T1."""
    def factory(user_id: str, tenant_id: str = "T1", **kwargs) -> PermissionContext:
        return PermissionContext(user_id=user_id, tenant_id=tenant_id, **kwargs)
    return factory
