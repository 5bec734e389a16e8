"""Tests for engine wiring."""

from booka_authz.config.settings import AuthzSettings
from booka_authz.features.audit import HttpAuditSink, LoggingAuditSink
from booka_authz.features.permissions import AccessDecisionEngine, create_access_engine, create_audit_sink


class TestCreateAccessEngine:
    """Factory wiring from settings."""

    def test_wires_cache_and_emitter(self, directory):
        settings = AuthzSettings(_env_file=None, cache_ttl_permissions=120, audit_max_pending=5)
        engine = create_access_engine(directory, settings)

        assert isinstance(engine, AccessDecisionEngine)
        assert engine.resolver.ttl == 120
        assert engine.resolver.cache.default_ttl == 120
        assert engine.resolver.loader is directory
        assert engine.audit_emitter.max_pending == 5
        assert isinstance(engine.audit_emitter.sink, LoggingAuditSink)

    def test_explicit_sink_and_clock(self, directory, audit_sink, clock):
        engine = create_access_engine(directory, AuthzSettings(_env_file=None), clock=clock, audit_sink=audit_sink)

        assert engine.audit_emitter.sink is audit_sink
        assert engine.clock is clock

    def test_strict_ownership_flag(self, directory):
        settings = AuthzSettings(_env_file=None, require_owner_for_own_scope=True)
        assert create_access_engine(directory, settings).require_owner_for_own_scope

    def test_http_sink_when_url_configured(self):
        settings = AuthzSettings(_env_file=None, audit_sink_url="http://audit.internal/events")
        assert isinstance(create_audit_sink(settings), HttpAuditSink)
