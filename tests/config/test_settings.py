"""Tests for settings and logging configuration."""

import pytest
from pydantic import ValidationError

from booka_authz.config import AUDIT_LOGGER_NAME, AuthzSettings, LoggingConfig
from booka_authz.config.logging_config import get_effective_level


class TestAuthzSettings:
    """Defaults, environment and validation."""

    def test_defaults(self):
        settings = AuthzSettings(_env_file=None)

        assert settings.cache_ttl_permissions == 600
        assert settings.tenant_header == "x-tenant-id"
        assert settings.require_owner_for_own_scope is False
        assert settings.audit_enabled

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("AUTHZ_CACHE_TTL_PERMISSIONS", "30")
        monkeypatch.setenv("AUTHZ_REQUIRE_OWNER_FOR_OWN_SCOPE", "true")

        settings = AuthzSettings(_env_file=None)

        assert settings.cache_ttl_permissions == 30
        assert settings.require_owner_for_own_scope is True

    def test_header_names_are_normalized(self):
        settings = AuthzSettings(_env_file=None, tenant_header=" X-Booka-Tenant ")

        assert settings.tenant_header == "x-booka-tenant"
        assert settings.allowed_headers == frozenset({"x-booka-tenant", "x-request-id"})

    @pytest.mark.parametrize("field, value", [
        ("cache_ttl_permissions", 0),
        ("audit_max_pending", -1),
        ("tenant_header", "  "),
        ("log_format", "xml"),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            AuthzSettings(_env_file=None, **{field: value})


class TestLoggingConfig:
    """dictConfig construction."""

    def test_build_uses_configured_level(self):
        config = LoggingConfig.build(AuthzSettings(_env_file=None, log_level="WARNING"))

        assert config["root"]["level"] == "WARNING"
        assert config["loggers"]["asyncpg"]["level"] == "ERROR"

    def test_audit_logger_is_independent(self):
        config = LoggingConfig.build(AuthzSettings(_env_file=None, log_verbosity="QUIET"))

        assert config["root"]["level"] == "ERROR"
        assert config["loggers"][AUDIT_LOGGER_NAME]["level"] == "INFO"
        assert config["loggers"][AUDIT_LOGGER_NAME]["propagate"] is False

    def test_json_format(self):
        config = LoggingConfig.build(AuthzSettings(_env_file=None, log_format="json"))
        assert config["formatters"]["default"]["format"].startswith('{"time"')

    @pytest.mark.parametrize("level, verbosity, expected", [
        ("INFO", "DEBUG", "DEBUG"),
        ("DEBUG", "VERBOSE", "INFO"),
        ("warning", "normal", "WARNING"),
        ("bogus", "NORMAL", "INFO"),
        ("INFO", "bogus", "INFO"),
    ])
    def test_effective_level(self, level, verbosity, expected):
        assert get_effective_level(level, verbosity) == expected
