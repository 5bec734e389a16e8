"""
Runtime configuration for the authorization engine.

Values are read from the environment (prefix ``AUTHZ_``) or a ``.env`` file.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheTTL


class AuthzSettings(BaseSettings):
    """Settings for the authorization engine and its collaborators."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Decision cache
    cache_ttl_permissions: int = Field(default=CacheTTL.PERMISSIONS, description="Permission set TTL in seconds")
    cache_max_entries: int = Field(default=10000, description="Upper bound on cached permission sets")
    redis_url: Optional[str] = Field(default=None, description="Optional shared cache tier")
    redis_key_prefix: str = Field(default="booka_authz")

    # User profile source
    database_url: Optional[str] = Field(default=None)
    db_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=1)
    db_pool_max_size: int = Field(default=10)

    # Request context extraction
    tenant_header: str = Field(default="x-tenant-id")
    request_id_header: str = Field(default="x-request-id")
    forwarded_for_header: str = Field(default="x-forwarded-for")
    trusted_proxies: List[str] = Field(default_factory=list)

    # Decision policy
    require_owner_for_own_scope: bool = Field(
        default=False,
        description="Deny own-scoped checks that carry neither resource owner nor target user"
    )

    # Audit
    audit_enabled: bool = Field(default=True)
    audit_sink_url: Optional[str] = Field(default=None)
    audit_max_pending: int = Field(default=1000)
    audit_http_timeout: float = Field(default=5.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_verbosity: str = Field(default="NORMAL")
    log_format: str = Field(default="simple")

    @field_validator("cache_ttl_permissions", "cache_max_entries", "audit_max_pending")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("tenant_header", "request_id_header", "forwarded_for_header")
    @classmethod
    def normalize_header(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("header name cannot be empty")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("simple", "detailed", "json"):
            raise ValueError(f"Unsupported log format: {v}")
        return v

    @property
    def allowed_headers(self) -> frozenset:
        """Headers the context extractor is permitted to read."""
        return frozenset({self.tenant_header, self.request_id_header})


@lru_cache()
def get_settings() -> AuthzSettings:
    """Get cached settings instance."""
    return AuthzSettings()
