"""Audit services."""

from .audit_emitter import AuditEmitter

__all__ = ["AuditEmitter"]
