"""Audit feature: non-blocking delivery of audit events."""

from .adapters import HttpAuditSink, LoggingAuditSink
from .entities import AuditEvent, AuditSink
from .services import AuditEmitter

__all__ = [
    "AuditEmitter",
    "AuditEvent",
    "AuditSink",
    "HttpAuditSink",
    "LoggingAuditSink",
]
