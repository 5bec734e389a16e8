"""Audit sink adapters."""

from .http_sink import HttpAuditSink
from .logging_sink import LoggingAuditSink

__all__ = ["HttpAuditSink", "LoggingAuditSink"]
