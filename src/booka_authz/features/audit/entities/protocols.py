"""Protocol interfaces for the audit feature."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from .audit_event import AuditEvent


@runtime_checkable
class AuditSink(Protocol):
    """External destination for audit events."""

    @abstractmethod
    async def write(self, event: AuditEvent) -> None:
        """Deliver one event; raise on failure."""
        ...
