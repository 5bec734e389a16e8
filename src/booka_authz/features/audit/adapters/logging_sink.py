"""Audit sink writing JSON lines to the audit logger."""

import json
import logging

from ....config.logging_config import AUDIT_LOGGER_NAME
from ..entities.audit_event import AuditEvent
from ..entities.protocols import AuditSink


class LoggingAuditSink(AuditSink):
    """Writes each event as one JSON line on the ``booka_authz.audit`` logger."""

    def __init__(self, logger_name: str = AUDIT_LOGGER_NAME):
        self.logger = logging.getLogger(logger_name)

    async def write(self, event: AuditEvent) -> None:
        self.logger.info(json.dumps(event.to_dict(), sort_keys=True))
