"""Audit sink posting events to an HTTP collector."""

from typing import Dict, Optional

import httpx

from ....core.exceptions import AuditDeliveryError
from ..entities.audit_event import AuditEvent
from ..entities.protocols import AuditSink


class HttpAuditSink(AuditSink):
    """POSTs each event as JSON to ``url``.

    Non-2xx responses and transport errors raise AuditDeliveryError; the
    emitter logs and drops them.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    async def write(self, event: AuditEvent) -> None:
        try:
            response = await self._client.post(self.url, json=event.to_dict())
        except httpx.HTTPError as e:
            raise AuditDeliveryError(
                f"Audit collector unreachable: {e}",
                details={"url": self.url},
            ) from e

        if response.status_code >= 300:
            raise AuditDeliveryError(
                f"Audit collector rejected event with status {response.status_code}",
                details={"url": self.url, "status_code": response.status_code},
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
