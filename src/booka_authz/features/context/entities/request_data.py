"""Transport-neutral view of an inbound request."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestData:
    """Raw, untrusted request facts handed to the context extractor.

    Header names are stored lower-cased.
    """
    method: str = "GET"
    path: str = "/"
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    client_host: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "method", (self.method or "GET").upper())
        object.__setattr__(self, "headers", {k.lower(): v for k, v in dict(self.headers).items()})

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @classmethod
    async def from_request(cls, request: Request, read_body: bool = True) -> "RequestData":
        """Build from a Starlette/FastAPI request.

        Only JSON object bodies are parsed; anything else yields an empty body.
        """
        body: Dict[str, Any] = {}
        if read_body and request.method not in ("GET", "HEAD", "OPTIONS"):
            content_type = request.headers.get("content-type", "")
            if content_type.startswith("application/json"):
                raw = await request.body()
                if raw:
                    try:
                        parsed = json.loads(raw)
                    except (ValueError, UnicodeDecodeError):
                        logger.debug(f"Ignoring unparseable JSON body on {request.url.path}")
                        parsed = None
                    if isinstance(parsed, dict):
                        body = parsed

        return cls(
            method=request.method,
            path=request.url.path,
            path_params=dict(request.path_params),
            query_params=dict(request.query_params),
            body=body,
            headers=dict(request.headers),
            client_host=request.client.host if request.client else None,
        )
