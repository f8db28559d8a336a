"""Request ID middleware.

Assigns an X-Request-Id header to each response, echoing the caller's id
when one was sent so client and server logs can be joined.
"""

from __future__ import annotations

import logging
import uuid

logger = logging.getLogger(__name__)


class RequestIdMiddleware:
    def __init__(self, app, header_name: str = "X-Request-Id") -> None:  # type: ignore[no-untyped-def]
        self.app = app
        self.header_name = header_name

    def _incoming(self, scope) -> str | None:  # type: ignore[no-untyped-def]
        wanted = self.header_name.lower().encode("latin-1")
        for key, value in scope.get("headers") or []:
            if key.lower() == wanted and value:
                return value.decode("latin-1")
        return None

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message):  # type: ignore[no-untyped-def]
            if message.get("type") == "http.response.start":
                headers = list(message.get("headers") or [])
                header_bytes = self.header_name.lower().encode("latin-1")
                if all(k.lower() != header_bytes for k, _ in headers):
                    headers.append((header_bytes, request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        await self.app(scope, receive, send_wrapper)


__all__ = ["RequestIdMiddleware"]
