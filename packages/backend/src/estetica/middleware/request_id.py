"""Request ID middleware — unique ID per request for tracing.

Learn: Every request gets a UUID, either from the incoming X-Request-ID
header or auto-generated. It is bound to structlog's contextvars so it
appears in all log entries for that request, and echoed back in the
response headers.

Written as plain ASGI rather than BaseHTTPMiddleware: event streams are
long-lived responses and must pass through without being wrapped.
"""

import uuid

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestIdMiddleware:
    """Generate and propagate a unique request ID."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope["headers"]).get(b"x-request-id")
        request_id = incoming.decode("latin-1") if incoming else str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id
            await send(message)

        await self.app(scope, receive, send_with_request_id)
