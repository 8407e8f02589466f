"""
Secure HTTP headers middleware.

Adds security-related headers to every HTTP response:
- X-Content-Type-Options
- X-Frame-Options
- Referrer-Policy
- Content-Security-Policy
- Cache-Control (metrics are time-varying, never cache them downstream)

Implemented as a plain ASGI middleware so streamed (SSE) responses and
WebSocket connections pass through untouched.
No business logic. Pure cross-cutting concern.
"""

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'",
}
NO_STORE = "no-store"


class SecurityHeadersMiddleware:
    """Middleware that adds secure HTTP headers to every response.

    ``Cache-Control: no-store`` is only set when the endpoint did not
    choose its own policy (the SSE stream sends ``no-cache``).
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for header_name, header_value in SECURE_HEADERS.items():
                    headers[header_name] = header_value
                if "cache-control" not in headers:
                    headers["Cache-Control"] = NO_STORE
            await send(message)

        await self.app(scope, receive, send_with_headers)
