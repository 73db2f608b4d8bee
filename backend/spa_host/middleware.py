"""ASGI middleware applied to every request before routing."""

from starlette.datastructures import URL, MutableHeaders
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .content import GLOBAL_SECURITY_HEADERS


def encoded_path(scope: Scope) -> str:
    """Return the request path as sent by the client, percent-encoding intact."""
    raw_path = scope.get("raw_path")
    if not raw_path:
        return scope["path"]
    return raw_path.split(b"?", 1)[0].decode("latin-1")


class SecurityHeadersMiddleware:
    """Add the global security headers to every HTTP response.

    Headers already set by a handler are left untouched, so per-asset
    policy layers on top of these.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_security_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in GLOBAL_SECURITY_HEADERS.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_security_headers)


class CanonicalHostMiddleware:
    """Permanently redirect ``www.`` hosts to the bare host."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        url = URL(scope=scope)
        hostname = url.hostname or ""
        if hostname.startswith("www."):
            location = url.replace(hostname=hostname[4:], path=encoded_path(scope))
            response = RedirectResponse(location, status_code=301)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
