"""Forward non-API requests to the frontend dev server in development mode."""

from __future__ import annotations

import logging

import httpx
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

from .errors import DevServerUnavailableError
from .middleware import encoded_path
from .static_files import is_api_path

logger = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
    "content-encoding",
}


def _forwardable(items) -> list[tuple[str, str]]:
    return [(name, value) for name, value in items if name.lower() not in HOP_BY_HOP_HEADERS]


class DevServerProxy:
    """ASGI app relaying requests to the dev server at *target_url*."""

    def __init__(self, target_url: str, api_prefix: str = "/api/", client: httpx.AsyncClient | None = None):
        self.target_url = target_url.rstrip("/")
        self.api_prefix = api_prefix
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(30.0))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            # live-reload sockets are not proxied
            await WebSocketClose()(scope, receive, send)
            return

        request = Request(scope, receive)
        if is_api_path(request.url.path, self.api_prefix):
            raise HTTPException(status_code=404)

        target = f"{self.target_url}{encoded_path(scope)}"
        if request.url.query:
            target = f"{target}?{request.url.query}"

        try:
            upstream = await self.client.request(
                request.method,
                target,
                headers=_forwardable(request.headers.items()),
                content=await request.body(),
            )
        except httpx.HTTPError as error:
            logger.warning("Dev server request to %s failed: %s", target, error)
            raise DevServerUnavailableError(
                f"Failed to proxy request to dev server at {self.target_url}. Is the dev server running?"
            ) from error

        response = Response(content=upstream.content, status_code=upstream.status_code)
        for name, value in _forwardable(upstream.headers.multi_items()):
            response.headers.append(name, value)
        await response(scope, receive, send)

    async def aclose(self) -> None:
        await self.client.aclose()
