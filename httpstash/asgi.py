from __future__ import annotations

import logging
import typing as t

import anyio.to_thread

from httpstash._core._headers import Headers
from httpstash._core.models import Request, Response
from httpstash._gateway import handle_purge, is_purge_request

if t.TYPE_CHECKING:
    from httpstash._store import SyncCacheStore

logger = logging.getLogger("httpstash.asgi")


class _ASGIScope(t.TypedDict, total=False):
    """ASGI HTTP scope type."""

    type: str
    http_version: str
    method: str
    scheme: str
    path: str
    query_string: bytes
    root_path: str
    headers: list[tuple[bytes, bytes]]
    server: tuple[str, int | None] | None
    client: tuple[str, int] | None


_Scope = _ASGIScope
_Receive = t.Callable[[], t.Awaitable[dict[str, t.Any]]]
_Send = t.Callable[[dict[str, t.Any]], t.Awaitable[None]]
_ASGIApp = t.Callable[[_Scope, _Receive, _Send], t.Awaitable[None]]


class ASGIPurgeMiddleware:
    """
    ASGI middleware that answers ``PURGE`` requests from a cache store.

    ``PURGE`` requests never reach the wrapped application: the request URL is
    purged from the store and a ``200 Purged`` (or ``201 Not found``) plain-text
    response is sent. Every other request is passed through untouched.

    The store is blocking, so it is called from a worker thread.

    Args:
        app: The ASGI application to wrap.
        store: The cache store to purge from.

    Example:
        ```python
        from httpstash import SyncCacheStore
        from httpstash.asgi import ASGIPurgeMiddleware

        app = ASGIPurgeMiddleware(app=my_asgi_app, store=SyncCacheStore())
        ```
    """

    def __init__(self, app: _ASGIApp, store: "SyncCacheStore") -> None:
        self.app = app
        self.store = store

    async def __call__(self, scope: _Scope, receive: _Receive, send: _Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = self._asgi_to_internal_request(scope)
        if not is_purge_request(request):
            await self.app(scope, receive, send)
            return

        logger.info("Purging url=%s", request.url)
        response = await anyio.to_thread.run_sync(handle_purge, self.store, request)
        await self._send_internal_response(response, send)

    def _asgi_to_internal_request(self, scope: _Scope) -> Request:
        scheme = scope.get("scheme", "http")

        headers = Headers({})
        for key, value in scope.get("headers", []):
            headers[key.decode("latin1")] = value.decode("latin1")

        # Entries are keyed by the URL the client asked for, not the bound socket
        host = headers.get("host")
        if not host:
            server = scope.get("server") or ("localhost", 80)
            host = server[0]
            port = server[1] if server[1] is not None else (443 if scheme == "https" else 80)

            # Add port to host if non-standard
            if (scheme == "http" and port != 80) or (scheme == "https" and port != 443):
                host = f"{host}:{port}"

        path = scope.get("path", "/")
        query_string = scope.get("query_string", b"")
        if query_string:
            path = f"{path}?{query_string.decode('latin1')}"

        return Request(
            method=scope.get("method", "GET"),
            url=f"{scheme}://{host}{path}",
            headers=headers,
        )

    async def _send_internal_response(self, response: Response, send: _Send) -> None:
        headers = [(key.encode("latin1"), value.encode("latin1")) for key, value in response.headers.items()]
        headers.append((b"content-length", str(len(response.content)).encode("latin1")))

        await send(
            {
                "type": "http.response.start",
                "status": response.status_code,
                "headers": headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": response.content,
                "more_body": False,
            }
        )
