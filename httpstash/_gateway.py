from __future__ import annotations

import logging
import typing as tp

from httpstash._core._headers import Headers
from httpstash._core.models import Request, Response

if tp.TYPE_CHECKING:
    from httpstash._store import SyncCacheStore

logger = logging.getLogger("httpstash.gateway")

PURGE_METHOD = "PURGE"


def is_purge_request(request: Request) -> bool:
    return request.method.upper() == PURGE_METHOD


def handle_purge(store: "SyncCacheStore", request: Request) -> Response:
    """
    Answers a PURGE request by purging its URL from the store.

    A gateway calls this before the regular cache lookup for every request
    where :func:`is_purge_request` is true.

    Returns ``200 Purged`` when the store reports the URL as purged and
    ``201 Not found`` otherwise. The reason phrase is also sent as the body.
    """
    if store.purge(request.url):
        status_code, reason = 200, "Purged"
    else:
        status_code, reason = 201, "Not found"

    logger.debug("PURGE handled: url=%s status=%d", request.url, status_code)
    return Response(
        status_code=status_code,
        headers=Headers({"content-type": "text/plain; charset=utf-8"}),
        content=reason.encode("utf-8"),
        reason=reason,
    )
