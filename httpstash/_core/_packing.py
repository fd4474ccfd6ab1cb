from __future__ import annotations

import logging
from typing import Any, List, Optional

import msgpack
from typing_extensions import cast

from httpstash._core._headers import Headers
from httpstash._core.models import CacheEntry, Response

logger = logging.getLogger("httpstash.core.packing")

STATUS_HEADER = "x-status"


def headers_for_storage(response: Response) -> Headers:
    """Copy of the response headers carrying the status code as ``x-status``."""
    headers = response.headers.copy()
    headers.set(STATUS_HEADER, str(response.status_code))
    return headers


def response_from_storage(headers: Headers, body: Optional[bytes]) -> Response:
    headers = headers.copy()
    status = headers.get_list(STATUS_HEADER)
    if STATUS_HEADER in headers:
        del headers[STATUS_HEADER]

    return Response(
        status_code=int(status[0]) if status else 200,
        headers=headers,
        content=body or b"",
    )


def pack_entries(entries: List[CacheEntry]) -> bytes:
    return cast(
        bytes,
        msgpack.packb(
            [[entry.request_headers._headers, entry.response_headers._headers] for entry in entries],
        ),
    )


def unpack_entries(value: Optional[bytes]) -> List[CacheEntry]:
    """
    Decodes a stored entry list.

    Absent, empty or malformed data decodes to an empty list, so a corrupt
    entry list behaves like a cache miss and gets overwritten by the next write.
    """
    if not value:
        return []

    try:
        data: Any = msgpack.unpackb(value)
        return [
            CacheEntry(
                request_headers=Headers(request_headers),
                response_headers=Headers(response_headers),
            )
            for request_headers, response_headers in data
        ]
    except (ValueError, TypeError, AttributeError, msgpack.UnpackException) as exc:
        logger.warning("Discarding malformed entry list: %s", exc)
        return []
