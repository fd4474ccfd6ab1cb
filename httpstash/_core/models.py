from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import httpx

from httpstash._core._headers import Headers


@dataclass
class Request:
    method: str
    url: str
    headers: Headers = field(default_factory=Headers)

    @property
    def _parsed_url(self) -> httpx.URL:
        return httpx.URL(self.url)

    @property
    def scheme(self) -> str:
        return self._parsed_url.scheme

    @property
    def host(self) -> str:
        """
        The host as sent in the Host header: hostname plus the port,
        unless it is the default one for the scheme.
        """
        url = self._parsed_url
        if url.port is None:
            return url.host
        return f"{url.host}:{url.port}"

    @property
    def request_uri(self) -> str:
        """Path and query string, e.g. ``/search?q=1``."""
        return self._parsed_url.raw_path.decode("ascii") or "/"


@dataclass
class Response:
    status_code: int
    headers: Headers = field(default_factory=Headers)
    content: bytes = b""
    reason: Optional[str] = None


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached variant of a URL.

    ``response_headers`` is the storage snapshot of the response: it carries the
    synthesized ``x-status`` header and the ``x-content-digest`` pointing at the body.
    """

    request_headers: Headers
    response_headers: Headers

    @property
    def vary(self) -> str:
        return self.response_headers.get("vary", "")

    @property
    def digest_key(self) -> Optional[str]:
        return self.response_headers.get("x-content-digest")
