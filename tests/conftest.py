import typing as tp

import pytest

from httpstash import Headers, Request, Response, StoreOptions, SyncCacheStore, SyncInMemoryClient


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def client() -> SyncInMemoryClient:
    return SyncInMemoryClient()


@pytest.fixture()
def store(client: SyncInMemoryClient) -> SyncCacheStore:
    return SyncCacheStore(client=client, options=StoreOptions(ttl=None))


def make_request(
    url: str = "http://example.com/a",
    headers: tp.Optional[tp.Dict[str, str]] = None,
    method: str = "GET",
) -> Request:
    return Request(method=method, url=url, headers=Headers(headers or {}))


def make_response(
    content: bytes = b"hello",
    headers: tp.Optional[tp.Dict[str, str]] = None,
    status_code: int = 200,
) -> Response:
    return Response(status_code=status_code, headers=Headers(headers or {}), content=content)
