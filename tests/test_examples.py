import gzip
import importlib.util
from pathlib import Path
from types import ModuleType

import httpx
import pytest

EXAMPLES = Path(__file__).parent.parent / "examples"


@pytest.fixture()
def gateway() -> ModuleType:
    spec = importlib.util.spec_from_file_location("httpx_gateway", EXAMPLES / "httpx_gateway.py")
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def gzip_origin(request: httpx.Request) -> httpx.Response:
    body = gzip.compress(b"<html>hello</html>")
    return httpx.Response(
        200,
        headers={
            "Content-Type": "text/html",
            "Content-Encoding": "gzip",
            "Content-Length": str(len(body)),
            "Cache-Control": "max-age=60",
        },
        content=body,
    )


def test_gateway_stores_decoded_bodies_without_their_encoding(gateway: ModuleType):
    with httpx.Client(transport=httpx.MockTransport(gzip_origin)) as client:
        gateway.fetch(client, "http://example.com/")
        cached = gateway.fetch(client, "http://example.com/")

    assert cached.content == b"<html>hello</html>"
    assert cached.headers["content-type"] == "text/html"
    assert "content-encoding" not in cached.headers
    assert "content-length" not in cached.headers
