import msgpack
from inline_snapshot import snapshot

from httpstash import CacheEntry, Headers, Response
from httpstash._core._packing import headers_for_storage, pack_entries, response_from_storage, unpack_entries


def test_headers_for_storage_adds_status():
    response = Response(404, headers=Headers({"Content-Type": "text/html"}), content=b"missing")

    headers = headers_for_storage(response)

    assert headers == Headers({"content-type": "text/html", "x-status": "404"})
    assert "x-status" not in response.headers


def test_response_from_storage_recovers_status():
    headers = Headers({"content-type": "text/html", "x-status": "404", "x-content-digest": "DigestKey::1"})

    response = response_from_storage(headers, b"missing")

    assert response.status_code == 404
    assert response.content == b"missing"
    assert response.headers == Headers({"content-type": "text/html", "x-content-digest": "DigestKey::1"})
    assert "x-status" in headers


def test_response_from_storage_without_body():
    response = response_from_storage(Headers({"x-status": "200"}), None)

    assert response.status_code == 200
    assert response.content == b""


def test_pack_entries_format():
    entries = [
        CacheEntry(
            request_headers=Headers({"Cookie": "a=1"}),
            response_headers=Headers({"Vary": "Cookie", "x-status": "200"}),
        ),
        CacheEntry(request_headers=Headers({}), response_headers=Headers({"x-status": "200"})),
    ]

    assert msgpack.unpackb(pack_entries(entries)) == snapshot(
        [
            [{"cookie": ["a=1"]}, {"vary": ["Cookie"], "x-status": ["200"]}],
            [{}, {"x-status": ["200"]}],
        ]
    )


def test_unpack_entries_keeps_order():
    entries = [
        CacheEntry(request_headers=Headers({"accept": "text/html"}), response_headers=Headers({"x-status": "200"})),
        CacheEntry(request_headers=Headers({"accept": "text/plain"}), response_headers=Headers({"x-status": "201"})),
    ]

    assert unpack_entries(pack_entries(entries)) == entries


def test_unpack_missing_entries():
    assert unpack_entries(None) == []
    assert unpack_entries(b"") == []


def test_unpack_malformed_entries():
    assert unpack_entries(b"\xc1") == []
    assert unpack_entries(b"not msgpack at all") == []
    assert unpack_entries(msgpack.packb(42)) == []
    assert unpack_entries(msgpack.packb([["only one"]])) == []
    assert unpack_entries(msgpack.packb([[1, 2]])) == []
