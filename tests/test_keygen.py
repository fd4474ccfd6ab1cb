import hashlib

from httpstash import KeyGenerator, Request


def test_metadata_key():
    keygen = KeyGenerator()
    request = Request(method="GET", url="http://example.com/a")

    expected = hashlib.sha1(b"http://example.com/a").hexdigest()
    assert keygen.metadata_key(request) == f"MetaData::{expected}"


def test_digest_key():
    keygen = KeyGenerator()
    request = Request(method="GET", url="http://example.com/a")

    expected = hashlib.md5(b"http://example.com/a").hexdigest()
    assert keygen.digest_key(request) == f"DigestKey::{expected}"


def test_custom_prefixes():
    keygen = KeyGenerator(metadata_prefix="meta", digest_prefix="body")
    request = Request(method="GET", url="http://example.com/a")

    assert keygen.metadata_key(request).startswith("meta::")
    assert keygen.digest_key(request).startswith("body::")


def test_keys_include_query_and_port():
    keygen = KeyGenerator()

    plain = keygen.metadata_key(Request(method="GET", url="http://example.com/a"))
    with_query = keygen.metadata_key(Request(method="GET", url="http://example.com/a?page=2"))
    with_port = keygen.metadata_key(Request(method="GET", url="http://example.com:8080/a"))

    assert len({plain, with_query, with_port}) == 3
    assert with_query == keygen.metadata_key_for("http", "example.com", "/a?page=2")
    assert with_port == keygen.metadata_key_for("http", "example.com:8080", "/a")


def test_default_port_and_method_do_not_change_keys():
    keygen = KeyGenerator()

    assert keygen.metadata_key(Request(method="GET", url="http://example.com:80/a")) == keygen.metadata_key(
        Request(method="HEAD", url="http://example.com/a")
    )


def test_keys_are_stable():
    keygen = KeyGenerator()
    request = Request(method="GET", url="https://example.com/")

    assert keygen.metadata_key(request) == keygen.metadata_key(request)
    assert keygen.metadata_key(request) == KeyGenerator().metadata_key_for("https", "example.com", "/")
