from __future__ import annotations

import hashlib

from httpstash._core.models import Request

DEFAULT_METADATA_PREFIX = "MetaData"
DEFAULT_DIGEST_PREFIX = "DigestKey"


class KeyGenerator:
    """
    Derives the storage keys for a request.

    Both keys are pure functions of ``scheme://host + request_uri``: the metadata
    key (sha1) indexes the variant list of a URL, the digest key (md5) indexes
    its body slot.
    """

    def __init__(
        self,
        metadata_prefix: str = DEFAULT_METADATA_PREFIX,
        digest_prefix: str = DEFAULT_DIGEST_PREFIX,
    ) -> None:
        self.metadata_prefix = metadata_prefix
        self.digest_prefix = digest_prefix

    def metadata_key_for(self, scheme: str, host: str, request_uri: str) -> str:
        material = _key_material(scheme, host, request_uri)
        return f"{self.metadata_prefix}::{hashlib.sha1(material, usedforsecurity=False).hexdigest()}"

    def digest_key_for(self, scheme: str, host: str, request_uri: str) -> str:
        material = _key_material(scheme, host, request_uri)
        return f"{self.digest_prefix}::{hashlib.md5(material, usedforsecurity=False).hexdigest()}"

    def metadata_key(self, request: Request) -> str:
        return self.metadata_key_for(request.scheme, request.host, request.request_uri)

    def digest_key(self, request: Request) -> str:
        return self.digest_key_for(request.scheme, request.host, request.request_uri)


def _key_material(scheme: str, host: str, request_uri: str) -> bytes:
    return f"{scheme}://{host}{request_uri}".encode("utf-8")
