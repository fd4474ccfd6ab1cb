from __future__ import annotations

import logging
import typing as tp
from dataclasses import dataclass

from httpstash._core._clients._base import SyncKeyValueClient
from httpstash._core._clients._redis import SyncRedisClient
from httpstash._core._keygen import DEFAULT_DIGEST_PREFIX, DEFAULT_METADATA_PREFIX, KeyGenerator
from httpstash._core._packing import (
    headers_for_storage,
    pack_entries,
    response_from_storage,
    unpack_entries,
)
from httpstash._core._spec import expire, is_fresh, requests_match
from httpstash._core.models import CacheEntry, Request, Response
from httpstash._exceptions import StorageWriteError
from httpstash._utils import partition

logger = logging.getLogger("httpstash.store")

__all__ = ("StoreOptions", "SyncCacheStore")

CONTENT_DIGEST_HEADER = "x-content-digest"
LOCK_MARKER = b"1"
# decode_responses=True clients hand back str
LOCK_MARKERS = (LOCK_MARKER, LOCK_MARKER.decode("ascii"))


@dataclass
class StoreOptions:
    """
    Configuration options for :class:`SyncCacheStore`.

    Attributes:
    ----------
    ttl : Optional[float]
        Seconds after which stored bodies and entry lists expire in the
        backend. ``None`` keeps them until evicted or purged.

    metadata_prefix, digest_prefix : str
        Namespaces of the entry list keys and the body keys.

    lock_key : str
        Name of the hash that holds the fetch locks.

    shared : bool
        Whether freshness is evaluated as a shared cache (s-maxage applies).
        A reverse-caching gateway is a shared cache.
    """

    ttl: tp.Optional[tp.Union[int, float]] = 120
    metadata_prefix: str = DEFAULT_METADATA_PREFIX
    digest_prefix: str = DEFAULT_DIGEST_PREFIX
    lock_key: str = "Lock"
    shared: bool = True


class SyncCacheStore:
    """
    Maps requests to stored response variants on top of a key-value backend.

    Every URL owns an entry list (most recent first) under its metadata key and
    one body slot under its digest key. Variants are told apart by the Vary
    value recorded with each entry.

    Reading and rewriting an entry list in ``write`` and ``invalidate`` is not
    atomic: concurrent writers for the same URL may lose each other's update.
    Callers that need mutual exclusion wrap the fetch-and-write in
    ``lock``/``unlock``.

    :param client: Backend to store into, defaults to a ``SyncRedisClient``
        connecting to localhost
    :type client: tp.Optional[SyncKeyValueClient], optional
    :param options: Store configuration, defaults to ``StoreOptions()``
    :type options: tp.Optional[StoreOptions], optional
    """

    def __init__(
        self,
        client: tp.Optional[SyncKeyValueClient] = None,
        options: tp.Optional[StoreOptions] = None,
    ) -> None:
        self.client = client if client is not None else SyncRedisClient()
        self.options = options or StoreOptions()
        self._keygen = KeyGenerator(
            metadata_prefix=self.options.metadata_prefix,
            digest_prefix=self.options.digest_prefix,
        )

    def lookup(self, request: Request) -> tp.Optional[Response]:
        """
        Locates a cached response for the request.

        :return: The stored response, or None if no variant matches the request
            or its body is gone
        :rtype: tp.Optional[Response]
        """
        key = self._keygen.metadata_key(request)
        entries = self._get_metadata(key)
        if not entries:
            logger.debug("Cache miss, no entries: url=%s", request.url)
            return None

        match = next(
            (entry for entry in entries if requests_match(entry.vary, request.headers, entry.request_headers)),
            None,
        )
        if match is None:
            logger.debug("Cache miss, no matching variant among %d: url=%s", len(entries), request.url)
            return None

        digest_key = match.digest_key
        body = self.client.get(digest_key) if digest_key else None
        if not body:
            logger.debug("Cache miss, body evicted: url=%s digest=%s", request.url, digest_key)
            return None

        logger.debug("Cache hit: url=%s", request.url)
        return response_from_storage(match.response_headers, body)

    def write(self, request: Request, response: Response) -> str:
        """
        Stores a response for the request.

        The body goes to the URL's digest slot unless the response already
        carries an ``x-content-digest``. Existing entries superseded by this one
        (same Vary value, same varying request headers) are dropped and the new
        entry is put first.

        :raises StorageWriteError: If the body or the entry list could not be stored
        :return: The metadata key the entry list is stored under
        :rtype: str
        """
        response_headers = headers_for_storage(response)

        if CONTENT_DIGEST_HEADER not in response.headers:
            digest_key = self._keygen.digest_key(request)
            if not self._save(digest_key, response.content):
                logger.error("Unable to store the entity: key=%s", digest_key)
                raise StorageWriteError("Unable to store the entity.")
            response_headers.set(CONTENT_DIGEST_HEADER, digest_key)

        metadata_key = self._keygen.metadata_key(request)
        vary = response.headers.get("vary", "")
        request_headers = request.headers.copy()

        superseded, entries = partition(
            self._get_metadata(metadata_key),
            lambda entry: entry.vary == vary and requests_match(vary, entry.request_headers, request_headers),
        )
        if superseded:
            logger.debug("Replacing %d entries: key=%s", len(superseded), metadata_key)

        if "age" in response_headers:
            del response_headers["age"]

        entries.insert(0, CacheEntry(request_headers=request_headers, response_headers=response_headers))

        if not self._save(metadata_key, pack_entries(entries)):
            logger.error("Unable to store the metadata: key=%s", metadata_key)
            raise StorageWriteError("Unable to store the metadata.")

        return metadata_key

    def invalidate(self, request: Request) -> None:
        """
        Expires every fresh entry for the request's URL.

        Entries are never removed, only their stored headers are rewritten so
        that a freshness check sees them as stale.

        :raises StorageWriteError: If the rewritten entry list could not be stored
        """
        key = self._keygen.metadata_key(request)
        modified = False
        entries = []

        for entry in self._get_metadata(key):
            # Only headers matter here, the body is not loaded.
            response = response_from_storage(entry.response_headers, None)

            if is_fresh(response, self.options.shared):
                response = expire(response, self.options.shared)
                modified = True
                entry = CacheEntry(
                    request_headers=entry.request_headers,
                    response_headers=headers_for_storage(response),
                )
            entries.append(entry)

        if modified:
            logger.debug("Invalidated entries: key=%s", key)
            if not self._save(key, pack_entries(entries)):
                logger.error("Unable to store the metadata: key=%s", key)
                raise StorageWriteError("Unable to store the metadata.")

    def lock(self, request: Request) -> bool:
        """
        Acquires the fetch lock for the request's URL.

        The lock has no owner and no expiry: it is held until ``unlock`` or
        ``cleanup`` is called.

        :return: True if this call acquired the lock, False if it was already held
        :rtype: bool
        """
        return self.client.hsetnx(self.options.lock_key, self._keygen.metadata_key(request), 1) == 1

    def unlock(self, request: Request) -> bool:
        """
        Releases the fetch lock for the request's URL.

        :return: False if the lock was not held, True otherwise
        :rtype: bool
        """
        return self.client.hdel(self.options.lock_key, self._keygen.metadata_key(request)) == 1

    def is_locked(self, request: Request) -> bool:
        return self.client.hget(self.options.lock_key, self._keygen.metadata_key(request)) in LOCK_MARKERS

    def purge(self, url: str) -> bool:
        """
        Removes the entry list and the body stored for a URL.

        Locks are left untouched.

        :return: True once the delete pass has completed, whether or not
            anything was stored
        :rtype: bool
        """
        request = Request(method="GET", url=url)
        removed = 0

        for key in (self._keygen.digest_key(request), self._keygen.metadata_key(request)):
            for name in self.client.keys(key):
                removed += self.client.delete(self.client.strip_prefix(name))

        logger.info("Purged url=%s removed=%d", url, removed)
        return True

    def cleanup(self) -> None:
        """Drops every lock."""
        self.client.delete_hash(self.options.lock_key)
        logger.info("Removed all locks: key=%s", self.options.lock_key)

    def close(self) -> None:
        self.client.close()

    def _save(self, key: str, data: bytes) -> bool:
        if not data:
            return True

        return self.client.set(key, data, ttl=self.options.ttl)

    def _get_metadata(self, key: str) -> tp.List[CacheEntry]:
        return unpack_entries(self.client.get(key))
