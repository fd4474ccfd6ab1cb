from httpstash._core._clients._base import SyncKeyValueClient
from httpstash._core._clients._memory import SyncInMemoryClient
from httpstash._core._clients._redis import RedisConfig, SyncRedisClient
from httpstash._core._headers import Headers as Headers
from httpstash._core._keygen import KeyGenerator as KeyGenerator
from httpstash._core._spec import (
    expire as expire,
    get_age as get_age,
    get_freshness_lifetime as get_freshness_lifetime,
    is_fresh as is_fresh,
    requests_match as requests_match,
)
from httpstash._core.models import (
    CacheEntry as CacheEntry,
    Request as Request,
    Response as Response,
)
from httpstash._exceptions import StoreConnectionError, StoreError, StorageWriteError
from httpstash._gateway import handle_purge, is_purge_request
from httpstash._store import StoreOptions, SyncCacheStore

__all__ = (
    ## Store
    "SyncCacheStore",
    "StoreOptions",
    ## Clients
    "SyncKeyValueClient",
    "SyncRedisClient",
    "SyncInMemoryClient",
    "RedisConfig",
    ## Models
    "Request",
    "Response",
    "CacheEntry",
    "Headers",
    ## Keys, variants and freshness
    "KeyGenerator",
    "requests_match",
    "get_freshness_lifetime",
    "get_age",
    "is_fresh",
    "expire",
    ## Gateway
    "handle_purge",
    "is_purge_request",
    ## Exceptions
    "StoreError",
    "StorageWriteError",
    "StoreConnectionError",
)
