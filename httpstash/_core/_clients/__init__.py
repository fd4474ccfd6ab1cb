from httpstash._core._clients._base import SyncKeyValueClient
from httpstash._core._clients._memory import SyncInMemoryClient
from httpstash._core._clients._redis import RedisConfig, SyncRedisClient

__all__ = ("SyncKeyValueClient", "SyncInMemoryClient", "SyncRedisClient", "RedisConfig")
