from __future__ import annotations

import logging
import typing as tp
from contextlib import contextmanager
from dataclasses import dataclass, field

import redis

from httpstash._core._clients._base import SyncKeyValueClient
from httpstash._exceptions import StoreConnectionError, StoreError
from httpstash._utils import float_seconds_to_int_milliseconds

logger = logging.getLogger("httpstash.clients.redis")

__all__ = ("RedisConfig", "SyncRedisClient")


@dataclass
class RedisConfig:
    """
    Connection parameters for :class:`SyncRedisClient`.

    Attributes:
    ----------
    host, port, password, db
        Where and how to connect. ``db`` is the numeric database index that is
        selected on every new connection.
    options
        Extra keyword arguments forwarded to ``redis.Redis``
        (e.g. ``{"socket_timeout": 5, "ssl": True}``).
    socket_connect_timeout
        Seconds to wait for the TCP connection, ``None`` waits forever.
    key_prefix
        Namespace prepended to every key and hash name this client touches.
    """

    host: str = "localhost"
    port: int = 6379
    password: tp.Optional[str] = None
    db: int = 0
    options: tp.Dict[str, tp.Any] = field(default_factory=dict)
    socket_connect_timeout: tp.Optional[float] = None
    key_prefix: str = ""


class SyncRedisClient(SyncKeyValueClient):
    """
    Redis backend.

    A connection is opened for every operation and closed before the operation
    returns, on both success and error paths, so no idle connection is kept
    between unrelated calls.

    :param config: Connection parameters, defaults to ``RedisConfig()``
    :type config: tp.Optional[RedisConfig], optional
    :param client_factory: Builds a fresh ``redis.Redis`` for each operation.
        Defaults to one created from ``config``.
    :type client_factory: tp.Optional[tp.Callable[[], redis.Redis]], optional
    """

    def __init__(
        self,
        config: tp.Optional[RedisConfig] = None,
        client_factory: tp.Optional[tp.Callable[[], redis.Redis]] = None,
    ) -> None:
        self.config = config or RedisConfig()
        self._client_factory = client_factory or self._create_client

    def _create_client(self) -> redis.Redis:
        return redis.Redis(
            host=self.config.host,
            port=self.config.port,
            db=self.config.db,
            password=self.config.password,
            socket_connect_timeout=self.config.socket_connect_timeout,
            single_connection_client=True,
            **self.config.options,
        )

    @contextmanager
    def _connect(self) -> tp.Iterator[redis.Redis]:
        client = self._client_factory()
        try:
            yield client
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as exc:
            logger.error(
                "Redis connection failed: host=%s port=%s db=%s error=%s",
                self.config.host,
                self.config.port,
                self.config.db,
                exc,
            )
            raise StoreConnectionError(f"Could not reach redis at {self.config.host}:{self.config.port}") from exc
        except redis.exceptions.RedisError as exc:
            raise StoreError(str(exc)) from exc
        finally:
            client.close()

    def _key(self, key: str) -> str:
        return f"{self.config.key_prefix}{key}"

    def get(self, key: str) -> tp.Optional[bytes]:
        with self._connect() as client:
            return tp.cast(tp.Optional[bytes], client.get(self._key(key)))

    def set(self, key: str, value: bytes, ttl: tp.Optional[tp.Union[int, float]] = None) -> bool:
        px = float_seconds_to_int_milliseconds(ttl) if ttl is not None else None

        with self._connect() as client:
            return bool(client.set(self._key(key), value, px=px))

    def delete(self, key: str) -> int:
        with self._connect() as client:
            return int(client.delete(self._key(key)))

    def keys(self, pattern: str) -> tp.List[str]:
        with self._connect() as client:
            names = client.keys(self._key(pattern))
        return [name.decode("utf-8") if isinstance(name, bytes) else name for name in names]

    def hsetnx(self, name: str, field: str, value: tp.Union[bytes, str, int]) -> int:
        with self._connect() as client:
            return int(client.hsetnx(self._key(name), field, value))

    def hget(self, name: str, field: str) -> tp.Optional[bytes]:
        with self._connect() as client:
            return tp.cast(tp.Optional[bytes], client.hget(self._key(name), field))

    def hdel(self, name: str, field: str) -> int:
        with self._connect() as client:
            return int(client.hdel(self._key(name), field))

    def delete_hash(self, name: str) -> bool:
        with self._connect() as client:
            client.delete(self._key(name))
        return True

    def strip_prefix(self, key: str) -> str:
        prefix = self.config.key_prefix
        if prefix and key.startswith(prefix):
            return key[len(prefix) :]
        return key
