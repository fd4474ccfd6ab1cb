from __future__ import annotations

import abc
import typing as tp


class SyncKeyValueClient(abc.ABC):
    """
    The key-value operations a cache store needs from its backend.

    Every operation is atomic for a single key. ``ttl`` values are in seconds.
    """

    @abc.abstractmethod
    def get(self, key: str) -> tp.Optional[bytes]:
        raise NotImplementedError()

    @abc.abstractmethod
    def set(self, key: str, value: bytes, ttl: tp.Optional[tp.Union[int, float]] = None) -> bool:
        raise NotImplementedError()

    @abc.abstractmethod
    def delete(self, key: str) -> int:
        raise NotImplementedError()

    @abc.abstractmethod
    def keys(self, pattern: str) -> tp.List[str]:
        """Returns the names of all keys matching a glob-style pattern."""
        raise NotImplementedError()

    @abc.abstractmethod
    def hsetnx(self, name: str, field: str, value: tp.Union[bytes, str, int]) -> int:
        """Sets a hash field only if it does not exist yet, returning 1 if it was set."""
        raise NotImplementedError()

    @abc.abstractmethod
    def hget(self, name: str, field: str) -> tp.Optional[bytes]:
        raise NotImplementedError()

    @abc.abstractmethod
    def hdel(self, name: str, field: str) -> int:
        raise NotImplementedError()

    @abc.abstractmethod
    def delete_hash(self, name: str) -> bool:
        raise NotImplementedError()

    def strip_prefix(self, key: str) -> str:
        """
        Turns a name returned by :meth:`keys` back into a key accepted by the
        other operations. Backends that namespace their keys override this.
        """
        return key

    def close(self) -> None:
        pass
