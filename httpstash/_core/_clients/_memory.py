from __future__ import annotations

import fnmatch
import threading
import time
import typing as tp

from httpstash._core._clients._base import SyncKeyValueClient

__all__ = ("SyncInMemoryClient",)


class SyncInMemoryClient(SyncKeyValueClient):
    """
    A process-local backend.

    Keys expire lazily: an expired key is dropped the next time it is read or
    listed. Hash values are stored as bytes, the same way redis returns them.
    """

    def __init__(self) -> None:
        self._values: tp.Dict[str, tp.Tuple[bytes, tp.Optional[float]]] = {}
        self._hashes: tp.Dict[str, tp.Dict[str, bytes]] = {}
        self._lock = threading.Lock()

    def _is_expired(self, key: str) -> bool:
        _, expires_at = self._values[key]
        return expires_at is not None and expires_at <= time.monotonic()

    def _remove_expired(self) -> None:
        for key in [key for key in self._values if self._is_expired(key)]:
            del self._values[key]

    def get(self, key: str) -> tp.Optional[bytes]:
        with self._lock:
            if key not in self._values:
                return None
            if self._is_expired(key):
                del self._values[key]
                return None
            return self._values[key][0]

    def set(self, key: str, value: bytes, ttl: tp.Optional[tp.Union[int, float]] = None) -> bool:
        expires_at = time.monotonic() + ttl if ttl is not None else None
        with self._lock:
            self._values[key] = (bytes(value), expires_at)
        return True

    def delete(self, key: str) -> int:
        with self._lock:
            removed = int(key in self._values and not self._is_expired(key))
            self._values.pop(key, None)
            removed += int(self._hashes.pop(key, None) is not None)
        return removed

    def keys(self, pattern: str) -> tp.List[str]:
        with self._lock:
            self._remove_expired()
            names = list(self._values) + list(self._hashes)
        return [name for name in names if fnmatch.fnmatchcase(name, pattern)]

    def hsetnx(self, name: str, field: str, value: tp.Union[bytes, str, int]) -> int:
        with self._lock:
            fields = self._hashes.setdefault(name, {})
            if field in fields:
                return 0
            fields[field] = value if isinstance(value, bytes) else str(value).encode("utf-8")
            return 1

    def hget(self, name: str, field: str) -> tp.Optional[bytes]:
        with self._lock:
            return self._hashes.get(name, {}).get(field)

    def hdel(self, name: str, field: str) -> int:
        with self._lock:
            fields = self._hashes.get(name)
            if fields is None or field not in fields:
                return 0
            del fields[field]
            if not fields:
                del self._hashes[name]
            return 1

    def delete_hash(self, name: str) -> bool:
        with self._lock:
            self._hashes.pop(name, None)
        return True
