"""Process-local cache backends."""

import threading
from collections import defaultdict
from contextlib import nullcontext
from typing import Dict, Iterable, Optional, Set

from metaschema.cache.base import BaseCacheBackend


class MemoryCacheBackend(BaseCacheBackend):
    """Dict-backed backend for single-process deployments and tests."""

    def __init__(self, supports_tags: bool = True):
        self.supports_tags = supports_tags
        self._values: Dict[str, str] = {}
        self._counters: Dict[str, int] = {}
        self._tags: Dict[str, Set[str]] = defaultdict(set)
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str, tags: Iterable[str] = ()) -> None:
        self._values[key] = value
        if self.supports_tags:
            for tag in tags:
                self._tags[tag].add(key)

    def get_counter(self, key: str) -> int:
        return self._counters.get(key, 0)

    def incr(self, key: str) -> int:
        with self._guard:
            self._counters[key] = self._counters.get(key, 0) + 1
            return self._counters[key]

    def flush_tag(self, tag: str) -> int:
        if not self.supports_tags:
            return super().flush_tag(tag)
        keys = self._tags.pop(tag, set())
        deleted = 0
        for key in keys:
            if self._values.pop(key, None) is not None:
                deleted += 1
        return deleted

    def lock(self, name: str, timeout: int):
        with self._guard:
            lock = self._locks.setdefault(name, threading.Lock())
        return lock

    def __len__(self) -> int:
        return len(self._values)


class NullCacheBackend(BaseCacheBackend):
    """Always misses. Resolution runs live on every call."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str, tags: Iterable[str] = ()) -> None:
        return None

    def get_counter(self, key: str) -> int:
        return 0

    def incr(self, key: str) -> int:
        return 0

    def lock(self, name: str, timeout: int):
        return nullcontext()
