"""Redis cache backend."""

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

import redis
from redis.exceptions import LockError, RedisError

from metaschema.cache.base import BaseCacheBackend, CacheBackendError

logger = logging.getLogger(__name__)


class RedisCacheBackend(BaseCacheBackend):
    """Redis backend. Tags are redis sets holding the member keys."""

    supports_tags = True

    def __init__(self, client: "redis.Redis", tag_prefix: str = "tag"):
        self.client = client
        self.tag_prefix = tag_prefix

    @classmethod
    def from_url(cls, redis_url: str, **kwargs) -> "RedisCacheBackend":
        client = redis.from_url(redis_url, decode_responses=True)
        logger.info("Redis client initialized for metadata schema cache")
        return cls(client, **kwargs)

    def _tag_key(self, tag: str) -> str:
        return f"{self.tag_prefix}:{tag}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed for {key}: {e}") from e

    def set(self, key: str, value: str, tags: Iterable[str] = ()) -> None:
        try:
            pipe = self.client.pipeline()
            pipe.set(key, value)
            for tag in tags:
                pipe.sadd(self._tag_key(tag), key)
            pipe.execute()
        except RedisError as e:
            raise CacheBackendError(f"Redis SET failed for {key}: {e}") from e

    def get_counter(self, key: str) -> int:
        try:
            value = self.client.get(key)
        except RedisError as e:
            raise CacheBackendError(f"Redis GET failed for {key}: {e}") from e
        return int(value) if value is not None else 0

    def incr(self, key: str) -> int:
        try:
            return int(self.client.incr(key))
        except RedisError as e:
            raise CacheBackendError(f"Redis INCR failed for {key}: {e}") from e

    def flush_tag(self, tag: str) -> int:
        tag_key = self._tag_key(tag)
        try:
            keys = list(self.client.smembers(tag_key))
            deleted = self.client.delete(*keys) if keys else 0
            self.client.delete(tag_key)
            return int(deleted)
        except RedisError as e:
            raise CacheBackendError(f"Redis tag flush failed for {tag}: {e}") from e

    @contextmanager
    def lock(self, name: str, timeout: int) -> Iterator[None]:
        lock = self.client.lock(name, timeout=timeout, blocking_timeout=timeout)
        try:
            acquired = lock.acquire()
        except (LockError, RedisError) as e:
            raise CacheBackendError(f"Redis lock failed for {name}: {e}") from e
        if not acquired:
            raise CacheBackendError(f"Timed out waiting for lock {name}")
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError:
                # Lock expired while building; the next writer owns the key now
                logger.warning(f"Lock {name} expired before release")

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as e:
            raise CacheBackendError(f"Redis PING failed: {e}") from e
