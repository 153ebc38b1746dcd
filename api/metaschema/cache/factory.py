"""Cache backend factory."""

from typing import Optional

from metaschema.cache.base import BaseCacheBackend, CacheBackendError
from metaschema.cache.memory_backend import MemoryCacheBackend, NullCacheBackend
from metaschema.cache.redis_backend import RedisCacheBackend
from metaschema.cache.schema_cache import SchemaCache
from metaschema.config import Settings, settings as default_settings


def get_cache_backend(provider: str, redis_url: Optional[str] = None, prefix: str = "metadata_schema") -> BaseCacheBackend:
    """Get cache backend from explicit configuration.

    Args:
        provider: Backend name (redis, memory, none)
        redis_url: Redis URL, required for the redis backend
        prefix: Key prefix, used for redis tag sets

    Returns:
        Configured backend instance

    Raises:
        CacheBackendError: If the provider is unknown or misconfigured

    Example:
        >>> backend = get_cache_backend("memory")
    """
    provider = provider.lower()

    if provider == "redis":
        if not redis_url:
            raise CacheBackendError("redis_url is required for the redis cache backend")
        return RedisCacheBackend.from_url(redis_url, tag_prefix=f"{prefix}:tag")
    elif provider == "memory":
        return MemoryCacheBackend()
    elif provider == "none":
        return NullCacheBackend()
    else:
        raise CacheBackendError(f"Unsupported cache backend: {provider}")


def build_schema_cache(config: Optional[Settings] = None) -> SchemaCache:
    """Build the schema cache described by settings."""
    config = config or default_settings
    backend = get_cache_backend(
        config.schema_cache_backend,
        redis_url=config.redis_url,
        prefix=config.schema_cache_prefix,
    )
    return SchemaCache(
        backend,
        prefix=config.schema_cache_prefix,
        lock_timeout=config.schema_cache_lock_timeout,
        log_hits=not config.is_production,
    )
