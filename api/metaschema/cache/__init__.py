"""Schema cache and its backends."""

from metaschema.cache.base import BaseCacheBackend, CacheBackendError
from metaschema.cache.schema_cache import SchemaCache

__all__ = ["BaseCacheBackend", "CacheBackendError", "SchemaCache"]
