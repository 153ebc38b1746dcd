"""
Resolved schema cache with per-tenant version invalidation.

Keys embed the tenant's current version number and a global generation
number. bump_version() makes every earlier key of that tenant unreachable
without deleting it. System-scope changes affect every tenant, so
flush_global() increments the generation, which retires every key of every
tenant, and also deletes the keys carrying the global tag when the backend
supports tags.

Entries have no TTL. Backend failures never reach callers: reads fall back to
a live build, invalidation failures are logged.
"""

import logging
from typing import Callable, Optional, Tuple

from metaschema.cache.base import BaseCacheBackend, CacheBackendError
from metaschema.schemas.metadata_schema import ResolvedSchema

logger = logging.getLogger(__name__)

GLOBAL_TAG = "global"


def _scope_part(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


class SchemaCache:
    """Memoizes schema resolver output per (tenant, generation, version, brand, category, asset type)."""

    def __init__(
        self,
        backend: BaseCacheBackend,
        prefix: str = "metadata_schema",
        lock_timeout: int = 30,
        log_hits: bool = True,
    ):
        self.backend = backend
        self.prefix = prefix
        self.lock_timeout = lock_timeout
        self.log_hits = log_hits

    def generation_key(self) -> str:
        return f"{self.prefix}:generation"

    def current_generation(self) -> int:
        return self.backend.get_counter(self.generation_key())

    def version_key(self, tenant_id: int) -> str:
        return f"{self.prefix}:version:{tenant_id}"

    def current_version(self, tenant_id: int) -> int:
        return self.backend.get_counter(self.version_key(tenant_id))

    def schema_key(
        self,
        tenant_id: int,
        generation: int,
        version: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        asset_type: str,
    ) -> str:
        return (
            f"{self.prefix}:schema:{tenant_id}:g{generation}:v{version}"
            f":b{_scope_part(brand_id)}:c{_scope_part(category_id)}:{asset_type}"
        )

    def remember(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        asset_type: str,
        build: Callable[[], ResolvedSchema],
    ) -> ResolvedSchema:
        """Return the cached schema, building and storing it on a miss.

        Rebuilds of one key are serialized through a backend lock and the
        cache is checked again once the lock is held. A build that overlaps
        an invalidation is returned but not stored.
        """
        try:
            stamp = self._stamp(tenant_id)
            key = self.schema_key(tenant_id, *stamp, brand_id, category_id, asset_type)
            cached = self._read(key)
        except CacheBackendError as e:
            logger.warning(f"Schema cache unavailable, resolving live (tenant={tenant_id}): {e}")
            return build()

        if cached is not None:
            return cached

        schema = None
        try:
            with self.backend.lock(f"{self.prefix}:build:{key}", self.lock_timeout):
                cached = self._read(key)
                if cached is not None:
                    return cached
                schema = build()
                if self._stamp(tenant_id) != stamp:
                    logger.info(f"Schema cache invalidated during build, not storing {key}")
                    return schema
                self._write(key, schema)
        except CacheBackendError as e:
            logger.warning(f"Schema cache write path failed (key={key}): {e}")
            if schema is None:
                schema = build()
        return schema

    def _stamp(self, tenant_id: int) -> Tuple[int, int]:
        """(generation, tenant version) a key is built against."""
        return self.current_generation(), self.current_version(tenant_id)

    def _read(self, key: str) -> Optional[ResolvedSchema]:
        payload = self.backend.get(key)
        if self.log_hits:
            logger.debug(f"Metadata schema cache {'HIT' if payload is not None else 'MISS'}: {key}")
        if payload is None:
            return None
        return ResolvedSchema.model_validate_json(payload)

    def _write(self, key: str, schema: ResolvedSchema) -> None:
        self.backend.set(key, schema.model_dump_json(), tags=(GLOBAL_TAG,))

    def bump_version(self, tenant_id: int) -> Optional[int]:
        """Invalidate every cached schema of a tenant. Returns the new version."""
        try:
            version = self.backend.incr(self.version_key(tenant_id))
        except CacheBackendError as e:
            logger.error(f"Failed to bump schema cache version for tenant {tenant_id}: {e}")
            return None
        logger.info(f"Metadata schema cache version bumped: tenant={tenant_id} version={version}")
        return version

    def flush_global(self) -> int:
        """Retire every cached schema of every tenant.

        Increments the generation; tag-capable backends also delete the
        retired entries. Returns the number of entries deleted.
        """
        try:
            generation = self.backend.incr(self.generation_key())
        except CacheBackendError as e:
            logger.error(f"Failed to bump metadata schema cache generation: {e}")
        else:
            logger.info(f"Metadata schema cache generation bumped: generation={generation}")

        if not self.backend.supports_tags:
            logger.debug("Metadata schema cache backend has no tag support; retired entries left in place")
            return 0
        try:
            deleted = self.backend.flush_tag(GLOBAL_TAG)
        except CacheBackendError as e:
            logger.error(f"Global metadata schema cache flush failed: {e}")
            return 0
        logger.info(f"Metadata schema cache flushed globally: {deleted} entries")
        return deleted
