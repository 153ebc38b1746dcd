"""Tests for commit-driven schema cache invalidation."""

from metaschema.cache.memory_backend import MemoryCacheBackend
from metaschema.cache.observers import SchemaCacheInvalidator
from metaschema.cache.schema_cache import SchemaCache
from metaschema.models import MetadataFieldVisibility
from metaschema.schemas.metadata_schema import ResolvedSchema


class TestSchemaCacheInvalidator:
    """Tests for SchemaCacheInvalidator."""

    def test_tenant_override_bumps_tenant(self, factory, schema_cache):
        tenant = factory.tenant("One")
        other = factory.tenant("Two")
        field = factory.field("caption")

        factory.field_override(field, tenant, is_hidden=True)

        assert schema_cache.current_version(tenant.id) == 1
        assert schema_cache.current_version(other.id) == 0

    def test_tenant_field_and_option_bump_owner(self, factory, schema_cache):
        tenant = factory.tenant()
        field = factory.field("sku_family", type="select", tenant=tenant)
        assert schema_cache.current_version(tenant.id) == 1

        factory.option(field, "core")
        assert schema_cache.current_version(tenant.id) == 2

    def test_option_override_bumps_tenant(self, factory, schema_cache):
        tenant = factory.tenant()
        option = factory.option(factory.field("orientation", type="select"), "square")

        factory.option_override(option, tenant)
        assert schema_cache.current_version(tenant.id) == 1

    def test_system_changes_flush_globally(self, factory, schema_cache, cache_backend):
        tenant = factory.tenant()
        field = factory.field("orientation", type="select")
        schema_cache.remember(tenant.id, None, None, "image", ResolvedSchema)
        assert len(cache_backend) == 1

        factory.option(field, "square")
        assert len(cache_backend) == 0
        assert schema_cache.current_version(tenant.id) == 0

    def test_suppression_flushes_globally(self, factory, schema_cache, cache_backend):
        tenant = factory.tenant()
        logos = factory.system_category("logos")
        field = factory.field("photo_type")
        schema_cache.remember(tenant.id, None, None, "image", ResolvedSchema)

        factory.suppression(field, logos)
        assert len(cache_backend) == 0

    def test_delete_bumps(self, factory, test_db, schema_cache):
        tenant = factory.tenant()
        row = factory.field_override(factory.field("caption"), tenant, is_hidden=True)
        assert schema_cache.current_version(tenant.id) == 1

        test_db.delete(row)
        test_db.commit()
        assert schema_cache.current_version(tenant.id) == 2

    def test_one_bump_per_tenant_per_commit(self, factory, test_db, schema_cache):
        tenant = factory.tenant()
        first = factory.field("caption")
        second = factory.field("credit")

        test_db.add_all(
            [
                MetadataFieldVisibility(metadata_field_id=first.id, tenant_id=tenant.id, is_hidden=True),
                MetadataFieldVisibility(metadata_field_id=second.id, tenant_id=tenant.id, is_hidden=True),
            ]
        )
        test_db.commit()
        assert schema_cache.current_version(tenant.id) == 1

    def test_rollback_discards_pending(self, factory, test_db, schema_cache):
        tenant = factory.tenant()
        field = factory.field("caption")

        test_db.add(MetadataFieldVisibility(metadata_field_id=field.id, tenant_id=tenant.id, is_hidden=True))
        test_db.flush()
        test_db.rollback()

        assert schema_cache.current_version(tenant.id) == 0
        factory.brand(tenant)
        assert schema_cache.current_version(tenant.id) == 0

    def test_every_attached_invalidator_applies_its_changes(self, factory, session_factory, schema_cache):
        second_cache = SchemaCache(MemoryCacheBackend(), prefix="second_schema")
        second = SchemaCacheInvalidator(second_cache)
        second.attach(session_factory)
        try:
            tenant = factory.tenant()
            factory.field_override(factory.field("caption"), tenant, is_hidden=True)

            assert schema_cache.current_version(tenant.id) == 1
            assert second_cache.current_version(tenant.id) == 1
        finally:
            second.detach(session_factory)
