"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("SCHEMA_CACHE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from metaschema.api.deps import get_db, get_schema_cache
from metaschema.cache.memory_backend import MemoryCacheBackend
from metaschema.cache.observers import SchemaCacheInvalidator
from metaschema.cache.schema_cache import SchemaCache
from metaschema.main import app
from metaschema.models import (
    Base,
    Brand,
    Category,
    MetadataField,
    MetadataFieldVisibility,
    MetadataOption,
    MetadataOptionVisibility,
    SystemCategory,
    SystemCategoryFieldSuppression,
    Tenant,
)
from metaschema.services.permission_resolver import RolePermissionResolver
from metaschema.services.schema_resolver import SchemaResolver
from metaschema.services.upload_schema_resolver import UploadSchemaResolver
from metaschema.services.visibility_resolver import MetadataVisibilityResolver
from metaschema.sources.sql_source import SqlSchemaDataSource

ASSET_TYPES = ["image", "video", "document"]
EDITOR_ROLES = ["owner", "admin", "brand_manager", "contributor"]


@pytest.fixture
def test_engine():
    """Create test database engine."""
    # In-memory SQLite shared by every connection of one test
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def cache_backend():
    return MemoryCacheBackend()


@pytest.fixture
def schema_cache(cache_backend):
    return SchemaCache(cache_backend, prefix="test_schema")


@pytest.fixture
def invalidator(schema_cache, session_factory):
    """Cache invalidation wired to the test session factory."""
    observer = SchemaCacheInvalidator(schema_cache)
    observer.attach(session_factory)
    yield observer
    observer.detach(session_factory)


@pytest.fixture
def test_db(session_factory, invalidator):
    """Create a test database session."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


class CatalogFactory:
    """Builds tenants, categories, catalog rows and overrides for tests."""

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def tenant(self, name="Tenant"):
        return self._save(Tenant(name=name))

    def brand(self, tenant, name="Brand"):
        return self._save(Brand(tenant_id=tenant.id, name=name))

    def system_category(self, slug="photography", name=None):
        return self._save(SystemCategory(slug=slug, name=name or slug.title()))

    def category(self, brand, system_category=None, slug="photos", asset_type="image"):
        return self._save(
            Category(
                tenant_id=brand.tenant_id,
                brand_id=brand.id,
                system_category_id=system_category.id if system_category else None,
                name=slug.title(),
                slug=slug,
                asset_type=asset_type,
            )
        )

    def field(self, key, type="text", applies_to="all", tenant=None, options=(), **attrs):
        attrs.setdefault("system_label", key.replace("_", " ").title())
        field = self._save(
            MetadataField(
                key=key,
                type=type,
                applies_to=applies_to,
                scope="tenant" if tenant else "system",
                tenant_id=tenant.id if tenant else None,
                **attrs,
            )
        )
        for value in options:
            self.option(field, value)
        return field

    def option(self, field, value, label=None, **attrs):
        return self._save(
            MetadataOption(
                metadata_field_id=field.id,
                value=value,
                system_label=label or value.replace("_", " ").title(),
                **attrs,
            )
        )

    def field_override(self, field, tenant, brand=None, category=None, **flags):
        return self._save(
            MetadataFieldVisibility(
                metadata_field_id=field.id,
                tenant_id=tenant.id,
                brand_id=brand.id if brand else None,
                category_id=category.id if category else None,
                **flags,
            )
        )

    def option_override(self, option, tenant, brand=None, category=None, is_hidden=True):
        return self._save(
            MetadataOptionVisibility(
                metadata_option_id=option.id,
                tenant_id=tenant.id,
                brand_id=brand.id if brand else None,
                category_id=category.id if category else None,
                is_hidden=is_hidden,
            )
        )

    def suppression(self, field, system_category):
        return self._save(
            SystemCategoryFieldSuppression(
                metadata_field_id=field.id,
                system_category_id=system_category.id,
            )
        )


@pytest.fixture
def factory(test_db):
    return CatalogFactory(test_db)


@pytest.fixture
def data_source(test_db):
    return SqlSchemaDataSource(test_db)


@pytest.fixture
def resolver(data_source):
    """Uncached, strict resolver."""
    return SchemaResolver(data_source, asset_types=ASSET_TYPES, strict_scope=True)


@pytest.fixture
def cached_resolver(data_source, schema_cache):
    return SchemaResolver(data_source, cache=schema_cache, asset_types=ASSET_TYPES, strict_scope=True)


@pytest.fixture
def upload_resolver(resolver, data_source):
    return UploadSchemaResolver(
        resolver,
        MetadataVisibilityResolver(data_source),
        RolePermissionResolver(EDITOR_ROLES),
    )


@pytest.fixture
def client(test_db, schema_cache):
    """Create a test client with database session and cache overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_schema_cache] = lambda: schema_cache
    yield TestClient(app)
    app.dependency_overrides.clear()
