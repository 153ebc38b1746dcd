"""API dependencies."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from metaschema.cache.factory import build_schema_cache
from metaschema.cache.schema_cache import SchemaCache
from metaschema.config import settings
from metaschema.database import get_db
from metaschema.services.permission_resolver import MetadataPermissionResolver, RolePermissionResolver
from metaschema.services.schema_resolver import SchemaResolver
from metaschema.services.upload_schema_resolver import UploadSchemaResolver
from metaschema.services.visibility_resolver import MetadataVisibilityResolver
from metaschema.sources.sql_source import SqlSchemaDataSource

__all__ = [
    "get_db",
    "get_tenant_id",
    "get_schema_cache",
    "get_permission_resolver",
    "get_schema_resolver",
    "get_upload_schema_resolver",
]


def get_tenant_id(x_tenant_id: Optional[int] = Header(None)) -> int:
    """Get tenant ID from header."""
    if x_tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required",
        )
    return x_tenant_id


@lru_cache
def get_schema_cache() -> SchemaCache:
    """Process-wide schema cache built from settings."""
    return build_schema_cache(settings)


def get_permission_resolver() -> MetadataPermissionResolver:
    return RolePermissionResolver(settings.metadata_editor_roles)


def get_schema_resolver(
    db: Session = Depends(get_db),
    cache: SchemaCache = Depends(get_schema_cache),
) -> SchemaResolver:
    """Canonical resolver bound to the request session."""
    return SchemaResolver(SqlSchemaDataSource(db), cache=cache)


def get_upload_schema_resolver(
    schema_resolver: SchemaResolver = Depends(get_schema_resolver),
    permission_resolver: MetadataPermissionResolver = Depends(get_permission_resolver),
) -> UploadSchemaResolver:
    return UploadSchemaResolver(
        schema_resolver,
        MetadataVisibilityResolver(schema_resolver.data_source),
        permission_resolver,
    )
