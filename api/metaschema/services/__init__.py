"""Business logic services."""

from metaschema.services.permission_resolver import MetadataPermissionResolver, RolePermissionResolver
from metaschema.services.schema_resolver import SchemaResolver
from metaschema.services.upload_schema_resolver import UploadSchemaResolver
from metaschema.services.visibility_resolver import MetadataVisibilityResolver

__all__ = [
    "SchemaResolver",
    "MetadataVisibilityResolver",
    "MetadataPermissionResolver",
    "RolePermissionResolver",
    "UploadSchemaResolver",
]
