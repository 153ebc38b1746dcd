"""Upload Metadata Schema Resolver.

Adapts the canonical schema into grouped fields for upload forms. Inheritance
is never re-implemented here: the canonical resolver, the category
suppression filter and the permission resolver are called in turn, then
upload-specific rules are applied.

Upload exclusions:
- is_upload_visible = false
- type = rating
- is_internal_only = true
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from metaschema.schemas.metadata_schema import (
    ResolvedField,
    UploadField,
    UploadGroup,
    UploadSchema,
)
from metaschema.services.permission_resolver import MetadataPermissionResolver
from metaschema.services.schema_resolver import SchemaResolver
from metaschema.services.visibility_resolver import MetadataVisibilityResolver

DEFAULT_GROUP_KEY = "general"
EXCLUDED_UPLOAD_TYPES = ("rating",)

GROUP_LABELS = {
    "general": "General",
    "creative": "Creative",
    "technical": "Technical",
    "commercial": "Commercial",
    "legal": "Legal / Rights",
    "legal_rights": "Legal / Rights",
    "ai": "AI / System",
    "ai_system": "AI / System",
}


def group_label(group_key: str) -> str:
    """Human label for a group key: known label, else the key with each word capitalized."""
    known = GROUP_LABELS.get(group_key.lower())
    if known:
        return known
    words = group_key.replace("_", " ").replace("-", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


class UploadSchemaResolver:
    """Upload-form view of the resolved schema."""

    def __init__(
        self,
        schema_resolver: SchemaResolver,
        visibility_resolver: MetadataVisibilityResolver,
        permission_resolver: MetadataPermissionResolver,
    ):
        self.schema_resolver = schema_resolver
        self.visibility_resolver = visibility_resolver
        self.permission_resolver = permission_resolver
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        asset_type: str,
        user_role: Optional[str] = None,
    ) -> UploadSchema:
        """Resolve grouped upload fields for a context."""
        schema = self.schema_resolver.resolve(tenant_id, brand_id, category_id, asset_type)

        category = self.schema_resolver.tenant_category(tenant_id, category_id)
        fields = self.visibility_resolver.filter_visible_fields(schema.fields, category)

        fields = self.permission_resolver.editable_fields(
            fields, tenant_id, brand_id, category_id, user_role
        )

        fields = [field for field in fields if self._is_upload_field(field)]
        if not fields:
            self.logger.debug(
                f"No upload fields for tenant={tenant_id} brand={brand_id} "
                f"category={category_id} asset_type={asset_type}"
            )
            return UploadSchema()

        return UploadSchema(groups=self._group(fields))

    @staticmethod
    def _is_upload_field(field: ResolvedField) -> bool:
        if not field.is_upload_visible:
            return False
        if field.type in EXCLUDED_UPLOAD_TYPES:
            return False
        if field.is_internal_only:
            return False
        return True

    def _group(self, fields: List[ResolvedField]) -> List[UploadGroup]:
        grouped: Dict[str, List[UploadField]] = defaultdict(list)
        for field in fields:
            key = field.group_key or DEFAULT_GROUP_KEY
            grouped[key].append(self._format_field(field))

        return [
            UploadGroup(key=key, label=group_label(key), fields=grouped[key])
            for key in sorted(grouped)
        ]

    @staticmethod
    def _format_field(field: ResolvedField) -> UploadField:
        return UploadField(
            field_id=field.field_id,
            key=field.key,
            display_label=field.display_label,
            type=field.type,
            is_required=False,
            options=list(field.options),
        )
