"""Metadata Schema Resolver.

Computes the effective metadata schema for a (tenant, brand, category, asset
type) context from catalog defaults and sparse visibility overrides.

Precedence, lowest to highest:
1. Catalog defaults (metadata_fields / metadata_options)
2. Tenant-level override (brand NULL, category NULL)
3. Brand-level override (brand set, category NULL)
4. Category-level override (brand set, category set)

The single most specific row wins with all of its flags; rows are never
merged across tiers. Fields and options are resolved independently.

Resolution reads only. It never writes, never creates missing rows and
returns defaults for unknown scopes.
"""

import logging
from typing import Dict, Iterable, List, Optional

from metaschema.cache.schema_cache import SchemaCache
from metaschema.config import settings
from metaschema.schemas.metadata_schema import ResolvedField, ResolvedOption, ResolvedSchema
from metaschema.services.cascade import select_most_specific
from metaschema.services.errors import InvalidAssetTypeError, ScopeContractError
from metaschema.sources.base import (
    CategoryRecord,
    FieldOverrideRecord,
    FieldRecord,
    OptionOverrideRecord,
    OptionRecord,
    SchemaDataSource,
)

OPTION_FIELD_TYPES = ("select", "multiselect")


class SchemaResolver:
    """Canonical schema resolver."""

    def __init__(
        self,
        data_source: SchemaDataSource,
        cache: Optional[SchemaCache] = None,
        asset_types: Optional[Iterable[str]] = None,
        strict_scope: Optional[bool] = None,
    ):
        self.data_source = data_source
        self.cache = cache
        self.asset_types = tuple(asset_types or settings.metadata_asset_types)
        # Scope violations raise outside production, degrade to empty inside it
        self.strict_scope = (not settings.is_production) if strict_scope is None else strict_scope
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def resolve(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        asset_type: str,
    ) -> ResolvedSchema:
        """Resolve the schema for a context, through the cache when configured.

        Raises:
            InvalidAssetTypeError: If asset_type is not a configured asset type
            ScopeContractError: If the category belongs to another brand (strict mode)
        """
        self._validate_asset_type(asset_type)
        if not self._scope_is_consistent(tenant_id, brand_id, category_id):
            return ResolvedSchema()

        if self.cache is None:
            return self.resolve_uncached(tenant_id, brand_id, category_id, asset_type)

        return self.cache.remember(
            tenant_id,
            brand_id,
            category_id,
            asset_type,
            lambda: self.resolve_uncached(tenant_id, brand_id, category_id, asset_type),
        )

    def resolve_uncached(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        asset_type: str,
    ) -> ResolvedSchema:
        """Resolve without touching the cache."""
        fields = self.data_source.load_fields(tenant_id, asset_type)
        field_ids = [field.id for field in fields]

        field_overrides = select_most_specific(
            self.data_source.load_field_overrides(tenant_id, brand_id, category_id, field_ids),
            lambda row: row.metadata_field_id,
            brand_id,
            category_id,
        )

        resolved: List[ResolvedField] = []
        for field in fields:
            item = self._resolve_field(field, field_overrides.get(field.id))
            if item.is_visible:
                resolved.append(item)

        option_field_ids = [item.field_id for item in resolved if item.type in OPTION_FIELD_TYPES]
        options_by_field = self.data_source.load_options(option_field_ids)
        option_ids = [option.id for options in options_by_field.values() for option in options]
        option_overrides = select_most_specific(
            self.data_source.load_option_overrides(tenant_id, brand_id, category_id, option_ids),
            lambda row: row.metadata_option_id,
            brand_id,
            category_id,
        )

        for item in resolved:
            if item.type in OPTION_FIELD_TYPES:
                item.options = self._resolve_options(
                    options_by_field.get(item.field_id, []),
                    option_overrides,
                )

        self.logger.debug(
            f"Resolved metadata schema tenant={tenant_id} brand={brand_id} "
            f"category={category_id} asset_type={asset_type}: {[item.key for item in resolved]}"
        )
        return ResolvedSchema(fields=resolved)

    def _resolve_field(self, field: FieldRecord, override: Optional[FieldOverrideRecord]) -> ResolvedField:
        if override is None:
            is_visible = True
            is_upload_visible = field.is_upload_visible
            is_filterable = field.is_filterable
        else:
            is_visible = not override.is_hidden
            is_upload_visible = field.is_upload_visible and not override.is_upload_hidden
            is_filterable = field.is_filterable and not override.is_filter_hidden

        return ResolvedField(
            field_id=field.id,
            key=field.key,
            display_label=self._display_label(field),
            type=field.type,
            applies_to=field.applies_to,
            group_key=field.group_key,
            is_visible=is_visible,
            is_upload_visible=is_upload_visible,
            is_filterable=is_filterable,
            is_internal_only=field.is_internal_only,
            is_user_editable=field.is_user_editable,
        )

    def _display_label(self, field: FieldRecord) -> str:
        # TODO: apply tenant label overrides once a label override table exists
        return field.system_label

    @staticmethod
    def _resolve_options(
        options: List[OptionRecord],
        overrides: Dict[int, OptionOverrideRecord],
    ) -> List[ResolvedOption]:
        resolved = []
        for option in options:
            override = overrides.get(option.id)
            if override is not None and override.is_hidden:
                continue
            resolved.append(
                ResolvedOption(
                    option_id=option.id,
                    value=option.value,
                    display_label=option.system_label,
                    color=option.color,
                    icon=option.icon,
                )
            )
        return resolved

    def _validate_asset_type(self, asset_type: str) -> None:
        if asset_type not in self.asset_types:
            raise InvalidAssetTypeError(
                f"Invalid asset_type: {asset_type}. Must be one of: {', '.join(self.asset_types)}"
            )

    def tenant_category(self, tenant_id: int, category_id: Optional[int]) -> Optional[CategoryRecord]:
        """Category by id, or None when unknown or owned by another tenant."""
        if category_id is None:
            return None
        category = self.data_source.get_category(category_id)
        if category is None or category.tenant_id != tenant_id:
            return None
        return category

    def _scope_is_consistent(self, tenant_id: int, brand_id: Optional[int], category_id: Optional[int]) -> bool:
        """Check the category belongs to the brand. Unknown categories pass."""
        if brand_id is None or category_id is None:
            return True

        category = self.tenant_category(tenant_id, category_id)
        if category is None or category.brand_id == brand_id:
            return True

        error = ScopeContractError(category_id, brand_id, category.brand_id)
        if self.strict_scope:
            raise error
        self.logger.warning(f"Scope contract violation, returning empty schema: {error}")
        return False
