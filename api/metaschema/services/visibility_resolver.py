"""Category suppression filter applied after schema resolution.

A field suppressed for a system category is removed from every tenant
category linked to that system category, whatever the override cascade
decided. Tenant-custom categories (no system category) and a missing
category pass every field through.
"""

import logging
from typing import List, Optional, Set

from metaschema.schemas.metadata_schema import ResolvedField
from metaschema.sources.base import CategoryRecord, SchemaDataSource

logger = logging.getLogger(__name__)


class MetadataVisibilityResolver:
    """Applies system-category suppression to resolved fields."""

    def __init__(self, data_source: SchemaDataSource):
        self.data_source = data_source

    def _suppressed_ids(self, category: Optional[CategoryRecord]) -> Set[int]:
        if category is None or category.system_category_id is None:
            return set()
        return self.data_source.load_suppressed_field_ids(category.system_category_id)

    def filter_visible_fields(
        self,
        fields: List[ResolvedField],
        category: Optional[CategoryRecord],
    ) -> List[ResolvedField]:
        """Drop fields suppressed for the category's system category; order is kept."""
        suppressed = self._suppressed_ids(category)
        if not suppressed:
            return list(fields)

        visible = [field for field in fields if field.field_id not in suppressed]
        if len(visible) != len(fields):
            logger.debug(
                f"Category {category.id} suppressed {len(fields) - len(visible)} field(s) "
                f"via system category {category.system_category_id}"
            )
        return visible

    def is_field_visible(self, field: ResolvedField, category: Optional[CategoryRecord]) -> bool:
        return field.field_id not in self._suppressed_ids(category)
