"""SQLAlchemy models."""

from metaschema.database import Base
from metaschema.models.tenant import Brand, Tenant
from metaschema.models.category import Category, SystemCategory
from metaschema.models.metadata_field import MetadataField, MetadataOption
from metaschema.models.visibility import (
    MetadataFieldVisibility,
    MetadataOptionVisibility,
    SystemCategoryFieldSuppression,
)

__all__ = [
    "Base",
    "Tenant",
    "Brand",
    "SystemCategory",
    "Category",
    "MetadataField",
    "MetadataOption",
    "MetadataFieldVisibility",
    "MetadataOptionVisibility",
    "SystemCategoryFieldSuppression",
]
