"""Visibility override configuration.

Upserts keep at most one override row per (target, tenant, brand, category)
scope key, and every row is written with its complete flag triple. Schema
cache invalidation happens on commit through the session observers.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from metaschema.models.category import Category, SystemCategory
from metaschema.models.metadata_field import MetadataField, MetadataOption
from metaschema.models.tenant import Brand
from metaschema.models.visibility import (
    MetadataFieldVisibility,
    MetadataOptionVisibility,
    SystemCategoryFieldSuppression,
)
from metaschema.services.errors import ScopeContractError

logger = logging.getLogger(__name__)


def _scope_filter(query, model, brand_id: Optional[int], category_id: Optional[int]):
    """Exact scope-key match, treating NULL as a value."""
    if brand_id is None:
        query = query.filter(model.brand_id.is_(None))
    else:
        query = query.filter(model.brand_id == brand_id)
    if category_id is None:
        query = query.filter(model.category_id.is_(None))
    else:
        query = query.filter(model.category_id == category_id)
    return query


def validate_scope(db: Session, tenant_id: int, brand_id: Optional[int], category_id: Optional[int]) -> None:
    """Check an override scope before writing.

    Raises:
        ValueError: If a category is given without its brand
        LookupError: If the brand or category does not exist for the tenant
        ScopeContractError: If the category belongs to another brand
    """
    if category_id is not None and brand_id is None:
        raise ValueError("A category-level override requires its brand")

    if brand_id is not None:
        brand = db.query(Brand).filter(Brand.id == brand_id, Brand.tenant_id == tenant_id).first()
        if not brand:
            raise LookupError(f"Brand {brand_id} not found for tenant {tenant_id}")

    if category_id is not None:
        category = (
            db.query(Category)
            .filter(Category.id == category_id, Category.tenant_id == tenant_id)
            .first()
        )
        if not category:
            raise LookupError(f"Category {category_id} not found for tenant {tenant_id}")
        if category.brand_id != brand_id:
            raise ScopeContractError(category_id, brand_id, category.brand_id)


def get_accessible_field(db: Session, tenant_id: int, field_id: int) -> MetadataField:
    """System field, or a field owned by the tenant.

    Raises:
        LookupError: If no such field is visible to the tenant
    """
    field = db.query(MetadataField).filter(MetadataField.id == field_id).first()
    if not field or (field.tenant_id is not None and field.tenant_id != tenant_id):
        raise LookupError(f"Metadata field {field_id} not found for tenant {tenant_id}")
    return field


def get_accessible_option(db: Session, tenant_id: int, option_id: int) -> MetadataOption:
    """Option whose field is accessible to the tenant."""
    option = db.query(MetadataOption).filter(MetadataOption.id == option_id).first()
    if not option:
        raise LookupError(f"Metadata option {option_id} not found")
    get_accessible_field(db, tenant_id, option.metadata_field_id)
    return option


def set_field_visibility(
    db: Session,
    tenant_id: int,
    field_id: int,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    is_hidden: bool = False,
    is_upload_hidden: bool = False,
    is_filter_hidden: bool = False,
) -> MetadataFieldVisibility:
    """Create or replace the field override for one scope.

    Examples:
        >>> row = set_field_visibility(db, tenant_id=1, field_id=7, brand_id=3, is_upload_hidden=True)
        >>> (row.is_hidden, row.is_upload_hidden, row.is_filter_hidden)
        (False, True, False)
    """
    get_accessible_field(db, tenant_id, field_id)
    validate_scope(db, tenant_id, brand_id, category_id)

    query = db.query(MetadataFieldVisibility).filter(
        MetadataFieldVisibility.metadata_field_id == field_id,
        MetadataFieldVisibility.tenant_id == tenant_id,
    )
    row = _scope_filter(query, MetadataFieldVisibility, brand_id, category_id).first()

    if row is None:
        row = MetadataFieldVisibility(
            metadata_field_id=field_id,
            tenant_id=tenant_id,
            brand_id=brand_id,
            category_id=category_id,
        )
        db.add(row)

    row.is_hidden = is_hidden
    row.is_upload_hidden = is_upload_hidden
    row.is_filter_hidden = is_filter_hidden
    db.commit()
    db.refresh(row)

    logger.info(
        f"Field visibility override set: tenant={tenant_id} field={field_id} brand={brand_id} "
        f"category={category_id} hidden={is_hidden} upload_hidden={is_upload_hidden} "
        f"filter_hidden={is_filter_hidden}"
    )
    return row


def remove_field_visibility(
    db: Session,
    tenant_id: int,
    field_id: int,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
) -> bool:
    """Delete the field override for one scope. Returns False if none existed."""
    query = db.query(MetadataFieldVisibility).filter(
        MetadataFieldVisibility.metadata_field_id == field_id,
        MetadataFieldVisibility.tenant_id == tenant_id,
    )
    row = _scope_filter(query, MetadataFieldVisibility, brand_id, category_id).first()
    if not row:
        return False

    db.delete(row)
    db.commit()
    logger.info(
        f"Field visibility override removed: tenant={tenant_id} field={field_id} "
        f"brand={brand_id} category={category_id}"
    )
    return True


def set_option_visibility(
    db: Session,
    tenant_id: int,
    option_id: int,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
    is_hidden: bool = False,
) -> MetadataOptionVisibility:
    """Create or replace the option override for one scope."""
    get_accessible_option(db, tenant_id, option_id)
    validate_scope(db, tenant_id, brand_id, category_id)

    query = db.query(MetadataOptionVisibility).filter(
        MetadataOptionVisibility.metadata_option_id == option_id,
        MetadataOptionVisibility.tenant_id == tenant_id,
    )
    row = _scope_filter(query, MetadataOptionVisibility, brand_id, category_id).first()

    if row is None:
        row = MetadataOptionVisibility(
            metadata_option_id=option_id,
            tenant_id=tenant_id,
            brand_id=brand_id,
            category_id=category_id,
        )
        db.add(row)

    row.is_hidden = is_hidden
    db.commit()
    db.refresh(row)

    logger.info(
        f"Option visibility override set: tenant={tenant_id} option={option_id} brand={brand_id} "
        f"category={category_id} hidden={is_hidden}"
    )
    return row


def remove_option_visibility(
    db: Session,
    tenant_id: int,
    option_id: int,
    brand_id: Optional[int] = None,
    category_id: Optional[int] = None,
) -> bool:
    """Delete the option override for one scope. Returns False if none existed."""
    query = db.query(MetadataOptionVisibility).filter(
        MetadataOptionVisibility.metadata_option_id == option_id,
        MetadataOptionVisibility.tenant_id == tenant_id,
    )
    row = _scope_filter(query, MetadataOptionVisibility, brand_id, category_id).first()
    if not row:
        return False

    db.delete(row)
    db.commit()
    logger.info(
        f"Option visibility override removed: tenant={tenant_id} option={option_id} "
        f"brand={brand_id} category={category_id}"
    )
    return True


def suppress_field_for_system_category(
    db: Session,
    field_id: int,
    system_category_id: int,
) -> SystemCategoryFieldSuppression:
    """Suppress a field for every category linked to a system category. Idempotent."""
    if not db.query(MetadataField).filter(MetadataField.id == field_id).first():
        raise LookupError(f"Metadata field {field_id} not found")
    if not db.query(SystemCategory).filter(SystemCategory.id == system_category_id).first():
        raise LookupError(f"System category {system_category_id} not found")

    existing = (
        db.query(SystemCategoryFieldSuppression)
        .filter(
            SystemCategoryFieldSuppression.metadata_field_id == field_id,
            SystemCategoryFieldSuppression.system_category_id == system_category_id,
        )
        .first()
    )
    if existing:
        return existing

    row = SystemCategoryFieldSuppression(
        metadata_field_id=field_id,
        system_category_id=system_category_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    logger.info(f"Field {field_id} suppressed for system category {system_category_id}")
    return row


def unsuppress_field_for_system_category(db: Session, field_id: int, system_category_id: int) -> bool:
    """Remove a suppression link. Returns False if none existed."""
    row = (
        db.query(SystemCategoryFieldSuppression)
        .filter(
            SystemCategoryFieldSuppression.metadata_field_id == field_id,
            SystemCategoryFieldSuppression.system_category_id == system_category_id,
        )
        .first()
    )
    if not row:
        return False

    db.delete(row)
    db.commit()
    logger.info(f"Field {field_id} unsuppressed for system category {system_category_id}")
    return True
