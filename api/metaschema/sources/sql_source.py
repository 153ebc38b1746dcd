"""SQLAlchemy-backed schema data source."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from metaschema.models.category import Category
from metaschema.models.metadata_field import MetadataField, MetadataOption
from metaschema.models.visibility import (
    MetadataFieldVisibility,
    MetadataOptionVisibility,
    SystemCategoryFieldSuppression,
)
from metaschema.sources.base import (
    CategoryRecord,
    FieldOverrideRecord,
    FieldRecord,
    OptionOverrideRecord,
    OptionRecord,
    SchemaDataSource,
)


def _scope_clause(model, brand_id: Optional[int], category_id: Optional[int]):
    """OR of the scope tiers a request can see: tenant, brand, brand+category."""
    clauses = [and_(model.brand_id.is_(None), model.category_id.is_(None))]
    if brand_id is not None:
        clauses.append(and_(model.brand_id == brand_id, model.category_id.is_(None)))
        if category_id is not None:
            clauses.append(and_(model.brand_id == brand_id, model.category_id == category_id))
    return or_(*clauses)


class SqlSchemaDataSource(SchemaDataSource):
    """Reads catalog and override rows through a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def load_fields(self, tenant_id: int, asset_type: str) -> List[FieldRecord]:
        rows = (
            self.db.query(MetadataField)
            .filter(
                MetadataField.applies_to.in_([asset_type, "all"]),
                MetadataField.deprecated_at.is_(None),
                MetadataField.archived_at.is_(None),
                or_(
                    and_(MetadataField.scope == "system", MetadataField.tenant_id.is_(None)),
                    and_(
                        MetadataField.scope == "tenant",
                        MetadataField.tenant_id == tenant_id,
                        MetadataField.is_active == True,  # noqa: E712
                    ),
                ),
            )
            .order_by(MetadataField.id.asc())
            .all()
        )
        return [FieldRecord.model_validate(row) for row in rows]

    def load_options(self, field_ids: Iterable[int]) -> Dict[int, List[OptionRecord]]:
        field_ids = list(field_ids)
        if not field_ids:
            return {}

        rows = (
            self.db.query(MetadataOption)
            .filter(MetadataOption.metadata_field_id.in_(field_ids))
            .order_by(MetadataOption.system_label.asc(), MetadataOption.id.asc())
            .all()
        )
        by_field: Dict[int, List[OptionRecord]] = defaultdict(list)
        for row in rows:
            by_field[row.metadata_field_id].append(OptionRecord.model_validate(row))
        return dict(by_field)

    def load_field_overrides(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        field_ids: Iterable[int],
    ) -> List[FieldOverrideRecord]:
        field_ids = list(field_ids)
        if not field_ids:
            return []

        rows = (
            self.db.query(MetadataFieldVisibility)
            .filter(
                MetadataFieldVisibility.tenant_id == tenant_id,
                MetadataFieldVisibility.metadata_field_id.in_(field_ids),
                _scope_clause(MetadataFieldVisibility, brand_id, category_id),
            )
            .all()
        )
        return [FieldOverrideRecord.model_validate(row) for row in rows]

    def load_option_overrides(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        option_ids: Iterable[int],
    ) -> List[OptionOverrideRecord]:
        option_ids = list(option_ids)
        if not option_ids:
            return []

        rows = (
            self.db.query(MetadataOptionVisibility)
            .filter(
                MetadataOptionVisibility.tenant_id == tenant_id,
                MetadataOptionVisibility.metadata_option_id.in_(option_ids),
                _scope_clause(MetadataOptionVisibility, brand_id, category_id),
            )
            .all()
        )
        return [OptionOverrideRecord.model_validate(row) for row in rows]

    def get_category(self, category_id: int) -> Optional[CategoryRecord]:
        row = self.db.query(Category).filter(Category.id == category_id).first()
        if row is None:
            return None
        return CategoryRecord.model_validate(row)

    def load_suppressed_field_ids(self, system_category_id: int) -> Set[int]:
        rows = (
            self.db.query(SystemCategoryFieldSuppression.metadata_field_id)
            .filter(SystemCategoryFieldSuppression.system_category_id == system_category_id)
            .all()
        )
        return {row[0] for row in rows}
