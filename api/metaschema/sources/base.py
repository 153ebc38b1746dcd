"""Read-only data provider interface for schema resolution."""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, ConfigDict


class FieldRecord(BaseModel):
    """Catalog field as seen by the resolvers."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    key: str
    system_label: str
    type: str
    applies_to: str
    tenant_id: Optional[int] = None
    is_filterable: bool = True
    is_user_editable: bool = True
    is_upload_visible: bool = True
    is_internal_only: bool = False
    group_key: Optional[str] = None


class OptionRecord(BaseModel):
    """Catalog option."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    metadata_field_id: int
    value: str
    system_label: str
    color: Optional[str] = None
    icon: Optional[str] = None


class FieldOverrideRecord(BaseModel):
    """Field visibility override row: scope key plus the complete flag triple."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    metadata_field_id: int
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    is_hidden: bool = False
    is_upload_hidden: bool = False
    is_filter_hidden: bool = False


class OptionOverrideRecord(BaseModel):
    """Option visibility override row."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    metadata_option_id: int
    brand_id: Optional[int] = None
    category_id: Optional[int] = None
    is_hidden: bool = False


class CategoryRecord(BaseModel):
    """Category with its brand and optional system category link."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    tenant_id: int
    brand_id: int
    system_category_id: Optional[int] = None


class SchemaDataSource(ABC):
    """Base class for catalog/override providers.

    Implementations only read. Scope filtering here is a pre-filter; the
    resolvers apply the precedence rules themselves.
    """

    @abstractmethod
    def load_fields(self, tenant_id: int, asset_type: str) -> List[FieldRecord]:
        """Fields applying to asset_type (or "all"), system plus this tenant's, in id order.

        Deprecated, archived and inactive tenant fields are excluded.
        """

    @abstractmethod
    def load_options(self, field_ids: Iterable[int]) -> Dict[int, List[OptionRecord]]:
        """Options keyed by field id, each list ordered by label."""

    @abstractmethod
    def load_field_overrides(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        field_ids: Iterable[int],
    ) -> List[FieldOverrideRecord]:
        """Field override rows of the tenant that may apply to the scope."""

    @abstractmethod
    def load_option_overrides(
        self,
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        option_ids: Iterable[int],
    ) -> List[OptionOverrideRecord]:
        """Option override rows of the tenant that may apply to the scope."""

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[CategoryRecord]:
        """Category by id, or None when unknown."""

    @abstractmethod
    def load_suppressed_field_ids(self, system_category_id: int) -> Set[int]:
        """Ids of fields suppressed for a system category."""
