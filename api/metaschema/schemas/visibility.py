"""Visibility override request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScopeMixin(BaseModel):
    """Override scope below the tenant. A category always requires its brand."""

    brand_id: Optional[int] = Field(None, description="Brand scope (omit for tenant level)")
    category_id: Optional[int] = Field(None, description="Category scope (requires brand_id)")

    @model_validator(mode="after")
    def category_requires_brand(self):
        if self.category_id is not None and self.brand_id is None:
            raise ValueError("category_id requires brand_id")
        return self


class FieldVisibilityUpdate(ScopeMixin):
    """Complete flag triple for a field override; unset flags mean 'not hidden'."""

    is_hidden: bool = False
    is_upload_hidden: bool = False
    is_filter_hidden: bool = False


class FieldVisibilityResponse(FieldVisibilityUpdate):
    """Stored field override."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    metadata_field_id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class OptionVisibilityUpdate(ScopeMixin):
    """Option override."""

    is_hidden: bool = False


class OptionVisibilityResponse(OptionVisibilityUpdate):
    """Stored option override."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    metadata_option_id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class SuppressionResponse(BaseModel):
    """System category suppression link."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    metadata_field_id: int
    system_category_id: int
    created_at: datetime
