"""Resolved metadata schema payloads (canonical and upload views)."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ResolvedOption(BaseModel):
    """Visible option of a select/multiselect field."""

    option_id: int
    value: str
    display_label: str
    color: Optional[str] = None
    icon: Optional[str] = None


class ResolvedField(BaseModel):
    """Field with effective flags for one (tenant, brand, category, asset type) context."""

    field_id: int
    key: str
    display_label: str
    type: str
    applies_to: str
    group_key: Optional[str] = None  # Raw; upload grouping applies the default
    is_visible: bool = True
    is_upload_visible: bool
    is_filterable: bool
    is_internal_only: bool
    is_user_editable: bool = True
    options: List[ResolvedOption] = Field(default_factory=list)


class ResolvedSchema(BaseModel):
    """Canonical schema resolver output."""

    fields: List[ResolvedField] = Field(default_factory=list)


class UploadField(BaseModel):
    """Field as presented on an upload form; visibility flags stripped."""

    field_id: int
    key: str
    display_label: str
    type: str
    is_required: bool = False  # Reserved, always false for now
    options: List[ResolvedOption] = Field(default_factory=list)


class UploadGroup(BaseModel):
    """Upload fields sharing a group key."""

    key: str
    label: str
    fields: List[UploadField]


class UploadSchema(BaseModel):
    """Upload schema resolver output; groups sorted by key."""

    groups: List[UploadGroup] = Field(default_factory=list)
