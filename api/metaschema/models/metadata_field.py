"""Metadata field and option catalog models."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import relationship

from metaschema.database import Base


class MetadataField(Base):
    """
    Metadata field definition, owned by the system (tenant_id NULL) or a tenant.
    Keys are immutable; fields are deprecated or archived, never deleted.
    """

    __tablename__ = "metadata_fields"
    __table_args__ = (
        UniqueConstraint("scope", "tenant_id", "key", name="uq_metadata_fields_scope_tenant_key"),
        # System fields have a NULL tenant, so the constraint above does not cover them
        Index(
            "uq_metadata_fields_system_key",
            "key",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), nullable=False)
    system_label = Column(String(255), nullable=False)
    # text | select | multiselect | rating | boolean | date | number
    type = Column(String(20), nullable=False)
    # image | video | document | all
    applies_to = Column(String(20), nullable=False, default="all")
    # system | tenant
    scope = Column(String(20), nullable=False, default="system")
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True)
    is_filterable = Column(Boolean, nullable=False, default=True)
    is_user_editable = Column(Boolean, nullable=False, default=True)
    is_upload_visible = Column(Boolean, nullable=False, default=True)
    is_internal_only = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    group_key = Column(String(100), nullable=True)
    replacement_field_id = Column(Integer, ForeignKey("metadata_fields.id"), nullable=True)
    deprecated_at = Column(DateTime, nullable=True)
    archived_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    options = relationship(
        "MetadataOption",
        back_populates="field",
        cascade="all, delete-orphan",
        order_by="MetadataOption.system_label",
    )

    def __repr__(self):
        return f"<MetadataField(id={self.id}, key={self.key}, scope={self.scope}, tenant_id={self.tenant_id})>"


class MetadataOption(Base):
    """Allowed value of a select/multiselect field."""

    __tablename__ = "metadata_options"
    __table_args__ = (
        UniqueConstraint("metadata_field_id", "value", name="uq_metadata_options_field_value"),
    )

    id = Column(Integer, primary_key=True, index=True)
    metadata_field_id = Column(
        Integer,
        ForeignKey("metadata_fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value = Column(String(255), nullable=False)
    system_label = Column(String(255), nullable=False)
    is_system = Column(Boolean, nullable=False, default=True)
    color = Column(String(20), nullable=True)
    icon = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    field = relationship("MetadataField", back_populates="options")

    def __repr__(self):
        return f"<MetadataOption(id={self.id}, field_id={self.metadata_field_id}, value={self.value!r})>"
