"""Sparse visibility override rows and system-category suppression links."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, UniqueConstraint, text

from metaschema.database import Base

TENANT_TIER = text("brand_id IS NULL AND category_id IS NULL")
BRAND_TIER = text("brand_id IS NOT NULL AND category_id IS NULL")


class MetadataFieldVisibility(Base):
    """
    Field visibility override for one scope: tenant, tenant+brand or
    tenant+brand+category. Every row carries the complete flag triple.
    """

    __tablename__ = "metadata_field_visibility"
    __table_args__ = (
        UniqueConstraint(
            "metadata_field_id",
            "tenant_id",
            "brand_id",
            "category_id",
            name="uq_metadata_field_visibility_scope",
        ),
        Index("ix_metadata_field_visibility_tenant_scope", "tenant_id", "brand_id", "category_id"),
        CheckConstraint(
            "category_id IS NULL OR brand_id IS NOT NULL",
            name="ck_metadata_field_visibility_category_brand",
        ),
        # NULL scope columns are distinct in the unique constraint above
        Index(
            "uq_metadata_field_visibility_tenant_tier",
            "metadata_field_id",
            "tenant_id",
            unique=True,
            postgresql_where=TENANT_TIER,
            sqlite_where=TENANT_TIER,
        ),
        Index(
            "uq_metadata_field_visibility_brand_tier",
            "metadata_field_id",
            "tenant_id",
            "brand_id",
            unique=True,
            postgresql_where=BRAND_TIER,
            sqlite_where=BRAND_TIER,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    metadata_field_id = Column(
        Integer,
        ForeignKey("metadata_fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="CASCADE"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True)
    is_hidden = Column(Boolean, nullable=False, default=False)
    is_upload_hidden = Column(Boolean, nullable=False, default=False)
    is_filter_hidden = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<MetadataFieldVisibility(field_id={self.metadata_field_id}, tenant_id={self.tenant_id}, "
            f"brand_id={self.brand_id}, category_id={self.category_id})>"
        )


class MetadataOptionVisibility(Base):
    """Option visibility override, scoped like MetadataFieldVisibility."""

    __tablename__ = "metadata_option_visibility"
    __table_args__ = (
        UniqueConstraint(
            "metadata_option_id",
            "tenant_id",
            "brand_id",
            "category_id",
            name="uq_metadata_option_visibility_scope",
        ),
        Index("ix_metadata_option_visibility_tenant_scope", "tenant_id", "brand_id", "category_id"),
        CheckConstraint(
            "category_id IS NULL OR brand_id IS NOT NULL",
            name="ck_metadata_option_visibility_category_brand",
        ),
        Index(
            "uq_metadata_option_visibility_tenant_tier",
            "metadata_option_id",
            "tenant_id",
            unique=True,
            postgresql_where=TENANT_TIER,
            sqlite_where=TENANT_TIER,
        ),
        Index(
            "uq_metadata_option_visibility_brand_tier",
            "metadata_option_id",
            "tenant_id",
            "brand_id",
            unique=True,
            postgresql_where=BRAND_TIER,
            sqlite_where=BRAND_TIER,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    metadata_option_id = Column(
        Integer,
        ForeignKey("metadata_options.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="CASCADE"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True)
    is_hidden = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<MetadataOptionVisibility(option_id={self.metadata_option_id}, tenant_id={self.tenant_id}, "
            f"brand_id={self.brand_id}, category_id={self.category_id})>"
        )


class SystemCategoryFieldSuppression(Base):
    """Field suppressed for every tenant category linked to a system category."""

    __tablename__ = "system_category_field_suppressions"
    __table_args__ = (
        UniqueConstraint(
            "metadata_field_id",
            "system_category_id",
            name="uq_system_category_field_suppressions",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    metadata_field_id = Column(
        Integer,
        ForeignKey("metadata_fields.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    system_category_id = Column(
        Integer,
        ForeignKey("system_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<SystemCategoryFieldSuppression(field_id={self.metadata_field_id}, "
            f"system_category_id={self.system_category_id})>"
        )
