"""Category models: platform system categories and per-brand categories."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from metaschema.database import Base


class SystemCategory(Base):
    """Platform-curated category template shared by every tenant."""

    __tablename__ = "system_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    categories = relationship("Category", back_populates="system_category")

    def __repr__(self):
        return f"<SystemCategory(id={self.id}, slug={self.slug})>"


class Category(Base):
    """
    Brand category. Linked to a system category when created from a template;
    tenant-custom categories have no system category.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False, index=True)
    system_category_id = Column(
        Integer,
        ForeignKey("system_categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    asset_type = Column(String(20), nullable=False, default="image")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="categories")
    brand = relationship("Brand", back_populates="categories")
    system_category = relationship("SystemCategory", back_populates="categories")

    def __repr__(self):
        return f"<Category(id={self.id}, brand_id={self.brand_id}, slug={self.slug})>"
