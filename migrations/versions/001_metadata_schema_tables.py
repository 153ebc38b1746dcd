"""Metadata schema tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    columns = [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP"))
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_tenants_id", "tenants", ["id"], unique=False)

    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_brands_id", "brands", ["id"], unique=False)
    op.create_index("ix_brands_tenant_id", "brands", ["tenant_id"], unique=False)

    op.create_table(
        "system_categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_system_categories_id", "system_categories", ["id"], unique=False)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("brand_id", sa.Integer(), nullable=False),
        sa.Column("system_category_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("asset_type", sa.String(length=20), nullable=False, server_default="image"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["system_category_id"], ["system_categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_categories_id", "categories", ["id"], unique=False)
    op.create_index("ix_categories_tenant_id", "categories", ["tenant_id"], unique=False)
    op.create_index("ix_categories_brand_id", "categories", ["brand_id"], unique=False)
    op.create_index("ix_categories_system_category_id", "categories", ["system_category_id"], unique=False)

    op.create_table(
        "metadata_fields",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(length=100), nullable=False),
        sa.Column("system_label", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("applies_to", sa.String(length=20), nullable=False, server_default="all"),
        sa.Column("scope", sa.String(length=20), nullable=False, server_default="system"),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("is_filterable", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_user_editable", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_upload_visible", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("is_internal_only", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("group_key", sa.String(length=100), nullable=True),
        sa.Column("replacement_field_id", sa.Integer(), nullable=True),
        sa.Column("deprecated_at", sa.DateTime(), nullable=True),
        sa.Column("archived_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["replacement_field_id"], ["metadata_fields.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("scope", "tenant_id", "key", name="uq_metadata_fields_scope_tenant_key"),
    )
    op.create_index("ix_metadata_fields_id", "metadata_fields", ["id"], unique=False)
    op.create_index("ix_metadata_fields_tenant_id", "metadata_fields", ["tenant_id"], unique=False)
    # System fields have a NULL tenant, so the constraint above does not cover them
    op.create_index(
        "uq_metadata_fields_system_key",
        "metadata_fields",
        ["key"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )

    op.create_table(
        "metadata_options",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("metadata_field_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("system_label", sa.String(length=255), nullable=False),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["metadata_field_id"], ["metadata_fields.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("metadata_field_id", "value", name="uq_metadata_options_field_value"),
    )
    op.create_index("ix_metadata_options_id", "metadata_options", ["id"], unique=False)
    op.create_index("ix_metadata_options_metadata_field_id", "metadata_options", ["metadata_field_id"], unique=False)

    op.create_table(
        "metadata_field_visibility",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("metadata_field_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("brand_id", sa.Integer(), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_upload_hidden", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_filter_hidden", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["metadata_field_id"], ["metadata_fields.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "metadata_field_id", "tenant_id", "brand_id", "category_id",
            name="uq_metadata_field_visibility_scope",
        ),
        sa.CheckConstraint(
            "category_id IS NULL OR brand_id IS NOT NULL",
            name="ck_metadata_field_visibility_category_brand",
        ),
    )
    op.create_index("ix_metadata_field_visibility_id", "metadata_field_visibility", ["id"], unique=False)
    op.create_index(
        "ix_metadata_field_visibility_metadata_field_id", "metadata_field_visibility", ["metadata_field_id"], unique=False
    )
    op.create_index(
        "ix_metadata_field_visibility_tenant_scope",
        "metadata_field_visibility",
        ["tenant_id", "brand_id", "category_id"],
        unique=False,
    )
    # NULL scope columns are distinct in a unique constraint; the tiers above category need partial indexes
    op.create_index(
        "uq_metadata_field_visibility_tenant_tier",
        "metadata_field_visibility",
        ["metadata_field_id", "tenant_id"],
        unique=True,
        postgresql_where=sa.text("brand_id IS NULL AND category_id IS NULL"),
    )
    op.create_index(
        "uq_metadata_field_visibility_brand_tier",
        "metadata_field_visibility",
        ["metadata_field_id", "tenant_id", "brand_id"],
        unique=True,
        postgresql_where=sa.text("brand_id IS NOT NULL AND category_id IS NULL"),
    )

    op.create_table(
        "metadata_option_visibility",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("metadata_option_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("brand_id", sa.Integer(), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default="false"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["metadata_option_id"], ["metadata_options.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["brand_id"], ["brands.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "metadata_option_id", "tenant_id", "brand_id", "category_id",
            name="uq_metadata_option_visibility_scope",
        ),
        sa.CheckConstraint(
            "category_id IS NULL OR brand_id IS NOT NULL",
            name="ck_metadata_option_visibility_category_brand",
        ),
    )
    op.create_index("ix_metadata_option_visibility_id", "metadata_option_visibility", ["id"], unique=False)
    op.create_index(
        "ix_metadata_option_visibility_metadata_option_id",
        "metadata_option_visibility",
        ["metadata_option_id"],
        unique=False,
    )
    op.create_index(
        "ix_metadata_option_visibility_tenant_scope",
        "metadata_option_visibility",
        ["tenant_id", "brand_id", "category_id"],
        unique=False,
    )
    op.create_index(
        "uq_metadata_option_visibility_tenant_tier",
        "metadata_option_visibility",
        ["metadata_option_id", "tenant_id"],
        unique=True,
        postgresql_where=sa.text("brand_id IS NULL AND category_id IS NULL"),
    )
    op.create_index(
        "uq_metadata_option_visibility_brand_tier",
        "metadata_option_visibility",
        ["metadata_option_id", "tenant_id", "brand_id"],
        unique=True,
        postgresql_where=sa.text("brand_id IS NOT NULL AND category_id IS NULL"),
    )

    op.create_table(
        "system_category_field_suppressions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("metadata_field_id", sa.Integer(), nullable=False),
        sa.Column("system_category_id", sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["metadata_field_id"], ["metadata_fields.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["system_category_id"], ["system_categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "metadata_field_id", "system_category_id",
            name="uq_system_category_field_suppressions",
        ),
    )
    op.create_index(
        "ix_system_category_field_suppressions_id", "system_category_field_suppressions", ["id"], unique=False
    )
    op.create_index(
        "ix_system_category_field_suppressions_metadata_field_id",
        "system_category_field_suppressions",
        ["metadata_field_id"],
        unique=False,
    )
    op.create_index(
        "ix_system_category_field_suppressions_system_category_id",
        "system_category_field_suppressions",
        ["system_category_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("system_category_field_suppressions")
    op.drop_table("metadata_option_visibility")
    op.drop_table("metadata_field_visibility")
    op.drop_table("metadata_options")
    op.drop_table("metadata_fields")
    op.drop_table("categories")
    op.drop_table("system_categories")
    op.drop_table("brands")
    op.drop_table("tenants")
