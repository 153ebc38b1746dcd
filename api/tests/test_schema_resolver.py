"""Tests for the canonical schema resolver."""

from datetime import datetime

import pytest

from metaschema.services.errors import InvalidAssetTypeError, ScopeContractError
from metaschema.services.schema_resolver import SchemaResolver


def keys(schema):
    return [field.key for field in schema.fields]


def by_key(schema, key):
    return next(field for field in schema.fields if field.key == key)


class TestPhotoTypeScenario:
    """Tenant, brand and upload views of a single select field."""

    def test_cascade_end_to_end(self, factory, resolver, upload_resolver):
        tenant = factory.tenant("T")
        brand = factory.brand(tenant, "B")
        photo_type = factory.field(
            "photo_type",
            type="select",
            applies_to="image",
            is_upload_visible=True,
            is_filterable=True,
            options=["landscape", "portrait"],
        )

        schema = resolver.resolve(tenant.id, None, None, "image")
        assert keys(schema) == ["photo_type"]
        assert [option.value for option in schema.fields[0].options] == ["landscape", "portrait"]

        factory.field_override(photo_type, tenant, is_hidden=True)
        assert resolver.resolve(tenant.id, None, None, "image").fields == []

        factory.field_override(photo_type, tenant, brand=brand, is_hidden=False, is_upload_hidden=True)
        schema = resolver.resolve(tenant.id, brand.id, None, "image")
        assert keys(schema) == ["photo_type"]
        assert schema.fields[0].is_visible is True
        assert schema.fields[0].is_upload_visible is False

        upload = upload_resolver.resolve(tenant.id, brand.id, None, "image")
        assert upload.groups == []


class TestCatalogDefaults:
    """Fields without any applicable override."""

    def test_defaults_pass_through(self, factory, resolver):
        tenant = factory.tenant()
        factory.field("caption", is_filterable=False, is_upload_visible=False, is_internal_only=True)

        field = resolver.resolve(tenant.id, None, None, "image").fields[0]
        assert field.is_visible is True
        assert field.is_upload_visible is False
        assert field.is_filterable is False
        assert field.is_internal_only is True

    def test_unknown_scope_ids_fall_back_to_defaults(self, factory, resolver):
        tenant = factory.tenant()
        factory.field("caption")

        schema = resolver.resolve(tenant.id, 999, None, "image")
        assert keys(schema) == ["caption"]
        assert schema.fields[0].is_upload_visible is True

    def test_unknown_tenant_gets_system_fields(self, factory, resolver):
        factory.field("caption")
        assert keys(resolver.resolve(12345, None, None, "image")) == ["caption"]

    def test_resolved_field_carries_catalog_attributes(self, factory, resolver):
        tenant = factory.tenant()
        factory.field("usage_rights", type="select", group_key="legal", is_user_editable=False,
                      system_label="Usage Rights")

        field = resolver.resolve(tenant.id, None, None, "document").fields[0]
        assert field.display_label == "Usage Rights"
        assert field.type == "select"
        assert field.applies_to == "all"
        assert field.group_key == "legal"
        assert field.is_user_editable is False
        assert field.options == []

    def test_non_option_fields_have_no_options(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("notes", type="text")
        factory.option(field, "stray")

        assert resolver.resolve(tenant.id, None, None, "image").fields[0].options == []


class TestOverridePrecedence:
    """Most specific row wins with all of its flags."""

    def test_brand_row_replaces_tenant_row_wholesale(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        field = factory.field("caption")
        factory.field_override(field, tenant, is_upload_hidden=True, is_filter_hidden=True)
        factory.field_override(field, tenant, brand=brand)

        resolved = resolver.resolve(tenant.id, brand.id, None, "image").fields[0]
        assert resolved.is_upload_visible is True
        assert resolved.is_filterable is True

    def test_tenant_row_applies_without_brand(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        field = factory.field("caption")
        factory.field_override(field, tenant, is_upload_hidden=True)
        factory.field_override(field, tenant, brand=brand, is_filter_hidden=True)

        resolved = resolver.resolve(tenant.id, None, None, "image").fields[0]
        assert resolved.is_upload_visible is False
        assert resolved.is_filterable is True

    def test_category_row_wins_over_brand_row(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        category = factory.category(brand)
        field = factory.field("caption")
        factory.field_override(field, tenant, brand=brand, is_upload_hidden=True)
        factory.field_override(field, tenant, brand=brand, category=category, is_filter_hidden=True)

        resolved = resolver.resolve(tenant.id, brand.id, category.id, "image").fields[0]
        assert resolved.is_upload_visible is True
        assert resolved.is_filterable is False

    def test_category_row_ignored_for_brand_request(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        category = factory.category(brand)
        field = factory.field("caption")
        factory.field_override(field, tenant, brand=brand, category=category, is_hidden=True)

        assert keys(resolver.resolve(tenant.id, brand.id, None, "image")) == ["caption"]
        assert keys(resolver.resolve(tenant.id, brand.id, category.id, "image")) == []

    def test_other_brand_rows_ignored(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant, "One")
        other = factory.brand(tenant, "Two")
        field = factory.field("caption")
        factory.field_override(field, tenant, brand=other, is_hidden=True)

        assert keys(resolver.resolve(tenant.id, brand.id, None, "image")) == ["caption"]
        assert keys(resolver.resolve(tenant.id, other.id, None, "image")) == []

    def test_override_cannot_enable_catalog_disabled_flags(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("caption", is_upload_visible=False, is_filterable=False)
        factory.field_override(field, tenant)

        resolved = resolver.resolve(tenant.id, None, None, "image").fields[0]
        assert resolved.is_upload_visible is False
        assert resolved.is_filterable is False

    def test_other_tenant_overrides_ignored(self, factory, resolver):
        tenant = factory.tenant("One")
        other = factory.tenant("Two")
        field = factory.field("caption")
        factory.field_override(field, other, is_hidden=True)

        assert keys(resolver.resolve(tenant.id, None, None, "image")) == ["caption"]
        assert keys(resolver.resolve(other.id, None, None, "image")) == []

    def test_category_without_brand_skips_category_rows(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        category = factory.category(brand)
        field = factory.field("caption")
        factory.field_override(field, tenant, brand=brand, category=category, is_hidden=True)

        assert keys(resolver.resolve(tenant.id, None, category.id, "image")) == ["caption"]


class TestOptionResolution:
    """Options are resolved independently of their field."""

    def test_options_sorted_by_label(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("mood", type="multiselect")
        factory.option(field, "z", label="Zesty")
        factory.option(field, "a", label="Airy")
        factory.option(field, "m", label="Moody")

        options = resolver.resolve(tenant.id, None, None, "image").fields[0].options
        assert [option.display_label for option in options] == ["Airy", "Moody", "Zesty"]

    def test_hidden_option_dropped(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("orientation", type="select")
        landscape = factory.option(field, "landscape", color="#00f", icon="arrows")
        portrait = factory.option(field, "portrait")
        factory.option_override(portrait, tenant)

        options = resolver.resolve(tenant.id, None, None, "image").fields[0].options
        assert [option.option_id for option in options] == [landscape.id]
        assert options[0].color == "#00f"
        assert options[0].icon == "arrows"

    def test_visible_field_with_no_visible_options(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("orientation", type="select")
        factory.option_override(factory.option(field, "landscape"), tenant)
        factory.option_override(factory.option(field, "portrait"), tenant)

        schema = resolver.resolve(tenant.id, None, None, "image")
        assert keys(schema) == ["orientation"]
        assert schema.fields[0].options == []

    def test_brand_option_row_restores_hidden_option(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        field = factory.field("orientation", type="select")
        square = factory.option(field, "square")
        factory.option_override(square, tenant, is_hidden=True)
        factory.option_override(square, tenant, brand=brand, is_hidden=False)

        assert resolver.resolve(tenant.id, None, None, "image").fields[0].options == []
        options = resolver.resolve(tenant.id, brand.id, None, "image").fields[0].options
        assert [option.value for option in options] == ["square"]

    def test_hidden_field_drops_its_options(self, factory, resolver):
        tenant = factory.tenant()
        field = factory.field("orientation", type="select", options=["square"])
        factory.field_override(field, tenant, is_hidden=True)

        assert resolver.resolve(tenant.id, None, None, "image").fields == []


class TestFieldSelection:
    """Which catalog fields take part in resolution."""

    def test_applies_to_filter(self, factory, resolver):
        tenant = factory.tenant()
        factory.field("photo_type", applies_to="image")
        factory.field("duration", applies_to="video")
        factory.field("tags", applies_to="all")

        assert keys(resolver.resolve(tenant.id, None, None, "image")) == ["photo_type", "tags"]
        assert keys(resolver.resolve(tenant.id, None, None, "video")) == ["duration", "tags"]
        assert keys(resolver.resolve(tenant.id, None, None, "document")) == ["tags"]

    def test_catalog_order_kept(self, factory, resolver):
        tenant = factory.tenant()
        for key in ["zeta", "alpha", "mid"]:
            factory.field(key)

        assert keys(resolver.resolve(tenant.id, None, None, "image")) == ["zeta", "alpha", "mid"]

    def test_deprecated_and_archived_fields_excluded(self, factory, resolver):
        tenant = factory.tenant()
        factory.field("current")
        factory.field("old", deprecated_at=datetime(2025, 1, 1))
        factory.field("gone", archived_at=datetime(2025, 1, 1))

        assert keys(resolver.resolve(tenant.id, None, None, "image")) == ["current"]

    def test_tenant_fields_stay_with_their_tenant(self, factory, resolver):
        tenant = factory.tenant("One")
        other = factory.tenant("Two")
        factory.field("shared")
        factory.field("sku", tenant=tenant)
        factory.field("season", tenant=other)
        factory.field("retired", tenant=tenant, is_active=False)

        assert keys(resolver.resolve(tenant.id, None, None, "image")) == ["shared", "sku"]
        assert keys(resolver.resolve(other.id, None, None, "image")) == ["shared", "season"]


class TestResolverContracts:
    """Validation and caller-contract handling."""

    def test_invalid_asset_type(self, factory, resolver):
        tenant = factory.tenant()
        with pytest.raises(InvalidAssetTypeError):
            resolver.resolve(tenant.id, None, None, "spreadsheet")

    def test_invalid_asset_type_is_value_error(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve(1, None, None, "")

    def test_category_of_other_brand_raises_in_strict_mode(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant, "One")
        other = factory.brand(tenant, "Two")
        category = factory.category(other)
        factory.field("caption")

        with pytest.raises(ScopeContractError) as exc_info:
            resolver.resolve(tenant.id, brand.id, category.id, "image")
        assert exc_info.value.actual_brand_id == other.id

    def test_category_of_other_brand_is_empty_when_lenient(self, factory, data_source):
        tenant = factory.tenant()
        brand = factory.brand(tenant, "One")
        other = factory.brand(tenant, "Two")
        category = factory.category(other)
        factory.field("caption")

        lenient = SchemaResolver(data_source, asset_types=["image"], strict_scope=False)
        assert lenient.resolve(tenant.id, brand.id, category.id, "image").fields == []

    def test_unknown_category_is_not_a_violation(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        factory.field("caption")

        assert keys(resolver.resolve(tenant.id, brand.id, 424242, "image")) == ["caption"]

    def test_other_tenant_category_treated_as_unknown(self, factory, resolver):
        tenant = factory.tenant("One")
        brand = factory.brand(tenant)
        other_category = factory.category(factory.brand(factory.tenant("Two")))
        factory.field("caption")

        assert keys(resolver.resolve(tenant.id, brand.id, other_category.id, "image")) == ["caption"]
        assert resolver.tenant_category(tenant.id, other_category.id) is None

    def test_idempotent(self, factory, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        field = factory.field("orientation", type="select", options=["landscape", "portrait"])
        factory.field_override(field, tenant, brand=brand, is_filter_hidden=True)

        first = resolver.resolve(tenant.id, brand.id, None, "image").model_dump_json()
        second = resolver.resolve(tenant.id, brand.id, None, "image").model_dump_json()
        assert first == second
