"""Tests for system-category suppression."""

from metaschema.services.visibility_resolver import MetadataVisibilityResolver


class TestMetadataVisibilityResolver:
    """Tests for MetadataVisibilityResolver."""

    def test_suppressed_field_removed(self, factory, data_source, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        logos = factory.system_category("logos")
        category = factory.category(brand, logos, slug="logos")
        photo_type = factory.field("photo_type")
        factory.field("logo_type")
        factory.suppression(photo_type, logos)

        fields = resolver.resolve(tenant.id, brand.id, category.id, "image").fields
        visible = MetadataVisibilityResolver(data_source).filter_visible_fields(
            fields, data_source.get_category(category.id)
        )
        assert [field.key for field in visible] == ["logo_type"]

    def test_suppression_beats_overrides(self, factory, data_source, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        logos = factory.system_category("logos")
        category = factory.category(brand, logos, slug="logos")
        photo_type = factory.field("photo_type")
        factory.field_override(photo_type, tenant, brand=brand, category=category, is_hidden=False)
        factory.suppression(photo_type, logos)

        fields = resolver.resolve(tenant.id, brand.id, category.id, "image").fields
        assert [field.key for field in fields] == ["photo_type"]

        visibility = MetadataVisibilityResolver(data_source)
        category_record = data_source.get_category(category.id)
        assert visibility.filter_visible_fields(fields, category_record) == []
        assert visibility.is_field_visible(fields[0], category_record) is False

    def test_custom_category_passes_everything(self, factory, data_source, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        logos = factory.system_category("logos")
        custom = factory.category(brand, None, slug="custom")
        photo_type = factory.field("photo_type")
        factory.suppression(photo_type, logos)

        fields = resolver.resolve(tenant.id, brand.id, custom.id, "image").fields
        visibility = MetadataVisibilityResolver(data_source)
        assert visibility.filter_visible_fields(fields, data_source.get_category(custom.id)) == fields

    def test_no_category_passes_everything(self, factory, data_source, resolver):
        tenant = factory.tenant()
        factory.field("photo_type")
        fields = resolver.resolve(tenant.id, None, None, "image").fields

        visibility = MetadataVisibilityResolver(data_source)
        assert visibility.filter_visible_fields(fields, None) == fields
        assert visibility.is_field_visible(fields[0], None) is True

    def test_order_kept(self, factory, data_source, resolver):
        tenant = factory.tenant()
        brand = factory.brand(tenant)
        photos = factory.system_category("photography")
        category = factory.category(brand, photos)
        for key in ["c", "a", "logo_type", "b"]:
            factory.field(key)
        factory.suppression(factory.field("hidden_here"), photos)

        fields = resolver.resolve(tenant.id, brand.id, category.id, "image").fields
        visible = MetadataVisibilityResolver(data_source).filter_visible_fields(
            fields, data_source.get_category(category.id)
        )
        assert [field.key for field in visible] == ["c", "a", "logo_type", "b"]
