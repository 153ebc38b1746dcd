"""Database seeding script: system metadata catalog and a demo tenant."""

import logging

from sqlalchemy.orm import Session

from metaschema.database import SessionLocal
from metaschema.models.category import Category, SystemCategory
from metaschema.models.metadata_field import MetadataField, MetadataOption
from metaschema.models.tenant import Brand, Tenant
from metaschema.models.visibility import SystemCategoryFieldSuppression

logger = logging.getLogger(__name__)

SYSTEM_FIELDS = [
    {
        "key": "photo_type",
        "system_label": "Photo Type",
        "type": "select",
        "applies_to": "image",
        "group_key": "creative",
        "options": [
            ("studio", "Studio"),
            ("lifestyle", "Lifestyle"),
            ("product", "Product"),
            ("action", "Action"),
            ("plate", "Plate"),
            ("event", "Event"),
        ],
    },
    {
        "key": "logo_type",
        "system_label": "Logo Type",
        "type": "select",
        "applies_to": "image",
        "group_key": "creative",
        "options": [
            ("primary", "Primary"),
            ("secondary", "Secondary"),
            ("submark", "Submark"),
            ("icon_mark", "Icon / Mark"),
            ("wordmark", "Wordmark"),
            ("monogram", "Monogram"),
            ("lockup", "Lockup"),
        ],
    },
    {
        "key": "orientation",
        "system_label": "Orientation",
        "type": "select",
        "applies_to": "image",
        "group_key": "creative",
        "is_user_editable": False,
        "options": [("landscape", "Landscape"), ("portrait", "Portrait"), ("square", "Square")],
    },
    {
        "key": "scene_classification",
        "system_label": "Scene Classification",
        "type": "select",
        "applies_to": "image",
        "group_key": "creative",
        "options": [
            ("indoor", "Indoor"),
            ("outdoor", "Outdoor"),
            ("product", "Product"),
            ("food", "Food"),
            ("architecture", "Architecture"),
            ("nature", "Nature"),
            ("urban", "Urban"),
        ],
    },
    {
        "key": "color_space",
        "system_label": "Color Space",
        "type": "select",
        "applies_to": "image",
        "group_key": "technical",
        "is_user_editable": False,
        "options": [("srgb", "sRGB"), ("adobe_rgb", "Adobe RGB"), ("display_p3", "Display P3")],
    },
    {
        "key": "resolution_class",
        "system_label": "Resolution Class",
        "type": "select",
        "applies_to": "image",
        "group_key": "technical",
        "is_user_editable": False,
        "options": [("low", "Low"), ("medium", "Medium"), ("high", "High"), ("ultra", "Ultra")],
    },
    {
        "key": "dominant_colors",
        "system_label": "Dominant Colors",
        "type": "multiselect",
        "applies_to": "image",
        "group_key": "technical",
        "is_user_editable": False,
        "is_upload_visible": False,
        "options": [],
    },
    {
        "key": "usage_rights",
        "system_label": "Usage Rights",
        "type": "select",
        "applies_to": "all",
        "group_key": "legal",
        "options": [
            ("unrestricted", "Unrestricted"),
            ("editorial_only", "Editorial Only"),
            ("internal_use", "Internal Use"),
            ("licensed", "Licensed"),
            ("restricted", "Restricted"),
        ],
    },
    {
        "key": "expiration_date",
        "system_label": "Expiration Date",
        "type": "date",
        "applies_to": "all",
        "group_key": "legal",
    },
    {
        "key": "tags",
        "system_label": "Tags",
        "type": "multiselect",
        "applies_to": "all",
        "group_key": "general",
        "options": [],
    },
    {
        "key": "collection",
        "system_label": "Collection",
        "type": "text",
        "applies_to": "all",
        "group_key": "general",
    },
    {
        "key": "quality_rating",
        "system_label": "Quality Rating",
        "type": "rating",
        "applies_to": "all",
        "group_key": "internal",
        "is_filterable": False,
        "is_upload_visible": False,
    },
    {
        "key": "starred",
        "system_label": "Starred",
        "type": "boolean",
        "applies_to": "all",
        "group_key": "internal",
        "is_filterable": False,
        "is_upload_visible": False,
    },
]

SYSTEM_CATEGORIES = [
    ("Photography", "photography"),
    ("Logos", "logos"),
    ("Graphics", "graphics"),
    ("Video", "video"),
    ("Documents", "documents"),
]

# Fields that make no sense in a system category
SYSTEM_SUPPRESSIONS = {
    "logos": ["photo_type", "scene_classification"],
    "photography": ["logo_type"],
}


def seed_system_fields(db: Session) -> int:
    """Create missing system fields and options. Returns the number of fields created."""
    created = 0
    for definition in SYSTEM_FIELDS:
        definition = dict(definition)
        options = definition.pop("options", [])

        field = (
            db.query(MetadataField)
            .filter(MetadataField.scope == "system", MetadataField.key == definition["key"])
            .first()
        )
        if field is None:
            field = MetadataField(scope="system", tenant_id=None, **definition)
            db.add(field)
            db.flush()
            created += 1
            logger.info(f"Created system field: {field.key}")

        existing_values = {option.value for option in field.options}
        for value, label in options:
            if value not in existing_values:
                db.add(MetadataOption(metadata_field_id=field.id, value=value, system_label=label, is_system=True))
    return created


def seed_system_categories(db: Session) -> None:
    """Create system categories and their field suppressions."""
    for name, slug in SYSTEM_CATEGORIES:
        system_category = db.query(SystemCategory).filter_by(slug=slug).first()
        if system_category is None:
            system_category = SystemCategory(name=name, slug=slug)
            db.add(system_category)
            db.flush()
            logger.info(f"Created system category: {slug}")

        for key in SYSTEM_SUPPRESSIONS.get(slug, []):
            field = db.query(MetadataField).filter_by(scope="system", key=key).first()
            if field is None:
                continue
            exists = (
                db.query(SystemCategoryFieldSuppression)
                .filter_by(metadata_field_id=field.id, system_category_id=system_category.id)
                .first()
            )
            if not exists:
                db.add(SystemCategoryFieldSuppression(metadata_field_id=field.id, system_category_id=system_category.id))


def seed_demo_tenant(db: Session) -> None:
    """Demo tenant with one brand and a category per system category."""
    if db.query(Tenant).filter_by(name="Demo Tenant").first():
        logger.info("Demo tenant already seeded. Skipping.")
        return

    tenant = Tenant(name="Demo Tenant", is_active=True)
    db.add(tenant)
    db.flush()

    brand = Brand(tenant_id=tenant.id, name="Demo Brand")
    db.add(brand)
    db.flush()

    for system_category in db.query(SystemCategory).order_by(SystemCategory.id).all():
        asset_type = {"video": "video", "documents": "document"}.get(system_category.slug, "image")
        db.add(
            Category(
                tenant_id=tenant.id,
                brand_id=brand.id,
                system_category_id=system_category.id,
                name=system_category.name,
                slug=system_category.slug,
                asset_type=asset_type,
            )
        )
    logger.info(f"Created demo tenant {tenant.id} with brand {brand.id}")


def seed_database():
    """Seed database with initial data."""
    db = SessionLocal()

    try:
        created = seed_system_fields(db)
        seed_system_categories(db)
        seed_demo_tenant(db)
        db.commit()
        logger.info(f"Database seeded successfully ({created} system fields created)")
    except Exception as e:
        db.rollback()
        logger.error(f"Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_database()
