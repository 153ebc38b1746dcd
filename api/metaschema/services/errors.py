"""Schema resolution errors."""


class MetadataSchemaError(Exception):
    """Base exception for schema resolution."""

    pass


class InvalidAssetTypeError(MetadataSchemaError, ValueError):
    """Asset type is not one of the configured asset types."""

    pass


class ScopeContractError(MetadataSchemaError):
    """Category does not belong to the supplied brand."""

    def __init__(self, category_id: int, brand_id: int, actual_brand_id: int):
        self.category_id = category_id
        self.brand_id = brand_id
        self.actual_brand_id = actual_brand_id
        super().__init__(
            f"Category {category_id} belongs to brand {actual_brand_id}, not brand {brand_id}"
        )
