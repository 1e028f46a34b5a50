from enum import Enum


class TargetType(str, Enum):
    """Selection criteria deciding which cart lines a rule can affect."""
    ALL_PRODUCTS = "all_products"
    SPECIFIC_PRODUCTS = "specific_products"
    PRODUCTS_WITH_TAG = "products_with_tag"            # item must carry ALL tags
    PRODUCTS_WITH_ANY_TAGS = "products_with_any_tags"  # item must carry ANY tag
    PRODUCT_CATEGORY = "product_category"
    CHEAPEST_ITEM = "cheapest_item"
    MOST_EXPENSIVE_ITEM = "most_expensive_item"

    @classmethod
    def parse(cls, value: str | None) -> 'TargetType | None':
        """Resolve a raw target type string, None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
