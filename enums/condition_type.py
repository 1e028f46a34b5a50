from enum import Enum


class ConditionType(str, Enum):
    """
    Predicates a rule condition can check against the calculation context.

    Cart level:
    - CART_TOTAL / CART_SUBTOTAL: subtotal of the cart
    - CART_QUANTITY: sum of line quantities

    Client / invoice level:
    - CLIENT_ID, CLIENT_HAS_TAG, CLIENT_HAS_ANY_TAGS, CLIENT_HAS_ALL_TAGS
    - INVOICE_HAS_TAG, INVOICE_HAS_ANY_TAGS

    Item level (true if ANY line satisfies it):
    - ITEM_QUANTITY, ITEM_PRICE
    - PRODUCT_HAS_TAG, PRODUCT_HAS_ANY_TAGS, PRODUCT_SKU, PRODUCT_CATEGORY
    - PRODUCT_QUANTITY: summed quantity of one product id
    """
    CART_TOTAL = "cart_total"
    CART_SUBTOTAL = "cart_subtotal"
    CART_QUANTITY = "cart_quantity"
    CLIENT_ID = "client_id"
    CLIENT_HAS_TAG = "client_has_tag"
    CLIENT_HAS_ANY_TAGS = "client_has_any_tags"
    CLIENT_HAS_ALL_TAGS = "client_has_all_tags"
    INVOICE_HAS_TAG = "invoice_has_tag"
    INVOICE_HAS_ANY_TAGS = "invoice_has_any_tags"
    ITEM_QUANTITY = "item_quantity"
    ITEM_PRICE = "item_price"
    PRODUCT_HAS_TAG = "product_has_tag"
    PRODUCT_HAS_ANY_TAGS = "product_has_any_tags"
    PRODUCT_SKU = "product_sku"
    PRODUCT_CATEGORY = "product_category"
    PRODUCT_QUANTITY = "product_quantity"

    @classmethod
    def parse(cls, value: str | None) -> 'ConditionType | None':
        """Resolve a raw condition type string, None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
