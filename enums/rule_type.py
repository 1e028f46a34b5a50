from enum import Enum


class RuleType(str, Enum):
    """
    Discount algorithms a pricing rule can use.

    Values match the rule store's `rule_type` column.
    """
    PERCENTAGE_DISCOUNT = "percentage_discount"      # 10% off
    FIXED_AMOUNT_DISCOUNT = "fixed_amount_discount"  # 50 off the targeted items
    FIXED_PRICE = "fixed_price"                      # set unit price to 100
    BUY_X_GET_Y = "buy_x_get_y"                      # buy 2 get 1 free
    QUANTITY_DISCOUNT = "quantity_discount"          # bulk pricing tiers

    @classmethod
    def parse(cls, value: str | None) -> 'RuleType | None':
        """
        Resolve a raw rule type string.

        Returns None for unknown values instead of raising, so a rule
        configured with a newer type is skipped rather than breaking checkout.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
