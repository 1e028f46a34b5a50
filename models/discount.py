from pydantic import BaseModel, ConfigDict

RESULT_MODEL_CONFIG = ConfigDict(frozen=True)


class AppliedItemDiscount(BaseModel):
    """Share of one rule's discount on one cart line (amounts are line totals)."""
    model_config = RESULT_MODEL_CONFIG

    item_index: int
    product_id: int | None = None
    discount_amount: float
    original_price: float
    final_price: float


class AppliedDiscount(BaseModel):
    """Discount produced by a single rule."""
    model_config = RESULT_MODEL_CONFIG

    rule_id: int | None = None
    rule_name: str
    rule_type: str
    discount_amount: float
    original_amount: float  # sum of the targeted line totals
    final_amount: float
    applied_to_items: list[AppliedItemDiscount] = []


class ItemDiscountSummary(BaseModel):
    """All discounts that landed on one cart line, across rules."""
    model_config = RESULT_MODEL_CONFIG

    item_index: int
    product_id: int | None = None
    original_line_total: float
    discount_amount: float
    final_line_total: float
    applied_rule_ids: list[int | None] = []


class DiscountCalculationResult(BaseModel):
    """
    Result of one engine run.

    total_discount_amount is the sum of applied_discounts, in the order the
    rules were applied (priority descending).
    """
    model_config = RESULT_MODEL_CONFIG

    original_subtotal: float
    total_discount_amount: float = 0
    final_subtotal: float
    applied_discounts: list[AppliedDiscount] = []
    item_summaries: list[ItemDiscountSummary] = []

    @property
    def has_discounts(self) -> bool:
        return len(self.applied_discounts) > 0
