from datetime import datetime

from pydantic import BaseModel


class DiscountUsageDTO(BaseModel):
    """
    Record of a rule that was applied to a committed invoice.

    Written by the usage tracker after the invoice is saved; the per-client
    records back usage_limit_per_customer checks.
    """
    id: int | None = None
    pricing_rule_id: int
    invoice_id: int
    client_id: int | None = None
    discount_amount: float
    original_amount: float
    final_amount: float
    applied_items: list[dict] = []
    created_at: datetime | None = None
