"""
Models Package

Immutable DTOs exchanged with the discount engine: the cart context, the
pricing rule snapshot and the calculation result.
"""

from models.cart import CartLineItem, DiscountContext
from models.discount import (
    AppliedDiscount,
    AppliedItemDiscount,
    DiscountCalculationResult,
    ItemDiscountSummary
)
from models.discount_usage import DiscountUsageDTO
from models.pricing_rule import PricingRule, QuantityTier, RuleCondition, RuleTarget

__all__ = [
    'CartLineItem',
    'DiscountContext',
    'AppliedDiscount',
    'AppliedItemDiscount',
    'DiscountCalculationResult',
    'ItemDiscountSummary',
    'DiscountUsageDTO',
    'PricingRule',
    'QuantityTier',
    'RuleCondition',
    'RuleTarget',
]
