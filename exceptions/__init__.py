"""
Custom exceptions for the discount engine.

Exception Hierarchy:
--------------------
DiscountEngineException (base)
├── PricingRuleException
│   ├── PricingRuleNotFoundException
│   ├── InvalidRuleSnapshotException
│   └── RuleTemplateNotFoundException
└── UsageException
    └── InvalidUsageRecordException

Usage:
------
Repositories raise specific exceptions:
    raise PricingRuleNotFoundException(rule_id=123)

Callers catch them at the checkout/quote boundary:
    try:
        rule = repository.get_by_id(rule_id)
    except PricingRuleNotFoundException as e:
        logger.warning(str(e))

The calculation core itself does not raise on malformed rule data: it degrades
to "no match" / "no discount" so one corrupt rule cannot block a checkout.
"""

from .base import DiscountEngineException
from .pricing_rule import (
    PricingRuleException,
    PricingRuleNotFoundException,
    InvalidRuleSnapshotException,
    RuleTemplateNotFoundException
)
from .usage import UsageException, InvalidUsageRecordException

__all__ = [
    # Base
    'DiscountEngineException',

    # Pricing rules
    'PricingRuleException',
    'PricingRuleNotFoundException',
    'InvalidRuleSnapshotException',
    'RuleTemplateNotFoundException',

    # Usage
    'UsageException',
    'InvalidUsageRecordException',
]
