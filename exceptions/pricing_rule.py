"""
Pricing rule related exceptions.
"""

from .base import DiscountEngineException


class PricingRuleException(DiscountEngineException):
    """Base exception for pricing rule errors."""
    pass


class PricingRuleNotFoundException(PricingRuleException):
    """Raised when a pricing rule is not present in the snapshot."""

    def __init__(self, rule_id: int):
        super().__init__(
            f"Pricing rule {rule_id} not found",
            details={'rule_id': rule_id}
        )
        self.rule_id = rule_id


class InvalidRuleSnapshotException(PricingRuleException):
    """Raised when a rule snapshot cannot be parsed into pricing rules."""

    def __init__(self, store_id: int | None, reason: str):
        super().__init__(
            f"Invalid pricing rule snapshot for store {store_id}: {reason}",
            details={'store_id': store_id, 'reason': reason}
        )
        self.store_id = store_id
        self.reason = reason


class RuleTemplateNotFoundException(PricingRuleException):
    """Raised when a predefined rule template id is unknown."""

    def __init__(self, template_id: str):
        super().__init__(
            f"Rule template '{template_id}' not found",
            details={'template_id': template_id}
        )
        self.template_id = template_id
