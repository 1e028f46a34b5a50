"""
Predefined Pricing Rule Templates

Starting points offered when a store sets up its first rules. A template is
a partial rule definition; build_rule() turns it into a PricingRule snapshot
entry, optionally overriding fields (id, priority, percentages, ...).
"""

import logging

from pydantic import BaseModel

from enums.condition_operator import ConditionOperator, LogicalOperator
from enums.condition_type import ConditionType
from enums.rule_type import RuleType
from enums.target_type import TargetType
from exceptions.pricing_rule import RuleTemplateNotFoundException
from models.pricing_rule import PricingRule

logger = logging.getLogger(__name__)

ALL_PRODUCTS_TARGET = {"target_type": TargetType.ALL_PRODUCTS.value}


class PricingRuleTemplate(BaseModel):
    """Partial rule definition offered as a starting point."""
    id: str
    name: str
    description: str
    template: dict = {}


RULE_TEMPLATES: list[PricingRuleTemplate] = [
    PricingRuleTemplate(
        id="wholesale-quantity",
        name="Wholesale Quantity Discount",
        description="5% off when buying 3 or more items",
        template={
            "name": "Wholesale Quantity Discount",
            "rule_type": RuleType.PERCENTAGE_DISCOUNT.value,
            "discount_percentage": 5,
            "conditions": [{
                "condition_type": ConditionType.CART_QUANTITY.value,
                "operator": ConditionOperator.GREATER_EQUAL.value,
                "value_number": 3,
                "logical_operator": LogicalOperator.AND.value,
                "condition_group": 1,
            }],
            "targets": [ALL_PRODUCTS_TARGET],
        },
    ),
    PricingRuleTemplate(
        id="wholesale-amount",
        name="Wholesale Amount Discount",
        description="10% off when spending 1000 or more",
        template={
            "name": "Wholesale Amount Discount",
            "rule_type": RuleType.PERCENTAGE_DISCOUNT.value,
            "discount_percentage": 10,
            "conditions": [{
                "condition_type": ConditionType.CART_SUBTOTAL.value,
                "operator": ConditionOperator.GREATER_EQUAL.value,
                "value_number": 1000,
                "logical_operator": LogicalOperator.AND.value,
                "condition_group": 1,
            }],
            "targets": [ALL_PRODUCTS_TARGET],
        },
    ),
    PricingRuleTemplate(
        id="wholesale-client-discount",
        name="Wholesale Client Discount",
        description="15% off for clients tagged as wholesaler",
        template={
            "name": "Wholesale Client Discount",
            "rule_type": RuleType.PERCENTAGE_DISCOUNT.value,
            "discount_percentage": 15,
            "conditions": [{
                "condition_type": ConditionType.CLIENT_HAS_TAG.value,
                "operator": ConditionOperator.EQUALS.value,
                "value_text": "wholesaler",
                "logical_operator": LogicalOperator.AND.value,
                "condition_group": 1,
            }],
            "targets": [ALL_PRODUCTS_TARGET],
        },
    ),
    PricingRuleTemplate(
        id="buy-2-get-1",
        name="Buy 2 Get 1 Free",
        description="Buy 2 items, get 1 free",
        template={
            "name": "Buy 2 Get 1 Free",
            "rule_type": RuleType.BUY_X_GET_Y.value,
            "buy_quantity": 2,
            "get_quantity": 1,
            "get_discount_percentage": 100,
            "conditions": [],
            "targets": [ALL_PRODUCTS_TARGET],
        },
    ),
]


class RuleTemplateService:
    """Lookup and instantiation of predefined rule templates."""

    @staticmethod
    def list_templates() -> list[PricingRuleTemplate]:
        return list(RULE_TEMPLATES)

    @staticmethod
    def get_template(template_id: str) -> PricingRuleTemplate:
        """
        Get a template by id.

        Raises:
            RuleTemplateNotFoundException: If the id is unknown
        """
        for template in RULE_TEMPLATES:
            if template.id == template_id:
                return template
        raise RuleTemplateNotFoundException(template_id)

    @staticmethod
    def build_rule(template_id: str, **overrides) -> PricingRule:
        """
        Instantiate a template as a PricingRule.

        Args:
            template_id: Id of a predefined template (e.g. "buy-2-get-1")
            **overrides: Rule fields replacing the template values

        Returns:
            PricingRule ready to be placed in a rule snapshot

        Example:
            >>> rule = RuleTemplateService.build_rule("wholesale-amount", id=7, priority=10)
            >>> rule.discount_percentage
            10.0
        """
        template = RuleTemplateService.get_template(template_id)
        rule = PricingRule.model_validate({**template.template, **overrides})
        logger.debug(f"Built pricing rule from template '{template_id}'")
        return rule
