import logging

from enums.rule_type import RuleType
from models.cart import CartLineItem, DiscountContext
from models.discount import AppliedDiscount, AppliedItemDiscount
from models.pricing_rule import PricingRule, QuantityTier
from services.target_matcher import TargetMatcher

logger = logging.getLogger(__name__)

TargetItems = list[tuple[CartLineItem, int]]


class DiscountApplicator:
    """
    Computes the monetary discount of one applicable rule.

    All amounts are computed on the original line totals of the context,
    never on prices already reduced by another rule of the same run.
    """

    @staticmethod
    def apply_rule(rule: PricingRule, context: DiscountContext) -> AppliedDiscount | None:
        """
        Dispatch on the rule type.

        Returns:
            AppliedDiscount, or None when the rule yields no discount (no
            target lines, zero amount, unknown rule type)
        """
        target_items = TargetMatcher.get_target_items(rule.targets, context)
        if not target_items:
            return None

        match rule.parsed_type:
            case RuleType.PERCENTAGE_DISCOUNT:
                return DiscountApplicator._apply_percentage_discount(rule, target_items)
            case RuleType.FIXED_AMOUNT_DISCOUNT:
                return DiscountApplicator._apply_fixed_amount_discount(rule, target_items)
            case RuleType.FIXED_PRICE:
                return DiscountApplicator._apply_fixed_price(rule, target_items)
            case RuleType.BUY_X_GET_Y:
                return DiscountApplicator._apply_buy_x_get_y(rule, target_items)
            case RuleType.QUANTITY_DISCOUNT:
                return DiscountApplicator._apply_quantity_discount(rule, target_items)
            case _:
                # Unknown rule type: no discount
                return None

    @staticmethod
    def _apply_percentage_discount(rule: PricingRule, target_items: TargetItems) -> AppliedDiscount | None:
        """Every targeted line loses discount_percentage of its line total."""
        applied_items = []
        total_discount = 0.0

        for item, index in target_items:
            discount = item.line_total * rule.discount_percentage / 100
            total_discount += discount
            applied_items.append(DiscountApplicator._item_discount(item, index, discount))

        return DiscountApplicator._build_discount(rule, target_items, applied_items, total_discount)

    @staticmethod
    def _apply_fixed_amount_discount(rule: PricingRule, target_items: TargetItems) -> AppliedDiscount | None:
        """
        Take discount_amount off the targeted lines.

        The amount is capped at the targeted subtotal and split across the
        lines proportionally to their share of it.

        Example: 30 off lines of 60 and 40 gives 18 and 12.
        """
        target_subtotal = sum(item.line_total for item, _ in target_items)
        if target_subtotal <= 0:
            return None

        discount = min(rule.discount_amount, target_subtotal)
        if discount <= 0:
            return None

        applied_items = [
            DiscountApplicator._item_discount(item, index, (item.line_total / target_subtotal) * discount)
            for item, index in target_items
        ]

        return DiscountApplicator._build_discount(rule, target_items, applied_items, discount)

    @staticmethod
    def _apply_fixed_price(rule: PricingRule, target_items: TargetItems) -> AppliedDiscount | None:
        """
        Reprice every targeted unit at fixed_price.

        Lines already cheaper than the fixed price are left alone: the rule
        never raises a price.
        """
        applied_items = []
        total_discount = 0.0

        for item, index in target_items:
            new_line_total = rule.fixed_price * item.quantity
            discount = item.line_total - new_line_total
            if discount > 0:
                total_discount += discount
                applied_items.append(DiscountApplicator._item_discount(item, index, discount))

        return DiscountApplicator._build_discount(rule, target_items, applied_items, total_discount)

    @staticmethod
    def _apply_buy_x_get_y(rule: PricingRule, target_items: TargetItems) -> AppliedDiscount | None:
        """
        Buy X get Y across all targeted lines.

        Algorithm:
        1. eligible_sets = total targeted quantity // buy_quantity
        2. free_quantity = eligible_sets * get_quantity
        3. Walk the targeted lines from the cheapest unit price up and
           discount up to free_quantity units at get_discount_percentage

        Example with buy 2 get 1 free on 3 x 10.00 and 1 x 5.00:
            - 4 units -> 2 sets -> 2 free units
            - the 5.00 unit and one 10.00 unit are free: 15.00 off
        """
        if rule.buy_quantity <= 0:
            return None

        total_quantity = sum(item.quantity for item, _ in target_items)
        eligible_sets = total_quantity // rule.buy_quantity
        if eligible_sets == 0:
            return None

        remaining_free = eligible_sets * rule.get_quantity

        # sorted() is stable, equal prices keep cart order
        cheapest_first = sorted(target_items, key=lambda entry: entry[0].unit_price)

        applied_items = []
        total_discount = 0.0

        for item, index in cheapest_first:
            if remaining_free <= 0:
                break

            discounted_units = min(item.quantity, remaining_free)
            discount = discounted_units * item.unit_price * rule.get_discount_percentage / 100

            total_discount += discount
            remaining_free -= discounted_units
            applied_items.append(DiscountApplicator._item_discount(item, index, discount))

        return DiscountApplicator._build_discount(rule, target_items, applied_items, total_discount)

    @staticmethod
    def _apply_quantity_discount(rule: PricingRule, target_items: TargetItems) -> AppliedDiscount | None:
        """
        Tiered discount per targeted line, based on that line's quantity.

        Lines without a matching tier are skipped.
        """
        if not rule.quantity_tiers:
            return None

        applied_items = []
        total_discount = 0.0

        for item, index in target_items:
            tier = DiscountApplicator.find_tier(rule.quantity_tiers, item.quantity)
            if tier is None:
                continue

            discount = DiscountApplicator._tier_discount(tier, item)
            if discount > 0:
                total_discount += discount
                applied_items.append(DiscountApplicator._item_discount(item, index, discount))

        return DiscountApplicator._build_discount(rule, target_items, applied_items, total_discount)

    @staticmethod
    def find_tier(tiers: list[QuantityTier], quantity: int) -> QuantityTier | None:
        """
        Select the tier for a quantity.

        Among the tiers covering the quantity the one with the highest
        min_quantity wins; on equal minimums the first configured tier wins.
        Overlapping tiers are therefore resolved, never rejected.
        """
        covering = [tier for tier in tiers if tier.covers(quantity)]
        if not covering:
            return None
        return max(covering, key=lambda tier: tier.min_quantity)

    @staticmethod
    def _tier_discount(tier: QuantityTier, item: CartLineItem) -> float:
        # Precedence: tier price, then percentage, then per-unit amount
        if tier.tier_price is not None:
            return item.line_total - tier.tier_price * item.quantity
        if tier.tier_discount_percentage is not None:
            return item.line_total * tier.tier_discount_percentage / 100
        if tier.tier_discount_amount is not None:
            return tier.tier_discount_amount * item.quantity
        return 0.0

    @staticmethod
    def _item_discount(item: CartLineItem, index: int, discount: float) -> AppliedItemDiscount:
        return AppliedItemDiscount(
            item_index=index,
            product_id=item.product_id,
            discount_amount=discount,
            original_price=item.line_total,
            final_price=item.line_total - discount
        )

    @staticmethod
    def _build_discount(
        rule: PricingRule,
        target_items: TargetItems,
        applied_items: list[AppliedItemDiscount],
        total_discount: float
    ) -> AppliedDiscount | None:
        if total_discount <= 0 or not applied_items:
            logger.debug(f"Rule {rule.id} ({rule.rule_type}) produced no discount")
            return None

        original_amount = sum(item.line_total for item, _ in target_items)
        return AppliedDiscount(
            rule_id=rule.id,
            rule_name=rule.name,
            rule_type=rule.rule_type,
            discount_amount=total_discount,
            original_amount=original_amount,
            final_amount=original_amount - total_discount,
            applied_to_items=applied_items
        )
