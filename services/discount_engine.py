import logging
from datetime import datetime, timezone

import config
from models.cart import DiscountContext
from models.discount import AppliedDiscount, DiscountCalculationResult, ItemDiscountSummary
from models.pricing_rule import PricingRule
from services.applicability import ApplicabilityGate, SkipReason
from services.customer_usage import CustomerUsageCounter
from services.discount_applicator import DiscountApplicator
from services.discount_trace import DiscountTracer, get_default_tracer

logger = logging.getLogger(__name__)


class DiscountEngine:
    """Applies a snapshot of pricing rules to a cart context."""

    @staticmethod
    def calculate_discounts(
        context: DiscountContext,
        rules: list[PricingRule],
        now: datetime | None = None,
        tracer: DiscountTracer | None = None,
        customer_usage: CustomerUsageCounter | None = None,
        clamp_final_subtotal: bool | None = None
    ) -> DiscountCalculationResult:
        """
        Calculate the discounts of a cart.

        Algorithm:
        1. Sort rules by priority, highest first (stable for equal priorities)
        2. For each rule: skip it if the applicability gate fails, otherwise
           apply it and keep the discount if there is one
        3. final_subtotal = original_subtotal - sum of applied discounts

        Every rule is evaluated against the ORIGINAL line totals and
        subtotal. Stacked rules add up instead of compounding: two 10% rules
        on 1000 give 200 off, not 190. Each fixed amount rule is capped on its
        own, but the stack as a whole is not, so final_subtotal can become
        negative unless clamping is enabled.

        The function is pure: no rule, context or usage counter is modified.
        Usage counts are advanced by the usage tracker after the invoice is
        committed.

        Args:
            context: Cart lines, client and subtotal
            rules: Immutable rule snapshot, fetched once for this calculation
            now: Evaluation instant for date windows (default: context.now or current UTC time)
            tracer: Receives per-rule and per-condition events (default from config)
            customer_usage: Enables usage_limit_per_customer when given
            clamp_final_subtotal: Floor final_subtotal at 0 (default from config)

        Returns:
            DiscountCalculationResult with per-rule and per-line breakdowns
        """
        tracer = tracer or get_default_tracer()
        if clamp_final_subtotal is None:
            clamp_final_subtotal = getattr(config, "DISCOUNT_CLAMP_FINAL_SUBTOTAL", False)
        evaluation_time = now or context.now or datetime.now(timezone.utc)

        sorted_rules = sorted(rules, key=lambda rule: rule.priority, reverse=True)

        applied_discounts: list[AppliedDiscount] = []
        total_discount = 0.0

        for rule in sorted_rules:
            reason = ApplicabilityGate.skip_reason(rule, context, evaluation_time, tracer)
            if reason is None and DiscountEngine._customer_limit_reached(rule, context, customer_usage):
                reason = SkipReason.CUSTOMER_USAGE_LIMIT_REACHED
            if reason is not None:
                tracer.rule_skipped(rule, reason)
                continue

            if rule.parsed_type is None:
                tracer.unknown_type("rule_type", rule.rule_type)

            discount = DiscountApplicator.apply_rule(rule, context)
            if discount is None:
                tracer.rule_no_discount(rule)
                continue

            applied_discounts.append(discount)
            total_discount += discount.discount_amount
            tracer.rule_applied(rule, discount.discount_amount)

        final_subtotal = context.subtotal - total_discount
        if clamp_final_subtotal and final_subtotal < 0:
            logger.debug(f"Final subtotal {final_subtotal} clamped to 0")
            final_subtotal = 0.0

        logger.debug(
            f"Discount calculation: rules={len(rules)}, applied={len(applied_discounts)}, "
            f"subtotal={context.subtotal}, discount={total_discount}"
        )

        return DiscountCalculationResult(
            original_subtotal=context.subtotal,
            total_discount_amount=total_discount,
            final_subtotal=final_subtotal,
            applied_discounts=applied_discounts,
            item_summaries=DiscountEngine._summarize_items(context, applied_discounts)
        )

    @staticmethod
    def _customer_limit_reached(
        rule: PricingRule,
        context: DiscountContext,
        customer_usage: CustomerUsageCounter | None
    ) -> bool:
        if customer_usage is None or rule.usage_limit_per_customer is None:
            return False
        if context.client_id is None or rule.id is None:
            return False
        used = customer_usage.count_for_client(rule.id, context.client_id)
        return used >= rule.usage_limit_per_customer

    @staticmethod
    def _summarize_items(
        context: DiscountContext,
        applied_discounts: list[AppliedDiscount]
    ) -> list[ItemDiscountSummary]:
        """Fold the per-rule breakdowns into one entry per cart line."""
        discount_by_index: dict[int, float] = {}
        rules_by_index: dict[int, list[int | None]] = {}

        for discount in applied_discounts:
            for applied_item in discount.applied_to_items:
                index = applied_item.item_index
                discount_by_index[index] = discount_by_index.get(index, 0.0) + applied_item.discount_amount
                rules_by_index.setdefault(index, []).append(discount.rule_id)

        summaries = []
        for index, item in enumerate(context.items):
            item_discount = discount_by_index.get(index, 0.0)
            summaries.append(ItemDiscountSummary(
                item_index=index,
                product_id=item.product_id,
                original_line_total=item.line_total,
                discount_amount=item_discount,
                final_line_total=item.line_total - item_discount,
                applied_rule_ids=rules_by_index.get(index, [])
            ))
        return summaries
