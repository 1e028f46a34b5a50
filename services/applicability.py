from datetime import datetime, timezone

from models.cart import DiscountContext
from models.pricing_rule import PricingRule
from services.condition_evaluator import ConditionEvaluator
from services.discount_trace import DiscountTracer, NullDiscountTracer
from services.target_matcher import TargetMatcher


class SkipReason:
    """Reasons reported when a rule fails the applicability gate."""
    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    NO_MATCHING_TARGETS = "no_matching_targets"
    CONDITIONS_NOT_MET = "conditions_not_met"
    CUSTOMER_USAGE_LIMIT_REACHED = "customer_usage_limit_reached"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so rule windows and 'now' always compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ApplicabilityGate:
    """Combines the active / date window / usage / target / condition checks."""

    @staticmethod
    def can_apply_rule(
        rule: PricingRule,
        context: DiscountContext,
        now: datetime | None = None,
        tracer: DiscountTracer | None = None
    ) -> bool:
        """
        Check whether a rule may be applied to the context.

        True only if ALL hold:
        - rule is active
        - now is inside [start_date, end_date] (a missing bound is open)
        - usage_limit is unset or usage_count < usage_limit
        - at least one target selects at least one cart line
        - the rule's conditions evaluate to True

        usage_limit_per_customer needs the client's usage history and is
        checked by the engine through an injected counter, not here.

        Args:
            rule: Pricing rule from the snapshot
            context: Calculation context
            now: Evaluation instant, defaults to context.now or current UTC time
            tracer: Receives condition events

        Returns:
            True if the rule is applicable
        """
        return ApplicabilityGate.skip_reason(rule, context, now, tracer) is None

    @staticmethod
    def skip_reason(
        rule: PricingRule,
        context: DiscountContext,
        now: datetime | None = None,
        tracer: DiscountTracer | None = None
    ) -> str | None:
        """Same checks as can_apply_rule, returning the first failing SkipReason (None = applicable)."""
        tracer = tracer or NullDiscountTracer()

        if not rule.is_active:
            return SkipReason.INACTIVE

        current = as_utc(now or context.now or datetime.now(timezone.utc))
        if rule.start_date is not None and as_utc(rule.start_date) > current:
            return SkipReason.NOT_STARTED
        if rule.end_date is not None and as_utc(rule.end_date) < current:
            return SkipReason.EXPIRED

        if rule.usage_limit is not None and rule.usage_count >= rule.usage_limit:
            return SkipReason.USAGE_LIMIT_REACHED

        if not TargetMatcher.has_matching_targets(rule.targets, context):
            return SkipReason.NO_MATCHING_TARGETS

        if not ConditionEvaluator.evaluate_conditions(rule.conditions, context, tracer):
            return SkipReason.CONDITIONS_NOT_MET

        return None
