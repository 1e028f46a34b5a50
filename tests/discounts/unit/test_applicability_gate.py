"""
ApplicabilityGate Unit Tests

Tests the active flag, date window, usage limit, target and condition checks.

Run with:
    pytest tests/discounts/unit/test_applicability_gate.py -v
"""

from datetime import datetime, timedelta, timezone

from models.pricing_rule import RuleCondition, RuleTarget
from services.applicability import ApplicabilityGate, SkipReason, as_utc


class TestApplicabilityGate:
    """can_apply_rule / skip_reason."""

    def test_plain_rule_applies(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])

        assert ApplicabilityGate.can_apply_rule(make_rule(), context, now) is True

    def test_inactive_rule(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(is_active=False)

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.INACTIVE

    def test_not_started(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(start_date=now + timedelta(hours=1))

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.NOT_STARTED

    def test_expired(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(end_date=now - timedelta(seconds=1))

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.EXPIRED

    def test_window_bounds_are_inclusive(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(start_date=now, end_date=now)

        assert ApplicabilityGate.can_apply_rule(rule, context, now) is True

    def test_naive_dates_are_utc(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        naive_end = now.replace(tzinfo=None) - timedelta(minutes=5)
        rule = make_rule(end_date=naive_end)

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.EXPIRED

    def test_defaults_to_context_now(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(end_date=now - timedelta(days=1))

        assert ApplicabilityGate.skip_reason(rule, context) == SkipReason.EXPIRED

    def test_usage_limit_reached(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(usage_limit=3, usage_count=3)

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.USAGE_LIMIT_REACHED

    def test_usage_limit_not_reached(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(usage_limit=3, usage_count=2)

        assert ApplicabilityGate.can_apply_rule(rule, context, now) is True

    def test_usage_limit_zero_never_applies(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(usage_limit=0)

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.USAGE_LIMIT_REACHED

    def test_no_matching_targets(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0, product_id=1)])
        rule = make_rule(targets=[RuleTarget(target_type="specific_products", target_ids="[2]")])

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.NO_MATCHING_TARGETS

    def test_conditions_not_met(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(conditions=[
            RuleCondition(condition_type="cart_total", operator="greater_than", value_number=100)
        ])

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.CONDITIONS_NOT_MET

    def test_inactive_checked_before_dates(self, make_item, make_context, make_rule, now):
        context = make_context([make_item(10.0)])
        rule = make_rule(is_active=False, end_date=now - timedelta(days=1))

        assert ApplicabilityGate.skip_reason(rule, context, now) == SkipReason.INACTIVE


class TestAsUtc:
    """as_utc helper."""

    def test_naive_gets_utc(self):
        assert as_utc(datetime(2026, 1, 1, 10, 0)).tzinfo == timezone.utc

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))

        assert as_utc(datetime(2026, 1, 1, 12, 0, tzinfo=plus_two)) == datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc)
