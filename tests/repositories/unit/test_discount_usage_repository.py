"""
DiscountUsageRepository Unit Tests

Tests usage recording, rule usage count updates and per-client counting.

Run with:
    pytest tests/repositories/unit/test_discount_usage_repository.py -v
"""

import pytest

from exceptions.usage import InvalidUsageRecordException
from models.discount import AppliedDiscount, DiscountCalculationResult
from models.discount_usage import DiscountUsageDTO
from repositories.discount_usage import DiscountUsageRepository
from repositories.pricing_rule import PricingRuleRepository
from services.discount_engine import DiscountEngine
from services.discount_trace import NullDiscountTracer


def _usage(rule_id=1, invoice_id=100, client_id=7, amount=10.0):
    return DiscountUsageDTO(
        pricing_rule_id=rule_id,
        invoice_id=invoice_id,
        client_id=client_id,
        discount_amount=amount,
        original_amount=100.0,
        final_amount=100.0 - amount,
    )


@pytest.fixture
def rule_repository(make_rule):
    repo = PricingRuleRepository()
    repo.replace_snapshot(10, [make_rule(rule_id=1, discount_percentage=10, usage_limit_per_customer=1)])
    return repo


class TestRecordUsage:

    def test_record_assigns_id_and_timestamp(self):
        repo = DiscountUsageRepository()

        first = repo.record_usage(_usage())
        second = repo.record_usage(_usage())

        assert (first.id, second.id) == (1, 2)
        assert first.created_at is not None

    def test_record_advances_rule_usage_count(self, rule_repository):
        repo = DiscountUsageRepository(rule_repository)

        repo.record_usage(_usage(rule_id=1))

        assert rule_repository.get_by_id(1).usage_count == 1

    def test_unknown_rule_is_still_recorded(self, rule_repository, caplog):
        repo = DiscountUsageRepository(rule_repository)

        repo.record_usage(_usage(rule_id=99))

        assert repo.count_for_rule(99) == 1
        assert "unknown pricing rule 99" in caplog.text

    def test_negative_discount_rejected(self):
        with pytest.raises(InvalidUsageRecordException) as exc_info:
            DiscountUsageRepository().record_usage(_usage(amount=-1.0))

        assert exc_info.value.rule_id == 1


class TestRecordResult:

    def test_records_every_applied_discount(self, make_item, make_context, make_rule):
        context = make_context([make_item(100.0, product_id=1)], client_id=7)
        rules = [make_rule(rule_id=1, discount_percentage=10), make_rule(rule_id=2, discount_percentage=5)]
        result = DiscountEngine.calculate_discounts(context, rules, tracer=NullDiscountTracer())
        repo = DiscountUsageRepository()

        records = repo.record_result(result, invoice_id=500, client_id=7)

        assert [r.pricing_rule_id for r in records] == [1, 2]
        assert records[0].applied_items[0]["product_id"] == 1
        assert len(repo.get_by_invoice(500)) == 2

    def test_discount_without_rule_id_rejected(self):
        result = DiscountCalculationResult(
            original_subtotal=100.0,
            total_discount_amount=10.0,
            final_subtotal=90.0,
            applied_discounts=[AppliedDiscount(
                rule_name="Ad hoc", rule_type="fixed_amount_discount",
                discount_amount=10.0, original_amount=100.0, final_amount=90.0
            )],
        )

        with pytest.raises(InvalidUsageRecordException):
            DiscountUsageRepository().record_result(result, invoice_id=1)


class TestCustomerUsageCounting:

    def test_count_for_client(self):
        repo = DiscountUsageRepository()
        repo.record_usage(_usage(rule_id=1, client_id=7))
        repo.record_usage(_usage(rule_id=1, client_id=8))
        repo.record_usage(_usage(rule_id=2, client_id=7))

        assert repo.count_for_client(1, 7) == 1
        assert repo.count_for_rule(1) == 2

    def test_per_customer_limit_enforced_through_engine(self, rule_repository, make_item, make_context):
        usage_repo = DiscountUsageRepository(rule_repository)
        context = make_context([make_item(100.0)], client_id=7)

        first = DiscountEngine.calculate_discounts(
            context, rule_repository.fetch_active_rules(10),
            tracer=NullDiscountTracer(), customer_usage=usage_repo
        )
        usage_repo.record_result(first, invoice_id=1, client_id=7)
        second = DiscountEngine.calculate_discounts(
            context, rule_repository.fetch_active_rules(10),
            tracer=NullDiscountTracer(), customer_usage=usage_repo
        )

        assert first.total_discount_amount == 10.0
        assert second.applied_discounts == []
