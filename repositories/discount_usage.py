import logging
import threading
from datetime import datetime, timezone

from exceptions.pricing_rule import PricingRuleNotFoundException
from exceptions.usage import InvalidUsageRecordException
from models.discount import DiscountCalculationResult
from models.discount_usage import DiscountUsageDTO
from repositories.pricing_rule import PricingRuleRepository
from services.customer_usage import CustomerUsageCounter

logger = logging.getLogger(__name__)


class DiscountUsageRepository(CustomerUsageCounter):
    """
    Usage tracker for applied discounts.

    Called by the checkout after the invoice is committed, never by the
    engine. Recording a usage advances the rule's usage_count in the rule
    repository and keeps per-client history for usage_limit_per_customer.
    """

    def __init__(self, rule_repository: PricingRuleRepository | None = None):
        self.rule_repository = rule_repository
        self._usages: list[DiscountUsageDTO] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def record_usage(self, usage: DiscountUsageDTO) -> DiscountUsageDTO:
        """
        Store one usage record.

        Args:
            usage: Usage of one rule on one invoice

        Returns:
            Stored record with id and created_at set

        Raises:
            InvalidUsageRecordException: If the amounts are negative
        """
        if usage.discount_amount < 0:
            raise InvalidUsageRecordException(usage.pricing_rule_id, "negative discount amount")

        with self._lock:
            stored = usage.model_copy(update={
                "id": self._next_id,
                "created_at": usage.created_at or datetime.now(timezone.utc),
            })
            self._next_id += 1
            self._usages.append(stored)

        if self.rule_repository is not None:
            try:
                self.rule_repository.increment_usage_count(usage.pricing_rule_id)
            except PricingRuleNotFoundException as e:
                # Rule deleted after the invoice was priced, the history is still kept
                logger.warning(f"Usage recorded for unknown pricing rule {usage.pricing_rule_id} ({e.log_fields()})")

        logger.info(
            f"Discount usage recorded: rule={usage.pricing_rule_id}, invoice={usage.invoice_id}, "
            f"amount={usage.discount_amount:.2f}"
        )
        return stored

    def record_result(
        self,
        result: DiscountCalculationResult,
        invoice_id: int,
        client_id: int | None = None
    ) -> list[DiscountUsageDTO]:
        """
        Record every discount of a committed calculation.

        Raises:
            InvalidUsageRecordException: If an applied discount has no rule id
        """
        records = []
        for discount in result.applied_discounts:
            if discount.rule_id is None:
                raise InvalidUsageRecordException(0, f"applied discount '{discount.rule_name}' has no rule id")
            records.append(self.record_usage(DiscountUsageDTO(
                pricing_rule_id=discount.rule_id,
                invoice_id=invoice_id,
                client_id=client_id,
                discount_amount=discount.discount_amount,
                original_amount=discount.original_amount,
                final_amount=discount.final_amount,
                applied_items=[item.model_dump() for item in discount.applied_to_items],
            )))
        return records

    def count_for_rule(self, rule_id: int) -> int:
        with self._lock:
            return sum(1 for usage in self._usages if usage.pricing_rule_id == rule_id)

    def count_for_client(self, rule_id: int, client_id: int) -> int:
        with self._lock:
            return sum(
                1 for usage in self._usages
                if usage.pricing_rule_id == rule_id and usage.client_id == client_id
            )

    def get_by_invoice(self, invoice_id: int) -> list[DiscountUsageDTO]:
        with self._lock:
            return [usage for usage in self._usages if usage.invoice_id == invoice_id]
