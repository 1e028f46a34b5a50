from enums.condition_operator import ConditionOperator, LogicalOperator
from enums.condition_type import ConditionType
from models.cart import DiscountContext
from models.pricing_rule import RuleCondition
from services.discount_trace import DiscountTracer, NullDiscountTracer


class ConditionEvaluator:
    """Decides whether a rule's conditions hold for the current context."""

    @staticmethod
    def evaluate_conditions(
        conditions: list[RuleCondition],
        context: DiscountContext,
        tracer: DiscountTracer | None = None
    ) -> bool:
        """
        Evaluate a rule's conditions.

        Conditions are partitioned by condition_group and every group must
        hold (groups are AND'ed). Inside a group the conditions are folded
        left to right starting from True, each one combined into the running
        result with its own logical_operator:

            acc = True
            acc = acc AND c1   (c1.logical_operator == AND)
            acc = acc OR  c2   (c2.logical_operator == OR)
            ...

        Evaluation order therefore decides precedence, not the usual
        AND-before-OR. Existing rule configurations depend on this fold, so
        it must not be "fixed" here.

        Because the fold starts from True, a group's first condition only
        counts when its logical_operator is AND. With OR the first step is
        True OR result, so that condition can never fail the group. Rule
        editors only offer the operator from the second condition on, but
        imported snapshots may still carry OR on the first one.

        Args:
            conditions: Ordered conditions of one pricing rule
            context: Calculation context
            tracer: Receives one event per evaluated condition

        Returns:
            True if there are no conditions or all groups hold
        """
        if not conditions:
            return True

        tracer = tracer or NullDiscountTracer()

        groups: dict[int, list[RuleCondition]] = {}
        for condition in conditions:
            groups.setdefault(condition.condition_group, []).append(condition)

        return all(
            ConditionEvaluator._evaluate_group(group, context, tracer)
            for group in groups.values()
        )

    @staticmethod
    def _evaluate_group(
        conditions: list[RuleCondition],
        context: DiscountContext,
        tracer: DiscountTracer
    ) -> bool:
        result = True
        for condition in conditions:
            condition_result = ConditionEvaluator.evaluate_condition(condition, context)
            tracer.condition_evaluated(condition, condition_result)

            if condition.parsed_logical_operator == LogicalOperator.OR:
                result = result or condition_result
            else:
                result = result and condition_result
        return result

    @staticmethod
    def evaluate_condition(condition: RuleCondition, context: DiscountContext) -> bool:
        """
        Evaluate a single condition.

        Tag conditions ignore the operator and test membership of the literal
        (value_text, or any entry of value_array). Item-level conditions are
        existential: one matching line is enough. Unknown condition types
        evaluate to True so rules authored with newer types keep working.
        """
        match condition.parsed_type:
            case ConditionType.CART_TOTAL | ConditionType.CART_SUBTOTAL:
                return ConditionEvaluator.compare_number(condition, context.subtotal)

            case ConditionType.CART_QUANTITY:
                return ConditionEvaluator.compare_number(condition, context.total_quantity)

            case ConditionType.CLIENT_ID:
                return ConditionEvaluator.compare_number(condition, context.client_id or 0)

            case ConditionType.CLIENT_HAS_TAG | ConditionType.CLIENT_HAS_ANY_TAGS:
                return any(tag in context.client_tags for tag in condition.literal_tags())

            case ConditionType.CLIENT_HAS_ALL_TAGS:
                required_tags = condition.literal_tags()
                return bool(required_tags) and all(tag in context.client_tags for tag in required_tags)

            case ConditionType.INVOICE_HAS_TAG | ConditionType.INVOICE_HAS_ANY_TAGS:
                return any(tag in context.invoice_tags for tag in condition.literal_tags())

            case ConditionType.ITEM_QUANTITY:
                return any(
                    ConditionEvaluator.compare_number(condition, item.quantity)
                    for item in context.items
                )

            case ConditionType.ITEM_PRICE:
                return any(
                    ConditionEvaluator.compare_number(condition, item.unit_price)
                    for item in context.items
                )

            case ConditionType.PRODUCT_HAS_TAG | ConditionType.PRODUCT_HAS_ANY_TAGS:
                literals = condition.literal_tags()
                return any(
                    any(tag in item.tags for tag in literals)
                    for item in context.items
                )

            case ConditionType.PRODUCT_SKU:
                has_sku = any(item.sku == condition.value_text for item in context.items)
                if condition.parsed_operator == ConditionOperator.NOT_EQUALS:
                    return not has_sku
                return has_sku

            case ConditionType.PRODUCT_CATEGORY:
                category_ids = set(condition.literal_ids())
                return any(
                    item.category_id is not None and item.category_id in category_ids
                    for item in context.items
                )

            case ConditionType.PRODUCT_QUANTITY:
                product_quantity = sum(
                    item.quantity for item in context.items
                    if item.product_id is not None and str(item.product_id) == (condition.value_text or "").strip()
                )
                return ConditionEvaluator.compare_number(condition, product_quantity)

            case _:
                # Unknown condition type: satisfied
                return True

    @staticmethod
    def compare_number(condition: RuleCondition, value: float) -> bool:
        """
        Compare a context number against the condition's literal.

        Missing literals compare as 0; between is inclusive on both ends.
        An unknown operator does not restrict the rule.
        """
        expected = condition.value_number or 0

        match condition.parsed_operator:
            case ConditionOperator.EQUALS:
                return value == expected
            case ConditionOperator.NOT_EQUALS:
                return value != expected
            case ConditionOperator.GREATER_THAN:
                return value > expected
            case ConditionOperator.GREATER_EQUAL:
                return value >= expected
            case ConditionOperator.LESS_THAN:
                return value < expected
            case ConditionOperator.LESS_EQUAL:
                return value <= expected
            case ConditionOperator.BETWEEN:
                return (condition.value_start or 0) <= value <= (condition.value_end or 0)
            case _:
                return True
