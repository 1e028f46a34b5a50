import logging

from enums.target_type import TargetType
from models.cart import CartLineItem, DiscountContext
from models.pricing_rule import RuleTarget

logger = logging.getLogger(__name__)


class TargetMatcher:
    """Decides which cart lines a rule's targets select."""

    @staticmethod
    def get_target_items(
        targets: list[RuleTarget],
        context: DiscountContext
    ) -> list[tuple[CartLineItem, int]]:
        """
        Collect the cart lines selected by a rule's targets.

        Rules:
        - No targets: every line
        - all_products: every line (short-circuits the remaining targets)
        - specific_products: product_id in target_ids
        - products_with_tag: line carries ALL target tags
        - products_with_any_tags: line carries ANY target tag
        - product_category: category_id in target_ids
        - cheapest_item / most_expensive_item: the single line with the
          lowest / highest unit price, first occurrence wins ties
        - unknown target type: nothing

        Several targets are unioned, de-duplicated by line index in the order
        lines were first selected.

        Args:
            targets: Targets of one pricing rule
            context: Calculation context holding the cart lines

        Returns:
            List of (item, index) tuples, index being the position in context.items
        """
        items = context.items
        if not targets:
            return list(zip(items, range(len(items))))

        matched: list[tuple[CartLineItem, int]] = []
        seen_indexes: set[int] = set()

        for target in targets:
            target_type = target.parsed_type
            if target_type == TargetType.ALL_PRODUCTS:
                return list(zip(items, range(len(items))))

            for index in TargetMatcher._match_indexes(target, target_type, items):
                if index not in seen_indexes:
                    seen_indexes.add(index)
                    matched.append((items[index], index))

        return matched

    @staticmethod
    def has_matching_targets(targets: list[RuleTarget], context: DiscountContext) -> bool:
        """
        True if at least one target selects at least one cart line.

        Boolean variant of get_target_items, used by the applicability gate.
        No targets means the rule applies to the whole cart, so this is True
        even for an empty cart.
        """
        if not targets:
            return True

        items = context.items
        for target in targets:
            target_type = target.parsed_type
            if target_type == TargetType.ALL_PRODUCTS:
                return True
            if TargetMatcher._match_indexes(target, target_type, items):
                return True
        return False

    @staticmethod
    def _match_indexes(
        target: RuleTarget,
        target_type: TargetType | None,
        items: list[CartLineItem]
    ) -> list[int]:
        match target_type:
            case TargetType.ALL_PRODUCTS:
                return list(range(len(items)))

            case TargetType.SPECIFIC_PRODUCTS:
                product_ids = set(target.ids())
                return [
                    index for index, item in enumerate(items)
                    if item.product_id is not None and item.product_id in product_ids
                ]

            case TargetType.PRODUCTS_WITH_TAG:
                required_tags = target.tags()
                if not required_tags:
                    return []
                return [
                    index for index, item in enumerate(items)
                    if all(tag in item.tags for tag in required_tags)
                ]

            case TargetType.PRODUCTS_WITH_ANY_TAGS:
                any_tags = target.tags()
                return [
                    index for index, item in enumerate(items)
                    if any(tag in item.tags for tag in any_tags)
                ]

            case TargetType.PRODUCT_CATEGORY:
                category_ids = set(target.ids())
                return [
                    index for index, item in enumerate(items)
                    if item.category_id is not None and item.category_id in category_ids
                ]

            case TargetType.CHEAPEST_ITEM:
                if not items:
                    return []
                cheapest_index = 0
                for index, item in enumerate(items):
                    if item.unit_price < items[cheapest_index].unit_price:
                        cheapest_index = index
                return [cheapest_index]

            case TargetType.MOST_EXPENSIVE_ITEM:
                if not items:
                    return []
                expensive_index = 0
                for index, item in enumerate(items):
                    if item.unit_price > items[expensive_index].unit_price:
                        expensive_index = index
                return [expensive_index]

            case _:
                # Unknown target type selects nothing
                logger.debug(f"Unknown target type ignored: {target.target_type!r}")
                return []
