"""
TargetMatcher Unit Tests

Tests cart line selection for every target type, unions and the
boolean has_matching_targets variant.

Run with:
    pytest tests/discounts/unit/test_target_matcher.py -v
"""

from models.pricing_rule import RuleTarget
from services.target_matcher import TargetMatcher


def _indexes(matched):
    return [index for _, index in matched]


class TestTargetTypes:
    """Selection by a single target."""

    def test_no_targets_selects_every_line(self, make_item, make_context):
        context = make_context([make_item(10.0), make_item(20.0)])

        assert _indexes(TargetMatcher.get_target_items([], context)) == [0, 1]

    def test_all_products_selects_every_line(self, make_item, make_context):
        context = make_context([make_item(10.0), make_item(20.0), make_item(5.0)])
        targets = [RuleTarget(target_type="all_products")]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0, 1, 2]

    def test_specific_products(self, make_item, make_context):
        context = make_context([
            make_item(10.0, product_id=1),
            make_item(20.0, product_id=2),
            make_item(30.0, product_id=3),
        ])
        targets = [RuleTarget(target_type="specific_products", target_ids="[1, 3]")]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0, 2]

    def test_specific_products_skips_lines_without_product(self, make_item, make_context):
        context = make_context([make_item(10.0), make_item(20.0, product_id=5)])
        targets = [RuleTarget(target_type="specific_products", target_ids=[5])]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [1]

    def test_products_with_tag_requires_all_tags(self, make_item, make_context):
        context = make_context([
            make_item(10.0, tags=["organic"]),
            make_item(20.0, tags=["organic", "local"]),
        ])
        targets = [RuleTarget(target_type="products_with_tag", target_tags='["organic", "local"]')]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [1]

    def test_products_with_tag_empty_list_matches_nothing(self, make_item, make_context):
        context = make_context([make_item(10.0, tags=["organic"])])
        targets = [RuleTarget(target_type="products_with_tag", target_tags="[]")]

        assert TargetMatcher.get_target_items(targets, context) == []

    def test_products_with_any_tags(self, make_item, make_context):
        context = make_context([
            make_item(10.0, tags=["organic"]),
            make_item(20.0, tags=["imported"]),
            make_item(30.0, tags=[]),
        ])
        targets = [RuleTarget(target_type="products_with_any_tags", target_tags='["organic", "imported"]')]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0, 1]

    def test_product_category(self, make_item, make_context):
        context = make_context([
            make_item(10.0, category_id=4),
            make_item(20.0, category_id=9),
            make_item(30.0),
        ])
        targets = [RuleTarget(target_type="product_category", target_ids="[9]")]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [1]

    def test_cheapest_item_first_occurrence_wins(self, make_item, make_context):
        context = make_context([make_item(20.0), make_item(5.0), make_item(5.0)])
        targets = [RuleTarget(target_type="cheapest_item")]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [1]

    def test_most_expensive_item_first_occurrence_wins(self, make_item, make_context):
        context = make_context([make_item(50.0), make_item(10.0), make_item(50.0)])
        targets = [RuleTarget(target_type="most_expensive_item")]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0]

    def test_unknown_target_type_selects_nothing(self, make_item, make_context):
        context = make_context([make_item(10.0)])
        targets = [RuleTarget(target_type="seasonal_collection")]

        assert TargetMatcher.get_target_items(targets, context) == []

    def test_malformed_ids_select_nothing(self, make_item, make_context):
        context = make_context([make_item(10.0, product_id=1)])
        targets = [RuleTarget(target_type="specific_products", target_ids="{broken")]

        assert TargetMatcher.get_target_items(targets, context) == []


class TestTargetUnion:
    """Several targets on one rule."""

    def test_union_is_deduplicated(self, make_item, make_context):
        context = make_context([
            make_item(10.0, product_id=1, tags=["sale"]),
            make_item(20.0, product_id=2),
            make_item(30.0, product_id=3, tags=["sale"]),
        ])
        targets = [
            RuleTarget(target_type="specific_products", target_ids="[1, 2]"),
            RuleTarget(target_type="products_with_any_tags", target_tags='["sale"]'),
        ]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0, 1, 2]

    def test_all_products_short_circuits(self, make_item, make_context):
        context = make_context([make_item(10.0, product_id=1), make_item(20.0, product_id=2)])
        targets = [
            RuleTarget(target_type="specific_products", target_ids="[2]"),
            RuleTarget(target_type="all_products"),
        ]

        assert _indexes(TargetMatcher.get_target_items(targets, context)) == [0, 1]

    def test_returned_items_are_context_lines(self, make_item, make_context):
        context = make_context([make_item(10.0, product_id=1)])

        item, index = TargetMatcher.get_target_items([], context)[0]

        assert item is context.items[index]


class TestHasMatchingTargets:
    """Boolean variant used by the applicability gate."""

    def test_no_targets_is_true_even_for_empty_cart(self, make_context):
        assert TargetMatcher.has_matching_targets([], make_context([])) is True

    def test_true_when_any_target_matches(self, make_item, make_context):
        context = make_context([make_item(10.0, product_id=1)])
        targets = [
            RuleTarget(target_type="specific_products", target_ids="[99]"),
            RuleTarget(target_type="cheapest_item"),
        ]

        assert TargetMatcher.has_matching_targets(targets, context) is True

    def test_false_when_nothing_matches(self, make_item, make_context):
        context = make_context([make_item(10.0, product_id=1)])
        targets = [RuleTarget(target_type="specific_products", target_ids="[99]")]

        assert TargetMatcher.has_matching_targets(targets, context) is False

    def test_cheapest_item_on_empty_cart_is_false(self, make_context):
        targets = [RuleTarget(target_type="cheapest_item")]

        assert TargetMatcher.has_matching_targets(targets, make_context([])) is False
