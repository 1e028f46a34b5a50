"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from datetime import datetime, timezone

import pytest

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Deterministic engine settings before config is imported
os.environ.setdefault("DISCOUNT_TRACE_ENABLED", "true")
os.environ.setdefault("DISCOUNT_CLAMP_FINAL_SUBTOTAL", "false")
os.environ.setdefault("DISCOUNT_AMOUNT_PRECISION", "2")

from models.cart import CartLineItem, DiscountContext
from models.pricing_rule import PricingRule, QuantityTier, RuleCondition, RuleTarget

FIXED_NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Cart Fixtures
# ============================================================================

@pytest.fixture
def now() -> datetime:
    """Evaluation instant shared by date window tests."""
    return FIXED_NOW


@pytest.fixture
def make_item():
    """Factory for cart lines (line_total defaults to quantity * unit_price)."""
    def _make_item(unit_price: float, quantity: int = 1, product_id: int | None = None,
                   sku: str = "", tags: list[str] | None = None, category_id: int | None = None,
                   line_total: float | None = None) -> CartLineItem:
        return CartLineItem(
            product_id=product_id,
            sku=sku or f"SKU-{product_id}",
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total if line_total is not None else quantity * unit_price,
            tags=tags or [],
            category_id=category_id
        )
    return _make_item


@pytest.fixture
def make_context():
    """Factory for calculation contexts; subtotal defaults to the sum of line totals."""
    def _make_context(items: list[CartLineItem], subtotal: float | None = None,
                      client_id: int | None = None, client_tags: list[str] | None = None,
                      invoice_tags: list[str] | None = None) -> DiscountContext:
        return DiscountContext(
            items=items,
            subtotal=subtotal if subtotal is not None else sum(item.line_total for item in items),
            client_id=client_id,
            client_tags=client_tags or [],
            invoice_tags=invoice_tags or [],
            now=FIXED_NOW
        )
    return _make_context


# ============================================================================
# Rule Fixtures
# ============================================================================

@pytest.fixture
def make_rule():
    """Factory for pricing rules; keyword arguments override the defaults."""
    def _make_rule(rule_type: str = "percentage_discount", rule_id: int = 1, priority: int = 0,
                   targets: list[RuleTarget] | None = None, conditions: list[RuleCondition] | None = None,
                   quantity_tiers: list[QuantityTier] | None = None, **fields) -> PricingRule:
        if targets is None:
            targets = [RuleTarget(target_type="all_products")]
        return PricingRule(
            id=rule_id,
            name=fields.pop("name", f"Rule {rule_id}"),
            rule_type=rule_type,
            priority=priority,
            targets=targets,
            conditions=conditions or [],
            quantity_tiers=quantity_tiers or [],
            **fields
        )
    return _make_rule
