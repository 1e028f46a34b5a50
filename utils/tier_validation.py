"""
Quantity Tier Validation Utility

Authoring-time checks for quantity_discount tiers:
- At least one tier exists
- Quantity bounds are positive and ordered (max >= min)
- Each tier sets exactly one pricing field
- No overlapping quantity ranges

The discount engine never calls this: at calculation time overlapping tiers
are resolved by "highest matching min_quantity wins".
"""

import logging

from models.pricing_rule import QuantityTier

logger = logging.getLogger(__name__)


def validate_tier_pricing_fields(tier: QuantityTier) -> tuple[bool, str | None]:
    """
    Validate that a tier sets exactly one of tier_price, tier_discount_percentage, tier_discount_amount.

    Returns:
        tuple: (is_valid, error_message)
    """
    configured = [
        name for name in ("tier_price", "tier_discount_percentage", "tier_discount_amount")
        if getattr(tier, name) is not None
    ]
    if len(configured) == 0:
        return False, f"Tier starting at {tier.min_quantity} has no price or discount"
    if len(configured) > 1:
        return False, f"Tier starting at {tier.min_quantity} sets several pricing fields: {', '.join(configured)}"
    if tier.tier_discount_percentage is not None and not 0 <= tier.tier_discount_percentage <= 100:
        return False, f"Tier starting at {tier.min_quantity} has percentage outside 0-100"
    return True, None


def validate_tier_ranges(tiers: list[QuantityTier]) -> tuple[bool, str | None]:
    """
    Validate quantity bounds and check that tier ranges do not overlap.

    Example:
        >>> validate_tier_ranges([
        ...     QuantityTier(min_quantity=1, max_quantity=9, tier_discount_percentage=0),
        ...     QuantityTier(min_quantity=5, tier_discount_percentage=10),
        ... ])
        (False, 'Tier 1-9 overlaps tier 5+')
    """
    if not tiers:
        return False, "At least one quantity tier is required"

    for tier in tiers:
        if tier.min_quantity <= 0:
            return False, f"Tier min_quantity must be positive, got {tier.min_quantity}"
        if not tier.is_unbounded and tier.max_quantity < tier.min_quantity:
            return False, f"Tier max_quantity {tier.max_quantity} is below min_quantity {tier.min_quantity}"

    sorted_tiers = sorted(tiers, key=lambda t: t.min_quantity)
    for current, following in zip(sorted_tiers, sorted_tiers[1:]):
        if current.is_unbounded or current.max_quantity >= following.min_quantity:
            return False, f"Tier {_format_range(current)} overlaps tier {_format_range(following)}"

    return True, None


def validate_quantity_tiers(tiers: list[QuantityTier]) -> tuple[bool, str | None]:
    """
    Run all tier checks.

    Returns:
        tuple: (is_valid, error_message), error_message is None when valid
    """
    is_valid, error = validate_tier_ranges(tiers)
    if not is_valid:
        logger.warning(f"Invalid quantity tiers: {error}")
        return is_valid, error

    for tier in tiers:
        is_valid, error = validate_tier_pricing_fields(tier)
        if not is_valid:
            logger.warning(f"Invalid quantity tier: {error}")
            return is_valid, error

    return True, None


def _format_range(tier: QuantityTier) -> str:
    if tier.is_unbounded:
        return f"{tier.min_quantity}+"
    return f"{tier.min_quantity}-{tier.max_quantity}"
