"""
Discount Summary Formatter

Plain-text rendering of a calculation result for quote/invoice previews and
logs. Amounts are rounded here for display only; the engine never rounds.
"""

import config
from models.discount import DiscountCalculationResult


class DiscountFormatterService:
    """Formatting of discount calculation results."""

    @staticmethod
    def format_amount(amount: float) -> str:
        precision = getattr(config, "DISCOUNT_AMOUNT_PRECISION", 2)
        return f"{amount:.{precision}f}"

    @staticmethod
    def format_summary(result: DiscountCalculationResult) -> str:
        """
        Format the applied discounts and totals.

        Example output:
            ```
            Subtotal: 2500.00
              VIP 5%: -125.00
              Bulk 10%: -250.00
            Discount: -375.00
            Total: 2125.00
            ```

        Args:
            result: Result of DiscountEngine.calculate_discounts()

        Returns:
            Multi-line summary, just subtotal and total when nothing applied
        """
        fmt = DiscountFormatterService.format_amount
        lines = [f"Subtotal: {fmt(result.original_subtotal)}"]

        for discount in result.applied_discounts:
            lines.append(f"  {discount.rule_name}: -{fmt(discount.discount_amount)}")

        if result.has_discounts:
            lines.append(f"Discount: -{fmt(result.total_discount_amount)}")

        lines.append(f"Total: {fmt(result.final_subtotal)}")
        return "\n".join(lines)
