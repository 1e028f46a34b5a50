"""
Discount usage tracking exceptions.
"""

from .base import DiscountEngineException


class UsageException(DiscountEngineException):
    """Base exception for discount usage tracking errors."""
    pass


class InvalidUsageRecordException(UsageException):
    """Raised when a usage record cannot be stored."""

    def __init__(self, rule_id: int, reason: str):
        super().__init__(
            f"Invalid usage record for rule {rule_id}: {reason}",
            details={'rule_id': rule_id, 'reason': reason}
        )
        self.rule_id = rule_id
        self.reason = reason
