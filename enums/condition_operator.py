from enum import Enum


class ConditionOperator(str, Enum):
    """Comparison operators for numeric rule conditions."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    GREATER_EQUAL = "greater_equal"
    LESS_THAN = "less_than"
    LESS_EQUAL = "less_equal"
    BETWEEN = "between"  # inclusive, uses value_start / value_end

    @classmethod
    def parse(cls, value: str | None) -> 'ConditionOperator | None':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class LogicalOperator(str, Enum):
    """How a condition is folded into the result of its group."""
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: str | None) -> 'LogicalOperator':
        """
        Resolve a raw logical operator.

        Matching is case-insensitive; anything that is not OR folds as AND.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() == cls.OR.value:
            return cls.OR
        return cls.AND
