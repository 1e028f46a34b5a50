"""
Base exception class for the discount engine.
"""


class DiscountEngineException(Exception):
    """
    Root of the discount engine errors.

    Raised only at the edges (rule snapshots, templates, usage records); the
    calculation core degrades to "no discount" instead. `details` holds the
    identifiers of the failing rule, store or template so handlers can log
    them in the same key=value form as the trace events.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def log_fields(self) -> str:
        """
        Details rendered as trace-style fields.

        Example:
            >>> PricingRuleNotFoundException(7).log_fields()
            'rule_id=7'
        """
        return " ".join(f"{key}={value}" for key, value in self.details.items())

    def __repr__(self) -> str:
        fields = self.log_fields()
        if fields:
            return f"{self.__class__.__name__}({self.message!r}, {fields})"
        return f"{self.__class__.__name__}({self.message!r})"
