"""
Discount Trace Events

Structured, leveled events emitted while rules and conditions are evaluated.
The engine talks to a DiscountTracer; the default implementation writes the
events as log records, a NullDiscountTracer drops them.
"""

import logging
from abc import ABC, abstractmethod

import config

logger = logging.getLogger(__name__)


class DiscountTracer(ABC):
    """
    Observability port for the discount engine.

    Every event has a name (e.g. "rule.skipped") and flat key/value fields.
    Subclasses override emit() to forward events elsewhere (metrics, tests).
    """

    @abstractmethod
    def emit(self, event: str, level: int = logging.DEBUG, **fields) -> None:
        ...

    def rule_skipped(self, rule, reason: str) -> None:
        self.emit("rule.skipped", rule_id=rule.id, rule_name=rule.name, reason=reason)

    def rule_applied(self, rule, discount_amount: float) -> None:
        self.emit("rule.applied", rule_id=rule.id, rule_name=rule.name,
                  rule_type=rule.rule_type, discount_amount=discount_amount)

    def rule_no_discount(self, rule) -> None:
        self.emit("rule.no_discount", rule_id=rule.id, rule_name=rule.name, rule_type=rule.rule_type)

    def condition_evaluated(self, condition, result: bool) -> None:
        self.emit("condition.evaluated", condition_type=condition.condition_type,
                  operator=condition.operator, group=condition.condition_group,
                  logical_operator=condition.logical_operator, result=result)

    def unknown_type(self, kind: str, value: str) -> None:
        # Unknown types are configuration drift, worth seeing without DEBUG
        self.emit("type.unknown", level=logging.WARNING, kind=kind, value=value)


class LoggingDiscountTracer(DiscountTracer):
    """Writes trace events through the standard logging module."""

    def __init__(self, target: logging.Logger | None = None):
        self.logger = target or logger

    def emit(self, event: str, level: int = logging.DEBUG, **fields) -> None:
        if not self.logger.isEnabledFor(level):
            return
        fields_str = " ".join(f"{key}={value}" for key, value in fields.items())
        self.logger.log(
            level,
            f"[Discount] {event} {fields_str}".rstrip(),
            extra={"discount_event": event, "discount_fields": fields}
        )


class NullDiscountTracer(DiscountTracer):
    """Discards all events."""

    def emit(self, event: str, level: int = logging.DEBUG, **fields) -> None:
        return None


def get_default_tracer() -> DiscountTracer:
    """Tracer used when the caller does not inject one (honours DISCOUNT_TRACE_ENABLED)."""
    if getattr(config, "DISCOUNT_TRACE_ENABLED", True):
        return LoggingDiscountTracer()
    return NullDiscountTracer()
