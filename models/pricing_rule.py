from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from enums.condition_operator import ConditionOperator, LogicalOperator
from enums.condition_type import ConditionType
from enums.rule_type import RuleType
from enums.target_type import TargetType
from utils.serialized_list import parse_id_list, parse_string_list

# Snapshot DTOs accept both snake_case and the rule store's camelCase keys
RULE_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


def _enum_to_value(v):
    """Store enum members by value so raw type strings stay uniform."""
    if v is None:
        return ""
    if isinstance(v, Enum):
        return v.value
    return v


def _empty_to_none(v):
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


class RuleCondition(BaseModel):
    """
    Predicate gating whether a rule is evaluated.

    Type and operator are kept as raw strings: unknown values must not break
    loading a snapshot, they are resolved (or ignored) during evaluation.
    """
    model_config = RULE_MODEL_CONFIG

    id: int | None = None
    condition_type: str
    operator: str = ConditionOperator.EQUALS.value
    value_text: str | None = None
    value_number: float | None = None
    value_array: str | list | None = None  # JSON-encoded list in the rule store
    value_start: float | None = None
    value_end: float | None = None
    logical_operator: str = LogicalOperator.AND.value
    condition_group: int = 1

    @field_validator('condition_type', 'operator', 'logical_operator', mode='before')
    @classmethod
    def normalize_type_strings(cls, v):
        return _enum_to_value(v)

    @field_validator('condition_group', mode='before')
    @classmethod
    def default_condition_group(cls, v):
        return 1 if v is None else v

    @property
    def parsed_type(self) -> ConditionType | None:
        return ConditionType.parse(self.condition_type)

    @property
    def parsed_operator(self) -> ConditionOperator | None:
        return ConditionOperator.parse(self.operator)

    @property
    def parsed_logical_operator(self) -> LogicalOperator:
        return LogicalOperator.parse(self.logical_operator)

    def literal_tags(self) -> list[str]:
        """
        Tag literals this condition compares against.

        A single value_text takes precedence over value_array.
        """
        if self.value_text:
            return [self.value_text]
        return parse_string_list(self.value_array)

    def literal_ids(self) -> list[int]:
        """Id literals (e.g. category ids) from value_array, or value_text/value_number."""
        if self.value_array is not None:
            return parse_id_list(self.value_array)
        if self.value_text:
            return parse_id_list([self.value_text])
        if self.value_number is not None:
            return parse_id_list([self.value_number])
        return []


class RuleTarget(BaseModel):
    """Selection criteria for the cart lines a rule affects."""
    model_config = RULE_MODEL_CONFIG

    id: int | None = None
    target_type: str
    target_ids: str | list | None = None   # JSON-encoded list of product/category ids
    target_tags: str | list | None = None  # JSON-encoded list of tag slugs

    @field_validator('target_type', mode='before')
    @classmethod
    def normalize_target_type(cls, v):
        return _enum_to_value(v)

    @property
    def parsed_type(self) -> TargetType | None:
        return TargetType.parse(self.target_type)

    def ids(self) -> list[int]:
        return parse_id_list(self.target_ids)

    def tags(self) -> list[str]:
        return parse_string_list(self.target_tags)


class QuantityTier(BaseModel):
    """
    Quantity bracket for quantity_discount rules.

    Example: 1-9 units: no discount, 10-49 units: 10% off, 50+ units: 9.00 each.
    Exactly one of tier_price / tier_discount_percentage / tier_discount_amount
    is expected; if several are set, they take precedence in that order.
    """
    model_config = RULE_MODEL_CONFIG

    id: int | None = None
    min_quantity: int
    max_quantity: int | None = None  # None or 0 = unbounded
    tier_price: float | None = None
    tier_discount_percentage: float | None = None
    tier_discount_amount: float | None = None

    @field_validator('min_quantity', mode='before')
    @classmethod
    def default_min_quantity(cls, v):
        v = _empty_to_none(v)
        return 0 if v is None else v

    @field_validator(
        'max_quantity', 'tier_price', 'tier_discount_percentage', 'tier_discount_amount',
        mode='before'
    )
    @classmethod
    def empty_as_none(cls, v):
        return _empty_to_none(v)

    @property
    def is_unbounded(self) -> bool:
        """A missing or non-positive max_quantity leaves the tier open-ended."""
        return self.max_quantity is None or self.max_quantity <= 0

    def covers(self, quantity: int) -> bool:
        """True if quantity falls inside [min_quantity, max_quantity]."""
        if quantity < self.min_quantity:
            return False
        return self.is_unbounded or quantity <= self.max_quantity


class PricingRule(BaseModel):
    """
    Configured pricing/discount policy, as supplied in a rule snapshot.

    Rules are authored and persisted elsewhere; the engine only reads them.
    usage_count is advanced by the usage tracker after a commit, never here.
    """
    model_config = RULE_MODEL_CONFIG

    id: int | None = None
    store_id: int | None = None
    name: str = ""
    description: str | None = None
    rule_code: str | None = None
    rule_type: str
    priority: int = 0

    # Discount values (missing values degrade the rule to a no-op)
    discount_percentage: float = 0
    discount_amount: float = 0
    fixed_price: float = 0

    # Buy X Get Y settings
    buy_quantity: int = 0
    get_quantity: int = 0
    get_discount_percentage: float = 0

    # Status and dates
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    # Usage limits
    usage_limit: int | None = None
    usage_count: int = 0
    usage_limit_per_customer: int | None = None

    conditions: list[RuleCondition] = []
    targets: list[RuleTarget] = []
    quantity_tiers: list[QuantityTier] = []

    @field_validator('rule_type', mode='before')
    @classmethod
    def normalize_rule_type(cls, v):
        return _enum_to_value(v)

    @field_validator(
        'discount_percentage', 'discount_amount', 'fixed_price',
        'buy_quantity', 'get_quantity', 'get_discount_percentage',
        'usage_count', 'priority',
        mode='before'
    )
    @classmethod
    def missing_number_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator('start_date', 'end_date', 'usage_limit', 'usage_limit_per_customer', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        return _empty_to_none(v)

    @field_validator('conditions', 'targets', 'quantity_tiers', mode='before')
    @classmethod
    def missing_list_as_empty(cls, v):
        return [] if v is None else v

    @property
    def parsed_type(self) -> RuleType | None:
        return RuleType.parse(self.rule_type)
