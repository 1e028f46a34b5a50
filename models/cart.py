from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

CART_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
)


class CartLineItem(BaseModel):
    """
    Priced cart line as seen by the discount engine.

    Tags and category are resolved by the catalog before the calculation.
    line_total is the caller's number: the engine never recomputes it. When
    omitted at construction it defaults to quantity * unit_price.
    """
    model_config = CART_MODEL_CONFIG

    product_id: int | None = None
    sku: str = ""
    product_name: str | None = None
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0)
    line_total: float
    tags: list[str] = []
    category_id: int | None = None

    @model_validator(mode='before')
    @classmethod
    def default_line_total(cls, data):
        if isinstance(data, dict) and data.get('line_total') is None and data.get('lineTotal') is None:
            quantity = data.get('quantity')
            unit_price = data.get('unit_price', data.get('unitPrice'))
            if quantity is not None and unit_price is not None:
                data = {**data, 'line_total': quantity * unit_price}
                data.pop('lineTotal', None)
        return data

    @field_validator('tags', mode='before')
    @classmethod
    def missing_tags_as_empty(cls, v):
        return [] if v is None else v


class DiscountContext(BaseModel):
    """
    Everything a calculation reads besides the rules.

    Built once per request by the caller; `now` pins the evaluation instant
    for date windows (current UTC time when absent).
    """
    model_config = CART_MODEL_CONFIG

    items: list[CartLineItem] = []
    subtotal: float = 0
    client_id: int | None = None
    client_tags: list[str] = []
    invoice_tags: list[str] = []
    store_id: int | None = None
    now: datetime | None = None

    @field_validator('items', 'client_tags', 'invoice_tags', mode='before')
    @classmethod
    def missing_list_as_empty(cls, v):
        return [] if v is None else v

    @classmethod
    def from_items(cls, items: list[CartLineItem], **kwargs) -> 'DiscountContext':
        """
        Build a context whose subtotal is the sum of the line totals.

        Example:
            >>> ctx = DiscountContext.from_items([CartLineItem(sku="A", quantity=2, unit_price=5.0)])
            >>> ctx.subtotal
            10.0
        """
        subtotal = sum(item.line_total for item in items)
        return cls(items=items, subtotal=subtotal, **kwargs)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)
