from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OrderItemType(StrEnum):
    product = "product"
    discount = "discount"
    shipping = "shipping"
    billing = "billing"


class _DomainModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Country(_DomainModel):
    code: str  # ISO 3166-1 alpha-2, e.g. "CZ"
    name: str  # display name, e.g. "Czech Republic"


class Address(_DomainModel):
    """Postal address attached to an order (delivery or payment)."""

    person_name: str
    company_name: str | None = None
    street: str
    city: str
    zip: str
    country: Country
    cin: str | None = None  # company identification number
    tin: str | None = None  # tax (VAT) identification number


class Customer(_DomainModel):
    email: str | None = None
    phone: str | None = None


class Variant(_DomainModel):
    label: str


class Manufacturer(_DomainModel):
    name: str


class Price(_DomainModel):
    """Structured money value. Only ``value`` takes part in hydration."""

    value: float
    currency: str | None = None


def price_value(price: float | Price) -> float:
    """Return the scalar amount of a bare or structured domain price."""
    if isinstance(price, Price):
        return price.value
    return float(price)


class OrderItem(_DomainModel):
    """Single order line: a catalog product or a virtual line (discount, shipping, billing)."""

    id: int
    type: str = OrderItemType.product
    product_based: bool = True
    label: str
    code: str | None = None  # catalog code, only for product based items
    variant: Variant | None = None
    manufacturer: Manufacturer | None = None
    amount: int | float = 1
    unit: str = "pc"
    weight: float | None = None
    final_price: float | Price  # per unit
    vat: float = 0.0  # rate in percent, e.g. 21.0

    @model_validator(mode="after")
    def _require_code_for_products(self) -> "OrderItem":
        if self.product_based and not self.code:
            raise ValueError(f"Product based order item {self.id} must have a code.")
        return self


class Order(_DomainModel):
    """Domain order as exposed by the order management system."""

    id: int | str
    number: str = Field(min_length=1)  # human-facing order number, e.g. "ORD-42"
    invoice_number: str | None = None
    inserted_date: datetime
    currency_code: str
    package_number: str | None = None
    customer: Customer | None = None
    delivery_address: Address | None = None
    payment_address: Address | None = None
    price: float | Price
    vat_rate: float = 0.0
    items: list[OrderItem] = Field(default_factory=list)
