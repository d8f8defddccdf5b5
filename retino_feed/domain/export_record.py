"""Canonical Retino export record.

Field names follow Python conventions; the uppercase Retino element names are
carried as aliases and used when the record is turned into a plain structure.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ExportModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class NetPrice(_ExportModel):
    """Price without a meaningful VAT component."""

    without_vat: float = Field(alias="WITHOUT_VAT")


class VatPrice(_ExportModel):
    """Price decomposed into VAT inclusive and exclusive parts."""

    with_vat: float = Field(alias="WITH_VAT")
    without_vat: float = Field(alias="WITHOUT_VAT")
    vat: float = Field(alias="VAT")
    vat_rate: float = Field(alias="VAT_RATE")


PriceBreakdown = NetPrice | VatPrice


class OrderTotalPrice(_ExportModel):
    with_vat: float = Field(alias="WITH_VAT")
    without_vat: float = Field(alias="WITHOUT_VAT")
    vat: float = Field(alias="VAT")
    rounding: float = Field(default=0.0, alias="ROUNDING")  # reserved for currency rounding


class AddressRecord(_ExportModel):
    name: str = Field(alias="NAME")
    company: str | None = Field(default=None, alias="COMPANY")
    street: str = Field(alias="STREET")
    house_number: None = Field(default=None, alias="HOUSENUMBER")  # not split out of street
    city: str = Field(alias="CITY")
    zip: str = Field(alias="ZIP")
    country: str = Field(alias="COUNTRY")
    company_id: str | None = Field(default=None, alias="COMPANY_ID")
    vat_id: str | None = Field(default=None, alias="VAT_ID")


class CustomerRecord(_ExportModel):
    email: str = Field(alias="EMAIL")
    phone: str | None = Field(default=None, alias="PHONE")
    billing_address: AddressRecord = Field(alias="BILLING_ADDRESS")
    shipping_address: AddressRecord = Field(alias="SHIPPING_ADDRESS")


class ItemRecord(_ExportModel):
    type: str = Field(alias="TYPE")
    name: str = Field(alias="NAME")
    code: str = Field(alias="CODE", min_length=1)
    variant_name: str | None = Field(default=None, alias="VARIANT_NAME")
    manufacturer: str | None = Field(default=None, alias="MANUFACTURER")
    amount: int | float = Field(alias="AMOUNT")
    unit: str = Field(alias="UNIT")
    weight: float | None = Field(default=None, alias="WEIGHT")
    unit_price: PriceBreakdown = Field(alias="UNIT_PRICE")
    total_price: PriceBreakdown = Field(alias="TOTAL_PRICE")


class ItemEntry(_ExportModel):
    item: ItemRecord = Field(alias="ITEM")


class CurrencyRecord(_ExportModel):
    code: str = Field(alias="CODE")


class ExportRecord(_ExportModel):
    """One order in the shape expected by the Retino feed."""

    order_id: int | str = Field(alias="ORDER_ID")
    code: str = Field(alias="CODE", min_length=1)
    invoice_code: str | None = Field(default=None, alias="INVOICE_CODE")
    date: str = Field(alias="DATE")
    currency: CurrencyRecord = Field(alias="CURRENCY")
    package_number: str | None = Field(default=None, alias="PACKAGE_NUMBER")
    customer: CustomerRecord = Field(alias="CUSTOMER")
    total_price: OrderTotalPrice = Field(alias="TOTAL_PRICE")
    order_items: list[ItemEntry] = Field(default_factory=list, alias="ORDER_ITEMS")

    def to_structure(self) -> dict[str, Any]:
        """Return the record as nested plain data keyed by Retino element names."""
        return self.model_dump(by_alias=True)
