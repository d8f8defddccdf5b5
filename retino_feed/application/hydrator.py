from loguru import logger

from retino_feed.application.formatter import format_date_time, normalize_order_type
from retino_feed.domain.export_record import (
    AddressRecord,
    CurrencyRecord,
    CustomerRecord,
    ExportRecord,
    ItemEntry,
    ItemRecord,
    NetPrice,
    OrderTotalPrice,
    PriceBreakdown,
    VatPrice,
)
from retino_feed.domain.order import (
    Address,
    Customer,
    Order,
    OrderItem,
    price_value,
)

# Below this amount the VAT part is treated as not included
VAT_THRESHOLD = 0.001


class HydrationError(ValueError):
    """Raised when an order cannot be turned into an export record."""


class MissingCustomerError(HydrationError):
    pass


class MissingContactError(HydrationError):
    pass


class MissingAddressError(HydrationError):
    pass


def _vat_part(price: float, vat_rate: float) -> float:
    return price - price * (vat_rate / 100)


def hydrate_price(price: float, vat_rate: float) -> PriceBreakdown:
    """Decompose ``price`` by ``vat_rate`` (percent).

    The ``VAT`` part is ``price - price * rate / 100``; consumers of the feed
    rely on this exact arithmetic, so ``WITHOUT_VAT + VAT == WITH_VAT`` always
    holds but ``VAT`` is not the tax amount in the usual sense.
    """
    vat = _vat_part(price, vat_rate)
    if abs(vat) < VAT_THRESHOLD:
        return NetPrice(without_vat=price)

    return VatPrice(
        with_vat=price,
        without_vat=price - vat,
        vat=vat,
        vat_rate=vat_rate,
    )


def _coalesce_address(preferred: Address | None, fallback: Address) -> Address:
    return preferred if preferred is not None else fallback


def _map_address(address: Address) -> AddressRecord:
    return AddressRecord(
        name=address.person_name,
        company=address.company_name,
        street=address.street,
        house_number=None,
        city=address.city,
        zip=address.zip,
        country=address.country.name,
        company_id=address.cin,
        vat_id=address.tin,
    )


class Hydrator:
    """Turns domain orders into canonical Retino export records."""

    def hydrate(self, order: Order) -> ExportRecord:
        customer = order.customer
        if customer is None:
            raise MissingCustomerError(
                f'Customer for order "{order.number}" is mandatory.'
            )

        customer_record = self._map_customer(order, customer)
        line_totals = [self._line_total(item) for item in order.items]
        items = [
            ItemEntry(item=self._map_item(item, total))
            for item, total in zip(order.items, line_totals)
        ]

        logger.debug(f"Hydrated order {order.number} with {len(items)} item(s)")
        return ExportRecord(
            order_id=order.id,
            code=order.number,
            invoice_code=order.invoice_number,
            date=format_date_time(order.inserted_date),
            currency=CurrencyRecord(code=order.currency_code),
            package_number=order.package_number,
            customer=customer_record,
            total_price=self._order_total(order, line_totals),
            order_items=items,
        )

    @staticmethod
    def _map_customer(order: Order, customer: Customer) -> CustomerRecord:
        if customer.email is None:
            raise MissingContactError(
                f'Customer e-mail for order "{order.number}" is mandatory, but no contact given.'
            )

        delivery_address = order.delivery_address
        if delivery_address is None:
            raise MissingAddressError(
                f'Delivery address for order "{order.number}" is mandatory.'
            )
        payment_address = _coalesce_address(order.payment_address, delivery_address)

        return CustomerRecord(
            email=customer.email,
            phone=customer.phone,
            billing_address=_map_address(payment_address),
            shipping_address=_map_address(delivery_address),
        )

    @staticmethod
    def _line_total(item: OrderItem) -> float:
        return price_value(item.final_price) * item.amount

    @staticmethod
    def _map_item(item: OrderItem, total_price: float) -> ItemRecord:
        if item.product_based:
            code = item.code
            variant_name = item.variant.label if item.variant is not None else None
        else:
            code = f"virtual-{item.id}"
            variant_name = None

        manufacturer = item.manufacturer
        unit_price = price_value(item.final_price)

        return ItemRecord(
            type=normalize_order_type(item.type),
            name=item.label,
            code=code,
            variant_name=variant_name,
            manufacturer=manufacturer.name if manufacturer is not None else None,
            amount=item.amount,
            unit=item.unit,
            weight=item.weight,
            unit_price=hydrate_price(unit_price, item.vat),
            total_price=hydrate_price(total_price, item.vat),
        )

    @staticmethod
    def _order_total(order: Order, line_totals: list[float]) -> OrderTotalPrice:
        # Summed per item so orders mixing VAT rates stay correct
        vat = sum(
            (_vat_part(total, item.vat) for item, total in zip(order.items, line_totals)),
            0.0,
        )
        price = price_value(order.price)
        return OrderTotalPrice(
            with_vat=price,
            without_vat=price - vat,
            vat=vat,
            rounding=0.0,
        )
