from datetime import UTC, datetime

from retino_feed.domain.order import OrderItemType

ORDER_ITEM_TYPES: frozenset[str] = frozenset(t.value for t in OrderItemType)


def normalize_order_type(tag: str) -> str:
    """Return ``tag`` if Retino knows it, otherwise fall back to ``product``."""
    if tag in ORDER_ITEM_TYPES:
        return OrderItemType(tag).value
    return OrderItemType.product.value


def format_date_time(value: datetime) -> str:
    """Format ``value`` as ISO 8601 with offset, e.g. ``2024-01-15T10:30:00+01:00``.

    Naive datetimes are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat(timespec="seconds")
