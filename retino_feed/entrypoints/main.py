import sys
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter

from retino_feed.application.feed_service import RetinoFeedService
from retino_feed.application.hydrator import Hydrator
from retino_feed.application.xml_renderer import XmlRenderer
from retino_feed.domain.order import Order
from retino_feed.entrypoints.settings import Config, config
from retino_feed.infrastructure.feed_lock import build_feed_lock

_ORDERS = TypeAdapter(list[Order])


def build_feed_service(settings: Config) -> RetinoFeedService:
    lock = build_feed_lock(
        settings.RETINO_LOCK_BACKEND,
        redis_url=settings.RETINO_REDIS_URL,
        poll_interval=settings.RETINO_LOCK_POLL_INTERVAL,
    )
    return RetinoFeedService(
        hydrator=Hydrator(),
        renderer=XmlRenderer(
            float_precision=settings.RETINO_FLOAT_PRECISION,
            quantity_precision=settings.RETINO_QUANTITY_PRECISION,
        ),
        lock=lock,
    )


def load_orders(path: Path) -> list[Order]:
    """Read a JSON array of orders."""
    return _ORDERS.validate_json(path.read_bytes())


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        raise SystemExit("usage: retino-feed <orders.json>")

    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL)

    orders = load_orders(Path(args[0]))
    logger.info(f"Loaded {len(orders)} order(s) from {args[0]}")

    feed = build_feed_service(config).process_feed(orders)
    sys.stdout.write(feed)


if __name__ == "__main__":
    main()
