from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger

from retino_feed.application.hydrator import Hydrator
from retino_feed.application.xml_renderer import XmlRenderer
from retino_feed.domain.interfaces import IFeedLock, IRenderer
from retino_feed.domain.order import Order
from retino_feed.infrastructure.feed_lock import NullFeedLock
from retino_feed.shared.decorators import log_duration, log_errors


class RetinoFeedService:
    """Builds the Retino order feed, one generation at a time."""

    SOURCE_NAME = "Retino"
    LOCK_KEY = "retino"
    # Upper bound on how long one generation may hold the lock
    TRANSACTION_TIMEOUT_MS = 25_000

    def __init__(
        self,
        hydrator: Hydrator | None = None,
        renderer: IRenderer | None = None,
        lock: IFeedLock | None = None,
    ) -> None:
        self._hydrator = hydrator if hydrator is not None else Hydrator()
        self._renderer = renderer if renderer is not None else XmlRenderer()
        self._lock = lock if lock is not None else NullFeedLock()

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        self._lock.wait(self.LOCK_KEY)
        self._lock.start_transaction(self.LOCK_KEY, self.TRANSACTION_TIMEOUT_MS)
        try:
            yield
        finally:
            self._lock.stop_transaction(self.LOCK_KEY)

    def build_structure(self, orders: Iterable[Order]) -> dict[str, Any]:
        """Hydrate ``orders`` in input order into ``{ORDERS: [{ORDER: ...}, ...]}``."""
        return {
            "ORDERS": [
                {"ORDER": self._hydrator.hydrate(order).to_structure()}
                for order in orders
            ]
        }

    @log_errors
    @log_duration
    def process_feed(self, orders: Iterable[Order]) -> str:
        """Return the XML feed for ``orders``.

        A failure on any order aborts the whole feed; the lock is released first.
        """
        with self._exclusive():
            logger.info(f"[{self.SOURCE_NAME}] Generating order feed…")
            structure = self.build_structure(orders)
            feed = self._renderer.render(structure)

        logger.info(
            f"[{self.SOURCE_NAME}] Feed generated with {len(structure['ORDERS'])} order(s)"
        )
        return feed
