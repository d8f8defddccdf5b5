import time

import redis
from loguru import logger
from redis.exceptions import LockError
from redis.lock import Lock

from retino_feed.domain.interfaces import IFeedLock


class NullFeedLock:
    """Lock used when no coordination backend is configured: feeds run unsynchronized."""

    def wait(self, key: str) -> None:
        pass

    def start_transaction(self, key: str, timeout_ms: int) -> None:
        pass

    def stop_transaction(self, key: str) -> None:
        pass


class RedisFeedLock:
    """Named lock shared by every process talking to the same Redis instance."""

    KEY_PREFIX = "retino-feed:lock:"

    def __init__(self, client: redis.Redis, poll_interval: float = 0.1) -> None:
        self._client = client
        self._poll_interval = poll_interval
        self._held: dict[str, Lock] = {}

    def _name(self, key: str) -> str:
        return self.KEY_PREFIX + key

    def wait(self, key: str) -> None:
        """Block, without a deadline, until nobody holds ``key``."""
        name = self._name(key)
        waited = False
        while self._client.exists(name):
            if not waited:
                logger.info(f"Feed lock '{key}' is held, waiting for it to be released")
                waited = True
            time.sleep(self._poll_interval)

    def start_transaction(self, key: str, timeout_ms: int) -> None:
        # The Redis key expires after timeout_ms even if stop_transaction never runs
        lock = self._client.lock(
            self._name(key),
            timeout=timeout_ms / 1000,
            sleep=self._poll_interval,
        )
        lock.acquire(blocking=True)
        self._held[key] = lock
        logger.debug(f"Feed lock '{key}' acquired for at most {timeout_ms} ms")

    def stop_transaction(self, key: str) -> None:
        lock = self._held.pop(key, None)
        if lock is None:
            return
        try:
            lock.release()
        except LockError as exc:
            # Expired by its timeout and possibly taken over by another generator
            logger.warning(f"Feed lock '{key}' was no longer owned on release: {exc}")
            return
        logger.debug(f"Feed lock '{key}' released")


def build_feed_lock(backend: str, redis_url: str | None = None, poll_interval: float = 0.1) -> IFeedLock:
    """Return the lock implementation selected by configuration."""
    if backend == "none":
        return NullFeedLock()
    if backend == "redis":
        if not redis_url:
            raise ValueError("A Redis URL is required for the 'redis' feed lock backend.")
        return RedisFeedLock(redis.from_url(redis_url), poll_interval=poll_interval)
    raise ValueError(f"Unknown feed lock backend: {backend!r}")
