from __future__ import annotations

import logging

from tableside.application.ports.publisher import EventPublisher
from tableside.infrastructure.cache.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    """Publishes order lifecycle events to the staff dashboard channel."""

    def __init__(self, timeout_seconds: float = 1.0) -> None:
        self._timeout_seconds = timeout_seconds

    def publish(self, channel: str, message: str) -> None:
        receivers = get_redis_client(timeout_seconds=self._timeout_seconds).publish(
            channel, message
        )
        logger.debug("event_published", extra={"channel": channel, "receivers": receivers})
