from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    def publish(self, channel: str, message: str) -> None: ...


def restaurant_channel(restaurant_id: str) -> str:
    return f"events:{restaurant_id}"


def publish_after_commit(
    publisher: EventPublisher,
    restaurant_id: str,
    message: str,
    **log_extra: Any,
) -> bool:
    """Publish an event for a write that has already been stored.

    The write stands even when the broker is unreachable, so failures are
    logged and reported through the return value only.
    """
    try:
        publisher.publish(channel=restaurant_channel(restaurant_id), message=message)
    except Exception:
        logger.warning("event_publish_failed", extra=log_extra, exc_info=True)
        return False
    return True
