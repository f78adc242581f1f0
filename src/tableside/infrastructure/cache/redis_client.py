from __future__ import annotations

import logging
import os
from threading import Lock

import redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

CLIENT_NAME = "tableside"

_clients: dict[tuple[str, float], redis.Redis] = {}
_clients_lock = Lock()


def _redis_url() -> str:
    url = os.getenv("REDIS_URL")
    if not url:
        raise RuntimeError("REDIS_URL is not set")
    return url


def get_redis_client(timeout_seconds: float = 1.0) -> redis.Redis:
    """One pooled client per (url, timeout); created on first use."""
    key = (_redis_url(), timeout_seconds)
    with _clients_lock:
        client = _clients.get(key)
        if client is None:
            client = redis.Redis.from_url(
                key[0],
                socket_connect_timeout=timeout_seconds,
                socket_timeout=timeout_seconds,
                health_check_interval=30,
                client_name=CLIENT_NAME,
            )
            _clients[key] = client
    return client


def reset_redis_clients() -> None:
    with _clients_lock:
        clients = list(_clients.values())
        _clients.clear()
    for client in clients:
        try:
            client.close()
        except RedisError:
            logger.warning("redis_client_close_failed", exc_info=True)


def ping_redis(timeout_seconds: float = 1.0) -> bool:
    try:
        return bool(get_redis_client(timeout_seconds).ping())
    except (RedisError, RuntimeError):
        return False
