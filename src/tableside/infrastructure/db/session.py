from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from tableside.application.errors import StoreError

logger = logging.getLogger(__name__)

STORE_FAILURE_MESSAGE = "Failed to access the order store. Please try again later"

_engines: dict[tuple[str, int], Engine] = {}
_engines_lock = Lock()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    connect_args: dict[str, object] = {}
    if database_url.startswith("postgresql"):
        connect_args["connect_timeout"] = connect_timeout
        connect_args["application_name"] = "tableside"
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    key = (_database_url(), max(1, int(timeout_seconds)))
    with _engines_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = _build_engine(*key)
            _engines[key] = engine
    return engine


def dispose_engines() -> None:
    with _engines_lock:
        engines = list(_engines.values())
        _engines.clear()
    for engine in engines:
        engine.dispose()


@contextmanager
def store_operation(name: str) -> Iterator[None]:
    """Translate driver failures into StoreError, tagged with the operation name."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("store_operation_failed", extra={"operation": name})
        raise StoreError(STORE_FAILURE_MESSAGE, details={"operation": name}) from exc


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, RuntimeError):
        return False
