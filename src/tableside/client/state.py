from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderInfo:
    order_id: str
    order_status: str
    table_id: str
    table_number: int


Listener = Callable[[OrderInfo | None], None]


class OrderInfoStore:
    """Order summary shared with sibling views.

    Any number of readers, one writer. Readers see the latest value that
    was written; there is no transactional view across fields.
    """

    def __init__(self) -> None:
        self._value: OrderInfo | None = None
        self._listeners: list[Listener] = []
        self._writer: OrderInfoWriter | None = None

    def reader(self) -> OrderInfoReader:
        return OrderInfoReader(self)

    def claim_writer(self) -> OrderInfoWriter:
        if self._writer is not None:
            raise WriterAlreadyClaimedError("order info store already has a writer")
        self._writer = OrderInfoWriter(self)
        return self._writer

    def _release(self, writer: OrderInfoWriter) -> None:
        if self._writer is writer:
            self._writer = None

    def _get(self) -> OrderInfo | None:
        return self._value

    def _subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, value: OrderInfo | None) -> None:
        if value == self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("order_info_listener_failed")


class OrderInfoReader:
    def __init__(self, store: OrderInfoStore) -> None:
        self._store = store

    def get(self) -> OrderInfo | None:
        return self._store._get()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._store._subscribe(listener)


class OrderInfoWriter:
    def __init__(self, store: OrderInfoStore) -> None:
        self._store = store
        self._released = False

    def set(self, value: OrderInfo | None) -> None:
        if self._released:
            raise WriterReleasedError("order info writer was released")
        self._store._set(value)

    def release(self) -> None:
        self._released = True
        self._store._release(self)


class WriterAlreadyClaimedError(Exception):
    pass


class WriterReleasedError(Exception):
    pass
