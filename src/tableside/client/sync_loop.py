from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tableside.application.dto.responses import OrderDetailResponse, OrderPageResponse
from tableside.application.endpoints import order_endpoint
from tableside.application.errors import NotFoundError
from tableside.client.gateway import OrderGateway
from tableside.client.notifications import (
    NOT_FOUND_URL,
    SERVER_ERROR_URL,
    TABLE_NOT_FOUND_MESSAGE,
    Navigator,
    Notifier,
    Severity,
)
from tableside.client.reconciliation import AnnouncementReconciler
from tableside.client.state import OrderInfo, OrderInfoWriter
from tableside.domain.order.disposition import Disposition, decide_disposition
from tableside.domain.order.entities import OrderStatus
from tableside.domain.table.entities import TableStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 3.0


class SyncState(str, Enum):
    INITIALIZING = "INITIALIZING"
    LIVE = "LIVE"
    NOTIFICATION = "NOTIFICATION"
    ERROR = "ERROR"
    REDIRECTED = "REDIRECTED"


@dataclass(frozen=True)
class OrderView:
    snapshot: OrderDetailResponse
    disposition: Disposition


ViewListener = Callable[[OrderView], None]


def _poll_interval() -> float:
    raw = os.getenv("TABLESIDE_POLL_INTERVAL_SECONDS")
    if not raw:
        return DEFAULT_POLL_INTERVAL_SECONDS
    try:
        return max(float(raw), 0.1)
    except ValueError:
        logger.warning("invalid_poll_interval", extra={"state": raw})
        return DEFAULT_POLL_INTERVAL_SECONDS


def disposition_for(snapshot: OrderDetailResponse) -> Disposition:
    return decide_disposition(
        TableStatus(snapshot.table.status),
        OrderStatus(snapshot.status),
    )


def _state_for(disposition: Disposition) -> SyncState:
    if disposition == Disposition.LIVE:
        return SyncState.LIVE
    return SyncState.NOTIFICATION


def _error_key(exc: BaseException) -> tuple[str, str]:
    return type(exc).__name__, getattr(exc, "message", None) or str(exc)


class OrderSyncLoop:
    """Keeps one order view in step with the server.

    Seeded from the page props, then polls the order and its announcements
    on a fixed interval. Every changed snapshot re-runs the disposition
    decision and republishes the order summary; failures are surfaced to the
    user and left for the next tick to retry.
    """

    def __init__(
        self,
        gateway: OrderGateway,
        notifier: Notifier,
        navigator: Navigator,
        order_info: OrderInfoWriter,
        reconciler: AnnouncementReconciler | None = None,
        poll_interval_seconds: float | None = None,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._navigator = navigator
        self._order_info = order_info
        self._reconciler = reconciler or AnnouncementReconciler(gateway, notifier)
        self._poll_interval = poll_interval_seconds or _poll_interval()

        self.state = SyncState.INITIALIZING
        self.view: OrderView | None = None
        self._order_id: str | None = None
        self._last_snapshot: dict[str, Any] | None = None
        self._last_error: tuple[str, str] | None = None
        self._listeners: list[ViewListener] = []
        self._task: asyncio.Task[None] | None = None
        self._stopped = False

    @property
    def order_id(self) -> str | None:
        return self._order_id

    @property
    def poll_interval_seconds(self) -> float:
        return self._poll_interval

    def add_listener(self, listener: ViewListener) -> None:
        self._listeners.append(listener)

    async def bootstrap(self, encoded_order_id: str) -> None:
        try:
            props = await self._gateway.load_order_page(encoded_order_id)
        except NotFoundError:
            await self._redirect(NOT_FOUND_URL, TABLE_NOT_FOUND_MESSAGE)
            return
        except Exception as exc:
            logger.exception("order_page_load_failed")
            await self._redirect(SERVER_ERROR_URL, getattr(exc, "message", None) or str(exc))
            return
        await self.initialize(props)

    async def initialize(self, props: OrderPageResponse) -> None:
        if props.initErrMsg:
            await self._redirect(SERVER_ERROR_URL, props.initErrMsg)
            return
        if props.notFound or not props.orderId:
            await self._redirect(NOT_FOUND_URL, TABLE_NOT_FOUND_MESSAGE)
            return

        try:
            seed = props.fallback.get(order_endpoint(props.orderId))
            if seed is None:
                await self._redirect(NOT_FOUND_URL, TABLE_NOT_FOUND_MESSAGE)
                return
            snapshot = OrderDetailResponse.model_validate(seed)
            self._order_id = props.orderId
            self._apply_snapshot(snapshot)
        except Exception as exc:
            logger.exception("order_view_init_failed")
            await self._redirect(SERVER_ERROR_URL, str(exc))

    async def tick(self) -> None:
        if self._order_id is None or self._stopped:
            return
        if self.state == SyncState.REDIRECTED:
            return

        try:
            snapshot = await self._gateway.fetch_order(self._order_id)
            self._apply_snapshot(snapshot)
        except Exception as exc:
            self._report_error(exc)
            return

        if self._stopped:
            return
        try:
            announcements = await self._gateway.fetch_announcements(self._order_id)
        except Exception as exc:
            self._report_error(exc)
            return
        self._last_error = None
        if self._stopped:
            return
        await self._reconciler.reconcile(self._order_id, announcements)

    def start(self) -> None:
        if self._task is not None or self.state == SyncState.REDIRECTED:
            return
        if self._order_id is None:
            raise RuntimeError("order sync loop started before initialization")
        self._stopped = False
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stopped = True
        task = self._task
        self._task = None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._order_info.release()

    async def _run(self) -> None:
        while not self._stopped:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("sync_tick_failed", extra={"order_id": self._order_id})
            await asyncio.sleep(self._poll_interval)

    def _apply_snapshot(self, snapshot: OrderDetailResponse) -> None:
        dumped = snapshot.model_dump(mode="json")
        if dumped == self._last_snapshot and self.view is not None:
            self.state = _state_for(self.view.disposition)
            return
        self._last_snapshot = dumped

        disposition = disposition_for(snapshot)
        self.view = OrderView(snapshot=snapshot, disposition=disposition)
        self.state = _state_for(disposition)

        self._order_info.set(
            OrderInfo(
                order_id=snapshot.orderId,
                order_status=snapshot.status,
                table_id=snapshot.table.tableId,
                table_number=snapshot.table.number,
            )
        )
        logger.info(
            "order_view_changed",
            extra={"order_id": snapshot.orderId, "state": self.state.value},
        )
        for listener in list(self._listeners):
            try:
                listener(self.view)
            except Exception:
                logger.exception("order_view_listener_failed")

    def _report_error(self, exc: Exception) -> None:
        self.state = SyncState.ERROR
        key = _error_key(exc)
        logger.warning("sync_tick_failed", extra={"order_id": self._order_id})
        if key == self._last_error:
            return
        self._last_error = key
        self._notifier.notify(Severity.ERROR, key[1])

    async def _redirect(self, destination: str, message: str) -> None:
        self.state = SyncState.REDIRECTED
        await self._navigator.navigate(destination)
        self._notifier.notify(Severity.ERROR, message)
