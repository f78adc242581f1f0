from __future__ import annotations

import logging
from dataclasses import dataclass

from tableside.application.dto.responses import AnnouncementResponse
from tableside.client.gateway import OrderGateway
from tableside.client.notifications import (
    DisplayDuration,
    Notifier,
    Severity,
    format_rejection_notice,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    notified: int
    cleared: int | None
    skipped: bool = False


class AnnouncementReconciler:
    """Shows rejected requests to the customer, then acknowledges them.

    All notices of a batch are emitted before the single clearing call, which
    names the requests of that batch so a rejection that arrives in between
    stays flagged for the next tick. A second reconciliation for the same
    order is skipped while a clearing call is still outstanding.
    """

    def __init__(self, gateway: OrderGateway, notifier: Notifier) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._in_flight: set[str] = set()

    def is_reconciling(self, order_id: str) -> bool:
        return order_id in self._in_flight

    async def reconcile(
        self,
        order_id: str,
        announcements: list[AnnouncementResponse],
    ) -> ReconcileResult:
        if not announcements:
            return ReconcileResult(notified=0, cleared=None)
        if order_id in self._in_flight:
            logger.info("reconcile_skipped", extra={"order_id": order_id})
            return ReconcileResult(notified=0, cleared=None, skipped=True)

        self._in_flight.add(order_id)
        try:
            notified = 0
            for announcement in announcements:
                if not announcement.rejectedReason:
                    continue
                self._notifier.notify(
                    Severity.PRESERVE,
                    format_rejection_notice(announcement),
                    DisplayDuration.BIG,
                )
                notified += 1

            try:
                cleared = await self._gateway.clear_rejected_flags(
                    order_id,
                    [announcement.orderRequestId for announcement in announcements],
                )
            except Exception as exc:
                logger.warning("rejection_flag_clear_failed", extra={"order_id": order_id})
                self._notifier.notify(Severity.ERROR, getattr(exc, "message", None) or str(exc))
                return ReconcileResult(notified=notified, cleared=None)

            logger.info("reconciled", extra={"order_id": order_id, "count": cleared})
            return ReconcileResult(notified=notified, cleared=cleared)
        finally:
            self._in_flight.discard(order_id)
