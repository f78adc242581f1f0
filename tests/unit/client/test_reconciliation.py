from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from fakes import FakeGateway, RecordingNotifier
from tableside.application.dto.responses import AnnouncementResponse
from tableside.application.errors import ApiError
from tableside.client.notifications import DisplayDuration, Severity, format_rejection_notice
from tableside.client.reconciliation import AnnouncementReconciler


def _announcement(number: int, reason: str | None, items: list[str]) -> AnnouncementResponse:
    return AnnouncementResponse(
        orderRequestId=f"orq_{number:03d}",
        orderId="order123",
        orderRequestNumber=number,
        createdAt=datetime(2026, 10, 19, 12, 5, tzinfo=timezone.utc),
        rejectedReason=reason,
        orderItems=items,
    )


def test_rejection_notice_wording() -> None:
    notice = format_rejection_notice(_announcement(7, "sold out", ["Soup", "Bread", "Salad"]))

    assert notice.splitlines() == [
        "Request number: #0007",
        "Ordered at: 2026/10/19 12:05",
        "Soup and 2 other item(s) could not be served for the following reason.",
        "We are sorry, please order something else.",
        'Reason: "sold out"',
    ]


@pytest.mark.asyncio
async def test_notifies_each_reason_then_clears_once() -> None:
    gateway = FakeGateway()
    gateway.announcements = [
        _announcement(1, None, ["Tea"]),
        _announcement(2, "kitchen closed", ["Steak"]),
    ]
    notifier = RecordingNotifier()

    result = await AnnouncementReconciler(gateway, notifier).reconcile(
        "order123", list(gateway.announcements)
    )

    assert result.notified == 1
    assert result.cleared == 2
    assert gateway.calls == ["clear:order123"]
    assert gateway.cleared_ids == [["orq_001", "orq_002"]]
    assert len(notifier.notices) == 1
    severity, message, duration = notifier.notices[0]
    assert severity == Severity.PRESERVE
    assert duration == DisplayDuration.BIG
    assert "Steak could not be served" in message


@pytest.mark.asyncio
async def test_empty_batch_does_nothing() -> None:
    gateway = FakeGateway()
    notifier = RecordingNotifier()

    result = await AnnouncementReconciler(gateway, notifier).reconcile("order123", [])

    assert result.notified == 0
    assert result.cleared is None
    assert gateway.calls == []
    assert notifier.notices == []


@pytest.mark.asyncio
async def test_failed_clear_keeps_notices_and_reports_error() -> None:
    gateway = FakeGateway()
    gateway.clear_error = ApiError("Failed to update order requests. Please try again later")
    notifier = RecordingNotifier()
    announcements = [_announcement(1, "sold out", ["Soup"])]

    reconciler = AnnouncementReconciler(gateway, notifier)
    result = await reconciler.reconcile("order123", announcements)

    assert result.cleared is None
    assert [severity for severity, _, _ in notifier.notices] == [Severity.PRESERVE, Severity.ERROR]
    assert notifier.notices[1][1] == "Failed to update order requests. Please try again later"
    assert not reconciler.is_reconciling("order123")


@pytest.mark.asyncio
async def test_overlapping_reconciliation_is_skipped() -> None:
    release = asyncio.Event()

    class SlowGateway(FakeGateway):
        async def clear_rejected_flags(self, order_id: str, order_request_ids: list[str]) -> int:
            await release.wait()
            return await super().clear_rejected_flags(order_id, order_request_ids)

    gateway = SlowGateway()
    notifier = RecordingNotifier()
    reconciler = AnnouncementReconciler(gateway, notifier)
    announcements = [_announcement(1, "sold out", ["Soup"])]

    first = asyncio.create_task(reconciler.reconcile("order123", announcements))
    await asyncio.sleep(0)
    assert reconciler.is_reconciling("order123")

    second = await reconciler.reconcile("order123", announcements)
    release.set()
    first_result = await first

    assert second.skipped is True
    assert first_result.notified == 1
    assert gateway.cleared == 1
    assert len(notifier.notices) == 1


@pytest.mark.asyncio
async def test_rejection_arriving_before_clear_stays_flagged() -> None:
    late = _announcement(2, "out of stock", ["Cake"])

    class RacingGateway(FakeGateway):
        async def clear_rejected_flags(self, order_id: str, order_request_ids: list[str]) -> int:
            # staff rejects another request after the batch was fetched
            self.announcements.append(late)
            return await super().clear_rejected_flags(order_id, order_request_ids)

    gateway = RacingGateway()
    gateway.announcements = [_announcement(1, "sold out", ["Soup"])]
    notifier = RecordingNotifier()
    reconciler = AnnouncementReconciler(gateway, notifier)

    first = await reconciler.reconcile("order123", list(gateway.announcements))

    assert first.notified == 1
    assert first.cleared == 1
    assert gateway.cleared_ids == [["orq_001"]]
    assert gateway.announcements == [late]

    second = await reconciler.reconcile("order123", list(gateway.announcements))

    assert second.notified == 1
    assert "Cake could not be served" in notifier.notices[-1][1]
    assert gateway.announcements == []
