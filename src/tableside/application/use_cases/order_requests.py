from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableside.application.dto.responses import (
    AnnouncementsResponse,
    BatchPayloadResponse,
    OrderRequestResponse,
)
from tableside.application.errors import (
    NotFoundError,
    OrderTransitionConflictError,
    ValidationError,
)
from tableside.application.mappers.event_envelope import serialize_order_request_rejected_event
from tableside.application.mappers.order_mapper import (
    to_announcement_response,
    to_order_request_response,
)
from tableside.application.metrics.order_lifecycle import (
    record_order_request_rejected,
    record_rejection_flags_cleared,
)
from tableside.application.ports.publisher import EventPublisher, publish_after_commit
from tableside.application.ports.repositories import OrderRepository, OrderRequestRepository
from tableside.application.use_cases.context import TraceContext
from tableside.domain.common.ids import OrderId, OrderRequestId
from tableside.domain.order.events import OrderRequestRejected
from tableside.domain.order.requests import OrderRequestAlreadyRejectedError

logger = logging.getLogger(__name__)


class GetAnnouncements:
    """Rejected order requests of an order that the customer has not been shown yet."""

    def __init__(self, order_request_repository: OrderRequestRepository) -> None:
        self._order_request_repository = order_request_repository

    def execute(self, order_id: OrderId | None) -> AnnouncementsResponse:
        if not order_id:
            return AnnouncementsResponse()

        flagged = self._order_request_repository.list_flagged(order_id)
        return AnnouncementsResponse(
            announcements=[
                to_announcement_response(order_request.to_announcement())
                for order_request in flagged
            ]
        )


class ClearRejectedFlags:
    """Batch acknowledgement of flagged requests of one order.

    When ``order_request_ids`` is given only those requests are cleared, so a
    request rejected after the customer's batch was fetched stays flagged.
    Safe to repeat: requests that are already cleared are left untouched and
    the returned count only covers rows that changed.
    """

    def __init__(self, order_request_repository: OrderRequestRepository) -> None:
        self._order_request_repository = order_request_repository

    def execute(
        self,
        order_id: OrderId | None,
        rejected_flag: bool | None,
        order_request_ids: list[str] | None = None,
    ) -> BatchPayloadResponse:
        if not order_id or rejected_flag is None:
            raise ValidationError("Failed to update order requests. Please try again later")
        if rejected_flag:
            raise ValidationError("rejected flag can only be cleared in batch")
        if order_request_ids is not None and not all(
            isinstance(value, str) and value.strip() for value in order_request_ids
        ):
            raise ValidationError(
                "order request ids must be non-empty",
                details={"fields": ["orderRequestIds"]},
            )

        count = self._order_request_repository.set_rejected_flag(
            order_id,
            rejected_flag=False,
            order_request_ids=(
                None
                if order_request_ids is None
                else [OrderRequestId(value.strip()) for value in order_request_ids]
            ),
        )
        record_rejection_flags_cleared(count)
        logger.info(
            "rejection_flags_cleared",
            extra={"order_id": str(order_id), "count": count},
        )
        return BatchPayloadResponse(count=count)


class RejectOrderRequest:
    def __init__(
        self,
        order_repository: OrderRepository,
        order_request_repository: OrderRequestRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repository = order_repository
        self._order_request_repository = order_request_repository
        self._publisher = publisher

    def execute(
        self,
        order_request_id: OrderRequestId,
        reason: str,
        trace_ctx: TraceContext,
    ) -> OrderRequestResponse:
        if not reason or not reason.strip():
            raise ValidationError("rejected reason is required")

        order_request = self._order_request_repository.get(order_request_id)
        if order_request is None:
            raise NotFoundError(f"order request {order_request_id} not found")
        detail = self._order_repository.get_detail(order_request.order_id)
        if detail is None:
            raise NotFoundError(f"order {order_request.order_id} not found")

        try:
            rejected = order_request.reject(reason.strip())
        except OrderRequestAlreadyRejectedError as exc:
            raise OrderTransitionConflictError(str(exc)) from exc
        self._order_request_repository.update(rejected)

        event = OrderRequestRejected(
            order_request_id=rejected.order_request_id,
            order_id=rejected.order_id,
            restaurant_id=detail.restaurant.restaurant_id,
            reason=reason.strip(),
            occurred_at=datetime.now(timezone.utc),
        )
        record_order_request_rejected(restaurant_id=str(event.restaurant_id))
        message = serialize_order_request_rejected_event(
            occurred_at=event.occurred_at,
            restaurant_id=str(event.restaurant_id),
            order_id=str(event.order_id),
            order_request_id=str(event.order_request_id),
            reason=event.reason,
            trace_ctx=trace_ctx,
        )
        publish_after_commit(
            self._publisher,
            str(event.restaurant_id),
            message,
            order_request_id=str(event.order_request_id),
        )
        return to_order_request_response(rejected)
