from __future__ import annotations

import logging
from datetime import datetime, timezone

from tableside.application.dto.responses import OrderDetailResponse
from tableside.application.errors import NotFoundError, OrderTransitionConflictError
from tableside.application.mappers.event_envelope import serialize_order_event
from tableside.application.mappers.order_mapper import to_order_detail_response
from tableside.application.metrics.order_lifecycle import (
    record_time_to_confirm,
    record_transition,
)
from tableside.application.ports.publisher import EventPublisher, publish_after_commit
from tableside.application.ports.repositories import OrderRepository
from tableside.application.use_cases.context import TraceContext
from tableside.domain.common.ids import OrderId, RestaurantId
from tableside.domain.order.entities import (
    Order,
    OrderDetail,
    OrderStatus,
    OrderTransitionError,
)
from tableside.domain.order.events import OrderStatusChanged

logger = logging.getLogger(__name__)


class ChangeOrderStatus:
    """Staff-driven lifecycle move: confirm, complete or cancel an order."""

    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId,
        new_status: OrderStatus,
        trace_ctx: TraceContext,
    ) -> OrderDetailResponse:
        detail = self._order_repository.get_detail(order_id)
        if detail is None:
            raise NotFoundError(f"order {order_id} not found")

        order = detail.order
        if order.status == new_status:
            return to_order_detail_response(detail)

        now = datetime.now(timezone.utc)
        try:
            changed = order.transition_to(new_status, now)
        except OrderTransitionError as exc:
            raise OrderTransitionConflictError(str(exc)) from exc

        persisted = self._order_repository.update_fields(
            order_id,
            {"status": changed.status, "updated_at": now},
        )
        if persisted is None:
            raise NotFoundError(f"order {order_id} not found")

        publish_status_change(
            publisher=self._publisher,
            previous=order,
            current=persisted,
            restaurant_id=str(detail.restaurant.restaurant_id),
            trace_ctx=trace_ctx,
        )
        return to_order_detail_response(
            OrderDetail(order=persisted, table=detail.table, restaurant=detail.restaurant)
        )


def publish_status_change(
    *,
    publisher: EventPublisher,
    previous: Order,
    current: Order,
    restaurant_id: str,
    trace_ctx: TraceContext,
) -> None:
    event = OrderStatusChanged(
        order_id=current.order_id,
        restaurant_id=RestaurantId(restaurant_id),
        table_id=current.table_id,
        from_status=previous.status,
        to_status=current.status,
        occurred_at=current.updated_at or datetime.now(timezone.utc),
    )
    record_transition(from_status=event.from_status, to_status=event.to_status)
    if event.to_status == OrderStatus.ORDERED:
        record_time_to_confirm(current, now=event.occurred_at)
    logger.info(
        "order_status_changed",
        extra={
            "order_id": str(event.order_id),
            "from_status": event.from_status.value,
            "to_status": event.to_status.value,
        },
    )

    message = serialize_order_event(
        event_type=f"order.{event.to_status.value.lower()}",
        occurred_at=event.occurred_at,
        restaurant_id=restaurant_id,
        order=current,
        trace_ctx=trace_ctx,
    )
    publish_after_commit(publisher, restaurant_id, message, order_id=str(current.order_id))
